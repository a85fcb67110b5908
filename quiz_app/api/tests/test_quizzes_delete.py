import pytest
from django.urls import reverse
from rest_framework import status

from quiz_app.models import Question, Quiz, Result


@pytest.mark.django_db
def test_delete_quiz_removes_questions_and_results(authenticate, make_quiz, admin_user, participant):
    """Owner deletes the quiz: counts are reported and nothing referencing it remains"""
    quiz = make_quiz()
    Result.objects.create(user=participant, quiz=quiz, answers=[], score=1)
    resp = authenticate(admin_user).delete(reverse('quiz-detail', kwargs={'identifier': quiz.id}))
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json() == {
        'message': 'Quiz and related results deleted successfully',
        'deletedResults': 1,
        'deletedQuestions': 2,
    }
    assert not Quiz.objects.filter(id=quiz.id).exists()
    assert Question.objects.filter(quiz_id=quiz.id).count() == 0
    assert Result.objects.filter(quiz_id=quiz.id).count() == 0


@pytest.mark.django_db
def test_delete_quiz_requires_authentication(api_client, make_quiz):
    """Unauthenticated deletion attempts must return 401"""
    quiz = make_quiz()
    resp = api_client.delete(reverse('quiz-detail', kwargs={'identifier': quiz.id}))
    assert resp.status_code == status.HTTP_401_UNAUTHORIZED
    assert Quiz.objects.filter(id=quiz.id).exists()


@pytest.mark.django_db
def test_delete_quiz_forbidden_for_participant(authenticate, make_quiz, participant):
    quiz = make_quiz()
    resp = authenticate(participant).delete(reverse('quiz-detail', kwargs={'identifier': quiz.id}))
    assert resp.status_code == status.HTTP_403_FORBIDDEN
    assert Quiz.objects.filter(id=quiz.id).exists()


@pytest.mark.django_db
def test_delete_quiz_forbidden_for_non_owner(authenticate, make_quiz, other_admin):
    quiz = make_quiz()
    resp = authenticate(other_admin).delete(reverse('quiz-detail', kwargs={'identifier': quiz.id}))
    assert resp.status_code == status.HTTP_403_FORBIDDEN
    assert Quiz.objects.filter(id=quiz.id).exists()


@pytest.mark.django_db
def test_delete_quiz_404_when_not_found(authenticate, admin_user):
    url = reverse('quiz-detail', kwargs={'identifier': '00000000-0000-0000-0000-000000000000'})
    resp = authenticate(admin_user).delete(url)
    assert resp.status_code == status.HTTP_404_NOT_FOUND
