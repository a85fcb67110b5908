import pytest
from django.db import IntegrityError, transaction

from quiz_app.models import Quiz, Question, Result


@pytest.mark.django_db
def test_model_str_reprs(admin_user):
    """
    Ensures the __str__ representations of Quiz, Question and Result include helpful info.
    """
    qz = Quiz.objects.create(owner=admin_user, title='T', description='D', join_code='123456')
    qu = Question.objects.create(quiz=qz, position=0, text='What?', options=['A', 'B', 'C', 'D'], correct_answer='A')
    res = Result.objects.create(user=admin_user, quiz=qz, answers=[], score=0)

    s_quiz = str(qz)
    assert 'Quiz' in s_quiz
    assert f'{qz.id}' in s_quiz
    assert '123456' in s_quiz
    assert f'{admin_user.id}' in s_quiz

    s_question = str(qu)
    assert f'{qu.id}' in s_question
    assert f'{qz.id}' in s_question

    assert f'{res.id}' in str(res)


@pytest.mark.django_db
def test_join_code_is_globally_unique(admin_user, other_admin):
    """
    The store rejects a second quiz with the same join code, whoever owns it.
    Wrap in transaction.atomic() so the failure doesn't poison the outer transaction.
    """
    Quiz.objects.create(owner=admin_user, title='A', join_code='654321')
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            Quiz.objects.create(owner=other_admin, title='B', join_code='654321')


@pytest.mark.django_db
def test_question_position_unique_per_quiz(admin_user):
    qz = Quiz.objects.create(owner=admin_user, title='A', join_code='111222')
    Question.objects.create(quiz=qz, position=0, text='1', options=[], correct_answer='x')
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            Question.objects.create(quiz=qz, position=0, text='2', options=[], correct_answer='x')


@pytest.mark.django_db
def test_questions_are_ordered_by_position(admin_user):
    qz = Quiz.objects.create(owner=admin_user, title='A', join_code='333444')
    Question.objects.create(quiz=qz, position=1, text='second', options=[], correct_answer='x')
    Question.objects.create(quiz=qz, position=0, text='first', options=[], correct_answer='x')
    assert list(qz.questions.values_list('text', flat=True)) == ['first', 'second']
