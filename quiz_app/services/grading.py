"""
Quiz delivery and grading.

- resolve_quiz: look a quiz up by UUID or by its 6-digit join code.
- submit_answers: grade a full set of answers and store a Result.

Grading compares `selected == correct` exactly (case and whitespace sensitive).
Where `correct` comes from is a setting: with QUIZ_GRADE_FROM_ANSWER_KEY the
stored question at the same position supplies it, otherwise the client's value
is taken as sent.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Iterable, List, Optional

from django.conf import settings
from django.db import DatabaseError, transaction

from core.utils.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from quiz_app.models import Quiz, Result
from quiz_app.services.caller import Caller

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnswerData:
    """One submitted answer, in question order"""
    selected: Optional[str]
    question: str = ''
    correct: Optional[str] = None


@dataclass(frozen=True)
class Submission:
    score: int
    total_questions: int
    result_id: int


def looks_like_quiz_id(identifier: str) -> bool:
    """True if the identifier has the shape of a quiz primary key (a UUID)"""
    try:
        uuid.UUID(str(identifier))
    except ValueError:
        return False
    return True


def get_quiz(quiz_id) -> Quiz:
    """Loads a quiz by primary key only"""
    if not looks_like_quiz_id(quiz_id):
        raise NotFoundError('Quiz not found')
    try:
        return Quiz.objects.get(pk=quiz_id)
    except Quiz.DoesNotExist:
        raise NotFoundError('Quiz not found')


def resolve_quiz(identifier) -> Quiz:
    """Finds a quiz by id first, then by join code"""
    identifier = str(identifier or '').strip()
    quiz = None
    if looks_like_quiz_id(identifier):
        quiz = Quiz.objects.filter(pk=identifier).first()
    if quiz is None and identifier:
        quiz = Quiz.objects.filter(join_code=identifier).first()
    if quiz is None:
        raise NotFoundError('Quiz not found')
    return quiz


def grade(snapshots: Iterable[dict]) -> int:
    """Number of snapshots whose selected option equals the correct one"""
    return sum(1 for s in snapshots if s['selected'] == s['correct'])


def build_snapshots(quiz: Quiz, answers: List[AnswerData], trust_client: bool) -> List[dict]:
    """
    Pairs every answer with the question text and correct option to store.

    From the answer key: answer i is matched to question i; sending more
    answers than the quiz has questions is rejected. Trusting the client:
    each answer must carry its own `correct` value.
    """
    if trust_client:
        if any(a.correct is None for a in answers):
            raise ValidationError('Each answer needs a correct value.')
        return [
            {'question': a.question, 'selected': a.selected, 'correct': a.correct}
            for a in answers
        ]

    questions = list(quiz.questions.all())
    if len(answers) > len(questions):
        raise ValidationError(
            f'Got {len(answers)} answers for a quiz with {len(questions)} questions.'
        )
    return [
        {'question': q.text, 'selected': a.selected, 'correct': q.correct_answer}
        for q, a in zip(questions, answers)
    ]


def submit_answers(identifier, caller: Caller, answers: Optional[Iterable[AnswerData]]) -> Submission:
    """Grades the answers of `caller` for the quiz and persists the Result"""
    quiz = resolve_quiz(identifier)
    answers = list(answers or [])
    if not answers:
        raise ValidationError('Answers are required')

    trust_client = not getattr(settings, 'QUIZ_GRADE_FROM_ANSWER_KEY', True)
    snapshots = build_snapshots(quiz, answers, trust_client)

    score = grade(snapshots)
    try:
        with transaction.atomic():
            if not getattr(settings, 'QUIZ_ALLOW_RETAKES', False):
                # row lock on the quiz serializes concurrent submissions for it
                list(Quiz.objects.select_for_update().filter(pk=quiz.pk).values_list('pk', flat=True))
                if Result.objects.filter(user_id=caller.id, quiz=quiz).exists():
                    raise ConflictError('You have already submitted this quiz.')
            result = Result.objects.create(user_id=caller.id, quiz=quiz, answers=snapshots, score=score)
    except DatabaseError as exc:
        logger.error('Saving result for quiz %s failed: %s', quiz.id, exc)
        raise PersistenceError('Failed to save result') from exc

    total = quiz.questions.count()
    logger.info('Result %s saved: user=%s quiz=%s score=%s/%s', result.id, caller.id, quiz.id, score, total)
    return Submission(score=score, total_questions=total, result_id=result.id)
