"""
Quiz authoring: create, update and delete quizzes.

Only admins may mutate quizzes. With QUIZ_ENFORCE_OWNERSHIP the admin must
also own the quiz. Join codes come from `generate_join_code`; with
QUIZ_RETRY_JOIN_CODE a taken code is detected and another one drawn.
"""
import logging
import secrets
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from django.conf import settings
from django.db import IntegrityError, transaction

from core.utils.errors import ForbiddenError, PersistenceError, ValidationError
from quiz_app.models import Question, Quiz, Result
from quiz_app.services.caller import Caller
from quiz_app.services.grading import get_quiz

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuestionData:
    text: str
    options: List[str]
    correct_answer: str
    time_limit_seconds: Optional[int] = None


# marks a clearable field that the patch leaves alone
UNCHANGED = object()


@dataclass(frozen=True)
class QuizPatch:
    """
    The updatable fields of a quiz. None means "leave unchanged", except for
    `time_limit_minutes`, where None removes the limit and UNCHANGED keeps it.
    `questions` replaces the whole ordered list when given.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    questions: Optional[List[QuestionData]] = None
    time_limit_minutes: Union[int, None, object] = UNCHANGED


@dataclass(frozen=True)
class DeletionSummary:
    quiz_id: str
    deleted_questions: int
    deleted_results: int


def generate_join_code() -> str:
    """Random 6-digit code in 100000..999999"""
    return str(100000 + secrets.randbelow(900000))


def _clean_title(title) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError('Title is required.')
    return title.strip()


def _warn_on_answer_mismatch(questions: List[QuestionData]) -> None:
    for i, q in enumerate(questions):
        if q.correct_answer not in q.options:
            logger.warning('Correct answer of question %s is not among its options.', i + 1)


def _create_questions(quiz: Quiz, questions: Iterable[QuestionData]) -> None:
    Question.objects.bulk_create([
        Question(
            quiz=quiz,
            position=position,
            text=q.text,
            options=list(q.options),
            correct_answer=q.correct_answer,
            time_limit_seconds=q.time_limit_seconds,
        )
        for position, q in enumerate(questions)
    ])


def _insert_quiz(owner, title, description, questions, time_limit_minutes, join_code) -> Quiz:
    with transaction.atomic():
        quiz = Quiz.objects.create(
            owner=owner,
            title=title,
            description=description or '',
            join_code=join_code,
            time_limit_minutes=time_limit_minutes,
        )
        _create_questions(quiz, questions)
    return quiz


def create_quiz(owner, title, description: str = '', questions: Iterable[QuestionData] = (),
                time_limit_minutes: Optional[int] = None) -> Quiz:
    """Creates a quiz owned by `owner` with a freshly generated join code"""
    title = _clean_title(title)
    questions = list(questions or [])
    _warn_on_answer_mismatch(questions)

    if not getattr(settings, 'QUIZ_RETRY_JOIN_CODE', True):
        # single insert; a taken code surfaces as a constraint violation
        try:
            quiz = _insert_quiz(owner, title, description, questions, time_limit_minutes, generate_join_code())
        except IntegrityError as exc:
            logger.error('Creating quiz failed: %s', exc)
            raise PersistenceError('Failed to create quiz.') from exc
        logger.info('Quiz %s created by user %s with code %s', quiz.id, owner.id, quiz.join_code)
        return quiz

    attempts = max(1, int(getattr(settings, 'QUIZ_JOIN_CODE_ATTEMPTS', 10)))
    for attempt in range(1, attempts + 1):
        code = generate_join_code()
        if Quiz.objects.filter(join_code=code).exists():
            logger.warning('Join code collision (attempt %s/%s).', attempt, attempts)
            continue
        try:
            quiz = _insert_quiz(owner, title, description, questions, time_limit_minutes, code)
        except IntegrityError as exc:
            if not Quiz.objects.filter(join_code=code).exists():
                logger.error('Creating quiz failed: %s', exc)
                raise PersistenceError('Failed to create quiz.') from exc
            logger.warning('Join code taken concurrently (attempt %s/%s).', attempt, attempts)
            continue
        logger.info('Quiz %s created by user %s with code %s', quiz.id, owner.id, quiz.join_code)
        return quiz

    raise PersistenceError('Could not allocate a unique join code.')


def _require_admin(caller: Caller) -> None:
    if not caller.is_admin:
        raise ForbiddenError('Forbidden')


def _require_owner(quiz: Quiz, caller: Caller) -> None:
    if getattr(settings, 'QUIZ_ENFORCE_OWNERSHIP', True) and quiz.owner_id != caller.id:
        raise ForbiddenError('You do not have permission to modify this quiz.')


def update_quiz(quiz_id, caller: Caller, patch: QuizPatch) -> Quiz:
    """Applies the fields present in `patch`; join code and owner never change"""
    _require_admin(caller)
    quiz = get_quiz(quiz_id)
    _require_owner(quiz, caller)

    changed = []
    if patch.title is not None:
        quiz.title = _clean_title(patch.title)
        changed.append('title')
    if patch.description is not None:
        quiz.description = patch.description
        changed.append('description')
    if patch.time_limit_minutes is not UNCHANGED:
        quiz.time_limit_minutes = patch.time_limit_minutes
        changed.append('time_limit_minutes')

    with transaction.atomic():
        if patch.questions is not None:
            questions = list(patch.questions)
            _warn_on_answer_mismatch(questions)
            quiz.questions.all().delete()
            _create_questions(quiz, questions)
            changed.append('questions')
        if changed:
            # updated_at moves on question-only changes too
            quiz.save(update_fields=[f for f in changed if f != 'questions'] + ['updated_at'])

    logger.info('Quiz %s updated by user %s: %s', quiz.id, caller.id, ', '.join(changed) or 'no changes')
    quiz.refresh_from_db()
    return quiz


def delete_quiz(quiz_id, caller: Caller) -> DeletionSummary:
    """Deletes the quiz with its questions and every result that references it"""
    _require_admin(caller)
    quiz = get_quiz(quiz_id)
    _require_owner(quiz, caller)

    pk = str(quiz.pk)
    with transaction.atomic():
        _, per_model = quiz.delete()
    summary = DeletionSummary(
        quiz_id=pk,
        deleted_questions=per_model.get(Question._meta.label, 0),
        deleted_results=per_model.get(Result._meta.label, 0),
    )
    logger.info('Quiz %s deleted by user %s (%s questions, %s results)',
                pk, caller.id, summary.deleted_questions, summary.deleted_results)
    return summary
