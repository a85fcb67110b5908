"""
Result listing and per-quiz leaderboards.

Listing runs in two phases: quiz, user and score bounds become database
predicates; name and email are matched afterwards in Python against the
joined user, case-insensitively.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional

from django.conf import settings

from auth_app.models import display_name
from quiz_app.models import Result
from quiz_app.services.caller import Caller
from quiz_app.services.grading import looks_like_quiz_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResultFilter:
    quiz_id: Optional[uuid.UUID] = None
    user_id: Optional[int] = None
    min_score: Optional[int] = None
    max_score: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None


def _results_with_relations():
    return (
        Result.objects
        .select_related('user', 'user__profile', 'quiz')
        .prefetch_related('quiz__questions')
    )


def _matches(needle: Optional[str], haystack: str) -> bool:
    return needle.strip().lower() in (haystack or '').lower()


def list_results(caller: Caller, result_filter: Optional[ResultFilter] = None) -> List[Result]:
    """
    Results visible to `caller`, most recent first.

    Non-admins only ever see their own results, whatever user_id they pass.
    """
    f = result_filter or ResultFilter()
    qs = _results_with_relations()

    if not caller.is_admin:
        qs = qs.filter(user_id=caller.id)
    elif f.user_id is not None:
        qs = qs.filter(user_id=f.user_id)

    if f.quiz_id is not None:
        qs = qs.filter(quiz_id=f.quiz_id)
    if f.min_score is not None:
        qs = qs.filter(score__gte=f.min_score)
    if f.max_score is not None:
        qs = qs.filter(score__lte=f.max_score)

    results = list(qs.order_by('-submitted_at', '-id'))

    if f.name:
        results = [r for r in results if _matches(f.name, display_name(r.user))]
    if f.email:
        results = [r for r in results if _matches(f.email, r.user.email)]

    logger.info('Fetched %s results for user %s (role %s)', len(results), caller.id, caller.role)
    return results


def leaderboard(quiz_id, limit: Optional[int] = None) -> List[Result]:
    """Top results of a quiz: score descending, earlier submission first on ties"""
    if limit is None:
        limit = getattr(settings, 'QUIZ_LEADERBOARD_SIZE', 10)
    limit = max(1, min(int(limit), getattr(settings, 'QUIZ_LEADERBOARD_MAX', 100)))
    if not looks_like_quiz_id(quiz_id):
        return []
    return list(
        _results_with_relations()
        .filter(quiz_id=quiz_id)
        .order_by('-score', 'submitted_at', 'id')[:limit]
    )
