"""ProblemService: calls the record store and maps rows into domain models.

Every read returns a :class:`FetchResult`. When the store fails (or times out)
the result carries empty data tagged ``DataSource.FALLBACK`` instead of raising,
so callers always have something to render and tests can tell degraded data
from a genuine empty answer. Writes return a :class:`SubmissionOutcome`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from .config import SETTINGS, PortalSettings
from .mappers import map_choices, map_problems, map_solutions, map_stats
from .models import (
    Choice,
    DataSource,
    FetchResult,
    ProblemFilter,
    ProblemRecord,
    SolutionArticle,
    Stats,
    SubmissionOutcome,
)
from .source import ProblemSource

logger = logging.getLogger(__name__)

T = TypeVar("T")

VOTE_FAILED_MESSAGE = "Could not record your vote. Please try again."
SOLUTION_ACCEPTED_MESSAGE = "Thank you! Your solution has been submitted and will be reviewed."
SOLUTION_FAILED_MESSAGE = "Failed to submit solution. Please try again."


def _error_text(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def _accepted(raw: Any) -> bool:
    if not isinstance(raw, dict):
        return False
    return bool(raw.get("accepted", raw.get("success", False)))


class ProblemService:
    def __init__(self, source: ProblemSource, settings: PortalSettings | None = None):
        self.source = source
        self.settings = settings or SETTINGS

    # ------------------ Read Methods ------------------
    async def fetch_problems(self, filters: ProblemFilter | None = None) -> FetchResult[list[ProblemRecord]]:
        filters = filters or ProblemFilter()
        return await self._read(
            "fetch problems",
            lambda: self.source.fetch_problems(filters),
            lambda raw: map_problems(raw)[: self.settings.page_size],
            [],
        )

    async def search_problems(
        self,
        term: str,
        filters: ProblemFilter | None = None,
    ) -> FetchResult[list[ProblemRecord]]:
        filters = filters or ProblemFilter()
        return await self._read(
            f"search problems for {term!r}",
            lambda: self.source.search_problems(term, filters),
            lambda raw: map_problems(raw)[: self.settings.search_page_size],
            [],
        )

    async def fetch_solutions(self, problem_id: str) -> FetchResult[list[SolutionArticle]]:
        return await self._read(
            f"fetch solutions for {problem_id}",
            lambda: self.source.fetch_related_solutions(problem_id),
            map_solutions,
            [],
        )

    async def fetch_stats(self) -> FetchResult[Stats | None]:
        return await self._read(
            "fetch stats",
            self.source.fetch_stats,
            lambda raw: map_stats(raw) if isinstance(raw, dict) else None,
            None,
        )

    async def fetch_choices(self, entity_kind: str, field_name: str) -> FetchResult[list[Choice]]:
        return await self._read(
            f"fetch choices for {entity_kind}.{field_name}",
            lambda: self.source.fetch_choice_list(entity_kind, field_name),
            map_choices,
            [],
        )

    # ------------------ Write Methods ------------------
    async def submit_solution(self, problem_id: str, body_text: str) -> SubmissionOutcome:
        try:
            raw = await self._call(self.source.submit_solution(problem_id, body_text))
        except Exception as exc:
            logger.warning("Solution submission for %s failed: %s", problem_id, _error_text(exc))
            return SubmissionOutcome(accepted=False, message=SOLUTION_FAILED_MESSAGE)
        if not _accepted(raw):
            logger.info("Solution submission for %s rejected: %s", problem_id, raw)
            return SubmissionOutcome(accepted=False, message=SOLUTION_FAILED_MESSAGE)
        logger.info("Community solution submitted for problem %s", problem_id)
        return SubmissionOutcome(accepted=True, message=SOLUTION_ACCEPTED_MESSAGE)

    async def submit_vote(self, solution_id: str, is_helpful: bool) -> SubmissionOutcome:
        try:
            raw = await self._call(self.source.submit_vote(solution_id, is_helpful))
        except Exception as exc:
            logger.warning("Vote on %s failed: %s", solution_id, _error_text(exc))
            return SubmissionOutcome(accepted=False, message=VOTE_FAILED_MESSAGE)
        if not _accepted(raw):
            logger.info("Vote on %s rejected: %s", solution_id, raw)
            return SubmissionOutcome(accepted=False, message=VOTE_FAILED_MESSAGE)
        logger.info("Feedback recorded for solution %s (helpful=%s)", solution_id, is_helpful)
        return SubmissionOutcome(accepted=True)

    # ------------------ Internal Helpers ------------------
    async def _call(self, awaitable: Awaitable[T]) -> T:
        timeout = self.settings.remote_timeout_seconds
        if timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout)

    async def _read(
        self,
        label: str,
        request: Callable[[], Awaitable[Any]],
        mapper: Callable[[Any], T],
        empty: T,
    ) -> FetchResult[T]:
        try:
            raw = await self._call(request())
            data = mapper(raw)
        except Exception as exc:
            logger.warning("Failed to %s, using fallback: %s", label, _error_text(exc))
            return FetchResult(data=empty, source=DataSource.FALLBACK, error=_error_text(exc))
        return FetchResult(data=data)
