"""PortalOrchestrator: drives the listing/detail view state for one user session.

The orchestrator owns the loaded problem set, the filter state, the choice
lists and the notification queue. Pages call its coroutines in response to
user actions and render from :meth:`PortalOrchestrator.view`.

Listing loads are numbered; a response is applied only if it belongs to the
most recent request, so a slow search that finishes after a newer load is
dropped instead of overwriting it.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import replace
from datetime import datetime

from problem_portal.analytics.aggregations.problems import recent_activity, summarize
from problem_portal.analytics.segments.dedup import deduplicate
from problem_portal.analytics.segments.filters import apply_view
from problem_portal.core.choices import ChoiceResolver
from problem_portal.core.config import PROBLEM_ENTITY, SETTINGS, PortalSettings
from problem_portal.core.mappers import problems_to_dataframe
from problem_portal.core.models import (
    ActivitySummary,
    Choice,
    DataSource,
    FetchResult,
    FilterState,
    ProblemRecord,
    Stats,
    SubmissionOutcome,
)
from problem_portal.core.service import ProblemService
from problem_portal.core.source import DemoProblemSource
from problem_portal.core.votes import record_vote, replace_article

from .state import DetailState, ListingState, Notification, PortalView, TransitionError, ViewState

logger = logging.getLogger(__name__)

CHOICE_FIELDS = ("category", "priority", "state")


class PortalOrchestrator:
    def __init__(
        self,
        service: ProblemService,
        resolver: ChoiceResolver | None = None,
        *,
        dedupe: bool | None = None,
    ):
        self.service = service
        self.resolver = resolver if resolver is not None else ChoiceResolver(service)
        self.dedupe = SETTINGS.dedupe_by_default if dedupe is None else dedupe
        self.filters = FilterState()
        self.state: ViewState = ListingState()
        self.records: tuple[ProblemRecord, ...] = ()
        self.records_source = DataSource.LIVE
        self.frame = problems_to_dataframe(())
        self.choices: dict[str, list[Choice]] = {}
        self.notifications: list[Notification] = []
        self.loading = False
        self.mounted = False
        self._remote_stats: FetchResult[Stats | None] | None = None
        self._by_id: dict[str, ProblemRecord] = {}
        self._request_ids = itertools.count(1)
        self._latest_request = 0
        self._notification_ids = itertools.count(1)

    # ------------------ Lifecycle ------------------
    async def mount(self) -> None:
        """Initial load: problems, stats and choice lists, concurrently.

        Each part degrades on its own; a failed stats call never blocks the
        listing and vice versa.
        """
        if self.mounted:
            return
        self.mounted = True
        results = await asyncio.gather(
            self._load_listing(None),
            self._load_stats(),
            self._load_choices(),
            return_exceptions=True,
        )
        for label, outcome in zip(("problems", "stats", "choices"), results):
            if isinstance(outcome, Exception):
                logger.warning("Initial %s load failed: %s", label, outcome)

    # ------------------ Listing actions ------------------
    async def search(self, term: str | None) -> None:
        """Server-side search; an empty term is a no-op."""
        cleaned = (term or "").strip()
        if not cleaned:
            return
        self._require_listing("search")
        self.filters = self.filters.with_search(cleaned)
        await self._load_listing(cleaned)

    async def clear_search(self) -> None:
        self._require_listing("clear search")
        self.filters = self.filters.without_search()
        await self._load_listing(None)

    async def change_filter(self, facet: str, value: str) -> None:
        """Select a facet value; leaving search mode reloads the full set."""
        listing = self._require_listing("change filter")
        self.filters = self.filters.with_facet(facet, value)
        if listing.search_mode_load and not self.filters.is_search_mode:
            await self._load_listing(None)

    def set_dedupe(self, enabled: bool) -> None:
        self.dedupe = bool(enabled)

    async def select_record(self, record_id: str) -> DetailState:
        listing = self._require_listing("select record")
        record = self._by_id.get(str(record_id))
        if record is None:
            raise KeyError(f"Problem {record_id!r} is not loaded")
        self.state = DetailState(record=record, return_to=listing)
        await self._load_solutions(record)
        return self.state  # type: ignore[return-value]

    # ------------------ Detail actions ------------------
    async def back(self) -> None:
        """Return to the listing; a search-mode load is replaced by a full load."""
        detail = self._require_detail("back")
        self.state = detail.return_to
        if detail.return_to.search_mode_load:
            self.filters = self.filters.without_search()
            await self._load_listing(None)

    async def vote(self, solution_id: str, is_helpful: bool) -> SubmissionOutcome:
        detail = self._require_detail("vote")
        if not any(a.id == solution_id for a in detail.solutions):
            raise KeyError(f"Solution {solution_id!r} is not shown")
        outcome = await self.service.submit_vote(solution_id, is_helpful)
        if not outcome.accepted:
            self.notify("error", outcome.message)
            return outcome
        # re-read state: other votes may have landed while this one was in flight
        current = self.state
        if isinstance(current, DetailState):
            article = next((a for a in current.solutions if a.id == solution_id), None)
            if article is not None:
                updated = record_vote(article, is_helpful)
                self.state = replace(current, solutions=replace_article(current.solutions, updated))
        return outcome

    async def submit_solution(self, text: str | None) -> SubmissionOutcome | None:
        """Submit a community solution; blank text is not submitted."""
        detail = self._require_detail("submit solution")
        body = (text or "").strip()
        if not body:
            return None
        outcome = await self.service.submit_solution(detail.record.record_id, body)
        self.notify("success" if outcome.accepted else "error", outcome.message)
        if outcome.accepted:
            current = self.state
            if isinstance(current, DetailState) and current.record.record_id == detail.record.record_id:
                self.state = replace(current, loading=True)
                await self._load_solutions(detail.record)
        return outcome

    # ------------------ Notifications ------------------
    def notify(self, level: str, message: str) -> Notification:
        note = Notification(id=next(self._notification_ids), level=level, message=message)
        self.notifications.append(note)
        return note

    def dismiss(self, notification_id: int) -> None:
        self.notifications = [n for n in self.notifications if n.id != notification_id]

    # ------------------ Derived views ------------------
    def view(self, now: datetime | None = None) -> PortalView:
        deduped = deduplicate(self.frame, self.dedupe)
        visible = apply_view(deduped.frame, self.filters, now)
        return PortalView(
            frame=visible,
            duplicate_count=deduped.duplicate_count,
            loaded_count=len(self.frame),
            source=self.records_source,
            search_mode=self.filters.searching,
        )

    @property
    def stats(self) -> Stats:
        """Store-side stats when available, else computed over the loaded set."""
        remote = self._remote_stats
        if remote is not None and not remote.is_fallback and remote.data is not None:
            return remote.data
        return summarize(self.frame)

    @property
    def stats_source(self) -> DataSource:
        remote = self._remote_stats
        if remote is not None and not remote.is_fallback and remote.data is not None:
            return DataSource.LIVE
        return DataSource.FALLBACK

    def activity(self, now: datetime | None = None) -> ActivitySummary:
        return recent_activity(self.frame, now)

    # ------------------ Internal Helpers ------------------
    def _require_listing(self, action: str) -> ListingState:
        if not isinstance(self.state, ListingState):
            raise TransitionError(f"Cannot {action} from the detail view")
        return self.state

    def _require_detail(self, action: str) -> DetailState:
        if not isinstance(self.state, DetailState):
            raise TransitionError(f"Cannot {action} from the listing view")
        return self.state

    async def _load_listing(self, term: str | None) -> bool:
        request_id = next(self._request_ids)
        self._latest_request = request_id
        self.loading = True
        if term is None:
            result = await self.service.fetch_problems()
        else:
            result = await self.service.search_problems(term)
        if request_id != self._latest_request:
            logger.debug("Discarding stale listing response #%s", request_id)
            return False
        self._apply_records(result, search_mode_load=term is not None)
        self.loading = False
        return True

    def _apply_records(self, result: FetchResult[list[ProblemRecord]], *, search_mode_load: bool) -> None:
        self.records = tuple(result.data)
        self.records_source = result.source
        self.frame = problems_to_dataframe(self.records)
        self._by_id = {r.record_id: r for r in self.records}
        listing = ListingState(search_mode_load=search_mode_load)
        if isinstance(self.state, DetailState):
            self.state = replace(self.state, return_to=listing)
        else:
            self.state = listing
        logger.info("Loaded %s problems (%s)", len(self.records), result.source.value)

    async def _load_stats(self) -> None:
        self._remote_stats = await self.service.fetch_stats()

    async def _load_choices(self) -> None:
        lists = await asyncio.gather(
            *(self.resolver.resolve_choices(PROBLEM_ENTITY, name) for name in CHOICE_FIELDS)
        )
        self.choices = dict(zip(CHOICE_FIELDS, lists))

    async def _load_solutions(self, record: ProblemRecord) -> None:
        result = await self.service.fetch_solutions(record.record_id)
        current = self.state
        if not isinstance(current, DetailState) or current.record.record_id != record.record_id:
            logger.debug("Discarding solutions for %s: no longer shown", record.record_id)
            return
        self.state = replace(current, solutions=tuple(result.data), loading=False, source=result.source)


def build_demo_portal(
    settings: PortalSettings | None = None,
    *,
    offline: bool = False,
    latency: float = 0.0,
) -> PortalOrchestrator:
    """Wire an orchestrator to a fresh in-memory demo store."""
    settings = settings or SETTINGS
    source = DemoProblemSource(
        seed=settings.demo_seed,
        size=settings.demo_size,
        offline=offline,
        latency=latency,
        page_size=settings.page_size,
        search_page_size=settings.search_page_size,
    )
    service = ProblemService(source, settings)
    return PortalOrchestrator(service, ChoiceResolver(service), dedupe=settings.dedupe_by_default)
