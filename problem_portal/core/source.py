"""Record-store contract and an in-memory demo implementation.

The portal never talks to the record store directly; it goes through an object
satisfying :class:`ProblemSource`. Rows come back in the store's loose shape
(each column either a scalar or a ``{"display_value", "value"}`` mapping) and
are normalized by :mod:`problem_portal.core.mappers`.
"""

from __future__ import annotations

import asyncio
import itertools
import random
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

from .config import (
    DATE_RANGE_WINDOWS,
    DEFAULT_SEARCH_PAGE_SIZE,
    FALLBACK_CHOICES,
    MAX_PAGE_SIZE,
    PRIORITY_LABELS,
    PROBLEM_ENTITY,
    STATE_LABELS,
)
from .fields import display_of, text_value
from .models import ProblemFilter

RawRow = dict[str, Any]


class SourceUnavailableError(RuntimeError):
    """Raised by a record store that cannot serve a request."""


class ProblemSource(Protocol):
    async def fetch_problems(self, filters: ProblemFilter) -> list[RawRow]: ...

    async def search_problems(self, term: str, filters: ProblemFilter) -> list[RawRow]: ...

    async def fetch_related_solutions(self, problem_id: str) -> list[RawRow]: ...

    async def submit_solution(self, problem_id: str, body_text: str) -> dict[str, Any]: ...

    async def submit_vote(self, solution_id: str, is_helpful: bool) -> dict[str, Any]: ...

    async def fetch_choice_list(self, entity_kind: str, field_name: str) -> list[RawRow]: ...

    async def fetch_stats(self) -> dict[str, Any]: ...


# =============================================================================
# Demo content
# =============================================================================
_CATEGORIES = ("software", "hardware", "network", "database")
_ACTIVE_MIX = (True, True, True, False, False, True, True, False, True, True)
_ASSIGNEES = ("Beth Anglin", "David Loo", "Fred Luddy", "Abel Tuter", "")

_TITLES = (
    "System Performance Degradation",
    "Authentication Failures",
    "Database Connection Timeouts",
    "Application Crash During Peak Hours",
    "Network Connectivity Issues",
    "Slow Response Times",
    "Service Unavailability",
    "Data Synchronization Errors",
    "Memory Leak in Production",
    "SSL Certificate Expiration",
    "Email Delivery Delays",
    "File Upload Failures",
    "API Rate Limiting Issues",
    "Cache Invalidation Problems",
    "Load Balancer Configuration Error",
    "Security Vulnerability Detected",
    "Backup Process Failures",
    "User Interface Rendering Issues",
    "Third-party Integration Outage",
    "Monitoring Alert Storm",
    "Session Timeout Issues",
    "Database Lock Conflicts",
    "Server Disk Space Full",
    "DNS Resolution Problems",
    "Certificate Chain Issues",
)

_DESCRIPTIONS = (
    "Users are experiencing significant delays and timeouts when accessing the application "
    "during peak business hours.",
    "Multiple users report being unable to log in. The authentication service rejects valid "
    "credentials intermittently.",
    "The application database shows connection timeout errors during high-traffic periods.",
    "The main application server crashes unexpectedly during peak usage, requiring manual restarts.",
    "Network connectivity between offices is unstable, causing intermittent access issues for "
    "remote users.",
    "Pages take 30+ seconds to load instead of the usual 2-3 seconds.",
    "Data synchronization between systems is failing, causing discrepancies in reporting.",
    "Production servers show signs of memory leaks, leading to degraded performance.",
    "Email messages take hours to reach recipients.",
    "Application cache is not invalidating, so users see stale data.",
)

_SOLUTION_TEMPLATES = (
    (
        "Community Workaround: Quick Fix",
        "<p><strong>Temporary Solution:</strong></p><ol><li>Clear your browser cache and cookies</li>"
        "<li>Restart the affected service</li><li>Check system logs for specific error messages</li>"
        "</ol><p><em>Temporary fix while the permanent solution is developed.</em></p>",
        "Community User A",
        (15, 3),
    ),
    (
        "Alternative Solution - Tested & Verified",
        "<p><strong>Alternative Approach:</strong></p><ul><li>Use the backup system during peak hours</li>"
        "<li>Schedule critical operations for off-peak times</li>"
        "<li>Implement circuit breakers for external dependencies</li></ul>",
        "Community User B",
        (23, 1),
    ),
    (
        "Root Cause Analysis & Prevention",
        "<p><strong>Root Cause Identified:</strong></p><ul><li>Database connection pool exhaustion</li>"
        "<li>Network timeout configurations too aggressive</li></ul>"
        "<p><strong>Prevention:</strong> implement proper connection pooling.</p>",
        "Technical Lead",
        (31, 2),
    ),
)


def _pair(display: Any, value: Any = None) -> dict[str, Any]:
    return {"display_value": display, "value": display if value is None else value}


def _iso(ts: datetime) -> str:
    return ts.strftime("%Y-%m-%d %H:%M:%S")


class DemoProblemSource:
    """Deterministic in-memory record store for demos and local development.

    ``offline=True`` makes every call raise :class:`SourceUnavailableError`,
    which exercises the portal's fallback paths. ``latency`` (seconds) is
    awaited before each call so concurrent loads actually interleave.
    """

    def __init__(
        self,
        *,
        seed: int = 7,
        size: int = 50,
        offline: bool = False,
        latency: float = 0.0,
        page_size: int = MAX_PAGE_SIZE,
        search_page_size: int = DEFAULT_SEARCH_PAGE_SIZE,
        now: Callable[[], datetime] | None = None,
    ):
        self.offline = offline
        self.latency = latency
        self.page_size = min(page_size, MAX_PAGE_SIZE)
        self.search_page_size = min(search_page_size, MAX_PAGE_SIZE)
        self._now = now or (lambda: datetime.now(UTC))
        self._rng = random.Random(seed)
        self._seed = seed
        self._problems: list[RawRow] = [self._make_problem(i) for i in range(1, size + 1)]
        self._solutions: dict[str, list[RawRow]] = {}
        self._drafts: list[RawRow] = []
        self._draft_ids = itertools.count(1)

    # ------------------ Contract ------------------
    async def fetch_problems(self, filters: ProblemFilter) -> list[RawRow]:
        await self._roundtrip()
        rows = [row for row in self._problems if self._matches(row, filters)]
        return self._newest_first(rows)[: self.page_size]

    async def search_problems(self, term: str, filters: ProblemFilter) -> list[RawRow]:
        await self._roundtrip()
        needle = (term or "").strip().lower()
        rows = []
        for row in self._problems:
            haystacks = (row["short_description"], row["description"], row["number"])
            if needle and not any(needle in display_of(h).lower() for h in haystacks):
                continue
            if self._matches(row, filters):
                rows.append(row)
        return self._newest_first(rows)[: self.search_page_size]

    async def fetch_related_solutions(self, problem_id: str) -> list[RawRow]:
        await self._roundtrip()
        if problem_id not in self._solutions:
            self._solutions[problem_id] = self._make_solutions(problem_id)
        return [dict(row) for row in self._solutions[problem_id]]

    async def submit_solution(self, problem_id: str, body_text: str) -> dict[str, Any]:
        await self._roundtrip()
        # Community submissions land as drafts awaiting review
        sys_id = f"kb_draft_{next(self._draft_ids)}"
        self._drafts.append(
            {
                "sys_id": sys_id,
                "short_description": f"Community Solution for Problem: {problem_id}",
                "text": body_text,
                "workflow_state": "draft",
                "kb_category": "community_solutions",
            }
        )
        return {"accepted": True, "sys_id": sys_id}

    async def submit_vote(self, solution_id: str, is_helpful: bool) -> dict[str, Any]:
        await self._roundtrip()
        for rows in self._solutions.values():
            for row in rows:
                if text_value(row["sys_id"]) == solution_id:
                    key = "helpful_count" if is_helpful else "not_helpful_count"
                    row[key] = int(row.get(key) or 0) + 1
                    return {"accepted": True}
        return {"accepted": False, "error": f"Unknown solution {solution_id}"}

    async def fetch_choice_list(self, entity_kind: str, field_name: str) -> list[RawRow]:
        await self._roundtrip()
        if entity_kind != PROBLEM_ENTITY:
            return []
        # Priority codes are not stored as choice rows in the store
        if field_name == "priority":
            return []
        rows = FALLBACK_CHOICES.get((entity_kind, field_name), ())
        return [{"value": value, "label": label} for value, label in rows]

    async def fetch_stats(self) -> dict[str, Any]:
        await self._roundtrip()
        stats: dict[str, Any] = {
            "total": len(self._problems),
            "active": 0,
            "inactive": 0,
            "by_priority": {},
            "by_state": {},
            "by_category": {},
        }
        for row in self._problems:
            if text_value(row["active"]) == "true":
                stats["active"] += 1
            else:
                stats["inactive"] += 1
            for field_name in ("priority", "state", "category"):
                key = text_value(row[field_name]) or "Unknown"
                bucket = stats[f"by_{field_name}"]
                bucket[key] = bucket.get(key, 0) + 1
        return stats

    @property
    def drafts(self) -> list[RawRow]:
        return list(self._drafts)

    # ------------------ Internal Helpers ------------------
    async def _roundtrip(self) -> None:
        await asyncio.sleep(self.latency)
        if self.offline:
            raise SourceUnavailableError("Record store is offline")

    def _matches(self, row: RawRow, filters: ProblemFilter) -> bool:
        for name in ("category", "priority", "state"):
            wanted = getattr(filters, name)
            if wanted and wanted != "all" and text_value(row[name]) != str(wanted):
                return False
        if filters.active_only is not None:
            if text_value(row["active"]) != str(filters.active_only).lower():
                return False
        window = DATE_RANGE_WINDOWS.get(filters.date_range or "")
        if window is not None:
            now = self._now()
            if filters.date_range == "today":
                since = now.replace(hour=0, minute=0, second=0, microsecond=0)
            else:
                since = now - timedelta(days=window)
            updated = datetime.strptime(text_value(row["sys_updated_on"]), "%Y-%m-%d %H:%M:%S")
            if updated.replace(tzinfo=UTC) < since:
                return False
        return True

    @staticmethod
    def _newest_first(rows: list[RawRow]) -> list[RawRow]:
        return sorted(rows, key=lambda row: text_value(row["sys_updated_on"]), reverse=True)

    def _make_problem(self, i: int) -> RawRow:
        rng = self._rng
        category = rng.choice(_CATEGORIES)
        priority = str(rng.randint(1, 5))
        state = rng.choice(tuple(STATE_LABELS))
        active = rng.choice(_ACTIVE_MIX)
        updated = self._now() - timedelta(days=rng.randint(0, 89), hours=rng.randint(0, 23))
        created = updated - timedelta(days=rng.randint(0, 30))
        title = f"{category.capitalize()}: {rng.choice(_TITLES)}"
        # Occasional re-reports of the same problem with sloppy casing/spacing
        if i % 9 == 0:
            title = f"{title.lower()}  "
        assignee = rng.choice(_ASSIGNEES)
        return {
            "sys_id": _pair(f"problem_{i}"),
            "number": _pair(f"PRB00{1000 + i}"),
            "short_description": _pair(title),
            "description": _pair(rng.choice(_DESCRIPTIONS)),
            "priority": _pair(f"{priority} - {PRIORITY_LABELS[priority]}", priority),
            "state": _pair(STATE_LABELS[state], state),
            "category": _pair(category.capitalize(), category),
            "active": _pair(str(active).lower()),
            "sys_updated_on": _pair(_iso(updated)),
            "sys_created_on": _pair(_iso(created)),
            "assigned_to": _pair(assignee, assignee.lower().replace(" ", ".")),
        }

    def _make_solutions(self, problem_id: str) -> list[RawRow]:
        rng = random.Random(f"{self._seed}:{problem_id}")
        count = rng.randint(0, len(_SOLUTION_TEMPLATES))
        rows = []
        for idx, (title, body, author, (helpful, not_helpful)) in enumerate(_SOLUTION_TEMPLATES[:count], start=1):
            published = self._now() - timedelta(days=idx)
            rows.append(
                {
                    "sys_id": _pair(f"kb_{problem_id}_{idx}"),
                    "short_description": _pair(title),
                    "text": _pair(body),
                    "author": _pair(author, author.lower().replace(" ", "_")),
                    "sys_created_on": _pair(_iso(published)),
                    "helpful_count": helpful,
                    "not_helpful_count": not_helpful,
                }
            )
        return rows
