"""Choice-list resolution for enumerated fields, with a session cache and fallbacks."""

from __future__ import annotations

import logging

from .choice_table import ChoiceTable, load_fallback_table
from .config import PROBLEM_ENTITY
from .models import Choice, DataSource, FetchResult
from .service import ProblemService

logger = logging.getLogger(__name__)

ChoiceKey = tuple[str, str]


class ChoiceCache:
    """Append-only store of resolved choice lists, keyed by (entity kind, field).

    One instance lives for a user session. Entries are never evicted; a stale
    list for the rest of the session is acceptable.
    """

    def __init__(self) -> None:
        self._entries: dict[ChoiceKey, FetchResult[list[Choice]]] = {}

    def get(self, key: ChoiceKey) -> FetchResult[list[Choice]] | None:
        return self._entries.get(key)

    def put(self, key: ChoiceKey, result: FetchResult[list[Choice]]) -> None:
        self._entries.setdefault(key, result)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class ChoiceResolver:
    """Resolve legal (value, label) pairs for a field.

    Lookup order: session cache, then the record store, then the built-in
    fallback table when the store fails or returns nothing. Whatever is
    resolved is cached before returning, and resolution never raises.

    Two concurrent misses for the same key both reach the store; the answers
    are identical, so the first one cached wins and the other is dropped.
    """

    def __init__(
        self,
        service: ProblemService,
        cache: ChoiceCache | None = None,
        fallback_table: ChoiceTable | None = None,
    ):
        self.service = service
        self.cache = cache if cache is not None else ChoiceCache()
        self._fallback = fallback_table if fallback_table is not None else load_fallback_table()

    async def resolve(self, entity_kind: str, field_name: str) -> FetchResult[list[Choice]]:
        key = (entity_kind, field_name)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        remote = await self.service.fetch_choices(entity_kind, field_name)
        if remote.source is DataSource.LIVE and remote.data:
            result = remote
        else:
            if not remote.is_fallback:
                logger.info("No choices found for %s.%s, using fallback", entity_kind, field_name)
            result = FetchResult(
                data=list(self._fallback.get(key, [])),
                source=DataSource.FALLBACK,
                error=remote.error,
            )
        self.cache.put(key, result)
        return self.cache.get(key) or result

    async def resolve_choices(self, entity_kind: str, field_name: str) -> list[Choice]:
        return list((await self.resolve(entity_kind, field_name)).data)

    async def problem_categories(self) -> list[Choice]:
        return await self.resolve_choices(PROBLEM_ENTITY, "category")

    async def problem_priorities(self) -> list[Choice]:
        return await self.resolve_choices(PROBLEM_ENTITY, "priority")

    async def problem_states(self) -> list[Choice]:
        return await self.resolve_choices(PROBLEM_ENTITY, "state")
