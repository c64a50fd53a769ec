"""View states for the portal: a listing of problems, or one problem in detail."""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from problem_portal.core.models import DataSource, ProblemRecord, SolutionArticle


class TransitionError(RuntimeError):
    """An action was requested from a view state that does not offer it."""


@dataclass(frozen=True, slots=True)
class ListingState:
    # True when the loaded set came from a search rather than a full load
    search_mode_load: bool = False


@dataclass(frozen=True, slots=True)
class DetailState:
    record: ProblemRecord
    return_to: ListingState
    solutions: tuple[SolutionArticle, ...] = ()
    loading: bool = True
    source: DataSource = DataSource.LIVE


ViewState = ListingState | DetailState


@dataclass(frozen=True, slots=True)
class Notification:
    id: int
    level: str  # "success" | "error"
    message: str


@dataclass(slots=True)
class PortalView:
    """What the listing renders: the visible frame plus reporting counters."""

    frame: pd.DataFrame
    duplicate_count: int
    loaded_count: int
    source: DataSource
    search_mode: bool

    @property
    def is_empty(self) -> bool:
        return self.frame.empty
