"""Community feedback counters on solution articles."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import replace

from .models import SolutionArticle


def record_vote(article: SolutionArticle, is_helpful: bool) -> SolutionArticle:
    """Return a copy of ``article`` with exactly one counter incremented.

    There is no per-user tracking: every call counts.
    """
    if is_helpful:
        return replace(article, helpful_count=article.helpful_count + 1)
    return replace(article, not_helpful_count=article.not_helpful_count + 1)


def total_votes(article: SolutionArticle) -> int:
    return article.helpful_count + article.not_helpful_count


def helpful_percentage(article: SolutionArticle) -> int:
    total = total_votes(article)
    if total <= 0:
        return 0
    # Halves round up (62.5 -> 63), not to even
    return math.floor(article.helpful_count / total * 100 + 0.5)


def replace_article(
    articles: Iterable[SolutionArticle],
    updated: SolutionArticle,
) -> tuple[SolutionArticle, ...]:
    return tuple(updated if a.id == updated.id else a for a in articles)
