"""Query routing: decide whether a turn is answered by search or by the model."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from cass_core.domain.models import RoutingDecision


DEFAULT_LOCATION_KEYWORDS: Sequence[str] = (
    "near me",
    "location",
    "where",
    "closest",
    "weather",
    "find",
    "restaurant",
    "gas station",
    "hotel",
    "store",
)

DEFAULT_SEARCH_KEYWORDS: Sequence[str] = (
    "find", "search", "address", "current", "news", "who is", "where is", "when is",
    "what is", "what time", "when", "time", "today", "latest", "open now", "hours",
    "weather", "price", "cost", "stock", "definition", "meaning", "location",
    "directions", "review", "restaurant", "hotel", "flight", "event", "score",
    "result", "headline", "update", "game", "sports", "schedule",
)


def _normalize(keywords: Iterable[str]) -> tuple[str, ...]:
    return tuple(k.lower() for k in keywords if k and k.strip())


class Router:
    """Keyword router.

    Matching is case-insensitive substring containment; the first rule that
    matches wins and a single keyword hit is enough.
    """

    def __init__(
        self,
        location_keywords: Optional[Iterable[str]] = None,
        search_keywords: Optional[Iterable[str]] = None,
    ):
        self.location_keywords = _normalize(location_keywords or DEFAULT_LOCATION_KEYWORDS)
        self.search_keywords = _normalize(search_keywords or DEFAULT_SEARCH_KEYWORDS)

    @classmethod
    def from_settings(cls, cfg) -> "Router":
        return cls(
            location_keywords=getattr(cfg, "location_keywords", None),
            search_keywords=getattr(cfg, "search_keywords", None),
        )

    def is_location_query(self, text: str) -> bool:
        lowered = text.lower()
        return any(k in lowered for k in self.location_keywords)

    def should_search(self, text: str) -> bool:
        lowered = text.lower()
        return any(k in lowered for k in self.search_keywords)

    def classify(self, text: str, user_has_provided_location: bool) -> RoutingDecision:
        if self.is_location_query(text) and not user_has_provided_location:
            return RoutingDecision.NEEDS_LOCATION
        if self.should_search(text):
            return RoutingDecision.USE_SEARCH
        return RoutingDecision.USE_COMPLETION
