from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .cluster import ClusterBackend


@dataclass
class MatchResult:
    matched: list[str] = field(default_factory=list)
    unmatched: list[str] = field(default_factory=list)


def split_fragments(value: str | None) -> list[str]:
    return [part.strip() for part in (value or "").split(",") if part.strip()]


def match_fragments(live: list[str], requested: Iterable[str]) -> MatchResult:
    """Resolve each fragment to the first live name containing it, ignoring case.

    Fragments that match nothing are collected in ``unmatched`` instead of
    raising. Two fragments may resolve to the same name; duplicates are kept.
    """
    result = MatchResult()
    lowered = [(name, name.lower()) for name in live]
    for raw in requested:
        fragment = str(raw).strip()
        if not fragment:
            continue
        needle = fragment.lower()
        match = next((name for name, low in lowered if needle in low), None)
        if match is None:
            result.unmatched.append(fragment)
        else:
            result.matched.append(match)
    return result


def match_services(backend: ClusterBackend, requested: Iterable[str]) -> MatchResult:
    return match_fragments(backend.list_deployed_services(), requested)


def filter_services(backend: ClusterBackend, requested: Iterable[str]) -> list[str]:
    return match_services(backend, requested).matched
