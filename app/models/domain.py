"""
Domain models for business logic.
These are internal representations separate from API schemas.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple
from enum import Enum


class PriorityTier(Enum):
    """Priority tier enumeration, declared in sort order."""
    URGENT = "urgent"
    IMPORTANT = "important"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort rank: urgent=1, important=2, low=3."""
        return _TIER_RANKS[self]

    @classmethod
    def values(cls) -> Tuple[str, ...]:
        return tuple(tier.value for tier in cls)


_TIER_RANKS = {
    PriorityTier.URGENT: 1,
    PriorityTier.IMPORTANT: 2,
    PriorityTier.LOW: 3,
}


@dataclass(frozen=True)
class Task:
    """A submitted task and its 1-based position in the request."""
    index: int
    text: str


@dataclass(frozen=True)
class PriorityAssignment:
    """Priority tier assigned to one task index."""
    index: int
    tier: PriorityTier

    @property
    def sort_key(self) -> Tuple[int, int]:
        return (self.tier.rank, self.index)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire representation."""
        return {"index": self.index, "priority": self.tier.value}


@dataclass(frozen=True)
class PrioritizationResult:
    """
    Ordered, immutable set of priority assignments for one request.

    Built fresh from raw model output per request and discarded after
    being returned; holds exactly one assignment per task index.
    """
    assignments: Tuple[PriorityAssignment, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.assignments)

    def __iter__(self) -> Iterator[PriorityAssignment]:
        return iter(self.assignments)

    def __getitem__(self, position: int) -> PriorityAssignment:
        return self.assignments[position]

    @property
    def indices(self) -> List[int]:
        return [assignment.index for assignment in self.assignments]

    def as_pairs(self) -> List[Tuple[int, str]]:
        """Return (index, tier value) pairs in result order."""
        return [(a.index, a.tier.value) for a in self.assignments]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the `{"items": [...]}` response body."""
        return {"items": [assignment.to_dict() for assignment in self.assignments]}
