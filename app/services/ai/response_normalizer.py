"""
Normalization of raw model output into a complete prioritization result.

The model is asked for strict JSON but may wrap it in prose, omit tasks,
repeat indices, invent tiers, or return nothing at all. Every stage below
is a pure function with a total fallback, so `normalize` always returns
exactly one assignment per task index:

    extract_json_block -> parse_json_block -> collect_assignments
        -> fill_missing_assignments -> sort_assignments

The legacy helpers at the bottom handle the older `{"text": "2, 1, 3"}`
response shape that clients must still accept.
"""
import json
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from app.models.domain import PrioritizationResult, PriorityAssignment, PriorityTier

# First `{` through last `}`, or first `[` through last `]`, whichever starts first
JSON_BLOCK_PATTERN = re.compile(r"\{.*\}|\[.*\]", re.DOTALL)
INTEGER_PATTERN = re.compile(r"\d+")

DEFAULT_TIER = PriorityTier.LOW


@dataclass(frozen=True)
class NormalizationOutcome:
    """A normalized result plus how much of it came from the model."""
    result: PrioritizationResult
    extracted: bool
    parsed: bool
    accepted_count: int

    @property
    def degraded(self) -> bool:
        """True when at least one assignment had to be synthesized."""
        return self.accepted_count < len(self.result)


def _validate_task_count(task_count: int) -> None:
    if isinstance(task_count, bool) or not isinstance(task_count, int) or task_count < 1:
        raise ValueError(f"task_count must be a positive integer, got {task_count!r}")


def extract_json_block(raw_text: Optional[str]) -> Optional[str]:
    """Return the first JSON-looking object/array substring, or None."""
    if not isinstance(raw_text, str) or not raw_text:
        return None
    match = JSON_BLOCK_PATTERN.search(raw_text)
    return match.group(0) if match else None


def try_parse_json_block(block: Optional[str]) -> Tuple[Any, bool]:
    """Parse an extracted block, returning (payload, parsed_ok)."""
    if block is None:
        return {}, False
    try:
        return json.loads(block), True
    except (ValueError, RecursionError):
        return {}, False


def parse_json_block(block: Optional[str]) -> Any:
    """Parse an extracted block; anything unparseable becomes an empty payload."""
    return try_parse_json_block(block)[0]


def coerce_index(value: Any) -> Optional[int]:
    """
    Coerce a candidate `index` value to an int.

    Accepts ints, integral floats and numeric strings ("2", " 3 ", "2.0").
    Booleans and everything else yield None.
    """
    # bool is an int subclass; true/false are not positions
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return int(number) if number.is_integer() else None
    return None


def coerce_tier(value: Any) -> PriorityTier:
    """Lowercase the candidate priority; unknown or missing values become `low`."""
    text = str(value).lower() if value else ""
    if text in PriorityTier.values():
        return PriorityTier(text)
    return DEFAULT_TIER


def candidate_entries(payload: Any) -> List[Any]:
    """Read the `items` list from a parsed payload; anything else is empty."""
    if not isinstance(payload, dict):
        return []
    items = payload.get("items")
    return items if isinstance(items, list) else []


def collect_assignments(entries: Iterable[Any], task_count: int) -> Tuple[PriorityAssignment, ...]:
    """
    Validate candidate entries in order.

    Entries with a missing, non-integer or out-of-range index are dropped.
    The first entry for an index wins; later ones are ignored.
    """
    accepted: List[PriorityAssignment] = []
    seen = set()
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        index = coerce_index(entry.get("index"))
        if index is None or index < 1 or index > task_count:
            continue
        tier = coerce_tier(entry.get("priority"))
        if index in seen:
            continue
        seen.add(index)
        accepted.append(PriorityAssignment(index=index, tier=tier))
    return tuple(accepted)


def fill_missing_assignments(
    assignments: Tuple[PriorityAssignment, ...],
    task_count: int
) -> Tuple[PriorityAssignment, ...]:
    """Append a `low` assignment for every index in 1..task_count not yet covered."""
    covered = {assignment.index for assignment in assignments}
    missing = tuple(
        PriorityAssignment(index=index, tier=DEFAULT_TIER)
        for index in range(1, task_count + 1)
        if index not in covered
    )
    return assignments + missing


def sort_assignments(assignments: Iterable[PriorityAssignment]) -> PrioritizationResult:
    """Order by tier rank, then by original task index."""
    return PrioritizationResult(
        assignments=tuple(sorted(assignments, key=lambda a: a.sort_key))
    )


def complete_assignments(entries: Iterable[Any], task_count: int) -> PrioritizationResult:
    """Validate, fill and sort candidate entries into a complete result."""
    accepted = collect_assignments(entries, task_count)
    return sort_assignments(fill_missing_assignments(accepted, task_count))


def normalize_detailed(raw_text: Optional[str], task_count: int) -> NormalizationOutcome:
    """
    Normalize raw model text and report how much was recovered.

    Raises:
        ValueError: If task_count is not a positive integer
    """
    _validate_task_count(task_count)

    block = extract_json_block(raw_text)
    payload, parsed = try_parse_json_block(block)

    accepted = collect_assignments(candidate_entries(payload), task_count)
    result = sort_assignments(fill_missing_assignments(accepted, task_count))

    return NormalizationOutcome(
        result=result,
        extracted=block is not None,
        parsed=parsed,
        accepted_count=len(accepted),
    )


def normalize(raw_text: Optional[str], task_count: int) -> PrioritizationResult:
    """
    Turn raw model text into exactly `task_count` sorted assignments.

    Malformed, partial or empty text never raises; uncovered tasks default to
    `low`, so `normalize("", n)` lists every index as `low` in ascending order.
    """
    return normalize_detailed(raw_text, task_count).result


# Legacy response shape: {"text": "<free-text ordering>"}

def parse_priority_response(text: Optional[str], task_count: int) -> List[int]:
    """
    Recover a task ordering from free text such as "Order: 2, 1, 3".

    Integers outside 1..task_count are ignored and repeats keep their first
    position. If fewer than task_count distinct indices are found, the identity
    ordering 1..task_count is returned instead.
    """
    order: List[int] = []
    seen = set()
    for match in INTEGER_PATTERN.findall(text or ""):
        number = int(match)
        if number < 1 or number > task_count or number in seen:
            continue
        seen.add(number)
        order.append(number)
        if len(order) == task_count:
            break

    if len(order) == task_count:
        return order
    return list(range(1, task_count + 1))


def tier_for_rank(rank: int, total: int) -> PriorityTier:
    """Split 1-based ranks into three consecutive bands."""
    if rank <= math.ceil(total / 3):
        return PriorityTier.URGENT
    if rank <= math.ceil(total * 2 / 3):
        return PriorityTier.IMPORTANT
    return PriorityTier.LOW


def assign_rank_tiers(order: List[int]) -> PrioritizationResult:
    """Attach banded tiers to an ordering, keeping the ordering as given."""
    total = len(order)
    return PrioritizationResult(assignments=tuple(
        PriorityAssignment(index=index, tier=tier_for_rank(rank, total))
        for rank, index in enumerate(order, start=1)
    ))


def normalize_service_payload(payload: Any, task_count: int) -> PrioritizationResult:
    """
    Normalize a `/api/prioritize` response body of either shape.

    A non-empty `items` list is treated as the structured shape; anything
    else falls back to the legacy `text` ordering with banded tiers.
    """
    _validate_task_count(task_count)

    items = payload.get("items") if isinstance(payload, dict) else None
    if isinstance(items, list) and items:
        return complete_assignments(items, task_count)

    text = payload.get("text") if isinstance(payload, dict) else None
    order = parse_priority_response("" if text is None else str(text), task_count)
    return assign_rank_tiers(order)


def result_summary(result: PrioritizationResult) -> Dict[str, int]:
    """Count assignments per tier, for logging."""
    counts = {tier.value: 0 for tier in PriorityTier}
    for assignment in result:
        counts[assignment.tier.value] += 1
    return counts
