from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from .violation_models import Priority, Violation, ViolationFilters

ALL = "All"

PRIORITY_RANK = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}


def _value(item: object) -> str:
    return getattr(item, "value", item)  # type: ignore[return-value]


def _matches_search(violation: Violation, search: str) -> bool:
    if not search:
        return True
    needle = search.lower()
    return (
        needle in violation.address.lower()
        or needle in violation.description.lower()
        or needle in violation.reported_by.lower()
    )


def filter_violations(violations: Iterable[Violation], filters: ViolationFilters) -> list[Violation]:
    category = filters.category
    status = _value(filters.status)
    priority = _value(filters.priority)
    association = filters.association
    return [
        violation
        for violation in violations
        if _matches_search(violation, filters.search)
        and (category == ALL or violation.category == category)
        and (status == ALL or violation.status.value == status)
        and (priority == ALL or violation.priority.value == priority)
        and (not association or association == ALL or violation.association == association)
    ]


def _reported_at(violation: Violation) -> datetime:
    try:
        parsed = datetime.fromisoformat(violation.date_reported)
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_violations(violations: Iterable[Violation]) -> list[Violation]:
    """High priority first, then newest report first."""
    return sorted(
        violations,
        key=lambda violation: (-PRIORITY_RANK[violation.priority], -_reported_at(violation).timestamp()),
    )
