"""Listing engine: filtering, sorting and windowing of fetched property collections.

Every screen that renders listings goes through these functions. They are pure:
no I/O, no shared state, and inputs are never mutated.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Hashable, Iterable, Protocol, Sequence, TypeVar

from ..schemas.properties import (
    ALL,
    SIZE_THRESHOLD,
    FilterCriteria,
    PropertyRecord,
    SizeBucket,
    SortKey,
)

OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class _Identified(Protocol):
    @property
    def id(self) -> Hashable: ...


T = TypeVar("T")
IdentifiedT = TypeVar("IdentifiedT", bound=_Identified)


def filter_properties(records: Iterable[PropertyRecord], criteria: FilterCriteria) -> list[PropertyRecord]:
    """Return the records that pass every active clause, in input order."""

    predicate = _build_predicate(criteria)
    return [record for record in records if predicate(record)]


def _build_predicate(criteria: FilterCriteria) -> Callable[[PropertyRecord], bool]:
    clauses: list[Callable[[PropertyRecord], bool]] = []

    # Blank input disables the clause; otherwise the query is matched as typed.
    if criteria.search.strip():
        needle = criteria.search.lower()
        clauses.append(
            lambda record: needle in record.title.lower()
            or needle in record.city.lower()
            or needle in record.state.lower()
        )

    if criteria.property_type != ALL:
        clauses.append(lambda record: record.property_type == criteria.property_type)

    if criteria.city != ALL:
        clauses.append(lambda record: record.city == criteria.city)

    if criteria.min_bedrooms > 0:
        clauses.append(lambda record: record.bedrooms >= criteria.min_bedrooms)

    if criteria.min_bathrooms > 0:
        clauses.append(lambda record: record.bathrooms >= criteria.min_bathrooms)

    if criteria.size is SizeBucket.UNDER:
        clauses.append(lambda record: record.sqft < SIZE_THRESHOLD)
    elif criteria.size is SizeBucket.ABOVE:
        clauses.append(lambda record: record.sqft >= SIZE_THRESHOLD)

    return lambda record: all(clause(record) for clause in clauses)


def _timestamp(record: PropertyRecord) -> datetime:
    value = record.updated_at or record.created_at
    if value is None:
        return OLDEST
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


_SORT_FIELDS: dict[SortKey, tuple[Callable[[PropertyRecord], object], bool]] = {
    SortKey.PRICE_ASC: (lambda record: record.price or 0, False),
    SortKey.PRICE_DESC: (lambda record: record.price or 0, True),
    SortKey.NEWEST: (_timestamp, True),
    SortKey.OLDEST: (_timestamp, False),
    SortKey.AREA_DESC: (lambda record: record.sqft or 0, True),
    SortKey.AREA_ASC: (lambda record: record.sqft or 0, False),
}


def sort_properties(records: Iterable[PropertyRecord], key: SortKey) -> list[PropertyRecord]:
    """Stable sort; equal keys keep their input order in both directions."""

    key_func, descending = _SORT_FIELDS[SortKey(key)]
    return sorted(records, key=key_func, reverse=descending)


def compose(
    records: Iterable[PropertyRecord],
    criteria: FilterCriteria,
    sort_key: SortKey,
) -> list[PropertyRecord]:
    """Filtered then sorted render set."""

    return sort_properties(filter_properties(records, criteria), sort_key)


def split_windows(records: Sequence[T], featured_size: int, recommended_size: int) -> tuple[list[T], list[T]]:
    """Slice one collection into disjoint featured and recommended windows."""

    if featured_size < 0 or recommended_size < 0:
        raise ValueError("Window sizes must be non-negative")
    featured = list(records[:featured_size])
    recommended = list(records[featured_size : featured_size + recommended_size])
    return featured, recommended


def unique_by_id(records: Iterable[IdentifiedT]) -> list[IdentifiedT]:
    """Drop repeated identifiers, keeping the first occurrence."""

    seen: set[Hashable] = set()
    unique: list[IdentifiedT] = []
    for record in records:
        if record.id in seen:
            continue
        seen.add(record.id)
        unique.append(record)
    return unique


def favorite_ids(records: Iterable[PropertyRecord]) -> frozenset[str]:
    return frozenset(record.id for record in records)


def is_favorite(favorites: Iterable[str], property_id: str) -> bool:
    return property_id in set(favorites)


def distinct_values(records: Iterable[PropertyRecord], attribute: str) -> list[str]:
    """Sorted distinct non-empty values of ``city``, ``state`` or ``property_type``."""

    if attribute not in {"city", "state", "property_type"}:
        raise ValueError(f"Unsupported attribute: {attribute}")
    return sorted({value for value in (getattr(record, attribute) for record in records) if value})
