from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Collection, Dict, Iterable, List, Mapping, Optional, Sequence

ALL = "all"

_MISSING = object()


@dataclass(frozen=True)
class FilterCriteria:
    """Independent filter dimensions, ANDed together.

    `search` is matched case-insensitively as a substring of any of
    `search_fields`. Each `exact` entry compares one field to a wanted value.
    Empty, None, or "all" on any dimension matches everything.
    """

    search: Optional[str] = None
    search_fields: Sequence[str] = ()
    exact: Mapping[str, Any] = field(default_factory=dict)
    allowed: Mapping[str, Collection[Any]] = field(default_factory=dict)


def get_field(item: Any, name: str) -> Any:
    """Read a possibly dotted field from a mapping or an attribute object."""
    value = item
    for part in name.split("."):
        if value is None:
            return _MISSING
        if isinstance(value, Mapping):
            value = value.get(part, _MISSING)
        else:
            value = getattr(value, part, _MISSING)
        if value is _MISSING:
            return _MISSING
    return value


def _as_text(value: Any) -> str:
    # str-based enums compare by value
    return str(getattr(value, "value", value))


def is_all(value: Any) -> bool:
    if value is None:
        return True
    text = _as_text(value).strip()
    return not text or text.lower() == ALL


def normalize_choice(value: Any, allowed: Optional[Collection[Any]] = None) -> Optional[str]:
    """Map a filter value to its canonical string, or None for "all".

    Values outside `allowed` are treated as "all" rather than as an error.
    """
    if is_all(value):
        return None
    text = _as_text(value).strip()
    if allowed is not None and text not in {_as_text(choice) for choice in allowed}:
        return None
    return text


def matches_search(item: Any, term: Optional[str], fields: Sequence[str]) -> bool:
    if term is None or not term.strip():
        return True
    needle = term.strip().lower()
    for name in fields:
        value = get_field(item, name)
        if value is _MISSING or value is None:
            continue
        if needle in _as_text(value).lower():
            return True
    return False


def matches_exact(item: Any, name: str, wanted: Optional[str]) -> bool:
    if wanted is None:
        return True
    value = get_field(item, name)
    if value is _MISSING or value is None:
        return False
    return _as_text(value) == wanted


def filter_items(items: Iterable[Any], criteria: FilterCriteria) -> List[Any]:
    """Return the items matching every dimension of `criteria`, in input order."""
    wanted: Dict[str, Optional[str]] = {
        name: normalize_choice(value, criteria.allowed.get(name))
        for name, value in criteria.exact.items()
    }
    return [
        item for item in items
        if matches_search(item, criteria.search, criteria.search_fields)
        and all(matches_exact(item, name, value) for name, value in wanted.items())
    ]


def count_by(items: Iterable[Any], name: str, choices: Iterable[Any]) -> Dict[str, int]:
    """Count items per choice of a categorical field, including zero counts."""
    counts = {_as_text(choice): 0 for choice in choices}
    for item in items:
        value = get_field(item, name)
        if value is _MISSING or value is None:
            continue
        key = _as_text(value)
        if key in counts:
            counts[key] += 1
    return counts
