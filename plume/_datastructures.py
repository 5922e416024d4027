"""
Core data structures for Plume messages.

Provides:
- Headers: Ordered, case-insensitive header collection with original-case keys
- filter_header_name / filter_header_values: RFC 7230 header validation
"""

from __future__ import annotations

import re
from typing import Dict, Iterator, List, Sequence, Tuple, Union

from .faults import InvalidHeaderName, InvalidHeaderValue

HeaderScalar = Union[str, int, float]
HeaderValue = Union[HeaderScalar, Sequence[HeaderScalar]]

# field-name = token
_TOKEN_RE = re.compile(r"[!#$%&'*+.^_`|~0-9A-Za-z-]+")

# field-value = *( field-vchar / SP / HTAB ), obs-text widened to all non-ASCII
_FIELD_VALUE_RE = re.compile(r"[ \t\x21-\x7e\x80-\U0010ffff]*")


def filter_header_name(name: object) -> str:
    """Validate a header name against the RFC 7230 token grammar."""
    if not isinstance(name, str) or not _TOKEN_RE.fullmatch(name):
        raise InvalidHeaderName(header_name=name)
    return name


def filter_header_values(values: object) -> List[str]:
    """
    Normalize a header value to a validated list of strings.

    Accepts a scalar or a list/tuple of scalars. Each value is stringified,
    checked against the field-value grammar and stripped of surrounding
    spaces and tabs.
    """
    if not isinstance(values, (list, tuple)):
        values = [values]

    if not values:
        raise InvalidHeaderValue(
            "Header values must be a string or a list of strings, empty list given"
        )

    result = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            raise InvalidHeaderValue(header_value=value)
        value = str(value)
        if not _FIELD_VALUE_RE.fullmatch(value):
            raise InvalidHeaderValue(header_value=value)
        result.append(value.strip(" \t"))
    return result


# ============================================================================
# Headers
# ============================================================================

class Headers:
    """
    Case-insensitive header collection with original-case preservation.

    Keeps the values keyed by the name as first inserted, plus an index from
    the lower-cased name to that original name. Both maps are updated
    together; a Headers instance is only mutated while its owning message is
    being built.
    """

    __slots__ = ("_values", "_names")

    def __init__(self):
        self._values: Dict[str, List[str]] = {}
        self._names: Dict[str, str] = {}

    def copy(self) -> "Headers":
        clone = Headers()
        clone._values = {name: list(values) for name, values in self._values.items()}
        clone._names = dict(self._names)
        return clone

    def original_name(self, name: str) -> str | None:
        """Original-case form of ``name``, if present."""
        return self._names.get(name.lower())

    def get(self, name: str) -> List[str]:
        """Get all values for header (case-insensitive)."""
        original = self._names.get(name.lower())
        if original is None:
            return []
        return list(self._values[original])

    def line(self, name: str) -> str:
        """Values joined by a bare comma."""
        return ",".join(self.get(name))

    def has(self, name: str) -> bool:
        return name.lower() in self._names

    def set(self, name: str, values: List[str]) -> None:
        """Replace any header with the same lower-cased name; the new case wins."""
        normalized = name.lower()
        previous = self._names.get(normalized)
        if previous is not None:
            del self._values[previous]
        self._names[normalized] = name
        self._values[name] = values

    def add(self, name: str, values: List[str]) -> None:
        """Append values, keeping the existing case when the header exists."""
        normalized = name.lower()
        original = self._names.get(normalized)
        if original is None:
            self._names[normalized] = name
            self._values[name] = list(values)
        else:
            self._values[original].extend(values)

    def remove(self, name: str) -> bool:
        original = self._names.pop(name.lower(), None)
        if original is None:
            return False
        del self._values[original]
        return True

    def put_first(self, name: str, values: List[str]) -> None:
        """
        Store ``values`` as the first header.

        An existing header with the same lower-cased name keeps its
        original-case key; otherwise ``name`` is used.
        """
        normalized = name.lower()
        original = self._names.get(normalized, name)
        rest = {key: value for key, value in self._values.items() if key != original}
        self._names[normalized] = original
        self._values = {original: values, **rest}

    def as_dict(self) -> Dict[str, List[str]]:
        """Fresh name -> values copy in insertion order."""
        return {name: list(values) for name, values in self._values.items()}

    def items(self) -> Iterator[Tuple[str, str]]:
        """Iterate over (name, value) pairs, one per value."""
        for name, values in self._values.items():
            for value in values:
                yield name, value

    def keys(self) -> Iterator[str]:
        return iter(list(self._values))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __iter__(self) -> Iterator[str]:
        return self.keys()

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Headers({self._values})"
