"""Size buckets and change-count classification."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping


class SizeTableError(ValueError):
    """Raised when a size table has invalid or overlapping ranges."""


@dataclass(frozen=True)
class Size:
    """Inclusive range of changed-line counts."""

    min: int
    max: int

    def contains(self, count: int) -> bool:
        return self.min <= count <= self.max


class SizeTable:
    """Immutable mapping of label name to its changed-line range.

    Ranges are checked for overlap on construction so that at most one label
    can ever match a count.
    """

    def __init__(self, sizes: Mapping[str, Size]) -> None:
        if not sizes:
            raise SizeTableError("Size table must define at least one label.")
        for label, size in sizes.items():
            if not label or not label.strip():
                raise SizeTableError("Size labels cannot be empty.")
            if size.min < 0 or size.max < size.min:
                raise SizeTableError(f"Invalid range for {label}: {size.min}-{size.max}.")

        ordered = sorted(sizes.items(), key=lambda item: item[1].min)
        for (prev_label, prev), (label, size) in zip(ordered, ordered[1:]):
            if size.min <= prev.max:
                raise SizeTableError(
                    f"Size ranges for {prev_label} ({prev.min}-{prev.max}) and "
                    f"{label} ({size.min}-{size.max}) overlap."
                )

        self._sizes: Mapping[str, Size] = MappingProxyType(dict(ordered))

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(self._sizes)

    def classify(self, count: int) -> str | None:
        """Return the label whose range contains ``count``, or ``None``."""

        for label, size in self._sizes.items():
            if size.contains(count):
                return label
        return None

    def __contains__(self, label: object) -> bool:
        return label in self._sizes

    def __iter__(self) -> Iterator[str]:
        return iter(self._sizes)

    def __len__(self) -> int:
        return len(self._sizes)

    def __getitem__(self, label: str) -> Size:
        return self._sizes[label]


DEFAULT_SIZES = SizeTable(
    {
        "size/XS": Size(min=0, max=9),
        "size/S": Size(min=10, max=29),
        "size/M": Size(min=30, max=99),
        "size/L": Size(min=100, max=499),
        "size/XL": Size(min=500, max=999),
        "size/XXL": Size(min=1000, max=sys.maxsize),
    }
)
