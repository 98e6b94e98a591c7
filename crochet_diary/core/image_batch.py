"""Ordered collection of asynchronously loaded images.

Loads of a multi-image pick can finish in any order. Results are keyed by
submission index so the final list always follows the order in which the
images were picked. Failed loads are dropped.
"""

from __future__ import annotations


class OrderedImageBatch:
    """Collects ``(index, data)`` completions for ``expected`` submissions."""

    def __init__(self, expected: int):
        if expected < 0:
            raise ValueError(f"expected must be >= 0, got {expected}")
        self._expected = expected
        self._results: dict[int, bytes | None] = {}

    @property
    def expected(self) -> int:
        return self._expected

    @property
    def completed(self) -> int:
        return len(self._results)

    @property
    def is_done(self) -> bool:
        return len(self._results) >= self._expected

    def complete(self, index: int, data: bytes | None) -> None:
        """Record a finished load; ``None`` marks a failed one.

        Raises:
            IndexError: Index outside the submitted range.
            ValueError: Index already completed.
        """
        if not 0 <= index < self._expected:
            raise IndexError(f"submission index out of range: {index}")
        if index in self._results:
            raise ValueError(f"submission {index} already completed")
        self._results[index] = data

    def ordered(self) -> list[bytes]:
        """Successful results in submission order."""
        return [
            data for _, data in sorted(self._results.items())
            if data
        ]
