"""Hook size table — millimetre size and hook number selected together."""

from __future__ import annotations

import math

from crochet_diary.constants import HOOK_PAIRS, TIE_TOLERANCE


def hook_pair_at(index: int) -> tuple[float, float]:
    """(mm, number) at ``index``, clamped to the table."""
    index = min(max(int(index), 0), len(HOOK_PAIRS) - 1)
    return HOOK_PAIRS[index]


def hook_index_from_slider(value: float) -> int:
    """Round a continuous slider position to a valid table index."""
    return min(max(math.floor(value + 0.5), 0), len(HOOK_PAIRS) - 1)


def closest_hook_index(mm: float) -> int:
    """Index whose size is nearest to ``mm``.

    The first entry wins on ties; distances within ``TIE_TOLERANCE`` tie.
    """
    best_index = 0
    best_diff = float("inf")
    for i, (size_mm, _number) in enumerate(HOOK_PAIRS):
        diff = abs(size_mm - mm)
        if diff < best_diff - TIE_TOLERANCE:
            best_diff = diff
            best_index = i
    return best_index


def format_hook_size(mm: float) -> str:
    return f"{mm:.1f} mm"


def format_hook_number(number: float) -> str:
    """Whole hook numbers drop the decimal; 7.5 keeps it."""
    if float(number).is_integer():
        return f"No. {int(number)}"
    return f"No. {number:g}"
