from __future__ import annotations

import math
from typing import Iterable, List, Optional, Tuple

LETTER_SIZES: Tuple[str, ...] = ("XS", "S", "M", "L", "XL", "XXL", "XXXL")


def _as_number(size: str) -> Optional[float]:
    try:
        value = float(size)
    except (TypeError, ValueError):
        return None
    if math.isnan(value):
        return None
    return value


def size_sort_key(size: str) -> Tuple[int, float, str]:
    """
    Порядок размеров: числовые (34, 36, …) по возрастанию,
    затем буквенные XS…XXXL, затем всё остальное лексикографически.
    """
    number = _as_number(size)
    if number is not None:
        return (0, number, "")
    upper = size.upper()
    if upper in LETTER_SIZES:
        return (1, float(LETTER_SIZES.index(upper)), "")
    return (2, 0.0, size)


def sort_sizes(sizes: Iterable[str]) -> List[str]:
    return sorted(sizes, key=size_sort_key)
