"""Параметры Bloom Filter: m и k из ожидаемого числа элементов и FPR."""

import math
import numbers
from dataclasses import dataclass


class InvalidParameter(ValueError):
    """Недопустимые параметры фильтра (только при создании)."""


@dataclass(frozen=True)
class FilterConfig:
    bitmap_size: int  # m, размер битового массива
    hash_count: int   # k, количество хеш-функций

    def __post_init__(self):
        for name in ("bitmap_size", "hash_count"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise InvalidParameter(f"{name} must be an integer, got {value!r}")
            if value < 1:
                raise InvalidParameter(f"{name} must be at least 1, got {value}")
            object.__setattr__(self, name, int(value))

    @property
    def capacity(self) -> int:
        """Оптимальное количество элементов: n = (m/k) * ln(2)."""
        return int(self.bitmap_size * math.log(2) / self.hash_count)


def compute(items_count: int, fp_rate: float) -> FilterConfig:
    """
    Optimal (m, k) for `items_count` items at false positive rate `fp_rate`.

        m = ceil(-n * ln(p) / ln(2)^2)
        k = round(-ln(p) / ln(2))

    Both are floored at 1. Raises InvalidParameter instead of clamping.
    """
    if isinstance(items_count, bool) or not isinstance(items_count, numbers.Integral):
        raise InvalidParameter(f"items_count must be an integer, got {items_count!r}")
    if items_count <= 0:
        raise InvalidParameter("items_count must be greater than 0")
    if isinstance(fp_rate, bool) or not isinstance(fp_rate, numbers.Real):
        raise InvalidParameter(f"fp_rate must be a real number, got {fp_rate!r}")
    fp_rate = float(fp_rate)
    # NaN проваливает оба сравнения
    if not 0.0 < fp_rate < 1.0:
        raise InvalidParameter("fp_rate must be between 0 and 1 (exclusive)")

    ln_p = math.log(fp_rate)
    m = math.ceil(-items_count * ln_p / math.log(2) ** 2)
    k = round(-ln_p / math.log(2))
    return FilterConfig(bitmap_size=max(1, m), hash_count=max(1, k))


def expected_fp_rate(config: FilterConfig, items_count: int) -> float:
    """Теоретический FPR после n вставок: (1 - e^(-kn/m))^k."""
    if items_count <= 0:
        return 0.0
    k, m = config.hash_count, config.bitmap_size
    return (1 - math.exp(-k * items_count / m)) ** k
