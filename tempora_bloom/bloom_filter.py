"""Bloom Filter - вероятностная структура для проверки принадлежности."""

import logging
import math
from typing import Iterable

import numpy as np

from .bloom_config import FilterConfig, InvalidParameter, compute
from .hashing import MAX_SEED, bit_positions, hash_pair

logger = logging.getLogger(__name__)


def _check_seed(seed) -> int:
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
        raise InvalidParameter(f"seed must be an integer, got {seed!r}")
    if not 0 <= seed <= MAX_SEED:
        raise InvalidParameter(f"seed must be in [0, {MAX_SEED}], got {seed}")
    return int(seed)


class BloomFilter:
    """
    Bloom Filter с O(k) insert/contains.

    Размер m и число хеш-функций k выводятся из ожидаемого количества
    элементов и допустимого FPR. Позиции битов получаются double hashing
    из двух половин 128-битного MurmurHash3, поэтому при одинаковом seed
    результат воспроизводим между запусками.

    Example:
        bf = BloomFilter(1000, 0.01)
        bf.insert("apple")
        "apple" in bf   # True
        "orange" in bf  # False (может быть ложноположительным)
    """

    def __init__(self, items_count: int, fp_rate: float, seed: int = 0):
        self._init(compute(items_count, fp_rate), _check_seed(seed))
        logger.debug(
            "BloomFilter(n=%d, p=%g): m=%d bits, k=%d",
            items_count, fp_rate, self.config.bitmap_size, self.config.hash_count,
        )

    def _init(self, config: FilterConfig, seed: int) -> None:
        self.config = config
        self.seed = seed
        self._bits = np.zeros(config.bitmap_size, dtype=bool)

    @classmethod
    def from_bits(cls, bits, hash_count: int, seed: int = 0) -> "BloomFilter":
        """Восстановление фильтра из снимка битов (m = len(bits))."""
        bits = np.asarray(bits, dtype=bool)
        if bits.ndim != 1:
            raise InvalidParameter("bits must be one-dimensional")
        config = FilterConfig(bitmap_size=int(bits.size), hash_count=hash_count)
        bf = cls.__new__(cls)
        bf._init(config, _check_seed(seed))
        bf._bits[:] = bits
        return bf

    def _positions(self, item) -> list:
        h1, h2 = hash_pair(item, self.seed)
        return bit_positions(h1, h2, self.config.hash_count, self.config.bitmap_size)

    def insert(self, item) -> None:
        self._bits[self._positions(item)] = True

    def update(self, items: Iterable) -> None:
        """Вставить все элементы итерируемого объекта."""
        for item in items:
            self.insert(item)

    def contains(self, item) -> bool:
        """True - элемент возможно есть, False - точно нет."""
        return bool(self._bits[self._positions(item)].all())

    def __contains__(self, item) -> bool:
        return self.contains(item)

    def clear(self) -> None:
        self._bits[:] = False

    def is_empty(self) -> bool:
        return not self._bits.any()

    def __len__(self) -> int:
        return self.config.bitmap_size

    @property
    def bitmap_size(self) -> int:
        return self.config.bitmap_size

    @property
    def hash_count(self) -> int:
        return self.config.hash_count

    @property
    def bits(self) -> np.ndarray:
        """Read-only view of the bit array, for external snapshots."""
        view = self._bits.view()
        view.flags.writeable = False
        return view

    @property
    def bit_count(self) -> int:
        return int(np.count_nonzero(self._bits))

    @property
    def fill_ratio(self) -> float:
        return self.bit_count / self.config.bitmap_size

    @property
    def estimated_fp_rate(self) -> float:
        """Текущий FPR по доле установленных битов: (X/m)^k."""
        return self.fill_ratio ** self.config.hash_count

    @property
    def approx_items(self) -> float:
        """Оценка числа вставленных элементов: -(m/k) * ln(1 - X/m)."""
        m, k = self.config.bitmap_size, self.config.hash_count
        x = self.bit_count
        if x == m:
            return math.inf
        return -m / k * math.log(1 - x / m)

    def copy(self) -> "BloomFilter":
        return self.from_bits(self._bits, self.config.hash_count, self.seed)

    def _check_compatible(self, other: "BloomFilter") -> None:
        if not isinstance(other, BloomFilter):
            raise TypeError(f"expected BloomFilter, got {type(other).__name__}")
        if (self.config, self.seed) != (other.config, other.seed):
            raise ValueError("Incompatible filters")

    def union(self, other: "BloomFilter") -> "BloomFilter":
        """Объединение фильтров."""
        self._check_compatible(other)
        return self.from_bits(self._bits | other._bits, self.config.hash_count, self.seed)

    def intersection(self, other: "BloomFilter") -> "BloomFilter":
        """Пересечение фильтров (может давать больше FP, чем фильтр пересечения)."""
        self._check_compatible(other)
        return self.from_bits(self._bits & other._bits, self.config.hash_count, self.seed)

    __or__ = union
    __and__ = intersection

    def __eq__(self, other) -> bool:
        if not isinstance(other, BloomFilter):
            return NotImplemented
        return (
            (self.config, self.seed) == (other.config, other.seed)
            and np.array_equal(self._bits, other._bits)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"BloomFilter(m={self.config.bitmap_size}, k={self.config.hash_count}, "
            f"bits_set={self.bit_count})"
        )
