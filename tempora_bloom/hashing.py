"""Хеширование элементов: канонические байты, MurmurHash3 и double hashing."""

import math
import struct
from functools import singledispatch
from typing import List, Tuple

import mmh3
import numpy as np

MAX_SEED = 2**32 - 1


def _frame(parts) -> bytes:
    out = [len(parts).to_bytes(8, "big")]
    for part in parts:
        out.append(len(part).to_bytes(8, "big"))
        out.append(part)
    return b"".join(out)


@singledispatch
def canonical_bytes(item) -> bytes:
    """
    Stable byte encoding of `item`, equal for items that compare equal.

    Every encoding starts with a one-byte type tag. Extend with
    ``canonical_bytes.register(MyType)`` for custom types.
    """
    if hasattr(type(item), "__bytes__"):
        return b"o" + bytes(item)
    raise TypeError(
        f"unsupported item type {type(item).__name__!r}; "
        f"register an encoder with canonical_bytes.register"
    )


@canonical_bytes.register(bytes)
@canonical_bytes.register(bytearray)
@canonical_bytes.register(memoryview)
def _(item) -> bytes:
    return b"b" + bytes(item)


@canonical_bytes.register(str)
def _(item) -> bytes:
    return b"s" + item.encode("utf-8")


@canonical_bytes.register(int)
def _(item) -> bytes:
    # bool тоже сюда: True == 1
    n = int(item)
    return b"i" + n.to_bytes((n.bit_length() + 8) // 8, "big", signed=True)


@canonical_bytes.register(float)
def _(item) -> bytes:
    if math.isfinite(item) and item.is_integer():
        return canonical_bytes(int(item))  # 1.0 == 1
    return b"f" + struct.pack(">d", item)


@canonical_bytes.register(np.integer)
@canonical_bytes.register(np.bool_)
def _(item) -> bytes:
    return canonical_bytes(int(item))


@canonical_bytes.register(np.floating)
def _(item) -> bytes:
    return canonical_bytes(float(item))


@canonical_bytes.register(tuple)
def _(item) -> bytes:
    return b"t" + _frame([canonical_bytes(x) for x in item])


@canonical_bytes.register(frozenset)
def _(item) -> bytes:
    return b"z" + _frame(sorted(canonical_bytes(x) for x in item))


@canonical_bytes.register(type(None))
def _(item) -> bytes:
    return b"n"


def hash_pair(item, seed: int = 0) -> Tuple[int, int]:
    """Две 64-битные половины MurmurHash3 x64/128 от канонических байтов."""
    h1, h2 = mmh3.hash64(canonical_bytes(item), seed, signed=False)
    return h1, h2


def bit_positions(h1: int, h2: int, k: int, m: int) -> List[int]:
    """
    Kirsch-Mitzenmacher double hashing: g_i = (h1 + i * h2) mod m, i = 0..k-1.

    h2 is forced odd so the progression does not collapse for even m.
    """
    h2 |= 1
    return [(h1 + i * h2) % m for i in range(k)]
