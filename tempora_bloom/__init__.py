"""Стандартный Bloom Filter с double hashing."""

from .bloom_config import FilterConfig, InvalidParameter, compute, expected_fp_rate
from .bloom_filter import BloomFilter
from .hashing import bit_positions, canonical_bytes, hash_pair

__all__ = [
    "BloomFilter",
    "FilterConfig",
    "InvalidParameter",
    "bit_positions",
    "canonical_bytes",
    "compute",
    "expected_fp_rate",
    "hash_pair",
]
