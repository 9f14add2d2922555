"""Chunk length selection for pre-sized datasets.

The total length of every dataset must be an exact multiple of its chunk
length, so no chunk is ever ragged. Within that constraint the chunk length is
made as large as the storage limit allows.
"""

from __future__ import annotations

import logging
from itertools import combinations
from math import isqrt, prod

from mat73writer.storage.format import MAX_CHUNK_LENGTH, MAX_FACTOR_GROUPS
from mat73writer.utils.schema import ChunkPlan

logger = logging.getLogger(__name__)


def plan_chunks(total_length: int, max_chunk_length: int = MAX_CHUNK_LENGTH) -> ChunkPlan:
    """Compute chunk length and chunk count for a dataset.

    Args:
        total_length: Number of samples in the dataset.
        max_chunk_length: Upper bound on samples per chunk.

    Returns:
        ChunkPlan. A chunk length of 0 means no usable divisor exists;
        callers must treat it as fatal.
    """
    chunk_length = largest_divisor(total_length, max_chunk_length)
    chunk_count = total_length // chunk_length if chunk_length > 0 else 0
    return ChunkPlan(chunk_length, chunk_count)


def largest_divisor(length: int, limit: int) -> int:
    """Largest product of prime powers of ``length`` not exceeding ``limit``.

    Each prime power is taken whole (2**3 contributes 8, never 2 or 4), so the
    result is 0 when every prime power of ``length`` exceeds ``limit``.
    """
    if length < limit:
        return length

    powers = [p for p in prime_powers(length) if p <= limit]

    if len(powers) > MAX_FACTOR_GROUPS:
        logger.debug("%d prime powers in %d, falling back to divisor search", len(powers), length)
        return _descending_divisor(length, limit)

    best = 0
    for r in range(1, len(powers) + 1):
        for combo in combinations(powers, r):
            product = prod(combo)
            if best < product <= limit:
                best = product
    return best


def prime_powers(number: int) -> list[int]:
    """Factor ``number`` and fold each group of equal primes into its power.

    >>> prime_powers(86400)
    [128, 27, 25]
    """
    powers = []
    div = 2
    while div <= isqrt(number):
        if number % div == 0:
            power = 1
            while number % div == 0:
                number //= div
                power *= div
            powers.append(power)
        div += 1 if div == 2 else 2
    if number > 1:
        powers.append(number)
    return powers


def _descending_divisor(length: int, limit: int) -> int:
    for candidate in range(min(length, limit), 0, -1):
        if length % candidate == 0:
            return candidate
    return 0
