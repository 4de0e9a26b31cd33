"""
Chudnovsky Binary Splitting

Evaluates the Chudnovsky series for 1/π exactly over a range of terms
using integer arithmetic only (GMP via gmpy2).

For the half-open range [a, b) the engine produces a triple (P, Q, T):

    Leaf (b - a == 1):
        a == 0:  P = 1, Q = 1, T = A
        a  > 0:  P = (6a-5)(2a-1)(6a-1)
                 Q = a³ × C³/24
                 T = (-1)^a × P × (A + B×a)

    Merge [a, m) + [m, b):
        P = P(a,m) × P(m,b)
        Q = Q(a,m) × Q(m,b)
        T = Q(m,b) × T(a,m) + P(a,m) × T(m,b)

    where A = 13591409, B = 545140134, C = 640320

T/Q over [0, n) is the partial sum of the series, so
π ≈ Q × 426880 × √10005 / T. No division happens here; that is
deferred to the digit extractor.
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from typing import List, NamedTuple, Tuple

import gmpy2
from gmpy2 import mpz

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

A = mpz(13591409)
B = mpz(545140134)
C = mpz(640320)
C3 = C ** 3
C3_OVER_24 = C3 // 24  # 10_939_058_860_032_000


class SplitNode(NamedTuple):
    """Exact series contribution of a term range [a, b)."""
    p: mpz
    q: mpz
    t: mpz


# =============================================================================
# CORE RECURSION
# =============================================================================

def term(k: int) -> SplitNode:
    """Closed-form node for the single term k."""
    if k < 0:
        raise ValueError(f"term index must be non-negative, got {k}")
    if k == 0:
        return SplitNode(mpz(1), mpz(1), A)

    p = mpz(6*k - 5) * mpz(2*k - 1) * mpz(6*k - 1)
    q = mpz(k) ** 3 * C3_OVER_24
    t = p * (A + B * k)
    if k & 1:  # odd k -> negative
        t = -t
    return SplitNode(p, q, t)


def merge(left: SplitNode, right: SplitNode) -> SplitNode:
    """Combine adjacent ranges [a, m) and [m, b) into [a, b)."""
    return SplitNode(
        left.p * right.p,
        left.q * right.q,
        right.q * left.t + left.p * right.t,
    )


def binary_split(a: int, b: int) -> SplitNode:
    """
    Binary splitting for range [a, b).

    Recursion depth is log2(b - a), so plain recursion is fine even
    for millions of terms.

    Raises:
        ValueError: if the range is empty, inverted or starts below zero.
    """
    if a < 0 or b <= a:
        raise ValueError(f"invalid term range [{a}, {b})")
    return _split(a, b)


def _split(a: int, b: int) -> SplitNode:
    if b - a == 1:
        return term(a)
    m = (a + b) // 2
    return merge(_split(a, m), _split(m, b))


# =============================================================================
# MULTI-PROCESS SPLITTING
# =============================================================================

def _split_to_bytes(bounds: Tuple[int, int]) -> Tuple[bytes, bytes, bytes]:
    """Worker entry point; mpz is shipped back as GMP binary."""
    a, b = bounds
    p, q, t = _split(a, b)
    return gmpy2.to_binary(p), gmpy2.to_binary(q), gmpy2.to_binary(t)


def make_chunks(a: int, b: int, count: int) -> List[Tuple[int, int]]:
    """Cut [a, b) into at most `count` contiguous, non-empty chunks."""
    count = max(1, min(count, b - a))
    size = (b - a) // count
    chunks = []
    start = a
    for i in range(count):
        end = b if i == count - 1 else start + size
        chunks.append((start, end))
        start = end
    return chunks


def parallel_split(a: int, b: int, workers: int) -> SplitNode:
    """
    Same result as binary_split(a, b), with the independent subtrees
    evaluated in a process pool.

    The range is cut into ~4 chunks per worker; chunk results are merged
    pairwise in order on the calling thread.
    """
    if a < 0 or b <= a:
        raise ValueError(f"invalid term range [{a}, {b})")

    chunks = make_chunks(a, b, workers * 4)
    if workers <= 1 or len(chunks) <= 1:
        return _split(a, b)

    logger.debug("parallel split [%d, %d) in %d chunks on %d workers",
                 a, b, len(chunks), workers)
    with ProcessPoolExecutor(max_workers=workers) as executor:
        raw = list(executor.map(_split_to_bytes, chunks))

    results = [SplitNode(*(gmpy2.from_binary(x) for x in triple)) for triple in raw]
    while len(results) > 1:
        merged = []
        for i in range(0, len(results), 2):
            if i + 1 < len(results):
                merged.append(merge(results[i], results[i + 1]))
            else:
                merged.append(results[i])
        results = merged
    return results[0]
