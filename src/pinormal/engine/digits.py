"""
Digit Extraction

Turns the cumulative (P, Q, T) of the Chudnovsky series into decimal
digits of π, emitting only digits that can no longer change.

    π × 10^W ≈ Q × 426880 × isqrt(10005 × 10^(2W)) / T

640320^(3/2) / 12 = 426880 × √10005, so the half-power of the constant
reduces to one integer square root at the working precision W.

Stability: the computed integer X differs from the true π × 10^W by at
most E (series truncation plus two floors). Every digit shared by
X - E and X + E is therefore a true digit of π and is final.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

import gmpy2
from gmpy2 import mpz

from .splitting import SplitNode, binary_split, merge, parallel_split

logger = logging.getLogger(__name__)


# log10(C³ / (24 × 72)), truncated so digit estimates never overshoot
DIGITS_PER_TERM = 14.181647462

SQRT_RADICAND = mpz(10005)
SQRT_FACTOR = mpz(426880)
DEFAULT_GUARD_DIGITS = 10


def digits_for_terms(n: int) -> int:
    """Decimal digits of precision carried by n series terms."""
    if n < 0:
        raise ValueError(f"term count must be non-negative, got {n}")
    return int(n * DIGITS_PER_TERM)


def terms_for_digits(d: int) -> int:
    """Smallest term count whose precision covers d digits."""
    if d < 0:
        raise ValueError(f"digit count must be non-negative, got {d}")
    return max(1, math.ceil(d / DIGITS_PER_TERM))


# =============================================================================
# PRECISION STATE
# =============================================================================

@dataclass
class PrecisionState:
    """
    Cumulative series state for terms [0, n_total).

    Owned by the computation path; `node` is replaced in one assignment
    after the merge is complete, never updated in place.
    """
    node: Optional[SplitNode] = None
    n_total: int = 0
    digits_emitted: int = 0

    def extend(self, n_new: int, workers: int = 1) -> None:
        """Add terms [n_total, n_new) to the accumulator."""
        if n_new <= self.n_total:
            raise ValueError(
                f"cannot extend precision from {self.n_total} to {n_new} terms")

        if workers > 1:
            chunk = parallel_split(self.n_total, n_new, workers)
        else:
            chunk = binary_split(self.n_total, n_new)

        self.node = chunk if self.node is None else merge(self.node, chunk)
        self.n_total = n_new

    @property
    def precision_digits(self) -> int:
        return digits_for_terms(self.n_total)


@dataclass(frozen=True)
class Extraction:
    """Result of one extraction round."""
    digits: str
    start: int  # stream position of digits[0]

    @property
    def needs_more_terms(self) -> bool:
        return not self.digits


# =============================================================================
# EXTRACTOR
# =============================================================================

class DigitExtractor:
    """
    Produces the stable decimal expansion of π from a PrecisionState.

    Args:
        guard_digits: working precision carried beyond the digits the
            series is believed to support
    """

    def __init__(self, guard_digits: int = DEFAULT_GUARD_DIGITS):
        if guard_digits < 0:
            raise ValueError(f"guard_digits must be non-negative, got {guard_digits}")
        self.guard_digits = guard_digits

    def error_bound(self, n: int) -> mpz:
        """
        Bound on |X - π × 10^W| in units of the last working digit.

        The series tail after n terms is below 10^(-14.18n) × (1 + 41n)
        relative to the sum, i.e. at most (129n + 4) × 10^guard units;
        the trailing +4 absorbs the isqrt and division floors.
        """
        return (150 * n + 4) * mpz(10) ** self.guard_digits + 4

    def scaled_pi(self, state: PrecisionState, working: int) -> mpz:
        """floor-approximation of π × 10^working from the accumulator."""
        _, q, t = state.node
        sqrt_c = gmpy2.isqrt(SQRT_RADICAND * mpz(10) ** (2 * working))
        return q * SQRT_FACTOR * sqrt_c // t

    def stable_digits(self, state: PrecisionState) -> str:
        """All fractional digits of π proven correct at this precision."""
        if state.node is None or state.n_total < 1:
            return ""

        working = state.precision_digits + self.guard_digits
        x = self.scaled_pi(state, working)
        margin = self.error_bound(state.n_total)

        lo = str(x - margin)
        hi = str(x + margin)
        keep = _common_prefix_length(lo, hi, 2 * margin)
        # lo[0] is the integer part "3"
        return lo[1:keep]

    def extract(self, state: PrecisionState, limit: Optional[int] = None) -> Extraction:
        """
        Newly stable digits beyond state.digits_emitted.

        Advances state.digits_emitted. With `limit`, the stream is never
        extended past `limit` digits in total. An empty result means the
        precision did not grow enough to settle another digit.
        """
        start = state.digits_emitted
        stable = self.stable_digits(state)
        end = len(stable) if limit is None else min(len(stable), limit)

        if end <= start:
            logger.debug("no new stable digits at %d terms (%d emitted)",
                         state.n_total, start)
            return Extraction("", start)

        state.digits_emitted = end
        return Extraction(stable[start:end], start)


def _common_prefix_length(lo: str, hi: str, spread: mpz) -> int:
    """
    Length of the shared leading digits of lo and hi (lo < hi).

    Two numbers that far apart cannot agree in their last
    len(str(spread)) digits, so the search starts there.
    """
    if len(lo) != len(hi):
        return 0
    cut = len(str(spread))
    while cut < len(lo):
        keep = len(lo) - cut
        if lo[:keep] == hi[:keep]:
            return keep
        cut += 1
    return 0


def compute_pi_digits(num_digits: int, guard_digits: int = DEFAULT_GUARD_DIGITS) -> str:
    """
    First `num_digits` fractional digits of π ("1415926535...").

    Grows the term count until enough digits are stable.
    """
    if num_digits < 0:
        raise ValueError(f"num_digits must be non-negative, got {num_digits}")
    if num_digits == 0:
        return ""

    extractor = DigitExtractor(guard_digits)
    state = PrecisionState()
    # a few extra terms cover the digits lost to the error margin
    target = terms_for_digits(num_digits) + 2
    while True:
        state.extend(target)
        stable = extractor.stable_digits(state)
        if len(stable) >= num_digits:
            return stable[:num_digits]
        target += max(1, target // 4)
