"""
Digit Extractor Tests

Known digits of π, stability of the stream across precision increases,
and the insufficient-precision signal.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pinormal.engine import (
    DIGITS_PER_TERM,
    PrecisionState,
    DigitExtractor,
    compute_pi_digits,
    digits_for_terms,
    terms_for_digits,
    binary_split,
)

PI_FIRST_50 = "14159265358979323846264338327950288419716939937510"

PI_FIRST_200 = (
    "14159265358979323846264338327950288419716939937510"
    "58209749445923078164062862089986280348253421170679"
    "82148086513282306647093844609550582231725359408128"
    "48111745028410270193852110555964462294895493038196"
)


class TestPrecisionModel:
    """Digits-per-term bookkeeping."""

    def test_digits_per_term(self):
        assert 14.18 < DIGITS_PER_TERM < 14.182

    def test_digits_for_terms(self):
        assert digits_for_terms(0) == 0
        assert digits_for_terms(1) == 14
        assert digits_for_terms(1000) == 14181

    def test_terms_for_digits_covers_request(self):
        for d in [1, 14, 15, 1000, 123456]:
            assert digits_for_terms(terms_for_digits(d)) >= d - 1

    def test_negative_requests_rejected(self):
        with pytest.raises(ValueError):
            digits_for_terms(-1)
        with pytest.raises(ValueError):
            terms_for_digits(-5)


class TestKnownDigits:
    """Canonical decimal expansion of π."""

    def test_first_50(self):
        assert compute_pi_digits(50) == PI_FIRST_50

    def test_first_200(self):
        assert compute_pi_digits(200) == PI_FIRST_200

    def test_exact_length(self):
        assert len(compute_pi_digits(1000)) == 1000

    def test_zero_digits(self):
        assert compute_pi_digits(0) == ""

    def test_negative_digits_rejected(self):
        with pytest.raises(ValueError):
            compute_pi_digits(-1)

    def test_single_term_gives_correct_prefix(self):
        """One term is good for ~14 digits; whatever is emitted is right."""
        state = PrecisionState()
        state.extend(1)
        digits = DigitExtractor().stable_digits(state)
        assert 0 < len(digits) <= 14
        assert PI_FIRST_50.startswith(digits)


class TestStability:
    """Emitted digits are never revised."""

    @pytest.mark.parametrize("n1,n2", [(1, 2), (3, 10), (10, 11), (20, 70), (64, 200)])
    def test_prefix_property(self, n1, n2):
        extractor = DigitExtractor()
        low, high = PrecisionState(), PrecisionState()
        low.extend(n1)
        high.extend(n2)
        a = extractor.stable_digits(low)
        b = extractor.stable_digits(high)
        assert len(b) > len(a)
        assert b.startswith(a)

    def test_guard_level_does_not_change_digits(self):
        """Different guard margins agree wherever both emit."""
        state = PrecisionState()
        state.extend(40)
        a = DigitExtractor(guard_digits=0).stable_digits(state)
        b = DigitExtractor(guard_digits=25).stable_digits(state)
        shared = min(len(a), len(b))
        assert shared > 500
        assert a[:shared] == b[:shared]

    def test_incremental_stream_matches_one_shot(self):
        """Extending batch by batch reproduces the one-shot digits."""
        state = PrecisionState()
        extractor = DigitExtractor()
        stream = ""
        for target in [5, 10, 20, 40, 80]:
            state.extend(target)
            extraction = extractor.extract(state)
            assert extraction.start == len(stream)
            stream += extraction.digits
        assert state.digits_emitted == len(stream)
        assert stream == compute_pi_digits(len(stream))

    def test_extended_accumulator_equals_fresh_split(self):
        state = PrecisionState()
        state.extend(7)
        state.extend(19)
        state.extend(33)
        assert state.node == binary_split(0, 33)
        assert state.n_total == 33


class TestExtraction:
    """Extraction contract."""

    def test_limit_caps_stream(self):
        state = PrecisionState()
        state.extend(50)
        extraction = DigitExtractor().extract(state, limit=100)
        assert extraction.digits == compute_pi_digits(100)
        assert state.digits_emitted == 100

    def test_nothing_new_signals_more_terms(self):
        state = PrecisionState()
        state.extend(10)
        extractor = DigitExtractor()
        extractor.extract(state)
        again = extractor.extract(state)
        assert again.digits == ""
        assert again.needs_more_terms
        assert again.start == state.digits_emitted

    def test_empty_state_yields_nothing(self):
        extraction = DigitExtractor().extract(PrecisionState())
        assert extraction.needs_more_terms

    def test_histogram_excludes_leading_three(self):
        state = PrecisionState()
        state.extend(2)
        assert DigitExtractor().stable_digits(state).startswith("14159")

    def test_cannot_shrink_precision(self):
        state = PrecisionState()
        state.extend(10)
        with pytest.raises(ValueError):
            state.extend(10)
        with pytest.raises(ValueError):
            state.extend(5)

    def test_negative_guard_rejected(self):
        with pytest.raises(ValueError):
            DigitExtractor(guard_digits=-1)

    def test_parallel_extend_matches_sequential(self):
        a, b = PrecisionState(), PrecisionState()
        a.extend(60)
        b.extend(60, workers=2)
        assert a.node == b.node
