"""
Numeric Engine

Chudnovsky binary splitting over exact GMP integers and stable decimal
digit extraction.

Usage:
    from pinormal.engine import PrecisionState, DigitExtractor

    state = PrecisionState()
    extractor = DigitExtractor()

    state.extend(100)                 # terms [0, 100)
    first = extractor.extract(state)  # ~1,400 digits
    state.extend(200)                 # terms [100, 200) merged in
    more = extractor.extract(state)   # continues where `first` ended
"""

from .splitting import (
    SplitNode,
    term,
    merge,
    binary_split,
    parallel_split,
)
from .digits import (
    DIGITS_PER_TERM,
    PrecisionState,
    DigitExtractor,
    Extraction,
    digits_for_terms,
    terms_for_digits,
    compute_pi_digits,
)

__all__ = [
    # Binary splitting
    "SplitNode",
    "term",
    "merge",
    "binary_split",
    "parallel_split",
    # Digit extraction
    "DIGITS_PER_TERM",
    "PrecisionState",
    "DigitExtractor",
    "Extraction",
    "digits_for_terms",
    "terms_for_digits",
    "compute_pi_digits",
]
