"""
Batch size progression.
"""

from dataclasses import dataclass


@dataclass
class BatchPlan:
    """
    Number of new series terms per batch, growing geometrically up to a cap.

    Geometric growth keeps each batch's cost proportional to the work
    already done, so the total stays close to one computation of the
    final size.
    """
    initial_terms: int = 72
    max_terms: int = 141_000
    growth: int = 2

    def __post_init__(self):
        if self.initial_terms < 1:
            raise ValueError(f"initial_terms must be positive, got {self.initial_terms}")
        if self.max_terms < self.initial_terms:
            raise ValueError("max_terms must be >= initial_terms")
        if self.growth < 2:
            raise ValueError(f"growth must be at least 2, got {self.growth}")
        self.current = self.initial_terms

    def advance(self) -> int:
        """Move to the next batch size and return it."""
        self.current = min(self.current * self.growth, self.max_terms)
        return self.current

    @property
    def at_cap(self) -> bool:
        return self.current >= self.max_terms
