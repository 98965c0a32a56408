# context.py
"""Evaluation context: settings shared by every statement of a session."""

from __future__ import annotations
from dataclasses import dataclass


@dataclass
class EvalContext:
    """Configuration for the evaluator.

    Fields:
        zero_tolerance: |x| <= zero_tolerance counts as zero when pivoting
            during matrix inversion. 0.0 is the exact test.
        crash_on_error: stop a script at its first failing statement
        echo: print results of statements not ended with ';'
    """
    zero_tolerance: float = 0.0
    crash_on_error: bool = False
    echo: bool = True

    def __post_init__(self):
        if self.zero_tolerance < 0.0:
            raise ValueError(f"zero_tolerance must be non-negative, got {self.zero_tolerance}")
