"""
Verification package for twentyone.

This package provides tools for checking shuffle fairness and analysing
recorded round outcomes.
"""

from twentyone.verification.statistics import (
    ConfidenceInterval,
    ShuffleAuditResult,
    position_frequencies,
    shuffle_uniformity,
    win_rate_interval,
)

__all__ = [
    "ConfidenceInterval",
    "ShuffleAuditResult",
    "position_frequencies",
    "shuffle_uniformity",
    "win_rate_interval",
]
