"""
Statistical validation for twentyone.

This module provides tools for checking that shuffles are unbiased and for
putting confidence bounds on observed win rates.
"""

import math
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
import scipy.stats as stats

from twentyone.blackjack.stats import RoundStats
from twentyone.common.deck import Deck, shuffle


@dataclass
class ConfidenceInterval:
    """
    Represents a confidence interval with lower and upper bounds.

    Attributes:
        lower: The lower bound of the confidence interval
        upper: The upper bound of the confidence interval
        confidence: The confidence level (e.g., 0.95 for 95% confidence)
    """

    lower: float
    upper: float
    confidence: float

    def contains(self, value: float) -> bool:
        """Check if the interval contains a value."""
        return self.lower <= value <= self.upper

    def to_dict(self) -> Dict[str, float]:
        """Convert to a dictionary."""
        return {"lower": self.lower, "upper": self.upper, "confidence": self.confidence}


@dataclass
class ShuffleAuditResult:
    """
    Outcome of a shuffle uniformity audit.

    Attributes:
        trials: Number of shuffles performed
        chi_square: Chi-square statistic per card of the ordered deck
        p_values: p-value per card of the ordered deck
        threshold: Per-card significance threshold after Bonferroni correction
        failing_cards: Indices of cards whose position distribution was
            rejected as non-uniform
    """

    trials: int
    chi_square: np.ndarray
    p_values: np.ndarray
    threshold: float
    failing_cards: List[int] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.failing_cards

    @property
    def min_p_value(self) -> float:
        return float(self.p_values.min())

    def to_dict(self) -> Dict[str, object]:
        return {
            "trials": self.trials,
            "threshold": self.threshold,
            "min_p_value": self.min_p_value,
            "failing_cards": list(self.failing_cards),
            "passed": self.passed,
        }


def position_frequencies(
    trials: int, rng: Optional[random.Random] = None, deck_size: int = 52
) -> np.ndarray:
    """
    Count where each card of an ordered deck ends up after shuffling.

    Args:
        trials: Number of shuffles to perform
        rng: Source of randomness handed to ``shuffle``
        deck_size: Number of cards in the audited deck

    Returns:
        A ``deck_size`` x ``deck_size`` matrix; entry [c, p] is how many times
        card c landed at position p
    """
    if trials <= 0:
        raise ValueError(f"trials must be positive: {trials}")

    counts = np.zeros((deck_size, deck_size), dtype=np.int64)
    ordered = list(range(deck_size))
    positions = np.arange(deck_size)

    for _ in range(trials):
        shuffled = np.asarray(shuffle(ordered, rng))
        counts[shuffled, positions] += 1

    return counts


def shuffle_uniformity(
    trials: int = 5200,
    rng: Optional[random.Random] = None,
    significance: float = 0.01,
) -> ShuffleAuditResult:
    """
    Test every card's position distribution against the uniform distribution.

    Each card gets a chi-square goodness-of-fit test; the significance level
    is Bonferroni-corrected for the number of cards tested.

    Args:
        trials: Number of shuffles to perform
        rng: Source of randomness handed to ``shuffle``
        significance: Family-wise significance level

    Returns:
        A ShuffleAuditResult
    """
    deck_size = len(Deck.initialize_default_deck())
    counts = position_frequencies(trials, rng, deck_size)

    chi_square, p_values = stats.chisquare(counts, axis=1)
    threshold = significance / deck_size
    failing = [int(i) for i in np.flatnonzero(p_values < threshold)]

    return ShuffleAuditResult(
        trials=trials,
        chi_square=chi_square,
        p_values=p_values,
        threshold=threshold,
        failing_cards=failing,
    )


def win_rate_interval(
    round_stats: RoundStats, confidence: float = 0.95
) -> ConfidenceInterval:
    """
    Normal-approximation confidence interval for a player's win rate.

    Args:
        round_stats: Recorded results
        confidence: Confidence level, e.g. 0.95

    Returns:
        ConfidenceInterval clipped to [0, 1]
    """
    n = round_stats.games_played
    if n == 0:
        return ConfidenceInterval(0.0, 0.0, confidence)

    rate = round_stats.win_rate
    z = stats.norm.ppf(1 - (1 - confidence) / 2)
    margin = z * math.sqrt(rate * (1 - rate) / n)

    return ConfidenceInterval(
        lower=max(0.0, rate - margin),
        upper=min(1.0, rate + margin),
        confidence=confidence,
    )
