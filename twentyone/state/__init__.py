"""
Immutable state management for the twentyone engine.

This package provides the immutable round state and the pure transition
functions that advance it.
"""

from twentyone.state.models import (
    BLACKJACK,
    Outcome,
    RoundState,
    RoundStatus,
    classify_result,
    score_hand,
)

from twentyone.state.transitions import InvalidActionError, RoundTransitionEngine

__all__ = [
    "BLACKJACK",
    "Outcome",
    "RoundState",
    "RoundStatus",
    "classify_result",
    "score_hand",
    "InvalidActionError",
    "RoundTransitionEngine",
]
