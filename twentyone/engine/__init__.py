"""
Core engine for the twentyone package.

This package provides the round engine, implementing the game logic in a
platform-agnostic way.
"""

from twentyone.engine.base import RoundEngine
from twentyone.engine.blackjack import BlackjackEngine

__all__ = ["RoundEngine", "BlackjackEngine"]
