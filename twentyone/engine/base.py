"""
Base engine class for the twentyone package.

This module provides the abstract base class for round engines. It defines the
call contract that service layers (HTTP handlers, bots, scripts) rely on: start
a round, then feed the returned state back in with each player action.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional

from twentyone.events import EventBus, EventEmitter
from twentyone.state.models import Outcome, RoundState, RoundStatus


class RoundEngine(ABC):
    """
    Abstract base class for round engines.

    Engines are stateless between calls: every round lives in the RoundState
    values they return, and the caller owns those values.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the engine.

        Args:
            config: Configuration options for the game
        """
        self.config = config or {}
        self.event_bus: EventEmitter = EventBus.get_instance()

    @abstractmethod
    def start_round(self) -> RoundState:
        """
        Deal a new round.
        """

    @abstractmethod
    def score_hand(self, hand: Iterable[Any]) -> int:
        """
        Score a hand of cards.
        """

    @abstractmethod
    def apply_hit(self, state: RoundState) -> RoundState:
        """
        Apply a player hit to a round.
        """

    @abstractmethod
    def apply_stand(self, state: RoundState) -> RoundState:
        """
        Apply a player stand to a round, finishing it.
        """

    @abstractmethod
    def classify_result(self, status: RoundStatus) -> Optional[Outcome]:
        """
        Reduce a round status to a win/loss/tie outcome.
        """
