"""
Session service for blackjack rounds.

BlackjackTable is the collaborator that sits between a request handler and the
round engine. It keeps the latest state of every active game, and of the most
recently finished ones, in memory keyed by game id. It also makes sure only one
action runs against a game at a time, and records each finished round in the
owning user's history and statistics.
"""

from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional, Tuple
import logging
import threading

from twentyone.blackjack.stats import RoundStats
from twentyone.engine.blackjack import BlackjackEngine
from twentyone.events import EngineEventType
from twentyone.state import InvalidActionError, RoundState
from twentyone.common.deck import InsufficientCardsError

logger = logging.getLogger("twentyone.api.table")

DEFAULT_HISTORY_LIMIT = 100
DEFAULT_FINISHED_GAME_LIMIT = 100


class GameNotFoundError(KeyError):
    """Raised when a game id is not known to the table."""

    def __init__(self, game_id: str):
        super().__init__(game_id)
        self.game_id = game_id

    def __str__(self) -> str:
        return f"Game {self.game_id} not found"


class _Game:
    __slots__ = ("user_id", "state", "lock", "recorded")

    def __init__(self, user_id: str, state: RoundState):
        self.user_id = user_id
        self.state = state
        self.lock = threading.RLock()
        self.recorded = False


class BlackjackTable:
    """
    In-memory game registry built on top of a BlackjackEngine.

    Attributes:
        engine: The engine that deals and settles rounds
        config: Table configuration options
        history_limit: Maximum number of finished rounds kept per user
        finished_game_limit: Maximum number of finished games kept addressable
            by id, across all users
    """

    def __init__(
        self,
        engine: Optional[BlackjackEngine] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the table.

        Args:
            engine: Engine to use. One is built from ``config`` if omitted.
            config: Configuration options; ``history_limit`` bounds each
                user's history, ``finished_game_limit`` bounds how many
                finished games stay in the registry, the rest is passed to
                the engine.
        """
        self.config = config or {}
        self.engine = engine or BlackjackEngine(self.config)
        self.history_limit = self.config.get("history_limit", DEFAULT_HISTORY_LIMIT)
        self.finished_game_limit = self.config.get(
            "finished_game_limit", DEFAULT_FINISHED_GAME_LIMIT
        )

        self._games: Dict[str, _Game] = {}
        self._finished: Deque[str] = deque()
        self._history: Dict[str, Deque[Dict[str, Any]]] = {}
        self._stats: Dict[str, RoundStats] = {}
        self._registry_lock = threading.Lock()

    def start_game(self, user_id: str) -> Tuple[str, RoundState]:
        """
        Deal a new round for a user.

        Args:
            user_id: Owner of the new game

        Returns:
            The new game id and its opening state
        """
        state = self.engine.start_round()
        game = _Game(user_id, state)

        with self._registry_lock:
            self._games[state.id] = game

        self.engine.event_bus.emit(
            EngineEventType.GAME_CREATED,
            {"game_id": state.id, "user_id": user_id, "timestamp": state.timestamp},
        )
        logger.info("Started game %s for user %s", state.id, user_id)
        return state.id, state

    def hit(self, game_id: str) -> RoundState:
        """
        Apply a hit to a game.

        Args:
            game_id: The game to act on

        Returns:
            The game's new state
        """
        return self._apply(game_id, "hit", self.engine.apply_hit)

    def stand(self, game_id: str) -> RoundState:
        """
        Apply a stand to a game, finishing it.

        Args:
            game_id: The game to act on

        Returns:
            The game's final state
        """
        return self._apply(game_id, "stand", self.engine.apply_stand)

    def get_state(self, game_id: str) -> RoundState:
        """
        Get the latest state of a game.

        Args:
            game_id: The game to look up

        Returns:
            The current RoundState
        """
        game = self._get_game(game_id)
        with game.lock:
            return game.state

    def get_history(self, user_id: str) -> List[Dict[str, Any]]:
        """
        Get a user's finished rounds, oldest first.

        Args:
            user_id: The user to look up

        Returns:
            Wire dictionaries of the finished rounds
        """
        with self._registry_lock:
            return list(self._history.get(user_id, ()))

    def get_stats(self, user_id: str) -> Dict[str, Any]:
        """
        Get a user's win/loss/tie statistics.

        Args:
            user_id: The user to look up

        Returns:
            The RoundStats report
        """
        with self._registry_lock:
            stats = self._stats.get(user_id) or RoundStats()
            return stats.report()

    def discard_game(self, game_id: str) -> None:
        """
        Forget a game. Finished rounds stay in the user's history.

        Finished games are also forgotten on their own once more than
        ``finished_game_limit`` of them are held.

        Args:
            game_id: The game to drop
        """
        with self._registry_lock:
            if self._games.pop(game_id, None) is None:
                raise GameNotFoundError(game_id)
            if game_id in self._finished:
                self._finished.remove(game_id)

    def _get_game(self, game_id: str) -> _Game:
        with self._registry_lock:
            game = self._games.get(game_id)
        if game is None:
            raise GameNotFoundError(game_id)
        return game

    def _apply(
        self,
        game_id: str,
        action: str,
        transition: Callable[[RoundState], RoundState],
    ) -> RoundState:
        game = self._get_game(game_id)

        # One action per game at a time; the stored state is replaced before
        # the next caller can read it
        with game.lock:
            try:
                new_state = transition(game.state)
            except (InvalidActionError, InsufficientCardsError) as e:
                logger.warning("Rejected %s on game %s: %s", action, game_id, e)
                self.engine.event_bus.emit(
                    EngineEventType.ACTION_REJECTED,
                    {"game_id": game_id, "action": action, "reason": str(e)},
                )
                raise

            game.state = new_state
            if new_state.is_game_over and not game.recorded:
                self._record(game.user_id, new_state)
                game.recorded = True

        logger.debug(
            "Game %s after %s: status=%s player=%d dealer=%d",
            game_id,
            action,
            new_state.status.value,
            new_state.player_score,
            new_state.dealer_score,
        )
        return new_state

    def _record(self, user_id: str, state: RoundState) -> None:
        with self._registry_lock:
            history = self._history.setdefault(
                user_id, deque(maxlen=self.history_limit)
            )
            history.append(state.to_dict())
            self._stats.setdefault(user_id, RoundStats()).update(state.status)

            # Oldest finished games leave the registry first; active ones stay
            self._finished.append(state.id)
            while len(self._finished) > self.finished_game_limit:
                self._games.pop(self._finished.popleft(), None)

        logger.info(
            "Game %s for user %s finished: %s", state.id, user_id, state.status.value
        )
