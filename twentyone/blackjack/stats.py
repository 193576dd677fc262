"""
This module contains the RoundStats class which is responsible for
tracking the win, loss and tie counts of finished rounds.
"""

from typing import Union

from twentyone.state.models import Outcome, RoundStatus, classify_result


class RoundStats:
    """
    A class that holds the statistics of a player's finished rounds.
    """

    def __init__(self):
        """
        Initializes the RoundStats with default values.
        """
        self.games_played = 0
        self.wins = 0
        self.losses = 0
        self.ties = 0

    @classmethod
    def from_report(cls, report) -> "RoundStats":
        """Rebuild stats from a dictionary produced by :meth:`report`."""
        stats = cls()
        stats.wins = report.get("wins", 0)
        stats.losses = report.get("losses", 0)
        stats.ties = report.get("ties", 0)
        stats.games_played = report.get(
            "games_played", stats.wins + stats.losses + stats.ties
        )
        return stats

    def update(self, status: Union[RoundStatus, str]) -> None:
        """Record a round result. Active rounds are not counted."""
        outcome = classify_result(status)
        if outcome is None:
            return

        self.games_played += 1
        if outcome is Outcome.WIN:
            self.wins += 1
        elif outcome is Outcome.LOSS:
            self.losses += 1
        else:
            self.ties += 1

    @property
    def win_rate(self) -> float:
        if not self.games_played:
            return 0.0
        return self.wins / self.games_played

    def report(self):
        """
        Returns a dictionary containing the current statistics.
        """
        return {
            "games_played": self.games_played,
            "wins": self.wins,
            "losses": self.losses,
            "ties": self.ties,
            "win_rate": self.win_rate,
        }
