#!/usr/bin/env python3
"""
Play blackjack rounds from the command line with a simple hit-below-N policy.

Usage:
    python examples/round_demo.py --rounds 5 --seed 42 --hit-below 17
"""

import argparse
import json
import logging

from twentyone.api import BlackjackTable
from twentyone.events import EventBus, EngineEventType
from twentyone.verification import win_rate_interval
from twentyone.blackjack.stats import RoundStats


def parse_args():
    parser = argparse.ArgumentParser(description="Play seeded blackjack rounds")
    parser.add_argument("--rounds", type=int, default=5, help="Rounds to play")
    parser.add_argument("--seed", type=int, default=None, help="Shuffle seed")
    parser.add_argument(
        "--hit-below",
        type=int,
        default=17,
        help="Player hits while their score is below this value",
    )
    parser.add_argument("--json", action="store_true", help="Print final states as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log engine events")
    return parser.parse_args()


def main():
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.verbose:
        log = logging.getLogger("twentyone.demo")
        EventBus.get_instance().on(
            EngineEventType.ROUND_ENDED,
            lambda data: log.debug("round ended: %s", data),
        )

    table = BlackjackTable(config={"seed": args.seed})
    user_id = "demo"

    for _ in range(args.rounds):
        game_id, state = table.start_game(user_id)
        while not state.is_game_over and state.player_score < args.hit_below:
            state = table.hit(game_id)
        if not state.is_game_over:
            state = table.stand(game_id)

        if args.json:
            print(json.dumps(state.to_dict()))
        else:
            player = ", ".join(str(card) for card in state.player_hand)
            dealer = ", ".join(str(card) for card in state.dealer_hand)
            print(f"Player [{player}] = {state.player_score}")
            print(f"Dealer [{dealer}] = {state.dealer_score}")
            print(f"Result: {state.status.value}")
            print()

    report = table.get_stats(user_id)
    interval = win_rate_interval(RoundStats.from_report(report))
    print(f"Stats: {report}")
    print(f"95% win rate interval: [{interval.lower:.3f}, {interval.upper:.3f}]")


if __name__ == "__main__":
    main()
