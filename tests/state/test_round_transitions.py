"""
Tests for the round transitions: opening deal, hit and stand.
"""

from unittest.mock import MagicMock

import pytest

from twentyone.blackjack.rules import Rules
from twentyone.common.deck import InsufficientCardsError
from twentyone.events import EventBus, EngineEventType
from twentyone.state import (
    InvalidActionError,
    RoundStatus,
    RoundTransitionEngine,
    score_hand,
)


def test_start_round_deals_player_first(stacked_deck):
    deck = stacked_deck(["A", "K"], ["9", "7"], ["5", "6"])
    expected = deck.cards

    state = RoundTransitionEngine.start_round(deck)

    assert list(state.player_hand) == expected[:2]
    assert list(state.dealer_hand) == expected[2:4]
    assert list(state.remaining_deck) == expected[4:]
    assert state.player_score == 21
    assert state.dealer_score == 16
    assert state.is_player_turn is True
    assert state.is_game_over is False
    assert state.status is RoundStatus.ACTIVE


def test_start_round_consumes_the_deck(stacked_deck):
    deck = stacked_deck(["2", "3"], ["4", "5"], ["6"])
    RoundTransitionEngine.start_round(deck)
    assert deck.size == 1


def test_start_round_needs_four_cards(stacked_deck):
    deck = stacked_deck(["2", "3"], ["4"])
    before = deck.cards

    with pytest.raises(InsufficientCardsError):
        RoundTransitionEngine.start_round(deck)

    assert deck.size == 3
    assert deck.cards == before


def test_hit_adds_one_card(deal_round):
    state = deal_round(["5", "3"], ["10", "7"], ["4", "9"])

    new_state = RoundTransitionEngine.hit(state)

    assert len(new_state.player_hand) == 3
    assert new_state.player_hand[:2] == state.player_hand
    assert new_state.player_score == 12
    assert new_state.status is RoundStatus.ACTIVE
    assert new_state.is_game_over is False
    assert new_state.is_player_turn is True
    assert len(new_state.remaining_deck) == 1


def test_hit_to_exactly_21_stays_active(deal_round):
    state = RoundTransitionEngine.hit(deal_round(["10", "5"], ["10", "7"], ["6"]))
    assert state.player_score == 21
    assert state.status is RoundStatus.ACTIVE
    assert not state.is_game_over


def test_hit_bust_from_18_to_24(deal_round):
    state = deal_round(["K", "8"], ["9", "7"], ["6"])
    assert state.player_score == 18

    new_state = RoundTransitionEngine.hit(state)

    assert new_state.player_score == 24
    assert new_state.status is RoundStatus.PLAYER_BUST
    assert new_state.is_game_over is True
    # The turn flag is left as it was
    assert new_state.is_player_turn is True


def test_hit_soft_hand_does_not_bust(deal_round):
    state = RoundTransitionEngine.hit(deal_round(["A", "7"], ["10", "7"], ["9"]))
    # 11 + 7 + 9 = 27, the ace drops to 1
    assert state.player_score == 17
    assert state.status is RoundStatus.ACTIVE


def test_hit_leaves_previous_snapshot_untouched(deal_round):
    state = deal_round(["2", "3"], ["10", "7"], ["4", "5"])
    before = state.to_dict(include_deck=True)

    first = RoundTransitionEngine.hit(state)
    second = RoundTransitionEngine.hit(first)

    assert state.to_dict(include_deck=True) == before
    assert len(state.player_hand) == 2
    assert len(first.player_hand) == 3
    assert len(second.player_hand) == 4
    assert len(state.remaining_deck) == 2
    assert len(first.remaining_deck) == 1
    assert len(second.remaining_deck) == 0


def test_hit_on_empty_deck_raises_without_change(deal_round):
    state = deal_round(["2", "3"], ["10", "7"])
    before = state.to_dict(include_deck=True)

    with pytest.raises(InsufficientCardsError):
        RoundTransitionEngine.hit(state)

    assert state.to_dict(include_deck=True) == before


def test_hit_after_bust_is_rejected(deal_round):
    state = RoundTransitionEngine.hit(deal_round(["K", "8"], ["9", "7"], ["6", "2"]))
    assert state.is_game_over

    with pytest.raises(InvalidActionError) as excinfo:
        RoundTransitionEngine.hit(state)

    assert excinfo.value.action == "hit"
    assert excinfo.value.status is RoundStatus.PLAYER_BUST
    assert len(state.remaining_deck) == 1


def test_stand_after_bust_is_rejected(deal_round):
    state = RoundTransitionEngine.hit(deal_round(["K", "8"], ["9", "7"], ["6", "2"]))
    with pytest.raises(InvalidActionError):
        RoundTransitionEngine.stand(state)


def test_actions_after_stand_are_rejected(deal_round):
    state = RoundTransitionEngine.stand(deal_round(["K", "9"], ["10", "7"], ["2"]))
    assert state.is_game_over

    with pytest.raises(InvalidActionError):
        RoundTransitionEngine.hit(state)
    with pytest.raises(InvalidActionError):
        RoundTransitionEngine.stand(state)


def test_stand_dealer_draws_from_12_to_at_least_17(deal_round):
    state = deal_round(["K", "Q"], ["10", "2"], ["3", "4", "9"])

    final = RoundTransitionEngine.stand(state)

    assert len(final.dealer_hand) == 4
    assert final.dealer_score == score_hand(final.dealer_hand) == 19
    assert final.remaining_deck == state.remaining_deck[2:]
    assert final.is_player_turn is False
    assert final.is_game_over is True
    assert final.status is RoundStatus.PLAYER_WIN


def test_stand_tie_at_20(deal_round):
    final = RoundTransitionEngine.stand(deal_round(["K", "Q"], ["6", "4"], ["K"]))
    assert final.player_score == 20
    assert final.dealer_score == 20
    assert final.status is RoundStatus.TIE


def test_stand_dealer_bust(deal_round):
    final = RoundTransitionEngine.stand(deal_round(["10", "2"], ["10", "6"], ["K"]))
    assert final.dealer_score == 26
    assert final.status is RoundStatus.DEALER_BUST


def test_stand_dealer_win(deal_round):
    final = RoundTransitionEngine.stand(deal_round(["10", "7"], ["10", "8"], ["2"]))
    assert len(final.dealer_hand) == 2
    assert final.status is RoundStatus.DEALER_WIN


def test_stand_player_win(deal_round):
    final = RoundTransitionEngine.stand(deal_round(["10", "9"], ["10", "7"]))
    assert final.status is RoundStatus.PLAYER_WIN


def test_dealer_stands_on_soft_17(deal_round):
    final = RoundTransitionEngine.stand(deal_round(["10", "8"], ["A", "6"], ["4"]))
    assert len(final.dealer_hand) == 2
    assert final.dealer_score == 17
    assert final.status is RoundStatus.PLAYER_WIN


def test_dealer_ace_is_reduced_while_drawing(deal_round):
    # A + 5 = 16, + K = 16 after the ace drops, + 5 = 21
    final = RoundTransitionEngine.stand(deal_round(["10", "9"], ["A", "5"], ["K", "5", "2"]))
    assert len(final.dealer_hand) == 4
    assert final.dealer_score == 21
    assert final.status is RoundStatus.DEALER_WIN


def test_stand_with_custom_threshold(deal_round):
    final = RoundTransitionEngine.stand(
        deal_round(["10", "8"], ["10", "7"], ["2"]), Rules(stand_threshold=18)
    )
    assert final.dealer_score == 19
    assert final.status is RoundStatus.DEALER_WIN


def test_stand_asks_rules_before_each_dealer_draw(deal_round):
    rules = MagicMock(spec=Rules)
    rules.should_dealer_hit.side_effect = [True, False]

    state = deal_round(["10", "8"], ["10", "9"], ["2", "3"])

    final = RoundTransitionEngine.stand(state, rules)

    assert [c.args for c in rules.should_dealer_hit.call_args_list] == [(19,), (21,)]
    assert len(final.dealer_hand) == 3
    assert final.status is RoundStatus.DEALER_WIN


def test_stand_runs_out_of_cards_without_change(deal_round):
    state = deal_round(["10", "8"], ["2", "3"], ["2"])
    before = state.to_dict(include_deck=True)

    with pytest.raises(InsufficientCardsError):
        RoundTransitionEngine.stand(state)

    assert state.to_dict(include_deck=True) == before
    assert not state.is_game_over


def test_transitions_emit_events(deal_round):
    bus = EventBus.get_instance()
    seen = MagicMock()
    bus.on_any(seen)

    state = deal_round(["5", "3"], ["10", "6"], ["2", "K"])
    state = RoundTransitionEngine.hit(state)
    state = RoundTransitionEngine.stand(state)

    event_types = [call[0][0][0] for call in seen.call_args_list]
    assert event_types == [
        "ROUND_STARTED",
        "CARD_DEALT",
        "PLAYER_ACTION",
        "PLAYER_ACTION",
        "DEALER_ACTION",
        "DEALER_ACTION",
        "ROUND_ENDED",
    ]
    assert seen.call_args_list[-1][0][0][1]["status"] == "dealer_bust"


def test_bust_emits_hand_busted_and_round_ended(deal_round):
    bus = EventBus.get_instance()
    busted = MagicMock()
    ended = MagicMock()
    bus.on(EngineEventType.HAND_BUSTED, busted)
    bus.on(EngineEventType.ROUND_ENDED, ended)

    state = deal_round(["K", "8"], ["9", "7"], ["6"])
    RoundTransitionEngine.hit(state)

    busted.assert_called_once()
    assert busted.call_args[0][0]["player_score"] == 24
    ended.assert_called_once()
    assert ended.call_args[0][0]["status"] == "player_bust"
