import random

import pytest

from holdem.cards import build_deck, parse_cards
from holdem.evaluator import CATEGORY_FLOOR, category_of, evaluate_hand
from holdem.models import HandCategory


def evaluate(hole, board):
    return evaluate_hand(parse_cards(hole), parse_cards(board))


def test_royal_flush_scores_top_of_straight_flush_band():
    result = evaluate(["As", "Ks"], ["Qs", "Js", "10s", "2d", "3c"])
    assert result.category == HandCategory.STRAIGHT_FLUSH
    assert result.score == 8_000_014
    assert "Royal Flush" in result.description


def test_trips_with_second_pair_is_full_house():
    result = evaluate(["2c", "2d"], ["2h", "7s", "7d", "9c", "Kd"])
    assert result.category == HandCategory.FULL_HOUSE
    assert result.score == 6_000_207
    assert result.description == "Full House, Twos full of Sevens"


def test_wheel_straight_counts_ace_low():
    result = evaluate(["Ad", "2c"], ["3h", "4s", "5d", "9s", "Kc"])
    assert result.category == HandCategory.STRAIGHT
    assert result.score == 4_000_005
    assert result.description == "Straight, Five High"


def test_wheel_straight_flush():
    result = evaluate(["Ah", "2h"], ["3h", "4h", "5h", "Kd", "Kc"])
    assert result.score == 8_000_005
    assert result.description == "Straight Flush, Five High"


def test_higher_straight_wins_over_wheel_in_same_cards():
    result = evaluate(["Ad", "2c"], ["3h", "4s", "5d", "6s", "Kc"])
    assert result.score == 4_000_006


def test_duplicate_values_do_not_break_straight_detection():
    result = evaluate(["9h", "9d"], ["10c", "Js", "Qd", "Kh", "2c"])
    assert result.category == HandCategory.STRAIGHT
    assert result.score == 4_000_013


@pytest.mark.parametrize(
    "hole,board,category,score",
    [
        (["As", "Ah"], ["Ad", "Ac", "Kd", "2s", "3h"], HandCategory.FOUR_OF_A_KIND, 7_001_413),
        (["Ah", "Jh"], ["9h", "6h", "2h", "Kd", "Qc"], HandCategory.FLUSH, 5_747_992),
        (["8h", "8d"], ["8s", "Qd", "Js", "2c", "3h"], HandCategory.THREE_OF_A_KIND, 3_008_131),
        (["7h", "7d"], ["4s", "4c", "Ad", "2h", "3c"], HandCategory.TWO_PAIR, 2_007_054),
        (["Kh", "Ks"], ["Ad", "Qc", "9s", "2h", "3c"], HandCategory.PAIR, 1_133_339),
        (["Ah", "Kd"], ["Jc", "9s", "4d", "2h", "3c"], HandCategory.HIGH_CARD, 755_239),
    ],
)
def test_category_scores(hole, board, category, score):
    result = evaluate(hole, board)
    assert result.category == category
    assert result.score == score


def test_second_trips_is_demoted_to_pair():
    result = evaluate(["9h", "9d"], ["9s", "4c", "4d", "4h", "Kc"])
    assert result.category == HandCategory.FULL_HOUSE
    assert result.score == 6_000_904


def test_two_pair_kicker_can_come_from_a_third_pair():
    result = evaluate(["Qh", "Qd"], ["8s", "8c", "Jd", "Jh", "2c"])
    assert result.description == "Two Pair, Queens and Jacks"
    assert result.score == 2_000_000 + 12 * 1000 + 11 * 10 + 8


def test_flush_kickers_order_hands():
    higher = evaluate(["Ah", "Jh"], ["9h", "6h", "3h", "2c", "2d"])
    lower = evaluate(["Ah", "Jh"], ["9h", "5h", "4h", "2c", "2d"])
    assert higher.score > lower.score


def test_pair_kickers_order_hands():
    hand_a = evaluate(["Ah", "Ad"], ["Kc", "Qs", "9h", "2d", "3c"])
    hand_b = evaluate(["Ah", "Ad"], ["Qc", "Js", "8h", "2d", "3c"])
    assert hand_a.score > hand_b.score


def test_fewer_than_five_cards_is_waiting():
    result = evaluate(["Ah", "Ad"], [])
    assert result.category == HandCategory.WAITING
    assert result.score == 0


def test_more_than_seven_cards_rejected():
    with pytest.raises(ValueError):
        evaluate(["Ah", "Ad"], ["2c", "3c", "4c", "5c", "6c", "7c"])


def test_scores_stay_inside_their_category_band():
    rng = random.Random(2024)
    deck = build_deck()
    ceilings = {
        HandCategory.STRAIGHT_FLUSH: 9_000_000,
        HandCategory.FOUR_OF_A_KIND: 8_000_000,
        HandCategory.FULL_HOUSE: 7_000_000,
        HandCategory.FLUSH: 6_000_000,
        HandCategory.STRAIGHT: 5_000_000,
        HandCategory.THREE_OF_A_KIND: 4_000_000,
        HandCategory.TWO_PAIR: 3_000_000,
        HandCategory.PAIR: 2_000_000,
        HandCategory.HIGH_CARD: 1_000_000,
    }
    for _ in range(5_000):
        cards = rng.sample(deck, 7)
        result = evaluate_hand(cards[:2], cards[2:])
        assert CATEGORY_FLOOR[result.category] <= result.score < ceilings[result.category]
        assert category_of(result.score) == result.category


def test_category_order_is_total():
    hands = [
        evaluate(["Ah", "Kd"], ["Jc", "9s", "4d", "2h", "3c"]),
        evaluate(["Kh", "Ks"], ["Ad", "Qc", "9s", "2h", "3c"]),
        evaluate(["7h", "7d"], ["4s", "4c", "Ad", "2h", "3c"]),
        evaluate(["8h", "8d"], ["8s", "Qd", "Js", "2c", "3h"]),
        evaluate(["Ad", "2c"], ["3h", "4s", "5d", "9s", "Kc"]),
        evaluate(["Ah", "Jh"], ["9h", "6h", "2h", "Kd", "Qc"]),
        evaluate(["2c", "2d"], ["2h", "7s", "7d", "9c", "Kd"]),
        evaluate(["As", "Ah"], ["Ad", "Ac", "Kd", "2s", "3h"]),
        evaluate(["Ah", "2h"], ["3h", "4h", "5h", "Kd", "Kc"]),
    ]
    scores = [hand.score for hand in hands]
    assert scores == sorted(scores)
