import random
from collections import Counter

import pytest

from holdem.cards import Card, Deck, RANKS, SUITS, build_deck, parse_cards, parse_label, shuffle_deck
from holdem.errors import DeckExhausted


class RecordingRng:
    def __init__(self) -> None:
        self.calls: list[tuple[int, int]] = []

    def randint(self, low: int, high: int) -> int:
        self.calls.append((low, high))
        return low


def test_build_deck_yields_52_unique_cards_with_values():
    deck = build_deck()
    assert len(deck) == 52
    assert len({(card.rank, card.suit) for card in deck}) == 52
    assert {card.value for card in deck} == set(range(2, 15))
    assert Card("2", "clubs").value == 2
    assert Card("10", "hearts").value == 10
    assert Card("A", "spades").value == 14


def test_shuffle_is_a_permutation_and_leaves_input_untouched():
    original = build_deck()
    shuffled = shuffle_deck(original, random.Random(7))
    assert Counter(shuffled) == Counter(original)
    assert shuffled != original
    assert original == build_deck()


def test_shuffle_walks_from_last_index_down_to_one():
    rng = RecordingRng()
    shuffle_deck(build_deck(), rng)  # type: ignore[arg-type]
    assert rng.calls == [(0, i) for i in range(51, 0, -1)]


def test_shuffle_is_reproducible_with_seed():
    assert shuffle_deck(build_deck(), random.Random(3)) == shuffle_deck(build_deck(), random.Random(3))


def test_draw_takes_from_top_of_deck():
    deck = Deck(parse_cards(["2c", "3d", "As"]))
    assert deck.draw() == Card("A", "spades")
    assert len(deck) == 2
    assert deck.deal(2) == [Card("3", "diamonds"), Card("2", "clubs")]


def test_draw_raises_when_deck_exhausted():
    deck = Deck([Card("A", "hearts"), Card("K", "diamonds")])
    deck.deal(2)
    with pytest.raises(DeckExhausted, match="Not enough cards"):
        deck.draw()


def test_deal_does_not_draw_partially():
    deck = Deck([Card("A", "hearts")])
    with pytest.raises(DeckExhausted):
        deck.deal(2)
    assert len(deck) == 1


def test_fresh_shuffled_deck_has_all_cards():
    deck = Deck.shuffled(random.Random(1))
    assert sorted(deck.cards, key=lambda c: (c.value, c.suit)) == sorted(build_deck(), key=lambda c: (c.value, c.suit))


def test_card_validation_rejects_invalid_values():
    with pytest.raises(ValueError, match="Invalid rank"):
        Card("1", "hearts")
    with pytest.raises(ValueError, match="Invalid suit"):
        Card("A", "stars")


def test_labels_round_trip_and_accept_ten_shorthand():
    assert parse_label("10h") == Card("10", "hearts")
    assert parse_label("Td") == Card("10", "diamonds")
    assert parse_label("As").label == "As"
    assert str(parse_label("Qc")) == "Q♣"
    with pytest.raises(ValueError):
        parse_label("Ax")
    with pytest.raises(ValueError):
        parse_label("A")


def test_rank_and_suit_tables():
    assert RANKS[0] == "2" and RANKS[-1] == "A"
    assert set(SUITS) == {"hearts", "diamonds", "clubs", "spades"}
