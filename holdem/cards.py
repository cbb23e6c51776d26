from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .errors import DeckExhausted

RANKS = ("2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A")
SUITS = ("hearts", "diamonds", "clubs", "spades")

RANK_VALUE = {rank: idx for idx, rank in enumerate(RANKS, start=2)}
SUIT_BY_LETTER = {suit[0]: suit for suit in SUITS}
SUIT_SYMBOL = {"hearts": "♥", "diamonds": "♦", "clubs": "♣", "spades": "♠"}


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str

    def __post_init__(self) -> None:
        if self.rank not in RANK_VALUE:
            raise ValueError(f"Invalid rank: {self.rank}")
        if self.suit not in SUITS:
            raise ValueError(f"Invalid suit: {self.suit}")

    @property
    def value(self) -> int:
        return RANK_VALUE[self.rank]

    @property
    def label(self) -> str:
        return f"{self.rank}{self.suit[0]}"

    def __str__(self) -> str:
        return f"{self.rank}{SUIT_SYMBOL[self.suit]}"


def build_deck() -> List[Card]:
    return [Card(rank, suit) for rank in RANKS for suit in SUITS]


def shuffle_deck(cards: Sequence[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """Fisher-Yates over the whole sequence; returns a new list."""
    rng = rng or random.Random()
    shuffled = list(cards)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


class Deck:
    """Cards still undealt this hand. The top of the deck is the end of the list."""

    def __init__(self, cards: Optional[Iterable[Card]] = None) -> None:
        self.cards: List[Card] = list(cards) if cards is not None else []

    @classmethod
    def shuffled(cls, rng: Optional[random.Random] = None) -> "Deck":
        return cls(shuffle_deck(build_deck(), rng))

    def __len__(self) -> int:
        return len(self.cards)

    def draw(self) -> Card:
        if not self.cards:
            raise DeckExhausted("Not enough cards left in deck")
        return self.cards.pop()

    def deal(self, count: int) -> List[Card]:
        if len(self.cards) < count:
            raise DeckExhausted("Not enough cards left in deck")
        return [self.draw() for _ in range(count)]


def cards_to_labels(cards: Iterable[Card]) -> List[str]:
    return [card.label for card in cards]


def parse_label(label: str) -> Card:
    if len(label) not in (2, 3):
        raise ValueError(f"Invalid card label: {label}")
    rank, suit_letter = label[:-1].upper(), label[-1].lower()
    if rank == "T":
        rank = "10"
    suit = SUIT_BY_LETTER.get(suit_letter)
    if suit is None:
        raise ValueError(f"Invalid suit: {suit_letter}")
    return Card(rank, suit)


def parse_cards(labels: Sequence[str]) -> List[Card]:
    return [parse_label(label) for label in labels]
