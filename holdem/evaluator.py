from __future__ import annotations

from collections import Counter
from typing import Dict, List, Optional, Sequence

from .cards import Card
from .models import HandCategory, HandResult

# Each category owns a band of one million; kickers never reach the next band.
STRAIGHT_FLUSH = 8_000_000
FOUR_OF_A_KIND = 7_000_000
FULL_HOUSE = 6_000_000
FLUSH = 5_000_000
STRAIGHT = 4_000_000
THREE_OF_A_KIND = 3_000_000
TWO_PAIR = 2_000_000
PAIR = 1_000_000

CATEGORY_FLOOR = {
    HandCategory.STRAIGHT_FLUSH: STRAIGHT_FLUSH,
    HandCategory.FOUR_OF_A_KIND: FOUR_OF_A_KIND,
    HandCategory.FULL_HOUSE: FULL_HOUSE,
    HandCategory.FLUSH: FLUSH,
    HandCategory.STRAIGHT: STRAIGHT,
    HandCategory.THREE_OF_A_KIND: THREE_OF_A_KIND,
    HandCategory.TWO_PAIR: TWO_PAIR,
    HandCategory.PAIR: PAIR,
    HandCategory.HIGH_CARD: 0,
}

RANK_NAMES = {
    2: "Two",
    3: "Three",
    4: "Four",
    5: "Five",
    6: "Six",
    7: "Seven",
    8: "Eight",
    9: "Nine",
    10: "Ten",
    11: "Jack",
    12: "Queen",
    13: "King",
    14: "Ace",
}

WAITING = HandResult(score=0, category=HandCategory.WAITING, description="Waiting for cards")
WHEEL = (14, 5, 4, 3, 2)


def rank_name(value: int) -> str:
    return RANK_NAMES[value]


def rank_plural(value: int) -> str:
    name = RANK_NAMES[value]
    return f"{name}es" if name.endswith("x") else f"{name}s"


def pack_kickers(values: Sequence[int]) -> int:
    """Base-15 positional packing; valid because card values never exceed 14."""
    total = 0
    for value in values:
        total = total * 15 + value
    return total


def evaluate_hand(hole_cards: Sequence[Card], community_cards: Sequence[Card] = ()) -> HandResult:
    """Score the best five-card hand out of up to seven cards. Higher scores win."""
    cards = list(hole_cards) + list(community_cards)
    if len(cards) > 7:
        raise ValueError(f"Expected at most 7 cards, got {len(cards)}")
    if len(cards) < 5:
        return WAITING

    ordered = sorted(cards, key=lambda card: card.value, reverse=True)
    values = [card.value for card in ordered]

    by_suit: Dict[str, List[int]] = {}
    for card in ordered:
        by_suit.setdefault(card.suit, []).append(card.value)
    flush_values = next((suited for suited in by_suit.values() if len(suited) >= 5), None)

    straight_high = _straight_high(values)

    counts = Counter(values)
    quads = sorted((v for v, c in counts.items() if c == 4), reverse=True)
    trips = sorted((v for v, c in counts.items() if c == 3), reverse=True)
    pairs = sorted((v for v, c in counts.items() if c == 2), reverse=True)

    if flush_values and straight_high:
        flush_high = _straight_high(flush_values)
        if flush_high:
            description = "Royal Flush" if flush_high == 14 else f"Straight Flush, {rank_name(flush_high)} High"
            return HandResult(STRAIGHT_FLUSH + flush_high, HandCategory.STRAIGHT_FLUSH, description)

    if quads:
        kicker = next(v for v in values if v != quads[0])
        return HandResult(
            FOUR_OF_A_KIND + quads[0] * 100 + kicker,
            HandCategory.FOUR_OF_A_KIND,
            f"Four {rank_plural(quads[0])}",
        )

    if trips and (len(trips) > 1 or pairs):
        trip_value = trips[0]
        pair_value = trips[1] if len(trips) > 1 else pairs[0]
        return HandResult(
            FULL_HOUSE + trip_value * 100 + pair_value,
            HandCategory.FULL_HOUSE,
            f"Full House, {rank_plural(trip_value)} full of {rank_plural(pair_value)}",
        )

    if flush_values:
        top = flush_values[:5]
        return HandResult(FLUSH + pack_kickers(top), HandCategory.FLUSH, f"Flush, {rank_name(top[0])} High")

    if straight_high:
        return HandResult(STRAIGHT + straight_high, HandCategory.STRAIGHT, f"Straight, {rank_name(straight_high)} High")

    if trips:
        kickers = [v for v in values if v != trips[0]][:2]
        return HandResult(
            THREE_OF_A_KIND + trips[0] * 1000 + kickers[0] * 10 + kickers[1],
            HandCategory.THREE_OF_A_KIND,
            f"Three {rank_plural(trips[0])}",
        )

    if len(pairs) >= 2:
        high, low = pairs[0], pairs[1]
        kicker = next(v for v in values if v not in (high, low))
        return HandResult(
            TWO_PAIR + high * 1000 + low * 10 + kicker,
            HandCategory.TWO_PAIR,
            f"Two Pair, {rank_plural(high)} and {rank_plural(low)}",
        )

    if pairs:
        kickers = [v for v in values if v != pairs[0]][:3]
        return HandResult(
            PAIR + pairs[0] * 10_000 + pack_kickers(kickers),
            HandCategory.PAIR,
            f"Pair of {rank_plural(pairs[0])}",
        )

    return HandResult(pack_kickers(values[:5]), HandCategory.HIGH_CARD, f"High Card {rank_name(values[0])}")


def _straight_high(values: Sequence[int]) -> Optional[int]:
    distinct = sorted(set(values), reverse=True)
    for idx in range(len(distinct) - 4):
        if distinct[idx] - distinct[idx + 4] == 4:
            return distinct[idx]
    if set(WHEEL).issubset(distinct):
        return 5
    return None


def category_of(score: int) -> HandCategory:
    for category, floor in CATEGORY_FLOOR.items():
        if score >= floor:
            return category
    return HandCategory.HIGH_CARD
