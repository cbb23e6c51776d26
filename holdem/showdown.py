from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .cards import Card
from .evaluator import evaluate_hand
from .models import HandAward, HandCategory, HandResult, Player

UNCONTESTED = HandResult(score=0, category=HandCategory.UNCONTESTED, description="Last Man Standing")


@dataclass
class ShowdownOutcome:
    results: Dict[str, HandResult] = field(default_factory=dict)
    awards: List[HandAward] = field(default_factory=list)


def award_uncontested(player: Player, amount: int) -> HandAward:
    player.chips += amount
    return HandAward(player_id=player.id, result=UNCONTESTED, amount=amount)


def resolve_showdown(
    players: Sequence[Player],
    community: Sequence[Card],
    pot: int,
    *,
    dealer_index: int = 0,
    split_ties: bool = True,
) -> ShowdownOutcome:
    """Score every contender and pay the whole pot to the best hand(s).

    Side pots are not built: a short all-in contests the full pot. With
    ``split_ties`` tied hands share the pot and odd chips go to the winners
    closest to the dealer's left; without it the first best hand in seat
    order takes everything.
    """
    outcome = ShowdownOutcome()
    contenders = [(idx, player) for idx, player in enumerate(players) if player.is_active]
    if not contenders:
        return outcome

    for _, player in contenders:
        outcome.results[player.id] = evaluate_hand(player.hole_cards, community)

    best = max(outcome.results[player.id].score for _, player in contenders)
    winners = [(idx, player) for idx, player in contenders if outcome.results[player.id].score == best]
    if not split_ties:
        winners = winners[:1]

    seats = len(players)
    winners.sort(key=lambda item: (item[0] - dealer_index - 1) % seats)
    share, remainder = divmod(pot, len(winners))
    for position, (_, player) in enumerate(winners):
        payout = share + (1 if position < remainder else 0)
        player.chips += payout
        outcome.awards.append(HandAward(player_id=player.id, result=outcome.results[player.id], amount=payout))
    return outcome
