from __future__ import annotations

import random
from typing import Optional, Protocol, Sequence, Tuple

from .cards import Card
from .evaluator import evaluate_hand
from .models import ActionType, HandCategory, PlayerView

Decision = Tuple[ActionType, Optional[int]]


class BotPolicy(Protocol):
    def decide(self, player: PlayerView, current_bet: int) -> Decision:
        ...


def _raise_or(player: PlayerView, current_bet: int, target: int, fallback: ActionType) -> Decision:
    # Never wager more than the stack; give up on the raise if it cannot exceed the bet.
    target = min(target, player.chips + player.bet)
    if target <= current_bet:
        return fallback, None
    return ActionType.RAISE, target


class RandomBotPolicy:
    """Reference table bot: mostly passive, with occasional random raises."""

    def __init__(self, big_blind: int, rng: Optional[random.Random] = None) -> None:
        self.big_blind = big_blind
        self.rng = rng or random.Random()

    def decide(self, player: PlayerView, current_bet: int) -> Decision:
        roll = self.rng.random()
        if current_bet - player.bet <= 0:
            if roll > 0.8:
                return _raise_or(player, current_bet, current_bet + self.big_blind, ActionType.CHECK)
            return ActionType.CHECK, None

        if roll > 0.9:
            return _raise_or(player, current_bet, current_bet * 2, ActionType.CALL)
        if roll > 0.3:
            return ActionType.CALL, None
        return ActionType.FOLD, None


def rough_hand_strength(hole: Sequence[Card]) -> int:
    """Very rough proxy for pre-flop hand quality used to drive aggression choices."""
    if len(hole) < 2:
        return 0

    values = [card.value for card in hole]
    score = sum(values)
    if values[0] == values[1]:
        score += 14  # pairs are quite strong pre-flop
    else:
        gap = abs(values[0] - values[1])
        if gap == 1:
            score += 4
        elif gap == 2:
            score += 2
    if hole[0].suit == hole[1].suit:
        score += 3
    if min(values) >= 11:
        score += 2

    return score


class HandStrengthBotPolicy:
    """Hole-card-aware bot: raises premium holdings and folds junk facing a bet.

    Post-flop it uses the evaluator on whatever board the engine has dealt,
    which callers hand over through ``observe_board`` before asking for a decision.
    """

    def __init__(self, big_blind: int, rng: Optional[random.Random] = None) -> None:
        self.big_blind = big_blind
        self.rng = rng or random.Random()
        self.board: Tuple[Card, ...] = ()

    def observe_board(self, community: Sequence[Card]) -> None:
        self.board = tuple(community)

    def decide(self, player: PlayerView, current_bet: int) -> Decision:
        facing_bet = current_bet - player.bet > 0
        strength = self._strength(player)
        passive = ActionType.CALL if facing_bet else ActionType.CHECK

        # Always attack with premium holdings.
        if strength >= 36:
            return _raise_or(player, current_bet, max(current_bet * 2, current_bet + self.big_blind), passive)

        probability = min(0.6, strength / 60.0)
        if self.rng.random() < probability / 3:
            return _raise_or(player, current_bet, current_bet + self.big_blind, passive)
        if not facing_bet:
            return ActionType.CHECK, None
        owed = current_bet - player.bet
        if strength < 16 and owed > self.big_blind * 2:
            return ActionType.FOLD, None
        return ActionType.CALL, None

    def _strength(self, player: PlayerView) -> int:
        strength = rough_hand_strength(player.hole_cards)
        if len(player.hole_cards) + len(self.board) < 5:
            return strength
        result = evaluate_hand(player.hole_cards, self.board)
        if result.category in (HandCategory.HIGH_CARD, HandCategory.WAITING):
            return strength // 2
        if result.category == HandCategory.PAIR:
            return strength + 6
        return 40
