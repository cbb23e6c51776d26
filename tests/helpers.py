from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from holdem.cards import Card, build_deck, parse_cards
from holdem.game import GameEngine
from holdem.models import ActionType, PlayerView, TableConfig


def create_engine(
    *,
    seats: int = 5,
    starting_stack: int = 1_000,
    sb: int = 10,
    bb: int = 20,
    split_ties: bool = True,
) -> GameEngine:
    """Instantiate a game engine with a populated table (human at seat 0)."""
    engine = GameEngine(
        TableConfig(seats=seats, starting_stack=starting_stack, sb=sb, bb=bb, split_ties=split_ties)
    )
    engine.add_player("You")
    for idx in range(1, seats):
        engine.add_player(f"Bot{idx}", is_bot=True)
    return engine


def stack_deck(monkeypatch, labels: Sequence[str]) -> List[Card]:
    """Make the next shuffle deal ``labels`` first, in order.

    Hole cards go two at a time to each seat in seat order, then flop, turn
    and river come off the top.
    """
    top = parse_cards(labels)
    rest = [card for card in build_deck() if card not in top]
    order = rest + list(reversed(top))
    monkeypatch.setattr("holdem.game.shuffle_deck", lambda cards, rng=None: list(order))
    return top


def actor_id(engine: GameEngine) -> str:
    actor = engine.current_player
    assert actor is not None
    return actor.id


def perform_actions(engine: GameEngine, actions: Iterable[Tuple[ActionType, Optional[int]]]) -> None:
    """Apply a scripted sequence of (action, amount) for whoever is to act."""
    for action, amount in actions:
        engine.apply_action(actor_id(engine), action, amount)


def passive_action(engine: GameEngine) -> Tuple[ActionType, Optional[int]]:
    legal, *_ = engine.legal_actions(actor_id(engine))
    if ActionType.CHECK in legal:
        return ActionType.CHECK, None
    if ActionType.CALL in legal:
        return ActionType.CALL, None
    return ActionType.FOLD, None


def auto_complete_hand(engine: GameEngine) -> None:
    """Check or call every decision until the hand finishes."""
    while not engine.is_hand_complete():
        action, amount = passive_action(engine)
        engine.apply_action(actor_id(engine), action, amount)


def fold_to_last(engine: GameEngine) -> None:
    while not engine.is_hand_complete():
        engine.apply_action(actor_id(engine), ActionType.FOLD)


def total_chips(engine: GameEngine) -> int:
    return sum(player.chips + player.bet for player in engine.players) + engine.pot


class CallingPolicy:
    """Bot policy that never folds or raises."""

    def decide(self, player: PlayerView, current_bet: int) -> Tuple[ActionType, Optional[int]]:
        if current_bet > player.bet:
            return ActionType.CALL, None
        return ActionType.CHECK, None


class FixedRng:
    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value
