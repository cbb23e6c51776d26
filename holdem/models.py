from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .cards import Card, cards_to_labels


class Phase(str, Enum):
    IDLE = "idle"
    PRE_FLOP = "preflop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"
    SHOWDOWN = "showdown"


BETTING_PHASES = (Phase.PRE_FLOP, Phase.FLOP, Phase.TURN, Phase.RIVER)


class ActionType(str, Enum):
    FOLD = "fold"
    CHECK = "check"
    CALL = "call"
    RAISE = "raise"
    ALL_IN = "all-in"


class HandCategory(str, Enum):
    WAITING = "Waiting"
    UNCONTESTED = "Uncontested"
    HIGH_CARD = "High Card"
    PAIR = "Pair"
    TWO_PAIR = "Two Pair"
    THREE_OF_A_KIND = "Three of a Kind"
    STRAIGHT = "Straight"
    FLUSH = "Flush"
    FULL_HOUSE = "Full House"
    FOUR_OF_A_KIND = "Four of a Kind"
    STRAIGHT_FLUSH = "Straight Flush"


@dataclass
class TableConfig:
    seats: int = 5
    starting_stack: int = 1_000
    sb: int = 10
    bb: int = 20
    bot_delay_ms: Tuple[int, int] = (1_000, 2_000)
    split_ties: bool = True


@dataclass(frozen=True)
class HandResult:
    score: int
    category: HandCategory
    description: str

    def to_payload(self) -> Dict[str, object]:
        return {"score": self.score, "category": self.category.value, "description": self.description}


@dataclass(frozen=True)
class HandAward:
    player_id: str
    result: HandResult
    amount: int

    def to_payload(self) -> Dict[str, object]:
        return {"player_id": self.player_id, "amount": self.amount, **self.result.to_payload()}


@dataclass(frozen=True)
class PlayerView:
    id: str
    name: str
    chips: int
    bet: int
    hole_cards: Tuple[Card, ...]
    is_bot: bool
    is_active: bool
    has_acted: bool
    last_action: Optional[ActionType]

    def to_payload(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "chips": self.chips,
            "bet": self.bet,
            "hole": cards_to_labels(self.hole_cards),
            "is_bot": self.is_bot,
            "is_active": self.is_active,
            "has_acted": self.has_acted,
            "last_action": self.last_action.value if self.last_action else None,
        }


@dataclass
class Player:
    id: str
    name: str
    chips: int
    is_bot: bool = False
    bet: int = 0
    hole_cards: List[Card] = field(default_factory=list)
    is_active: bool = False
    has_acted: bool = False
    last_action: Optional[ActionType] = None

    def reset_for_hand(self) -> None:
        self.reset_for_round()
        self.hole_cards = []
        self.is_active = self.chips > 0

    def reset_for_round(self) -> None:
        self.bet = 0
        self.has_acted = False
        self.last_action = None

    def commit(self, amount: int) -> int:
        amount = min(amount, self.chips)
        self.chips -= amount
        self.bet += amount
        return amount

    def view(self) -> PlayerView:
        return PlayerView(
            id=self.id,
            name=self.name,
            chips=self.chips,
            bet=self.bet,
            hole_cards=tuple(self.hole_cards),
            is_bot=self.is_bot,
            is_active=self.is_active,
            has_acted=self.has_acted,
            last_action=self.last_action,
        )


@dataclass(frozen=True)
class TableSnapshot:
    hand_number: int
    phase: Phase
    players: Tuple[PlayerView, ...]
    community: Tuple[Card, ...]
    pot: int
    current_bet: int
    dealer_index: int
    turn_index: Optional[int]
    awards: Tuple[HandAward, ...] = ()

    @property
    def pot_total(self) -> int:
        return self.pot + sum(player.bet for player in self.players)

    def for_viewer(self, player_id: Optional[str]) -> "TableSnapshot":
        """Hide hole cards the viewer is not allowed to see yet."""
        players = []
        for player in self.players:
            revealed = player.id == player_id or (self.phase == Phase.SHOWDOWN and player.is_active)
            players.append(player if revealed else replace(player, hole_cards=()))
        return replace(self, players=tuple(players))

    def to_payload(self) -> Dict[str, object]:
        return {
            "hand_number": self.hand_number,
            "phase": self.phase.value,
            "players": [player.to_payload() for player in self.players],
            "community": cards_to_labels(self.community),
            "pot": self.pot,
            "pot_total": self.pot_total,
            "current_bet": self.current_bet,
            "dealer_index": self.dealer_index,
            "turn_index": self.turn_index,
            "awards": [award.to_payload() for award in self.awards],
        }
