from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .cards import Card, Deck, build_deck, cards_to_labels, shuffle_deck
from .errors import InvalidAction, UnknownPlayer
from .models import (
    BETTING_PHASES,
    ActionType,
    HandAward,
    Phase,
    Player,
    TableConfig,
    TableSnapshot,
)
from .showdown import award_uncontested, resolve_showdown

LOGGER = logging.getLogger("holdem_engine")

# GameEngine keeps all table state in memory. No timers or sockets live here,
# only poker rules, chip accounting, and betting order.

NEXT_PHASE = {
    Phase.PRE_FLOP: Phase.FLOP,
    Phase.FLOP: Phase.TURN,
    Phase.TURN: Phase.RIVER,
    Phase.RIVER: Phase.SHOWDOWN,
}
STREET_CARDS = {Phase.FLOP: 3, Phase.TURN: 1, Phase.RIVER: 1}


@dataclass
class TableState:
    # Everything about the current hand that is not per-player.
    deck: Deck = field(default_factory=Deck)
    community: List[Card] = field(default_factory=list)
    pot: int = 0
    current_bet: int = 0
    dealer_index: int = 0
    turn_index: Optional[int] = None
    phase: Phase = Phase.IDLE
    hand_number: int = 0
    generation: int = 0
    awards: List[HandAward] = field(default_factory=list)


class GameEngine:
    """Texas Hold'em betting state machine for a single table."""

    def __init__(self, config: TableConfig, rng: Optional[random.Random] = None) -> None:
        self.config = config
        self.players: List[Player] = []
        self.table = TableState()
        self.rng = rng or random.Random()

    # Seat management -------------------------------------------------

    def add_player(self, name: str, *, is_bot: bool = False, player_id: Optional[str] = None) -> Player:
        display = name.strip()
        if not display:
            raise ValueError("NAME_REQUIRED")
        if len(self.players) >= self.config.seats:
            raise RuntimeError("Table is full")
        if self.table.phase in BETTING_PHASES:
            raise RuntimeError("Cannot seat players during a hand")

        player_id = player_id or f"p{len(self.players) + 1}"
        if any(player.id == player_id for player in self.players):
            raise ValueError(f"Duplicate player id {player_id}")
        player = Player(id=player_id, name=display, chips=self.config.starting_stack, is_bot=is_bot)
        self.players.append(player)
        return player

    def player(self, player_id: str) -> Player:
        return self.players[self._seat_of(player_id)]

    def _seat_of(self, player_id: str) -> int:
        for idx, player in enumerate(self.players):
            if player.id == player_id:
                return idx
        raise UnknownPlayer(f"No player with id {player_id!r}")

    # Read-only helpers -----------------------------------------------

    @property
    def phase(self) -> Phase:
        return self.table.phase

    @property
    def pot(self) -> int:
        return self.table.pot

    @property
    def current_bet(self) -> int:
        return self.table.current_bet

    @property
    def generation(self) -> int:
        return self.table.generation

    @property
    def current_player(self) -> Optional[Player]:
        if self.table.phase not in BETTING_PHASES or self.table.turn_index is None:
            return None
        return self.players[self.table.turn_index]

    def snapshot(self) -> TableSnapshot:
        table = self.table
        return TableSnapshot(
            hand_number=table.hand_number,
            phase=table.phase,
            players=tuple(player.view() for player in self.players),
            community=tuple(table.community),
            pot=table.pot,
            current_bet=table.current_bet,
            dealer_index=table.dealer_index,
            turn_index=table.turn_index if table.phase in BETTING_PHASES else None,
            awards=tuple(table.awards),
        )

    def can_start_hand(self) -> bool:
        funded = [player for player in self.players if player.chips > 0]
        return self.table.phase in (Phase.IDLE, Phase.SHOWDOWN) and len(funded) >= 2

    def is_hand_complete(self) -> bool:
        return self.table.phase == Phase.SHOWDOWN

    def is_match_over(self) -> bool:
        return len([player for player in self.players if player.chips > 0]) <= 1

    # Hand lifecycle --------------------------------------------------

    def start_hand(self, seed: Optional[int] = None) -> List[Dict[str, object]]:
        table = self.table
        if table.phase not in (Phase.IDLE, Phase.SHOWDOWN):
            raise InvalidAction("A hand is already in progress", code="HAND_IN_PROGRESS")
        if not self.can_start_hand():
            raise InvalidAction("Not enough players with chips to start a hand", code="NOT_ENOUGH_PLAYERS")

        rng = random.Random(seed) if seed is not None else self.rng
        table.deck = Deck(shuffle_deck(build_deck(), rng))
        table.community = []
        table.pot = 0
        table.awards = []
        table.hand_number += 1
        for player in self.players:
            player.reset_for_hand()

        table.dealer_index = self._next_seat(table.dealer_index, lambda p: p.is_active)
        for player in self.players:
            if player.is_active:
                player.hole_cards = table.deck.deal(2)

        sb_seat = self._next_seat(table.dealer_index, lambda p: p.is_active)
        bb_seat = self._next_seat(sb_seat, lambda p: p.is_active)
        sb_paid = self.players[sb_seat].commit(self.config.sb)
        bb_paid = self.players[bb_seat].commit(self.config.bb)
        table.current_bet = self.config.bb
        table.phase = Phase.PRE_FLOP

        events: List[Dict[str, object]] = [
            {"ev": "START_HAND", "hand_number": table.hand_number, "dealer_index": table.dealer_index},
            {
                "ev": "POST_BLINDS",
                "sb_player": self.players[sb_seat].id,
                "bb_player": self.players[bb_seat].id,
                "sb": sb_paid,
                "bb": bb_paid,
            },
        ]
        LOGGER.debug("Hand %s started; dealer=%s sb=%s bb=%s", table.hand_number, table.dealer_index, sb_seat, bb_seat)

        table.turn_index = self._next_actor_after(bb_seat)
        if table.turn_index is None:
            # Blinds put everyone all-in; nobody is left to act.
            self._advance_phase(events)
        table.generation += 1
        return events

    def _next_seat(self, start: int, predicate: Callable[[Player], bool]) -> int:
        seats = len(self.players)
        for offset in range(1, seats + 1):
            idx = (start + offset) % seats
            if predicate(self.players[idx]):
                return idx
        raise RuntimeError("No eligible seat found")

    def _next_actor_after(self, start: int) -> Optional[int]:
        seats = len(self.players)
        for offset in range(1, seats + 1):
            idx = (start + offset) % seats
            player = self.players[idx]
            if player.is_active and player.chips > 0:
                return idx
        return None

    # Action handling -------------------------------------------------

    def legal_actions(self, player_id: str) -> Tuple[List[ActionType], Optional[int], Optional[int], Optional[int]]:
        """Return every legal move plus helper numbers (amount to call, min/max raise-to)."""
        player = self.player(player_id)
        if self.table.phase not in BETTING_PHASES or not player.is_active or player.chips == 0:
            return [], None, None, None

        legal = [ActionType.FOLD]
        call_amount = self.table.current_bet - player.bet
        if call_amount <= 0:
            legal.append(ActionType.CHECK)
        else:
            legal.append(ActionType.CALL)

        min_raise_to = max_raise_to = None
        if player.chips + player.bet > self.table.current_bet:
            min_raise_to = self.table.current_bet + 1
            max_raise_to = player.chips + player.bet
            legal.append(ActionType.RAISE)
        legal.append(ActionType.ALL_IN)

        return legal, (min(call_amount, player.chips) if call_amount > 0 else None), min_raise_to, max_raise_to

    def apply_action(
        self,
        player_id: str,
        action: ActionType,
        amount: Optional[int] = None,
    ) -> List[Dict[str, object]]:
        table = self.table
        seat = self._seat_of(player_id)
        player = self.players[seat]
        if table.phase not in BETTING_PHASES:
            raise InvalidAction("No betting round in progress", code="NO_ACTIVE_ROUND")
        if not player.is_active:
            raise InvalidAction("Player has folded", code="PLAYER_FOLDED")
        if seat != table.turn_index:
            raise InvalidAction("Not your turn", code="OUT_OF_TURN")
        try:
            action = ActionType(action)
        except ValueError:
            raise InvalidAction(f"Unsupported action {action!r}", code="UNKNOWN_ACTION") from None

        if action == ActionType.ALL_IN:
            amount = player.chips + player.bet
            if amount <= table.current_bet:
                action, amount = ActionType.CALL, None
            else:
                action = ActionType.RAISE
            requested = ActionType.ALL_IN
        else:
            requested = action

        # Validate everything before touching state.
        if action == ActionType.CHECK and player.bet != table.current_bet:
            raise InvalidAction("Cannot check when facing a bet", code="CANNOT_CHECK")
        if action == ActionType.RAISE:
            if not isinstance(amount, int) or isinstance(amount, bool):
                raise InvalidAction("Raise requires an amount", code="AMOUNT_REQUIRED")
            if amount <= table.current_bet:
                raise InvalidAction("Raise must exceed current bet", code="RAISE_TOO_SMALL")
            if amount - player.bet > player.chips:
                raise InvalidAction("Raise exceeds stack", code="RAISE_EXCEEDS_STACK")

        event: Dict[str, object] = {"ev": requested.name, "player_id": player.id}
        if action == ActionType.FOLD:
            player.is_active = False
        elif action == ActionType.CALL:
            paid = player.commit(max(table.current_bet - player.bet, 0))
            event["amount"] = paid
        elif action == ActionType.RAISE:
            assert amount is not None
            event["amount"] = player.commit(amount - player.bet)
            event["to"] = amount
            table.current_bet = amount
            for other in self.players:
                if other is not player and other.is_active:
                    other.has_acted = False

        player.has_acted = True
        if action != ActionType.FOLD and player.chips == 0:
            player.last_action = ActionType.ALL_IN
        else:
            player.last_action = requested

        events = [event]
        self._check_round_complete(seat, events)
        table.generation += 1
        return events

    def _check_round_complete(self, acted_seat: int, events: List[Dict[str, object]]) -> None:
        table = self.table
        active = [player for player in self.players if player.is_active]
        if len(active) == 1:
            self._award_by_fold(active[0], events)
            return

        if self._betting_settled(active):
            self._advance_phase(events)
            return

        table.turn_index = self._next_actor_after(acted_seat)

    def _betting_settled(self, active: List[Player]) -> bool:
        # All-in players are exempt: they can neither act nor match.
        max_bet = max(player.bet for player in active)
        return all(player.has_acted and player.bet == max_bet for player in active if player.chips > 0)

    def _award_by_fold(self, winner: Player, events: List[Dict[str, object]]) -> None:
        table = self.table
        amount = table.pot + sum(player.bet for player in self.players)
        award = award_uncontested(winner, amount)
        for player in self.players:
            player.bet = 0
        table.pot = 0
        table.current_bet = 0
        table.turn_index = None
        table.phase = Phase.SHOWDOWN
        table.awards = [award]
        events.append({"ev": "POT_AWARD", "player_id": winner.id, "amount": amount, "hand": award.result.description})
        LOGGER.debug("Hand %s won uncontested by %s (%s chips)", table.hand_number, winner.id, amount)

    def _sweep_bets(self) -> None:
        table = self.table
        table.pot += sum(player.bet for player in self.players)
        for player in self.players:
            player.reset_for_round()
        table.current_bet = 0

    def _advance_phase(self, events: List[Dict[str, object]]) -> None:
        table = self.table
        while True:
            self._sweep_bets()
            table.phase = NEXT_PHASE[table.phase]
            if table.phase == Phase.SHOWDOWN:
                self._resolve_showdown(events)
                return

            cards = table.deck.deal(STREET_CARDS[table.phase])
            table.community.extend(cards)
            events.append({"ev": table.phase.name, "cards": cards_to_labels(cards)})

            table.turn_index = self._next_actor_after(table.dealer_index)
            if table.turn_index is not None:
                return
            # Everyone left is all-in; keep dealing to showdown.

    def _resolve_showdown(self, events: List[Dict[str, object]]) -> None:
        table = self.table
        table.turn_index = None
        outcome = resolve_showdown(
            self.players,
            table.community,
            table.pot,
            dealer_index=table.dealer_index,
            split_ties=self.config.split_ties,
        )
        for player_id, result in outcome.results.items():
            events.append(
                {
                    "ev": "SHOWDOWN",
                    "player_id": player_id,
                    "hand": cards_to_labels(self.player(player_id).hole_cards),
                    "board": cards_to_labels(table.community),
                    "category": result.category.value,
                    "description": result.description,
                    "score": result.score,
                }
            )
        for award in outcome.awards:
            events.append(
                {"ev": "POT_AWARD", "player_id": award.player_id, "amount": award.amount, "hand": award.result.description}
            )
        table.pot = 0
        table.awards = outcome.awards
        LOGGER.debug("Hand %s showdown awards=%s", table.hand_number, [(a.player_id, a.amount) for a in outcome.awards])
