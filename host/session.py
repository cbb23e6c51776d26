from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from holdem.bots import BotPolicy, Decision, RandomBotPolicy
from holdem.errors import DeckExhausted, InvalidAction
from holdem.game import GameEngine
from holdem.models import ActionType, Phase, TableConfig, TableSnapshot

LOGGER = logging.getLogger("holdem_host")

DEFAULT_BOT_NAMES = ("Bot Alice", "Bot Bob", "Bot Charlie", "Bot Dave", "Bot Erin", "Bot Frank", "Bot Grace", "Bot Heidi")

Listener = Callable[[str, object], Awaitable[None]]

# TableSession drives bots and publishes state; the GameEngine stays free of timers.


@dataclass
class PendingBotTurn:
    player_id: str
    generation: int
    task: asyncio.Task


class TableSession:
    """One table: a human seat at index 0 (optional) plus bot seats."""

    def __init__(
        self,
        config: TableConfig,
        *,
        human_name: Optional[str] = "You",
        bot_names: Sequence[str] = DEFAULT_BOT_NAMES,
        policy: Optional[BotPolicy] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.rng = rng or random.Random()
        self.engine = GameEngine(config, rng=self.rng)
        self.human_id: Optional[str] = None
        if human_name is not None:
            self.human_id = self.engine.add_player(human_name).id
        for name in bot_names[: config.seats - len(self.engine.players)]:
            self.engine.add_player(name, is_bot=True)
        self.policy: BotPolicy = policy or RandomBotPolicy(config.bb, self.rng)
        self.lock = asyncio.Lock()
        self.listeners: List[Listener] = []
        self.pending_bot: Optional[PendingBotTurn] = None
        self.hand_complete = asyncio.Event()

    def subscribe(self, listener: Listener) -> None:
        self.listeners.append(listener)

    def snapshot(self, viewer_id: Optional[str] = None) -> TableSnapshot:
        return self.engine.snapshot().for_viewer(viewer_id)

    async def start_hand(self, seed: Optional[int] = None) -> None:
        async with self.lock:
            events = self.engine.start_hand(seed)
            self.hand_complete.clear()
        LOGGER.info("Hand %s dealt; dealer seat %s", self.engine.table.hand_number, self.engine.table.dealer_index)
        await self._publish(events)

    async def submit_action(self, player_id: str, action: ActionType, amount: Optional[int] = None) -> None:
        async with self.lock:
            player = self.engine.player(player_id)
            if player.is_bot:
                raise InvalidAction("Bot seats are driven by the table", code="BOT_SEAT")
            events = self.engine.apply_action(player_id, action, amount)
        LOGGER.debug("Applied action player=%s action=%s amount=%s", player_id, action, amount)
        await self._publish(events)

    async def wait_for_showdown(self, timeout: Optional[float] = None) -> TableSnapshot:
        await asyncio.wait_for(self.hand_complete.wait(), timeout=timeout)
        return self.engine.snapshot()

    async def close(self) -> None:
        self._cancel_pending_bot()

    # Publishing ------------------------------------------------------

    async def _publish(self, events: List[Dict[str, object]]) -> None:
        for event in events:
            await self._emit("event", event)
        snapshot = self.engine.snapshot()
        if snapshot.phase == Phase.SHOWDOWN and snapshot.awards:
            await self._emit("result", {"awards": [award.to_payload() for award in snapshot.awards]})
            for award in snapshot.awards:
                LOGGER.info("%s wins %s with %s", award.player_id, award.amount, award.result.description)
        await self._emit("snapshot", snapshot)
        if snapshot.phase == Phase.SHOWDOWN:
            self.hand_complete.set()
        self._schedule_bot()

    async def _emit(self, kind: str, payload: object) -> None:
        for listener in list(self.listeners):
            try:
                await listener(kind, payload)
            except Exception:  # noqa: BLE001
                LOGGER.exception("Listener failed while handling %s", kind)

    # Bot turns -------------------------------------------------------

    def _schedule_bot(self) -> None:
        # Any mutation supersedes the previous bot turn.
        self._cancel_pending_bot()
        actor = self.engine.current_player
        if actor is None or not actor.is_bot:
            return
        generation = self.engine.generation
        task = asyncio.create_task(self._run_bot_turn(actor.id, generation, self._thinking_delay()))
        self.pending_bot = PendingBotTurn(player_id=actor.id, generation=generation, task=task)

    def _cancel_pending_bot(self) -> None:
        pending, self.pending_bot = self.pending_bot, None
        if pending is None or pending.task.done():
            return
        if pending.task is not asyncio.current_task():
            pending.task.cancel()

    def _thinking_delay(self) -> float:
        low, high = self.engine.config.bot_delay_ms
        return self.rng.uniform(low, high) / 1000

    async def _run_bot_turn(self, player_id: str, generation: int, delay: float) -> None:
        await asyncio.sleep(delay)
        async with self.lock:
            if self.engine.generation != generation:
                LOGGER.debug("Discarding stale decision for %s (generation %s)", player_id, generation)
                return
            try:
                events = self._apply_bot_decision_locked(player_id)
            except DeckExhausted:
                LOGGER.exception("Deck exhausted during hand %s", self.engine.table.hand_number)
                raise
        await self._publish(events)

    def _apply_bot_decision_locked(self, player_id: str) -> List[Dict[str, object]]:
        player = self.engine.player(player_id)
        observe = getattr(self.policy, "observe_board", None)
        if observe is not None:
            observe(self.engine.table.community)
        action, amount = self.policy.decide(player.view(), self.engine.current_bet)
        try:
            return self.engine.apply_action(player_id, action, amount)
        except InvalidAction as exc:
            LOGGER.warning(
                "Rejected bot action player=%s action=%s amount=%s reason=%s",
                player_id,
                action,
                amount,
                exc,
            )
            fallback, fallback_amount = self._fallback_decision_locked(player_id)
            return self.engine.apply_action(player_id, fallback, fallback_amount)

    def _fallback_decision_locked(self, player_id: str) -> Decision:
        legal, *_ = self.engine.legal_actions(player_id)
        # check > call > fold
        if ActionType.CHECK in legal:
            return ActionType.CHECK, None
        if ActionType.CALL in legal:
            return ActionType.CALL, None
        return ActionType.FOLD, None
