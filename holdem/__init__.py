"""Texas Hold'em rules engine: deck, hand evaluator, betting state machine and bots."""

from .bots import BotPolicy, HandStrengthBotPolicy, RandomBotPolicy
from .cards import Card, Deck, RANKS, SUITS, build_deck, parse_cards, shuffle_deck
from .errors import DeckExhausted, EngineError, InvalidAction, UnknownPlayer
from .evaluator import evaluate_hand
from .game import GameEngine, TableState
from .models import (
    ActionType,
    HandAward,
    HandCategory,
    HandResult,
    Phase,
    Player,
    PlayerView,
    TableConfig,
    TableSnapshot,
)
from .showdown import resolve_showdown

__all__ = [
    "BotPolicy",
    "HandStrengthBotPolicy",
    "RandomBotPolicy",
    "Card",
    "Deck",
    "RANKS",
    "SUITS",
    "build_deck",
    "parse_cards",
    "shuffle_deck",
    "DeckExhausted",
    "EngineError",
    "InvalidAction",
    "UnknownPlayer",
    "evaluate_hand",
    "GameEngine",
    "TableState",
    "ActionType",
    "HandAward",
    "HandCategory",
    "HandResult",
    "Phase",
    "Player",
    "PlayerView",
    "TableConfig",
    "TableSnapshot",
    "resolve_showdown",
]
