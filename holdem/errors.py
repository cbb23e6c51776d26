from __future__ import annotations

from typing import Optional


class EngineError(Exception):
    """Base class for rule-engine failures. ``code`` is stable and safe to send to clients."""

    default_code = "ENGINE_ERROR"

    def __init__(self, msg: str, code: Optional[str] = None) -> None:
        super().__init__(msg)
        self.code = code or self.default_code
        self.msg = msg


class InvalidAction(EngineError, ValueError):
    default_code = "INVALID_ACTION"


class UnknownPlayer(InvalidAction):
    default_code = "UNKNOWN_PLAYER"


class DeckExhausted(EngineError, RuntimeError):
    default_code = "DECK_EXHAUSTED"
