"""
Engine Core - Deterministic game state and transition rules.

The engine:
1. Holds a GameSession value (phase, budget, transcript, pending flag)
2. Applies actions via the reducer
3. Classifies each oracle verdict into effects (win, lose, continue,
   clarification at no cost)

The engine performs no I/O; see session.GameLoop for the oracle calls.
"""

from .state import (
    GameSession,
    GamePhase,
    Entry,
    EntryKind,
    BudgetPressure,
    DEFAULT_MAX_QUESTIONS,
)
from .action import Action, ActionType, ActionPayload, ActionResult, Effect
from .reducer import Reducer, apply_action

__all__ = [
    "GameSession",
    "GamePhase",
    "Entry",
    "EntryKind",
    "BudgetPressure",
    "DEFAULT_MAX_QUESTIONS",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "Effect",
    "Reducer",
    "apply_action",
]
