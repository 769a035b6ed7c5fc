"""
Oracle - The remote judge.

The oracle chooses the secret item and classifies every player input
into the closed verdict set {win, yes, no, unsure}. The engine only ever
sees decoded Verdicts; transport and decoding failures surface as
OracleUnavailable.
"""

from .errors import OracleUnavailable
from .verdict import (
    Answer,
    VerdictKind,
    Verdict,
    Win,
    PlainAnswer,
    WrongGuess,
    NeedsClarification,
    decode_verdict,
    decode_secret_item,
)
from .client import OracleClient, OracleTransport, HttpOracleTransport

__all__ = [
    "OracleUnavailable",
    "Answer",
    "VerdictKind",
    "Verdict",
    "Win",
    "PlainAnswer",
    "WrongGuess",
    "NeedsClarification",
    "decode_verdict",
    "decode_secret_item",
    "OracleClient",
    "OracleTransport",
    "HttpOracleTransport",
]
