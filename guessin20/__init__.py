"""
GuessIn20 - A "20 Questions" game engine with a remote oracle.

A player asks yes/no questions or makes guesses about a secret everyday item;
a remote judge (the oracle) picks the item and classifies every input.
The package provides:
- Immutable session state and a pure reducer for the game rules
- An HTTP oracle client with a strict verdict decoder
- A game loop and in-memory session manager
- A REST API and a terminal CLI
"""

__version__ = "0.1.0"
