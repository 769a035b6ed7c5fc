"""
GuessIn20 CLI - Command-line interface.

Usage:
    guessin20 play                  Play in the terminal against the configured oracle
    guessin20 serve                 Run the REST API with uvicorn

The oracle endpoint comes from GUESSIN20_ORACLE_URL (or --oracle-url).
"""

import argparse
import logging
import sys

from .config import load_settings, positive_int
from .engine_core.action import Effect
from .engine_core.state import GamePhase
from .oracle.client import OracleClient, HttpOracleTransport
from .session import SessionManager, GameLoop, TurnResult

QUIT_COMMANDS = {"quit", "exit", ":q"}
GIVE_UP_COMMANDS = {"give up", "i give up", ":giveup"}

CUES = {
    Effect.WRONG_GUESS: "(wrong guess)",
    Effect.CLARIFICATION: "(free - no question used)",
    Effect.WIN: "*** You win! ***",
    Effect.LOSE: "*** Game over ***",
}


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="GuessIn20 - 20 Questions against a remote oracle",
        prog="guessin20",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument("--oracle-url", help="Oracle endpoint (overrides GUESSIN20_ORACLE_URL)")
    play_parser.add_argument("--max-questions", type=positive_int, help="Question budget")

    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true")

    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ValueError as e:
        parser.error(f"invalid configuration: {e}")
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        sys.exit(cmd_play(args, settings))
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_play(args, settings, input_fn=input, output_fn=print) -> int:
    """Interactive terminal game. Returns the process exit code."""
    url = args.oracle_url or settings.oracle_url
    if not url:
        output_fn("Error: no oracle configured. Set GUESSIN20_ORACLE_URL or pass --oracle-url.")
        return 1

    transport = HttpOracleTransport(
        url,
        api_key=settings.oracle_api_key or None,
        timeout=settings.oracle_timeout_s,
    )
    manager = SessionManager(default_max_questions=settings.max_questions)
    session = manager.create_session(max_questions=args.max_questions)
    loop = GameLoop(session, OracleClient(transport))

    try:
        return run_game(loop, input_fn=input_fn, output_fn=output_fn)
    finally:
        transport.close()
        manager.end_session(session.session_id)


def run_game(loop: GameLoop, input_fn=input, output_fn=print) -> int:
    """Play games on loop until the player quits."""
    output_fn("Welcome to GuessIn20! Ask yes/no questions or guess the item.")
    output_fn("Type 'give up' to reveal the answer, 'quit' to leave.")

    while True:
        output_fn("Choosing a secret item...")
        result = loop.start_new_game()
        if not result.accepted:
            output_fn(f"Could not start a game: {result.error}")
            return 1

        while loop.state.phase == GamePhase.PLAYING:
            state = loop.state
            try:
                text = input_fn(f"[{state.questions_used}/{state.max_questions}] > ")
            except EOFError:
                return 0

            command = text.strip().lower()
            if command in QUIT_COMMANDS:
                return 0
            if command in GIVE_UP_COMMANDS:
                _print_turn(loop.give_up(), output_fn)
                continue

            result = loop.submit(text)
            if result.oracle_failed:
                output_fn(f"The oracle did not answer ({result.error}). Try again - no question used.")
                continue
            _print_turn(result, output_fn)

        _print_summary(loop, output_fn)
        try:
            again = input_fn("Play again? [y/N] ")
        except EOFError:
            return 0
        if again.strip().lower() not in {"y", "yes"}:
            return 0


def _print_turn(result: TurnResult, output_fn):
    if not result.accepted:
        return
    entry = result.state.last_entry
    if entry:
        output_fn(entry.response_text)
    for effect in result.effects:
        cue = CUES.get(effect)
        if cue:
            output_fn(cue)


def _print_summary(loop: GameLoop, output_fn):
    state = loop.state
    if state.phase == GamePhase.WON:
        plural = "" if state.questions_used == 1 else "s"
        output_fn(f"You guessed it in {state.questions_used} question{plural}!")
    else:
        output_fn(f"You used {state.questions_used} of {state.max_questions} questions.")
    output_fn(f"The item was: {state.secret_item}")


def cmd_serve(args):
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "guessin20.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
