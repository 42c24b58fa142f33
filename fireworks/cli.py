"""
Fireworks CLI - Command-line interface for the engine.

Usage:
    fireworks replay <log_file> --players Alice Bob   Replay an action log
    fireworks variants                                List supported variants

Environment:
    FIREWORKS_LOG_LEVEL        Logging level (default: WARNING)
    FIREWORKS_DEFAULT_VARIANT  Variant used when none is given (default: No Variant)
"""

import argparse
import json
import logging
import os
import sys

from .errors import FireworksError, UnknownVariantError


logger = logging.getLogger(__name__)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Fireworks - Game state engine for Hanabi-style games",
        prog="fireworks",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("FIREWORKS_LOG_LEVEL", "WARNING"),
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Replay command
    replay_parser = subparsers.add_parser("replay", help="Replay an action log")
    replay_parser.add_argument("log_file", help="JSON action log (a list, or an object with 'actions')")
    replay_parser.add_argument("--players", nargs="+", help="Player names in seat order")
    replay_parser.add_argument("--variant", help="Variant name")
    replay_parser.add_argument("--starting-player", type=int, default=0, help="Seat of the first player")
    replay_parser.add_argument("--seat", type=int, help="Replay as the player in this seat")
    replay_parser.add_argument("--card-cycle", action="store_true", help="Enable card cycling")
    replay_parser.add_argument("--timed", action="store_true", help="Game was timed")
    replay_parser.add_argument("--json", action="store_true", help="Print the final state as JSON")

    # Variants command
    subparsers.add_parser("variants", help="List supported variants")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "replay":
        cmd_replay(args)
    elif args.command == "variants":
        cmd_variants(args)
    else:
        parser.print_help()
        sys.exit(1)


def _load_log(path):
    """Read a log file: either a bare action list or an object with metadata."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"Error: {path} is not valid JSON: {e}", file=sys.stderr)
        sys.exit(1)

    if isinstance(data, list):
        return data, {}
    return data.get("actions", []), data


def _report_error(e):
    from .api.schemas import ErrorCode, ErrorResponse

    if isinstance(e, UnknownVariantError):
        code = ErrorCode.UNKNOWN_VARIANT
    else:
        code = ErrorCode(getattr(e, "error_code", ErrorCode.INVALID_INPUT.value))
    response = ErrorResponse(error=e.message, error_code=code, details=e.details or None)
    print(response.model_dump_json(), file=sys.stderr)
    sys.exit(1)


def cmd_replay(args):
    """Replay an action log and print the narration."""
    from .api.schemas import parse_action_log, snapshot_json
    from .engine_core import GameMetadata, ReducerFlags, replay_actions

    records, info = _load_log(args.log_file)
    players = args.players or info.get("players")
    if not players:
        print("Error: player names are required (--players or 'players' in the log)", file=sys.stderr)
        sys.exit(1)
    variant_name = (
        args.variant
        or info.get("variant")
        or os.getenv("FIREWORKS_DEFAULT_VARIANT", "No Variant")
    )

    try:
        metadata = GameMetadata.create(
            players,
            variant_name=variant_name,
            our_player_index=args.seat,
            starting_player=args.starting_player,
            card_cycle=args.card_cycle,
            timed=args.timed,
        )
        actions = parse_action_log(records)
        flags = ReducerFlags(playing=args.seat is not None, finished=True)
        states = replay_actions(actions, metadata, flags)
    except FireworksError as e:
        _report_error(e)
        return
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    final = states[-1]
    logger.info("Replayed %d actions of a %s game", len(actions), variant_name)

    if args.json:
        sys.stdout.write(snapshot_json(final, indent=2).decode("utf-8"))
        sys.stdout.write("\n")
        return

    for entry in final.log:
        print(f"Turn {entry.turn}: {entry.text}")

    stats = final.stats
    print()
    print(f"Score: {final.score}/{stats.max_score}")
    print(f"Strikes: {len(final.strikes)}")
    print(f"Clue tokens: {final.clue_tokens}")
    print(f"Pace: {stats.pace if stats.pace is not None else '-'} ({stats.pace_risk.value})")
    print(f"Cards gotten: {stats.cards_gotten}")
    print(f"Potential clues lost: {stats.potential_clues_lost:g}")
    print(f"End condition: {final.turn.end_condition.name}")


def cmd_variants(args):
    """List supported variants."""
    from .rules import deck as deck_rules
    from .variants import VARIANTS

    for name, variant in VARIANTS.items():
        suits = ", ".join(suit.name for suit in variant.suits)
        print(f"{name}: {deck_rules.total_cards(variant)} cards ({suits})")


if __name__ == "__main__":
    main()
