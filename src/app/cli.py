from __future__ import annotations

import argparse
import logging

from commit_reveal import KEY_BYTES, verify
from dice import DEFAULT_FACES, DiceSet, Die, parse_dice
from game import Counterpart, GameSettings, ProtocolEvent, Round
from logging_utils import configure_logging
from probability import format_probability_table
from protocol import Party, RoundAborted, RoundResult, ValidationError

LOGGER = logging.getLogger(__name__)


class _ExitRequested(Exception):
    pass


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="dice-game", description="Provably fair non-transitive dice")
    parser.add_argument("--log-level", default="WARNING", help="DEBUG|INFO|WARNING|ERROR (logs go to stderr)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    play = sub.add_parser("play", help="Play one round against the computer")
    play.add_argument("dice", nargs="*", help='Dice as comma-separated faces, e.g. "1,2,3,4,5,6"')
    play.add_argument("--faces", type=int, default=DEFAULT_FACES, help="Faces per die")
    play.add_argument("--key-bytes", type=int, default=KEY_BYTES, help="HMAC key length in bytes")

    table = sub.add_parser("table", help="Print the win probability table for the given dice")
    table.add_argument("dice", nargs="*")
    table.add_argument("--faces", type=int, default=DEFAULT_FACES)

    check = sub.add_parser("verify", help="Check a revealed value and key against a published HMAC")
    check.add_argument("--value", type=int, required=True)
    check.add_argument("--key", required=True, help="Revealed key as hex")
    check.add_argument("--digest", required=True, help="HMAC published before the reveal")

    args = parser.parse_args(argv)
    if getattr(args, "faces", 1) < 1:
        raise SystemExit("error: --faces must be at least 1")
    if getattr(args, "key_bytes", 1) < 1:
        raise SystemExit("error: --key-bytes must be at least 1")
    configure_logging(level=args.log_level)

    if args.cmd == "verify":
        try:
            key = bytes.fromhex(args.key)
        except ValueError:
            raise SystemExit("error: --key must be hexadecimal")
        if verify(args.value, key, args.digest):
            print("OK: the revealed value and key reproduce the HMAC.")
            return 0
        print("MISMATCH: the revealed value and key do not reproduce the HMAC.")
        return 1

    dice = _load_dice(args.dice, args.faces)

    if args.cmd == "table":
        print(format_probability_table(list(dice)))
        return 0

    if args.cmd == "play":
        settings = GameSettings(faces=args.faces, key_bytes=args.key_bytes)
        rnd = Round(dice=dice, counterpart=_console_counterpart(dice), settings=settings, on_event=_show_event)
        try:
            result = rnd.play()
        except _ExitRequested:
            print("Exiting the game...")
            return 0
        except (KeyboardInterrupt, EOFError):
            print("\nGame interrupted.")
            return 1
        if isinstance(result, RoundAborted):
            return 1
        LOGGER.info("round finished: %s (first mover %s)", result.outcome, result.first_mover)
        _show_result(result)
        return 0

    raise SystemExit("unhandled command")


def _load_dice(raw: list[str], faces: int) -> DiceSet:
    try:
        return parse_dice(raw, faces=faces)
    except ValidationError as exc:
        raise SystemExit(f"error: {exc}")


def _console_counterpart(dice: DiceSet) -> Counterpart:
    help_table = format_probability_table(list(dice))

    def guess_bit(digest: str) -> int:
        return _prompt_choice("Try to guess my selection.", [(i, str(i)) for i in range(2)], help_table)

    def choose_die(available: list[tuple[int, Die]], computer_die: Die | None) -> int:
        return _prompt_choice("Choose your dice:", [(i, str(d)) for i, d in available], help_table)

    def add_number(modulus: int, digest: str, party: Party) -> int:
        return _prompt_choice(f"Add your number modulo {modulus}.", [(i, str(i)) for i in range(modulus)], help_table)

    return Counterpart(guess_bit=guess_bit, choose_die=choose_die, add_number=add_number)


def _prompt_choice(message: str, options: list[tuple[int, str]], help_table: str) -> int:
    """Menu prompt; loops until an offered value is picked."""
    allowed = {value for value, _ in options}
    while True:
        print(message)
        for value, label in options:
            print(f"{value} - {label}")
        print("X - exit")
        print("? - help")
        choice = input("Your selection: ").strip().lower()
        if choice == "x":
            raise _ExitRequested()
        if choice == "?":
            print(help_table)
            continue
        try:
            picked = int(choice)
        except ValueError:
            picked = None
        if picked in allowed:
            return picked
        print("Invalid choice. Pick one of the listed values, X or ?.")


def _show_event(event: ProtocolEvent) -> None:
    data = event.data
    if event.kind == "commit":
        purpose = data["purpose"]
        if purpose == "first_mover":
            print("Let's determine who makes the first move.")
        else:
            print("It's time for your throw." if purpose == "player_throw" else "It's time for my throw.")
        print(f"I selected a random value in the range 0..{data['modulus'] - 1}")
        print(f"(HMAC={data['digest']}).")
    elif event.kind == "contribution":
        print(f"Your selection: {data['value']}.")
    elif event.kind == "reveal":
        print(f"My selection: {data['value']} (KEY={data['key']}).")
    elif event.kind == "first_mover":
        print("You make the first move." if event.party == "player" else "I make the first move.")
    elif event.kind == "selection":
        who = "You choose" if event.party == "player" else "I choose"
        print(f"{who} the [{data['die']}] dice.")
    elif event.kind == "throw":
        print(f"The fair number generation result is {data['secret']} + {data['open']} = {data['index']} (mod {data['modulus']}).")
        print(f"Your throw is {data['face']}." if event.party == "player" else f"My throw is {data['face']}.")
    elif event.kind == "abort":
        print(f"Round aborted: {data['reason']}")


def _show_result(result: RoundResult) -> None:
    mine, yours = result.computer_face, result.player_face
    if result.outcome == "player_win":
        print(f"You win ({yours} > {mine})!")
    elif result.outcome == "computer_win":
        print(f"I win ({mine} > {yours})!")
    else:
        print(f"It's a draw ({yours} = {mine}).")


if __name__ == "__main__":
    raise SystemExit(main())
