from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from dice import Die

Party = Literal["player", "computer"]
Outcome = Literal["player_win", "computer_win", "draw"]
RoundState = Literal["determining_first_mover", "selecting_dice", "awaiting_throws", "resolved"]

# Order matters: a round only ever moves one step to the right.
ROUND_STATES: tuple[RoundState, ...] = (
    "determining_first_mover",
    "selecting_dice",
    "awaiting_throws",
    "resolved",
)


class DiceGameError(Exception):
    """Base class for every error raised by the game core."""


class ValidationError(DiceGameError, ValueError):
    """Malformed dice configuration."""


class OutOfRangeSelection(DiceGameError, ValueError):
    """A selection or contribution fell outside its allowed domain."""

    def __init__(self, value: object, allowed: str) -> None:
        self.value = value
        self.allowed = allowed
        super().__init__(f"{value!r} is not a valid choice (allowed: {allowed})")


class PoolExhausted(DiceGameError, RuntimeError):
    """A claim was attempted on an empty dice pool."""


class VerificationMismatch(DiceGameError):
    """A revealed secret does not reproduce its published digest."""


class ProtocolOrderError(DiceGameError, RuntimeError):
    """A protocol step was attempted out of order."""


def other_party(party: Party) -> Party:
    return "computer" if party == "player" else "player"


def determine_outcome(player_face: int, computer_face: int) -> Outcome:
    if player_face == computer_face:
        return "draw"
    return "player_win" if player_face > computer_face else "computer_win"


@dataclass(frozen=True)
class FirstMoverDecision:
    first_mover: Party
    guess: int
    secret_value: int
    digest: str


@dataclass(frozen=True)
class ThrowResult:
    party: Party
    secret_value: int
    open_value: int
    modulus: int
    index: int
    face: int


@dataclass(frozen=True)
class RoundResult:
    first_mover: Party
    player_die: Die
    computer_die: Die
    throws: dict[Party, ThrowResult] = field(default_factory=dict)
    outcome: Outcome = "draw"

    @property
    def player_face(self) -> int:
        return self.throws["player"].face

    @property
    def computer_face(self) -> int:
        return self.throws["computer"].face


@dataclass(frozen=True)
class RoundAborted:
    state: RoundState
    reason: str
