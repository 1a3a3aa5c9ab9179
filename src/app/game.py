from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from combiner import CoinToss, FairDraw
from commit_reveal import KEY_BYTES
from dice import DEFAULT_FACES, DiceSet, Die
from pool import DicePool
from protocol import (
    ROUND_STATES,
    FirstMoverDecision,
    OutOfRangeSelection,
    Party,
    ProtocolOrderError,
    RoundAborted,
    RoundResult,
    RoundState,
    ThrowResult,
    ValidationError,
    determine_outcome,
    other_party,
)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameSettings:
    faces: int = DEFAULT_FACES
    key_bytes: int = KEY_BYTES


@dataclass
class Counterpart:
    """Callbacks into the interactive party.

    Each callback returns exactly one in-domain value. Menu sentinels such as
    help or exit are handled on the caller's side and never reach the round.
    """

    guess_bit: Callable[[str], int]
    choose_die: Callable[[list[tuple[int, Die]], Die | None], int]
    add_number: Callable[[int, str, Party], int]


@dataclass(frozen=True)
class ProtocolEvent:
    kind: str
    party: Party | None = None
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class Round:
    dice: DiceSet
    counterpart: Counterpart
    settings: GameSettings = field(default_factory=GameSettings)
    on_event: Callable[[ProtocolEvent], None] | None = None
    state: RoundState = "determining_first_mover"
    transcript: list[ProtocolEvent] = field(default_factory=list)
    assignments: dict[Party, Die] = field(default_factory=dict)
    first_mover: Party | None = None
    pool: DicePool = field(init=False)

    def __post_init__(self) -> None:
        for pos, die in enumerate(self.dice):
            if len(die) != self.settings.faces:
                raise ValidationError(f"die {pos} has {len(die)} faces, expected {self.settings.faces}")
        self.pool = DicePool.from_dice(self.dice)

    # --- State machine ---
    def play(self) -> RoundResult | RoundAborted:
        try:
            self.determine_first_mover()
            self.select_dice()
            throws = self.throw_dice()
        except OutOfRangeSelection as exc:
            LOGGER.warning("round aborted in state %s: %s", self.state, exc)
            self._emit("abort", None, state=self.state, reason=str(exc))
            return RoundAborted(state=self.state, reason=str(exc))
        return self.resolve(throws)

    def determine_first_mover(self) -> FirstMoverDecision:
        self._require_state("determining_first_mover")
        toss = CoinToss.start(key_length_bytes=self.settings.key_bytes)
        self._emit("commit", "computer", purpose="first_mover", modulus=toss.modulus, digest=toss.digest)

        guess = self.counterpart.guess_bit(toss.digest)
        self._emit("contribution", "player", purpose="first_mover", value=guess)
        player_first = toss.guess(guess)
        value, key = toss.reveal()
        self._emit("reveal", "computer", purpose="first_mover", value=value, key=key.hex().upper(), digest=toss.digest)

        self.first_mover = "player" if player_first else "computer"
        self._emit("first_mover", self.first_mover)
        self._advance("selecting_dice")
        return FirstMoverDecision(first_mover=self.first_mover, guess=guess, secret_value=value, digest=toss.digest)

    def select_dice(self) -> dict[Party, Die]:
        self._require_state("selecting_dice")
        if self.first_mover == "player":
            self._player_claim(computer_die=None)
            self._computer_claim()
        else:
            computer_die = self._computer_claim()
            self._player_claim(computer_die=computer_die)
        self._advance("awaiting_throws")
        return dict(self.assignments)

    def throw_dice(self) -> dict[Party, ThrowResult]:
        self._require_state("awaiting_throws")
        if self.first_mover is None:
            raise ProtocolOrderError("first mover has not been decided")
        throws: dict[Party, ThrowResult] = {}
        for party in (self.first_mover, other_party(self.first_mover)):
            throws[party] = self._throw(party)
        self._advance("resolved")
        return throws

    def resolve(self, throws: dict[Party, ThrowResult]) -> RoundResult:
        self._require_state("resolved")
        if self.first_mover is None:
            raise ProtocolOrderError("first mover has not been decided")
        outcome = determine_outcome(throws["player"].face, throws["computer"].face)
        self._emit(
            "outcome",
            None,
            outcome=outcome,
            player_face=throws["player"].face,
            computer_face=throws["computer"].face,
        )
        return RoundResult(
            first_mover=self.first_mover,
            player_die=self.assignments["player"],
            computer_die=self.assignments["computer"],
            throws=throws,
            outcome=outcome,
        )

    # --- Steps ---
    def _player_claim(self, *, computer_die: Die | None) -> Die:
        index = self.counterpart.choose_die(self.pool.available(), computer_die)
        die = self.pool.claim(index)
        self._assign("player", index, die)
        return die

    def _computer_claim(self) -> Die:
        index, die = self.pool.random_claim()
        self._assign("computer", index, die)
        return die

    def _assign(self, party: Party, index: int, die: Die) -> None:
        if party in self.assignments:
            raise ProtocolOrderError(f"{party} already holds a die this round")
        self.assignments[party] = die
        self._emit("selection", party, index=index, die=die)

    def _throw(self, party: Party) -> ThrowResult:
        die = self.assignments[party]
        draw = FairDraw.start(len(die), key_length_bytes=self.settings.key_bytes)
        self._emit("commit", "computer", purpose=f"{party}_throw", modulus=draw.modulus, digest=draw.digest)

        open_value = self.counterpart.add_number(draw.modulus, draw.digest, party)
        self._emit("contribution", "player", purpose=f"{party}_throw", value=open_value)
        index = draw.add(open_value)
        value, key = draw.reveal()
        self._emit(
            "reveal", "computer", purpose=f"{party}_throw", value=value, key=key.hex().upper(), digest=draw.digest
        )

        throw = ThrowResult(
            party=party,
            secret_value=value,
            open_value=open_value,
            modulus=draw.modulus,
            index=index,
            face=die[index],
        )
        self._emit("throw", party, secret=value, open=open_value, modulus=draw.modulus, index=index, face=throw.face)
        return throw

    # --- Helpers ---
    def _require_state(self, expected: RoundState) -> None:
        if self.state != expected:
            raise ProtocolOrderError(f"round is in state {self.state}, expected {expected}")

    def _advance(self, new_state: RoundState) -> None:
        if ROUND_STATES.index(new_state) != ROUND_STATES.index(self.state) + 1:
            raise ProtocolOrderError(f"cannot move from {self.state} to {new_state}")
        LOGGER.debug("round state %s -> %s", self.state, new_state)
        self.state = new_state

    def _emit(self, kind: str, party: Party | None, **data: Any) -> None:
        event = ProtocolEvent(kind=kind, party=party, data=data)
        self.transcript.append(event)
        if self.on_event is not None:
            self.on_event(event)
