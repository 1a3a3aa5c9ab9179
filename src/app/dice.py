from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

from protocol import ValidationError

DEFAULT_FACES = 6
MIN_DICE = 3


@dataclass(frozen=True)
class Die:
    faces: tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.faces:
            raise ValidationError("a die must have at least one face")

    def __len__(self) -> int:
        return len(self.faces)

    def __getitem__(self, index: int) -> int:
        return self.faces[index]

    def __str__(self) -> str:
        return ",".join(str(f) for f in self.faces)


@dataclass(frozen=True)
class DiceSet:
    dice: tuple[Die, ...]

    def __post_init__(self) -> None:
        if len(self.dice) < MIN_DICE:
            raise ValidationError(f"at least {MIN_DICE} dice are required, got {len(self.dice)}")

    def __len__(self) -> int:
        return len(self.dice)

    def __getitem__(self, index: int) -> Die:
        return self.dice[index]

    def __iter__(self) -> Iterator[Die]:
        return iter(self.dice)


def parse_die(text: str, *, faces: int = DEFAULT_FACES) -> Die:
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != faces:
        raise ValidationError(
            f"each die needs exactly {faces} comma-separated integers, got {len(parts)} in {text!r}"
        )
    values: list[int] = []
    for part in parts:
        try:
            values.append(int(part))
        except ValueError:
            raise ValidationError(f"invalid value {part!r}, all faces must be integers") from None
    return Die(tuple(values))


def parse_dice(args: Sequence[str], *, faces: int = DEFAULT_FACES) -> DiceSet:
    """Validate raw command-line dice arguments into a DiceSet.

    Each argument is one die written as comma-separated integers, e.g.
    ``"1,2,3,4,5,6"``. Errors name the 1-based argument position.
    """
    if len(args) < MIN_DICE:
        raise ValidationError(
            f"at least {MIN_DICE} dice are required, got {len(args)} "
            '(example: "1,2,3,4,5,6" "6,5,4,3,2,1" "2,3,4,5,6,1")'
        )
    dice: list[Die] = []
    for pos, arg in enumerate(args, start=1):
        try:
            dice.append(parse_die(arg, faces=faces))
        except ValidationError as exc:
            raise ValidationError(f"argument {pos}: {exc}") from None
    return DiceSet(tuple(dice))
