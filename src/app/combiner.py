"""Joint random values from one committed secret and one open contribution.

The committing side draws a uniform secret and publishes only its digest.
The other side then supplies an open value. Only after that value is fixed
is the secret revealed, so neither side can steer the result:

* ``FairDraw``: result is ``(secret + open) mod modulus``.
* ``CoinToss``: the open value is a guess, and the result is whether the
  guess matched the secret bit.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import TypeVar

from commit_reveal import KEY_BYTES, Commitment, commit, require_verified, reveal
from protocol import OutOfRangeSelection, ProtocolOrderError

LOGGER = logging.getLogger(__name__)

_DrawT = TypeVar("_DrawT", bound="_CommittedDraw")


def _check_modulus(modulus: int) -> None:
    if modulus < 1:
        raise ValueError(f"modulus must be at least 1, got {modulus}")


def generate_secret_contribution(modulus: int, key_length_bytes: int = KEY_BYTES) -> tuple[int, Commitment]:
    _check_modulus(modulus)
    value = secrets.randbelow(modulus)
    return value, commit(value, key_length_bytes)


def combine(secret_value: int, open_value: int, modulus: int) -> int:
    _check_modulus(modulus)
    return (secret_value + open_value) % modulus


def guess_matches(guess: int, secret_value: int) -> bool:
    return guess == secret_value


@dataclass
class _CommittedDraw:
    modulus: int
    commitment: Commitment
    open_value: int | None = None

    @classmethod
    def start(cls: type[_DrawT], modulus: int, *, key_length_bytes: int = KEY_BYTES) -> _DrawT:
        _, commitment = generate_secret_contribution(modulus, key_length_bytes)
        return cls(modulus=modulus, commitment=commitment)

    @property
    def digest(self) -> str:
        return self.commitment.digest

    def _fix(self, open_value: int) -> None:
        if self.open_value is not None:
            raise ProtocolOrderError("the open contribution has already been fixed")
        if isinstance(open_value, bool) or not isinstance(open_value, int) or not 0 <= open_value < self.modulus:
            raise OutOfRangeSelection(open_value, f"0..{self.modulus - 1}")
        self.open_value = open_value

    def reveal(self) -> tuple[int, bytes]:
        if self.open_value is None:
            raise ProtocolOrderError("cannot reveal before the counterpart's contribution is fixed")
        value, key = reveal(self.commitment)
        require_verified(value, key, self.commitment.digest)
        return value, key


class FairDraw(_CommittedDraw):
    def add(self, open_value: int) -> int:
        self._fix(open_value)
        result = combine(self.commitment.secret_value, open_value, self.modulus)
        LOGGER.debug("combined draw mod %d fixed (digest=%s)", self.modulus, self.digest)
        return result

    @property
    def result(self) -> int:
        if self.open_value is None:
            raise ProtocolOrderError("no open contribution yet")
        return combine(self.commitment.secret_value, self.open_value, self.modulus)


class CoinToss(_CommittedDraw):
    @classmethod
    def start(cls, modulus: int = 2, *, key_length_bytes: int = KEY_BYTES) -> CoinToss:
        return super().start(modulus, key_length_bytes=key_length_bytes)

    def guess(self, value: int) -> bool:
        self._fix(value)
        return guess_matches(value, self.commitment.secret_value)
