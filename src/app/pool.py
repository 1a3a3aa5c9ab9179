from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field

from dice import Die, DiceSet
from protocol import OutOfRangeSelection, PoolExhausted

LOGGER = logging.getLogger(__name__)


@dataclass
class DicePool:
    # Keyed by position in the DiceSet; positions never shift after a claim.
    dice: dict[int, Die] = field(default_factory=dict)

    @classmethod
    def from_dice(cls, dice: DiceSet) -> "DicePool":
        return cls(dice=dict(enumerate(dice)))

    def __len__(self) -> int:
        return len(self.dice)

    def indices(self) -> list[int]:
        return list(self.dice)

    def available(self) -> list[tuple[int, Die]]:
        return list(self.dice.items())

    def claim(self, index: int) -> Die:
        if not self.dice:
            raise PoolExhausted("no dice left to claim")
        if isinstance(index, bool) or index not in self.dice:
            raise OutOfRangeSelection(index, ", ".join(str(i) for i in self.dice))
        die = self.dice.pop(index)
        LOGGER.debug("claimed die %d [%s], %d left", index, die, len(self.dice))
        return die

    def random_claim(self) -> tuple[int, Die]:
        if not self.dice:
            raise PoolExhausted("no dice left to claim")
        index = secrets.choice(self.indices())
        return index, self.claim(index)
