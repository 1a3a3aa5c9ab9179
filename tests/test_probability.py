from __future__ import annotations

import random
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
APP_DIR = ROOT / "src" / "app"
sys.path.insert(0, str(APP_DIR))

from dice import parse_dice  # type: ignore[import-not-found]  # noqa: E402
from probability import (  # type: ignore[import-not-found]  # noqa: E402
    format_probability_table,
    probability_matrix,
    win_probability,
)


def test_reversed_dice_scenario() -> None:
    p = win_probability([1, 2, 3, 4, 5, 6], [6, 5, 4, 3, 2, 1])
    assert p.p_win == 15 / 36
    assert p.p_lose == 15 / 36
    assert p.p_draw == 6 / 36


def test_probabilities_sum_to_one() -> None:
    rng = random.Random(7)
    for _ in range(200):
        a = [rng.randint(-5, 12) for _ in range(rng.randint(1, 8))]
        b = [rng.randint(-5, 12) for _ in range(rng.randint(1, 8))]
        p = win_probability(a, b)
        assert abs(p.p_win + p.p_lose + p.p_draw - 1) < 1e-9


@pytest.mark.parametrize("die", [[1, 2, 3, 4, 5, 6], [1, 1, 3, 3, 5, 5], [4, 4, 4, 4, 4, 4], [0, 9, 2, 9, 2, 0]])
def test_self_comparison_is_symmetric(die: list[int]) -> None:
    p = win_probability(die, die)
    assert p.p_win == p.p_lose
    matching = sum(1 for a in die for b in die if a == b)
    assert p.p_draw == matching / len(die) ** 2


def test_non_transitive_dice() -> None:
    a, b, c = [2, 2, 4, 4, 9, 9], [1, 1, 6, 6, 8, 8], [3, 3, 5, 5, 7, 7]
    assert win_probability(a, b).p_win > 0.5
    assert win_probability(b, c).p_win > 0.5
    assert win_probability(c, a).p_win > 0.5


def test_empty_die_rejected() -> None:
    with pytest.raises(ValueError):
        win_probability([], [1])


def test_matrix_shape_and_antisymmetry() -> None:
    dice = parse_dice(["1,2,3,4,5,6", "6,5,4,3,2,1", "2,3,4,5,6,1", "3,3,3,3,3,3"])
    matrix = probability_matrix(list(dice))
    assert len(matrix) == 4
    assert all(len(row) == 4 for row in matrix)
    for i in range(4):
        for j in range(4):
            assert matrix[i][j].p_win == matrix[j][i].p_lose


def test_table_lists_every_die() -> None:
    dice = parse_dice(["2,2,4,4,9,9", "1,1,6,6,8,8", "3,3,5,5,7,7"])
    text = format_probability_table(list(dice))
    for die in dice:
        assert str(die) in text
    assert "0.5556" in text
    assert "- (0.3333) -" in text
