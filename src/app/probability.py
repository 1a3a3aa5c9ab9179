from __future__ import annotations

from typing import NamedTuple, Sequence

from tabulate import tabulate


class WinProbability(NamedTuple):
    p_win: float
    p_lose: float
    p_draw: float


def win_probability(dice_a: Sequence[int], dice_b: Sequence[int]) -> WinProbability:
    """Chance that a throw of ``dice_a`` beats, loses to, or ties ``dice_b``.

    Every ordered pair of faces is counted once, so the three values always
    add up to 1.
    """
    if not len(dice_a) or not len(dice_b):
        raise ValueError("both dice need at least one face")
    wins = losses = draws = 0
    for a in dice_a:
        for b in dice_b:
            if a > b:
                wins += 1
            elif a < b:
                losses += 1
            else:
                draws += 1
    total = len(dice_a) * len(dice_b)
    return WinProbability(wins / total, losses / total, draws / total)


def probability_matrix(dice: Sequence[Sequence[int]]) -> list[list[WinProbability]]:
    return [[win_probability(row, col) for col in dice] for row in dice]


def format_probability_table(dice: Sequence[Sequence[int]]) -> str:
    headers = ["User dice v"] + [",".join(map(str, d)) for d in dice]
    rows = []
    for i, cells in enumerate(probability_matrix(dice)):
        row = [",".join(map(str, dice[i]))]
        for j, cell in enumerate(cells):
            text = f"{cell.p_win:.4f}"
            row.append(f"- ({text}) -" if i == j else text)
        rows.append(row)
    intro = "Probability of the win for the user (row die) against the computer (column die):\n"
    return intro + tabulate(rows, headers=headers, tablefmt="grid", disable_numparse=True)
