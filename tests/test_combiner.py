from __future__ import annotations

import secrets
import sys
from dataclasses import replace
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
APP_DIR = ROOT / "src" / "app"
sys.path.insert(0, str(APP_DIR))

from combiner import (  # type: ignore[import-not-found]  # noqa: E402
    CoinToss,
    FairDraw,
    combine,
    generate_secret_contribution,
    guess_matches,
)
from commit_reveal import verify  # type: ignore[import-not-found]  # noqa: E402
from protocol import OutOfRangeSelection, ProtocolOrderError, VerificationMismatch  # type: ignore[import-not-found]  # noqa: E402


def test_combine_known_value() -> None:
    assert combine(secret_value=3, open_value=4, modulus=6) == 1


@pytest.mark.parametrize("modulus", [1, 2, 6, 7, 20])
def test_combine_stays_in_range(modulus: int) -> None:
    for secret in range(modulus):
        for _ in range(1000 // modulus + 1):
            assert 0 <= combine(secret, secrets.randbelow(10_000), modulus) < modulus


def test_combine_is_uniform_when_secret_is_uniform() -> None:
    # Any fixed open value shifts a uniform secret onto every residue exactly once.
    for open_value in range(6):
        assert sorted(combine(s, open_value, 6) for s in range(6)) == list(range(6))


def test_combine_rejects_bad_modulus() -> None:
    with pytest.raises(ValueError):
        combine(1, 1, 0)


def test_secret_contribution_is_committed() -> None:
    value, c = generate_secret_contribution(6)
    assert 0 <= value < 6
    assert c.secret_value == value
    assert verify(value, c.secret_key, c.digest)


def test_guess_matches_is_equality() -> None:
    assert guess_matches(1, 1)
    assert not guess_matches(0, 1)


def test_fair_draw_cycle() -> None:
    draw = FairDraw.start(6)
    result = draw.add(4)
    value, key = draw.reveal()
    assert result == (value + 4) % 6
    assert draw.result == result
    assert verify(value, key, draw.digest)


def test_fair_draw_refuses_early_reveal() -> None:
    draw = FairDraw.start(6)
    with pytest.raises(ProtocolOrderError):
        draw.reveal()


def test_fair_draw_open_value_is_fixed_once() -> None:
    draw = FairDraw.start(6)
    draw.add(1)
    with pytest.raises(ProtocolOrderError):
        draw.add(2)


@pytest.mark.parametrize("bad", [-1, 6, 100, True])
def test_fair_draw_rejects_out_of_range(bad: int) -> None:
    draw = FairDraw.start(6)
    with pytest.raises(OutOfRangeSelection):
        draw.add(bad)
    assert draw.open_value is None


def test_coin_toss_uses_guess_not_sum() -> None:
    toss = CoinToss.start()
    assert toss.modulus == 2
    secret = toss.commitment.secret_value
    assert toss.guess(secret) is True
    value, _ = toss.reveal()
    assert value == secret

    other = CoinToss.start()
    assert other.guess(1 - other.commitment.secret_value) is False


def test_coin_toss_rejects_non_bit_guess() -> None:
    with pytest.raises(OutOfRangeSelection):
        CoinToss.start().guess(2)


def test_tampered_commitment_fails_on_reveal() -> None:
    draw = FairDraw.start(6)
    draw.commitment = replace(draw.commitment, digest="0" * 64)
    draw.add(3)
    with pytest.raises(VerificationMismatch):
        draw.reveal()


def test_start_returns_the_calling_class() -> None:
    assert type(FairDraw.start(6)) is FairDraw
    assert type(CoinToss.start()) is CoinToss
