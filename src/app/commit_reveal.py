from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass, field
from typing import Final

from protocol import VerificationMismatch

LOGGER = logging.getLogger(__name__)

HASH_NAME: Final[str] = "sha3_256"
KEY_BYTES: Final[int] = 32


def generate_key(num_bytes: int = KEY_BYTES) -> bytes:
    if num_bytes < 1:
        raise ValueError("key length must be at least one byte")
    return secrets.token_bytes(num_bytes)


def canonical_message(secret_value: int) -> bytes:
    # Decimal string, so anyone can recompute the tag with a stock HMAC tool.
    return str(int(secret_value)).encode("ascii")


def compute_digest(secret_value: int, secret_key: bytes) -> str:
    tag = hmac.new(secret_key, canonical_message(secret_value), getattr(hashlib, HASH_NAME))
    return tag.hexdigest().upper()


@dataclass(frozen=True)
class Commitment:
    secret_value: int = field(repr=False)
    secret_key: bytes = field(repr=False)
    digest: str

    @property
    def key_hex(self) -> str:
        return self.secret_key.hex().upper()


def commit(secret_value: int, key_length_bytes: int = KEY_BYTES) -> Commitment:
    key = generate_key(key_length_bytes)
    commitment = Commitment(secret_value=secret_value, secret_key=key, digest=compute_digest(secret_value, key))
    LOGGER.debug("committed to a secret value (digest=%s)", commitment.digest)
    return commitment


def reveal(commitment: Commitment) -> tuple[int, bytes]:
    # Only call once the counterpart's contribution is fixed.
    return commitment.secret_value, commitment.secret_key


def verify(secret_value: int, secret_key: bytes, digest: str) -> bool:
    computed = compute_digest(secret_value, secret_key)
    return secrets.compare_digest(digest.strip().upper().encode("utf-8"), computed.encode("ascii"))


def require_verified(secret_value: int, secret_key: bytes, digest: str) -> None:
    if not verify(secret_value, secret_key, digest):
        raise VerificationMismatch(
            f"revealed value {secret_value} with key {secret_key.hex().upper()} does not match digest {digest}"
        )
