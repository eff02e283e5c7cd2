from __future__ import annotations

import random
import secrets

# Uppercase letters minus the look-alikes B, I, O, S, Z, plus digits: 31 symbols.
ID_ALPHABET = "ACDEFGHJKLMNPQRTUVWXY0123456789"
ID_LENGTH = 8
MIN_ID_LENGTH = 6

TOKEN_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
TOKEN_LENGTH = 64


class IdGenerator:
    """Short human-friendly identifiers.

    Not unique by construction; the table's primary key decides and
    ``insert_with_retry`` draws again on collision. Pass a seeded
    ``random.Random`` for reproducible sequences.
    """

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or secrets.SystemRandom()

    def generate(self) -> str:
        return "".join(self._rng.choice(ID_ALPHABET) for _ in range(ID_LENGTH))


class TokenGenerator:
    """64-character bearer tokens for sessions."""

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or secrets.SystemRandom()

    def generate(self) -> str:
        return "".join(self._rng.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))


_default_ids = IdGenerator()
_default_tokens = TokenGenerator()


def default_id_generator() -> IdGenerator:
    return _default_ids


def default_token_generator() -> TokenGenerator:
    return _default_tokens
