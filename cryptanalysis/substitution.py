"""
SUBCRACK - Monoalphabetic substitution key and transform.
"""

import random
import string
from typing import Optional

from core.errors import ConfigurationError

ALPHABET = string.ascii_lowercase
_ALPHABET_SET = frozenset(ALPHABET)


class Key:
    """
    Permutation of a-z. ``shifter[i]`` is the ciphertext letter for plaintext ``ALPHABET[i]``.
    Immutable: every modification returns a new Key.
    """

    __slots__ = ("_shifter", "_inverse", "_to_cipher", "_to_plain")

    def __init__(self, shifter: str):
        if not isinstance(shifter, str) or len(shifter) != 26:
            raise ConfigurationError(f"Key must be 26 letters long, got {shifter!r}")
        if any(c not in _ALPHABET_SET for c in shifter):
            raise ConfigurationError(f"Key must contain only lowercase letters a-z, got {shifter!r}")
        if len(set(shifter)) != 26:
            raise ConfigurationError(f"Key letters must be unique, got {shifter!r}")
        inverse = [""] * 26
        for i, c in enumerate(shifter):
            inverse[ord(c) - ord("a")] = ALPHABET[i]
        object.__setattr__(self, "_shifter", shifter)
        object.__setattr__(self, "_inverse", "".join(inverse))
        object.__setattr__(self, "_to_cipher", str.maketrans(ALPHABET, shifter))
        object.__setattr__(self, "_to_plain", str.maketrans(shifter, ALPHABET))

    def __setattr__(self, name, value):
        raise AttributeError("Key is immutable")

    @classmethod
    def identity(cls) -> "Key":
        return cls(ALPHABET)

    @classmethod
    def random(cls, rng: Optional[random.Random] = None) -> "Key":
        """Uniformly random permutation drawn from ``rng``."""
        letters = list(ALPHABET)
        (rng or random.Random()).shuffle(letters)
        return cls("".join(letters))

    @property
    def shifter(self) -> str:
        return self._shifter

    @property
    def inverse(self) -> str:
        """Shifter of the inverse permutation (ciphertext -> plaintext)."""
        return self._inverse

    def cipher_letter(self, plain: str) -> str:
        return self._shifter[ord(plain) - ord("a")]

    def plain_letter(self, cipher: str) -> str:
        return self._inverse[ord(cipher) - ord("a")]

    def swap(self, i: int, j: int) -> "Key":
        """New key with the ciphertext assignments at positions i and j exchanged."""
        if i == j:
            return self
        chars = list(self._shifter)
        chars[i], chars[j] = chars[j], chars[i]
        return Key("".join(chars))

    def similarity(self, other: "Key") -> int:
        """Number of plaintext letters both keys map to the same ciphertext letter."""
        return sum(1 for a, b in zip(self._shifter, str(other)) if a == b)

    def __str__(self) -> str:
        return self._shifter

    def __repr__(self) -> str:
        return f"Key({self._shifter!r})"

    def __eq__(self, other) -> bool:
        if isinstance(other, Key):
            return self._shifter == other._shifter
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._shifter)


class SubstitutionCipher:
    """Encrypt/decrypt lowercase a-z with a Key. Every other character passes through."""

    def __init__(self, key):
        self.key = key if isinstance(key, Key) else Key(key)

    def encrypt(self, text: str) -> str:
        return text.translate(self.key._to_cipher)

    def decrypt(self, text: str) -> str:
        return text.translate(self.key._to_plain)


def encrypt(text: str, key) -> str:
    return SubstitutionCipher(key).encrypt(text)


def decrypt(text: str, key) -> str:
    return SubstitutionCipher(key).decrypt(text)
