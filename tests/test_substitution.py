"""
Unit tests for the substitution key and transform.
"""

import random

import pytest

from core.errors import ConfigurationError
from cryptanalysis.substitution import ALPHABET, Key, SubstitutionCipher, decrypt, encrypt


def test_identity_key_is_alphabet():
    assert str(Key.identity()) == ALPHABET
    assert Key.identity().inverse == ALPHABET


@pytest.mark.parametrize(
    "shifter",
    [
        "abc",
        ALPHABET + "a",
        "aacdefghijklmnopqrstuvwxyz",
        "Abcdefghijklmnopqrstuvwxyz",
        "1bcdefghijklmnopqrstuvwxyz",
        "abcdefghijklmnopqrstuvwxy ",
        "",
    ],
)
def test_key_rejects_malformed(shifter):
    with pytest.raises(ConfigurationError):
        Key(shifter)


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        Key("short")


def test_encrypt_decrypt_known_key(true_key):
    cipher = SubstitutionCipher(true_key)
    assert cipher.encrypt("abc xyz") == "qwe bnm"
    assert cipher.decrypt("qwe bnm") == "abc xyz"


def test_non_letters_pass_through(true_key):
    text = "Hello, World! 42\n\tok"
    assert encrypt(text, true_key) == "Htssg, Wgksr! 42\n\tga"


def test_round_trip_random_keys(sample_text):
    rng = random.Random(7)
    text = sample_text.lower()
    for _ in range(5):
        key = Key.random(rng)
        assert decrypt(encrypt(text, key), key) == text


def test_round_trip_preserves_mixed_case(true_key):
    text = "Mixed CASE text, with Punctuation."
    assert decrypt(encrypt(text, true_key), true_key) == text


def test_cipher_accepts_string_key():
    assert SubstitutionCipher("bcdefghijklmnopqrstuvwxyza").encrypt("az") == "ba"


def test_inverse_mapping(true_key):
    for plain in ALPHABET:
        assert true_key.plain_letter(true_key.cipher_letter(plain)) == plain


def test_swap_returns_new_key(true_key):
    swapped = true_key.swap(0, 1)
    assert str(true_key) == "qwertyuiopasdfghjklzxcvbnm"
    assert str(swapped) == "wqertyuiopasdfghjklzxcvbnm"
    assert true_key.swap(3, 3) is true_key


def test_key_is_immutable(true_key):
    with pytest.raises(AttributeError):
        true_key._shifter = ALPHABET


def test_similarity(true_key):
    assert true_key.similarity(true_key) == 26
    assert true_key.similarity(true_key.swap(0, 25)) == 24


def test_key_equality_and_hash():
    assert Key(ALPHABET) == Key.identity()
    assert len({Key(ALPHABET), Key.identity()}) == 1
