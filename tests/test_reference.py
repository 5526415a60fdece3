"""
Unit tests for reference statistics loading.
"""

import pytest

from core.errors import DataUnavailableError
from cryptanalysis.reference import ReferenceStatistics, load_reference, parse_reference
from cryptanalysis.substitution import ALPHABET


def _letters_section(skip: str = "") -> str:
    return "\n".join(
        f"{i + 1}. {c} ({100 - i}, 1.0)" for i, c in enumerate(ALPHABET) if c not in skip
    )


def _reference_text(skip: str = "") -> str:
    return (
        "Test reference\n"
        "# Letters\n" + _letters_section(skip) + "\n"
        "# Bigrams\n1. th (50, 3.5)\n2. he (40, 3.0)\n"
        "# Trigrams\n1. the (30, 1.8)\n"
    )


def test_bundled_reference_is_complete(reference):
    assert set(reference.unigrams) == set(ALPHABET)
    assert reference.unigrams["e"] == 21912
    assert reference.bigrams["th"] > reference.bigrams["he"]
    assert "the" in reference.trigrams
    assert reference.letter_total == sum(reference.unigrams.values())


def test_bundled_reference_is_cached():
    assert load_reference() is load_reference()


def test_reference_tables_are_read_only(reference):
    with pytest.raises(TypeError):
        reference.bigrams["zz"] = 1


def test_parse_reference():
    stats = parse_reference(_reference_text())
    assert stats.unigrams["a"] == 100
    assert stats.unigrams["z"] == 75
    assert dict(stats.bigrams) == {"th": 50, "he": 40}
    assert dict(stats.trigrams) == {"the": 30}
    assert stats.table(2) is stats.bigrams


def test_parse_reference_ignores_non_data_lines():
    text = _reference_text().replace("# Bigrams\n", "# Bigrams\nsource: sample corpus\n\n")
    assert len(parse_reference(text).bigrams) == 2


def test_parse_reference_missing_letter():
    with pytest.raises(DataUnavailableError):
        parse_reference(_reference_text(skip="q"))


def test_parse_reference_missing_section():
    text = "# Letters\n" + _letters_section() + "\n# Bigrams\n1. th (50, 3.5)\n"
    with pytest.raises(DataUnavailableError):
        parse_reference(text)


def test_parse_reference_malformed_count():
    text = _reference_text().replace("1. th (50, 3.5)", "1. th (many, 3.5)")
    with pytest.raises(DataUnavailableError):
        parse_reference(text)


def test_parse_reference_bad_ngram():
    text = _reference_text().replace("1. the (30, 1.8)", "1. th3 (30, 1.8)")
    with pytest.raises(DataUnavailableError):
        parse_reference(text)


def test_load_reference_missing_file(tmp_path):
    with pytest.raises(DataUnavailableError):
        load_reference(tmp_path / "nope.txt")


def test_load_reference_from_file(tmp_path):
    path = tmp_path / "ref.txt"
    path.write_text(_reference_text(), encoding="utf-8")
    stats = load_reference(path)
    assert stats.source == str(path.resolve())
    assert stats.bigrams["th"] == 50


def test_validate_rejects_empty_ngram_tables():
    stats = ReferenceStatistics(unigrams=dict.fromkeys(ALPHABET, 1), bigrams={}, trigrams={"the": 1})
    with pytest.raises(DataUnavailableError):
        stats.validate()
