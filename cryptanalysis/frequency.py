"""
SUBCRACK - Frequency analysis for substitution ciphers.
N-gram counting over arbitrary text and the frequency-rank key estimate.
"""

import re
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Mapping

from loguru import logger

from core.errors import ConfigurationError
from cryptanalysis.substitution import ALPHABET, Key

# Windows never cross a non-letter: whitespace, digits and punctuation all split words.
_LETTER_RUN = re.compile(r"[a-z]+")
_LETTERS = frozenset(ALPHABET)


def _check_width(n: int) -> None:
    if n not in (1, 2, 3):
        raise ConfigurationError(f"n-gram width must be 1, 2 or 3, got {n}")


def _count_runs(runs: List[str], n: int) -> Counter:
    counts: Counter = Counter()
    for run in runs:
        for i in range(len(run) - n + 1):
            counts[run[i:i + n]] += 1
    return counts


def count_unigrams(text: str) -> Counter:
    """Letter counts, keyed over all of a-z (zero when absent). Case-folded; non-letters ignored."""
    counts = Counter(dict.fromkeys(ALPHABET, 0))
    counts.update(c for c in text.lower() if c in _LETTERS)
    return counts


def count_ngrams(text: str, n: int) -> Counter:
    """
    Count every overlapping n-letter window of the case-folded text.
    A window containing whitespace or any other non-letter is skipped,
    so "ab cd" yields {"ab": 1, "cd": 1}.
    """
    _check_width(n)
    if n == 1:
        return count_unigrams(text)
    return _count_runs(_LETTER_RUN.findall(text.lower()), n)


def count_bigrams(text: str) -> Counter:
    return count_ngrams(text, 2)


def count_trigrams(text: str) -> Counter:
    return count_ngrams(text, 3)


def merge_counts(tables) -> Counter:
    """Key-wise sum of per-worker tables."""
    merged: Counter = Counter()
    for table in tables:
        for k, v in table.items():
            merged[k] += v
    return merged


def count_ngrams_parallel(text: str, n: int, workers: int = 4) -> Counter:
    """
    Fan-out/fan-in version of count_ngrams. Each worker counts a disjoint share of the
    letter runs into a private Counter; the tables are merged afterwards. Same result as
    the serial count.
    """
    _check_width(n)
    if workers < 1:
        raise ConfigurationError(f"workers must be >= 1, got {workers}")
    folded = text.lower()
    if n == 1:
        size = max(1, -(-len(folded) // workers))
        slices = [folded[i:i + size] for i in range(0, len(folded), size)] or [""]
        with ThreadPoolExecutor(max_workers=workers) as pool:
            tables = list(pool.map(count_unigrams, slices))
        return merge_counts(tables)
    runs = _LETTER_RUN.findall(folded)
    shares = [runs[i::workers] for i in range(workers)]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        tables = list(pool.map(lambda share: _count_runs(share, n), shares))
    merged = merge_counts(tables)
    logger.debug(f"[Frequency] {len(runs)} runs, {len(merged)} distinct {n}-grams over {workers} workers")
    return merged


def char_frequency(text: str) -> Dict[str, float]:
    """Character frequency in [0,1] for letters only."""
    if not text:
        return {}
    c = Counter(c.lower() for c in text if c.lower() in _LETTERS)
    total = sum(c.values())
    return {k: v / total for k, v in c.most_common()} if total else {}


def _ranked(table: Mapping[str, float], name: str) -> List[str]:
    if set(table) != _LETTERS:
        missing = sorted(_LETTERS - set(table))
        extra = sorted(set(table) - _LETTERS)
        raise ConfigurationError(
            f"{name} letter table must cover exactly a-z (missing={missing}, extra={extra})"
        )
    # Ascending by count; ties broken by letter order.
    return [letter for count, letter in sorted((table[c], c) for c in table)]


def estimate_key(expected: Mapping[str, float], observed: Mapping[str, float]) -> Key:
    """
    Initial key guess: the i-th least common reference letter is assumed to encrypt to
    the i-th least common ciphertext letter. E.g. the most common ciphertext letter is
    taken to stand for 'e' in English.
    """
    plain_ranked = _ranked(expected, "expected")
    cipher_ranked = _ranked(observed, "observed")
    mapping = dict(zip(plain_ranked, cipher_ranked))
    return Key("".join(mapping[c] for c in ALPHABET))
