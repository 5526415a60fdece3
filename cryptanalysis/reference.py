"""
SUBCRACK - Reference n-gram statistics for the target language.

File format: sections separated by '#' (letters, bigrams, trigrams, in that order).
Only lines ending in ')' are data lines, e.g. "1. th (5062, 3.56)": split on
space, '(' and ',' the second token is the n-gram and the fourth its count.
Text before the first section is free-form description.
"""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Union

from loguru import logger

from core.config import settings
from core.errors import DataUnavailableError
from cryptanalysis.substitution import ALPHABET

_TOKEN_SPLIT = re.compile(r"[ (,]")


@dataclass(frozen=True)
class ReferenceStatistics:
    """Expected unigram/bigram/trigram counts for canonical text. Read-only once built."""

    unigrams: Mapping[str, int]
    bigrams: Mapping[str, int]
    trigrams: Mapping[str, int]
    source: Optional[str] = None
    letter_total: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "unigrams", MappingProxyType(dict(self.unigrams)))
        object.__setattr__(self, "bigrams", MappingProxyType(dict(self.bigrams)))
        object.__setattr__(self, "trigrams", MappingProxyType(dict(self.trigrams)))
        object.__setattr__(self, "letter_total", sum(self.unigrams.values()))

    def table(self, n: int) -> Mapping[str, int]:
        return {1: self.unigrams, 2: self.bigrams, 3: self.trigrams}[n]

    def validate(self) -> "ReferenceStatistics":
        """Raise DataUnavailableError unless every table is usable for a search."""
        where = f" in {self.source}" if self.source else ""
        if set(self.unigrams) != set(ALPHABET):
            missing = sorted(set(ALPHABET) - set(self.unigrams))
            raise DataUnavailableError(f"Letter table{where} does not cover a-z (missing {missing})")
        if self.letter_total <= 0:
            raise DataUnavailableError(f"Letter table{where} has no counts")
        if not self.bigrams or not self.trigrams:
            raise DataUnavailableError(f"Bigram and trigram tables{where} must not be empty")
        for n, table in ((2, self.bigrams), (3, self.trigrams)):
            bad = [g for g in table if len(g) != n or any(c not in ALPHABET for c in g)]
            if bad:
                raise DataUnavailableError(f"Invalid {n}-grams{where}: {bad[:5]}")
        return self


def _data_lines(section: str) -> List[str]:
    return [line.strip() for line in section.splitlines() if line.strip().endswith(")")]


def _parse_section(lines: List[str], n: int) -> Dict[str, int]:
    table: Dict[str, int] = {}
    for line in lines:
        tokens = _TOKEN_SPLIT.split(line)
        try:
            if n == 1:
                gram = next(c for c in line if c.isalpha())
            else:
                gram = tokens[1]
            count = int(tokens[3])
        except (StopIteration, IndexError, ValueError) as e:
            raise DataUnavailableError(f"Malformed reference line: {line!r}") from e
        table[gram.lower()] = count
    return table


def parse_reference(text: str, source: Optional[str] = None) -> ReferenceStatistics:
    """Build validated ReferenceStatistics from the '#'-sectioned text format."""
    sections = [lines for lines in (_data_lines(s) for s in text.split("#")) if lines]
    if len(sections) < 3:
        raise DataUnavailableError(
            f"Reference data{' ' + source if source else ''} needs letter, bigram and trigram sections, "
            f"found {len(sections)}"
        )
    stats = ReferenceStatistics(
        unigrams=_parse_section(sections[0], 1),
        bigrams=_parse_section(sections[1], 2),
        trigrams=_parse_section(sections[2], 3),
        source=source,
    )
    return stats.validate()


@lru_cache(maxsize=8)
def _load_cached(path: Path) -> ReferenceStatistics:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DataUnavailableError(f"Could not read reference data {path}: {e}") from e
    stats = parse_reference(text, source=str(path))
    logger.info(
        f"[Reference] Loaded {path.name}: {len(stats.unigrams)} letters, "
        f"{len(stats.bigrams)} bigrams, {len(stats.trigrams)} trigrams"
    )
    return stats


def load_reference(path: Union[str, Path, None] = None) -> ReferenceStatistics:
    """Load (once per path) the reference statistics. Defaults to settings.REFERENCE_PATH."""
    resolved = Path(path) if path is not None else Path(settings.REFERENCE_PATH)
    return _load_cached(resolved.resolve())
