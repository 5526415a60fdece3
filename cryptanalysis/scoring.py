"""
SUBCRACK - Candidate key scoring.

NgramScorer: weighted absolute deviation from reference bigram/trigram counts (lower is better).
LanguageConfidenceScorer: language-detector confidence in the decryption (higher is better).
"""

from typing import Callable, Dict, Optional, Tuple

from langdetect import DetectorFactory, detect_langs
from langdetect.lang_detect_exception import LangDetectException
from loguru import logger

from core.errors import ConfigurationError
from cryptanalysis.frequency import count_bigrams, count_trigrams, count_unigrams
from cryptanalysis.reference import ReferenceStatistics
from cryptanalysis.substitution import Key, SubstitutionCipher

# langdetect is non-deterministic unless seeded; seed once, before any scorer thread runs.
DetectorFactory.seed = 0


class Scorer:
    """Scores a candidate key against a fixed ciphertext. Subclasses fix the direction."""

    name = "base"
    maximize = False

    def __init__(self, ciphertext: str):
        self.ciphertext = ciphertext

    def decrypt(self, key: Key) -> str:
        return SubstitutionCipher(key).decrypt(self.ciphertext)

    def score(self, key: Key) -> float:
        raise NotImplementedError

    def __call__(self, key: Key) -> float:
        return self.score(key)

    @property
    def worst(self) -> float:
        return float("-inf") if self.maximize else float("inf")

    def better(self, a: float, b: float) -> bool:
        """True if score a is strictly better than score b."""
        return a > b if self.maximize else a < b


class NgramScorer(Scorer):
    """
    Sum over every reference n-gram of |expected count - count in the decryption|,
    combined as bigram_weight * bigram_sum + trigram_weight * trigram_sum.

    By default the raw reference counts are used. They are far larger than any sample
    count, so the score falls with every reference n-gram the decryption produces.
    With scale_reference the reference counts are rescaled to the number of letters in
    the ciphertext instead; that objective is noisier on short samples.
    """

    name = "ngram"
    maximize = False

    def __init__(
        self,
        reference: ReferenceStatistics,
        ciphertext: str,
        bigram_weight: float = 0.2,
        trigram_weight: float = 0.9,
        scale_reference: bool = False,
    ):
        super().__init__(ciphertext)
        if bigram_weight < 0 or trigram_weight < 0:
            raise ConfigurationError("n-gram weights must be non-negative")
        self.bigram_weight = bigram_weight
        self.trigram_weight = trigram_weight
        self.scale_reference = scale_reference
        # Letters stay letters under any key, so the sample size is key-invariant.
        self.sample_letters = sum(count_unigrams(ciphertext).values())
        factor = 1.0
        if scale_reference and reference.letter_total:
            factor = self.sample_letters / reference.letter_total
        self._expected_bigrams: Tuple[Tuple[str, float], ...] = tuple(
            (g, c * factor) for g, c in reference.bigrams.items()
        )
        self._expected_trigrams: Tuple[Tuple[str, float], ...] = tuple(
            (g, c * factor) for g, c in reference.trigrams.items()
        )

    @staticmethod
    def _deviation(expected, measured) -> float:
        return sum(abs(count - measured.get(gram, 0)) for gram, count in expected)

    def components(self, key: Key) -> Dict[str, float]:
        """Unweighted bigram and trigram deviations for the decryption under key."""
        plain = self.decrypt(key)
        return {
            "bigram": self._deviation(self._expected_bigrams, count_bigrams(plain)),
            "trigram": self._deviation(self._expected_trigrams, count_trigrams(plain)),
        }

    def score(self, key: Key) -> float:
        parts = self.components(key)
        return self.bigram_weight * parts["bigram"] + self.trigram_weight * parts["trigram"]


def langdetect_confidence(text: str, language: str) -> float:
    """Probability langdetect assigns to `language` for text; 0.0 if undetectable."""
    try:
        for candidate in detect_langs(text):
            if candidate.lang == language:
                return float(candidate.prob)
    except LangDetectException as e:
        logger.debug(f"[Scorer] langdetect gave no answer: {e}")
    return 0.0


class LanguageConfidenceScorer(Scorer):
    """Confidence in [0, 1] that the decryption is natural `language` text. Higher is better."""

    name = "language"
    maximize = True

    def __init__(
        self,
        ciphertext: str,
        language: str = "en",
        detector: Optional[Callable[[str, str], float]] = None,
    ):
        super().__init__(ciphertext)
        self.language = language
        self.detector = detector or langdetect_confidence

    def score(self, key: Key) -> float:
        return self.detector(self.decrypt(key), self.language)


def build_scorer(
    name: str,
    reference: ReferenceStatistics,
    ciphertext: str,
    bigram_weight: float = 0.2,
    trigram_weight: float = 0.9,
    scale_reference: bool = False,
    language: str = "en",
    detector: Optional[Callable[[str, str], float]] = None,
) -> Scorer:
    if name == "ngram":
        return NgramScorer(
            reference,
            ciphertext,
            bigram_weight=bigram_weight,
            trigram_weight=trigram_weight,
            scale_reference=scale_reference,
        )
    if name == "language":
        return LanguageConfidenceScorer(ciphertext, language=language, detector=detector)
    raise ConfigurationError(f"Unknown scorer {name!r} (expected 'ngram' or 'language')")
