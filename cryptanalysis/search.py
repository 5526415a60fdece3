"""
SUBCRACK - Key search.
Frequency-rank estimate refined by random-swap local search (hill climbing with an
optional constant keep-anyway chance), tracking the best key seen.
"""

import random
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, NamedTuple, Optional, Union

from loguru import logger

from core.config import settings
from core.errors import ConfigurationError
from core.state import CrackResult, SearchState
from cryptanalysis.frequency import count_ngrams_parallel, estimate_key
from cryptanalysis.reference import ReferenceStatistics, load_reference
from cryptanalysis.scoring import Scorer, build_scorer
from cryptanalysis.substitution import Key, SubstitutionCipher


class ChainResult(NamedTuple):
    chain: int
    seed: Optional[int]
    state: SearchState
    history: List[float]


def propose(key: Key, rng: random.Random) -> Key:
    """Swap the ciphertext letters of two positions drawn independently (may coincide)."""
    return key.swap(rng.randrange(26), rng.randrange(26))


def initial_state(key: Key, scorer: Scorer) -> SearchState:
    score = scorer.score(key)
    return SearchState(
        iteration=0,
        current_key=key,
        current_score=score,
        best_key=key,
        best_score=score,
    )


def step(state: SearchState, scorer: Scorer, rng: random.Random, keep_chance: float = 0.0) -> SearchState:
    """One iteration: propose, score, update best, then accept or reject. Returns a new state."""
    proposal = propose(state.current_key, rng)
    score = scorer.score(proposal)

    best_key, best_score = state.best_key, state.best_score
    if scorer.better(score, best_score):
        best_key, best_score = proposal, score

    if scorer.better(score, state.current_score) or rng.random() < keep_chance:
        current_key, current_score, accepted = proposal, score, state.accepted + 1
    else:
        current_key, current_score, accepted = state.current_key, state.current_score, state.accepted

    return SearchState(
        iteration=state.iteration + 1,
        current_key=current_key,
        current_score=current_score,
        best_key=best_key,
        best_score=best_score,
        accepted=accepted,
    )


class KeySearch:
    """Runs one sequential search chain with its own seeded random generator."""

    def __init__(
        self,
        scorer: Scorer,
        iterations: int = 1000,
        keep_chance: float = 0.0,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        patience: int = 0,
    ):
        if iterations < 0:
            raise ConfigurationError(f"iterations must be >= 0, got {iterations}")
        if not 0.0 <= keep_chance <= 1.0:
            raise ConfigurationError(f"keep_chance must be within [0, 1], got {keep_chance}")
        if patience < 0:
            raise ConfigurationError(f"patience must be >= 0, got {patience}")
        self.scorer = scorer
        self.iterations = iterations
        self.keep_chance = keep_chance
        self.patience = patience
        self.seed = seed
        self.rng = rng or random.Random(seed)

    def run(self, start: Union[Key, SearchState]) -> ChainResult:
        state = start if isinstance(start, SearchState) else initial_state(start, self.scorer)
        history: List[float] = []
        stale = 0
        for _ in range(self.iterations):
            previous_best = state.best_score
            state = step(state, self.scorer, self.rng, self.keep_chance)
            history.append(state.best_score)
            if self.scorer.better(state.best_score, previous_best):
                stale = 0
                logger.debug(f"[Search] iter {state.iteration}: best {state.best_score:.3f} ({state.best_key})")
            else:
                stale += 1
            if self.patience and stale >= self.patience:
                logger.info(f"[Search] No improvement for {stale} iterations, stopping at {state.iteration}")
                break
        return ChainResult(chain=0, seed=self.seed, state=state, history=history)


def run_chains(
    scorer: Scorer,
    start: Union[Key, SearchState],
    chains: int = 1,
    iterations: int = 1000,
    keep_chance: float = 0.0,
    seed: Optional[int] = None,
    patience: int = 0,
) -> ChainResult:
    """Independent chains from the same start (seeds seed, seed+1, ...); best by scorer order wins."""
    if chains < 1:
        raise ConfigurationError(f"chains must be >= 1, got {chains}")
    seeds = [None if seed is None else seed + i for i in range(chains)]

    def _run(index: int) -> ChainResult:
        result = KeySearch(scorer, iterations, keep_chance, seed=seeds[index], patience=patience).run(start)
        return result._replace(chain=index)

    if chains == 1:
        results = [_run(0)]
    else:
        with ThreadPoolExecutor(max_workers=chains) as pool:
            results = list(pool.map(_run, range(chains)))

    best = results[0]
    for result in results[1:]:
        if scorer.better(result.state.best_score, best.state.best_score):
            best = result
    return best


def crack(
    ciphertext: str,
    reference: Union[ReferenceStatistics, str, Path, None] = None,
    iterations: Optional[int] = None,
    keep_chance: Optional[float] = None,
    seed: Optional[int] = None,
    chains: Optional[int] = None,
    scorer: Optional[str] = None,
    patience: Optional[int] = None,
    detector=None,
) -> CrackResult:
    """
    Full pipeline: case-fold, estimate a key from letter ranks, refine it by key search,
    decrypt with the best key found. Unset tuning values fall back to settings.
    """
    iterations = settings.ITERATIONS if iterations is None else iterations
    keep_chance = settings.KEEP_CHANCE if keep_chance is None else keep_chance
    chains = settings.CHAINS if chains is None else chains
    patience = settings.PATIENCE if patience is None else patience
    seed = settings.SEED if seed is None else seed
    scorer_name = scorer or settings.SCORER

    if isinstance(reference, ReferenceStatistics):
        stats = reference.validate()
    else:
        stats = load_reference(reference)

    text = ciphertext.lower()
    start = estimate_key(stats.unigrams, count_ngrams_parallel(text, 1, workers=settings.COUNT_WORKERS))
    active = build_scorer(
        scorer_name,
        stats,
        text,
        bigram_weight=settings.BIGRAM_WEIGHT,
        trigram_weight=settings.TRIGRAM_WEIGHT,
        scale_reference=settings.SCALE_REFERENCE,
        language=settings.LANGUAGE,
        detector=detector,
    )
    state0 = initial_state(start, active)
    initial_score = state0.best_score
    logger.info(
        f"[Search] Start key {start} score {initial_score:.3f}; "
        f"{chains} chain(s) x {iterations} iterations, keep_chance={keep_chance}, seed={seed}"
    )

    best = run_chains(
        active,
        state0,
        chains=chains,
        iterations=iterations,
        keep_chance=keep_chance,
        seed=seed,
        patience=patience,
    )
    state = best.state
    plaintext = SubstitutionCipher(state.best_key).decrypt(text)
    logger.info(f"[Search] Best key {state.best_key} score {state.best_score:.3f} (chain {best.chain})")

    return CrackResult(
        key=state.best_key,
        score=state.best_score,
        plaintext=plaintext,
        initial_key=start,
        initial_score=initial_score,
        iterations=state.iteration,
        accepted=state.accepted,
        seed=best.seed,
        chain=best.chain,
        scorer=active.name,
        best_history=best.history,
    )
