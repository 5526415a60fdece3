"""
SUBCRACK - State Management
Immutable search state passed through the key search loop, and the final result.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from cryptanalysis.substitution import Key


class SearchState(BaseModel):
    """One snapshot of a search chain: current key/score and the best seen so far."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    iteration: int = 0
    current_key: Key
    current_score: float
    best_key: Key
    best_score: float
    accepted: int = 0


class CrackResult(BaseModel):
    """Outcome of a full estimate -> search -> decrypt run."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    key: Key
    score: float
    plaintext: str
    initial_key: Key
    initial_score: float
    iterations: int
    accepted: int = 0
    seed: Optional[int] = None
    chain: int = 0
    scorer: str = "ngram"
    best_history: List[float] = Field(default_factory=list)
