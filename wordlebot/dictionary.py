"""
Dictionary
==========

The fixed universe of legal guesses plus a frequency-ranked list used as
prior probabilities for the answer.

Resource format: one ``word count`` line per entry, most frequent first.
A line holding only a word gets weight 1, the same default the frequency
builder writes for words it never observed.
"""

import logging
import os
import time
from functools import lru_cache
from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .exceptions import DictionaryError, WordError
from .feedback import check_word, compute_feedback_matrix, words_to_chars

log = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

DEFAULT_DICTIONARY_PATH = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), "data", "dictionary.txt")

# Above this size the (n x n) feedback matrix is not built automatically
MATRIX_WORD_LIMIT = 4096


# ============================================================================
# DICTIONARY
# ============================================================================

class Dictionary:
    """
    Immutable word set plus ranked (word, weight) list.

    Built once and shared read-only between solvers and games. When
    ``precompute`` is set (or left as None and the dictionary is small
    enough) the full guess x answer feedback matrix is computed up front.
    """

    def __init__(self, entries: Iterable[Tuple[str, int]],
                 precompute: Optional[bool] = None):
        ranked = []
        seen = set()
        for word, weight in entries:
            check_word(word)
            if word in seen:
                raise DictionaryError(f"Duplicate word '{word}'")
            if isinstance(weight, bool) or not isinstance(weight, (int, np.integer)):
                raise DictionaryError(f"Weight for '{word}' must be an integer count, got {weight!r}")
            if weight <= 0:
                raise DictionaryError(f"Weight for '{word}' must be positive, got {weight}")
            seen.add(word)
            ranked.append((word, int(weight)))

        if not ranked:
            raise DictionaryError("Dictionary is empty")

        self.ranked: Tuple[Tuple[str, int], ...] = tuple(ranked)
        self.words = frozenset(seen)
        self.word_list: List[str] = [w for w, _ in ranked]
        self.word_to_idx = {w: i for i, w in enumerate(self.word_list)}

        self.weights = np.array([c for _, c in ranked], dtype=np.float64)
        self.chars = words_to_chars(self.word_list)
        self.weights.setflags(write=False)
        self.chars.setflags(write=False)

        if precompute is None:
            precompute = len(ranked) <= MATRIX_WORD_LIMIT
        self.feedback_matrix: Optional[np.ndarray] = None
        if precompute:
            self.feedback_matrix = self._build_matrix()

    def _build_matrix(self) -> np.ndarray:
        n = len(self.word_list)
        log.info(f"Precomputing feedback matrix ({n} guesses x {n} answers)...")
        start = time.time()
        matrix = compute_feedback_matrix(self.chars, self.chars)
        elapsed = time.time() - start
        rate = n * n / elapsed / 1e6 if elapsed > 0 else float('inf')
        log.info(f"Done in {elapsed:.1f}s ({rate:.1f}M pairs/sec)")
        matrix.setflags(write=False)
        return matrix

    def __len__(self) -> int:
        return len(self.ranked)

    def __iter__(self) -> Iterator[str]:
        return iter(self.word_list)

    def __contains__(self, word) -> bool:
        return word in self.words

    def contains(self, word: str) -> bool:
        """Whether ``word`` is a legal guess."""
        return word in self.words

    def index(self, word: str) -> int:
        """Frequency rank of ``word`` (0 is most frequent)."""
        return self.word_to_idx[word]

    def ranked_candidates(self) -> Iterator[Tuple[str, int]]:
        """(word, weight) pairs, most frequent first."""
        return iter(self.ranked)

    def entries(self) -> List[Tuple[str, int]]:
        return list(self.ranked)


# ============================================================================
# LOADING
# ============================================================================

def parse_dictionary(lines: Iterable[str], source: str = "<dictionary>") -> List[Tuple[str, int]]:
    """Parse ``word [count]`` lines into (word, weight) pairs."""
    entries = []
    for lineno, line in enumerate(lines, 1):
        fields = line.split()
        if not fields:
            continue
        if len(fields) > 2:
            raise DictionaryError(f"{source}:{lineno}: expected 'word [count]', got {line.strip()!r}")

        word = fields[0].lower()
        try:
            check_word(word)
        except WordError as e:
            raise DictionaryError(f"{source}:{lineno}: {e}") from e

        weight = 1
        if len(fields) == 2:
            try:
                weight = int(fields[1])
            except ValueError as e:
                raise DictionaryError(f"{source}:{lineno}: count {fields[1]!r} is not an integer") from e
            if weight <= 0:
                raise DictionaryError(f"{source}:{lineno}: count must be positive, got {weight}")

        entries.append((word, weight))
    return entries


def load_dictionary(filepath: str, precompute: Optional[bool] = None) -> Dictionary:
    """Load a dictionary resource from disk."""
    try:
        with open(filepath, 'r') as f:
            entries = parse_dictionary(f, source=filepath)
    except OSError as e:
        raise DictionaryError(f"Could not read dictionary '{filepath}': {e}") from e

    log.info(f"Loaded {len(entries)} words from {filepath}")
    return Dictionary(entries, precompute=precompute)


@lru_cache(maxsize=None)
def default_dictionary() -> Dictionary:
    """The bundled dictionary, loaded once per process."""
    return load_dictionary(DEFAULT_DICTIONARY_PATH)
