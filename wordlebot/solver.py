"""
Entropy Solver
==============

Picks each guess by expected information gain over the words that are
still consistent with the feedback so far.

For every word in the guess pool the remaining candidates are bucketed by
the feedback code they would produce. Each bucket's probability is its
share of the candidates' frequency weight, and the guess's entropy is

    H(g) = -sum(p * log2(p))   over non-empty buckets

The sweep over (guess x candidate) pairs is the hot path. It runs as a
numba ``prange`` loop: every guess owns a private 243-slot histogram, so
workers never share mutable state and the only reduction is the final
argmin in numpy.

Scoring blends information and likelihood as the expected number of
guesses still needed:

    E(g) = p(g) + (1 - p(g)) * (1 + est(H_now - H(g)))

where p(g) is the chance that g itself is the answer and est() maps the
entropy left over to an estimate of the guesses needed to clear it.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np
from numba import jit, prange

from .dictionary import Dictionary
from .feedback import N_PATTERNS, compute_feedback
from .guess import Guess
from .guesser import Guesser

log = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

GUESS_POOLS = ("dictionary", "candidates")

# est(bits) = ln(bits * SCALE + OFFSET); tunable
ENTROPY_STEP_SCALE = 3.870
ENTROPY_STEP_OFFSET = 3.679


# ============================================================================
# NUMBA-ACCELERATED ENTROPY
# ============================================================================

@jit(nopython=True, cache=True)
def bucket_entropy(buckets: np.ndarray, total: float) -> float:
    """Shannon entropy (bits) of weighted buckets. Empty buckets are skipped."""
    if total <= 0.0:
        return 0.0

    entropy = 0.0
    for i in range(buckets.shape[0]):
        w = buckets[i]
        if w > 0.0:
            p = w / total
            entropy -= p * np.log2(p)

    return entropy


@jit(nopython=True, parallel=True, cache=True)
def compute_entropies(guess_chars: np.ndarray, answer_chars: np.ndarray,
                      weights: np.ndarray) -> np.ndarray:
    """
    Entropy of each guess over weighted candidate answers.

    Args:
        guess_chars: shape (n_guesses, 5) array of char codes
        answer_chars: shape (n_answers, 5) array of char codes
        weights: shape (n_answers,) prior weight of each answer

    Returns:
        shape (n_guesses,) entropies in bits
    """
    n_guesses = guess_chars.shape[0]
    n_answers = answer_chars.shape[0]

    total = 0.0
    for j in range(n_answers):
        total += weights[j]

    result = np.zeros(n_guesses, dtype=np.float64)
    for i in prange(n_guesses):
        buckets = np.zeros(N_PATTERNS, dtype=np.float64)
        for j in range(n_answers):
            buckets[compute_feedback(guess_chars[i], answer_chars[j])] += weights[j]
        result[i] = bucket_entropy(buckets, total)

    return result


@jit(nopython=True, parallel=True, cache=True)
def compute_entropies_from_matrix(feedback_matrix: np.ndarray, guesses: np.ndarray,
                                  candidates: np.ndarray, weights: np.ndarray) -> np.ndarray:
    """
    Same as ``compute_entropies`` but reads codes from a precomputed matrix.

    Args:
        feedback_matrix: shape (n_words, n_words), [guess, answer] -> code
        guesses: row indices to score
        candidates: column indices of the remaining answers
        weights: prior weight of each candidate, aligned with ``candidates``
    """
    n_guesses = guesses.shape[0]
    n_candidates = candidates.shape[0]

    total = 0.0
    for k in range(n_candidates):
        total += weights[k]

    result = np.zeros(n_guesses, dtype=np.float64)
    for i in prange(n_guesses):
        row = feedback_matrix[guesses[i]]
        buckets = np.zeros(N_PATTERNS, dtype=np.float64)
        for k in range(n_candidates):
            buckets[row[candidates[k]]] += weights[k]
        result[i] = bucket_entropy(buckets, total)

    return result


def estimate_remaining_guesses(bits):
    """Rough number of further guesses needed to resolve ``bits`` of uncertainty."""
    return np.log(np.asarray(bits) * ENTROPY_STEP_SCALE + ENTROPY_STEP_OFFSET)


# ============================================================================
# SOLVER CLASS
# ============================================================================

class EntropySolver(Guesser):
    """
    Entropy-maximising guesser.

    One instance follows one playthrough at a time. The candidate set only
    ever shrinks while the history grows; a shorter history than the one
    already seen means a new game and the solver starts over.
    """

    def __init__(self, dictionary: Dictionary, guess_pool: str = "dictionary",
                 first_guess: Optional[str] = None, use_matrix: Optional[bool] = None):
        """
        Args:
            dictionary: legal words and their frequency priors
            guess_pool: "dictionary" scores every legal word, "candidates"
                only the words still consistent with the feedback
            first_guess: opening word; computed each game when None
            use_matrix: read feedback from the dictionary's precomputed
                matrix (default: whenever it has one)
        """
        if guess_pool not in GUESS_POOLS:
            raise ValueError(f"guess_pool must be one of {GUESS_POOLS}, got '{guess_pool}'")

        if use_matrix is None:
            use_matrix = dictionary.feedback_matrix is not None
        elif use_matrix and dictionary.feedback_matrix is None:
            raise ValueError("Dictionary was built without a feedback matrix")

        if first_guess is not None:
            first_guess = first_guess.lower()
            if first_guess not in dictionary:
                raise ValueError(f"First guess '{first_guess}' not in dictionary")

        self.dictionary = dictionary
        self.guess_pool = guess_pool
        self.use_matrix = use_matrix
        self.first_guess = first_guess
        self.reset()

    @classmethod
    def opening_guess(cls, dictionary: Dictionary, **kwargs) -> str:
        """Best round-one word. It depends only on the dictionary, so compute it once."""
        solver = cls(dictionary, **kwargs)
        word = solver.guess([])
        log.info(f"Opening guess: {word}")
        return word

    def reset(self):
        self.candidates = np.arange(len(self.dictionary), dtype=np.int64)
        self._applied = 0

    def get_candidates(self) -> List[str]:
        words = self.dictionary.word_list
        return [words[c] for c in self.candidates]

    def update(self, history: List[Guess]):
        """Narrow the candidate set with any records not applied yet."""
        if len(history) < self._applied:
            self.reset()

        words = self.dictionary.word_list
        for record in history[self._applied:]:
            keep = [c for c in self.candidates if record.matches(words[c])]
            self.candidates = np.array(keep, dtype=np.int64)
        self._applied = len(history)

        if len(self.candidates) == 0:
            raise RuntimeError("No candidates remaining - answer not in dictionary?")

    def guess(self, history: List[Guess]) -> str:
        self.update(history)
        words = self.dictionary.word_list

        if len(self.candidates) == 1:
            return words[self.candidates[0]]

        if not history and self.first_guess is not None:
            return self.first_guess

        guesses, entropies, expected = self.scores()
        best = int(np.argmin(expected))
        word = words[guesses[best]]
        log.debug(f"{len(self.candidates)} candidates -> {word} "
                  f"(entropy={entropies[best]:.4f}, expected={expected[best]:.4f})")
        return word

    def _guess_indices(self) -> np.ndarray:
        if self.guess_pool == "candidates":
            return self.candidates
        return np.arange(len(self.dictionary), dtype=np.int64)

    def entropies(self) -> np.ndarray:
        """Entropy of every word in the guess pool, aligned with its indices."""
        guesses = self._guess_indices()
        weights = self.dictionary.weights[self.candidates]

        if self.use_matrix:
            return compute_entropies_from_matrix(
                self.dictionary.feedback_matrix, guesses, self.candidates, weights)

        return compute_entropies(
            self.dictionary.chars[guesses], self.dictionary.chars[self.candidates], weights)

    def scores(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Score the guess pool for the current candidate set.

        Returns:
            (guess indices, entropies, expected remaining guesses); lower
            expectation is better and ties go to the lower dictionary rank
        """
        guesses = self._guess_indices()
        entropies = self.entropies()

        weights = self.dictionary.weights[self.candidates]
        total = weights.sum()
        current = bucket_entropy(weights, total)

        if self.guess_pool == "candidates":
            prior = weights / total
        else:
            prior = np.zeros(len(guesses), dtype=np.float64)
            prior[self.candidates] = weights / total

        remaining = np.maximum(current - entropies, 0.0)
        expected = prior + (1.0 - prior) * (1.0 + estimate_remaining_guesses(remaining))
        return guesses, entropies, expected
