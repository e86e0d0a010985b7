"""
Feedback Computation
====================

Scores a guess against an answer the way Wordle does:

- green  (Correct):   right letter, right slot
- yellow (Misplaced): letter occurs elsewhere in the answer
- gray   (Wrong):     letter absent, or all its occurrences already used up

Masks are kept as tuples of ``Correctness`` for all logic. For table lookups
they are packed into a single base-3 integer:

    code = d[0] + 3*d[1] + 9*d[2] + 27*d[3] + 81*d[4]

with Wrong=0, Misplaced=1, Correct=2, so all-green is 242 and there are
exactly 243 codes.
"""

from enum import IntEnum
from typing import List, Sequence, Tuple

import numpy as np
from numba import jit, prange

from .exceptions import WordCharsetError, WordLengthError


# ============================================================================
# CONSTANTS
# ============================================================================

WORD_LENGTH = 5
N_LETTERS = 26
N_PATTERNS = 243  # 3^5 possible feedback patterns
CORRECT_PATTERN = 242  # 2 + 2*3 + 2*9 + 2*27 + 2*81 = 242 (all green)

ORD_A = ord('a')


class Correctness(IntEnum):
    WRONG = 0
    MISPLACED = 1
    CORRECT = 2


Mask = Tuple[Correctness, Correctness, Correctness, Correctness, Correctness]


# ============================================================================
# WORD VALIDATION
# ============================================================================

def check_word(word: str) -> str:
    """
    Return ``word`` unchanged if it is five lowercase ASCII letters.

    Raises:
        WordLengthError: wrong length
        WordCharsetError: any character outside a-z
    """
    if not isinstance(word, str):
        raise WordCharsetError(word)
    if len(word) != WORD_LENGTH:
        raise WordLengthError(word, WORD_LENGTH)
    for c in word:
        if not 'a' <= c <= 'z':
            raise WordCharsetError(word)
    return word


# ============================================================================
# MASKS
# ============================================================================

def compute(answer: str, guess: str) -> Mask:
    """
    Compute the feedback mask for ``guess`` played against ``answer``.

    Greens are marked first. Every unmatched answer letter goes into a
    per-letter counter, and yellows are handed out from that counter left to
    right, so a repeated guess letter never earns more yellows than the
    answer has spare copies.
    """
    check_word(answer)
    check_word(guess)

    mask = [Correctness.WRONG] * WORD_LENGTH
    misplaced = [0] * N_LETTERS

    for i in range(WORD_LENGTH):
        if answer[i] == guess[i]:
            mask[i] = Correctness.CORRECT
        else:
            misplaced[ord(answer[i]) - ORD_A] += 1

    for i in range(WORD_LENGTH):
        if mask[i] == Correctness.WRONG:
            c = ord(guess[i]) - ORD_A
            if misplaced[c] > 0:
                mask[i] = Correctness.MISPLACED
                misplaced[c] -= 1

    return tuple(mask)


def pack(mask: Sequence[Correctness]) -> int:
    """Pack a mask into its base-3 code (0-242)."""
    if len(mask) != WORD_LENGTH:
        raise ValueError(f"Mask must have {WORD_LENGTH} slots, got {len(mask)}")
    code = 0
    multiplier = 1
    for c in mask:
        code += int(Correctness(c)) * multiplier
        multiplier *= 3
    return code


def unpack(code: int) -> Mask:
    """Inverse of ``pack``."""
    if not 0 <= code < N_PATTERNS:
        raise ValueError(f"Pattern code must be in 0..{N_PATTERNS - 1}, got {code}")
    mask = []
    for _ in range(WORD_LENGTH):
        mask.append(Correctness(code % 3))
        code //= 3
    return tuple(mask)


def pattern(answer: str, guess: str) -> int:
    """Packed feedback code for a (answer, guess) pair."""
    return pack(compute(answer, guess))


def mask_to_string(mask: Sequence[Correctness]) -> str:
    """Render a mask as emoji squares."""
    return ''.join('⬜🟨🟩'[int(c)] for c in mask)


# ============================================================================
# NUMBA-ACCELERATED FEEDBACK COMPUTATION
# ============================================================================

def words_to_chars(words: Sequence[str]) -> np.ndarray:
    """Convert words to an (n, 5) array of letter codes (0-25 for a-z)."""
    arr = np.zeros((len(words), WORD_LENGTH), dtype=np.int32)
    for i, w in enumerate(words):
        for j, c in enumerate(w):
            arr[i, j] = ord(c) - ORD_A
    return arr


@jit(nopython=True, cache=True)
def compute_feedback(guess: np.ndarray, answer: np.ndarray) -> int:
    """
    Compute the packed feedback code for a guess against an answer.

    Args:
        guess: shape (5,) array of char codes (0-25 for a-z)
        answer: shape (5,) array of char codes

    Returns:
        Integer feedback pattern (0-242)
    """
    feedback = np.zeros(5, dtype=np.int32)
    misplaced = np.zeros(26, dtype=np.int32)

    # First pass: greens, count the answer letters left over
    for i in range(5):
        if guess[i] == answer[i]:
            feedback[i] = 2
        else:
            misplaced[answer[i]] += 1

    # Second pass: yellows while spare letters remain
    for i in range(5):
        if feedback[i] == 0:
            c = guess[i]
            if misplaced[c] > 0:
                feedback[i] = 1
                misplaced[c] -= 1

    return feedback[0] + 3*feedback[1] + 9*feedback[2] + 27*feedback[3] + 81*feedback[4]


@jit(nopython=True, parallel=True, cache=True)
def compute_feedback_matrix(guess_chars: np.ndarray, answer_chars: np.ndarray) -> np.ndarray:
    """
    Packed code table, ``table[g, a]`` = feedback of guess g against answer a.

    Rows are filled independently across threads. uint8 is enough since
    every code is below 243.
    """
    table = np.empty((guess_chars.shape[0], answer_chars.shape[0]), dtype=np.uint8)

    for g in prange(guess_chars.shape[0]):
        guess = guess_chars[g]
        for a in range(answer_chars.shape[0]):
            table[g, a] = compute_feedback(guess, answer_chars[a])

    return table


def patterns_for(guess: str, answers: List[str]) -> np.ndarray:
    """Packed codes of ``guess`` against each of ``answers``."""
    check_word(guess)
    for a in answers:
        check_word(a)
    return compute_feedback_matrix(words_to_chars([guess]), words_to_chars(answers))[0]
