"""
Game Loop
=========

Drives a guesser through one playthrough against a known answer, and
runs many playthroughs to measure solver quality.
"""

import logging
import multiprocessing as mp
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from tqdm import tqdm

from .dictionary import Dictionary
from .exceptions import IllegalGuessError
from .feedback import check_word, compute, mask_to_string
from .guess import Guess
from .guesser import Guesser
from .solver import EntropySolver

log = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

# Well past the six guesses a human gets, so failures still show up in the
# distribution instead of being cut off.
MAX_ROUNDS = 32


# ============================================================================
# PLAYTHROUGH
# ============================================================================

@dataclass
class Outcome:
    answer: str
    won: bool
    rounds: Optional[int]
    history: List[Guess] = field(default_factory=list)

    @property
    def guesses(self) -> List[str]:
        words = [g.word for g in self.history]
        if self.won:
            words.append(self.answer)
        return words


class Wordle:
    def __init__(self, dictionary: Dictionary):
        self.dictionary = dictionary

    def play_out(self, answer: str, guesser: Guesser) -> Outcome:
        """
        Play until ``guesser`` finds ``answer`` or MAX_ROUNDS run out.

        Raises:
            IllegalGuessError: the guesser played a word outside the dictionary
        """
        check_word(answer)
        history: List[Guess] = []

        for i in range(1, MAX_ROUNDS + 1):
            guess = guesser.guess(history)
            if guess == answer:
                guesser.finish(i)
                log.debug(f"{answer}: solved in {i}")
                return Outcome(answer, True, i, history)

            if guess not in self.dictionary:
                raise IllegalGuessError(guess, i)

            mask = compute(answer, guess)
            log.debug(f"{answer}: round {i} {guess} {mask_to_string(mask)}")
            history.append(Guess(guess, mask))

        log.debug(f"{answer}: not solved within {MAX_ROUNDS} rounds")
        return Outcome(answer, False, None, history)

    def play(self, answer: str, guesser: Guesser) -> Optional[int]:
        """Winning round number, or None if the cap was reached."""
        return self.play_out(answer, guesser).rounds


# ============================================================================
# SIMULATION
# ============================================================================

_WORKER_STATE = {}


def _init_worker(entries, solver_kwargs):
    dictionary = Dictionary(entries)
    _WORKER_STATE["game"] = Wordle(dictionary)
    _WORKER_STATE["solver"] = EntropySolver(dictionary, **solver_kwargs)


def _worker_play(answer: str) -> Optional[int]:
    return _WORKER_STATE["game"].play(answer, _WORKER_STATE["solver"])


def simulate(dictionary: Dictionary, answers: Optional[List[str]] = None,
             workers: int = 1, progress: bool = False, **solver_kwargs) -> Dict:
    """
    Play the entropy solver against every answer.

    Args:
        dictionary: shared dictionary
        answers: words to solve (default: the whole dictionary)
        workers: number of processes; games are independent so they are
            simply spread over a pool
        progress: show a tqdm progress bar
        **solver_kwargs: passed to EntropySolver

    Returns:
        Dict with results
    """
    if answers is None:
        answers = list(dictionary)

    # Round one is identical for every answer
    if solver_kwargs.get("first_guess") is None:
        solver_kwargs["first_guess"] = EntropySolver.opening_guess(
            dictionary, **{k: v for k, v in solver_kwargs.items() if k != "first_guess"})

    start = time.time()
    bar = tqdm(total=len(answers), disable=not progress, desc="games")

    if workers <= 1:
        game = Wordle(dictionary)
        solver = EntropySolver(dictionary, **solver_kwargs)
        rounds = []
        for answer in answers:
            rounds.append(game.play(answer, solver))
            bar.update()
    else:
        ctx = mp.get_context("spawn")
        with ctx.Pool(workers, initializer=_init_worker,
                      initargs=(dictionary.entries(), solver_kwargs)) as pool:
            rounds = []
            for n in pool.imap(_worker_play, answers, chunksize=16):
                rounds.append(n)
                bar.update()
    bar.close()

    elapsed = time.time() - start
    dist = Counter(n for n in rounds if n is not None)
    failures = [a for a, n in zip(answers, rounds) if n is None]
    solved = [n for n in rounds if n is not None]

    results = {
        'total': len(answers),
        'average': sum(solved) / len(solved) if solved else 0.0,
        'distribution': dict(sorted(dist.items())),
        'failures': len(failures),
        'failed_words': failures,
        'time': elapsed,
        'rate': len(answers) / elapsed if elapsed > 0 else 0.0,
    }
    log.info(f"Simulated {results['total']} games: average {results['average']:.4f}, "
             f"{results['failures']} failures, {results['rate']:.1f} games/sec")
    return results
