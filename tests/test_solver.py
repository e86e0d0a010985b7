import math
from collections import defaultdict

import numpy as np
import pytest

from wordlebot.dictionary import Dictionary
from wordlebot.feedback import Correctness, compute, pattern, words_to_chars
from wordlebot.guess import Guess
from wordlebot.solver import (EntropySolver, bucket_entropy, compute_entropies,
                              estimate_remaining_guesses)


def reference_entropy(guess, candidates):
    """Plain-python weighted entropy over (word, weight) candidates."""
    buckets = defaultdict(float)
    for word, weight in candidates:
        buckets[pattern(word, guess)] += weight
    total = sum(w for _, w in candidates)
    return -sum(w / total * math.log2(w / total) for w in buckets.values())


@pytest.mark.parametrize("use_matrix", [True, False])
def test_entropies_match_reference(small_dictionary, small_entries, use_matrix):
    solver = EntropySolver(small_dictionary, use_matrix=use_matrix)
    entropies = solver.entropies()
    for (word, _), h in zip(small_entries, entropies):
        assert h == pytest.approx(reference_entropy(word, small_entries))


def test_entropies_after_filtering(small_dictionary, small_entries):
    solver = EntropySolver(small_dictionary, guess_pool="candidates")
    history = [Guess.scored("crane", "sight")]
    solver.update(history)
    remaining = [(w, c) for w, c in small_entries if history[0].matches(w)]
    assert solver.get_candidates() == [w for w, _ in remaining]
    for (word, _), h in zip(remaining, solver.entropies()):
        assert h == pytest.approx(reference_entropy(word, remaining))


def test_bucket_entropy_skips_empty_buckets():
    buckets = np.zeros(243)
    buckets[[0, 7]] = 2.0
    assert bucket_entropy(buckets, 4.0) == pytest.approx(1.0)
    assert bucket_entropy(np.zeros(243), 0.0) == 0.0


def test_compute_entropies_uniform_split():
    chars = words_to_chars(["abcde", "fghij"])
    result = compute_entropies(chars, chars, np.array([1.0, 1.0]))
    assert list(result) == pytest.approx([1.0, 1.0])


def test_estimate_is_increasing():
    est = estimate_remaining_guesses(np.array([0.0, 1.0, 4.0, 10.0]))
    assert np.all(np.diff(est) > 0)


def test_single_candidate_is_returned():
    dictionary = Dictionary([("crane", 5), ("slate", 1)])
    solver = EntropySolver(dictionary)
    assert solver.guess([Guess.scored("slate", "crane")]) == "crane"


def test_single_word_dictionary():
    solver = EntropySolver(Dictionary([("crane", 1)]))
    assert solver.guess([]) == "crane"


def test_ties_go_to_lower_rank():
    assert EntropySolver(Dictionary([("abcde", 1), ("fghij", 1)])).guess([]) == "abcde"
    assert EntropySolver(Dictionary([("fghij", 1), ("abcde", 1)])).guess([]) == "fghij"


def test_prior_breaks_equal_information():
    dictionary = Dictionary([("abcde", 1), ("fghij", 10)])
    assert EntropySolver(dictionary).guess([]) == "fghij"


def test_candidate_set_shrinks_and_keeps_answer(bundled_dictionary):
    for answer in ["boost", "jazzy", "light", "mamma", "zesty"]:
        solver = EntropySolver(bundled_dictionary)
        history = []
        previous = set(bundled_dictionary.word_list)
        for guess in ["crane", "sight", "books", "about", "fuzzy"]:
            history.append(Guess.scored(guess, answer))
            solver.update(history)
            current = set(solver.get_candidates())
            assert current <= previous
            assert answer in current
            previous = current


def test_guess_is_deterministic(bundled_dictionary):
    history = [Guess.scored("about", "light")]
    first = EntropySolver(bundled_dictionary).guess(history)
    second = EntropySolver(bundled_dictionary).guess(history)
    assert first == second
    assert first in bundled_dictionary


def test_matrix_and_kernel_paths_agree(small_entries):
    with_matrix = EntropySolver(Dictionary(small_entries, precompute=True))
    without = EntropySolver(Dictionary(small_entries, precompute=False))
    assert not without.use_matrix
    history = []
    assert with_matrix.guess(history) == without.guess(history)
    history.append(Guess.scored("slate", "night"))
    assert with_matrix.guess(history) == without.guess(history)


def test_candidates_pool_only_plays_candidates(small_dictionary):
    solver = EntropySolver(small_dictionary, guess_pool="candidates")
    history = [Guess.scored("crane", "might")]
    word = solver.guess(history)
    assert history[0].matches(word)


def test_first_guess_is_used(small_dictionary):
    solver = EntropySolver(small_dictionary, first_guess="KEBAB")
    assert solver.guess([]) == "kebab"


def test_opening_guess(small_dictionary):
    assert EntropySolver.opening_guess(small_dictionary) == EntropySolver(small_dictionary).guess([])


def test_new_game_resets_candidates(small_dictionary):
    solver = EntropySolver(small_dictionary)
    solver.guess([Guess.scored("crane", "light")])
    assert len(solver.get_candidates()) < len(small_dictionary)
    solver.guess([])
    assert len(solver.get_candidates()) == len(small_dictionary)


def test_inconsistent_history_raises(small_dictionary):
    solver = EntropySolver(small_dictionary)
    impossible = Guess("zzzzz", (Correctness.CORRECT,) * 5)
    with pytest.raises(RuntimeError):
        solver.guess([impossible])


def test_invalid_configuration(small_dictionary, small_entries):
    with pytest.raises(ValueError):
        EntropySolver(small_dictionary, guess_pool="everything")
    with pytest.raises(ValueError):
        EntropySolver(small_dictionary, first_guess="zzzzz")
    with pytest.raises(ValueError):
        EntropySolver(Dictionary(small_entries, precompute=False), use_matrix=True)


def test_solver_never_repeats_uninformative_guess(small_dictionary):
    solver = EntropySolver(small_dictionary)
    history = []
    answer = "tight"
    for _ in range(len(small_dictionary)):
        word = solver.guess(history)
        if word == answer:
            break
        assert word not in [g.word for g in history]
        history.append(Guess(word, compute(answer, word)))
    else:
        pytest.fail("solver did not converge")
