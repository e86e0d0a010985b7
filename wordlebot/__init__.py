"""
Wordle Bot - Entropy-Driven Wordle Solver
=========================================

Scores guesses with exact Wordle feedback (duplicate letters included) and
plays games with a solver that maximises expected information gain,
weighted by how common each word is.
"""

__version__ = "1.0.0"

from .exceptions import (WordleError, WordError, WordLengthError, WordCharsetError,
                         DictionaryError, IllegalGuessError)
from .feedback import Correctness, check_word, compute, pack, unpack, pattern
from .guess import Guess
from .dictionary import Dictionary, load_dictionary, default_dictionary
from .guesser import Guesser, ScriptedGuesser
from .solver import EntropySolver
from .game import Wordle, Outcome, MAX_ROUNDS, simulate
