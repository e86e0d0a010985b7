"""
Guesser strategies.

A guesser turns the history of a playthrough into the next word to play.
``Wordle`` only ever calls ``guess`` and, once the answer is found,
``finish``.
"""

from typing import Callable, List, Sequence, Union

from .guess import Guess


class Guesser:
    """Strategy interface driven by the game loop."""

    def guess(self, history: List[Guess]) -> str:
        raise NotImplementedError

    def finish(self, guesses: int) -> None:
        """Called once with the winning round number."""


class ScriptedGuesser(Guesser):
    """
    Plays a fixed sequence of words, or whatever a callable returns for the
    current history. Used for deterministic tests.
    """

    def __init__(self, script: Union[Sequence[str], Callable[[List[Guess]], str]]):
        if not callable(script) and len(script) == 0:
            raise ValueError("Script must contain at least one word")
        self.script = script
        self.finished_with = None

    def guess(self, history: List[Guess]) -> str:
        if callable(self.script):
            return self.script(history)
        # Keep replaying the last word once the script runs out
        return self.script[min(len(history), len(self.script) - 1)]

    def finish(self, guesses: int) -> None:
        self.finished_with = guesses
