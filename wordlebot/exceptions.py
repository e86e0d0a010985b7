"""Exceptions raised by the wordle engine."""


class WordleError(Exception):
    """Base class for every error raised by this package."""


class WordError(WordleError, ValueError):
    """A word is not exactly five lowercase ASCII letters."""

    def __init__(self, word, message: str):
        super().__init__(message)
        self.word = word


class WordLengthError(WordError):
    def __init__(self, word, expected: int = 5):
        super().__init__(word, f"'{word}' has length {len(word)}, expected {expected}")


class WordCharsetError(WordError):
    def __init__(self, word):
        super().__init__(word, f"'{word}' contains characters outside a-z")


class DictionaryError(WordleError, ValueError):
    """The dictionary resource could not be read or is malformed."""


class IllegalGuessError(WordleError):
    """A guesser produced a word that is not in the dictionary."""

    def __init__(self, word: str, round: int):
        super().__init__(f"guess '{word}' in round {round} is not in the dictionary")
        self.word = word
        self.round = round
