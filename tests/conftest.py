import pytest

from wordlebot.dictionary import Dictionary, default_dictionary


SMALL_WORDS = [
    ("crane", 900), ("slate", 800), ("boost", 700), ("books", 600), ("eerie", 500),
    ("abbey", 400), ("kebab", 300), ("abcde", 200), ("eabcd", 100), ("fghij", 50),
    ("light", 40), ("might", 30), ("night", 20), ("sight", 10), ("tight", 5),
]


@pytest.fixture
def small_entries():
    return list(SMALL_WORDS)


@pytest.fixture
def small_dictionary():
    return Dictionary(SMALL_WORDS)


@pytest.fixture(scope="session")
def bundled_dictionary():
    return default_dictionary()
