"""A single played guess and the feedback it received."""

from dataclasses import dataclass

from .feedback import Mask, check_word, compute, pack, unpack


@dataclass(frozen=True)
class Guess:
    word: str
    mask: Mask

    def __post_init__(self):
        check_word(self.word)
        object.__setattr__(self, 'mask', unpack(pack(self.mask)))

    @classmethod
    def scored(cls, word: str, answer: str) -> "Guess":
        """Build the record ``word`` would earn against ``answer``."""
        return cls(word, compute(answer, word))

    @property
    def pattern(self) -> int:
        return pack(self.mask)

    def matches(self, candidate: str) -> bool:
        """True if ``candidate`` as the answer would have produced this mask."""
        return compute(candidate, self.word) == self.mask
