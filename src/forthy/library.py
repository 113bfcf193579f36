## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from dataclasses import dataclass, field

from .types import Word, Constant, Variable, Definition
from .errors import InvalidWordError


@dataclass
class Library:
    """Symbol table from identifier text to its bound word."""
    words: dict[str, Word] = field(default_factory=dict)

    def __contains__(self, name: str) -> bool:
        return name in self.words

    def __len__(self):
        return len(self.words)

    # Registration helpers; redeclaring a name replaces the previous binding.
    def bind(self, name: str, word: Word) -> None:
        self.words[name] = word

    def add_constant(self, name: str, value) -> None:
        self.bind(name, Constant(value))

    def add_variable(self, name: str, address: int) -> None:
        self.bind(name, Variable(address))

    def add_definition(self, name: str, body: tuple) -> None:
        self.bind(name, Definition(name, tuple(body)))

    def get_word(self, name: str, *, meta: dict | None = None) -> Word:
        if (word := self.words.get(name)) is not None:
            return word
        raise InvalidWordError(name, forth_meta=meta)
