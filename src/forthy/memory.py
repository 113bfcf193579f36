## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Value
from .errors import ImproperArgumentError, InvalidMemoryError


class Memory:
    """Flat, append-only region of cells addressed by integer offset; cells start empty."""

    def __init__(self):
        self.cells: list[Value | None] = []

    def __len__(self):
        return len(self.cells)

    def allocate(self) -> int:
        self.cells.append(None)
        return len(self.cells) - 1

    def is_valid(self, address: int) -> bool:
        return 0 <= address < len(self.cells)

    def store(self, address: int, value: Value) -> None:
        if not self.is_valid(address):
            raise ImproperArgumentError(f"Memory address {address} is out of bounds (size {len(self.cells)}).")
        self.cells[address] = value

    def fetch(self, address: int) -> Value:
        if not self.is_valid(address) or (value := self.cells[address]) is None:
            raise InvalidMemoryError()
        return value
