## forthy — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import enum
import math
import struct
from dataclasses import dataclass, field

from .errors import EmptyStackError


## VALUES
_INT_BITS = 32

def wrap_i32(x: int) -> int:
    """Two's-complement wrap of an arbitrary Python int into the signed 32-bit range."""
    half = 1 << (_INT_BITS - 1)
    return ((x + half) % (1 << _INT_BITS)) - half

def round_f32(x: float) -> float:
    try:
        return struct.unpack('<f', struct.pack('<f', x))[0]
    except OverflowError:
        return math.copysign(math.inf, x)


class Value:
    """Closed union of the three runtime data variants below."""
    __slots__ = ()

    def __repr__(self):
        # Debug rendering, e.g. `Int(3)`.
        return f"{type(self).__name__}({self})"

    def __str__(self):
        # Display rendering, only the payload.
        return str(self.value)


@dataclass(frozen=True, repr=False)
class Int(Value):
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Int expects an int, got {type(self.value).__name__}.")
        object.__setattr__(self, 'value', wrap_i32(self.value))


@dataclass(frozen=True, repr=False)
class Char(Value):
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or len(self.value) != 1:
            raise ValueError(f"Char expects exactly one character, got {self.value!r}.")


@dataclass(frozen=True, repr=False)
class Float(Value):
    value: float

    def __post_init__(self):
        object.__setattr__(self, 'value', round_f32(float(self.value)))

    def __str__(self):
        from .formatting import format_f32
        return format_f32(self.value)


## OPERAND STACK
class Stack(list):
    """Operand stack; the end of the list is the top."""

    def require(self, depth: int) -> None:
        if len(self) < depth:
            raise EmptyStackError()

    def push(self, value: Value) -> int:
        self.append(value)
        return len(self)

    def pop(self) -> Value:
        self.require(1)
        return super().pop()

    def dup(self) -> int:
        self.require(1)
        x = self.pop()
        self.push(x)
        return self.push(x)

    def swap(self) -> None:
        self.require(2)
        a, b = self.pop(), self.pop()
        self.push(a)
        self.push(b)

    def over(self) -> int:
        self.require(2)
        x, y = self.pop(), self.pop()
        self.push(y)
        self.push(x)
        return self.push(y)

    def rot(self) -> None:
        """Pop x (top), y, z and push y, x, z: `[z y x]` becomes `[y x z]`."""
        self.require(3)
        x, y, z = self.pop(), self.pop(), self.pop()
        self.push(y)
        self.push(x)
        self.push(z)


## INSTRUCTIONS
class Func(enum.Enum):
    """Built-in operators; values are the grammar sub-rule tags."""
    ADD = 'add'
    SUB = 'sub'
    MUL = 'mul'
    DIV = 'div'
    PRINT = 'print'
    INPUT = 'inp'
    DPRINT = 'debugprint'
    DUP = 'dup'
    SWAP = 'swp'
    OVER = 'ovr'
    ROTATE = 'rot'
    STORE = 'store'
    RETRIEVE = 'retrieve'


@dataclass(frozen=True)
class Instruction:
    meta: dict = field(default_factory=dict, compare=False, repr=False, kw_only=True)

@dataclass(frozen=True)
class Literal(Instruction):
    value: Value

    def __str__(self): return repr(self.value)

@dataclass(frozen=True)
class Operator(Instruction):
    func: Func

    def __str__(self): return self.func.name.lower()

@dataclass(frozen=True)
class Reserved(Instruction):
    VARIABLE = 'variable'
    CONSTANT = 'constant'

    kind: str
    name: str

    def __str__(self): return f"{self.kind} {self.name}"

@dataclass(frozen=True)
class Keyword(Instruction):
    name: str

    def __str__(self): return self.name

@dataclass(frozen=True)
class Define(Instruction):
    name: str
    body: tuple[Instruction, ...]

    def __str__(self): return f": {self.name} … ;"


## WORDS (symbol table bindings)
@dataclass(frozen=True)
class Constant:
    value: Value

@dataclass(frozen=True)
class Variable:
    address: int

@dataclass(frozen=True)
class Definition:
    name: str
    body: tuple[Instruction, ...]

Word = Constant | Variable | Definition
