## forthy — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, TextIO

from .types import Stack, Value, Int, Char, Float, Instruction, Func, Operator
from .parser import parse
from .classifier import classify, classify_all
from .library import Library
from .interpreter import Context, interpret, execute


class Runtime:
    """Minimal runtime facade focused on embedding; state persists across runs until `reset()`."""

    def __init__(self, library: Library | None = None, output: TextIO | None = None, input: TextIO | None = None):
        self.context = Context(library=library or Library(), output=output, input=input)

    @property
    def stack(self) -> Stack:
        return self.context.stack

    @property
    def library(self) -> Library:
        return self.context.library

    def reset(self) -> None:
        ctx = self.context
        self.context = Context(output=ctx.output, input=ctx.input, max_depth=ctx.max_depth)

    # Assembly ────────────────────────────────────────────────────────────────────────────────
    def compile(self, source: str, filename: str | None = None) -> list[Instruction]:
        return classify_all(parse(source, filename=filename))

    def operation(self, name: str) -> Operator:
        """Look up a built-in operator by grammar tag (`swp`) or by name (`swap`)."""
        try:
            return Operator(Func(name))
        except ValueError:
            return Operator(Func[name.upper()])

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def run(self, source: str, filename: str | None = None,
            verbosity: int = 0, stats: dict | None = None) -> Stack:
        """Parse the whole source, then classify and execute one node at a time."""
        nodes = list(parse(source, filename=filename))
        self.context.verbosity, self.context.stats = verbosity, stats
        return interpret(nodes, self.context, link=classify)

    def execute(self, program: list[Instruction], verbosity: int = 0, stats: dict | None = None) -> Stack:
        self.context.verbosity, self.context.stats = verbosity, stats
        return interpret(program, self.context)

    def do_step(self, op: Instruction) -> Stack:
        execute(op, self.context)
        return self.context.stack

    def load(self, source: str, filename: str | None = None) -> None:
        self.run(source, filename=filename)

    # Introspection ───────────────────────────────────────────────────────────────────────────
    def to_stack(self, values: list) -> Stack:
        return Stack(v if isinstance(v, Value) else to_value(v) for v in values)

    def from_stack(self, stack: Stack | None = None) -> list:
        return [v.value for v in (self.context.stack if stack is None else stack)]

    def list_words(self) -> list[str]:
        return sorted(self.library.words.keys())


def to_value(x: Any) -> Value:
    if isinstance(x, bool): raise TypeError("Booleans have no runtime representation.")
    if isinstance(x, int): return Int(x)
    if isinstance(x, float): return Float(x)
    if isinstance(x, str): return Char(x)
    raise TypeError(f"Cannot convert {type(x).__name__} to a runtime value.")
