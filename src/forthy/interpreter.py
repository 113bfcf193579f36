## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import sys
import operator
import collections
from typing import TextIO
from dataclasses import dataclass, field

from .types import (Stack, Int, Func, Instruction, Literal, Operator, Reserved, Keyword, Define,
                    Constant, Variable, Definition)
from .errors import ImproperArgumentError, DivideByZeroError, ForthRuntimeError
from .memory import Memory
from .library import Library
from .formatting import format_debug, format_display, show_program_and_stack


@dataclass
class Context:
    """All mutable interpreter state, passed explicitly to every instruction."""
    stack: Stack = field(default_factory=Stack)
    memory: Memory = field(default_factory=Memory)
    library: Library = field(default_factory=Library)
    output: TextIO | None = None
    input: TextIO | None = None
    verbosity: int = 0
    stats: dict | None = None
    max_depth: int = 256
    depth: int = 0
    pending_input: collections.deque = field(default_factory=collections.deque)

    # Streams resolve late so redirected `sys.stdout` / `sys.stdin` are honored.
    @property
    def stdout(self) -> TextIO:
        return self.output if self.output is not None else sys.stdout

    @property
    def stdin(self) -> TextIO:
        return self.input if self.input is not None else sys.stdin


def _int_div(y: int, x: int) -> int:
    if x == 0:
        raise DivideByZeroError()
    # Truncate toward zero, as fixed-width integer division does.
    q = abs(y) // abs(x)
    return q if (y < 0) == (x < 0) else -q

_ARITHMETIC = {
    Func.ADD: operator.add,
    Func.SUB: operator.sub,
    Func.MUL: operator.mul,
    Func.DIV: _int_div,
}


def _binary_int(ctx: Context, fn) -> None:
    ctx.stack.require(2)
    x, y = ctx.stack.pop(), ctx.stack.pop()
    if not isinstance(x, Int) or not isinstance(y, Int):
        raise ImproperArgumentError()
    ctx.stack.push(Int(fn(y.value, x.value)))

def _pop_address(ctx: Context) -> int:
    if len(ctx.stack) == 0 or not isinstance(address := ctx.stack.pop(), Int):
        raise ImproperArgumentError()
    return address.value

def _read_token(ctx: Context) -> str:
    while not ctx.pending_input:
        line = ctx.stdin.readline()
        if line == '':
            raise ImproperArgumentError("End of input reached while reading a number.")
        ctx.pending_input.extend(line.split())
    return ctx.pending_input.popleft()

def _read_int(ctx: Context) -> Int:
    text = _read_token(ctx)
    try:
        value = int(text)
    except ValueError:
        raise ImproperArgumentError(f"Input `{text}` is not an integer.") from None
    if value != Int(value).value:
        raise ImproperArgumentError(f"Input `{text}` does not fit in 32 bits.")
    return Int(value)


def execute_function(func: Func, ctx: Context) -> None:
    stack = ctx.stack
    match func:
        case Func.ADD | Func.SUB | Func.MUL | Func.DIV:
            _binary_int(ctx, _ARITHMETIC[func])
        case Func.PRINT:
            ctx.stdout.write(format_display(stack.pop()))
        case Func.DPRINT:
            ctx.stdout.write(format_debug(stack.pop()) + '\n')
        case Func.INPUT:
            stack.push(_read_int(ctx))
        case Func.DUP:
            stack.dup()
        case Func.SWAP:
            stack.swap()
        case Func.OVER:
            stack.over()
        case Func.ROTATE:
            stack.rot()
        case Func.STORE:
            address = _pop_address(ctx)
            if len(stack) == 0:
                raise ImproperArgumentError()
            ctx.memory.store(address, stack.pop())
        case Func.RETRIEVE:
            stack.push(ctx.memory.fetch(_pop_address(ctx)))
        case _:
            raise NotImplementedError(f"Operator `{func}` has no implementation.")


def call_definition(word: Definition, ctx: Context) -> None:
    if ctx.depth >= ctx.max_depth:
        raise ForthRuntimeError(f"Definition `{word.name}` nested deeper than {ctx.max_depth} calls.")
    ctx.depth += 1
    try:
        interpret(word.body, ctx)
    finally:
        ctx.depth -= 1


def execute(ins: Instruction, ctx: Context) -> None:
    """Apply one instruction to the context, raising on the first failure."""
    match ins:
        case Literal(value=value):
            ctx.stack.push(value)
        case Operator(func=func):
            execute_function(func, ctx)
        case Reserved(kind=Reserved.VARIABLE, name=name):
            ctx.library.add_variable(name, ctx.memory.allocate())
        case Reserved(kind=Reserved.CONSTANT, name=name):
            ctx.library.add_constant(name, ctx.stack.pop())
        case Keyword(name=name):
            match ctx.library.get_word(name, meta=ins.meta):
                case Constant(value=value):
                    ctx.stack.push(value)
                case Variable(address=address):
                    ctx.stack.push(Int(address))
                case Definition() as word:
                    call_definition(word, ctx)
        case Define(name=name, body=body):
            ctx.library.add_definition(name, body)
        case _:
            raise NotImplementedError(f"Unexpected instruction `{ins!r}`.")


def interpret(program, ctx: Context, link=None) -> Stack:
    """Run instructions in order; with `link`, each item is linked just before it executes."""
    program = collections.deque(program)

    step = 0
    while program:
        if ctx.verbosity > 0:
            print(f"\033[90m{step:>3} :\033[0m  ", end='', file=ctx.stdout)
            show_program_and_stack(program, ctx.stack, file=ctx.stdout)

        step += 1
        op = program.popleft()
        try:
            if link is not None:
                op = link(op)
            execute(op, ctx)
        except Exception as exc:
            # Innermost instruction wins when definitions are nested.
            if getattr(exc, 'forth_op', None) is None and isinstance(op, Instruction):
                exc.forth_op = op
                exc.forth_token = str(op)
                exc.forth_meta = op.meta
            raise
        finally:
            if ctx.stats is not None:
                ctx.stats['steps'] = ctx.stats.get('steps', 0) + 1

    if ctx.verbosity > 0 and ctx.depth == 0:
        print(f"\033[90m{step:>3} :\033[0m  ", end='', file=ctx.stdout)
        show_program_and_stack(program, ctx.stack, file=ctx.stdout)

    return ctx.stack
