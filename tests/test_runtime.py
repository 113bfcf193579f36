## forthy — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import io

import pytest

from forthy.runtime import Runtime, to_value
from forthy.types import Int, Char, Float, Func, Operator, Stack
from forthy.interpreter import Context, execute, interpret
from forthy.errors import InvalidWordError, InvalidTokenError, ForthParseError


def test_state_persists_across_runs():
    rt = Runtime()
    rt.run("variable total 10 total !")
    rt.run("total @ 5 +")
    assert rt.from_stack() == [15]


def test_reset_clears_all_state():
    rt = Runtime()
    rt.run("1 2 variable v 3 constant c")
    rt.reset()
    assert rt.from_stack() == []
    assert len(rt.context.memory) == 0
    with pytest.raises(InvalidWordError):
        rt.run("c")


def test_compile_then_execute():
    rt = Runtime()
    program = rt.compile("2 3 *")
    assert program[-1] == Operator(Func.MUL)
    rt.execute(program)
    assert rt.from_stack() == [6]


def test_do_step_applies_single_instruction():
    rt = Runtime()
    rt.run("4")
    for name in ('dup', 'mul'):
        rt.do_step(rt.operation(name))
    assert rt.from_stack() == [16]


def test_operation_lookup_by_tag_or_name():
    rt = Runtime()
    assert rt.operation('swp') == rt.operation('swap') == Operator(Func.SWAP)


def test_compile_errors_propagate():
    rt = Runtime()
    with pytest.raises(InvalidTokenError):
        rt.run("'toolong")
    with pytest.raises(ForthParseError):
        rt.run("1 ' 2")


def test_compile_classifies_everything_up_front():
    rt = Runtime()
    with pytest.raises(InvalidTokenError):
        rt.compile("1 2 'toolong")
    assert rt.from_stack() == []


def test_run_classifies_each_token_just_before_it_executes():
    out = io.StringIO()
    rt = Runtime(output=out)
    with pytest.raises(InvalidTokenError):
        rt.run("1 . 'ab")
    assert out.getvalue() == "1"


def test_syntax_errors_stop_the_run_before_anything_executes():
    out = io.StringIO()
    rt = Runtime(output=out)
    with pytest.raises(ForthParseError):
        rt.run("1 . ' 2")
    assert out.getvalue() == ""


def test_to_and_from_stack():
    rt = Runtime()
    stack = rt.to_stack([1, 'a', 2.5])
    assert stack == [Int(1), Char('a'), Float(2.5)]
    assert rt.from_stack(stack) == [1, 'a', 2.5]
    with pytest.raises(TypeError):
        to_value(True)


def test_list_words():
    rt = Runtime()
    rt.run("variable b 1 constant a : c ;")
    assert rt.list_words() == ['a', 'b', 'c']


def test_verbose_trace_shows_program_and_stack():
    out = io.StringIO()
    rt = Runtime(output=out)
    rt.run("1 2 +", verbosity=1)
    trace = out.getvalue()
    assert "<=>" in trace
    assert "1 2 +" in trace
    assert "Int(3)" in trace


def test_stats_count_steps():
    stats = {}
    Runtime().run(": sq dup * ; 3 sq", stats=stats)
    # Definition, literal, call, and the two body instructions.
    assert stats['steps'] == 5


def test_context_can_be_driven_directly():
    ctx = Context(stack=Stack([Int(2)]))
    execute(Operator(Func.DUP), ctx)
    assert interpret([Operator(Func.ADD)], ctx) == [Int(4)]
