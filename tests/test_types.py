## forthy — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from forthy.types import Int, Char, Float, Stack, wrap_i32
from forthy.errors import EmptyStackError
from forthy.formatting import format_stack, format_f32


def test_debug_rendering_prefixes_variant_name():
    assert repr(Int(3)) == "Int(3)"
    assert repr(Char('a')) == "Char(a)"
    assert repr(Float(1.5)) == "Float(1.5)"


def test_display_rendering_is_payload_only():
    assert str(Int(-12)) == "-12"
    assert str(Char('z')) == "z"
    assert str(Float(0.25)) == "0.25"


def test_float_display_is_shortest_single_precision_form():
    # 0.1 is not exact in 32 bits, but must still render as written.
    assert Float(0.1).value != 0.1
    assert str(Float(0.1)) == "0.1"
    assert str(Float(2.0)) == "2"
    assert format_f32(Float(1e-05).value) == "0.00001"


def test_large_integral_float_displays_shortest_digits():
    assert Float(1e20).value == 100000002004087734272
    assert str(Float(1e20)) == "100000000000000000000"
    assert str(Float(-16777216.0)) == "-16777216"
    assert str(Float(100.0)) == "100"


def test_values_compare_by_variant_and_payload():
    assert Int(1) == Int(1)
    assert Int(1) != Float(1.0)
    assert Char('1') != Int(1)


def test_int_wraps_to_32_bits():
    assert Int(2**31).value == -2**31
    assert Int(-2**31 - 1).value == 2**31 - 1
    assert wrap_i32(5) == 5


def test_char_requires_single_character():
    with pytest.raises(ValueError):
        Char('ab')


def test_stack_pop_on_empty_fails():
    with pytest.raises(EmptyStackError):
        Stack().pop()


def test_stack_dup():
    stack = Stack([Int(7)])
    assert stack.dup() == 2
    assert stack == [Int(7), Int(7)]
    with pytest.raises(EmptyStackError):
        Stack().dup()


def test_stack_swap():
    stack = Stack([Int(1), Int(2)])
    stack.swap()
    assert stack == [Int(2), Int(1)]


def test_stack_over():
    stack = Stack([Int(1), Int(2)])
    stack.over()
    assert stack == [Int(1), Int(2), Int(1)]


def test_stack_rot_moves_third_item_to_top():
    stack = Stack([Int(1), Int(2), Int(3)])
    stack.rot()
    assert stack == [Int(2), Int(3), Int(1)]


@pytest.mark.parametrize("method, depth", [("swap", 2), ("over", 2), ("rot", 3)])
def test_stack_primitives_leave_short_stack_untouched(method, depth):
    stack = Stack([Int(i) for i in range(depth - 1)])
    before = list(stack)
    with pytest.raises(EmptyStackError):
        getattr(stack, method)()
    assert stack == before


def test_format_stack_bottom_to_top():
    assert format_stack(Stack([Int(1), Char('a'), Float(2.5)])) == "1 a 2.5 <- Top"
    assert format_stack(Stack()) == "<- Top"
