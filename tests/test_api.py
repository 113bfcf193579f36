## forthy — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

import forthy.api as F


@pytest.fixture(autouse=True)
def fresh_runtime():
    F.reset()
    yield
    F.reset()


def test_run_string_add():
    stack = F.run("2 3 +")
    assert F.from_stack(stack) == [5]


def test_module_runtime_keeps_words():
    F.run("6 constant six")
    assert F.from_stack(F.run("six six *")) == [36]


def test_errors_are_reexported():
    with pytest.raises(F.EmptyStackError):
        F.run("swap")
    assert issubclass(F.InvalidWordError, F.ForthError)


def test_values_are_reexported():
    assert F.to_stack([1]) == [F.Int(1)]
