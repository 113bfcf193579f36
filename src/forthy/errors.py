## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import lark


class ForthError(Exception):
    def __init__(self, message: str = "", *, forth_op=None, forth_token=None, forth_meta=None):
        """Base class for all Forth-raised errors."""
        super().__init__(message)
        self.forth_op: object = forth_op
        self.forth_token: str = forth_token
        self.forth_meta: dict = forth_meta

class ForthParseError(ForthError):
    def __init__(self, message, *, filename=None, line=None, column=None, token=None):
        super().__init__(message, forth_token=token)
        self.filename = filename
        self.line = line
        self.column = column
        self.token = token

class ForthIncompleteParse(ForthParseError, lark.exceptions.ParseError):
    def __init__(self, message, *, filename=None, line=None, column=None, token=None):
        super().__init__(message, filename=filename, line=line, column=column, token=token)

class InvalidTokenError(ForthError, ValueError):
    """The classifier could not turn a syntax node into an instruction."""
    def __init__(self, text: str, *, forth_meta=None):
        super().__init__(f"Invalid token: {text}", forth_token=text, forth_meta=forth_meta)


## EXECUTION
class ExecutionError(ForthError):
    kind = "Execution"
    message = "Execution failed"

    def __init__(self, message: str = "", **kwargs):
        super().__init__(message or self.message, **kwargs)

class EmptyStackError(ExecutionError, IndexError):
    kind = "EmptyStack"
    message = "Empty stack error"

class ImproperArgumentError(ExecutionError, TypeError):
    kind = "ImproperArgument"
    message = "Improper arguments provided"

class DivideByZeroError(ExecutionError, ZeroDivisionError):
    kind = "DivideByZero"
    message = "Attempt to divide by zero"

class InvalidMemoryError(ExecutionError, LookupError):
    kind = "InvalidMemory"
    message = "Memory location is invalid"

class InvalidWordError(ExecutionError, NameError):
    kind = "InvalidWord"

    def __init__(self, word: str, **kwargs):
        kwargs.setdefault('forth_token', word)
        super().__init__(f"Invalid word: {word}", **kwargs)
        self.word = word

class ForthRuntimeError(ExecutionError, RuntimeError):
    """Interpreter limits, such as nesting definitions too deeply."""
    kind = "Runtime"
