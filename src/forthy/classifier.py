## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Int, Char, Float, Func, Instruction, Literal, Operator, Reserved, Keyword, Define
from .errors import InvalidTokenError
from .parser import SyntaxNode, RESERVED_WORDS


_INT_MIN, _INT_MAX = -(1 << 31), (1 << 31) - 1
_CHAR_ESCAPES = (('\\n', '\n'), ('\\t', '\t'))
_OPERATORS = {f.value: f for f in Func}


def _classify_int(text: str, meta: dict) -> Instruction:
    try:
        value = int(text)
    except ValueError:
        raise InvalidTokenError(text, forth_meta=meta) from None
    if not (_INT_MIN <= value <= _INT_MAX):
        raise InvalidTokenError(text, forth_meta=meta)
    return Literal(Int(value), meta=meta)

def _classify_char(text: str, meta: dict) -> Instruction:
    character = text[1:]
    for escape, replacement in _CHAR_ESCAPES:
        character = character.replace(escape, replacement)
    if len(character) != 1:
        raise InvalidTokenError(text, forth_meta=meta)
    return Literal(Char(character), meta=meta)

def _classify_float(text: str, meta: dict) -> Instruction:
    try:
        return Literal(Float(float(text)), meta=meta)
    except ValueError:
        raise InvalidTokenError(text, forth_meta=meta) from None

def _declared_name(node: SyntaxNode) -> str:
    if node.text in RESERVED_WORDS:
        raise InvalidTokenError(node.text, forth_meta=dict(node.meta or {}))
    return node.text

def _classify_operator(node: SyntaxNode, meta: dict) -> Instruction:
    if node.inner is None or (func := _OPERATORS.get(node.inner.rule)) is None:
        raise NotImplementedError(f"Unexpected operator rule from parser: {node.inner}.")
    return Operator(func, meta=meta)

def _classify_reserved(node: SyntaxNode, meta: dict) -> Instruction:
    form = node.inner
    if form is None or form.rule not in (Reserved.VARIABLE, Reserved.CONSTANT):
        raise NotImplementedError(f"Unexpected reserved keyword rule from parser: {form}.")
    # By grammar, the only child of a reserved form is the identifier it declares.
    [name] = form.children
    return Reserved(form.rule, _declared_name(name), meta=meta)

def _classify_definition(node: SyntaxNode, meta: dict) -> Instruction:
    name, *body = node.children
    return Define(_declared_name(name), tuple(classify(n) for n in body), meta=meta)


def classify(node: SyntaxNode) -> Instruction:
    """Convert one syntax node into one typed instruction, without side effects."""
    meta = dict(node.meta or {})
    match node.rule:
        case 'int':
            return _classify_int(node.text, meta)
        case 'char':
            return _classify_char(node.text, meta)
        case 'float':
            return _classify_float(node.text, meta)
        case 'operator':
            return _classify_operator(node, meta)
        case 'reserved_keyword':
            return _classify_reserved(node, meta)
        case 'keyword':
            return Keyword(node.text, meta=meta)
        case 'definition':
            return _classify_definition(node, meta)
        case _:
            raise InvalidTokenError(node.text, forth_meta=meta)


def classify_all(nodes) -> list[Instruction]:
    return [classify(n) for n in nodes]
