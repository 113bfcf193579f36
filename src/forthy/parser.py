## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import functools
from typing import Iterator, NamedTuple

import lark
from .errors import ForthParseError, ForthIncompleteParse


GRAMMAR = r"""start: (definition | token)*
definition: COLON keyword token* SEMICOLON

?token: int | float | char | operator | reserved_keyword | keyword
int: INT
float: FLOAT
char: CHAR
keyword: NAME

operator: add | sub | mul | div | inp | print | debugprint | dup | swp | ovr | rot | store | retrieve
add: ADD
sub: SUB
mul: MUL
div: DIV
inp: INP
print: PRINT
debugprint: DEBUGPRINT
dup: DUP
swp: SWP
ovr: OVR
rot: ROT
store: STORE
retrieve: RETRIEVE

reserved_keyword: variable | constant
variable: VARIABLE keyword
constant: CONSTANT keyword

// OPERATORS & RESERVED WORDS, only recognized when they span a whole word.
ADD: "+"
SUB: "-"
MUL: "*"
DIV: "/"
INP: "input"
PRINT: "."
DEBUGPRINT: "?"
DUP: "dup"
SWP: "swap"
OVR: "over"
ROT: "rot"
STORE: "!"
RETRIEVE: "@"
VARIABLE: "variable"
CONSTANT: "constant"
COLON: ":"
SEMICOLON: ";"

// LITERALS
FLOAT.3: /-?\d+\.\d+(?:[eE][+-]?\d+)?(?!\S)/
INT.2: /-?\d+(?!\S)/
CHAR.2: /'\S+/
NAME: /[^\s']\S*/

// COMMENTS
LINE_COMMENT.4: /\\(?=\s|$)[^\n]*/
BLOCK_COMMENT.4: /\((?=\s)[^)]*\)/

// WHITESPACE
%import common.WS
%ignore WS
%ignore LINE_COMMENT
%ignore BLOCK_COMMENT
"""

# Words the grammar claims wherever they appear as a token, so they cannot name a declaration.
RESERVED_WORDS = frozenset("+ - * / . ? input dup swap over rot ! @ variable constant : ;".split())


class SyntaxNode(NamedTuple):
    """One grammar match: rule tag, matched text, nested sub-rule nodes and source position."""
    rule: str
    text: str
    children: tuple = ()
    meta: dict | None = None

    @property
    def inner(self) -> "SyntaxNode | None":
        return self.children[0] if self.children else None

    def __str__(self):
        return ' '.join(self.text.split())


@functools.cache
def _get_parser() -> lark.Lark:
    return lark.Lark(GRAMMAR, start='start', parser="lalr", lexer="contextual", propagate_positions=True)


def parse(source: str, filename=None) -> Iterator[SyntaxNode]:
    """Split source text into top-level syntax nodes, one per token or definition."""
    def _convert(tree: lark.Tree) -> SyntaxNode:
        meta = {'filename': filename, 'line': tree.meta.line, 'column': tree.meta.column,
                'end_line': tree.meta.end_line, 'end_column': tree.meta.end_column}
        text = source[tree.meta.start_pos:tree.meta.end_pos]
        children = tuple(_convert(ch) for ch in tree.children if isinstance(ch, lark.Tree))
        return SyntaxNode(str(tree.data), text, children, meta)

    try:
        tree = _get_parser().parse(source)
    except (lark.exceptions.ParseError, lark.exceptions.UnexpectedCharacters) as exc:
        def attr(k): return getattr(exc, k, None)
        token_val = getattr(token, 'value', '') if (token := attr('token')) is not None else ''
        if isinstance(exc, lark.exceptions.UnexpectedCharacters) and (rest := source[exc.pos_in_stream:].split(None, 1)):
            token_val = rest[0]
        error_class = ForthIncompleteParse if token_val == '' else ForthParseError
        raise error_class(str(exc), filename=filename, line=attr('line'), column=attr('column'), token=token_val) from None

    for child in tree.children:
        yield _convert(child)


def load_source_lines(filename: str | None, source: str | None = None) -> list[str]:
    if source is not None: return source.splitlines()
    if filename is None or filename.startswith('<'): return []
    try:
        with open(filename, 'r', encoding='utf-8') as f:
            return f.read().splitlines()
    except OSError:
        return []


def format_source_lines(meta: dict | None, identifier: str, source: str | None = None) -> str:
    if not meta or meta.get('line') is None: return ""
    header = f"\033[97m  File \"{meta['filename']}\", line {meta['line']}, in {identifier}\033[0m\n"
    lines = load_source_lines(meta.get('filename'), source)
    if not (0 < meta['line'] <= len(lines)): return header
    line = lines[meta['line'] - 1]
    col, end = meta['column'] - 1, (meta.get('end_column') or meta['column']) - 1
    if meta.get('end_line', meta['line']) != meta['line']: end = len(line)
    line = line[:col] + f"\033[48;5;30m\033[1;97m{line[col:end]}\033[0m" + line[end:]
    return header + "    " + line.strip() + "\n"


def format_parse_error_context(filename, line, column, token_value, source=None):
    lines = load_source_lines(filename, source)
    if line is None or not lines:
        return f"\033[97m  File \"{filename}\"\033[0m\n"
    start_line, end_line = max(0, line - 3), min(len(lines), line + 2)
    result = [f"\033[97m  File \"{filename}\", line {line}\033[0m"]

    for i in range(start_line, end_line):
        line_content = lines[i]
        line_color = '\033[90m'
        if i+1 == line:
            line_color = '\033[97m'
            if column is not None and 0 < column <= len(line_content):
                line_content = (
                    line_content[:column-1] +
                    f"\033[48;5;30m\033[1;97m{line_content[column-1:column+len(token_value)-1]}\033[0m" +
                    line_content[column+len(token_value)-1:]
                )
        result.append(f"{line_color}{i+1:>5} |\033[0m {line_content}")
    return '\n' + '\n'.join(result) + '\n'
