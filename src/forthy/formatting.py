## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
import math
from decimal import Decimal

from .types import round_f32


def format_f32(x: float) -> str:
    """Shortest decimal text that reads back as the same single-precision float, never in exponent form."""
    if math.isnan(x): return 'NaN'
    if math.isinf(x): return 'inf' if x > 0 else '-inf'
    if x == 0: return '-0' if math.copysign(1.0, x) < 0 else '0'
    for precision in range(1, 10):
        text = f"{x:.{precision}g}"
        if round_f32(float(text)) == x: break
    return format(Decimal(text), 'f')


def format_debug(value) -> str:
    return repr(value)

def format_display(value) -> str:
    return str(value)

def format_stack(stack) -> str:
    """Bottom to top, each item followed by a space, then the top marker."""
    return ''.join(f"{format_display(v)} " for v in stack) + "<- Top"


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))

def show_stack(stack, width=72, end='\n', file=None):
    stack_str = ' '.join(format_debug(v) for v in stack) if len(stack) else '∅'
    if width is not None and len(stack_str) > width:
        stack_str = '… ' + stack_str[-width+2:]
    print(f"{stack_str:>{width}}" if width else stack_str, end=end, file=file)

def show_program_and_stack(program, stack, width=72, file=None):
    prog_str = ' '.join(str(p) for p in program) if program else '∅'
    if len(prog_str) > width:
        prog_str = prog_str[:+width-2] + ' …'
    show_stack(stack, end='', file=file)
    print(f" \033[36m <=> \033[0m {prog_str:<{width}}", file=file)
