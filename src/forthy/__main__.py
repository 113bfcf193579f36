## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# forthy — A minimal interpreter for a stack-based, Forth-like language.
#

import os
import sys
import time
import traceback
from pathlib import Path
from dataclasses import dataclass

import click

from .errors import ForthError, ForthParseError, ForthIncompleteParse, InvalidTokenError, ExecutionError
from .parser import format_parse_error_context, format_source_lines
from .formatting import write_without_ansi, format_stack
from .runtime import Runtime


DEFAULT_SOURCE = 'test.forth'


@dataclass(frozen=True)
class RuntimeConfig:
    verbose: int
    stats: bool
    plain: bool


@dataclass
class ExecutionItem:
    source: str
    filename: str


class ForthRunner:
    def __init__(self, config: RuntimeConfig):
        self.verbose = config.verbose
        self.stats_enabled = config.stats
        self.plain = config.plain

        if self.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

        self.runtime = Runtime()
        self.total_stats = {'steps': 0, 'start': time.time()} if self.stats_enabled else None
        self.failure = False
        self.executed_items = 0

    def _maybe_fatal_error(self, message: str, detail: str, exc_type: str = None, context: str = '', is_repl: bool = False) -> None:
        header = detail if not exc_type else f"{detail} (Exception: \033[33m{exc_type}\033[0m)"
        print(f'\033[30;43m {message} \033[0m {header}\n{context}', file=sys.stderr)
        self.failure = True
        if not is_repl: sys.exit(1)

    def _handle_exception(self, exc, filename: str, source: str, is_repl: bool = False) -> bool:
        if isinstance(exc, ForthParseError):
            if is_repl and isinstance(exc, ForthIncompleteParse): return True
            context = format_parse_error_context(filename, exc.line, exc.column, exc.token or '', source=source)
            context += f"\n\033[90m{str(exc).replace(chr(10), ' ').replace(chr(9), ' ')}\033[0m\n"
            self._maybe_fatal_error("SYNTAX ERROR.", f"Parsing `\033[97m{filename}\033[0m` caused a problem!", type(exc).__name__, context, is_repl)
        elif isinstance(exc, InvalidTokenError):
            detail = f"Token `\033[1;97m{exc.forth_token}\033[0m` from `\033[97m{filename}\033[0m` is not valid: {exc}"
            context = '\n' + format_source_lines(exc.forth_meta, exc.forth_token, source=source)
            self._maybe_fatal_error("TOKEN ERROR.", detail, type(exc).__name__, context, is_repl)
        elif isinstance(exc, ExecutionError):
            detail = f"\033[1;97m{exc}\033[0m [{exc.kind}] while executing `\033[97m{exc.forth_token}\033[0m`."
            context = '\n' + format_source_lines(exc.forth_meta, exc.forth_token, source=source)
            if os.environ.get('FORTH_DEBUG'):
                context += ''.join(traceback.format_exception(exc))
            self._maybe_fatal_error("EXECUTION ERROR.", detail, type(exc).__name__, context, is_repl)
        elif isinstance(exc, Exception):
            print(f'\033[30;43m RUNTIME ERROR. \033[0m Instruction \033[1;97m`{getattr(exc, "forth_op", None)}`\033[0m caused an error in interpret! (Exception: \033[33m{type(exc).__name__}\033[0m)', file=sys.stderr)
            traceback.print_exc()
            self.failure = True
            if not is_repl: sys.exit(1)
        return False

    def execute_items(self, items: list[ExecutionItem]) -> None:
        for item in items:
            self._execute_script(item.source, item.filename)

    def _execute_script(self, source: str, filename: str, is_repl: bool = False) -> None:
        try:
            stack = self.runtime.run(source, filename=filename, verbosity=self.verbose, stats=self.total_stats)
        except (ForthError, Exception) as exc:
            self._handle_exception(exc, filename, source, is_repl=is_repl)
        else:
            print()
            print(format_stack(stack))
            self.executed_items += 1

    def repl(self) -> None:
        if sys.platform != "win32": import readline

        print('forthy - Forth-like stack language REPL; type Ctrl+C to exit.')
        source = ""

        while True:
            try:
                prompt = "\033[36m<<< \033[0m" if not source.strip() else "\033[36m... \033[0m"
                line = input(prompt)
                if len(line.strip()) == 0: continue
                if line.strip() in ('quit', 'exit', 'bye'): break
                source += line + "\n"

                try:
                    stack = self.runtime.run(source, filename='<REPL>', verbosity=self.verbose)
                    print(f"\n\033[90m>>>\033[0m {format_stack(stack)}")
                    source = ""
                except (ForthError, Exception) as exc:
                    if not self._handle_exception(exc, '<REPL>', source, is_repl=True):
                        source = ""

            except (KeyboardInterrupt, EOFError):
                print(""); break

    def finalize(self) -> int:
        if self.total_stats and self.executed_items > 0:
            elapsed_time = time.time() - self.total_stats['start']
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m")
            print(f"step\t\033[97m{self.total_stats['steps']:,}\033[0m")
            print(f"time\t\033[97m{elapsed_time:.3f}s\033[0m")
        return 1 if self.failure else 0


@click.group(invoke_without_command=True)
@click.option('--verbose', '-v', default=0, count=True, help='Trace the stack and program before each instruction.')
@click.option('--stats', is_flag=True, help='Display execution statistics (e.g., number of steps).')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.pass_context
def cli(ctx: click.Context, verbose: int, stats: bool, plain: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj['config'] = RuntimeConfig(verbose=verbose, stats=stats, plain=plain)


@cli.command('run-file')
@click.argument('script', type=click.File('r', encoding='utf-8'))
@click.pass_context
def run_file(ctx: click.Context, script) -> None:
    runner = ForthRunner(ctx.obj['config'])
    filename = script.name or '<STDIN>'
    runner.execute_items((ExecutionItem(script.read(), filename),))
    ctx.exit(runner.finalize())


@cli.command('run-command')
@click.argument('commands', nargs=-1, required=True)
@click.pass_context
def run_command(ctx: click.Context, commands: tuple[str, ...]) -> None:
    runner = ForthRunner(ctx.obj['config'])
    runner.execute_items([ExecutionItem(cmd + '\n', f'<INPUT_{i}>') for i, cmd in enumerate(commands, start=1)])
    ctx.exit(runner.finalize())


@cli.command('run-repl')
@click.pass_context
def run_repl(ctx: click.Context) -> None:
    runner = ForthRunner(ctx.obj['config'])
    runner.repl()
    ctx.exit(runner.finalize())


def _route(args: list[str]) -> tuple[str, list[str]]:
    pos = [t for t in args if not t.startswith('-') or t == '-']

    if '-c' in args or '--command' in args:
        commands = [args[i+1] for i, t in enumerate(args) if t in ('-c', '--command') and i + 1 < len(args)]
        if not commands: raise SystemExit("Expected Forth code after -c/--command.")
        return 'run-command', commands
    if '-r' in args or '--repl' in args:
        return 'run-repl', []
    if len(pos) == 1:
        return 'run-file', pos
    if len(pos) > 1:
        raise SystemExit(f"Expected a single source file, got {len(pos)}.")
    if Path(DEFAULT_SOURCE).exists():
        return 'run-file', [DEFAULT_SOURCE]
    if not sys.stdin.isatty():
        return 'run-file', ['-']
    return 'run-repl', []


def main(argv: list[str] | None = None) -> None:
    a = list(sys.argv[1:] if argv is None else argv)
    g = [t for t in a if t in ('--stats', '--plain', '-p') or t == '--verbose' or (t.startswith('-v') and set(t[1:]) == {'v'})]
    r = [t for t in a if t not in g]
    cmd, tail = _route(r)
    cli.main(args=[*g, cmd, *(['--', *tail] if tail else [])], prog_name='forthy')


if __name__ == "__main__":
    main()
