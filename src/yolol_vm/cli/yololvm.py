"""
yololvm - YOLOL VM Command-Line Interface
=========================================

Runs a parsed YOLOL program (the parser's tagged tree, as JSON) for a number
of steps and prints the resulting machine state.

Usage Examples
--------------
One pass over the program:
    $ yololvm door.json

Twenty steps with a device field pre-set:
    $ yololvm door.json --steps 20 --field door=1

Seed a local variable:
    $ yololvm counter.json --set x=10 --steps 5

Print the AST:
    $ yololvm door.json --ast

Trace every step:
    $ yololvm door.json --log-level DEBUG

Copyright (c) 2026 yolol-vm Contributors
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from yolol_vm import __version__
from yolol_vm.ast import ASTPrinter
from yolol_vm.cli.errors import ExitCode, handle_cli_exception
from yolol_vm.config import LOG_LEVELS, VMConfig
from yolol_vm.fields import FieldStore
from yolol_vm.loader import load_program_file
from yolol_vm.values import Value, to_number, to_text
from yolol_vm.variables import FIELD_SIGIL
from yolol_vm.vm import YololVM


# =============================================================================
# Option Parsing
# =============================================================================

def _parse_assignments(ctx, param, values: tuple[str, ...]) -> list[tuple[str, Value]]:
    """Parse NAME=VALUE options; quoted or non-numeric values are strings."""
    result = []
    for item in values:
        name, sep, raw = item.partition("=")
        name = name.strip()
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=VALUE, got {item!r}", ctx=ctx, param=param)
        raw = raw.strip()
        if len(raw) >= 2 and raw[0] == raw[-1] == '"':
            value: Value = raw[1:-1]
        else:
            number = to_number(raw)
            value = raw if number is None else number
        result.append((name, value))
    return result


def _parse_field_assignments(ctx, param, values: tuple[str, ...]) -> list[tuple[str, Value]]:
    """Parse --field options; "door=1" and ":door=1" set the same field."""
    result = []
    for name, value in _parse_assignments(ctx, param, values):
        name = name.removeprefix(FIELD_SIGIL)
        if not name:
            raise click.BadParameter("field name is empty", ctx=ctx, param=param)
        result.append((name, value))
    return result


def _format_value(value: Value) -> str:
    return f'"{value}"' if isinstance(value, str) else to_text(value)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "program_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-n", "--steps",
    type=click.IntRange(min=0),
    default=None,
    help="Number of steps to run (default: one pass over the program)",
)
@click.option(
    "-f", "--field",
    "fields",
    multiple=True,
    callback=_parse_field_assignments,
    help="Set a device field before running, NAME=VALUE (can be repeated)",
)
@click.option(
    "-s", "--set",
    "variables",
    multiple=True,
    callback=_parse_assignments,
    help="Set a local variable before running, NAME=VALUE (can be repeated)",
)
@click.option(
    "-d", "--device",
    default="chip",
    show_default=True,
    help="Name of the device the chip is bound to",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print AST and exit (for debugging)",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (default: YOLOL_VM_LOG_LEVEL or WARNING)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="yololvm")
def main(
    program_file: Path,
    steps: Optional[int],
    fields: list[tuple[str, Value]],
    variables: list[tuple[str, Value]],
    device: str,
    ast: bool,
    log_level: Optional[str],
    verbose: bool,
) -> None:
    """
    Run a parsed YOLOL program.

    PROGRAM_FILE is the parser output: a JSON list of lines, each with
    "errors" and "code" entries.

    \b
    Examples:
        yololvm door.json                  # One pass over the program
        yololvm door.json -n 40            # Forty steps
        yololvm door.json -f door=1        # Pre-set the :door field
        yololvm door.json -s x=5           # Pre-set local variable x
        yololvm door.json --ast            # Print the AST

    Exits with status 1 when any line ends up with error records.
    """
    config = VMConfig.from_env()
    if log_level:
        config.log_level = log_level.upper()
    logging.basicConfig(
        level=config.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        program = load_program_file(program_file)

        if ast:
            click.echo(ASTPrinter().print(program))
            return

        store = FieldStore()
        store.add_device(device, dict(fields))
        vm = YololVM(device, program, fields=store, config=config)
        for name, value in variables:
            vm.set_variable(name, value)

        if steps is None:
            steps = len(program)
        if verbose:
            click.echo(f"Running {program_file} ({len(program)} lines) for {steps} steps")

        vm.run(steps)

        click.echo(f"Line: {vm.line}")
        click.echo("Variables:")
        for name, value in sorted(vm.variables.items()):
            click.echo(f"  {name} = {_format_value(value)}")
        click.echo("Fields:")
        for other in store.devices():
            for name, value in sorted(other.fields.items()):
                click.echo(f"  {other.name}:{name} = {_format_value(value)}")

        if vm.errors.error_count():
            click.echo("Errors:")
            click.echo(vm.errors.report())
            sys.exit(ExitCode.PROGRAM_ERROR)

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
