"""
YOLOL Virtual Machine
=====================

The line driver. A YololVM is bound to one device and one program and runs
exactly one line per step():

1. The current line's error records are discarded.
2. A line carrying syntax errors is skipped (the step is still consumed).
3. Otherwise its statements run in order. A Halt abandons the rest of the
   line only; an unreported Halt gets a generic error record.
4. The program counter advances, wrapping past the last line.

Nothing raised while executing a line escapes step(). Internal failures are
logged with their traceback and recorded as one generic error for the line,
so a host can keep stepping indefinitely.

Example:
    >>> from yolol_vm import YololVM, load_program
    >>> program = load_program([
    ...     {"errors": [], "code": [
    ...         {"type": "assign", "operator": "=",
    ...          "identifier": {"type": "identifier", "name": "x"},
    ...          "value": {"type": "number", "num": "1"}}]},
    ... ])
    >>> vm = YololVM(device="chip", program=program)
    >>> vm.step()
    >>> vm.get_variable("x")
    1

Copyright (c) 2026 yolol-vm Contributors
"""

import logging
from typing import Optional

from yolol_vm.ast import Program
from yolol_vm.config import VMConfig
from yolol_vm.diagnostics import ErrorLog, ErrorRecord, Severity
from yolol_vm.errors import ProgramFormatError
from yolol_vm.evaluator import ExpressionEvaluator
from yolol_vm.executor import ProgramCounter, StatementExecutor
from yolol_vm.outcome import Halt
from yolol_vm.values import Value
from yolol_vm.variables import FieldAccessor, VariableStore


logger = logging.getLogger(__name__)

HALTED = "Line execution halted."
CRITICAL = "CRITICAL VM ERROR"


class YololVM:
    """
    Interpreter for one chip.

    Each instance owns its variables, error log and program counter; the
    field accessor is the only state shared with other VMs.

    Attributes:
        device: Device handle passed to the field accessor
        program: The program being run
        config: VM configuration
        errors: Per-line error log
    """

    def __init__(
        self,
        device: object = None,
        program: Optional[Program] = None,
        fields: Optional[FieldAccessor] = None,
        config: Optional[VMConfig] = None,
    ):
        """
        Create a VM bound to a device and a program.

        Args:
            device: Device handle (the chip) for field reads and writes
            program: Program to run; an empty program makes step() a no-op
            fields: World store holding device fields
            config: VM configuration (default: VMConfig())

        Raises:
            ProgramFormatError: If the program has more lines than allowed
        """
        self.config = config or VMConfig()
        self.device = device
        self.program = program if program is not None else Program()
        if len(self.program) > self.config.line_limit:
            raise ProgramFormatError(
                f"program has {len(self.program)} lines, the limit is {self.config.line_limit}"
            )

        self.errors = ErrorLog(max_per_line=self.config.max_errors_per_line)
        self._counter = ProgramCounter()
        self._variables = VariableStore(device, fields)
        self._evaluator = ExpressionEvaluator(self._variables, self._report)
        self._executor = StatementExecutor(self._evaluator, self._counter, self.config.line_limit)
        self._executing_line: Optional[int] = None
        self._skipped_lines: set[int] = set()

    # =========================================================================
    # Stepping
    # =========================================================================

    def step(self) -> None:
        """Run the current line and advance the program counter."""
        if len(self.program) == 0:
            logger.debug("step() on an empty program")
            return

        number = self._counter.line
        line = self.program.line(number)
        self.errors.reset(number)

        if line.has_syntax_errors:
            if number not in self._skipped_lines:
                logger.warning(f"Line {number}: skipped, {len(line.syntax_errors)} syntax errors")
                self._skipped_lines.add(number)
        else:
            logger.debug(f"Executing line {number}")
            self._run_line(number, line.statements)

        self._counter.advance(len(self.program))

    def run(self, steps: int) -> None:
        """Call step() `steps` times."""
        for _ in range(steps):
            self.step()

    def _run_line(self, number: int, statements) -> None:
        self._executing_line = number
        try:
            result = self._executor.execute_block(statements)
            if isinstance(result, Halt) and not result.reported:
                self._report(HALTED)
        except Exception:
            logger.exception(f"Line {number}: internal failure")
            self.errors.push(number, ErrorRecord(Severity.ERROR, CRITICAL))
        finally:
            self._executing_line = None

    def _report(self, message: str) -> None:
        # Errors belong to the line being executed even after a goto has
        # already moved the counter.
        line = self._executing_line if self._executing_line is not None else self._counter.line
        self.errors.push(line, ErrorRecord(Severity.ERROR, message))

    # =========================================================================
    # Host Access
    # =========================================================================

    @property
    def line(self) -> int:
        """The line the next step() will run."""
        return self._counter.line

    @line.setter
    def line(self, number: int) -> None:
        if not 1 <= number <= max(len(self.program), 1):
            raise ValueError(f"line {number} out of range 1..{len(self.program)}")
        self._counter.line = number

    @property
    def variables(self) -> dict[str, Value]:
        """Snapshot of the local variables."""
        return self._variables.locals

    def get_variable(self, name: str) -> Optional[Value]:
        """Read a variable or, with the ':' sigil, a device field."""
        return self._variables.get_variable(name)

    def set_variable(self, name: str, value: Value) -> None:
        """Write a variable or, with the ':' sigil, a device field."""
        self._variables.set_variable(name, value)

    def reset(self) -> None:
        """Return to line 1 and forget local variables and errors."""
        self._counter.line = 1
        self._variables.clear()
        self.errors.clear()
        self._skipped_lines.clear()

    def __repr__(self) -> str:
        return f"YololVM(device={self.device!r}, line={self.line}, lines={len(self.program)})"
