"""
Halt Signal
===========

A halt abandons the remaining statements of the line being executed and
nothing more. Instead of unwinding with an exception, the evaluator and the
statement executor return a Halt value, and every caller hands it straight
back up until the line driver in YololVM.step() consumes it:

    value = self._evaluator.evaluate(stmt.value)
    if isinstance(value, Halt):
        return value

A Halt that was preceded by a specific ErrorRecord is `reported`; the line
driver adds a generic record only for unreported halts.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Halt:
    """
    Marker result: stop executing the current line.

    Attributes:
        reported: True when an error record explaining the halt has
                  already been written to the ErrorLog
    """
    reported: bool = True


HALT = Halt(reported=True)
HALT_UNREPORTED = Halt(reported=False)
