"""
YOLOL VM Error Hierarchy
========================

This module defines the exception hierarchy for the YOLOL virtual machine.
All exceptions inherit from YololError, allowing hosts to catch every
package-related error with a single except clause if desired.

Exception Hierarchy
-------------------
YololError (base)
├── VMInternalError - malformed or unrecognized AST node, unsupported operator
├── ProgramFormatError - program supplied by the parser is malformed
└── FieldError - misuse of the device field store

Script-Level Errors Are Not Exceptions
--------------------------------------
Errors a script author can cause (division by zero, an invalid goto target,
an ambiguous field read) never surface as exceptions. They are recorded in
the VM's ErrorLog and the current line is halted; the next step() runs
normally. The exceptions defined here describe contract violations between
the VM and its collaborators.

Copyright (c) 2026 yolol-vm Contributors
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class YololError(Exception):
    """
    Base exception for all YOLOL VM errors.

    Example:
        try:
            program = load_program_file("door.json")
        except YololError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Interpreter Exceptions
# =============================================================================

class VMInternalError(YololError):
    """
    Internal-consistency failure inside the interpreter.

    Raised when the VM meets a node it does not know how to execute: an
    unknown expression or statement class, an operator that does not belong
    to its binary group, an unknown keyword or an unsupported assignment
    operator. These indicate a broken parser contract rather than a script
    mistake, so they are caught at the line boundary, logged, and recorded
    as a single generic error for that line.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"internal VM error: {message}")


# =============================================================================
# Program Supply Exceptions
# =============================================================================

class ProgramFormatError(YololError):
    """
    The program handed to the VM is malformed.

    Raised by the loader when a tagged node is unknown or lacks a required
    key, and by the VM when the program exceeds the configured line limit.

    Attributes:
        message: The error description
        line: 1-based program line the problem belongs to (optional)
        path: Location of the offending node inside the line (optional),
              e.g. "code[1].value.lhs"
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        path: Optional[str] = None,
    ):
        self.message = message
        self.line = line
        self.path = path
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format as 'line N: path: error: message'.

        Example output:
            line 3: code[0].value: error: unknown expression type 'call'
        """
        parts = []
        if self.line is not None:
            parts.append(f"line {self.line}")
        if self.path:
            parts.append(self.path)
        parts.append(f"error: {self.message}")
        return ": ".join(parts)


# =============================================================================
# Field Store Exceptions
# =============================================================================

class FieldError(YololError):
    """
    Misuse of the device field store.

    Raised when a field is read or written for a device that was never
    registered with the store.
    """

    def __init__(self, device: str, message: str = ""):
        self.device = device
        if not message:
            message = f"unknown device '{device}'"
        super().__init__(message)
