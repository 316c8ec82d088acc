"""
YOLOL VM - Line-Numbered Script Interpreter
===========================================

This package provides a tree-walking interpreter for YOLOL, the small
line-numbered scripting language that runs on programmable chips. A chip
program is a fixed grid of lines; the VM runs exactly one line per step()
and moves a program counter that wraps past the last line.

Main Components
---------------
- **vm**: YololVM, the line driver (new / step / run)
- **evaluator**: expression evaluation
- **executor**: statement execution and the program counter
- **variables**: local variables and the device field interface
- **fields**: in-memory device field store for hosts without a world
- **diagnostics**: per-line error log
- **loader**: converts the parser's tagged tree into AST nodes

Quick Start
-----------
Load a parsed program and step it:
    >>> from yolol_vm import YololVM, FieldStore, load_program_file
    >>> store = FieldStore()
    >>> store.add_device("chip")
    >>> vm = YololVM("chip", load_program_file("examples/programs/counter.json"), fields=store)
    >>> vm.run(5)
    >>> vm.variables
    {'x': 2}

Or use the command-line tool:
    $ yololvm door.json --steps 20 --field door=0

Copyright (c) 2026 yolol-vm Contributors
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from yolol_vm.ast import (
    Assignment,
    ASTPrinter,
    BinaryExpression,
    BinaryGroup,
    Comment,
    Goto,
    Identifier,
    If,
    IncrementExpression,
    IncrementStatement,
    KeywordExpression,
    Line,
    NumberLiteral,
    Program,
    StringLiteral,
    SyntaxErrorRecord,
)
from yolol_vm.config import VMConfig
from yolol_vm.diagnostics import ErrorLog, ErrorRecord, Severity
from yolol_vm.errors import (
    FieldError,
    ProgramFormatError,
    VMInternalError,
    YololError,
)
from yolol_vm.evaluator import ExpressionEvaluator
from yolol_vm.executor import ProgramCounter, StatementExecutor
from yolol_vm.fields import FieldStore
from yolol_vm.loader import load_program, load_program_file, load_program_json
from yolol_vm.outcome import Halt
from yolol_vm.variables import (
    FieldAccessor,
    FieldRead,
    Namespace,
    VariableRef,
    VariableStore,
)
from yolol_vm.vm import YololVM

__all__ = [
    "__version__",
    # VM
    "YololVM",
    "VMConfig",
    "ProgramCounter",
    "ExpressionEvaluator",
    "StatementExecutor",
    "Halt",
    # AST
    "Program",
    "Line",
    "SyntaxErrorRecord",
    "Assignment",
    "Goto",
    "If",
    "Comment",
    "IncrementStatement",
    "NumberLiteral",
    "StringLiteral",
    "Identifier",
    "BinaryExpression",
    "BinaryGroup",
    "KeywordExpression",
    "IncrementExpression",
    "ASTPrinter",
    # Loading
    "load_program",
    "load_program_json",
    "load_program_file",
    # Variables and fields
    "VariableStore",
    "VariableRef",
    "Namespace",
    "FieldAccessor",
    "FieldRead",
    "FieldStore",
    # Diagnostics
    "ErrorLog",
    "ErrorRecord",
    "Severity",
    # Exception hierarchy
    "YololError",
    "VMInternalError",
    "ProgramFormatError",
    "FieldError",
]
