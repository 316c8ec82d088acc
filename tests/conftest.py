"""
YOLOL VM - Test Configuration
=============================

Shared fixtures for the unit tests.
"""

from pathlib import Path

import pytest

from yolol_vm import (
    ExpressionEvaluator,
    FieldStore,
    ProgramCounter,
    StatementExecutor,
    VariableStore,
    YololVM,
)


@pytest.fixture
def field_store() -> FieldStore:
    """Fixture: a field store with one registered chip named "chip"."""
    store = FieldStore()
    store.add_device("chip")
    return store


@pytest.fixture
def variables(field_store) -> VariableStore:
    """Fixture: variable store bound to "chip"."""
    return VariableStore("chip", field_store)


@pytest.fixture
def reports() -> list:
    """Fixture: messages reported by the evaluator, in order."""
    return []


@pytest.fixture
def evaluator(variables, reports) -> ExpressionEvaluator:
    """Fixture: evaluator that appends script errors to `reports`."""
    return ExpressionEvaluator(variables, reports.append)


@pytest.fixture
def counter() -> ProgramCounter:
    return ProgramCounter()


@pytest.fixture
def executor(evaluator, counter) -> StatementExecutor:
    """Fixture: statement executor with the default 20-line grid."""
    return StatementExecutor(evaluator, counter)


@pytest.fixture
def make_vm(field_store):
    """
    Fixture: factory for VMs bound to "chip" and the shared field store.

    Usage:
        vm = make_vm(program(line(...)))
    """
    def factory(program, **kwargs):
        return YololVM("chip", program, fields=field_store, **kwargs)
    return factory


@pytest.fixture(scope="session")
def examples_dir() -> Path:
    """Fixture: directory holding the sample JSON programs."""
    return Path(__file__).parent.parent / "examples" / "programs"
