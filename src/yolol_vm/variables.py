"""
Variable Store
==============

YOLOL names live in two disjoint namespaces:

- **Local variables** belong to one VM instance. Unset names read as 0.
- **Device fields** are written with a leading sigil (":door") and belong to
  the world the chip is installed in. The VM never stores them itself; reads
  and writes are forwarded to a FieldAccessor with the sigil stripped.

The namespace of a name is decided once, when a VariableRef is built, so the
interpreter never re-inspects the prefix on each access:

    >>> ref = VariableRef.parse(":door")
    >>> ref.namespace, ref.key
    (<Namespace.FIELD: 2>, 'door')
"""

from dataclasses import dataclass
from enum import Enum, auto
import logging
from typing import Optional, Protocol

from yolol_vm.values import Value


logger = logging.getLogger(__name__)

FIELD_SIGIL = ":"


# =============================================================================
# Name Resolution
# =============================================================================

class Namespace(Enum):
    """Which store a name resolves to."""
    LOCAL = auto()   # VM-local variable
    FIELD = auto()   # Externally owned device field


@dataclass(frozen=True)
class VariableRef:
    """
    A resolved YOLOL name.

    Attributes:
        name: The name as written in the program, sigil included
        namespace: LOCAL or FIELD
        key: The name used for the lookup (sigil stripped for fields)
    """
    name: str
    namespace: Namespace
    key: str

    @classmethod
    def parse(cls, name: str) -> "VariableRef":
        """Resolve a raw name into its namespace and lookup key."""
        if name.startswith(FIELD_SIGIL):
            return cls(name, Namespace.FIELD, name[len(FIELD_SIGIL):])
        return cls(name, Namespace.LOCAL, name)

    @property
    def is_field(self) -> bool:
        return self.namespace is Namespace.FIELD

    def __str__(self) -> str:
        return self.name


# =============================================================================
# External Field Interface
# =============================================================================

@dataclass(frozen=True)
class FieldRead:
    """
    Outcome of reading a device field.

    A read either finds a value, finds nothing, or finds several devices
    disagreeing about the value. Missing and ambiguous are distinct so the
    VM can default the first to 0 and report the second.

    Attributes:
        value: The field value when found
        ambiguous: True when several conflicting values were found
    """
    value: Optional[Value] = None
    ambiguous: bool = False

    @classmethod
    def found(cls, value: Value) -> "FieldRead":
        return cls(value=value)

    @classmethod
    def missing(cls) -> "FieldRead":
        return cls()

    @classmethod
    def conflicting(cls) -> "FieldRead":
        return cls(ambiguous=True)

    @property
    def is_missing(self) -> bool:
        return self.value is None and not self.ambiguous


class FieldAccessor(Protocol):
    """
    Interface the world/map store implements for the VM.

    The VM passes its device handle unchanged; what a device is, and how
    fields are shared between devices, is entirely up to the accessor.
    """

    def get_field(self, device: object, name: str) -> FieldRead:
        ...

    def set_field(self, device: object, name: str, value: Value) -> None:
        ...


# =============================================================================
# Variable Store
# =============================================================================

class VariableStore:
    """
    Name to value mapping for one VM instance.

    Local names are kept in a private dict. Field names are forwarded to the
    injected FieldAccessor together with the device the VM is bound to.

    Attributes:
        device: The device handle passed to the field accessor
        fields: The field accessor, or None for a VM without a world
    """

    def __init__(self, device: object = None, fields: Optional[FieldAccessor] = None):
        self.device = device
        self.fields = fields
        self._locals: dict[str, Value] = {}

    # =========================================================================
    # Resolved Access (used by the interpreter)
    # =========================================================================

    def read(self, ref: VariableRef) -> FieldRead:
        """
        Read a resolved name.

        Local names always come back found, defaulting to 0. Field reads are
        returned as the accessor reports them, except that a missing field
        also reads as 0.
        """
        if ref.namespace is Namespace.FIELD:
            if self.fields is None:
                logger.debug(f"No field accessor bound, '{ref.name}' reads as 0")
                return FieldRead.found(0)
            result = self.fields.get_field(self.device, ref.key)
            if result.is_missing:
                return FieldRead.found(0)
            return result
        return FieldRead.found(self._locals.get(ref.key, 0))

    def write(self, ref: VariableRef, value: Value) -> None:
        """Write a resolved name, forwarding fields to the accessor."""
        if ref.namespace is Namespace.FIELD:
            if self.fields is None:
                logger.debug(f"No field accessor bound, write to '{ref.name}' dropped")
                return
            self.fields.set_field(self.device, ref.key, value)
        else:
            self._locals[ref.key] = value

    # =========================================================================
    # Name-Based Access (host inspection and pre-seeding)
    # =========================================================================

    def get_variable(self, name: str) -> Optional[Value]:
        """
        Read a variable by its raw name.

        Returns:
            The value, 0 for unset names, or None when a field read is
            ambiguous
        """
        return self.read(VariableRef.parse(name)).value

    def set_variable(self, name: str, value: Value) -> None:
        """Write a variable by its raw name."""
        self.write(VariableRef.parse(name), value)

    @property
    def locals(self) -> dict[str, Value]:
        """Snapshot of the local variables."""
        return dict(self._locals)

    def clear(self) -> None:
        """Forget all local variables; device fields are untouched."""
        self._locals.clear()

    def __contains__(self, name: str) -> bool:
        return name in self._locals

    def __len__(self) -> int:
        return len(self._locals)
