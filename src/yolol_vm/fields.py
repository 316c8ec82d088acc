"""
In-Memory Device Field Store
============================

A small world/map store implementing the FieldAccessor interface. Hosts that
do not bring their own world (the yololvm CLI, tests, quick experiments) use
it to give chips something to read and write.

Devices are grouped into networks. A chip reading ":door" sees every device
on its network that exposes a "door" field:

- no device exposes it: the read is missing (the VM reads 0)
- all exposing devices agree: that value is returned
- the devices disagree: the read is ambiguous and the VM halts the line

Writes update every device on the network that exposes the field. When none
does, the field is created on the writing device so that later reads see it.

Example:
    >>> store = FieldStore()
    >>> store.add_device("chip")
    >>> store.add_device("door", {"DoorOpen": 0})
    >>> store.set_field("chip", "dooropen", 1)
    >>> store.get_field("door", "DoorOpen").value
    1

Field names are case-insensitive, like YOLOL identifiers on the device side.
"""

from dataclasses import dataclass, field
import logging
from typing import Iterator, Optional

from yolol_vm.errors import FieldError
from yolol_vm.values import Value, values_equal
from yolol_vm.variables import FieldRead


logger = logging.getLogger(__name__)

DEFAULT_NETWORK = "default"


@dataclass
class Device:
    """
    A device registered with the store.

    Attributes:
        name: Device handle as passed by the VM
        network: Name of the network the device is connected to
        fields: Field values keyed by lower-cased field name
    """
    name: str
    network: str = DEFAULT_NETWORK
    fields: dict[str, Value] = field(default_factory=dict)


class FieldStore:
    """Device fields shared over named networks."""

    def __init__(self):
        self._devices: dict[str, Device] = {}

    # =========================================================================
    # Device Management
    # =========================================================================

    def add_device(
        self,
        name: str,
        fields: Optional[dict[str, Value]] = None,
        network: str = DEFAULT_NETWORK,
    ) -> Device:
        """
        Register a device, replacing any device of the same name.

        Args:
            name: Device handle
            fields: Initial field values
            network: Network to connect the device to

        Returns:
            The registered Device
        """
        device = Device(
            name=name,
            network=network,
            fields={key.lower(): value for key, value in (fields or {}).items()},
        )
        self._devices[name] = device
        logger.debug(f"Added device '{name}' on network '{network}' with {len(device.fields)} fields")
        return device

    def remove_device(self, name: str) -> None:
        """Unregister a device."""
        self._device(name)
        del self._devices[name]

    def device(self, name: str) -> Device:
        """Look up a registered device."""
        return self._device(name)

    def devices(self) -> Iterator[Device]:
        return iter(self._devices.values())

    def _device(self, name: object) -> Device:
        try:
            return self._devices[name]
        except (KeyError, TypeError):
            raise FieldError(str(name)) from None

    def _network_devices(self, network: str) -> list[Device]:
        return [d for d in self._devices.values() if d.network == network]

    # =========================================================================
    # FieldAccessor Interface
    # =========================================================================

    def get_field(self, device: object, name: str) -> FieldRead:
        """
        Read a field as seen from a device.

        Raises:
            FieldError: If the device is not registered
        """
        reader = self._device(device)
        key = name.lower()

        values: list[Value] = []
        for other in self._network_devices(reader.network):
            if key in other.fields:
                value = other.fields[key]
                if not any(values_equal(value, seen) for seen in values):
                    values.append(value)

        if not values:
            return FieldRead.missing()
        if len(values) > 1:
            logger.debug(f"Field '{name}' has {len(values)} conflicting values on network '{reader.network}'")
            return FieldRead.conflicting()
        return FieldRead.found(values[0])

    def set_field(self, device: object, name: str, value: Value) -> None:
        """
        Write a field as seen from a device.

        Raises:
            FieldError: If the device is not registered
        """
        writer = self._device(device)
        key = name.lower()

        targets = [d for d in self._network_devices(writer.network) if key in d.fields]
        if not targets:
            targets = [writer]
        for target in targets:
            target.fields[key] = value
