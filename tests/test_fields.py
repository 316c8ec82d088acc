# =============================================================================
# test_fields.py - Device Field Store Tests
# =============================================================================

import pytest

from yolol_vm import FieldStore
from yolol_vm.errors import FieldError


@pytest.fixture
def store():
    store = FieldStore()
    store.add_device("chip")
    return store


class TestDevices:
    """Device registration."""

    def test_add_device(self, store):
        device = store.add_device("door", {"DoorOpen": 1})
        assert device.fields == {"dooropen": 1}
        assert store.device("door") is device

    def test_remove_device(self, store):
        store.remove_device("chip")
        with pytest.raises(FieldError):
            store.device("chip")

    def test_unknown_device(self, store):
        with pytest.raises(FieldError, match="unknown device 'ghost'"):
            store.get_field("ghost", "x")
        with pytest.raises(FieldError):
            store.set_field("ghost", "x", 1)


class TestReads:
    """Reads across the network."""

    def test_missing(self, store):
        result = store.get_field("chip", "door")
        assert result.is_missing
        assert not result.ambiguous

    def test_found_on_other_device(self, store):
        store.add_device("door", {"Door": 1})
        assert store.get_field("chip", "door").value == 1

    def test_case_insensitive(self, store):
        store.add_device("door", {"door": 1})
        assert store.get_field("chip", "DOOR").value == 1

    def test_agreeing_devices(self, store):
        store.add_device("a", {"level": 5})
        store.add_device("b", {"level": 5})
        result = store.get_field("chip", "level")
        assert result.value == 5
        assert not result.ambiguous

    def test_conflicting_devices(self, store):
        store.add_device("a", {"level": 5})
        store.add_device("b", {"level": 6})
        assert store.get_field("chip", "level").ambiguous

    def test_number_and_string_conflict(self, store):
        store.add_device("a", {"level": 1})
        store.add_device("b", {"level": "1"})
        assert store.get_field("chip", "level").ambiguous

    def test_other_network_invisible(self, store):
        store.add_device("far", {"door": 1}, network="hangar")
        assert store.get_field("chip", "door").is_missing


class TestWrites:
    """Writes across the network."""

    def test_updates_every_exposing_device(self, store):
        store.add_device("a", {"level": 1})
        store.add_device("b", {"level": 2})
        store.set_field("chip", "Level", 9)
        assert store.device("a").fields["level"] == 9
        assert store.device("b").fields["level"] == 9
        assert "level" not in store.device("chip").fields

    def test_creates_on_writer(self, store):
        store.set_field("chip", "memo", "hello")
        assert store.device("chip").fields == {"memo": "hello"}

    def test_other_network_untouched(self, store):
        far = store.add_device("far", {"door": 0}, network="hangar")
        store.set_field("chip", "door", 1)
        assert far.fields["door"] == 0
        assert store.device("chip").fields["door"] == 1
