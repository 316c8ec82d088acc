#!/usr/bin/env python3
"""
YOLOL VM Demo
=============

Runs the door controller in examples/programs/door.json against an
in-memory world with a button and a door, pressing the button halfway
through.

Usage:
    python examples/vm_demo.py
"""

import logging
from pathlib import Path

from yolol_vm import FieldStore, YololVM, load_program_file


PROGRAMS = Path(__file__).parent / "programs"


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    world = FieldStore()
    world.add_device("chip")
    world.add_device("button", {"Button": 0})
    world.add_device("door", {"Door": 0})

    vm = YololVM("chip", load_program_file(PROGRAMS / "door.json"), fields=world)

    for tick in range(12):
        if tick == 6:
            print("-- button pressed --")
            world.set_field("button", "Button", 1)
        line = vm.line
        vm.step()
        door = world.device("door").fields["door"]
        print(f"tick {tick:2d}  line {line}  door={door}  opened={vm.get_variable('opened')}")

    if vm.errors.error_count():
        print(vm.errors.report())


if __name__ == "__main__":
    main()
