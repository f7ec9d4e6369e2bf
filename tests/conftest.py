import random

import pytest

from c8vm.machine import Machine


def program(*words):
    """Assemble instruction words into big-endian program bytes"""
    data = bytearray()
    for word in words:
        data += word.to_bytes(2, "big")
    return bytes(data)


@pytest.fixture
def machine():
    return Machine(rng=random.Random(1234))


@pytest.fixture
def load(machine):
    """Load words at 0x200 and return the machine"""
    def _load(*words):
        machine.load_program(program(*words))
        return machine
    return _load


def run(m, cycles):
    for _ in range(cycles):
        m.execute_cycle()
