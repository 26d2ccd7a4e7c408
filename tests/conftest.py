import random

import pytest

from chip8.cpu import CPU
from chip8.machine import Machine


@pytest.fixture
def machine():
    return Machine()


@pytest.fixture
def cpu(machine):
    # One timer tick per step keeps the timer arithmetic in the tests simple
    return CPU(machine, clock_speed=60, rng=random.Random(0))
