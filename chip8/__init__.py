"""
A Chip 8 virtual machine. The engine (Machine and CPU) performs no I/O; the
pygame window, keyboard and audio collaborators live in their own modules.
"""
from chip8.cpu import CPU
from chip8.exception import (
    CapacityExceededException,
    Chip8Exception,
    KeypadIndexException,
    MemoryAccessException,
    StackOverflowException,
    StackUnderflowException,
    UnknownOpCodeException,
)
from chip8.machine import Machine

__version__ = '0.1.0'
