class Chip8Exception(Exception):
    """
    Base class for every fault raised by the Chip 8 machine. A fault ends
    execution of the running program; the host decides what to do next.
    """


class UnknownOpCodeException(Chip8Exception):
    """
    A class to raise unknown op code exceptions.
    """
    def __init__(self, op_code, program_counter):
        Chip8Exception.__init__(
            self, "Unknown op-code: {:04X} at {:03X}".format(op_code, program_counter))
        self.op_code = op_code
        self.program_counter = program_counter


class StackOverflowException(Chip8Exception):
    """
    Raised when a subroutine call is made with all stack slots in use.
    """
    def __init__(self, depth):
        Chip8Exception.__init__(
            self, "Stack overflow: more than {} nested calls".format(depth))
        self.depth = depth


class StackUnderflowException(Chip8Exception):
    """
    Raised when returning from a subroutine with an empty stack.
    """
    def __init__(self):
        Chip8Exception.__init__(self, "Stack underflow: return with an empty stack")


class MemoryAccessException(Chip8Exception):
    """
    Raised when an instruction touches an address outside of memory.
    """
    def __init__(self, address):
        Chip8Exception.__init__(
            self, "Memory access out of range: {:X}".format(address))
        self.address = address


class KeypadIndexException(Chip8Exception):
    """
    Raised when a keypad latch outside of 0x0 - 0xF is addressed.
    """
    def __init__(self, key_index):
        Chip8Exception.__init__(
            self, "Invalid keypad index: {:X}".format(key_index))
        self.key_index = key_index


class CapacityExceededException(Chip8Exception):
    """
    Raised when a ROM image does not fit in the program region of memory.
    """
    def __init__(self, rom_size, capacity):
        Chip8Exception.__init__(
            self, "ROM of {} bytes exceeds the {} bytes available".format(
                rom_size, capacity))
        self.rom_size = rom_size
        self.capacity = capacity
