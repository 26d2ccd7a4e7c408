import logging

import numpy

from chip8.exception import (
    CapacityExceededException,
    KeypadIndexException,
    MemoryAccessException,
    StackOverflowException,
    StackUnderflowException,
)

logger = logging.getLogger(__name__)

# The total amount of memory to allocate for the emulator
MAX_MEMORY = 4096

# Where the program counter should originally point, and where ROMs are loaded
PROGRAM_COUNTER_START = 0x200

# The number of bytes available to a loaded ROM
PROGRAM_CAPACITY = MAX_MEMORY - PROGRAM_COUNTER_START

# The total number of registers in the Chip 8 CPU
NUM_REGISTERS = 0x10

# The register used for carry, borrow, shift and collision results
FLAG_REGISTER = 0xF

# The number of return addresses the stack can hold
STACK_DEPTH = 16

# The number of keys on the hexadecimal keypad
NUM_KEYS = 0x10

# The dimensions of the display in pixels
SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32

# Each font glyph is 5 bytes tall, and the glyphs live at the start of memory
FONT_GLYPH_SIZE = 5
FONT_START = 0x000

# The built-in hexadecimal font, one glyph per digit 0 - F. Each row of a
# glyph uses the high nibble of the byte, so the glyphs are 4 x 5 pixels.
FONT_SET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

# C L A S S E S ###############################################################


class Machine(object):
    """
    The architectural state of a Chip 8 machine. The memory map is:

        0x000 - 0x04F   built-in hexadecimal font
        0x050 - 0x1FF   unused (historically the interpreter itself)
        0x200 - 0xFFF   program ROM and RAM

    Alongside memory the machine holds:

        * 16 x 8-bit general purpose registers (V0 - VF**)
        * 1 x 16-bit index register (I)
        * 1 x 16-bit program counter (PC)
        * a 16 slot call stack and its stack pointer (SP)
        * 1 x 8-bit delay timer (DT)
        * 1 x 8-bit sound timer (ST)
        * 16 keypad latches, written by the host
        * a 64 x 32 monochrome framebuffer

    ** VF is not a general purpose register. Arithmetic, shift and draw
    instructions overwrite it with their carry, borrow, shifted-out bit or
    collision result, so programs must not expect it to survive them.

    The machine has no behaviour of its own beyond storage; all bounds
    checking is done here so that the instructions can stay simple.
    """
    def __init__(self):
        self.registers = {
            'v': bytearray(NUM_REGISTERS),
            'index': 0,
            'sp': 0,
            'pc': PROGRAM_COUNTER_START,
        }
        self.timers = {
            'delay': 0,
            'sound': 0,
        }
        self.memory = bytearray(MAX_MEMORY)
        self.stack = [0] * STACK_DEPTH
        self.keypad = [False] * NUM_KEYS
        self.framebuffer = numpy.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), dtype=bool)

        # Raised when the framebuffer changes; cleared by whoever renders it.
        # Starts raised so the host paints the blank screen once.
        self.redraw = True

        # Raised for a single step when the sound timer runs out
        self.sound = False
        self.reset()

    def __str__(self):
        val = 'PC: {:04X}  I: {:04X}  SP: {:X}\n'.format(
            self.registers['pc'], self.registers['index'], self.registers['sp'])
        val += 'DT: {:02X}  ST: {:02X}\n'.format(
            self.timers['delay'], self.timers['sound'])
        for row in range(0, NUM_REGISTERS, 4):
            val += '  '.join(
                'V{:X}: {:02X}'.format(index, self.registers['v'][index])
                for index in range(row, row + 4))
            val += '\n'
        val += 'Stack: {}\n'.format(
            ' '.join('{:03X}'.format(address)
                     for address in self.stack[:self.registers['sp']]))
        border = '+' + '-' * SCREEN_WIDTH + '+\n'
        val += border
        for row in self.framebuffer:
            val += '|' + ''.join('#' if pixel else ' ' for pixel in row) + '|\n'
        val += border
        return val

    def reset(self):
        """
        Put the machine back into the state it was constructed in: memory
        blanked apart from the font, registers, timers and stack cleared, and
        the program counter pointing at the start of the program region.
        """
        self.registers['v'] = bytearray(NUM_REGISTERS)
        self.registers['index'] = 0
        self.registers['sp'] = 0
        self.registers['pc'] = PROGRAM_COUNTER_START
        self.timers['delay'] = 0
        self.timers['sound'] = 0
        self.memory = bytearray(MAX_MEMORY)
        self.memory[FONT_START:FONT_START + len(FONT_SET)] = FONT_SET
        self.stack = [0] * STACK_DEPTH
        self.keypad = [False] * NUM_KEYS
        self.framebuffer.fill(False)
        self.redraw = True
        self.sound = False

    def load(self, rom):
        """
        Copy a ROM image into memory at the start of the program region. No
        other state is touched, so the ROM should be loaded into a freshly
        constructed (or reset) machine.

        :param rom: the bytes of the ROM image
        :raises CapacityExceededException: if the image does not fit
        """
        if len(rom) > PROGRAM_CAPACITY:
            raise CapacityExceededException(len(rom), PROGRAM_CAPACITY)
        self.memory[PROGRAM_COUNTER_START:PROGRAM_COUNTER_START + len(rom)] = rom
        logger.debug("Loaded %d bytes at %03X", len(rom), PROGRAM_COUNTER_START)

    def set_key(self, key_index, pressed):
        """
        Latch the state of one keypad key.

        :param key_index: the key to set (0x0 - 0xF)
        :param pressed: whether the key is held down
        """
        self.check_key_index(key_index)
        self.keypad[key_index] = bool(pressed)

    def key_pressed(self, key_index):
        self.check_key_index(key_index)
        return self.keypad[key_index]

    @staticmethod
    def check_key_index(key_index):
        if not 0 <= key_index < NUM_KEYS:
            raise KeypadIndexException(key_index)

    def snapshot_framebuffer(self):
        """
        Returns a read-only copy of the framebuffer. The array has shape
        (SCREEN_HEIGHT, SCREEN_WIDTH) and holds True for lit pixels.
        """
        frame = self.framebuffer.copy()
        frame.flags.writeable = False
        return frame

    def clear_framebuffer(self):
        self.framebuffer.fill(False)

    def check_range(self, address, length):
        """
        Make sure a run of bytes lies entirely inside memory.

        :param address: the first address of the run
        :param length: the number of bytes in the run
        :raises MemoryAccessException: naming the first address outside of memory
        """
        if address < 0:
            raise MemoryAccessException(address)
        if address + length > MAX_MEMORY:
            raise MemoryAccessException(max(address, MAX_MEMORY))

    def read_byte(self, address):
        """
        Read one byte of memory.

        :param address: the address to read
        :raises MemoryAccessException: if the address is outside of memory
        """
        if not 0 <= address < MAX_MEMORY:
            raise MemoryAccessException(address)
        return self.memory[address]

    def write_byte(self, address, value):
        """
        Write one byte of memory.

        :param address: the address to write
        :param value: the byte to store
        :raises MemoryAccessException: if the address is outside of memory
        """
        if not 0 <= address < MAX_MEMORY:
            raise MemoryAccessException(address)
        self.memory[address] = value

    def read_word(self, address):
        """
        Read the big-endian 16-bit word starting at the given address.
        """
        return (self.read_byte(address) << 8) | self.read_byte(address + 1)

    def push(self, address):
        """
        Push a return address onto the call stack.

        :param address: the address to save
        :raises StackOverflowException: if every stack slot is in use
        """
        if self.registers['sp'] >= STACK_DEPTH:
            raise StackOverflowException(STACK_DEPTH)
        self.stack[self.registers['sp']] = address
        self.registers['sp'] += 1

    def pop(self):
        """
        Pop the most recent return address off the call stack.

        :raises StackUnderflowException: if the stack is empty
        """
        if self.registers['sp'] == 0:
            raise StackUnderflowException()
        self.registers['sp'] -= 1
        return self.stack[self.registers['sp']]
