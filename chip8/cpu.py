import logging
import random

from chip8.exception import Chip8Exception, UnknownOpCodeException
from chip8.machine import FLAG_REGISTER, FONT_GLYPH_SIZE, FONT_START, NUM_KEYS, \
    SCREEN_HEIGHT, SCREEN_WIDTH
from chip8.masks import BYTE_MASK, FAMILY_MASK, HIGH_BIT_MASK, LOW_BIT_MASK, \
    N_MASK, NN_MASK, NNN_MASK, WORD_MASK, X_MASK, Y_MASK
from chip8.timers import DEFAULT_CLOCK_SPEED, TimerClock

logger = logging.getLogger(__name__)

# The width of every sprite row in pixels
SPRITE_WIDTH = 8

# C L A S S E S ###############################################################


class CPU(object):
    """
    A class to emulate a Chip 8 CPU. There are several good resources out on
    the web that describe the internals of the Chip 8 CPU. For example:

        http://devernay.free.fr/hacks/chip8/C8TECH10.HTM
        http://michael.toren.net/mirrors/chip8/chip8def.htm

    The CPU owns a Machine (see chip8.machine) and is the only thing that
    mutates it while a step runs. One call to step will:

        1. fetch the big-endian operand at the program counter
        2. decode it on its most significant nibble (and, for the 0, 8, E
           and F families, on a second field)
        3. execute it, advancing the program counter by 2 unless the
           instruction jumps, calls, returns, skips or waits
        4. count down the delay and sound timers by however many 60 Hz ticks
           the instruction was worth

    The CPU never touches a screen, speaker or keyboard. The host reads the
    machine's redraw and sound flags after each step, and writes the keypad
    latches before the next one.
    """
    def __init__(self, machine, clock_speed=DEFAULT_CLOCK_SPEED, rng=None):
        """
        :param machine: the Machine to execute against
        :param clock_speed: the number of instructions per emulated second,
            which sets how often the 60 Hz timers tick
        :param rng: a random.Random used by the RAND instruction; pass a
            seeded one for reproducible runs
        """
        self.cpu_machine = machine
        self.cpu_clock = TimerClock(clock_speed)
        self.cpu_random = rng if rng is not None else random.Random()
        self.cpu_operand = 0
        self.cpu_operand_address = machine.registers['pc']
        self.cpu_waiting_for_key = False

        # The operation_lookup table is executed according to the most
        # significant nibble of the operand (e.g. operand 8nnn would call
        # self.cpu_execute_logical_instruction)
        self.cpu_operation_lookup = {
            0x0: self.cpu_clear_return,                  # see subfunctions below
            0x1: self.cpu_jump_to_address,               # 1nnn - JUMP nnn
            0x2: self.cpu_jump_to_subroutine,            # 2nnn - CALL nnn
            0x3: self.cpu_skip_if_reg_equal_val,         # 3snn - SKE  Vs, nn
            0x4: self.cpu_skip_if_reg_not_equal_val,     # 4snn - SKNE Vs, nn
            0x5: self.cpu_skip_if_reg_equal_reg,         # 5st0 - SKE  Vs, Vt
            0x6: self.cpu_move_value_to_reg,             # 6snn - LOAD Vs, nn
            0x7: self.cpu_add_value_to_reg,              # 7snn - ADD  Vs, nn
            0x8: self.cpu_execute_logical_instruction,   # see subfunctions below
            0x9: self.cpu_skip_if_reg_not_equal_reg,     # 9st0 - SKNE Vs, Vt
            0xA: self.cpu_load_index_reg_with_value,     # Annn - LOAD I, nnn
            0xB: self.cpu_jump_to_value_plus_reg,        # Bnnn - JUMP nnn + V0
            0xC: self.cpu_generate_random_number,        # Ctnn - RAND Vt, nn
            0xD: self.cpu_draw_sprite,                   # Dstn - DRAW Vs, Vt, n
            0xE: self.cpu_keyboard_routines,             # see subfunctions below
            0xF: self.cpu_misc_routines,                 # see subfunctions below
        }

        # Operands starting with 0 are matched on the whole operand
        self.cpu_clear_return_lookup = {
            0x00E0: self.cpu_clear_screen,               # 00E0 - CLS
            0x00EE: self.cpu_return_from_subroutine,     # 00EE - RTS
        }

        # This set of operations is invoked when the operand loaded into the
        # CPU starts with 8 (e.g. operand 8st0 would call
        # self.cpu_move_reg_into_reg)
        self.cpu_logical_operation_lookup = {
            0x0: self.cpu_move_reg_into_reg,             # 8st0 - LOAD Vs, Vt
            0x1: self.cpu_logical_or,                    # 8st1 - OR   Vs, Vt
            0x2: self.cpu_logical_and,                   # 8st2 - AND  Vs, Vt
            0x3: self.cpu_exclusive_or,                  # 8st3 - XOR  Vs, Vt
            0x4: self.cpu_add_reg_to_reg,                # 8st4 - ADD  Vs, Vt
            0x5: self.cpu_subtract_reg_from_reg,         # 8st5 - SUB  Vs, Vt
            0x6: self.cpu_right_shift_reg,               # 8s06 - SHR  Vs
            0x7: self.cpu_subtract_reg_from_reg1,        # 8st7 - SUBN Vs, Vt
            0xE: self.cpu_left_shift_reg,                # 8s0E - SHL  Vs
        }

        # Operands starting with E are matched on their low byte
        self.cpu_keyboard_routine_lookup = {
            0x9E: self.cpu_skip_if_key_pressed,          # Es9E - SKPR Vs
            0xA1: self.cpu_skip_if_key_not_pressed,      # EsA1 - SKUP Vs
        }

        # This set of operations is invoked when the operand loaded into the
        # CPU starts with F (e.g. operand Ft07 would call
        # self.cpu_move_delay_timer_into_reg)
        self.cpu_misc_routine_lookup = {
            0x07: self.cpu_move_delay_timer_into_reg,    # Ft07 - LOAD Vt, DELAY
            0x0A: self.cpu_wait_for_keypress,            # Ft0A - KEYD Vt
            0x15: self.cpu_move_reg_into_delay_timer,    # Fs15 - LOAD DELAY, Vs
            0x18: self.cpu_move_reg_into_sound_timer,    # Fs18 - LOAD SOUND, Vs
            0x1E: self.cpu_add_reg_into_index,           # Fs1E - ADD  I, Vs
            0x29: self.cpu_load_index_with_reg_sprite,   # Fs29 - LOAD I, Vs
            0x33: self.cpu_store_bcd_in_memory,          # Fs33 - BCD
            0x55: self.cpu_store_regs_in_memory,         # Fs55 - STOR [I], Vs
            0x65: self.cpu_read_regs_from_memory,        # Fs65 - LOAD Vs, [I]
        }

    def __str__(self):
        val = 'OP: {:04X} @ {:03X}\n'.format(self.cpu_operand, self.cpu_operand_address)
        return val + str(self.cpu_machine)

    @property
    def machine(self):
        return self.cpu_machine

    @property
    def waiting_for_key(self):
        """
        True while a KEYD instruction is polling for a key press. While set,
        every step re-executes the same instruction and nothing else runs.
        """
        return self.cpu_waiting_for_key

    def step(self):
        """
        Run one full cycle: execute the next instruction, then update the
        timers.

        :return: the operand executed
        :raises Chip8Exception: on any fault; the program counter is left
            pointing at the faulting instruction
        """
        cpu_operand = self.cpu_execute_instruction()
        self.cpu_update_timers()
        return cpu_operand

    def cpu_execute_instruction(self):
        """
        Fetch, decode and execute the instruction pointed to by the program
        counter. The program counter is moved past the operand before the
        instruction runs, so instructions that skip just add another 2.

        :return: returns the operand executed
        """
        registers = self.cpu_machine.registers
        cpu_address = registers['pc']
        self.cpu_operand = self.cpu_machine.read_word(cpu_address)
        self.cpu_operand_address = cpu_address
        registers['pc'] = cpu_address + 2

        cpu_operation = (self.cpu_operand & FAMILY_MASK) >> 12
        try:
            self.cpu_operation_lookup[cpu_operation]()
        except Chip8Exception:
            registers['pc'] = cpu_address
            raise
        return self.cpu_operand

    def cpu_dispatch(self, lookup, key):
        """
        Run the routine registered under key in the given lookup table.

        :raises UnknownOpCodeException: if nothing is registered
        """
        try:
            cpu_routine = lookup[key]
        except KeyError:
            raise UnknownOpCodeException(self.cpu_operand, self.cpu_operand_address)
        cpu_routine()

    def cpu_update_timers(self):
        """
        Count down the delay and sound timers once for every 60 Hz tick that
        has elapsed since the last instruction. The machine's sound flag is
        raised only when the sound timer reaches 0 during this update.
        """
        timers = self.cpu_machine.timers
        self.cpu_machine.sound = False
        for _ in range(self.cpu_clock.advance()):
            if timers['delay'] > 0:
                timers['delay'] -= 1

            if timers['sound'] > 0:
                if timers['sound'] == 1:
                    self.cpu_machine.sound = True
                timers['sound'] -= 1

    def cpu_x(self):
        return (self.cpu_operand & X_MASK) >> 8

    def cpu_y(self):
        return (self.cpu_operand & Y_MASK) >> 4

    def cpu_execute_logical_instruction(self):
        """
        Execute the logical instruction based upon the low nibble of the
        current operand.
        """
        self.cpu_dispatch(self.cpu_logical_operation_lookup, self.cpu_operand & N_MASK)

    def cpu_keyboard_routines(self):
        """
        Run the specified keyboard routine based upon the operand. These
        operations are:

            Es9E - SKPR Vs
            EsA1 - SKUP Vs
        """
        self.cpu_dispatch(self.cpu_keyboard_routine_lookup, self.cpu_operand & NN_MASK)

    def cpu_misc_routines(self):
        """
        Will execute one of the routines specified in misc_routines.
        """
        self.cpu_dispatch(self.cpu_misc_routine_lookup, self.cpu_operand & NN_MASK)

    def cpu_clear_return(self):
        """
        Opcodes starting with a 0 are one of the following instructions:

            00E0 - Clear the display
            00EE - Return from subroutine

        Any other 0nnn operand (the machine code calls of the original
        interpreter) cannot be executed and is reported as unknown.
        """
        self.cpu_dispatch(self.cpu_clear_return_lookup, self.cpu_operand)

    def cpu_clear_screen(self):
        """
        00E0 - CLS

        Turn off every pixel and ask the host to redraw.
        """
        self.cpu_machine.clear_framebuffer()
        self.cpu_machine.redraw = True

    def cpu_return_from_subroutine(self):
        """
        00EE - RTS

        Pop the address of the CALL instruction that entered the subroutine
        off the stack, and continue with the instruction after it.
        """
        self.cpu_machine.registers['pc'] = self.cpu_machine.pop() + 2

    def cpu_jump_to_address(self):
        """
        1nnn - JUMP nnn

        Jump to address. The address to jump to is calculated using the bits
        taken from the operand as follows:

           Bits:  15-12    11-8      7-4      3-0
                  unused  address  address  address
        """
        self.cpu_machine.registers['pc'] = self.cpu_operand & NNN_MASK

    def cpu_jump_to_subroutine(self):
        """
        2nnn - CALL nnn

        Jump to subroutine. The address of this CALL instruction is saved on
        the stack; the subroutine to jump to is taken from the operand as
        follows:

           Bits:  15-12    11-8      7-4      3-0
                  unused  address  address  address
        """
        self.cpu_machine.push(self.cpu_operand_address)
        self.cpu_machine.registers['pc'] = self.cpu_operand & NNN_MASK

    def cpu_skip_if_reg_equal_val(self):
        """
        3snn - SKE Vs, nn

        Skip if register contents equal to constant value. The calculation for
        the register and constant is performed on the operand:

           Bits:  15-12     11-8      7-4       3-0
                  unused   source  constant  constant

        The program counter is updated to skip the next instruction by
        advancing it by 2 bytes.
        """
        cpu_source = self.cpu_x()
        if self.cpu_machine.registers['v'][cpu_source] == (self.cpu_operand & NN_MASK):
            self.cpu_machine.registers['pc'] += 2

    def cpu_skip_if_reg_not_equal_val(self):
        """
        4snn - SKNE Vs, nn

        Skip if register contents not equal to constant value. The calculation
        for the register and constant is performed on the operand:

           Bits:  15-12     11-8      7-4       3-0
                  unused   source  constant  constant
        """
        cpu_source = self.cpu_x()
        if self.cpu_machine.registers['v'][cpu_source] != (self.cpu_operand & NN_MASK):
            self.cpu_machine.registers['pc'] += 2

    def cpu_skip_if_reg_equal_reg(self):
        """
        5st0 - SKE Vs, Vt

        Skip if source register is equal to target register. The calculation
        for the registers to use is performed on the operand:

           Bits:  15-12     11-8      7-4       3-0
                  unused   source    target      0
        """
        if self.cpu_operand & N_MASK:
            raise UnknownOpCodeException(self.cpu_operand, self.cpu_operand_address)
        registers = self.cpu_machine.registers
        if registers['v'][self.cpu_x()] == registers['v'][self.cpu_y()]:
            registers['pc'] += 2

    def cpu_move_value_to_reg(self):
        """
        6snn - LOAD Vs, nn

        Move the constant value into the specified register:

           Bits:  15-12     11-8      7-4       3-0
                  unused   target    value     value
        """
        self.cpu_machine.registers['v'][self.cpu_x()] = self.cpu_operand & NN_MASK

    def cpu_add_value_to_reg(self):
        """
        7snn - ADD Vs, nn

        Add the constant value to the specified register, wrapping at 256.
        VF is not touched.
        """
        cpu_target = self.cpu_x()
        temp = self.cpu_machine.registers['v'][cpu_target] + (self.cpu_operand & NN_MASK)
        self.cpu_machine.registers['v'][cpu_target] = temp & BYTE_MASK

    def cpu_move_reg_into_reg(self):
        """
        8st0 - LOAD Vs, Vt

        Move the value of the source register into the value of the target
        register. The calculation for the registers is performed on the
        operand:

           Bits:  15-12     11-8      7-4       3-0
                  unused   target    source      0
        """
        v = self.cpu_machine.registers['v']
        v[self.cpu_x()] = v[self.cpu_y()]

    def cpu_logical_or(self):
        """
        8st1 - OR   Vs, Vt
        """
        v = self.cpu_machine.registers['v']
        v[self.cpu_x()] |= v[self.cpu_y()]

    def cpu_logical_and(self):
        """
        8st2 - AND  Vs, Vt
        """
        v = self.cpu_machine.registers['v']
        v[self.cpu_x()] &= v[self.cpu_y()]

    def cpu_exclusive_or(self):
        """
        8st3 - XOR  Vs, Vt
        """
        v = self.cpu_machine.registers['v']
        v[self.cpu_x()] ^= v[self.cpu_y()]

    def cpu_add_reg_to_reg(self):
        """
        8st4 - ADD  Vs, Vt

        Add the value in the source register to the value in the target
        register, and store the result in the target register. The register
        calculations are as follows:

           Bits:  15-12     11-8      7-4       3-0
                  unused   target    source      4

        If a carry is generated, set a carry flag in register VF. The flag is
        written before the sum is computed, so when VF is the target it ends
        up holding the new flag plus the source register, wrapped at 256.
        """
        v = self.cpu_machine.registers['v']
        cpu_target = self.cpu_x()
        cpu_source = self.cpu_y()
        v[FLAG_REGISTER] = 1 if v[cpu_target] + v[cpu_source] > BYTE_MASK else 0
        v[cpu_target] = (v[cpu_target] + v[cpu_source]) & BYTE_MASK

    def cpu_subtract_reg_from_reg(self):
        """
        8st5 - SUB  Vs, Vt

        Subtract the value in the source register from the value in the
        target register, and store the result in the target register:

           Bits:  15-12     11-8      7-4       3-0
                  unused   target    source      5

        VF is 0 when a borrow happens (source greater than target), else 1.
        """
        v = self.cpu_machine.registers['v']
        cpu_target = self.cpu_x()
        cpu_source = self.cpu_y()
        v[FLAG_REGISTER] = 0 if v[cpu_source] > v[cpu_target] else 1
        v[cpu_target] = (v[cpu_target] - v[cpu_source]) & BYTE_MASK

    def cpu_right_shift_reg(self):
        """
        8s06 - SHR  Vs

        Shift the bits in the specified register 1 bit to the right. Bit
        0 will be shifted into register VF. The y field is ignored.
        """
        v = self.cpu_machine.registers['v']
        cpu_source = self.cpu_x()
        v[FLAG_REGISTER] = v[cpu_source] & LOW_BIT_MASK
        v[cpu_source] = v[cpu_source] >> 1

    def cpu_subtract_reg_from_reg1(self):
        """
        8st7 - SUBN Vs, Vt

        Subtract the value in the target register from the value in the
        source register, and store the result in the target register:

           Bits:  15-12     11-8      7-4       3-0
                  unused   target    source      7

        VF is 0 when a borrow happens (target greater than source), else 1.
        """
        v = self.cpu_machine.registers['v']
        cpu_target = self.cpu_x()
        cpu_source = self.cpu_y()
        v[FLAG_REGISTER] = 0 if v[cpu_target] > v[cpu_source] else 1
        v[cpu_target] = (v[cpu_source] - v[cpu_target]) & BYTE_MASK

    def cpu_left_shift_reg(self):
        """
        8s0E - SHL  Vs

        Shift the bits in the specified register 1 bit to the left, dropping
        anything past bit 7. Bit 7 will be shifted into register VF.
        """
        v = self.cpu_machine.registers['v']
        cpu_source = self.cpu_x()
        v[FLAG_REGISTER] = (v[cpu_source] & HIGH_BIT_MASK) >> 7
        v[cpu_source] = (v[cpu_source] << 1) & BYTE_MASK

    def cpu_skip_if_reg_not_equal_reg(self):
        """
        9st0 - SKNE Vs, Vt

        Skip if source register is not equal to target register:

           Bits:  15-12     11-8      7-4       3-0
                  unused   source    target      0
        """
        if self.cpu_operand & N_MASK:
            raise UnknownOpCodeException(self.cpu_operand, self.cpu_operand_address)
        registers = self.cpu_machine.registers
        if registers['v'][self.cpu_x()] != registers['v'][self.cpu_y()]:
            registers['pc'] += 2

    def cpu_load_index_reg_with_value(self):
        """
        Annn - LOAD I, nnn

        Load index register with constant value. The calculation for the
        constant value is performed on the operand:

           Bits:  15-12     11-8      7-4       3-0
                  unused   constant  constant  constant
        """
        self.cpu_machine.registers['index'] = self.cpu_operand & NNN_MASK

    def cpu_jump_to_value_plus_reg(self):
        """
        Bnnn - JUMP nnn + V0

        Load the program counter with the address in the operand plus the
        value of register V0.
        """
        registers = self.cpu_machine.registers
        registers['pc'] = (self.cpu_operand & NNN_MASK) + registers['v'][0]

    def cpu_generate_random_number(self):
        """
        Ctnn - RAND Vt, nn

        A random number between 0 and 255 is generated. The contents of it are
        then ANDed with the constant value passed in the operand. The result is
        stored in the target register. The register and constant values are
        calculated as follows:

           Bits:  15-12     11-8      7-4       3-0
                  unused    target    value    value
        """
        cpu_value = self.cpu_operand & NN_MASK
        self.cpu_machine.registers['v'][self.cpu_x()] = \
            cpu_value & self.cpu_random.randint(0, 255)

    def cpu_draw_sprite(self):
        """
        Dxyn - DRAW x, y, num_bytes

        Draws the sprite pointed to in the index register at the specified
        x and y coordinates. Drawing is done via an XOR routine, meaning that
        if the target pixel is already turned on, and a pixel is set to be
        turned on at that same location via the draw, then the pixel is turned
        off. Each sprite is 8 bits (1 byte) wide. The num_bytes parameter sets
        how tall the sprite is. Consecutive bytes in the memory pointed to by
        the index register make up the rows of the sprite, most significant
        bit on the left. For example, assume that the index register pointed
        to the following 7 bytes:

                       bit 7 6 5 4 3 2 1 0

           byte 0          0 1 1 1 1 1 0 0
           byte 1          0 1 0 0 0 0 0 0
           byte 2          0 1 0 0 0 0 0 0
           byte 3          0 1 1 1 1 1 0 0
           byte 4          0 1 0 0 0 0 0 0
           byte 5          0 1 0 0 0 0 0 0
           byte 6          0 1 1 1 1 1 0 0

        This would draw a character on the screen that looks like an 'E'.
        Pixels that fall off the right or bottom edge of the screen are
        clipped, not wrapped. If drawing turns any lit pixel off, VF is set
        to 1, otherwise it is set to 0.

           Bits:  15-12     11-8      7-4       3-0
                  unused    x_source  y_source  num_bytes
        """
        machine = self.cpu_machine
        v = machine.registers['v']
        cpu_x_pos = v[self.cpu_x()]
        cpu_y_pos = v[self.cpu_y()]
        cpu_num_bytes = self.cpu_operand & N_MASK
        cpu_index = machine.registers['index']

        cpu_rows = [machine.read_byte(cpu_index + cpu_y_index)
                    for cpu_y_index in range(cpu_num_bytes)]
        cpu_collision = 0

        for cpu_y_index, cpu_color_byte in enumerate(cpu_rows):
            cpu_y_coord = cpu_y_pos + cpu_y_index
            if cpu_y_coord >= SCREEN_HEIGHT:
                break

            for cpu_x_index in range(SPRITE_WIDTH):
                cpu_x_coord = cpu_x_pos + cpu_x_index
                if cpu_x_coord >= SCREEN_WIDTH:
                    break

                if not cpu_color_byte & (HIGH_BIT_MASK >> cpu_x_index):
                    continue

                if machine.framebuffer[cpu_y_coord, cpu_x_coord]:
                    cpu_collision = 1
                    machine.framebuffer[cpu_y_coord, cpu_x_coord] = False
                else:
                    machine.framebuffer[cpu_y_coord, cpu_x_coord] = True

        v[FLAG_REGISTER] = cpu_collision
        machine.redraw = True

    def cpu_skip_if_key_pressed(self):
        """
        Es9E - SKPR Vs

        Check to see if the key specified in the source register is pressed,
        and if it is, skip the next instruction.

           Bits:  15-12    11-8      7-4      3-0
                  unused   source     9        E
        """
        cpu_key_to_check = self.cpu_machine.registers['v'][self.cpu_x()]
        if self.cpu_machine.key_pressed(cpu_key_to_check):
            self.cpu_machine.registers['pc'] += 2

    def cpu_skip_if_key_not_pressed(self):
        """
        EsA1 - SKUP Vs

        Skip the next instruction if the key in the source register is NOT
        pressed.
        """
        cpu_key_to_check = self.cpu_machine.registers['v'][self.cpu_x()]
        if not self.cpu_machine.key_pressed(cpu_key_to_check):
            self.cpu_machine.registers['pc'] += 2

    def cpu_move_delay_timer_into_reg(self):
        """
        Ft07 - LOAD Vt, DELAY

        Move the value of the delay timer into the target register. The
        register calculation is as follows:

           Bits:  15-12     11-8      7-4       3-0
                  unused    target     0         7
        """
        self.cpu_machine.registers['v'][self.cpu_x()] = self.cpu_machine.timers['delay']

    def cpu_wait_for_keypress(self):
        """
        Ft0A - KEYD Vt

        Stop execution until a key is pressed. Move the value of the lowest
        numbered key pressed into the specified register:

           Bits:  15-12     11-8      7-4       3-0
                  unused    target     0         A

        The CPU does not block here. If no key is down, the program counter
        is wound back onto this instruction so the next step polls again,
        which leaves the host free to handle its own events in between.
        """
        machine = self.cpu_machine
        for cpu_keyval in range(NUM_KEYS):
            if machine.keypad[cpu_keyval]:
                machine.registers['v'][self.cpu_x()] = cpu_keyval
                self.cpu_waiting_for_key = False
                return

        if not self.cpu_waiting_for_key:
            logger.debug("Waiting for a key press at %03X", self.cpu_operand_address)
        self.cpu_waiting_for_key = True
        machine.registers['pc'] = self.cpu_operand_address

    def cpu_move_reg_into_delay_timer(self):
        """
        Fs15 - LOAD DELAY, Vs

        Move the value stored in the specified source register into the delay
        timer.
        """
        self.cpu_machine.timers['delay'] = self.cpu_machine.registers['v'][self.cpu_x()]

    def cpu_move_reg_into_sound_timer(self):
        """
        Fs18 - LOAD SOUND, Vs

        Move the value stored in the specified source register into the sound
        timer.
        """
        self.cpu_machine.timers['sound'] = self.cpu_machine.registers['v'][self.cpu_x()]

    def cpu_load_index_with_reg_sprite(self):
        """
        Fs29 - LOAD I, Vs

        Load the index with the address of the font glyph for the digit in
        the source register. All glyphs are 5 bytes long, so the location of
        the glyph is the register value multiplied by 5. Values above 0xF are
        not masked and point past the font.

           Bits:  15-12     11-8      7-4       3-0
                  unused    source     2         9
        """
        cpu_digit = self.cpu_machine.registers['v'][self.cpu_x()]
        self.cpu_machine.registers['index'] = FONT_START + cpu_digit * FONT_GLYPH_SIZE

    def cpu_add_reg_into_index(self):
        """
        Fs1E - ADD  I, Vs

        Add the value of the register into the index register value. The
        index register is 16 bits wide and no flag is set.
        """
        registers = self.cpu_machine.registers
        registers['index'] = (registers['index'] + registers['v'][self.cpu_x()]) & WORD_MASK

    def cpu_store_bcd_in_memory(self):
        """
        Fs33 - BCD

        Take the value stored in source and place the digits in the following
        locations:

            hundreds   -> memory[index]
            tens       -> memory[index + 1]
            ones       -> memory[index + 2]

        For example, if the value is 123, then the following values will be
        placed at the specified locations:

             1 -> memory[index]
             2 -> memory[index + 1]
             3 -> memory[index + 2]
        """
        machine = self.cpu_machine
        cpu_index = machine.registers['index']
        cpu_bcd_value = '{:03d}'.format(machine.registers['v'][self.cpu_x()])
        machine.check_range(cpu_index, len(cpu_bcd_value))
        for cpu_offset, cpu_digit in enumerate(cpu_bcd_value):
            machine.write_byte(cpu_index + cpu_offset, int(cpu_digit))

    def cpu_store_regs_in_memory(self):
        """
        Fs55 - STOR [I], Vs

        Store the V registers V0 through Vs (inclusive) in the memory pointed
        to by the index register. The index register itself is unchanged.

           Bits:  15-12     11-8      7-4       3-0
                  unused    source     5         5

        For example, to store all of the V registers, the source register
        would be 'F'.
        """
        machine = self.cpu_machine
        cpu_index = machine.registers['index']
        machine.check_range(cpu_index, self.cpu_x() + 1)
        for cpu_counter in range(self.cpu_x() + 1):
            machine.write_byte(cpu_index + cpu_counter, machine.registers['v'][cpu_counter])

    def cpu_read_regs_from_memory(self):
        """
        Fs65 - LOAD Vs, [I]

        Read the V registers V0 through Vs (inclusive) from the memory pointed
        to by the index register. The index register itself is unchanged.
        """
        machine = self.cpu_machine
        cpu_index = machine.registers['index']
        machine.check_range(cpu_index, self.cpu_x() + 1)
        for cpu_counter in range(self.cpu_x() + 1):
            machine.registers['v'][cpu_counter] = machine.read_byte(cpu_index + cpu_counter)
