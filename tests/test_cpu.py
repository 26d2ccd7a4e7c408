import random

import pytest

from chip8.cpu import CPU
from chip8.exception import (
    KeypadIndexException,
    MemoryAccessException,
    StackOverflowException,
    StackUnderflowException,
    UnknownOpCodeException,
)
from chip8.machine import Machine, STACK_DEPTH


def v(machine):
    return machine.registers['v']


def pc(machine):
    return machine.registers['pc']


def test_op_00e0(cpu, machine):
    machine.load([0x00, 0xE0])
    machine.framebuffer[0, 1] = True
    machine.redraw = False
    assert pc(machine) == 512
    cpu.step()
    assert pc(machine) == 514
    assert not machine.framebuffer.any()
    assert machine.redraw


def test_op_00ee(cpu, machine):
    machine.load([0x00, 0xEE])
    machine.stack[0] = 0x42
    machine.registers['sp'] = 1
    cpu.step()
    assert pc(machine) == 0x44
    assert machine.registers['sp'] == 0


def test_op_00ee_empty_stack(cpu, machine):
    machine.load([0x00, 0xEE])
    with pytest.raises(StackUnderflowException):
        cpu.step()
    assert pc(machine) == 512
    assert machine.registers['sp'] == 0


def test_op_1nnn(cpu, machine):
    machine.load([0x16, 0x66])
    cpu.step()
    assert pc(machine) == 0x666


def test_op_2nnn(cpu, machine):
    machine.load([0x26, 0x66])
    cpu.step()
    assert pc(machine) == 0x666
    assert machine.stack[0] == 512
    assert machine.registers['sp'] == 1


def test_call_and_return(cpu, machine):
    # 200: CALL 206, 202: LOAD V1, 07, 204: JUMP 204, 206: RTS
    machine.load([0x22, 0x06, 0x61, 0x07, 0x12, 0x04, 0x00, 0xEE])
    cpu.step()
    assert pc(machine) == 0x206
    cpu.step()
    assert pc(machine) == 0x202
    assert machine.registers['sp'] == 0
    cpu.step()
    assert v(machine)[1] == 0x07


def test_op_2nnn_stack_overflow(cpu, machine):
    # CALL 200 forever
    machine.load([0x22, 0x00])
    for _ in range(STACK_DEPTH):
        cpu.step()
    assert machine.registers['sp'] == STACK_DEPTH
    with pytest.raises(StackOverflowException):
        cpu.step()
    assert machine.registers['sp'] == STACK_DEPTH
    assert pc(machine) == 512


def test_op_3xnn(cpu, machine):
    machine.load([0x31, 0x66, 0x31, 0x67])
    v(machine)[1] = 0x67
    cpu.step()
    assert pc(machine) == 514
    cpu.step()
    assert pc(machine) == 518


def test_op_4xnn(cpu, machine):
    machine.load([0x41, 0x66, 0x41, 0x67])
    v(machine)[1] = 0x66
    cpu.step()
    assert pc(machine) == 514
    cpu.step()
    assert pc(machine) == 518


def test_op_5xy0(cpu, machine):
    machine.load([0x51, 0x20, 0x51, 0x30])
    v(machine)[1] = 0x66
    v(machine)[2] = 0x22
    v(machine)[3] = 0x66
    cpu.step()
    assert pc(machine) == 514
    cpu.step()
    assert pc(machine) == 518


def test_op_6xnn(cpu, machine):
    machine.load([0x6A, 0x2F])
    cpu.step()
    assert v(machine)[0xA] == 0x2F
    assert pc(machine) == 514


def test_op_7xnn(cpu, machine):
    machine.load([0x7A, 0x2F])
    v(machine)[0xA] = 0xB
    cpu.step()
    assert v(machine)[0xA] == 0x2F + 0xB
    assert pc(machine) == 514


def test_op_7xnn_wraps_without_flag(cpu, machine):
    machine.load([0x7A, 0x02])
    v(machine)[0xA] = 0xFF
    v(machine)[0xF] = 5
    cpu.step()
    assert v(machine)[0xA] == 0x01
    assert v(machine)[0xF] == 5


@pytest.mark.parametrize('low_nibble, expected', [
    (0x0, 0xC),
    (0x1, 0xB | 0xC),
    (0x2, 0xB & 0xC),
    (0x3, 0xB ^ 0xC),
])
def test_op_8xy0_to_8xy3(cpu, machine, low_nibble, expected):
    machine.load([0x8A, 0x20 | low_nibble])
    v(machine)[0xA] = 0xB
    v(machine)[0x2] = 0xC
    cpu.step()
    assert v(machine)[0xA] == expected
    assert v(machine)[0x2] == 0xC
    assert pc(machine) == 514


def test_op_8xy4(cpu, machine):
    machine.load([0x8A, 0xB4, 0x8B, 0xC4])
    v(machine)[0xA] = 0x00
    v(machine)[0xB] = 0xFF
    v(machine)[0xC] = 0x01

    cpu.step()
    assert v(machine)[0xA] == 0xFF
    assert v(machine)[0xF] == 0

    cpu.step()
    assert v(machine)[0xB] == 0x00
    assert v(machine)[0xC] == 0x01
    assert v(machine)[0xF] == 1


def test_op_8xy4_into_flag_register(cpu, machine):
    machine.load([0x8F, 0x14])
    v(machine)[0xF] = 0x10
    v(machine)[0x1] = 0x20
    cpu.step()
    assert v(machine)[0xF] == 0x20


def test_op_8xy5(cpu, machine):
    machine.load([0x8A, 0xB5, 0x8A, 0xB5])
    v(machine)[0xA] = 0x01
    v(machine)[0xB] = 0x02

    cpu.step()
    assert v(machine)[0xA] == 0xFF
    assert v(machine)[0xB] == 0x02
    assert v(machine)[0xF] == 0

    v(machine)[0xA] = 0x02
    v(machine)[0xB] = 0x01
    cpu.step()
    assert v(machine)[0xA] == 0x01
    assert v(machine)[0xF] == 1


def test_op_8xy5_equal_values_do_not_borrow(cpu, machine):
    machine.load([0x8A, 0xB5])
    v(machine)[0xA] = 0x33
    v(machine)[0xB] = 0x33
    cpu.step()
    assert v(machine)[0xA] == 0
    assert v(machine)[0xF] == 1


def test_op_8x06(cpu, machine):
    machine.load([0x81, 0x06])
    v(machine)[0x1] = 0b011
    cpu.step()
    assert v(machine)[0x1] == 0b01
    assert v(machine)[0xF] == 1


def test_op_8xy7(cpu, machine):
    machine.load([0x8A, 0xB7, 0x8A, 0xB7])
    v(machine)[0xA] = 0x01
    v(machine)[0xB] = 0x02

    cpu.step()
    assert v(machine)[0xA] == 0x01
    assert v(machine)[0xB] == 0x02
    assert v(machine)[0xF] == 1

    v(machine)[0xA] = 0x02
    v(machine)[0xB] = 0x01
    cpu.step()
    assert v(machine)[0xA] == 0xFF
    assert v(machine)[0xB] == 0x01
    assert v(machine)[0xF] == 0


def test_op_8x0e(cpu, machine):
    machine.load([0x81, 0x0E])
    v(machine)[0x1] = 0x81
    cpu.step()
    assert v(machine)[0x1] == 0x02
    assert v(machine)[0xF] == 1


def test_op_9xy0(cpu, machine):
    machine.load([0x91, 0x20, 0x91, 0x30])
    v(machine)[0x1] = 0x81
    v(machine)[0x2] = 0x81
    v(machine)[0x3] = 0x82
    cpu.step()
    assert pc(machine) == 514
    cpu.step()
    assert pc(machine) == 518


def test_op_annn(cpu, machine):
    machine.load([0xA6, 0x66])
    cpu.step()
    assert machine.registers['index'] == 0x666
    assert pc(machine) == 514


def test_op_bnnn(cpu, machine):
    machine.load([0xB6, 0x66])
    v(machine)[0] = 0x5
    cpu.step()
    assert machine.registers['index'] == 0
    assert pc(machine) == 0x666 + 0x5


def test_op_cxnn_masks_random_byte(cpu, machine):
    machine.load([0xC1, 0x0F] * 20)
    for _ in range(20):
        cpu.step()
        assert v(machine)[1] & 0xF0 == 0


def test_op_cxnn_is_reproducible_with_a_seed():
    values = []
    for _ in range(2):
        machine = Machine()
        machine.load([0xC1, 0xFF])
        CPU(machine, rng=random.Random(42)).step()
        values.append(v(machine)[1])
    assert values[0] == values[1]


def test_op_dxyn_draws_font_glyph(cpu, machine):
    # Draw the glyph for 0 (F0 90 90 90 F0) at 0, 0
    machine.load([0xD0, 0x15])
    machine.redraw = False
    cpu.step()
    assert list(machine.framebuffer[0, :5]) == [True, True, True, True, False]
    assert list(machine.framebuffer[1, :5]) == [True, False, False, True, False]
    assert machine.framebuffer[:5, :4].sum() == 14
    assert machine.framebuffer.sum() == 14
    assert v(machine)[0xF] == 0
    assert machine.redraw
    assert pc(machine) == 514


def test_op_dxyn_twice_erases_and_collides(cpu, machine):
    machine.load([0xD0, 0x15, 0xD0, 0x15])
    v(machine)[0] = 10
    cpu.step()
    assert machine.framebuffer.any()
    assert v(machine)[0xF] == 0
    cpu.step()
    assert not machine.framebuffer.any()
    assert v(machine)[0xF] == 1


def test_op_dxyn_clips_at_right_and_bottom_edges(cpu, machine):
    machine.load([0xD0, 0x15])
    v(machine)[0] = 62
    v(machine)[1] = 30
    cpu.step()
    lit = set(zip(*machine.framebuffer.nonzero()))
    assert lit == {(30, 62), (30, 63), (31, 62)}
    assert v(machine)[0xF] == 0


def test_op_dxyn_reads_past_memory(cpu, machine):
    machine.load([0xD0, 0x05])
    machine.registers['index'] = 0xFFE
    with pytest.raises(MemoryAccessException):
        cpu.step()
    assert pc(machine) == 512


def test_op_ex9e(cpu, machine):
    machine.load([0xE1, 0x9E, 0xE1, 0x9E])
    v(machine)[1] = 1
    cpu.step()
    assert pc(machine) == 514
    machine.set_key(1, True)
    cpu.step()
    assert pc(machine) == 518


def test_op_exa1(cpu, machine):
    machine.load([0xE1, 0xA1, 0xE1, 0xA1])
    v(machine)[1] = 1
    machine.set_key(1, True)
    cpu.step()
    assert pc(machine) == 514
    machine.set_key(1, False)
    cpu.step()
    assert pc(machine) == 518


def test_op_ex9e_key_out_of_range(cpu, machine):
    machine.load([0xE1, 0x9E])
    v(machine)[1] = 0x10
    with pytest.raises(KeypadIndexException):
        cpu.step()


def test_op_fx07(cpu, machine):
    machine.load([0xF1, 0x07])
    machine.timers['delay'] = 10
    cpu.step()
    assert pc(machine) == 514
    assert v(machine)[1] == 10


def test_op_fx0a(cpu, machine):
    machine.load([0xF1, 0x0A])
    cpu.step()
    assert pc(machine) == 512
    assert cpu.waiting_for_key
    cpu.step()
    assert pc(machine) == 512

    machine.set_key(1, True)
    cpu.step()
    assert pc(machine) == 514
    assert v(machine)[1] == 1
    assert not cpu.waiting_for_key


def test_op_fx0a_picks_lowest_key(cpu, machine):
    machine.load([0xF1, 0x0A])
    machine.set_key(7, True)
    machine.set_key(3, True)
    cpu.step()
    assert v(machine)[1] == 3


def test_op_fx0a_sees_key_f(cpu, machine):
    machine.load([0xF1, 0x0A])
    machine.set_key(0xF, True)
    cpu.step()
    assert v(machine)[1] == 0xF
    assert pc(machine) == 514


def test_op_fx15(cpu, machine):
    machine.load([0xF1, 0x15])
    v(machine)[1] = 10
    cpu.step()
    assert pc(machine) == 514
    assert machine.timers['delay'] == 9


def test_op_fx18(cpu, machine):
    machine.load([0xF1, 0x18])
    v(machine)[1] = 10
    cpu.step()
    assert pc(machine) == 514
    assert machine.timers['sound'] == 9


def test_op_fx1e(cpu, machine):
    machine.load([0xF1, 0x1E])
    v(machine)[1] = 10
    machine.registers['index'] = 0x300
    cpu.step()
    assert machine.registers['index'] == 0x30A
    assert v(machine)[1] == 10


def test_op_fx1e_wraps_at_16_bits(cpu, machine):
    machine.load([0xF1, 0x1E])
    v(machine)[1] = 1
    machine.registers['index'] = 0xFFFF
    cpu.step()
    assert machine.registers['index'] == 0


@pytest.mark.parametrize('value, expected', [(0x0, 0), (0xA, 50), (0xF, 75), (0x1A, 0x82)])
def test_op_fx29(cpu, machine, value, expected):
    machine.load([0xF1, 0x29])
    v(machine)[1] = value
    cpu.step()
    assert machine.registers['index'] == expected


@pytest.mark.parametrize('value, digits', [(123, [1, 2, 3]), (7, [0, 0, 7]), (255, [2, 5, 5])])
def test_op_fx33(cpu, machine, value, digits):
    machine.load([0xF1, 0x33])
    v(machine)[1] = value
    machine.registers['index'] = 0x300
    cpu.step()
    assert list(machine.memory[0x300:0x303]) == digits


def test_op_fx55(cpu, machine):
    machine.load([0xF1, 0x55])
    machine.registers['index'] = 0x300
    v(machine)[0] = 0xAB
    v(machine)[1] = 0xCD
    v(machine)[2] = 0xEF
    cpu.step()
    assert pc(machine) == 514
    assert machine.memory[0x300] == 0xAB
    assert machine.memory[0x301] == 0xCD
    assert machine.memory[0x302] == 0
    assert machine.registers['index'] == 0x300


def test_op_fx65(cpu, machine):
    machine.load([0xF1, 0x65])
    machine.memory[0x300] = 0xAB
    machine.memory[0x301] = 0xCD
    machine.memory[0x302] = 0xEF
    machine.registers['index'] = 0x300
    cpu.step()
    assert v(machine)[0] == 0xAB
    assert v(machine)[1] == 0xCD
    assert v(machine)[2] == 0


def test_fx55_fx65_round_trip(cpu, machine):
    machine.load([0xFF, 0x55, 0xFF, 0x65])
    machine.registers['index'] = 0x400
    original = bytearray(range(0x10, 0x20))
    machine.registers['v'][:] = original
    cpu.step()
    machine.registers['v'][:] = bytearray(16)
    cpu.step()
    assert machine.registers['v'] == original


def test_op_fx33_past_memory_writes_nothing(cpu, machine):
    machine.load([0xF1, 0x33])
    v(machine)[1] = 123
    machine.registers['index'] = 0xFFE
    with pytest.raises(MemoryAccessException) as error:
        cpu.step()
    assert error.value.address == 0x1000
    assert machine.memory[0xFFE:] == bytearray(2)
    assert pc(machine) == 512


def test_op_fx55_past_memory_writes_nothing(cpu, machine):
    machine.load([0xF3, 0x55])
    v(machine)[0:4] = bytearray([1, 2, 3, 4])
    machine.registers['index'] = 0xFFE
    with pytest.raises(MemoryAccessException):
        cpu.step()
    assert machine.memory[0xFFE:] == bytearray(2)
    assert pc(machine) == 512


def test_op_fx65_past_memory_loads_nothing(cpu, machine):
    machine.load([0xF3, 0x65])
    machine.memory[0xFFE] = 0xAA
    machine.memory[0xFFF] = 0xBB
    machine.registers['index'] = 0xFFE
    with pytest.raises(MemoryAccessException):
        cpu.step()
    assert v(machine) == bytearray(16)
    assert pc(machine) == 512


@pytest.mark.parametrize('operand', [
    0x6A2F, 0x7A01, 0x8AB0, 0x8AB4, 0x8AB6, 0x8ABE, 0xA123, 0xC1FF,
    0xD015, 0xF107, 0xF115, 0xF118, 0xF11E, 0xF129, 0xF133,
])
def test_ordinary_instructions_advance_by_two(cpu, machine, operand):
    machine.load([operand >> 8, operand & 0xFF])
    machine.registers['index'] = 0x300
    cpu.step()
    assert pc(machine) == 514


@pytest.mark.parametrize('operand', [
    0x0000, 0x0123, 0x00E1, 0x00FF, 0x5121, 0x9121, 0x8008, 0x800F,
    0xE000, 0xE19F, 0xF0FF, 0xF130, 0xF175,
])
def test_unknown_opcodes(cpu, machine, operand):
    machine.load([operand >> 8, operand & 0xFF])
    with pytest.raises(UnknownOpCodeException) as error:
        cpu.step()
    assert error.value.op_code == operand
    assert error.value.program_counter == 512
    assert pc(machine) == 512
    assert '{:04X}'.format(operand) in str(error.value)


def test_fetch_past_end_of_memory(cpu, machine):
    machine.registers['pc'] = 0xFFF
    with pytest.raises(MemoryAccessException):
        cpu.step()


def test_step_returns_operand(cpu, machine):
    machine.load([0x6A, 0x2F])
    assert cpu.step() == 0x6A2F


def test_str_includes_operand_and_registers(cpu, machine):
    machine.load([0x6A, 0x2F])
    cpu.step()
    dump = str(cpu)
    assert 'OP: 6A2F @ 200' in dump
    assert 'VA: 2F' in dump
