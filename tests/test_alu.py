"""Tests for ALU operations (8xxx)."""

import pytest
from chix8 import execute
from conftest import set_registers


class TestBasicALU:
    """Test bitwise ALU operations."""

    def test_alu_set_basic(self, fresh_state):
        """8XY0 - Set VX = VY."""
        state = set_registers(fresh_state, V1=0x42, V2=0x99)

        state = execute(state, 0x8120)  # V1 = V2

        assert state.V[1] == 0x99
        assert state.V[2] == 0x99

    def test_alu_or_basic(self, fresh_state):
        """8XY1 - OR operation leaves VF alone."""
        state = set_registers(fresh_state, V1=0xF0, V2=0x0F, VF=0x07)

        state = execute(state, 0x8121)  # V1 |= V2

        assert state.V[1] == 0xFF
        assert state.V[15] == 0x07

    def test_alu_and_basic(self, fresh_state):
        """8XY2 - AND operation."""
        state = set_registers(fresh_state, V1=0xF0, V2=0xF1)

        state = execute(state, 0x8122)  # V1 &= V2

        assert state.V[1] == 0xF0

    def test_alu_xor_same(self, fresh_state):
        """8XY3 - XOR with same value should be 0."""
        state = set_registers(fresh_state, V3=0xAA, V4=0xAA)

        state = execute(state, 0x8343)  # V3 ^= V4

        assert state.V[3] == 0x00

    def test_logic_resets_vf_quirk(self, legacy_state):
        """8XY1 - VF cleared when logic_resets_vf is on."""
        state = set_registers(legacy_state, V1=0xF0, V2=0x0F, VF=0x07)

        state = execute(state, 0x8121)

        assert state.V[1] == 0xFF
        assert state.V[15] == 0

    def test_set_into_vf(self, fresh_state):
        """8F00 - Plain data write into VF is kept."""
        state = set_registers(fresh_state, V0=0x33, VF=0x01)

        state = execute(state, 0x8F00)

        assert state.V[15] == 0x33


class TestALUArithmetic:
    """Test arithmetic ALU operations and their flags."""

    @pytest.mark.parametrize("vx, vy, result, carry", [
        (200, 100, 44, 1),
        (10, 20, 30, 0),
        (0xFF, 0x01, 0x00, 1),
        (0x80, 0x7F, 0xFF, 0),
    ])
    def test_alu_add(self, fresh_state, vx, vy, result, carry):
        """8XY4 - Add, VF = carry."""
        state = set_registers(fresh_state, V1=vx, V2=vy)

        state = execute(state, 0x8124)  # V1 += V2

        assert state.V[1] == result
        assert state.V[15] == carry

    @pytest.mark.parametrize("vx, vy, result, flag", [
        (5, 10, 251, 0),
        (0x30, 0x10, 0x20, 1),
        (0x10, 0x30, 0xE0, 0),
        (7, 7, 0, 0),  # Equal operands are not "greater"
    ])
    def test_alu_sub_xy(self, fresh_state, vx, vy, result, flag):
        """8XY5 - VX -= VY, VF = VX > VY."""
        state = set_registers(fresh_state, V3=vx, V4=vy)

        state = execute(state, 0x8345)  # V3 -= V4

        assert state.V[3] == result
        assert state.V[15] == flag

    @pytest.mark.parametrize("vx, vy, result, flag", [
        (0x10, 0x30, 0x20, 1),
        (0x30, 0x10, 0xE0, 0),
        (9, 9, 0, 0),
    ])
    def test_alu_sub_yx(self, fresh_state, vx, vy, result, flag):
        """8XY7 - VX = VY - VX, VF = VY > VX."""
        state = set_registers(fresh_state, V1=vx, V2=vy)

        state = execute(state, 0x8127)  # V1 = V2 - V1

        assert state.V[1] == result
        assert state.V[15] == flag

    def test_add_flag_overwrites_vx_when_x_is_f(self, fresh_state):
        """8FY4 - Flag is written after the sum, so VF holds the carry."""
        state = set_registers(fresh_state, V1=0x01, VF=0xFF)

        state = execute(state, 0x8F14)  # VF += V1

        assert state.V[15] == 1

    def test_sub_flag_overwrites_vx_when_x_is_f(self, fresh_state):
        """8FY5 - VF holds the not-borrow flag, not the difference."""
        state = set_registers(fresh_state, V1=0x01, VF=0x05)

        state = execute(state, 0x8F15)

        assert state.V[15] == 1


class TestALUShifts:
    """Test shift operations with and without the VY quirk."""

    def test_shift_right_even(self, fresh_state):
        """8XY6 - Shift right, even number."""
        state = set_registers(fresh_state, V1=0x04, V2=0xFF)

        state = execute(state, 0x8126)  # V1 >>= 1

        assert state.V[1] == 0x02
        assert state.V[15] == 0

    def test_shift_right_odd(self, fresh_state):
        """8XY6 - Shift right, odd number."""
        state = set_registers(fresh_state, V3=0x05, V4=0xFF)

        state = execute(state, 0x8346)  # V3 >>= 1

        assert state.V[3] == 0x02
        assert state.V[15] == 1

    def test_shift_left_overflow(self, fresh_state):
        """8XYE - Shift left drops the top bit into VF."""
        state = set_registers(fresh_state, V3=0x81, V4=0xFF)

        state = execute(state, 0x834E)  # V3 <<= 1

        assert state.V[3] == 0x02
        assert state.V[15] == 1

    def test_shift_left_no_overflow(self, fresh_state):
        """8XYE - Top bit clear gives VF = 0."""
        state = set_registers(fresh_state, V3=0x41)

        state = execute(state, 0x834E)

        assert state.V[3] == 0x82
        assert state.V[15] == 0

    def test_shift_right_uses_vy_quirk(self, legacy_state):
        """8XY6 - With shift_uses_vy, VX = VY >> 1."""
        state = set_registers(legacy_state, V5=0x08, V6=0x03)

        state = execute(state, 0x8566)

        assert state.V[5] == 0x01
        assert state.V[15] == 1


class TestALUEdgeCases:
    """Test edge cases."""

    @pytest.mark.parametrize("op", [0x8, 0x9, 0xA, 0xB, 0xC, 0xD, 0xF])
    def test_alu_undefined_operations(self, fresh_state, op):
        """8XY8-8XYD, 8XYF leave every register alone."""
        state = set_registers(fresh_state, V1=0x42, V2=0x99, VF=0x05)

        state = execute(state, 0x8120 | op)

        assert state.V[1] == 0x42, f"Undefined op {op:X} changed VX"
        assert state.V[15] == 0x05, f"Undefined op {op:X} changed VF"
        assert state.pc == fresh_state.pc

    def test_alu_self_operations(self, fresh_state):
        """Test operations where VX and VY are the same register."""
        state = set_registers(fresh_state, V5=0xAA)

        state = execute(state, 0x8553)
        assert state.V[5] == 0x00, "Self XOR should result in 0"

        state = set_registers(state, V5=0x80)
        state = execute(state, 0x8554)  # V5 += V5
        assert state.V[5] == 0x00, "Self ADD should wrap on overflow"
        assert state.V[15] == 1, "Self ADD should set carry flag"

    def test_vf_as_source(self, fresh_state):
        """VF read as VY before the flag overwrites it."""
        state = set_registers(fresh_state, VF=0x42, V1=0x10)

        state = execute(state, 0x81F4)  # V1 += VF
        assert state.V[1] == 0x52
        assert state.V[15] == 0
