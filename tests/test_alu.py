"""Tests for ALU operations (8xxx)."""

import pytest
from chipvm import execute
from conftest import set_registers


class TestBasicALU:
    """Test register move and bitwise operations."""

    def test_alu_set_basic(self, fresh_state):
        """8XY0 - Set VX = VY."""
        state = set_registers(fresh_state, V1=0x42, V2=0x99)

        state = execute(state, 0x8120)  # V1 = V2

        assert state.V[1] == 0x99
        assert state.V[2] == 0x99

    def test_alu_or_basic(self, fresh_state):
        """8XY1 - OR operation."""
        state = set_registers(fresh_state, V1=0xF0, V2=0x0F)

        state = execute(state, 0x8121)  # V1 |= V2

        assert state.V[1] == 0xFF

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

    @pytest.mark.parametrize("instruction", [0x8120, 0x8121, 0x8122, 0x8123])
    def test_bitwise_operations_leave_vf_alone(self, fresh_state, instruction):
        """Bitwise operations set no flag."""
        state = set_registers(fresh_state, V1=0x0F, V2=0xF0, VF=0x42)

        state = execute(state, instruction)

        assert state.V[15] == 0x42


class TestALUArithmetic:
    """Test arithmetic ALU operations."""

    def test_alu_add_no_carry(self, fresh_state):
        """8XY4 - Add without carry."""
        state = set_registers(fresh_state, V1=0x10, V2=0x20)

        state = execute(state, 0x8124)  # V1 += V2

        assert state.V[1] == 0x30
        assert state.V[15] == 0

    def test_alu_add_with_carry(self, fresh_state):
        """8XY4 - Add with carry."""
        state = set_registers(fresh_state, V1=0xFF, V2=0x01)

        state = execute(state, 0x8124)  # V1 += V2

        assert state.V[1] == 0x00  # 256 wraps to 0
        assert state.V[15] == 1

    @pytest.mark.parametrize("a,b", [(0, 0), (1, 254), (1, 255), (128, 128), (200, 100), (255, 255)])
    def test_add_carry_property(self, fresh_state, a, b):
        """8XY4 - Result is (a+b) mod 256, flag set iff a+b >= 256."""
        state = set_registers(fresh_state, V3=a, V7=b)

        state = execute(state, 0x8374)

        assert state.V[3] == (a + b) % 256
        assert state.V[15] == int(a + b >= 256)

    def test_alu_sub_xy_no_borrow(self, fresh_state):
        """8XY5 - Subtract VX - VY, no borrow."""
        state = set_registers(fresh_state, V1=0x30, V2=0x10)

        state = execute(state, 0x8125)  # V1 -= V2

        assert state.V[1] == 0x20
        assert state.V[15] == 1  # No borrow (VX >= VY)

    def test_alu_sub_xy_with_borrow(self, fresh_state):
        """8XY5 - Subtract VX - VY, with borrow."""
        state = set_registers(fresh_state, V3=0x10, V4=0x30)

        state = execute(state, 0x8345)  # V3 -= V4

        assert state.V[3] == 0xE0  # 16 - 48 = -32 -> 224
        assert state.V[15] == 0

    @pytest.mark.parametrize("a,b", [(0, 0), (5, 5), (0, 1), (255, 0), (16, 48), (100, 200)])
    def test_sub_borrow_property(self, fresh_state, a, b):
        """8XY5 - Result is (a-b) mod 256, flag set iff a >= b."""
        state = set_registers(fresh_state, V2=a, V9=b)

        state = execute(state, 0x8295)

        assert state.V[2] == (a - b) % 256
        assert state.V[15] == int(a >= b)

    def test_alu_sub_yx_no_borrow(self, fresh_state):
        """8XY7 - VX = VY - VX, result lands in VX."""
        state = set_registers(fresh_state, V1=0x10, V2=0x30)

        state = execute(state, 0x8127)  # V1 = V2 - V1

        assert state.V[1] == 0x20  # 48 - 16 = 32
        assert state.V[2] == 0x30  # VY untouched
        assert state.V[15] == 1

    def test_alu_sub_yx_with_borrow(self, fresh_state):
        """8XY7 - Borrow clears VF."""
        state = set_registers(fresh_state, V1=0x30, V2=0x10)

        state = execute(state, 0x8127)  # V1 = V2 - V1

        assert state.V[1] == 0xE0
        assert state.V[15] == 0


class TestALUShifts:
    """Test shift operations."""

    def test_shift_right_even(self, fresh_state):
        """8XY6 - Shift right, even number."""
        state = set_registers(fresh_state, V1=0x04, V2=0xFF)

        state = execute(state, 0x8126)  # V1 >>= 1

        assert state.V[1] == 0x02
        assert state.V[2] == 0xFF  # VY ignored
        assert state.V[15] == 0

    def test_shift_right_odd(self, fresh_state):
        """8XY6 - Shift right, odd number."""
        state = set_registers(fresh_state, V3=0x05)

        state = execute(state, 0x8346)  # V3 >>= 1

        assert state.V[3] == 0x02
        assert state.V[15] == 1

    def test_shift_left_overflow(self, fresh_state):
        """8XYE - Shift left, top bit goes to VF."""
        state = set_registers(fresh_state, V3=0x81)  # 10000001

        state = execute(state, 0x834E)  # V3 <<= 1

        assert state.V[3] == 0x02  # 258 truncated to 8 bits
        assert state.V[15] == 1

    def test_shift_left_uses_top_bit_only(self, fresh_state):
        """8XYE - Bit 3 does not leak into VF."""
        state = set_registers(fresh_state, V3=0x08)

        state = execute(state, 0x834E)

        assert state.V[3] == 0x10
        assert state.V[15] == 0


class TestALUEdgeCases:
    """Test edge cases and comprehensive scenarios."""

    def test_alu_self_operations(self, fresh_state):
        """Test operations where VX and VY are the same register."""
        state = set_registers(fresh_state, V5=0xAA)

        state = execute(state, 0x8553)  # V5 ^= V5
        assert state.V[5] == 0x00, "Self XOR should result in 0"

        state = set_registers(state, V5=0x80)
        state = execute(state, 0x8554)  # V5 += V5
        assert state.V[5] == 0x00, "Self ADD should wrap on overflow"
        assert state.V[15] == 1, "Self ADD should set carry flag"

    def test_vf_register_operations(self, fresh_state):
        """VF as a source is read before the flag is written."""
        state = set_registers(fresh_state, VF=0x42, V1=0x10)

        state = execute(state, 0x81F4)  # V1 += VF
        assert state.V[1] == 0x52, "Addition with VF as source failed"
        assert state.V[15] == 0, "VF should be overwritten by operation result"

    def test_flag_wins_when_destination_is_vf(self, fresh_state):
        """8FY4 - VF receives the carry, not the sum."""
        state = set_registers(fresh_state, VF=0xFF, V1=0x02)

        state = execute(state, 0x8F14)

        assert state.V[15] == 1
