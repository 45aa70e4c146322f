"""
Stack, timer and keypad behaviour, exercised without an interpreter.
"""

import pytest

from chip8.machine import (
    Key, Keypad, Stack, StackOverflowError, StackUnderflowError, Timer,
)


class TestStack:

    def test_push_pop_is_lifo(self):
        stack = Stack()
        stack.push(0x202)
        stack.push(0x300)
        assert len(stack) == 2
        assert stack.pop() == 0x300
        assert stack.pop() == 0x202
        assert len(stack) == 0

    def test_pop_returns_plain_int(self):
        stack = Stack()
        stack.push(0x2AE)
        assert type(stack.pop()) is int

    def test_underflow_is_fatal(self):
        with pytest.raises(StackUnderflowError):
            Stack().pop()

    def test_depth_stays_below_capacity(self):
        """64 slots hold at most 63 return addresses."""
        stack = Stack(64)
        for i in range(63):
            stack.push(0x200 + 2 * i)
        with pytest.raises(StackOverflowError):
            stack.push(0x400)
        assert len(stack) == 63


class TestTimer:

    def test_decays_after_period(self):
        """600 Hz / 60 -> one decrement every 10 ticks."""
        timer = Timer(600 // 60)
        timer.set(1)
        for _ in range(9):
            timer.tick()
        assert timer.value == 1
        timer.tick()
        assert timer.value == 0

    def test_never_negative(self):
        timer = Timer(1)
        timer.set(2)
        for _ in range(10):
            timer.tick()
        assert timer.value == 0

    def test_idle_timer_does_not_accumulate(self):
        timer = Timer(10)
        for _ in range(25):
            timer.tick()
        assert timer.acc == 0

    def test_set_keeps_accumulator(self):
        """Re-arming mid-period keeps the partial count (timing drift)."""
        timer = Timer(10)
        timer.set(5)
        for _ in range(7):
            timer.tick()
        timer.set(5)
        assert timer.acc == 7
        for _ in range(3):
            timer.tick()
        assert timer.value == 4

    def test_set_wraps_to_byte(self):
        timer = Timer(10)
        timer.set(0x1FF)
        assert timer.value == 0xFF


class TestKeypad:

    def test_starts_released(self):
        keypad = Keypad()
        assert keypad.get_pressed() is None
        assert not any(keypad.is_pressed(k) for k in range(16))

    def test_get_pressed_returns_lowest(self):
        keypad = Keypad()
        keypad.set(0xB, True)
        keypad.set(0x5, True)
        assert keypad.get_pressed() == 0x5
        keypad.set(0x5, False)
        assert keypad.get_pressed() == 0xB

    def test_press_release_by_key_name(self):
        keypad = Keypad()
        keypad.press(Key.F)
        assert keypad.is_pressed(0xF)
        keypad.release(Key.F)
        assert not keypad.is_pressed(0xF)

    def test_clear(self):
        keypad = Keypad()
        keypad.press(Key.K0)
        keypad.clear()
        assert keypad.get_pressed() is None
