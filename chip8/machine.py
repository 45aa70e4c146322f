# Supporting state for the interpreter: call stack, decay timers and keypad.
# The stack and keypad keep their slots in fixed-size numpy arrays.

from enum import IntEnum

import numpy as np

from .settings import STACK_SIZE


class Chip8Error(Exception):
    pass


class StackError(Chip8Error):
    """Fatal call-stack condition; the interpreter never recovers from it."""


class StackOverflowError(StackError):
    pass


class StackUnderflowError(StackError):
    pass


class Stack:
    """Fixed-capacity LIFO of 16-bit return addresses.

    Depth stays below the capacity: the push that would fill the last slot
    is an overflow, the same as the reference interpreter this mirrors.
    """

    def __init__(self, capacity=STACK_SIZE):
        self.capacity = capacity
        self.slots = np.zeros(capacity, dtype=np.uint16)
        self.sp = 0

    def __len__(self):
        return self.sp

    def push(self, addr):
        if self.sp + 1 >= self.capacity:
            raise StackOverflowError("Stack overflow on CALL (depth %d)" % self.sp)
        self.slots[self.sp] = addr & 0xFFFF
        self.sp += 1

    def pop(self):
        if self.sp == 0:
            raise StackUnderflowError("Stack underflow on 00EE")
        self.sp -= 1
        return int(self.slots[self.sp])


class Timer:
    """8-bit counter decremented once every `period` ticks while non-zero."""

    def __init__(self, period):
        self.value = 0
        self.period = period
        self.acc = 0

    def tick(self):
        if self.value > 0:
            self.acc += 1
            if self.acc >= self.period:
                self.value -= 1
                self.acc = 0

    def set(self, value):
        # accumulator is left alone on purpose, successive sets can drift
        self.value = value & 0xFF


class Key(IntEnum):
    K0 = 0x0
    K1 = 0x1
    K2 = 0x2
    K3 = 0x3
    K4 = 0x4
    K5 = 0x5
    K6 = 0x6
    K7 = 0x7
    K8 = 0x8
    K9 = 0x9
    A = 0xA
    B = 0xB
    C = 0xC
    D = 0xD
    E = 0xE
    F = 0xF


class Keypad:
    """Sixteen key states indexed by hex digit. Only the host writes them."""

    def __init__(self):
        self.keys = np.zeros(16, dtype=np.uint8)

    def set(self, code, pressed):
        self.keys[code] = 1 if pressed else 0

    def press(self, key):
        self.set(key, True)

    def release(self, key):
        self.set(key, False)

    def is_pressed(self, code):
        return bool(self.keys[code])

    def get_pressed(self):
        pressed = np.flatnonzero(self.keys)
        if pressed.size == 0:
            return None
        return int(pressed[0])

    def clear(self):
        self.keys[:] = 0
