"""CHIP-8 interpreter with pluggable hosts (headless recorder, pyglet window)."""

from .cpu import Chip8
from .host import HeadlessHost, Host
from .machine import (
    Chip8Error, Key, Keypad, Stack, StackError, StackOverflowError,
    StackUnderflowError, Timer,
)
from .settings import set_logging

__all__ = [
    "Chip8", "Chip8Error", "HeadlessHost", "Host", "Key", "Keypad", "Stack",
    "StackError", "StackOverflowError", "StackUnderflowError", "Timer",
    "set_logging",
]
