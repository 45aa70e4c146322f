# Machine layout, pacing and the log switch shared by the interpreter and its hosts.

#  configuration
SCALE = 10
WIDTH, HEIGHT = 64, 32
WINDOW_WIDTH, WINDOW_HEIGHT = WIDTH * SCALE, HEIGHT * SCALE
CPU_HZ = 600
TIMER_HZ = 60
BEEP_FREQUENCY = 440

MEMORY_SIZE = 4096
PROGRAM_START = 0x200   # offset is equal to 0x200 (Cowgod's reference)
FONT_BASE = 0x050
GLYPH_SIZE = 5
STACK_SIZE = 64

# set fonts (binary pixel patterns)
FONTSET = [
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
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
] #notice 80 bytes

#make it true if you want the logs
logs_on = False


def log(*args):
    if logs_on:
        print(*args)


def set_logging(on):
    global logs_on
    logs_on = bool(on)
    return logs_on
