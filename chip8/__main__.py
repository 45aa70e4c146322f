import sys

from .cpu import Chip8
from .machine import StackError
from .settings import CPU_HZ


def load_rom(path):
    with open(path, "rb") as f:
        return f.read()


# ---- Entry point ----
def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) < 1:
        print("Usage: python -m chip8 <rom-file> [hz]")
        return 1

    hz = CPU_HZ
    if len(argv) > 1:
        try:
            hz = int(argv[1])
        except ValueError:
            print("hz must be an integer, got %r" % argv[1])
            return 1
        if hz <= 0:
            print("hz must be positive, got %d" % hz)
            return 1

    try:
        rom = load_rom(argv[0])
    except OSError as e:
        print("Could not read ROM:", e)
        return 1

    # importing pyglet.window wants a display, keep it out of the headless path
    from .pyglet_host import PygletHost

    print("Loading ROM:", argv[0])
    chip8 = Chip8(hz=hz)
    chip8.load(rom)
    window = PygletHost()
    try:
        chip8.run(window)
    except StackError as e:
        print("Emulation error:", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
