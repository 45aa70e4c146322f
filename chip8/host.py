# Host side of the interpreter loop. Chip8.run() calls these once per cycle,
# always in the order render -> handle_key -> beep, and polls quit() before
# each cycle. Backends subclass Host and override whatever def they need.


class Host:

    def render(self, framebuffer):
        """Receive the 32x64 framebuffer. Must not mutate it."""
        raise NotImplementedError

    def handle_key(self, keypad):
        """Update `keypad` from whatever input the backend has."""
        raise NotImplementedError

    def beep(self, is_on):
        raise NotImplementedError

    def quit(self):
        return False


class HeadlessHost(Host):
    """Records what the interpreter shows and plays, for tests and batch runs.

    `script` maps a cycle index (0-based) to ``{key_code: pressed}``; the
    changes are applied in that cycle's handle_key, so the instruction of
    the next cycle sees them. `max_cycles` makes quit() return True once
    that many frames have been rendered.
    """

    def __init__(self, max_cycles=None, script=None):
        self.max_cycles = max_cycles
        self.script = script or {}
        self.frames = []
        self.beeps = []
        self.beeping = False

    @property
    def cycles(self):
        return len(self.frames)

    @property
    def last_frame(self):
        return self.frames[-1] if self.frames else None

    def render(self, framebuffer):
        self.frames.append(framebuffer.copy())

    def handle_key(self, keypad):
        for code, pressed in self.script.get(self.cycles - 1, {}).items():
            keypad.set(code, pressed)

    def beep(self, is_on):
        if is_on != self.beeping:
            self.beeps.append((self.cycles - 1, is_on))
            self.beeping = is_on

    def quit(self):
        return self.max_cycles is not None and self.cycles >= self.max_cycles
