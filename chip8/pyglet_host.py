# Desktop backend: a pyglet window for the 64x32 display, the keyboard for the
# hex keypad and a synthesized sine tone for the buzzer.
# We're subclassing pyglet (graphics, sound output, and keyboard handling)
# and overriding whatever def we need from there. The interpreter owns the
# loop, so events are pumped by hand once per cycle in handle_key().

import time

import numpy as np
import pyglet
from pyglet.window import key
from pyglet.media import synthesis

from . import settings
from .settings import (
    BEEP_FREQUENCY, HEIGHT, SCALE, WIDTH, WINDOW_HEIGHT, WINDOW_WIDTH, log,
)
from .host import Host

#map binding keys
KEYMAP = {
    key._1: 0x1, key._2: 0x2, key._3: 0x3, key._4: 0xC,
    key.Q: 0x4, key.W: 0x5, key.E: 0x6, key.R: 0xD,
    key.A: 0x7, key.S: 0x8, key.D: 0x9, key.F: 0xE,
    key.Z: 0xA, key.X: 0x0, key.C: 0xB, key.V: 0xF,
}

FRAME_INTERVAL = 1.0 / 60


def generate_beep(duration=0.5, frequency=BEEP_FREQUENCY, sample_rate=44100):
    wave = synthesis.Sine(duration=duration, frequency=frequency, sample_rate=sample_rate)
    return pyglet.media.StaticSource(wave)


class PygletHost(pyglet.window.Window, Host):

    def __init__(self, caption="CHIP-8 Emulator"):
        super().__init__(
            width=WINDOW_WIDTH,
            height=WINDOW_HEIGHT,
            caption=caption,
            vsync=False
        )
        self.key_inputs = [0] * 16
        self.closed = False

        # Pre-allocated small framebuffer (64x32 RGBA), upscaled with numpy.repeat
        self._small_framebuf = np.zeros((HEIGHT, WIDTH, 4), dtype=np.uint8)
        self._small_framebuf[..., 3] = 255
        self.image = pyglet.image.ImageData(
            WINDOW_WIDTH,
            WINDOW_HEIGHT,
            'RGBA',
            np.zeros((WINDOW_HEIGHT, WINDOW_WIDTH, 4), dtype=np.uint8).tobytes()
        )
        self._last_vram = None
        self.should_draw = True
        self._last_flip = 0.0

        self.beep_player = None
        self.sound_playing = False
        try:
            self.beep_player = pyglet.media.Player()
            self.beep_player.loop = True
            self.beep_player.queue(generate_beep())
        except Exception as e:
            log("Audio disabled:", e)
            self.beep_player = None

    # ---- Host ----
    def render(self, framebuffer):
        if self._last_vram is None or not np.array_equal(framebuffer, self._last_vram):
            self._last_vram = framebuffer.copy()
            self.should_draw = True

        now = time.perf_counter()
        if self.should_draw and now - self._last_flip >= FRAME_INTERVAL:
            self.switch_to()
            self.dispatch_event('on_draw')
            self.flip()
            self._last_flip = now

    def handle_key(self, keypad):
        self.dispatch_events()
        for code, state in enumerate(self.key_inputs):
            keypad.set(code, state)

    def beep(self, is_on):
        if self.beep_player is None or is_on == self.sound_playing:
            return
        if is_on:
            self.beep_player.play()
        else:
            self.beep_player.pause()
        self.sound_playing = is_on

    def quit(self):
        if self.closed and self.beep_player is not None:
            self.beep_player.pause()
        return self.closed

    # ---- Drawing ----
    def on_draw(self):
        self.clear()
        if self._last_vram is not None:
            # pyglet's origin is bottom-left, CHIP-8's is top-left
            self._small_framebuf[..., :3] = np.flipud(self._last_vram)[..., None] * 255

        if SCALE != 1:
            scaled = np.repeat(np.repeat(self._small_framebuf, SCALE, axis=0), SCALE, axis=1)
        else:
            scaled = self._small_framebuf

        #updates existing image without creating new object
        self.image.set_data('RGBA', WINDOW_WIDTH * 4, scaled.tobytes())
        self.image.blit(0, 0)
        self.should_draw = False

    # ---- Input ----
    def on_key_press(self, symbol, modifiers):
        if symbol == key.ESCAPE:
            self.on_close()
        if symbol in KEYMAP:
            self.key_inputs[KEYMAP[symbol]] = 1
        if symbol == key.F1:
            log("logsOn:", settings.set_logging(not settings.logs_on))

    def on_key_release(self, symbol, modifiers):
        if symbol in KEYMAP:
            self.key_inputs[KEYMAP[symbol]] = 0

    def on_close(self):
        self.closed = True
        self.close()
