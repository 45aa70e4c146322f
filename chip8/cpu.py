# CHIP8 Virtual Machine Steps:
# Input - key states live in a Keypad the host updates between cycles.
# Output - 64x32 framebuffer (pixels are either on or off (0 || 1)) & a beep flag.
# CPU - Cowgod's CHIP8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#0.0
# Memory - 4096 bytes which includes: the fonts at 0x050 and the ROM at 0x200.
#----------------------------------------------------------------------------------------------
# One cycle = tick both timers, fetch/decode/execute one opcode, then hand the
# framebuffer, keypad and sound state to the host. Nothing here knows about
# windows or audio, that all goes through the Host passed to run().

import random
import time

import numpy as np

from . import settings
from .settings import (
    FONT_BASE, FONTSET, GLYPH_SIZE, HEIGHT, MEMORY_SIZE, PROGRAM_START,
    STACK_SIZE, TIMER_HZ, WIDTH, log,
)
from .machine import Keypad, Stack, Timer


class Chip8:

    def __init__(self, hz=settings.CPU_HZ, rng=None, shift_uses_vy=False):
        self.memory = bytearray(MEMORY_SIZE)
        self.vram = np.zeros((HEIGHT, WIDTH), dtype=np.uint8)
        self.V = [0] * 16
        self.I = 0
        self.pc = PROGRAM_START
        self.stack = Stack(STACK_SIZE)
        self.keypad = Keypad()
        self.rng = rng if rng is not None else random.Random()
        self.shift_uses_vy = shift_uses_vy
        self.step_count = 0

        self.hz = hz
        self.delay_timer = Timer(hz // TIMER_HZ)
        self.sound_timer = Timer(hz // TIMER_HZ)

        # Load fontset into memory
        self.memory[FONT_BASE:FONT_BASE + len(FONTSET)] = bytes(FONTSET)

        # dispatch table
        self.opcodes = [
            (0xFFFF, 0x00E0, self.op_CLS),
            (0xFFFF, 0x00EE, self.op_RET),

            (0xF000, 0x1000, self.op_JP),
            (0xF000, 0x2000, self.op_CALL),
            (0xF000, 0x3000, self.op_SE_Vx_kk),
            (0xF000, 0x4000, self.op_SNE_Vx_kk),
            (0xF00F, 0x5000, self.op_SE_Vx_Vy),
            (0xF000, 0x6000, self.op_LD_Vx_kk),
            (0xF000, 0x7000, self.op_ADD_Vx_kk),

            (0xF00F, 0x8000, self.op_LD_Vx_Vy),
            (0xF00F, 0x8001, self.op_OR),
            (0xF00F, 0x8002, self.op_AND),
            (0xF00F, 0x8003, self.op_XOR),
            (0xF00F, 0x8004, self.op_ADD),
            (0xF00F, 0x8005, self.op_SUB),
            (0xF00F, 0x8006, self.op_SHR),
            (0xF00F, 0x8007, self.op_SUBN),
            (0xF00F, 0x800E, self.op_SHL),

            (0xF00F, 0x9000, self.op_SNE_Vx_Vy),
            (0xF000, 0xA000, self.op_LD_I),
            (0xF000, 0xB000, self.op_JP_V0),
            (0xF000, 0xC000, self.op_RND),
            (0xF000, 0xD000, self.op_DRW),

            (0xF0FF, 0xE09E, self.op_SKP),
            (0xF0FF, 0xE0A1, self.op_SKNP),

            (0xF0FF, 0xF007, self.op_LD_Vx_DT),
            (0xF0FF, 0xF00A, self.op_WAITKEY),
            (0xF0FF, 0xF015, self.op_LD_DT_Vx),
            (0xF0FF, 0xF018, self.op_LD_ST_Vx),
            (0xF0FF, 0xF01E, self.op_ADD_I_Vx),
            (0xF0FF, 0xF029, self.op_FONT),
            (0xF0FF, 0xF033, self.op_BCD),
            (0xF0FF, 0xF055, self.op_STORE),
            (0xF0FF, 0xF065, self.op_LOAD),
        ]

    def set_hz(self, hz):
        """Change the instruction rate. Both timers restart with the new period."""
        self.hz = hz
        self.delay_timer = Timer(hz // TIMER_HZ)
        self.sound_timer = Timer(hz // TIMER_HZ)

    # ---- Load ROM ----
    def load(self, rom):
        # no bounds check, an oversized ROM is the caller's problem
        log("Loading ROM: %d bytes" % len(rom))
        self.memory[PROGRAM_START:PROGRAM_START + len(rom)] = rom

    # ---- Fetch / execute ----
    def fetch(self):
        opcode = (self.memory[self.pc] << 8) | self.memory[self.pc + 1]
        self.pc += 2
        return opcode

    def execute(self, opcode):
        if settings.logs_on:
            log("step: %d, x: %01x y: %01x n: %01x nn: %02x nnn: %03x instruction: %04x" % (
                self.step_count, (opcode >> 8) & 0xF, (opcode >> 4) & 0xF,
                opcode & 0xF, opcode & 0xFF, opcode & 0xFFF, opcode))
        self.step_count += 1

        for mask, pattern, handler in self.opcodes:
            if (opcode & mask) == pattern:
                handler(opcode)
                return

        log(f"Unknown opcode: {opcode:04X}")

    def step(self):
        self.execute(self.fetch())

    def cycle(self, host):
        self.delay_timer.tick()
        self.sound_timer.tick()

        self.step()

        host.render(self.vram)
        host.handle_key(self.keypad)
        host.beep(self.sound_timer.value > 0)

    def run(self, host):
        """Drive cycles until the host asks to quit, paced to `self.hz`."""
        while not host.quit():
            self.cycle(host)
            time.sleep(1.0 / self.hz)

    # ---- Opcode handlers ----
    def op_CLS(self, opcode):
        self.vram[:] = 0

    def op_RET(self, opcode):
        self.pc = self.stack.pop()

    def op_JP(self, opcode):
        self.pc = opcode & 0x0FFF

    def op_CALL(self, opcode):
        self.stack.push(self.pc)
        self.pc = opcode & 0x0FFF

    def op_SE_Vx_kk(self, opcode):
        x = (opcode >> 8) & 0xF
        kk = opcode & 0xFF
        if self.V[x] == kk:
            self.pc += 2

    def op_SNE_Vx_kk(self, opcode):
        x = (opcode >> 8) & 0xF
        kk = opcode & 0xFF
        if self.V[x] != kk:
            self.pc += 2

    def op_SE_Vx_Vy(self, opcode):
        x = (opcode >> 8) & 0xF
        y = (opcode >> 4) & 0xF
        if self.V[x] == self.V[y]:
            self.pc += 2

    def op_LD_Vx_kk(self, opcode):
        x = (opcode >> 8) & 0xF
        self.V[x] = opcode & 0xFF

    def op_ADD_Vx_kk(self, opcode):
        x = (opcode >> 8) & 0xF
        kk = opcode & 0xFF
        self.V[x] = (self.V[x] + kk) & 0xFF

    def op_LD_Vx_Vy(self, opcode):
        x = (opcode >> 8) & 0xF
        y = (opcode >> 4) & 0xF
        self.V[x] = self.V[y]

    def op_OR(self, opcode):
        x = (opcode >> 8) & 0xF
        y = (opcode >> 4) & 0xF
        self.V[x] |= self.V[y]

    def op_AND(self, opcode):
        x = (opcode >> 8) & 0xF
        y = (opcode >> 4) & 0xF
        self.V[x] &= self.V[y]

    def op_XOR(self, opcode):
        x = (opcode >> 8) & 0xF
        y = (opcode >> 4) & 0xF
        self.V[x] ^= self.V[y]

    # flag goes into VF last so it survives when x == 0xF
    def op_ADD(self, opcode):
        x = (opcode >> 8) & 0xF
        y = (opcode >> 4) & 0xF
        total = self.V[x] + self.V[y]
        self.V[x] = total & 0xFF
        self.V[0xF] = 1 if total > 0xFF else 0

    def op_SUB(self, opcode):
        x = (opcode >> 8) & 0xF
        y = (opcode >> 4) & 0xF
        no_borrow = 1 if self.V[x] >= self.V[y] else 0
        self.V[x] = (self.V[x] - self.V[y]) & 0xFF
        self.V[0xF] = no_borrow

    def op_SUBN(self, opcode):
        x = (opcode >> 8) & 0xF
        y = (opcode >> 4) & 0xF
        no_borrow = 1 if self.V[y] >= self.V[x] else 0
        self.V[x] = (self.V[y] - self.V[x]) & 0xFF
        self.V[0xF] = no_borrow

    def op_SHR(self, opcode):
        x = (opcode >> 8) & 0xF
        if self.shift_uses_vy:
            self.V[x] = self.V[(opcode >> 4) & 0xF]
        shifted_out = self.V[x] & 1
        self.V[x] >>= 1
        self.V[0xF] = shifted_out

    def op_SHL(self, opcode):
        x = (opcode >> 8) & 0xF
        if self.shift_uses_vy:
            self.V[x] = self.V[(opcode >> 4) & 0xF]
        shifted_out = (self.V[x] >> 7) & 1
        self.V[x] = (self.V[x] << 1) & 0xFF
        self.V[0xF] = shifted_out

    def op_SNE_Vx_Vy(self, opcode):
        x = (opcode >> 8) & 0xF
        y = (opcode >> 4) & 0xF
        if self.V[x] != self.V[y]:
            self.pc += 2

    def op_LD_I(self, opcode):
        self.I = opcode & 0x0FFF

    def op_JP_V0(self, opcode):
        self.pc = (opcode & 0x0FFF) + self.V[0]

    def op_RND(self, opcode):
        x = (opcode >> 8) & 0xF
        kk = opcode & 0xFF
        self.V[x] = self.rng.getrandbits(8) & kk

    def op_DRW(self, opcode):
        x = (opcode >> 8) & 0xF
        y = (opcode >> 4) & 0xF
        n = opcode & 0xF
        px = self.V[x] % WIDTH
        py = self.V[y] % HEIGHT
        self.V[0xF] = 0
        # the origin wraps, the sprite itself is clipped at the edges
        for row in range(n):
            if py + row >= HEIGHT:
                break
            sprite = self.memory[self.I + row]
            for bit in range(8):
                if px + bit >= WIDTH:
                    break
                if sprite & (0x80 >> bit):
                    if self.vram[py + row, px + bit]:
                        self.V[0xF] = 1
                    self.vram[py + row, px + bit] ^= 1

    def op_SKP(self, opcode):
        x = (opcode >> 8) & 0xF
        if self.keypad.is_pressed(self.V[x] & 0xF):
            self.pc += 2

    def op_SKNP(self, opcode):
        x = (opcode >> 8) & 0xF
        if not self.keypad.is_pressed(self.V[x] & 0xF):
            self.pc += 2

    def op_LD_Vx_DT(self, opcode):
        x = (opcode >> 8) & 0xF
        self.V[x] = self.delay_timer.value

    def op_WAITKEY(self, opcode):
        x = (opcode >> 8) & 0xF
        key = self.keypad.get_pressed()
        if key is None:
            self.pc -= 2  # stall (PC will re-execute this instr)
        else:
            self.V[x] = key

    def op_LD_DT_Vx(self, opcode):
        x = (opcode >> 8) & 0xF
        self.delay_timer.set(self.V[x])

    def op_LD_ST_Vx(self, opcode):
        x = (opcode >> 8) & 0xF
        self.sound_timer.set(self.V[x])

    def op_ADD_I_Vx(self, opcode):
        x = (opcode >> 8) & 0xF
        new_i = self.I + self.V[x]
        self.I = new_i & 0xFFFF
        self.V[0xF] = 1 if new_i > 0xFFF else 0

    def op_FONT(self, opcode):
        x = (opcode >> 8) & 0xF
        self.I = FONT_BASE + self.V[x] * GLYPH_SIZE

    def op_BCD(self, opcode):
        x = (opcode >> 8) & 0xF
        v = self.V[x]
        self.memory[self.I] = v // 100
        self.memory[self.I + 1] = (v // 10) % 10
        self.memory[self.I + 2] = v % 10

    def op_STORE(self, opcode):
        x = (opcode >> 8) & 0xF
        for i in range(x + 1):
            self.memory[self.I + i] = self.V[i]

    def op_LOAD(self, opcode):
        x = (opcode >> 8) & 0xF
        for i in range(x + 1):
            self.V[i] = self.memory[self.I + i]
