import logging
import random
from typing import NamedTuple, Tuple

from chip8.config import (
    DEFAULT_OPTIONS, FONT_GLYPH_SIZE, FONT_START_ADDRESS, SPEED_NORMAL, Option,
)
from chip8.devices import Framebuffer, Keypad, SilentBuzzer
from chip8.errors import Chip8Error
from chip8.instructions import CATALOG, Mnemonic
from chip8.registers import Registers, Stack

log = logging.getLogger(__name__)


class ProcessorState(NamedTuple):
    """immutable copy of the processor state handed out to inspectors"""
    pc: int
    i: int
    v: Tuple[int, ...]
    dt: int
    st: int
    sp: int
    stack: Tuple[int, ...]
    speed: int


# ******************** CPU SECTION
class Processor:
    def __init__(self, memory, display=None, keypad=None, buzzer=None,
                 options=None, rng=None, catalog=CATALOG, speed=SPEED_NORMAL):
        self.mem = memory
        self.regs = Registers()
        self.stack = Stack()
        self.catalog = catalog
        self.screen = display if display is not None else Framebuffer()
        self.keypad = keypad if keypad is not None else Keypad()
        self.buzzer = buzzer if buzzer is not None else SilentBuzzer()
        self.options = options if options is not None else dict(DEFAULT_OPTIONS)
        self.rng = rng if rng is not None else random.Random()
        self.speed = speed
        self.draw = False
        self.instructions = {
            Mnemonic.CLS: self._clear_screen,
            Mnemonic.RET: self._return,
            Mnemonic.JP: self._jump,
            Mnemonic.CALL: self._call_addr,
            Mnemonic.SE_BYTE: self._skip_if_eq,
            Mnemonic.SNE_BYTE: self._skip_if_not_eq,
            Mnemonic.SE_REG: self._skip_if_eq_regs,
            Mnemonic.LD_BYTE: self._set_vk,
            Mnemonic.ADD_BYTE: self._add_to_vk,
            Mnemonic.LD_REG: self._set_vx_to_vy,
            Mnemonic.OR: self._set_vx_or_vy,
            Mnemonic.AND: self._set_vx_and_vy,
            Mnemonic.XOR: self._set_vx_xor_vy,
            Mnemonic.ADD_REG: self._add_vx_vy,
            Mnemonic.SUB: self._sub_vx_vy,
            Mnemonic.SHR: self._shr,
            Mnemonic.SUBN: self._subn_vx_vy,
            Mnemonic.SHL: self._shl,
            Mnemonic.SNE_REG: self._skip_if_not_eq_regs,
            Mnemonic.LD_I: self._set_idx,
            Mnemonic.JP_V0: self._jump_plus,
            Mnemonic.RND: self._random_byte_and,
            Mnemonic.DRW: self._to_screen,
            Mnemonic.SKP: self._skip_if_pressed,
            Mnemonic.SKNP: self._skip_if_not_pressed,
            Mnemonic.LD_VX_DT: self._set_vx_dt,
            Mnemonic.LD_VX_K: self._wait_keypress,
            Mnemonic.LD_DT_VX: self._set_dt_vx,
            Mnemonic.LD_ST_VX: self._set_st,
            Mnemonic.ADD_I: self._add_to_idx,
            Mnemonic.LD_F: self._select_char,
            Mnemonic.LD_B: self._bcd_repr,
            Mnemonic.LD_STORE: self._store_vregs,
            Mnemonic.LD_LOAD: self._load_vregs,
        }

    def __str__(self):
        return f"REGISTERS:{self.regs}\nSTACK:{self.stack}"

    # ********** REGISTER SHORTCUTS
    @property
    def v_regs(self):
        return self.regs.v

    @property
    def pc(self):
        return self.regs.pc

    @pc.setter
    def pc(self, value):
        self.regs.pc = value

    @property
    def idx(self):
        return self.regs.i

    @idx.setter
    def idx(self, value):
        self.regs.i = value

    @property
    def dt(self):
        return self.regs.dt

    @dt.setter
    def dt(self, value):
        self.regs.dt = value

    @property
    def st(self):
        return self.regs.st

    @st.setter
    def st(self, value):
        """set the sound timer, the buzzer starts when it leaves zero and stops when it gets back to it"""
        previous = self.regs.st
        self.regs.st = value
        if previous == 0 and self.regs.st != 0:
            self.buzzer.play()
        elif previous != 0 and self.regs.st == 0:
            self.buzzer.stop()

    @property
    def speed(self):
        """instructions executed per second"""
        return self._speed

    @speed.setter
    def speed(self, value):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValueError(f"Processor speed must be a positive number of Hz, got {value!r}")
        self._speed = value

    # ********** LIFECYCLE
    def reset(self):
        was_sounding = self.regs.st != 0
        self.regs.reset()
        self.stack.clear()
        self.draw = False
        if was_sounding:
            self.buzzer.stop()

    def snapshot(self):
        return ProcessorState(
            pc=self.regs.pc,
            i=self.regs.i,
            v=tuple(self.regs.v),
            dt=self.regs.dt,
            st=self.regs.st,
            sp=self.stack.sp,
            stack=tuple(self.stack),
            speed=self._speed,
        )

    def decrement_timers(self):
        if self.dt > 0:
            self.dt -= 1
        if self.st > 0:
            self.st -= 1

    # ********** CYCLE
    def fetch(self):
        """each instruction is two bytes long, the high byte comes first"""
        return self.mem.read(self.pc) << 8 | self.mem.read(self.pc + 1)

    def step(self):
        """
        emulate one machine cycle: fetch, decode and execute the opcode at PC
        faults leave PC on the faulting instruction and carry its address and opcode
        """
        self.draw = False
        pc, opcode = self.pc, None
        try:
            opcode = self.fetch()
            self._goto_next_instruction()
            instruction = self.catalog.decode(opcode)
            log.debug("0x%04x    %s", pc, instruction)
            self.instructions[instruction.mnemonic](instruction)
        except Chip8Error as err:
            self.pc = pc
            if err.pc is None:
                err.pc = pc
            if err.opcode is None:
                err.opcode = opcode
            raise
        if self.draw:
            self.screen.refresh()
        return instruction

    def _goto_next_instruction(self):
        self.pc += 0x2

    # ********** INSTRUCTIONS
    def _clear_screen(self, ins):
        self.screen.clear()
        self.draw = True

    def _return(self, ins):
        """return from a subroutine"""
        self.pc = self.stack.pop()

    def _jump(self, ins):
        self.pc = ins.nnn

    def _call_addr(self, ins):
        self.stack.push(self.pc)
        self.pc = ins.nnn

    def _skip_if_eq(self, ins):
        if self.v_regs[ins.x] == ins.kk:
            self._goto_next_instruction()

    def _skip_if_not_eq(self, ins):
        if self.v_regs[ins.x] != ins.kk:
            self._goto_next_instruction()

    def _skip_if_eq_regs(self, ins):
        if self.v_regs[ins.x] == self.v_regs[ins.y]:
            self._goto_next_instruction()

    def _skip_if_not_eq_regs(self, ins):
        if self.v_regs[ins.x] != self.v_regs[ins.y]:
            self._goto_next_instruction()

    def _set_vk(self, ins):
        """set the value of one of the 16 variable registers, Vx"""
        self.v_regs[ins.x] = ins.kk

    def _add_to_vk(self, ins):
        """add to the value already present in one of the variable registers, VF is left alone"""
        self.v_regs[ins.x] = (self.v_regs[ins.x] + ins.kk) & 0xFF

    def _set_vx_to_vy(self, ins):
        self.v_regs[ins.x] = self.v_regs[ins.y]

    def _set_vx_or_vy(self, ins):
        self.v_regs[ins.x] |= self.v_regs[ins.y]

    def _set_vx_and_vy(self, ins):
        self.v_regs[ins.x] &= self.v_regs[ins.y]

    def _set_vx_xor_vy(self, ins):
        self.v_regs[ins.x] ^= self.v_regs[ins.y]

    # the flag is always written last so that VF holds it even when it is the destination
    def _add_vx_vy(self, ins):
        """set the value of Vx to Vx + Vy, VF = carry"""
        total = self.v_regs[ins.x] + self.v_regs[ins.y]
        self.v_regs[ins.x] = total & 0xFF
        self.v_regs[0xF] = 1 if total > 0xFF else 0

    def _sub_vx_vy(self, ins):
        """set the value of Vx to Vx - Vy, VF = NOT borrow"""
        vx, vy = self.v_regs[ins.x], self.v_regs[ins.y]
        self.v_regs[ins.x] = (vx - vy) & 0xFF
        self.v_regs[0xF] = 1 if vx >= vy else 0

    def _subn_vx_vy(self, ins):
        """set the value of Vx to Vy - Vx, VF = NOT borrow"""
        vx, vy = self.v_regs[ins.x], self.v_regs[ins.y]
        self.v_regs[ins.x] = (vy - vx) & 0xFF
        self.v_regs[0xF] = 1 if vy >= vx else 0

    def _shr(self, ins):
        """set Vx equal to Vx SHR 1, VF = the bit shifted out"""
        lsb = self.v_regs[ins.x] & 0x1
        self.v_regs[ins.x] >>= 1
        self.v_regs[0xF] = lsb

    def _shl(self, ins):
        """set Vx equal to Vx SHL 1, VF = the bit shifted out"""
        msb = (self.v_regs[ins.x] & 0x80) >> 7
        self.v_regs[ins.x] = (self.v_regs[ins.x] << 1) & 0xFF
        self.v_regs[0xF] = msb

    def _set_idx(self, ins):
        self.idx = ins.nnn

    def _jump_plus(self, ins):
        self.pc = ins.nnn + self.v_regs[0x0]

    def _random_byte_and(self, ins):
        self.v_regs[ins.x] = self.rng.randint(0, 255) & ins.kk

    def _to_screen(self, ins):
        """display n-byte sprite starting at memory location I at (Vx, Vy), set VF = collision"""
        w, h = self.screen.width, self.screen.height
        x, y = self.v_regs[ins.x], self.v_regs[ins.y]
        sprite = self.mem.read_range(self.idx, ins.n)
        collision = 0
        for i, sprite_byte in enumerate(sprite):
            # sprites wrap around both edges of the screen
            y_coordinate = (y + i) % h
            for j in range(8):
                if not sprite_byte & (0x80 >> j):
                    continue
                x_coordinate = (x + j) % w
                # sprites are XORed onto the existing screen,
                # a pixel only gets erased when it was ON and is turned ON again
                if self.screen.get_pixel(x_coordinate, y_coordinate):
                    collision = 1
                    self.screen.set_pixel(x_coordinate, y_coordinate, False)
                else:
                    self.screen.set_pixel(x_coordinate, y_coordinate, True)
        self.v_regs[0xF] = collision
        self.draw = True

    def _skip_if_pressed(self, ins):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is pressed"""
        if self.keypad[self.v_regs[ins.x] & 0xF]:
            self._goto_next_instruction()

    def _skip_if_not_pressed(self, ins):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is NOT pressed"""
        if not self.keypad[self.v_regs[ins.x] & 0xF]:
            self._goto_next_instruction()

    def _set_vx_dt(self, ins):
        self.v_regs[ins.x] = self.dt

    def _wait_keypress(self, ins):
        """wait for a key press and store its value in Vx"""
        if self.keypad.untouched():
            self.pc -= 0x2      # stay on the same instruction until a key is pressed
        else:
            self.v_regs[ins.x] = self.keypad.first()

    def _set_dt_vx(self, ins):
        self.dt = self.v_regs[ins.x]

    def _set_st(self, ins):
        self.st = self.v_regs[ins.x]

    def _add_to_idx(self, ins):
        self.idx += self.v_regs[ins.x]

    def _select_char(self, ins):
        """set I to location of sprite for digit Vx"""
        self.idx = FONT_START_ADDRESS + (self.v_regs[ins.x] & 0xF) * FONT_GLYPH_SIZE

    def _bcd_repr(self, ins):
        """store the hundreds digit of Vx at I, the tens digit at I+1, the ones digit at I+2"""
        value = self.v_regs[ins.x]
        self.mem.write(self.idx, value // 100)
        self.mem.write(self.idx + 1, value // 10 % 10)
        self.mem.write(self.idx + 2, value % 10)

    def _store_vregs(self, ins):
        """store registers V0 through Vx (included) in memory starting at location I"""
        self.mem.write_range(self.idx, self.v_regs[:ins.x + 1])
        if self.options.get(Option.MODIFY_I_ON_FX55_AND_FX65):
            self.idx += ins.x + 1

    def _load_vregs(self, ins):
        """read registers V0 through Vx (included) from memory starting at location I"""
        self.v_regs[:ins.x + 1] = self.mem.read_range(self.idx, ins.x + 1)
        if self.options.get(Option.MODIFY_I_ON_FX55_AND_FX65):
            self.idx += ins.x + 1
