import re
import string
from enum import Enum
from typing import NamedTuple, Tuple

from chip8.errors import UnknownOpcode


class Mnemonic(Enum):
    CLS = "clear screen"
    RET = "return from subroutine"
    JP = "jump"
    CALL = "call subroutine"
    SE_BYTE = "skip if Vx == byte"
    SNE_BYTE = "skip if Vx != byte"
    SE_REG = "skip if Vx == Vy"
    LD_BYTE = "load byte into Vx"
    ADD_BYTE = "add byte to Vx"
    LD_REG = "copy Vy into Vx"
    OR = "Vx OR Vy"
    AND = "Vx AND Vy"
    XOR = "Vx XOR Vy"
    ADD_REG = "Vx + Vy with carry"
    SUB = "Vx - Vy with borrow"
    SHR = "shift Vx right"
    SUBN = "Vy - Vx with borrow"
    SHL = "shift Vx left"
    SNE_REG = "skip if Vx != Vy"
    LD_I = "load address into I"
    JP_V0 = "jump to address + V0"
    RND = "random byte AND kk"
    DRW = "draw sprite"
    SKP = "skip if key Vx pressed"
    SKNP = "skip if key Vx not pressed"
    LD_VX_DT = "read delay timer"
    LD_VX_K = "wait for key press"
    LD_DT_VX = "set delay timer"
    LD_ST_VX = "set sound timer"
    ADD_I = "add Vx to I"
    LD_F = "font sprite address"
    LD_B = "BCD conversion"
    LD_STORE = "store V0..Vx at I"
    LD_LOAD = "load V0..Vx from I"


class Instruction(NamedTuple):
    """a decoded opcode: the mnemonic and every operand, the operands a mnemonic does not use stay 0"""
    mnemonic: Mnemonic
    opcode: int
    x: int = 0
    y: int = 0
    n: int = 0
    kk: int = 0
    nnn: int = 0
    template: "InstructionTemplate" = None   # the template that decoded it

    def encode(self):
        return self.template.encode(self)

    def __str__(self):
        return self.template.fmt.format(**self._asdict())


# bit position and width of each operand inside the opcode
FIELDS = {
    "x": (8, 0xF),
    "y": (4, 0xF),
    "n": (0, 0xF),
    "kk": (0, 0xFF),
    "nnn": (0, 0xFFF),
}

# how each operand looks in the disassembly
FIELD_PATTERNS = {
    "x": "[0-9A-F]",
    "y": "[0-9A-F]",
    "n": "[0-9A-F]",
    "kk": "[0-9A-F]{2}",
    "nnn": "[0-9A-F]{3}",
}


class InstructionTemplate(NamedTuple):
    mnemonic: Mnemonic
    mask: int
    pattern: int
    fields: Tuple[str, ...]
    fmt: str

    def matches(self, opcode):
        return opcode & self.mask == self.pattern

    def decode(self, opcode):
        operands = {name: (opcode >> FIELDS[name][0]) & FIELDS[name][1] for name in self.fields}
        return Instruction(self.mnemonic, opcode, template=self, **operands)

    def encode(self, instruction):
        opcode = self.pattern
        for name in self.fields:
            shift, width = FIELDS[name]
            opcode |= (getattr(instruction, name) & width) << shift
        return opcode

    def regex(self):
        parts = []
        for literal, field, _, _ in string.Formatter().parse(self.fmt):
            parts.append(re.escape(literal))
            if field is not None:
                parts.append(f"(?P<{field}>{FIELD_PATTERNS[field]})")
        return re.compile("".join(parts), re.IGNORECASE)


def _t(mnemonic, mask, pattern, fields, fmt):
    return InstructionTemplate(mnemonic, mask, pattern, tuple(fields.split()), fmt)


TEMPLATES = (
    _t(Mnemonic.CLS,      0xFFFF, 0x00E0, "",        "CLS"),
    _t(Mnemonic.RET,      0xFFFF, 0x00EE, "",        "RET"),
    _t(Mnemonic.JP,       0xF000, 0x1000, "nnn",     "JP 0x{nnn:03X}"),
    _t(Mnemonic.CALL,     0xF000, 0x2000, "nnn",     "CALL 0x{nnn:03X}"),
    _t(Mnemonic.SE_BYTE,  0xF000, 0x3000, "x kk",    "SE V{x:X}, 0x{kk:02X}"),
    _t(Mnemonic.SNE_BYTE, 0xF000, 0x4000, "x kk",    "SNE V{x:X}, 0x{kk:02X}"),
    _t(Mnemonic.SE_REG,   0xF00F, 0x5000, "x y",     "SE V{x:X}, V{y:X}"),
    _t(Mnemonic.LD_BYTE,  0xF000, 0x6000, "x kk",    "LD V{x:X}, 0x{kk:02X}"),
    _t(Mnemonic.ADD_BYTE, 0xF000, 0x7000, "x kk",    "ADD V{x:X}, 0x{kk:02X}"),
    _t(Mnemonic.LD_REG,   0xF00F, 0x8000, "x y",     "LD V{x:X}, V{y:X}"),
    _t(Mnemonic.OR,       0xF00F, 0x8001, "x y",     "OR V{x:X}, V{y:X}"),
    _t(Mnemonic.AND,      0xF00F, 0x8002, "x y",     "AND V{x:X}, V{y:X}"),
    _t(Mnemonic.XOR,      0xF00F, 0x8003, "x y",     "XOR V{x:X}, V{y:X}"),
    _t(Mnemonic.ADD_REG,  0xF00F, 0x8004, "x y",     "ADD V{x:X}, V{y:X}"),
    _t(Mnemonic.SUB,      0xF00F, 0x8005, "x y",     "SUB V{x:X}, V{y:X}"),
    _t(Mnemonic.SHR,      0xF00F, 0x8006, "x y",     "SHR V{x:X}, V{y:X}"),
    _t(Mnemonic.SUBN,     0xF00F, 0x8007, "x y",     "SUBN V{x:X}, V{y:X}"),
    _t(Mnemonic.SHL,      0xF00F, 0x800E, "x y",     "SHL V{x:X}, V{y:X}"),
    _t(Mnemonic.SNE_REG,  0xF00F, 0x9000, "x y",     "SNE V{x:X}, V{y:X}"),
    _t(Mnemonic.LD_I,     0xF000, 0xA000, "nnn",     "LD I, 0x{nnn:03X}"),
    _t(Mnemonic.JP_V0,    0xF000, 0xB000, "nnn",     "JP V0, 0x{nnn:03X}"),
    _t(Mnemonic.RND,      0xF000, 0xC000, "x kk",    "RND V{x:X}, 0x{kk:02X}"),
    _t(Mnemonic.DRW,      0xF000, 0xD000, "x y n",   "DRW V{x:X}, V{y:X}, 0x{n:X}"),
    _t(Mnemonic.SKP,      0xF0FF, 0xE09E, "x",       "SKP V{x:X}"),
    _t(Mnemonic.SKNP,     0xF0FF, 0xE0A1, "x",       "SKNP V{x:X}"),
    _t(Mnemonic.LD_VX_DT, 0xF0FF, 0xF007, "x",       "LD V{x:X}, DT"),
    _t(Mnemonic.LD_VX_K,  0xF0FF, 0xF00A, "x",       "LD V{x:X}, K"),
    _t(Mnemonic.LD_DT_VX, 0xF0FF, 0xF015, "x",       "LD DT, V{x:X}"),
    _t(Mnemonic.LD_ST_VX, 0xF0FF, 0xF018, "x",       "LD ST, V{x:X}"),
    _t(Mnemonic.ADD_I,    0xF0FF, 0xF01E, "x",       "ADD I, V{x:X}"),
    _t(Mnemonic.LD_F,     0xF0FF, 0xF029, "x",       "LD F, V{x:X}"),
    _t(Mnemonic.LD_B,     0xF0FF, 0xF033, "x",       "LD B, V{x:X}"),
    _t(Mnemonic.LD_STORE, 0xF0FF, 0xF055, "x",       "LD [I], V{x:X}"),
    _t(Mnemonic.LD_LOAD,  0xF0FF, 0xF065, "x",       "LD V{x:X}, [I]"),
)


# ******************** CATALOG
# the high nibble selects the category, the low byte or nibble tells apart the operations of 0x0, 0x5, 0x8, 0x9, 0xE, 0xF
class InstructionCatalog:
    """read-only mapping from opcode patterns to templates, built once"""
    def __init__(self, templates=TEMPLATES):
        self._templates = tuple(templates)
        self._by_mask = {}
        self._by_mnemonic = {}
        for template in self._templates:
            patterns = self._by_mask.setdefault(template.mask, {})
            if template.pattern in patterns:
                raise ValueError(f"Duplicate pattern 0x{template.pattern:04x} for mask 0x{template.mask:04x}")
            patterns[template.pattern] = template
            self._by_mnemonic[template.mnemonic] = template
        self._regexes = [(template.regex(), template) for template in self._templates]

    def __len__(self):
        return len(self._templates)

    def __iter__(self):
        return iter(self._templates)

    def find(self, opcode):
        """return the template matching the opcode or None"""
        for mask, patterns in self._by_mask.items():
            template = patterns.get(opcode & mask)
            if template is not None:
                return template
        return None

    def lookup(self, opcode):
        template = self.find(opcode)
        if template is None:
            raise UnknownOpcode(opcode)
        return template

    def decode(self, opcode):
        return self.lookup(opcode).decode(opcode)

    def template_for(self, mnemonic):
        return self._by_mnemonic[mnemonic]

    def assemble(self, text):
        """turn a line of disassembly back into its opcode"""
        line = " ".join(text.strip().split())
        for regex, template in self._regexes:
            match = regex.fullmatch(line)
            if match:
                operands = {name: int(value, 16) for name, value in match.groupdict().items()}
                return template.encode(Instruction(template.mnemonic, 0, template=template, **operands))
        raise ValueError(f"Cannot assemble {text!r}")


CATALOG = InstructionCatalog()
