from chip8.computer import Computer, ComputerView
from chip8.config import Option
from chip8.devices import Buzzer, Display, Framebuffer, Keypad, SilentBuzzer
from chip8.errors import (
    Chip8Error, OutOfRange, ProgramTooLarge, StackOverflow, StackUnderflow, UnknownOpcode,
)
from chip8.instructions import CATALOG, Instruction, InstructionCatalog, InstructionTemplate, Mnemonic
from chip8.memory import Memory
from chip8.oscillator import ManualTickSource, Oscillator, OscillatorState, TickSource
from chip8.processor import Processor, ProcessorState
from chip8.registers import Registers, Stack
