"""faults raised by the interpreter engine, none of them is retried"""


class Chip8Error(Exception):
    """
    base class of every CHIP-8 fault
    pc and opcode are filled in by the processor when the fault happens inside a cycle
    """
    def __init__(self, message, pc=None, opcode=None):
        super().__init__(message)
        self.pc = pc
        self.opcode = opcode

    def __str__(self):
        msg = super().__str__()
        context = []
        if self.pc is not None:
            context.append(f"pc=0x{self.pc:04X}")
        if self.opcode is not None:
            context.append(f"opcode=0x{self.opcode:04X}")
        if context:
            return f"{msg} ({', '.join(context)})"
        return msg


class OutOfRange(Chip8Error, IndexError):
    def __init__(self, address, size=None, **kwargs):
        if size is None:
            message = f"Memory address 0x{address:04X} is out of range"
        else:
            message = f"Memory address 0x{address:04X} is out of range (0x0000-0x{size - 1:04X})"
        super().__init__(message, **kwargs)
        self.address = address


class UnknownOpcode(Chip8Error):
    def __init__(self, opcode, **kwargs):
        kwargs.setdefault("opcode", opcode)
        super().__init__(f"Unknown opcode 0x{opcode:04X}", **kwargs)


class StackOverflow(Chip8Error, IndexError):
    def __init__(self, capacity, **kwargs):
        super().__init__(f"The CHIP-8 stack can contain at most {capacity} addresses. Limit exceeded", **kwargs)


class StackUnderflow(Chip8Error, IndexError):
    def __init__(self, **kwargs):
        super().__init__("Return from subroutine with an empty stack", **kwargs)


class ProgramTooLarge(Chip8Error):
    def __init__(self, length, limit, **kwargs):
        super().__init__(f"The program is {length} bytes long but at most {limit} bytes fit in memory", **kwargs)
        self.length = length
        self.limit = limit
