from chip8.config import REGISTER_COUNT, ROM_START_ADDRESS, STACK_SIZE
from chip8.errors import StackOverflow, StackUnderflow


# ********** WRAPS A LIST TO REPRESENT A STACK WITH A LIMITED SIZE OF 16 ADDRESSES
class Stack:
    def __init__(self, capacity=STACK_SIZE):
        self.capacity = capacity
        self.addr_list = []

    @property
    def sp(self):
        """stack pointer, the number of return addresses currently stored"""
        return len(self.addr_list)

    def __len__(self):
        return len(self.addr_list)

    def __iter__(self):
        return iter(self.addr_list)

    def __repr__(self):
        addresses = ", ".join(f"0x{a:04x}" for a in self.addr_list)
        return f"[{addresses}]"

    def push(self, address):
        if len(self.addr_list) >= self.capacity:
            raise StackOverflow(self.capacity)
        self.addr_list.append(address & 0xFFFF)

    def pop(self):
        if not self.addr_list:
            raise StackUnderflow()
        return self.addr_list.pop()

    def peek(self):
        if not self.addr_list:
            raise StackUnderflow()
        return self.addr_list[-1]

    def clear(self):
        self.addr_list.clear()


class Registers:
    """V0-VF, the index register I, the program counter and both timers, every write is masked to its width"""
    def __init__(self):
        self.v = [0] * REGISTER_COUNT
        self._i = 0
        self._pc = ROM_START_ADDRESS
        self._dt = 0
        self._st = 0

    @property
    def i(self):
        return self._i

    @i.setter
    def i(self, value):
        self._i = value & 0xFFFF

    @property
    def pc(self):
        return self._pc

    @pc.setter
    def pc(self, value):
        self._pc = value & 0xFFFF

    @property
    def dt(self):
        return self._dt

    @dt.setter
    def dt(self, value):
        self._dt = value & 0xFF

    @property
    def st(self):
        return self._st

    @st.setter
    def st(self, value):
        self._st = value & 0xFF

    def reset(self):
        self.v[:] = [0] * REGISTER_COUNT
        self._i = 0
        self._pc = ROM_START_ADDRESS
        self._dt = 0
        self._st = 0

    def __str__(self):
        regs = " ".join(f"V{n:X}={value:02x}" for n, value in enumerate(self.v))
        return f"PC={self._pc:04x} I={self._i:04x} DT={self._dt:02x} ST={self._st:02x} {regs}"
