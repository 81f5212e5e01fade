"""listing of a memory range: address, raw word, instruction and a picture of the word's bits as sprite rows"""

from chip8.config import ROM_START_ADDRESS

INSTRUCTION_WIDTH = 17


def drawing_bytes(word):
    """show the high and low byte of a word as two pixel rows folded in one line of half blocks"""
    cells = []
    for bit in range(8):
        top = word & (0x8000 >> bit)
        bottom = word & (0x80 >> bit)
        if top:
            cells.append("█" if bottom else "▀")
        else:
            cells.append("▄" if bottom else " ")
    return "".join(cells)


def end_address(view, start=ROM_START_ADDRESS):
    """last non zero address after `start`, rounded up to a whole instruction, where the program most likely ends"""
    end = view.memory_size - 1
    memory = view.memory()
    while end > start and memory[end] == 0:
        end -= 1
    if (end - start) % 2 == 0 and end + 1 < view.memory_size:
        end += 1
    return end


def disassemble(view, start=ROM_START_ADDRESS, end=None):
    """
    return the listing lines of memory from `start` to `end` (included), two bytes at a time;
    a trailing odd byte is shown alone, words that are no instruction are shown as data
    """
    if end is None:
        end = end_address(view, start)
    memory = view.memory()
    catalog = view.catalog
    lines = []
    for address in range(start, end + 1, 2):
        if address == end:
            raw = f"{memory[end]:02X}  "
            text = ""
            word = memory[end] << 8
        else:
            word = memory[address] << 8 | memory[address + 1]
            template = catalog.find(word)
            raw = f"{word:04X}"
            text = str(template.decode(word)) if template else f"DW 0x{word:04X}"
        lines.append(f"0x{address:04X}:  0x{raw}  {text:<{INSTRUCTION_WIDTH}}  {drawing_bytes(word)}")
    return lines
