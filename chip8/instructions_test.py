import unittest

from chip8.errors import UnknownOpcode
from chip8.instructions import CATALOG, Instruction, InstructionCatalog, Mnemonic, TEMPLATES


class TestLookup(unittest.TestCase):
    def test_one_template_per_mnemonic(self):
        self.assertEqual(len(CATALOG), len(Mnemonic))
        self.assertEqual({t.mnemonic for t in CATALOG}, set(Mnemonic))

    def test_templates_never_overlap(self):
        for opcode in range(0x10000):
            matching = [t for t in TEMPLATES if t.matches(opcode)]
            self.assertLessEqual(len(matching), 1, f"0x{opcode:04x} matches {matching}")
            found = CATALOG.find(opcode)
            self.assertEqual(found, matching[0] if matching else None)

    def test_documented_opcodes(self):
        expected = {
            0x00E0: Mnemonic.CLS,
            0x00EE: Mnemonic.RET,
            0x1234: Mnemonic.JP,
            0x2345: Mnemonic.CALL,
            0x3A12: Mnemonic.SE_BYTE,
            0x4A12: Mnemonic.SNE_BYTE,
            0x5AB0: Mnemonic.SE_REG,
            0x6A12: Mnemonic.LD_BYTE,
            0x7A12: Mnemonic.ADD_BYTE,
            0x8AB0: Mnemonic.LD_REG,
            0x8AB1: Mnemonic.OR,
            0x8AB2: Mnemonic.AND,
            0x8AB3: Mnemonic.XOR,
            0x8AB4: Mnemonic.ADD_REG,
            0x8AB5: Mnemonic.SUB,
            0x8AB6: Mnemonic.SHR,
            0x8AB7: Mnemonic.SUBN,
            0x8ABE: Mnemonic.SHL,
            0x9AB0: Mnemonic.SNE_REG,
            0xA123: Mnemonic.LD_I,
            0xB123: Mnemonic.JP_V0,
            0xCA12: Mnemonic.RND,
            0xDAB5: Mnemonic.DRW,
            0xEA9E: Mnemonic.SKP,
            0xEAA1: Mnemonic.SKNP,
            0xFA07: Mnemonic.LD_VX_DT,
            0xFA0A: Mnemonic.LD_VX_K,
            0xFA15: Mnemonic.LD_DT_VX,
            0xFA18: Mnemonic.LD_ST_VX,
            0xFA1E: Mnemonic.ADD_I,
            0xFA29: Mnemonic.LD_F,
            0xFA33: Mnemonic.LD_B,
            0xFA55: Mnemonic.LD_STORE,
            0xFA65: Mnemonic.LD_LOAD,
        }
        for opcode, mnemonic in expected.items():
            self.assertEqual(CATALOG.lookup(opcode).mnemonic, mnemonic, f"0x{opcode:04x}")

    def test_unknown(self):
        for opcode in (0xFFFF, 0x0123, 0x5AB1, 0x8AB8, 0x9AB1, 0xEA00, 0xF0FF):
            with self.assertRaises(UnknownOpcode) as ctx:
                CATALOG.decode(opcode)
            self.assertEqual(ctx.exception.opcode, opcode)

    def test_duplicate_pattern_rejected(self):
        with self.assertRaises(ValueError):
            InstructionCatalog(TEMPLATES + TEMPLATES[:1])


class TestOperands(unittest.TestCase):
    def test_canonical_positions(self):
        self.assertEqual(CATALOG.decode(0xD125), Instruction(Mnemonic.DRW, 0xD125, x=1, y=2, n=5,
                                     template=CATALOG.template_for(Mnemonic.DRW)))
        self.assertEqual(CATALOG.decode(0x6C3F), Instruction(Mnemonic.LD_BYTE, 0x6C3F, x=0xC, kk=0x3F,
                                     template=CATALOG.template_for(Mnemonic.LD_BYTE)))
        self.assertEqual(CATALOG.decode(0xAFED).nnn, 0xFED)
        self.assertEqual(CATALOG.decode(0xF733).x, 7)

    def test_format(self):
        self.assertEqual(str(CATALOG.decode(0x00E0)), "CLS")
        self.assertEqual(str(CATALOG.decode(0x1200)), "JP 0x200")
        self.assertEqual(str(CATALOG.decode(0x6A0F)), "LD VA, 0x0F")
        self.assertEqual(str(CATALOG.decode(0x8AB4)), "ADD VA, VB")
        self.assertEqual(str(CATALOG.decode(0xD01F)), "DRW V0, V1, 0xF")
        self.assertEqual(str(CATALOG.decode(0xF355)), "LD [I], V3")
        self.assertEqual(str(CATALOG.decode(0xF365)), "LD V3, [I]")

    def test_encode(self):
        for opcode in (0x00EE, 0x2ABC, 0x5120, 0x8E3E, 0xC7AA, 0xE19E, 0xFF1E):
            self.assertEqual(CATALOG.decode(opcode).encode(), opcode)

    def test_format_then_assemble(self):
        for template in CATALOG:
            for operands in (0x000, 0x5A3, 0xFFF):
                opcode = template.pattern | (operands & ~template.mask & 0xFFFF)
                text = str(CATALOG.decode(opcode))
                self.assertEqual(CATALOG.assemble(text), opcode, text)

    def test_assemble_is_lenient_on_case_and_spaces(self):
        self.assertEqual(CATALOG.assemble("  ld   va,  0x0f "), 0x6A0F)

    def test_assemble_garbage(self):
        with self.assertRaises(ValueError):
            CATALOG.assemble("MOV A, B")

    def test_formatted_by_the_catalog_that_decoded_it(self):
        lowercase = InstructionCatalog(t._replace(fmt=t.fmt.lower()) if t.mnemonic == Mnemonic.JP else t for t in TEMPLATES)
        instruction = lowercase.decode(0x1ABC)
        self.assertEqual(str(instruction), "jp 0xabc")
        self.assertEqual(str(CATALOG.decode(0x1ABC)), "JP 0xABC")
        self.assertEqual(instruction.encode(), 0x1ABC)


if __name__ == "__main__":
    unittest.main()
