from os import path
import peptag
peptag.__path__ = [path.abspath(path.join(path.dirname(__file__), path.pardir, 'peptag'))]
import unittest
from peptag.modification import (Modification, ModificationKind, ModificationMatch,
        ModificationTable, std_modifications)
from peptag.pattern import PositionalPattern
from peptag.auxiliary import PeptagError, UnknownModificationError


class ModificationTableTest(unittest.TestCase):
    def test_std_modifications(self):
        self.assertAlmostEqual(std_modifications.resolve('Oxidation').mass, 15.994915)
        self.assertAlmostEqual(std_modifications.mass('Phospho'), 79.966331)
        self.assertEqual(std_modifications['Acetyl'].kind, ModificationKind.n_term_protein)
        self.assertIn('Gln->pyro-Glu', std_modifications)

    def test_unknown(self):
        self.assertRaises(UnknownModificationError, std_modifications.resolve, 'Methyl')
        self.assertRaises(LookupError, std_modifications.mass, 'Methyl')
        self.assertIsNone(std_modifications.get('Methyl'))

    def test_add(self):
        table = ModificationTable()
        mod = table.add(Modification('Methyl', 14.01565, pattern='[KR]'))
        self.assertIs(table.resolve('Methyl'), mod)
        self.assertEqual(len(table), 1)


class ModificationTest(unittest.TestCase):
    def test_lazy_pattern(self):
        mod = Modification('Phospho', 79.966331, pattern='[sty]')
        self.assertIsInstance(mod.pattern, PositionalPattern)
        self.assertEqual(mod.pattern.residues_at(0), ('S', 'T', 'Y'))
        self.assertIs(mod.pattern, mod.pattern)
        self.assertIsNone(std_modifications['Amidated'].pattern)

    def test_short_name(self):
        self.assertEqual(std_modifications['Oxidation'].short_name, 'ox')
        self.assertEqual(Modification('Methyl', 14.01565, pattern='K').short_name, 'Methyl')

    def test_pattern_required(self):
        self.assertRaises(PeptagError, Modification, 'Bad', 1., ModificationKind.aa)
        self.assertRaises(PeptagError, Modification, 'Bad', 1., ModificationKind.c_term_protein_aa)
        Modification('Good', 1., ModificationKind.c_term_protein)

    def test_kinds(self):
        self.assertTrue(ModificationKind.n_term_peptide_aa.is_n_terminal)
        self.assertFalse(ModificationKind.n_term_peptide_aa.is_c_terminal)
        self.assertTrue(ModificationKind.c_term_protein.is_c_terminal)
        self.assertFalse(ModificationKind.aa.is_terminal)
        self.assertTrue(ModificationKind.aa.needs_residue)
        self.assertFalse(ModificationKind.n_term_protein.needs_residue)
        self.assertEqual(len(ModificationKind), 9)


class ModificationMatchTest(unittest.TestCase):
    def test_copy(self):
        m = ModificationMatch('Oxidation', 3, variable=False, confident=True)
        c = m.copy()
        self.assertEqual(m, c)
        self.assertIsNot(m, c)
        self.assertTrue(c.confident)
        moved = m.copy(site=5)
        self.assertEqual(moved.site, 5)
        self.assertNotEqual(m, moved)
        self.assertEqual(m.site, 3)

    def test_equality(self):
        self.assertEqual(ModificationMatch('Oxidation', 3), ModificationMatch('Oxidation', 3))
        self.assertNotEqual(ModificationMatch('Oxidation', 3), ModificationMatch('Oxidation', 3, variable=False))
        self.assertEqual(len({ModificationMatch('Phospho', 1), ModificationMatch('Phospho', 1)}), 1)


if __name__ == '__main__':
    unittest.main()
