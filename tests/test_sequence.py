from os import path
import peptag
peptag.__path__ = [path.abspath(path.join(path.dirname(__file__), path.pardir, 'peptag'))]
import unittest
from peptag.sequence import ConcreteSequence, minimal_mass, has_combination
from peptag.alphabet import MatchingType, std_aa_mass
from peptag.modification import ModificationMatch, ModificationTable, Modification
from peptag.auxiliary import PeptagError, UnknownResidueError, UnknownModificationError


class SequenceTest(unittest.TestCase):
    def setUp(self):
        self.seq = ConcreteSequence('pepMIDE', [ModificationMatch('Oxidation', 4)])

    def test_init(self):
        self.assertEqual(self.seq.sequence, 'PEPMIDE')
        self.assertEqual(len(self.seq), 7)
        self.assertEqual(str(self.seq), 'PEPMIDE')
        self.assertRaises(UnknownResidueError, ConcreteSequence, 'PEP1')
        self.assertRaises(PeptagError, ConcreteSequence, 'PEP', [ModificationMatch('Oxidation', 5)])

    def test_mass(self):
        expected = sum(std_aa_mass[c] for c in 'PEPMIDE') + 15.994915
        self.assertAlmostEqual(self.seq.mass(), expected)
        table = ModificationTable([Modification('Oxidation', 16., pattern='M')])
        self.assertAlmostEqual(self.seq.mass(modifications=table), expected - 15.994915 + 16.)
        self.assertRaises(UnknownModificationError, self.seq.mass, ModificationTable())

    def test_copy_is_deep(self):
        other = self.seq.copy()
        other.modification_matches()[0].site = 1
        self.assertEqual(self.seq.modification_sites(), [4])

    def test_append_cterm(self):
        other = ConcreteSequence('KR', [ModificationMatch('Deamidated', 1)])
        self.seq.append_cterm(other)
        self.assertEqual(self.seq.sequence, 'PEPMIDEKR')
        self.assertEqual(self.seq.indexed_modifications(), {4: 'Oxidation', 8: 'Deamidated'})
        self.assertEqual(other.modification_sites(), [1])

    def test_append_nterm(self):
        self.seq.append_nterm(ConcreteSequence('GG', [ModificationMatch('Acetyl', 0)]))
        self.assertEqual(self.seq.sequence, 'GGPEPMIDE')
        self.assertEqual(self.seq.indexed_modifications(), {0: 'Acetyl', 6: 'Oxidation'})

    def test_insert(self):
        self.seq.insert(3, 'AAA')
        self.assertEqual(self.seq.sequence, 'PEPAAAMIDE')
        self.assertEqual(self.seq.modification_sites(), [7])
        self.assertEqual(self.seq.residue_at(6), 'M')
        self.seq.insert(10, ConcreteSequence('K'))
        self.assertEqual(self.seq.sequence, 'PEPAAAMIDEK')
        self.assertEqual(self.seq.modification_sites(), [7])

    def test_insert_shifts_terminal_modification(self):
        seq = ConcreteSequence('PEP', [ModificationMatch('Amidated', 4), ModificationMatch('Acetyl', 0)])
        seq.insert(1, 'GG')
        self.assertEqual(seq.indexed_modifications(), {0: 'Acetyl', 6: 'Amidated'})

    def test_insert_errors(self):
        self.assertRaises(PeptagError, self.seq.insert, 8, 'K')
        inner = ConcreteSequence('GG', [ModificationMatch('Acetyl', 0)])
        self.assertRaises(PeptagError, self.seq.insert, 2, inner)
        self.assertEqual(self.seq.sequence, 'PEPMIDE')

    def test_reverse(self):
        seq = ConcreteSequence('PEPM', [ModificationMatch('Oxidation', 4), ModificationMatch('Acetyl', 0)])
        rev = seq.reverse()
        self.assertEqual(rev.sequence, 'MPEP')
        self.assertEqual(rev.indexed_modifications(), {1: 'Oxidation', 5: 'Acetyl'})
        self.assertEqual(seq.indexed_modifications(), {0: 'Acetyl', 4: 'Oxidation'})

    def test_indexed_modifications_collision(self):
        self.seq.add_modification_match(ModificationMatch('Phospho', 4))
        self.assertRaises(PeptagError, self.seq.indexed_modifications)

    def test_set_residue(self):
        self.seq.set_residue(0, 'a')
        self.assertEqual(self.seq.sequence, 'AEPMIDE')
        self.assertRaises(PeptagError, self.seq.set_residue, 7, 'A')
        self.assertRaises(UnknownResidueError, self.seq.set_residue, 0, '1')


class AmbiguityTest(unittest.TestCase):
    def test_expansions(self):
        seq = ConcreteSequence('BAZ', [ModificationMatch('Deamidated', 1)])
        expansions = [s.sequence for s in seq.ambiguity_expansions()]
        self.assertEqual(expansions, ['DAE', 'DAQ', 'NAE', 'NAQ'])
        for s in seq.ambiguity_expansions():
            self.assertEqual(s.modification_sites(), [1])

    def test_expansions_restart(self):
        seq = ConcreteSequence('JK')
        first = seq.ambiguity_expansions()
        next(first)
        self.assertEqual([s.sequence for s in seq.ambiguity_expansions()], ['IK', 'LK'])
        self.assertEqual([s.sequence for s in first], ['LK'])

    def test_no_ambiguity(self):
        seq = ConcreteSequence('PEPTIDE')
        self.assertFalse(seq.has_combination())
        self.assertEqual([s.sequence for s in seq.ambiguity_expansions()], ['PEPTIDE'])
        self.assertEqual(len(list(ConcreteSequence('XX').ambiguity_expansions())), 22 ** 2)

    def test_minimal_mass(self):
        self.assertAlmostEqual(minimal_mass('B'), std_aa_mass['N'])
        self.assertAlmostEqual(minimal_mass('Z'), std_aa_mass['Q'])
        self.assertAlmostEqual(minimal_mass('XK'), std_aa_mass['G'] + std_aa_mass['K'])
        self.assertAlmostEqual(minimal_mass(ConcreteSequence('PEP')), ConcreteSequence('PEP').mass())
        self.assertTrue(has_combination('PEPJ'))
        self.assertFalse(has_combination('PEP'))


class SequenceMatchingTest(unittest.TestCase):
    def test_first_index(self):
        seq = ConcreteSequence('TIDE')
        self.assertEqual(seq.first_index('PEPTIDE'), 3)
        self.assertIsNone(seq.first_index('PEPTLDE'))
        self.assertEqual(seq.first_index('PEPTLDE', MatchingType.isobaric), 3)
        self.assertTrue(seq.matches_in('PEPTIDE'))
        self.assertTrue(ConcreteSequence('PEBTIDE').matches('PEPTIDE'[:2] + 'DTIDE', MatchingType.chemical))
        self.assertFalse(seq.matches('PEPTIDE'))

    def test_as_pattern(self):
        seq = ConcreteSequence('PEM', [ModificationMatch('Oxidation', 3)])
        p = seq.as_pattern()
        self.assertEqual(p.to_literal(), 'PEM')
        self.assertEqual(p.modification_sites(), [3])

    def test_same_as(self):
        s1 = ConcreteSequence('PEMM', [ModificationMatch('Oxidation', 3)])
        s2 = ConcreteSequence('PEMM', [ModificationMatch('Oxidation', 4)])
        self.assertTrue(s1.is_same_as(s1.copy()))
        self.assertFalse(s1.is_same_as(s2))
        self.assertTrue(s1.is_same_sequence_and_modification_status_as(s2))
        self.assertFalse(s1.is_same_sequence_and_modification_status_as('PEMM'))
        self.assertFalse(s1.is_same_as(None))


if __name__ == '__main__':
    unittest.main()
