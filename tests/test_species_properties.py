import unittest

from surfkin.species_properties import (
    Species, composition_from_formula, molecular_weight_from_composition)


class TestSpeciesProperties(unittest.TestCase):

    def test_composition_from_formula(self):
        self.assertEqual(composition_from_formula('H2O'), {'H': 2, 'O': 1})
        self.assertEqual(composition_from_formula('CO*'), {'C': 1, 'O': 1})
        self.assertEqual(composition_from_formula('H(S)'), {'H': 1})
        self.assertEqual(composition_from_formula('Li+[elyt]'), {'Li': 1, 'E': -1})
        self.assertEqual(composition_from_formula('PF6-'), {'P': 1, 'F': 6, 'E': 1})
        self.assertEqual(composition_from_formula('electron'), {'E': 1})
        self.assertIsNone(composition_from_formula('PT(S)'))

    def test_molecular_weight(self):
        self.assertAlmostEqual(molecular_weight_from_composition({'N': 2}), 2 * 14.007, places=3)
        self.assertAlmostEqual(Species('H2O').molecular_weight, 2 * 1.008 + 15.999, places=3)
        # ions weigh approximately the same as the neutral
        self.assertAlmostEqual(Species('O2+').molecular_weight, 2 * 15.999, places=2)
        with self.assertRaises(KeyError):
            molecular_weight_from_composition({'Xx': 1})

    def test_charge(self):
        self.assertEqual(Species('Li+[elyt]').charge, 1)
        self.assertEqual(Species('electron').charge, -1)
        self.assertEqual(Species('H2').charge, 0)
        self.assertEqual(Species('X', composition={}, charge=2).charge, 2)

    def test_explicit_values(self):
        sp = Species('PT(S)', composition={'Pt': 1}, size=2.0)
        self.assertAlmostEqual(sp.molecular_weight, 195.08)
        self.assertEqual(sp.size, 2.0)
        self.assertEqual(Species('AR', molecular_weight=39.948).molecular_weight, 39.948)
        with self.assertRaises(ValueError):
            Species('PT(S)')


if __name__ == '__main__':
    unittest.main()
