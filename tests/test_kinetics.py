"""
test_kinetics.py - Tests for phases, reaction parsing and the kinetics manager
"""
import unittest

import numpy as np

from surfkin.errors import InputError
from surfkin.interface_rate import InterfaceArrheniusRate, StickingArrheniusRate
from surfkin.kinetics import Kinetics, Phase, Reaction, parse_equation_side
from surfkin.species_properties import Species

from tests.test_coverage import SITE_DENSITY, make_electrode_kinetics, make_surface_kinetics


class TestPhase(unittest.TestCase):

    def test_interface_phase(self):
        surf = Phase('surf', [Species('PT(S)', composition={'Pt': 1}),
                              Species('O2*', size=2.0)], 'surface', site_density=SITE_DENSITY)
        self.assertTrue(surf.is_interface)
        self.assertEqual(surf.n_dim, 2)
        np.testing.assert_array_equal(surf.coverages, [1.0, 0.0])
        self.assertAlmostEqual(surf.standard_concentration(1), SITE_DENSITY / 2.0)

        surf.set_coverages({'PT(S)': 3.0, 'O2*': 1.0})
        np.testing.assert_allclose(surf.coverages, [0.75, 0.25])
        with self.assertRaises(InputError):
            surf.set_coverages([1.0, 0.0, 0.0])
        with self.assertRaises(InputError):
            surf.set_coverages({'H*': 1.0})

    def test_bulk_phase(self):
        gas = Phase('gas', [Species('H2')], 'gas', standard_concentration=0.04)
        self.assertFalse(gas.is_interface)
        self.assertEqual(gas.n_dim, 3)
        self.assertEqual(gas.standard_concentration(0), 0.04)
        self.assertEqual(Phase('edge', [], 'edge', site_density=1e-9).n_dim, 1)

    def test_invalid_phase(self):
        with self.assertRaises(InputError):
            Phase('surf', [Species('H*')], 'surface')
        with self.assertRaises(InputError):
            Phase('plasma', [Species('H')], 'plasma')


class TestReaction(unittest.TestCase):

    def test_parse_equation_side(self):
        self.assertEqual(parse_equation_side('2 O* + CO'), {'O*': 2.0, 'CO': 1.0})
        self.assertEqual(parse_equation_side('Li+[elyt] + electron'),
                         {'Li+[elyt]': 1.0, 'electron': 1.0})
        self.assertEqual(parse_equation_side('O* + O*'), {'O*': 2.0})

    def test_parse_equation(self):
        rxn = Reaction('H2 + 2 PT(S) => 2 H(S)')
        self.assertEqual(rxn.reactants, {'H2': 1.0, 'PT(S)': 2.0})
        self.assertEqual(rxn.products, {'H(S)': 2.0})
        self.assertFalse(rxn.reversible)
        self.assertEqual(rxn.equation, 'H2 + 2 PT(S) => 2 H(S)')

        self.assertTrue(Reaction('CO* <=> CO + PT(S)').reversible)
        self.assertTrue(Reaction('CO* = CO + PT(S)').reversible)
        with self.assertRaises(InputError):
            Reaction('CO* -> CO + PT(S)')

    def test_from_stoichiometry(self):
        rxn = Reaction(reactants={'CO': 1, 'PT(S)': 1}, products={'CO*': 1}, reversible=False)
        self.assertEqual(rxn.equation, 'CO + PT(S) => CO*')
        with self.assertRaises(InputError):
            Reaction(reactants={'CO': 1})

    def test_uses_electrochemistry(self):
        self.assertTrue(Reaction('Li+[elyt] + electron => Li(S)')
                        .uses_electrochemistry(make_electrode_kinetics()))
        self.assertFalse(Reaction('CO + PT(S) => CO*')
                         .uses_electrochemistry(make_surface_kinetics()))

    def test_rate_units(self):
        kinetics = make_surface_kinetics()
        # two surface reactants: kmol/m^2/s / (kmol/m^2)^2
        self.assertEqual(Reaction('CO* + O* => CO + O + PT(S)').rate_units(kinetics),
                         {'quantity': -1.0, 'length': 2.0, 'time': -1.0})
        # one surface and one gas reactant
        self.assertEqual(Reaction('CO + O* => CO* + O').rate_units(kinetics),
                         {'quantity': -1.0, 'length': 3.0, 'time': -1.0})
        # first order surface reaction
        self.assertEqual(Reaction('CO* => CO + PT(S)').rate_units(kinetics), {'time': -1.0})


class TestKinetics(unittest.TestCase):

    def setUp(self):
        self.kinetics = make_surface_kinetics()

    def test_species_indexing(self):
        kin = self.kinetics
        self.assertEqual(kin.n_phases, 2)
        self.assertEqual(kin.n_total_species, 6)
        self.assertEqual(kin.reaction_phase_index, 1)
        self.assertEqual(kin.interface.name, 'surf')
        self.assertEqual(kin.kinetics_species_index('CO*'), 4)
        self.assertEqual(kin.kinetics_species_name(2), 'AR')
        self.assertEqual(kin.species_phase_index(2), 0)
        self.assertEqual(kin.species_phase_index(3), 1)
        self.assertEqual(kin.phase_index('gas'), 0)
        with self.assertRaises(InputError):
            kin.kinetics_species_index('CO2')
        with self.assertRaises(InputError):
            kin.phase_index('bulk')

    def test_standard_concentrations(self):
        np.testing.assert_allclose(self.kinetics.standard_concentrations(),
                                   [1.0, 1.0, 1.0, SITE_DENSITY, SITE_DENSITY, SITE_DENSITY])

    def test_requires_interface(self):
        with self.assertRaises(InputError):
            Kinetics([Phase('gas', [Species('H2')], 'gas')])
        with self.assertRaises(InputError):
            Kinetics([Phase('gas', [Species('H2')], 'gas'),
                      Phase('surf', [Species('H2')], 'surface', site_density=1e-8)])

    def test_add_reaction(self):
        rate = InterfaceArrheniusRate({'rate-constant': [1.0e13, 0, 0]})
        index = self.kinetics.add_reaction(Reaction('CO* => CO + PT(S)', rate=rate))
        self.assertEqual(index, 0)
        rate = StickingArrheniusRate({'sticking-coefficient': [0.1, 0, 0]})
        self.assertEqual(self.kinetics.add_reaction(Reaction('CO + PT(S) => CO*', rate=rate)), 1)
        self.assertEqual(self.kinetics.n_reactions, 2)

        self.kinetics.update_rates(300.0, [0.5, 0.5, 0.0])
        kf = self.kinetics.get_fwd_rate_constants()
        self.assertEqual(kf.shape, (2,))
        self.assertAlmostEqual(kf[0], 1.0e13)
        self.assertTrue(kf[1] > 0)

    def test_invalid_reactions(self):
        rate = InterfaceArrheniusRate({'rate-constant': [1.0e13, 0, 0]})
        with self.assertRaises(InputError):
            self.kinetics.add_reaction(Reaction('CO2* => CO2 + PT(S)', rate=rate))
        with self.assertRaises(InputError):
            self.kinetics.add_reaction(Reaction('CO* => CO + PT(S)'))
        rate = InterfaceArrheniusRate({'rate-constant': [1.0e13, 0, 0],
                                       'coverage-dependencies': {'H*': [1.0, 0, 0]}})
        with self.assertRaises(InputError):
            self.kinetics.add_reaction(Reaction('CO* => CO + PT(S)', rate=rate))
        self.assertEqual(self.kinetics.n_reactions, 0)

    def test_wrong_number_of_coverages(self):
        with self.assertRaises(ValueError):
            self.kinetics.update_rates(300.0, [1.0, 0.0])


if __name__ == '__main__':
    unittest.main()
