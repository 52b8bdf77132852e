"""
test_coverage.py - Tests for coverage dependencies, electrochemistry and sticking state
"""
import math
import unittest

import numpy as np

from surfkin.constants import FARADAY, GAS_CONSTANT, PI
from surfkin.coverage import CoverageBase, CoverageData, StickingCoverage
from surfkin.errors import InputError
from surfkin.kinetics import Kinetics, Phase, Reaction
from surfkin.node import RateNode
from surfkin.species_properties import Species
from surfkin.units import UnitSystem

SITE_DENSITY = 2.7e-8  # kmol/m^2


def make_surface_kinetics(motz_wise=False):
    gas = Phase('gas', [Species('CO'), Species('O2'),
                        Species('AR', composition={'Ar': 1})], 'gas')
    surf = Phase('surf', [Species('PT(S)', composition={'Pt': 1}), Species('CO*'),
                          Species('O*')], 'surface', site_density=SITE_DENSITY)
    return Kinetics([gas, surf], motz_wise=motz_wise)


def make_electrode_kinetics():
    metal = Phase('metal', [Species('electron')], 'solid')
    elyt = Phase('elyt', [Species('Li+[elyt]')], 'liquid')
    surf = Phase('surf', [Species('Li(S)')], 'surface', site_density=1.0e-8)
    return Kinetics([metal, elyt, surf])


class TestCoverageData(unittest.TestCase):

    def test_update(self):
        data = CoverageData()
        self.assertFalse(data.ready)
        self.assertTrue(data.update(500.0, coverages=[0.75, 0.25, 0.0]))
        self.assertAlmostEqual(data.logT, math.log(500.0))
        self.assertAlmostEqual(data.recipT, 1 / 500.0)
        self.assertAlmostEqual(data.sqrtT, math.sqrt(500.0))
        self.assertAlmostEqual(data.log_coverages[0], math.log(0.75))
        # zero coverage is floored instead of giving -inf
        self.assertTrue(np.isfinite(data.log_coverages[2]))
        self.assertFalse(data.ready)

        self.assertFalse(data.update(500.0, coverages=[0.75, 0.25, 0.0]))
        self.assertTrue(data.update(500.0, density=SITE_DENSITY))
        self.assertTrue(data.ready)
        self.assertEqual(data.density, SITE_DENSITY)

    def test_invalid_temperature(self):
        with self.assertRaises(ValueError):
            CoverageData().update(0.0)


class TestCoverageDependencies(unittest.TestCase):

    def setUp(self):
        self.cov = CoverageBase()
        self.data = CoverageData()
        self.data.update(600.0, coverages=[0.5, 0.3, 0.2], density=SITE_DENSITY)

    def test_sums(self):
        self.cov.set_coverage_dependencies({
            'CO*': {'a': 1.0, 'm': 2.0, 'E': 0},
            'O*': [0.0, 0.0, 8314.0],
        })
        self.cov.set_species(['PT(S)', 'CO*', 'O*'])
        self.cov.update_from_struct(self.data)
        self.assertAlmostEqual(self.cov.acov, 0.3)
        self.assertAlmostEqual(self.cov.mcov, 2.0 * math.log(0.3))
        self.assertAlmostEqual(self.cov.ecov, 0.2 * 8314.0 / GAS_CONSTANT)
        self.assertEqual(self.cov.site_density, SITE_DENSITY)

    def test_unlisted_species_contribute_nothing(self):
        self.cov.add_coverage_dependence('O*', 0.5, 0.0, 0.0)
        self.cov.set_species(['PT(S)', 'CO*', 'O*'])
        self.cov.update_from_struct(self.data)
        self.assertAlmostEqual(self.cov.acov, 0.1)
        self.assertEqual(self.cov.mcov, 0.0)
        self.assertEqual(self.cov.ecov, 0.0)

    def test_unresolved_species_give_nan(self):
        self.cov.add_coverage_dependence('O*', 0.5, 0.0, 0.0)
        self.cov.update_from_struct(self.data)
        self.assertTrue(math.isnan(self.cov.acov))
        self.assertTrue(math.isnan(self.cov.ecov))
        self.assertTrue(math.isnan(self.cov.mcov))

        # adding a dependence after resolution invalidates it again
        self.cov.set_species(['PT(S)', 'CO*', 'O*'])
        self.cov.add_coverage_dependence('CO*', 0.1, 0.0, 0.0)
        self.cov.update_from_struct(self.data)
        self.assertTrue(math.isnan(self.cov.acov))

    def test_unknown_species(self):
        self.cov.add_coverage_dependence('H*', 0.5, 0.0, 0.0)
        with self.assertRaises(InputError):
            self.cov.set_species(['PT(S)', 'CO*', 'O*'])

    def test_duplicate_species_replaces(self):
        self.cov.add_coverage_dependence('O*', 0.5, 0.0, 0.0)
        with self.assertLogs('surfkin.coverage', level='WARNING'):
            self.cov.add_coverage_dependence('O*', 2.0, 0.0, 0.0)
        self.assertEqual(self.cov.coverage_species, ['O*'])
        self.cov.set_species(['PT(S)', 'CO*', 'O*'])
        self.cov.update_from_struct(self.data)
        self.assertAlmostEqual(self.cov.acov, 0.4)

    def test_malformed_dependency(self):
        with self.assertRaises(InputError):
            self.cov.set_coverage_dependencies({'O*': {'a': 1.0, 'm': 0.0}})
        with self.assertRaises(InputError):
            self.cov.set_coverage_dependencies({'O*': [1.0, 0.0]})

    def test_parameters_round_trip(self):
        units = UnitSystem({'quantity': 'mol'})
        node = RateNode({'coverage-dependencies': {'CO*': {'a': 1.0, 'm': -1, 'E': '10 kJ/mol'}},
                         'beta': 0.4}, units)
        self.cov.set_parameters(node)
        out = {}
        self.cov.get_parameters(out)
        dep = out['coverage-dependencies']['CO*']
        self.assertEqual(dep['a'], 1.0)
        self.assertEqual(dep['m'], -1.0)
        self.assertAlmostEqual(dep['E'] / 1.0e7, 1.0, places=10)
        self.assertEqual(out['beta'], 0.4)
        self.assertNotIn('charge-transfer', out)

        vector = {}
        self.cov.get_coverage_dependencies(vector, as_vector=True)
        self.assertEqual(vector['CO*'][:2], [1.0, -1.0])
        self.assertAlmostEqual(vector['CO*'][2] / 1.0e7, 1.0, places=10)

        # applying the same record twice gives the same table
        self.cov.set_parameters(node)
        self.assertEqual(self.cov.coverage_species, ['CO*'])


class TestElectrochemistry(unittest.TestCase):

    def setUp(self):
        self.kinetics = make_electrode_kinetics()
        self.reaction = Reaction('Li+[elyt] + electron => Li(S)')
        self.data = CoverageData()
        self.T = 300.0

    def update(self, cov, potentials, chem_potentials=(0.0, 0.0, 0.0),
               concentrations=(1.0, 1.0, 1.0)):
        self.data.update(self.T, coverages=[1.0], electric_potentials=potentials,
                         standard_chem_potentials=chem_potentials,
                         standard_concentrations=concentrations, density=1.0e-8)
        cov.update_from_struct(self.data)

    def test_no_charge_transfer(self):
        cov = CoverageBase()
        self.assertFalse(cov.uses_electrochemistry)
        self.assertTrue(math.isnan(cov.beta))
        self.assertEqual(cov.voltage_correction(), 1.0)

    def test_charge_transfer_detected(self):
        cov = CoverageBase()
        cov.set_parameters(RateNode({}))
        cov.set_context(self.reaction, self.kinetics)
        self.assertTrue(cov.uses_electrochemistry)
        self.assertEqual(cov.beta, 0.5)

        self.update(cov, [0.1, 0.0, 0.0])
        expected_RT = 0.1 * FARADAY / (GAS_CONSTANT * self.T)
        self.assertAlmostEqual(cov.delta_potential_RT, expected_RT)
        self.assertAlmostEqual(cov.voltage_correction(), math.exp(-0.5 * expected_RT))

        # equal potentials leave the rate unchanged
        self.update(cov, [0.2, 0.2, 0.2])
        self.assertAlmostEqual(cov.voltage_correction(), 1.0)

    def test_explicit_override(self):
        cov = CoverageBase()
        cov.set_parameters(RateNode({'charge-transfer': False}))
        cov.set_context(self.reaction, self.kinetics)
        self.assertFalse(cov.uses_electrochemistry)
        self.update(cov, [0.1, 0.0, 0.0])
        self.assertEqual(cov.voltage_correction(), 1.0)
        out = {}
        cov.get_parameters(out)
        self.assertIs(out['charge-transfer'], False)

    def test_exchange_current_density(self):
        cov = CoverageBase()
        cov.set_parameters(RateNode({'exchange-current-density-formulation': True, 'beta': 0.4}))
        cov.set_context(self.reaction, self.kinetics)
        mu_li = -1.0e7
        self.update(cov, [0.0, 0.0, 0.0], chem_potentials=(0.0, mu_li, 0.0),
                    concentrations=(1.0, 1.0, 2.0e-8))
        delta_gibbs0_RT = -mu_li / (GAS_CONSTANT * self.T)
        self.assertAlmostEqual(cov.delta_gibbs0_RT, delta_gibbs0_RT)
        self.assertEqual(cov.prod_standard_concentrations, 2.0e-8)
        expected = math.exp(-0.4 * delta_gibbs0_RT) / (2.0e-8 * FARADAY)
        self.assertAlmostEqual(cov.voltage_correction() / expected, 1.0, places=10)


class TestStickingCoverage(unittest.TestCase):

    def setUp(self):
        self.kinetics = make_surface_kinetics(motz_wise=True)

    def test_derived_quantities(self):
        cov = StickingCoverage()
        cov.set_parameters(RateNode({}))
        cov.set_sticking_parameters(RateNode({}))
        cov.set_context(Reaction('CO + PT(S) => CO*'), self.kinetics)
        self.assertEqual(cov.sticking_species, 'CO')
        self.assertEqual(cov.sticking_order, 1.0)
        self.assertTrue(cov.motz_wise_correction)
        self.assertAlmostEqual(cov.multiplier, math.sqrt(GAS_CONSTANT / (2 * PI * 28.010)))
        self.assertAlmostEqual(cov.sticking_weight, 28.010)
        self.assertEqual(cov.site_density, SITE_DENSITY)
        self.assertFalse(cov.uses_electrochemistry)

        data = CoverageData()
        data.update(300.0, coverages=[1.0, 0.0, 0.0], density=SITE_DENSITY)
        cov.update_from_struct(data)
        self.assertAlmostEqual(cov.factor * SITE_DENSITY, 1.0)

    def test_explicit_values_survive_context(self):
        cov = StickingCoverage()
        cov.set_sticking_parameters(RateNode({'Motz-Wise': False}))
        cov.set_sticking_order(2.0)
        cov.set_sticking_weight(32.0)
        cov.set_context(Reaction('CO + PT(S) => CO*'), self.kinetics)
        self.assertFalse(cov.motz_wise_correction)
        self.assertEqual(cov.sticking_order, 2.0)
        self.assertAlmostEqual(cov.sticking_weight, 32.0)
        out = {}
        cov.get_sticking_parameters(out)
        self.assertEqual(out, {'Motz-Wise': False})

    def test_ambiguous_sticking_species(self):
        cov = StickingCoverage()
        with self.assertRaises(InputError):
            cov.set_context(Reaction('CO + O2 + PT(S) => CO* + O* + O*'), self.kinetics)

    def test_explicit_sticking_species(self):
        cov = StickingCoverage()
        cov.set_sticking_parameters(RateNode({'sticking-species': 'O2'}))
        cov.set_context(Reaction('CO + O2 + PT(S) => CO* + O* + O*'), self.kinetics)
        self.assertEqual(cov.sticking_species, 'O2')
        self.assertAlmostEqual(cov.sticking_weight, 31.998)

        cov.set_sticking_species('AR')
        with self.assertRaises(InputError):
            cov.set_context(Reaction('CO + PT(S) => CO*'), self.kinetics)


if __name__ == '__main__':
    unittest.main()
