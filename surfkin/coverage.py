# surfkin/coverage.py
"""
Coverage-dependent and electrochemical corrections for interface rates.

Rate expressions at interfaces may include coverage dependent terms
(Kee, Coltrin & Glarborg, "Chemically Reacting Flow", Eq. 11.113):

    k_f = A T^b exp(-Ea/RT) * prod_k 10^(a_k theta_k) theta_k^m_k exp(-E_k theta_k / RT)

The first factor is an ordinary base rate law; ``CoverageBase`` implements
only the coverage related terms, so it can be combined with any base law
(see ``interface_rate.py``). The parameters (a_k, E_k, m_k) describe the
dependence on the coverage theta_k of surface species k.

For charge-transfer reactions the forward rate is further multiplied by a
Butler-Volmer factor exp(-beta dPhi/RT), where dPhi is the change in
electric potential energy across the reaction.
"""
import math
import logging
from dataclasses import dataclass, field

import numpy as np

from .constants import GAS_CONSTANT, FARADAY, PI, TINY
from .errors import InputError
from .units import UnitSystem

logger = logging.getLogger(__name__)


def _empty():
    return np.zeros(0)


@dataclass
class CoverageData:
    """
    Data shared by all interface reactions of one rate type.

    Refreshed once per evaluation pass by the dispatcher (``MultiRate``) and
    treated as read-only by the rate objects.

    Attributes:
        temperature, logT, recipT, sqrtT: temperature [K] and derived values
        coverages, log_coverages: indexed by interface-phase species
        electric_potentials: indexed by kinetics phase [V]
        standard_chem_potentials: indexed by kinetics species [J/kmol]
        standard_concentrations: indexed by kinetics species
        partial_molar_enthalpies: indexed by kinetics species [J/kmol]
        density: site density of the interface phase [kmol/m^2]
        ready: True once density and species data have been supplied
    """

    temperature: float = 1.0
    logT: float = 0.0
    recipT: float = 1.0
    sqrtT: float = 1.0
    coverages: np.ndarray = field(default_factory=_empty)
    log_coverages: np.ndarray = field(default_factory=_empty)
    electric_potentials: np.ndarray = field(default_factory=_empty)
    standard_chem_potentials: np.ndarray = field(default_factory=_empty)
    standard_concentrations: np.ndarray = field(default_factory=_empty)
    partial_molar_enthalpies: np.ndarray = field(default_factory=_empty)
    density: float = math.nan
    ready: bool = False

    def update_temperature(self, temperature):
        if temperature <= 0:
            raise ValueError(f"Temperature must be positive, got {temperature}")
        self.temperature = temperature
        self.logT = math.log(temperature)
        self.recipT = 1.0 / temperature
        self.sqrtT = math.sqrt(temperature)

    def _assign(self, name, values):
        values = np.array(values, dtype=float)
        current = getattr(self, name)
        changed = values.shape != current.shape or not np.array_equal(values, current)
        setattr(self, name, values)
        return changed

    def update(self, temperature, coverages=None, electric_potentials=None,
               standard_chem_potentials=None, standard_concentrations=None,
               partial_molar_enthalpies=None, density=None):
        """
        Refresh the snapshot. Arguments left as None keep their previous value.

        Returns:
            bool: True if any stored value changed
        """
        changed = temperature != self.temperature
        self.update_temperature(temperature)
        if coverages is not None:
            changed |= self._assign('coverages', coverages)
            self.log_coverages = np.log(np.maximum(self.coverages, TINY))
        if electric_potentials is not None:
            changed |= self._assign('electric_potentials', electric_potentials)
        if standard_chem_potentials is not None:
            changed |= self._assign('standard_chem_potentials', standard_chem_potentials)
        if standard_concentrations is not None:
            changed |= self._assign('standard_concentrations', standard_concentrations)
        if partial_molar_enthalpies is not None:
            changed |= self._assign('partial_molar_enthalpies', partial_molar_enthalpies)
        if density is not None:
            changed |= density != self.density
            self.density = density
            self.ready = True
        return changed


class CoverageBase:
    """
    Coverage dependence and electrochemistry state of a single interface rate.

    The cached values (``acov``, ``ecov``, ``mcov`` and the electrochemical
    terms) are recomputed from the shared data on every call to
    ``update_from_struct``.
    """

    def __init__(self):
        self.site_density = math.nan  # [kmol/m^2]
        self.acov = 0.0  # coverage contribution to pre-exponential factor
        self.ecov = 0.0  # coverage contribution to activation energy [K]
        self.mcov = 0.0  # coverage term in reaction rate
        self.charge_transfer = False
        self._explicit_charge_transfer = False
        self.exchange_current_density_formulation = False
        self._beta = 0.5
        self.delta_potential_RT = math.nan
        self.delta_gibbs0_RT = math.nan
        self.prod_standard_concentrations = math.nan
        self._indices = {}  # coverage table row -> interface species index
        self._cov = []
        self._ac = []
        self._ec = []
        self._mc = []
        # (kinetics species index, stoichiometric coefficient)
        self._stoich_coeffs = []
        # (phase index, net charge [C/kmol]); same order as _stoich_coeffs
        self._net_charges = []

    @property
    def uses_electrochemistry(self):
        return self.charge_transfer

    @property
    def beta(self):
        """Charge transfer coefficient; NaN if the rate does not transfer charge."""
        if self.charge_transfer:
            return self._beta
        return math.nan

    @beta.setter
    def beta(self, value):
        self._beta = value

    @property
    def coverage_species(self):
        return list(self._cov)

    def set_site_density(self, site_density):
        """Set site density [kmol/m^2]; overwritten by the next update with shared data."""
        self.site_density = site_density

    def set_parameters(self, node):
        """Configure electrochemistry and coverage dependencies from a rate record."""
        self._beta = float(node.get('beta', 0.5))
        self.exchange_current_density_formulation = bool(
            node.get('exchange-current-density-formulation', False))
        if 'charge-transfer' in node:
            self.charge_transfer = bool(node['charge-transfer'])
            self._explicit_charge_transfer = True
        else:
            self.charge_transfer = False
            self._explicit_charge_transfer = False

        self._cov, self._ac, self._ec, self._mc = [], [], [], []
        self._indices = {}
        if node.get('coverage-dependencies'):
            self.set_coverage_dependencies(
                node['coverage-dependencies'], getattr(node, 'units', None))

    def get_parameters(self, node):
        if self._cov:
            dependencies = {}
            self.get_coverage_dependencies(dependencies)
            node['coverage-dependencies'] = dependencies
        if self._beta != 0.5:
            node['beta'] = self._beta
        if self.exchange_current_density_formulation:
            node['exchange-current-density-formulation'] = True
        if self._explicit_charge_transfer:
            node['charge-transfer'] = self.charge_transfer

    def set_coverage_dependencies(self, dependencies, units=None):
        """
        Read coverage dependencies given either as ``{a, m, E}`` records or as
        ``[a, m, E]`` lists. ``E`` is converted to Kelvin using *units*.
        """
        if units is None:
            units = getattr(dependencies, 'units', None) or UnitSystem()
        for species, dep in dependencies.items():
            if isinstance(dep, dict):
                missing = {'a', 'm', 'E'} - set(dep)
                if missing:
                    raise InputError(
                        f"Coverage dependency for species '{species}' is missing {sorted(missing)}")
                a, m, E = dep['a'], dep['m'], dep['E']
            elif isinstance(dep, (list, tuple)) and len(dep) == 3:
                a, m, E = dep
            else:
                raise InputError(
                    f"Coverage dependency for species '{species}' must be a mapping "
                    f"with keys a, m, E or a list [a, m, E], got {dep!r}")
            self.add_coverage_dependence(
                species, float(a), float(m), units.convert_activation_energy(E, 'K'))

    def get_coverage_dependencies(self, dependencies, as_vector=False):
        """
        Write the coverage table into *dependencies*, with ``E`` in J/kmol.

        ``as_vector=True`` writes ``[a, m, E]`` lists instead of records; this
        shape is only used to check input in the list form.
        """
        for k, species in enumerate(self._cov):
            E = self._ec[k] * GAS_CONSTANT
            if as_vector:
                dependencies[species] = [self._ac[k], self._mc[k], E]
            else:
                dependencies[species] = {'a': self._ac[k], 'm': self._mc[k], 'E': E}

    def add_coverage_dependence(self, species, a, m, e):
        """
        Add a coverage dependency for *species*, with exponential dependence
        *a*, power-law exponent *m* and activation energy dependence *e* in
        Kelvin. A repeated species replaces the earlier entry.
        """
        if species in self._cov:
            k = self._cov.index(species)
            logger.warning(f"Coverage dependency for species '{species}' is replaced "
                           f"(a={self._ac[k]}, m={self._mc[k]}, E={self._ec[k]} K "
                           f"-> a={a}, m={m}, E={e} K)")
            self._ac[k] = a
            self._mc[k] = m
            self._ec[k] = e
        else:
            self._cov.append(species)
            self._ac.append(a)
            self._mc.append(m)
            self._ec.append(e)
        # species indices must be resolved again
        self._indices = {}

    def set_context(self, reaction, kinetics):
        """
        Build stoichiometric coefficients and net charges of *reaction* and
        resolve coverage species against the interface phase of *kinetics*.
        """
        if not self._explicit_charge_transfer:
            self.charge_transfer = reaction.uses_electrochemistry(kinetics)

        self._stoich_coeffs = []
        for name, stoich in reaction.reactants.items():
            self._stoich_coeffs.append((kinetics.kinetics_species_index(name), -stoich))
        for name, stoich in reaction.products.items():
            self._stoich_coeffs.append((kinetics.kinetics_species_index(name), stoich))

        self._net_charges = []
        for k, stoich in self._stoich_coeffs:
            n = kinetics.species_phase_index(k)
            charge = kinetics.species_charge(k)
            self._net_charges.append((n, FARADAY * charge * stoich))

        interface = kinetics.thermo(kinetics.reaction_phase_index)
        self.set_species(interface.species_names)

    def set_species(self, species):
        """Map coverage table rows onto positions in the ordered list *species*."""
        self._indices = {}
        for k, name in enumerate(self._cov):
            if name not in species:
                raise InputError(f"Unknown species '{name}' in coverage dependencies")
            self._indices[k] = species.index(name)

    def update_from_struct(self, shared_data):
        if shared_data.ready:
            self.site_density = shared_data.density

        if len(self._indices) != len(self._cov):
            # object is not set up correctly (set_species needs to be run)
            self.acov = math.nan
            self.ecov = math.nan
            self.mcov = math.nan
            return

        self.acov = 0.0
        self.ecov = 0.0
        self.mcov = 0.0
        for row, k in self._indices.items():
            self.acov += self._ac[row] * shared_data.coverages[k]
            self.ecov += self._ec[row] * shared_data.coverages[k]
            self.mcov += self._mc[row] * shared_data.log_coverages[k]

        RT = GAS_CONSTANT * shared_data.temperature
        if self.charge_transfer:
            delta = 0.0
            for n, charge in self._net_charges:
                delta += shared_data.electric_potentials[n] * charge
            self.delta_potential_RT = delta / RT

        if self.exchange_current_density_formulation:
            delta = 0.0
            prod = 1.0
            for k, stoich in self._stoich_coeffs:
                delta += shared_data.standard_chem_potentials[k] * stoich
                if stoich > 0:
                    prod *= shared_data.standard_concentrations[k]
            self.delta_gibbs0_RT = delta / RT
            self.prod_standard_concentrations = prod

    def voltage_correction(self):
        """
        Correction factor of the forward rate for charge transfer reactions.

        The activation energy is modified by the net electric potential energy
        change, sum_i(F phi_i z_i nu_i). If the rate was given as an exchange
        current density, the factor also converts the rate constant from A/m^2
        to kmol/m^2/s.
        """
        if not self.charge_transfer:
            return 1.0
        correction = 1.0
        if self.delta_potential_RT != 0.0:
            # decreasing the activation energy below zero is allowed here
            correction = math.exp(-self._beta * self.delta_potential_RT)
        if self.exchange_current_density_formulation:
            tmp = math.exp(-self._beta * self.delta_gibbs0_RT)
            tmp /= self.prod_standard_concentrations * FARADAY
            correction *= tmp
        return correction


class StickingCoverage(CoverageBase):
    """
    Coverage state for sticking coefficient rates.

    Adds the sticking species, the exponent applied to the site density
    (sticking order) and the multiplier sqrt(R / (2 pi M)) that converts a
    sticking probability into a rate constant. All three are derived from
    the reaction in ``set_context`` unless set explicitly.
    """

    def __init__(self):
        super().__init__()
        self._motz_wise = False
        self._explicit_motz_wise = False
        self._sticking_species = ''
        self._explicit_species = False
        self._surface_order = math.nan
        self._explicit_order = False
        self._multiplier = math.nan
        self._explicit_weight = False
        self.factor = math.nan  # site_density ** -order, cached per update

    def set_sticking_parameters(self, node):
        if 'Motz-Wise' in node:
            self.set_motz_wise_correction(bool(node['Motz-Wise']))
        else:
            self._motz_wise = False
            self._explicit_motz_wise = False
        if 'sticking-species' in node:
            self.set_sticking_species(str(node['sticking-species']))
        else:
            self._sticking_species = ''
            self._explicit_species = False

    def get_sticking_parameters(self, node):
        if self._explicit_motz_wise:
            node['Motz-Wise'] = self._motz_wise
        if self._explicit_species:
            node['sticking-species'] = self._sticking_species

    @property
    def motz_wise_correction(self):
        """Whether the Motz-Wise correction for near-unity sticking coefficients is used."""
        return self._motz_wise

    def set_motz_wise_correction(self, motz_wise):
        self._motz_wise = motz_wise
        self._explicit_motz_wise = True

    @property
    def sticking_species(self):
        return self._sticking_species

    def set_sticking_species(self, species):
        """Needed for reactions with more than one non-interface reactant."""
        self._sticking_species = species
        self._explicit_species = True

    @property
    def sticking_order(self):
        return self._surface_order

    def set_sticking_order(self, order):
        self._surface_order = order
        self._explicit_order = True

    @property
    def multiplier(self):
        return self._multiplier

    @property
    def sticking_weight(self):
        """Molecular weight of the sticking species [kg/kmol]."""
        return GAS_CONSTANT / (2 * PI * self._multiplier ** 2)

    def set_sticking_weight(self, weight):
        self._multiplier = math.sqrt(GAS_CONSTANT / (2 * PI * weight))
        self._explicit_weight = True

    def set_context(self, reaction, kinetics):
        super().set_context(reaction, kinetics)
        i_interface = kinetics.reaction_phase_index
        surf = kinetics.thermo(i_interface)
        self.site_density = surf.site_density
        if not self._explicit_motz_wise:
            self._motz_wise = kinetics.motz_wise

        sticking_species = self._sticking_species
        if not self._explicit_species:
            gas_species = []
            any_species = []
            for name in reaction.reactants:
                n = kinetics.species_phase_index(kinetics.kinetics_species_index(name))
                if n != i_interface:
                    if kinetics.thermo(n).phase_of_matter == 'gas':
                        gas_species.append(name)
                    any_species.append(name)
            if len(gas_species) == 1:
                sticking_species = gas_species[0]
            elif len(any_species) == 1:
                sticking_species = any_species[0]
            else:
                raise InputError(
                    f"Unable to determine sticking species for reaction '{reaction.equation}'. "
                    f"Found {len(any_species)} non-interface reactants {any_species}; "
                    f"use 'sticking-species' to select one.", reaction.input)
            self._sticking_species = sticking_species
        elif sticking_species not in reaction.reactants:
            raise InputError(
                f"Sticking species '{sticking_species}' is not a reactant of "
                f"reaction '{reaction.equation}'", reaction.input)

        surface_order = 0.0
        multiplier = 1.0
        for name, stoich in reaction.reactants.items():
            n = kinetics.species_phase_index(kinetics.kinetics_species_index(name))
            phase = kinetics.thermo(n)
            k = phase.species_index(name)
            if name == sticking_species:
                multiplier *= math.sqrt(GAS_CONSTANT / (2 * PI * phase.molecular_weight(k)))
            else:
                # Convert from coverages used in the sticking probability to the
                # concentrations used in the mass action rate expression. The
                # site density term is applied per update.
                order = reaction.orders.get(name, stoich)
                if n == i_interface:
                    multiplier *= phase.size(k) ** order
                    surface_order += order
                else:
                    multiplier *= phase.standard_concentration(k) ** -order

        if not self._explicit_order:
            self._surface_order = surface_order
        if not self._explicit_weight:
            self._multiplier = multiplier
        logger.debug(f"Sticking reaction '{reaction.equation}': species={sticking_species}, "
                     f"order={self._surface_order}, multiplier={self._multiplier:.6g}")

    def update_from_struct(self, shared_data):
        super().update_from_struct(shared_data)
        self.factor = self.site_density ** -self._surface_order
