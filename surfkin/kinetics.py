# surfkin/kinetics.py
"""
Phases, reactions and the interface kinetics manager.

These classes provide the setup-time context interface rates need: global
species ordering, the phase each species belongs to, charges, molecular
weights, site sizes and the site density of the interface phase.
"""
import re
import bisect
import logging

import numpy as np

from .errors import InputError
from .multi_rate import MultiRate

logger = logging.getLogger(__name__)

PHASES_OF_MATTER = ('gas', 'liquid', 'solid', 'surface', 'edge')


class Phase:
    """A set of species sharing one thermodynamic phase."""

    def __init__(self, name, species, phase_of_matter='gas', site_density=None,
                 standard_concentration=1.0):
        if phase_of_matter not in PHASES_OF_MATTER:
            raise InputError(f"Unknown phase of matter '{phase_of_matter}' for phase '{name}'")
        if phase_of_matter in ('surface', 'edge') and site_density is None:
            raise InputError(f"Interface phase '{name}' requires a site density")
        self.name = name
        self.species = list(species)
        self.phase_of_matter = phase_of_matter
        self.site_density = site_density  # [kmol/m^2]
        self._standard_concentration = standard_concentration  # bulk phases [kmol/m^3]
        self._index = {sp.name: k for k, sp in enumerate(self.species)}
        self.coverages = np.zeros(len(self.species))
        if self.is_interface and self.species:
            self.coverages[0] = 1.0

    def __repr__(self):
        return f"Phase({self.name!r}, {self.phase_of_matter}, {self.species_names})"

    @property
    def n_dim(self):
        return {'surface': 2, 'edge': 1}.get(self.phase_of_matter, 3)

    @property
    def is_interface(self):
        return self.n_dim < 3

    @property
    def n_species(self):
        return len(self.species)

    @property
    def species_names(self):
        return [sp.name for sp in self.species]

    def species_index(self, name):
        if name not in self._index:
            raise InputError(f"Species '{name}' not found in phase '{self.name}'")
        return self._index[name]

    def set_coverages(self, coverages):
        """Set coverages from a {species: value} mapping or a sequence; values are normalized."""
        if isinstance(coverages, dict):
            values = np.zeros(self.n_species)
            for name, value in coverages.items():
                values[self.species_index(name)] = value
        else:
            values = np.array(coverages, dtype=float)
        if values.shape != (self.n_species,) or values.sum() <= 0:
            raise InputError(f"Invalid coverages for phase '{self.name}': {coverages}")
        self.coverages = values / values.sum()

    def charge(self, k):
        return self.species[k].charge

    def molecular_weight(self, k):
        return self.species[k].molecular_weight

    def size(self, k):
        return self.species[k].size

    def standard_concentration(self, k=0):
        if self.is_interface:
            return self.site_density / self.species[k].size
        return self._standard_concentration


_TERM = re.compile(r'^(\d+(?:\.\d*)?|\.\d+)\s+(\S.*)$')


def parse_equation_side(text):
    """
    Parse one side of a reaction equation into {species: coefficient}.

    Terms are separated by ' + ', so charged species such as 'Li+[elyt]'
    are kept intact.
    """
    out = {}
    for term in text.split(' + '):
        term = term.strip()
        if not term:
            continue
        match = _TERM.match(term)
        if match:
            coeff, name = float(match.group(1)), match.group(2).strip()
        else:
            coeff, name = 1.0, term
        out[name] = out.get(name, 0.0) + coeff
    return out


class Reaction:
    """A reaction with its stoichiometry and rate object."""

    def __init__(self, equation=None, rate=None, reactants=None, products=None,
                 orders=None, reversible=None, id='', input=None):
        if equation is not None:
            reactants, products, reversible = self.parse_equation(equation)
        elif reactants is None or products is None:
            raise InputError("Reaction requires an equation or reactants and products")
        self.reactants = dict(reactants)
        self.products = dict(products)
        self.reversible = True if reversible is None else reversible
        self.orders = dict(orders or {})
        self.rate = rate
        self.id = id
        self.input = input

    @staticmethod
    def parse_equation(equation):
        for separator, reversible in ((' <=> ', True), (' => ', False), (' = ', True)):
            if separator in equation:
                left, right = equation.split(separator, 1)
                return parse_equation_side(left), parse_equation_side(right), reversible
        raise InputError(f"Could not find a reaction arrow in '{equation}'")

    @staticmethod
    def _side(stoich):
        terms = []
        for name, coeff in stoich.items():
            terms.append(name if coeff == 1 else f"{coeff:g} {name}")
        return ' + '.join(terms)

    @property
    def equation(self):
        arrow = ' <=> ' if self.reversible else ' => '
        return self._side(self.reactants) + arrow + self._side(self.products)

    def __repr__(self):
        return f"Reaction({self.equation!r})"

    def uses_electrochemistry(self, kinetics):
        """True if the reaction moves net charge from one phase to another."""
        net_charge = {}
        for stoich, sign in ((self.reactants, -1.0), (self.products, 1.0)):
            for name, coeff in stoich.items():
                k = kinetics.kinetics_species_index(name)
                n = kinetics.species_phase_index(k)
                net_charge[n] = net_charge.get(n, 0.0) + sign * coeff * kinetics.species_charge(k)
        return any(abs(q) > 1e-12 for q in net_charge.values())

    def rate_units(self, kinetics):
        """
        Dimensions of the forward rate constant as {dimension: power}.

        The reaction rate is in kmol/m^2/s; each reactant contributes its
        concentration units (kmol/m^2 on interfaces, kmol/m^3 in bulk
        phases) raised to its reaction order.
        """
        dims = {'quantity': 1.0, 'length': -2.0, 'time': -1.0}
        for name, stoich in self.reactants.items():
            order = self.orders.get(name, stoich)
            phase = kinetics.thermo(kinetics.species_phase_index(kinetics.kinetics_species_index(name)))
            dims['quantity'] -= order
            dims['length'] += order * (2.0 if phase.is_interface else 3.0)
        return {dim: p for dim, p in dims.items() if p != 0}


class Kinetics:
    """
    Kinetics manager for reactions taking place on one interface phase.

    Rates are grouped by type; each group is evaluated by a ``MultiRate``
    over its own shared ``CoverageData``.
    """

    def __init__(self, phases, motz_wise=False):
        self.phases = list(phases)
        self.motz_wise = motz_wise
        self.reactions = []
        self._rate_handlers = {}

        self._phase_start = []
        self._species_names = []
        for phase in self.phases:
            self._phase_start.append(len(self._species_names))
            self._species_names.extend(phase.species_names)
        self._species_index = {}
        for k, name in enumerate(self._species_names):
            if name in self._species_index:
                raise InputError(f"Species '{name}' is defined in more than one phase")
            self._species_index[name] = k

        interfaces = [n for n, phase in enumerate(self.phases) if phase.is_interface]
        if not interfaces:
            raise InputError("Interface kinetics requires an interface phase")
        # the reacting phase is the one with the lowest dimensionality
        self.reaction_phase_index = min(interfaces, key=lambda n: self.phases[n].n_dim)

    @property
    def n_phases(self):
        return len(self.phases)

    @property
    def n_total_species(self):
        return len(self._species_names)

    @property
    def n_reactions(self):
        return len(self.reactions)

    @property
    def species_names(self):
        return list(self._species_names)

    @property
    def interface(self):
        return self.phases[self.reaction_phase_index]

    def thermo(self, n):
        return self.phases[n]

    def phase_index(self, name):
        for n, phase in enumerate(self.phases):
            if phase.name == name:
                return n
        raise InputError(f"Phase '{name}' not found")

    def kinetics_species_index(self, name):
        if name not in self._species_index:
            raise InputError(f"Unknown species '{name}'")
        return self._species_index[name]

    def kinetics_species_name(self, k):
        return self._species_names[k]

    def species_phase_index(self, k):
        return bisect.bisect_right(self._phase_start, k) - 1

    def _species(self, k):
        n = self.species_phase_index(k)
        return self.phases[n].species[k - self._phase_start[n]]

    def species_charge(self, k):
        return self._species(k).charge

    def standard_concentrations(self):
        """Standard concentrations of all kinetics species."""
        out = np.empty(self.n_total_species)
        for n, phase in enumerate(self.phases):
            for k in range(phase.n_species):
                out[self._phase_start[n] + k] = phase.standard_concentration(k)
        return out

    def add_reaction(self, reaction, validate=True):
        """
        Attach *reaction* and its rate. Context resolution and validation
        happen here, so configuration errors surface before any evaluation.

        Returns:
            int: index of the new reaction
        """
        for name in list(reaction.reactants) + list(reaction.products):
            if name not in self._species_index:
                raise InputError(
                    f"Reaction '{reaction.equation}' contains undeclared species '{name}'",
                    reaction.input)
        rate = reaction.rate
        if rate is None:
            raise InputError(f"Reaction '{reaction.equation}' has no rate", reaction.input)

        index = len(self.reactions)
        rate.set_context(reaction, self)
        if validate:
            rate.validate(reaction.equation, self)
        if rate.type not in self._rate_handlers:
            self._rate_handlers[rate.type] = MultiRate(rate.type)
        self._rate_handlers[rate.type].add(index, rate)
        self.reactions.append(reaction)
        logger.debug(f"Added reaction {index}: {reaction.equation} ({rate.type})")
        return index

    def update_rates(self, temperature, coverages, electric_potentials=None,
                     standard_chem_potentials=None, partial_molar_enthalpies=None):
        """
        Refresh the shared data of every rate type for the given state.

        Args:
            temperature: [K]
            coverages: coverages of the interface species
            electric_potentials: per phase [V]; zero if omitted
            standard_chem_potentials: per kinetics species [J/kmol]; zero if omitted
            partial_molar_enthalpies: per kinetics species [J/kmol]
        """
        coverages = np.asarray(coverages, dtype=float)
        if coverages.shape != (self.interface.n_species,):
            raise ValueError(f"Expected {self.interface.n_species} coverages, got {coverages.shape}")
        if electric_potentials is None:
            electric_potentials = np.zeros(self.n_phases)
        if standard_chem_potentials is None:
            standard_chem_potentials = np.zeros(self.n_total_species)
        state = dict(
            coverages=coverages,
            electric_potentials=electric_potentials,
            standard_chem_potentials=standard_chem_potentials,
            standard_concentrations=self.standard_concentrations(),
            density=self.interface.site_density,
        )
        if partial_molar_enthalpies is not None:
            state['partial_molar_enthalpies'] = partial_molar_enthalpies
        for handler in self._rate_handlers.values():
            handler.update(temperature, **state)

    def get_fwd_rate_constants(self):
        kf = np.zeros(self.n_reactions)
        for handler in self._rate_handlers.values():
            handler.get_rate_constants(kf)
        return kf
