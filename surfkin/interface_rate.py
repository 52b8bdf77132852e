# surfkin/interface_rate.py
"""
Interface and sticking rates built from a base rate law plus coverage state.

An ``InterfaceRate`` owns a base rate law (``rate_laws.py``) and a
``CoverageBase``; a ``StickingRate`` owns a base rate law and a
``StickingCoverage``. Neither modifies the base law: the composite forwards
configuration and context to both parts and multiplies the base rate by the
coverage and voltage corrections.

Concrete classes exist for every (family, base law) pair; classes for base
laws registered later are created on demand by ``interface_rate_class``.
"""
import math
import logging
import warnings

from .constants import GAS_CONSTANT
from .coverage import CoverageBase, CoverageData, StickingCoverage
from .errors import InputError
from .node import RateNode
from .rate_laws import ArrheniusRate, BlowersMaselRate, get_rate_law

logger = logging.getLogger(__name__)

LOG_10 = math.log(10.0)


def _exp(x):
    """exp(x), or inf where the result is not representable."""
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


# Temperatures [K] at which sticking coefficients are checked to be <= 1
STICKING_CHECK_TEMPERATURES = (200.0, 500.0, 1000.0, 2000.0, 5000.0, 10000.0)

# Registry of composite rate classes, keyed by type (e.g. 'interface-Arrhenius')
RATE_TYPES = {}


def register_rate_type(cls):
    RATE_TYPES[cls.family + '-' + cls.base_type.type] = cls
    return cls


class InterfaceRateBase:
    """Behaviour shared by interface and sticking rates."""

    family = None
    rate_key = None
    base_type = None
    coverage_type = CoverageBase

    def __init__(self, node=None, rate_units=None, rate=None):
        self.base = rate if rate is not None else self.base_type()
        self.coverage = self.coverage_type()
        if node is not None:
            self.set_parameters(node, rate_units)

    @property
    def type(self):
        return f"{self.family}-{self.base.type}"

    def __repr__(self):
        return f"<{type(self).__name__} {self.get_parameters()}>"

    def _set_family_parameters(self, node):
        pass

    def _get_family_parameters(self, node):
        pass

    def set_parameters(self, node, rate_units=None):
        if not isinstance(node, RateNode):
            node = RateNode(node)
        self.coverage.set_parameters(node)
        self.base.negative_A_ok = node.get_bool('negative-A', False)
        self._set_family_parameters(node)
        self.base.set_rate_parameters(node.get(self.rate_key), node.units, rate_units)

    def get_parameters(self, node=None):
        """Return a record that reproduces this rate when passed to ``set_parameters``."""
        if node is None:
            node = {}
        node['type'] = self.type
        if self.base.negative_A_ok:
            node['negative-A'] = True
        rate_node = {}
        self.base.get_rate_parameters(rate_node)
        self._get_family_parameters(node)
        if rate_node:
            # base rate law is configured
            node[self.rate_key] = rate_node
        self.coverage.get_parameters(node)
        return node

    def set_context(self, reaction, kinetics):
        self.base.set_context(reaction, kinetics)
        self.coverage.set_context(reaction, kinetics)

    def set_species(self, species):
        self.coverage.set_species(species)

    def add_coverage_dependence(self, species, a, m, e):
        self.coverage.add_coverage_dependence(species, a, m, e)

    @property
    def site_density(self):
        return self.coverage.site_density

    @property
    def uses_electrochemistry(self):
        return self.coverage.charge_transfer

    def validate(self, equation, kinetics=None):
        self.base.validate(equation, kinetics)

    def update_from_struct(self, shared_data):
        self.base.update_from_struct(shared_data)
        self.coverage.update_from_struct(shared_data)

    def _corrected_rate(self, shared_data):
        cov = self.coverage
        out = self.base.eval_rate(shared_data.logT, shared_data.recipT) * _exp(
            LOG_10 * cov.acov - cov.ecov * shared_data.recipT + cov.mcov)
        if cov.charge_transfer:
            out *= cov.voltage_correction()
        return out

    def eval_from_struct(self, shared_data):
        return self._corrected_rate(shared_data)

    def ddT_scaled_from_struct(self, shared_data):
        raise NotImplementedError(f"{type(self).__name__}.ddT_scaled_from_struct")

    def eval(self, temperature, coverages=None, **state):
        """Evaluate for a single state, using a private snapshot."""
        data = CoverageData()
        data.update(temperature, coverages=coverages, **state)
        self.update_from_struct(data)
        return self.eval_from_struct(data)

    @property
    def pre_exponential_factor(self):
        cov = self.coverage
        return self.base.pre_exponential_factor * _exp(LOG_10 * cov.acov + cov.mcov)

    @property
    def activation_energy(self):
        return self.base.activation_energy + self.coverage.ecov * GAS_CONSTANT


class InterfaceRate(InterfaceRateBase):
    """
    Rate of an interface reaction:

        k = k_base(T) * 10^acov * exp(-ecov/T) * exp(mcov) [* voltage correction]
    """

    family = 'interface'
    rate_key = 'rate-constant'


class StickingRate(InterfaceRateBase):
    """
    Rate of a reaction specified by a sticking coefficient gamma:

        k = gamma' * site_density^-order * sqrt(T) * sqrt(R / (2 pi M)) * ...

    where gamma' is the coverage (and voltage) corrected sticking
    coefficient, optionally adjusted by the Motz-Wise correction
    gamma' / (1 - gamma'/2).
    """

    family = 'sticking'
    rate_key = 'sticking-coefficient'
    coverage_type = StickingCoverage

    def set_parameters(self, node, rate_units=None):
        # sticking coefficients are dimensionless
        super().set_parameters(node, {})

    def _set_family_parameters(self, node):
        self.coverage.set_sticking_parameters(node)

    def _get_family_parameters(self, node):
        self.coverage.get_sticking_parameters(node)

    @property
    def motz_wise_correction(self):
        return self.coverage.motz_wise_correction

    @property
    def sticking_species(self):
        return self.coverage.sticking_species

    @property
    def sticking_order(self):
        return self.coverage.sticking_order

    @property
    def sticking_weight(self):
        return self.coverage.sticking_weight

    def validate(self, equation, kinetics=None):
        super().validate(equation, kinetics)
        messages = []
        for T in STICKING_CHECK_TEMPERATURES:
            k = self.base.eval_rate(math.log(T), 1.0 / T)
            if k > 1:
                messages.append(
                    f"\n Sticking coefficient is greater than 1 for reaction '{equation}'\n"
                    f" at T = {T:.1f}\n")
        if messages:
            warnings.warn("StickingRate.validate:" + "".join(messages), stacklevel=2)

    def eval_from_struct(self, shared_data):
        out = self._corrected_rate(shared_data)
        cov = self.coverage
        if cov.motz_wise_correction:
            denominator = 1 - 0.5 * out
            # the correction diverges at a sticking coefficient of 2
            out = math.inf if denominator <= 0 else out / denominator
        return out * cov.factor * shared_data.sqrtT * cov.multiplier


@register_rate_type
class InterfaceArrheniusRate(InterfaceRate):
    base_type = ArrheniusRate


@register_rate_type
class InterfaceBlowersMaselRate(InterfaceRate):
    base_type = BlowersMaselRate


@register_rate_type
class StickingArrheniusRate(StickingRate):
    base_type = ArrheniusRate


@register_rate_type
class StickingBlowersMaselRate(StickingRate):
    base_type = BlowersMaselRate


def interface_rate_class(family, base_name):
    """
    Return the composite class for *family* ('interface' or 'sticking') and
    the base rate law registered as *base_name*, creating it if needed.
    """
    key = f"{family}-{base_name}"
    if key in RATE_TYPES:
        return RATE_TYPES[key]
    if family == 'interface':
        parent = InterfaceRate
    elif family == 'sticking':
        parent = StickingRate
    else:
        raise InputError(f"Unknown interface rate family '{family}'")
    base = get_rate_law(base_name)
    cls = type(f"{family.capitalize()}{base.__name__}", (parent,), {'base_type': base})
    logger.debug(f"Created rate class '{key}'")
    return register_rate_type(cls)


def new_interface_rate(node, rate_units=None):
    """
    Create an interface or sticking rate from a reaction record.

    The family is taken from a 'interface-'/'sticking-' prefix of the
    record's ``type`` or, if absent, from whether the record contains a
    ``sticking-coefficient``. The base law defaults to Arrhenius.
    """
    if not isinstance(node, RateNode):
        node = RateNode(node)
    rate_type = node.get_string('type', None) or 'Arrhenius'
    family = 'sticking' if 'sticking-coefficient' in node else 'interface'
    for prefix in ('interface-', 'sticking-'):
        if rate_type.startswith(prefix):
            family = prefix[:-1]
            rate_type = rate_type[len(prefix):]
    return interface_rate_class(family, rate_type)(node, rate_units)
