# surfkin/rate_laws.py
"""
Temperature-dependent base rate laws.

Interface and sticking rates wrap one of these laws and add coverage and
electrochemical corrections on top of it. Every law offers the same
capability:

    eval_rate(logT, recipT)       rate at the given temperature
    pre_exponential_factor        A in SI units (kmol, m, s)
    activation_energy             Ea in J/kmol
    set_rate_parameters(...)      configure from a rate-constant record
    get_rate_parameters(node)     inverse of set_rate_parameters
    set_context(rxn, kin)         reaction-specific setup
    update_from_struct(data)      per-pass hook; no-op unless overridden
    validate(equation, kin)       setup-time checks
"""
import math

from .constants import GAS_CONSTANT
from .errors import InputError

# Registry for available base rate laws
RATE_LAWS = {}


def register_rate_law(name):
    def decorator(cls):
        cls.type = name
        RATE_LAWS[name] = cls
        return cls
    return decorator


def get_rate_law(name):
    """Return the base rate law class registered under *name*."""
    if name not in RATE_LAWS:
        raise InputError(f"Rate law '{name}' not found. Available: {list(RATE_LAWS.keys())}")
    return RATE_LAWS[name]


class RateLaw:
    """Base class for temperature-dependent rate laws."""

    type = None

    def __init__(self):
        self.negative_A_ok = False

    @property
    def valid(self):
        raise NotImplementedError("Subclasses must implement valid")

    @property
    def pre_exponential_factor(self):
        raise NotImplementedError("Subclasses must implement pre_exponential_factor")

    @property
    def activation_energy(self):
        raise NotImplementedError("Subclasses must implement activation_energy")

    def eval_rate(self, logT, recipT):
        raise NotImplementedError("Subclasses must implement eval_rate")

    def set_rate_parameters(self, rate, units, rate_units=None):
        raise NotImplementedError("Subclasses must implement set_rate_parameters")

    def get_rate_parameters(self, node):
        raise NotImplementedError("Subclasses must implement get_rate_parameters")

    def set_context(self, reaction, kinetics):
        pass

    def update_from_struct(self, shared_data):
        pass

    def validate(self, equation, kinetics=None):
        if not self.valid:
            raise InputError(f"Rate object for reaction '{equation}' is not configured.")
        if not self.negative_A_ok and self.pre_exponential_factor < 0:
            raise InputError(
                f"Undeclared negative pre-exponential factor found in reaction '{equation}'")


class ArrheniusBase(RateLaw):
    """
    Shared parameter handling for laws of the form A T^b exp(-E/RT).

    Parameters are stored in SI units, with energies divided by the gas
    constant (Kelvin). A rate-constant record is either a mapping keyed by
    ``PARAMETER_KEYS`` or a list of the same values in that order.
    """

    PARAMETER_KEYS = ()
    # leading entries of PARAMETER_KEYS that must be given
    REQUIRED = 2

    def __init__(self, A=math.nan, b=math.nan, Ea=0.0):
        super().__init__()
        self.A = A
        self.b = b
        self.Ea_R = Ea / GAS_CONSTANT
        self.E4_R = 0.0

    @property
    def valid(self):
        return not math.isnan(self.A) and not math.isnan(self.b)

    @property
    def pre_exponential_factor(self):
        return self.A

    @property
    def temperature_exponent(self):
        return self.b

    def set_rate_parameters(self, rate, units, rate_units=None):
        if not rate:
            self.A = math.nan
            self.b = math.nan
            return
        A_key, b_key, Ea_key, E4_key = (self.PARAMETER_KEYS + (None,))[:4]
        if isinstance(rate, dict):
            unknown = set(rate) - set(self.PARAMETER_KEYS)
            if unknown:
                raise InputError(f"Unknown {self.type} parameter(s): {sorted(unknown)}")
            required = self.PARAMETER_KEYS[:self.REQUIRED]
            missing = [key for key in required if key not in rate]
            if missing:
                raise InputError(f"{self.type} rate requires {list(required)}, missing {missing}")
            A, b = rate[A_key], rate[b_key]
            Ea = rate.get(Ea_key)
            E4 = rate.get(E4_key) if E4_key else None
        else:
            values = list(rate)
            if not self.REQUIRED <= len(values) <= len(self.PARAMETER_KEYS):
                raise InputError(
                    f"{self.type} rate expects {self.REQUIRED} to {len(self.PARAMETER_KEYS)} values, got {values}")
            values += [None] * (4 - len(values))
            A, b, Ea, E4 = values
        self.A = units.convert_rate_coeff(A, rate_units)
        self.b = float(b)
        if Ea is not None:
            self.Ea_R = units.convert_activation_energy(Ea, 'K')
        if E4 is not None:
            self.E4_R = units.convert_activation_energy(E4, 'K')

    def get_rate_parameters(self, node):
        if not self.valid:
            # unconfigured rate objects are not written
            return
        A_key, b_key, Ea_key, E4_key = (self.PARAMETER_KEYS + (None,))[:4]
        node[A_key] = self.A
        node[b_key] = self.b
        node[Ea_key] = self.Ea_R * GAS_CONSTANT
        if E4_key:
            node[E4_key] = self.E4_R * GAS_CONSTANT


@register_rate_law('Arrhenius')
class ArrheniusRate(ArrheniusBase):
    """Modified Arrhenius law k = A T^b exp(-Ea/RT)."""

    PARAMETER_KEYS = ('A', 'b', 'Ea')

    @property
    def activation_energy(self):
        return self.Ea_R * GAS_CONSTANT

    def eval_rate(self, logT, recipT):
        return self.A * math.exp(self.b * logT - self.Ea_R * recipT)


@register_rate_law('Blowers-Masel')
class BlowersMaselRate(ArrheniusBase):
    """
    Blowers-Masel approximation.

    The effective activation energy depends on the enthalpy change of the
    reaction, which is read from the shared data in ``update_from_struct``:

        Ea = 0                                  if dH < -4 Ea0
        Ea = dH                                 if dH >= 4 Ea0
        Ea = (w + dH/2) (Vp - 2w + dH)^2
             / (Vp^2 - 4w^2 + dH^2)             otherwise

    with Vp = 2w (w + Ea0) / (w - Ea0), and w the average bond dissociation
    energy of the bond being formed and broken.
    """

    PARAMETER_KEYS = ('A', 'b', 'Ea0', 'w')
    REQUIRED = 4

    def __init__(self, A=math.nan, b=math.nan, Ea0=0.0, w=math.nan):
        super().__init__(A, b, Ea0)
        self.E4_R = w / GAS_CONSTANT
        self.delta_H_R = 0.0
        self._stoich_coeffs = []

    @property
    def valid(self):
        return super().valid and not math.isnan(self.E4_R)

    def validate(self, equation, kinetics=None):
        super().validate(equation, kinetics)
        if self.E4_R <= self.Ea_R:
            raise InputError(
                f"Bond energy w must exceed the intrinsic activation energy Ea0 "
                f"in reaction '{equation}' (w = {self.bond_energy}, Ea0 = "
                f"{self.intrinsic_activation_energy} J/kmol)")

    @property
    def bond_energy(self):
        return self.E4_R * GAS_CONSTANT

    @property
    def intrinsic_activation_energy(self):
        return self.Ea_R * GAS_CONSTANT

    def effective_activation_energy_R(self, delta_H_R):
        if delta_H_R < -4 * self.Ea_R:
            return 0.0
        if delta_H_R >= 4 * self.Ea_R:
            return delta_H_R
        w = self.E4_R
        vp = 2 * w * ((w + self.Ea_R) / (w - self.Ea_R))
        vp_2w_dH = vp - 2 * w + delta_H_R
        return (w + delta_H_R / 2) * vp_2w_dH ** 2 / (vp ** 2 - 4 * w ** 2 + delta_H_R ** 2)

    @property
    def activation_energy(self):
        return self.effective_activation_energy_R(self.delta_H_R) * GAS_CONSTANT

    def eval_rate(self, logT, recipT):
        Ea_R = self.effective_activation_energy_R(self.delta_H_R)
        return self.A * math.exp(self.b * logT - Ea_R * recipT)

    def set_context(self, reaction, kinetics):
        self._stoich_coeffs = []
        for name, stoich in reaction.reactants.items():
            self._stoich_coeffs.append((kinetics.kinetics_species_index(name), -stoich))
        for name, stoich in reaction.products.items():
            self._stoich_coeffs.append((kinetics.kinetics_species_index(name), stoich))

    def update_from_struct(self, shared_data):
        if shared_data.ready and len(shared_data.partial_molar_enthalpies):
            delta_H = 0.0
            for k, stoich in self._stoich_coeffs:
                delta_H += shared_data.partial_molar_enthalpies[k] * stoich
            self.delta_H_R = delta_H / GAS_CONSTANT
