# surfkin/units.py
"""
Unit handling for mechanism input.

Numeric fields are either plain numbers, which are interpreted against the
active unit system, or strings such as "20 kJ/mol" or "2.7e-9 mol/cm^2" that
carry their own units. All values are converted to SI with kmol as the
quantity unit.
"""

import re

from .constants import BOLTZMANN, ELECTRON_CHARGE, GAS_CONSTANT, AVOGADRO, ONE_ATM
from .errors import InputError

# unit name -> (factor to SI, {dimension: power})
KNOWN_UNITS = {
    # length
    'm': (1.0, {'length': 1}),
    'km': (1.0e3, {'length': 1}),
    'cm': (1.0e-2, {'length': 1}),
    'mm': (1.0e-3, {'length': 1}),
    'um': (1.0e-6, {'length': 1}),
    'nm': (1.0e-9, {'length': 1}),
    'angstrom': (1.0e-10, {'length': 1}),
    # quantity
    'kmol': (1.0, {'quantity': 1}),
    'mol': (1.0e-3, {'quantity': 1}),
    'molec': (1.0 / AVOGADRO, {'quantity': 1}),
    # time
    's': (1.0, {'time': 1}),
    'ms': (1.0e-3, {'time': 1}),
    'us': (1.0e-6, {'time': 1}),
    'min': (60.0, {'time': 1}),
    'hr': (3600.0, {'time': 1}),
    # mass
    'kg': (1.0, {'mass': 1}),
    'g': (1.0e-3, {'mass': 1}),
    # energy
    'J': (1.0, {'energy': 1}),
    'kJ': (1.0e3, {'energy': 1}),
    'cal': (4.184, {'energy': 1}),
    'kcal': (4184.0, {'energy': 1}),
    'erg': (1.0e-7, {'energy': 1}),
    'eV': (ELECTRON_CHARGE, {'energy': 1}),
    # temperature
    'K': (1.0, {'temperature': 1}),
    # pressure
    'Pa': (1.0, {'pressure': 1}),
    'kPa': (1.0e3, {'pressure': 1}),
    'bar': (1.0e5, {'pressure': 1}),
    'atm': (ONE_ATM, {'pressure': 1}),
    # electrical
    'A': (1.0, {'current': 1}),
    'C': (1.0, {'current': 1, 'time': 1}),
}

_QUANTITY = re.compile(r'^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*(.*?)\s*$')
_TERM = re.compile(r'^([A-Za-z]+)(?:\^(-?\d+(?:\.\d*)?))?$')

_ENERGY_PER_QUANTITY = {'energy': 1, 'quantity': -1}
_ENERGY = {'energy': 1}
_TEMPERATURE = {'temperature': 1}


def parse_units(text):
    """
    Parse a unit string into a conversion factor and its dimensions.

    Examples:
        'kJ/mol'    -> (1e6, {'energy': 1, 'quantity': -1})
        'mol/cm^2'  -> (10.0, {'quantity': 1, 'length': -2})
        'cm^3/mol/s'

    Returns:
        tuple: (factor to SI, {dimension: power})
    """
    factor = 1.0
    dims = {}
    for i, part in enumerate(text.strip().split('/')):
        sign = 1.0 if i == 0 else -1.0
        for term in re.split(r'[*\s]+', part.strip()):
            if not term or term == '1':
                continue
            match = _TERM.match(term)
            if not match or match.group(1) not in KNOWN_UNITS:
                raise InputError(f"Unknown unit '{term}' in '{text}'")
            power = sign * (float(match.group(2)) if match.group(2) else 1.0)
            unit_factor, unit_dims = KNOWN_UNITS[match.group(1)]
            factor *= unit_factor ** power
            for dim, p in unit_dims.items():
                dims[dim] = dims.get(dim, 0.0) + power * p
    return factor, {dim: p for dim, p in dims.items() if p != 0}


def split_quantity(value):
    """Split a string like '20.0 kJ/mol' into (20.0, 'kJ/mol')."""
    match = _QUANTITY.match(value)
    if not match:
        raise InputError(f"Cannot interpret '{value}' as a number with units")
    return float(match.group(1)), match.group(2)


def _to_kelvin(number, factor, dims, original):
    if dims == _TEMPERATURE:
        return number * factor
    if dims == _ENERGY_PER_QUANTITY:
        return number * factor / GAS_CONSTANT
    if dims == _ENERGY:
        return number * factor / BOLTZMANN
    raise InputError(f"'{original}' is not a valid activation energy")


class UnitSystem:
    """
    Default units used to interpret numbers given without explicit units.

    Built from a mechanism ``units:`` block, for example
    ``{length: cm, quantity: mol, activation-energy: kcal/mol}``.
    """

    DEFAULTS = {
        'length': 'm', 'quantity': 'kmol', 'time': 's', 'mass': 'kg',
        'energy': 'J', 'temperature': 'K', 'pressure': 'Pa', 'current': 'A',
    }

    def __init__(self, units=None):
        self._names = dict(self.DEFAULTS)
        self._factors = {dim: 1.0 for dim in self.DEFAULTS}
        self._activation_energy = None
        if units:
            self.set_defaults(units)

    def set_defaults(self, units):
        for key, name in units.items():
            factor, dims = parse_units(str(name))
            if key == 'activation-energy':
                _to_kelvin(1.0, factor, dims, name)
                self._activation_energy = (str(name), factor, dims)
            elif key in self.DEFAULTS:
                if dims != {key: 1}:
                    raise InputError(f"'{name}' is not a unit of {key}")
                self._names[key] = str(name)
                self._factors[key] = factor
            else:
                raise InputError(f"Unknown unit dimension '{key}'")

    def get_defaults(self):
        """Return the non-default entries, in the form accepted by ``set_defaults``."""
        out = {dim: name for dim, name in self._names.items() if name != self.DEFAULTS[dim]}
        if self._activation_energy:
            out['activation-energy'] = self._activation_energy[0]
        return out

    def _default_factor(self, dims):
        factor = 1.0
        for dim, power in dims.items():
            factor *= self._factors[dim] ** power
        return factor

    def _activation_energy_units(self):
        if self._activation_energy:
            return self._activation_energy[1:]
        return (self._factors['energy'] / self._factors['quantity'],
                dict(_ENERGY_PER_QUANTITY))

    def convert(self, value, dest):
        """Convert *value* to the units named by the string *dest*."""
        dest_factor, dest_dims = parse_units(dest)
        if isinstance(value, str):
            number, unit = split_quantity(value)
            if unit:
                factor, dims = parse_units(unit)
                if dims != dest_dims:
                    raise InputError(f"Cannot convert '{value}' to '{dest}'")
                return number * factor / dest_factor
            value = number
        return float(value) * self._default_factor(dest_dims) / dest_factor

    def convert_activation_energy(self, value, dest='K'):
        """
        Convert an activation energy to *dest*.

        Activation energies may be given per quantity (J/kmol, kcal/mol), per
        molecule (eV) or as a temperature (K); conversion between these forms
        goes through the gas constant or the Boltzmann constant.
        """
        if isinstance(value, str):
            number, unit = split_quantity(value)
            if unit:
                factor, dims = parse_units(unit)
            else:
                factor, dims = self._activation_energy_units()
        else:
            number = float(value)
            factor, dims = self._activation_energy_units()
        kelvin = _to_kelvin(number, factor, dims, value)
        dest_factor, dest_dims = parse_units(dest)
        return kelvin / _to_kelvin(1.0, dest_factor, dest_dims, dest)

    def convert_rate_coeff(self, value, dims):
        """
        Convert a pre-exponential factor with dimensions *dims* to SI.

        *dims* is a ``{dimension: power}`` mapping as returned by
        ``Reaction.rate_units``; ``None`` skips the conversion of plain numbers.
        """
        if isinstance(value, str):
            number, unit = split_quantity(value)
            if unit:
                factor, unit_dims = parse_units(unit)
                if dims is not None and unit_dims != dims:
                    raise InputError(
                        f"Units of '{value}' do not match the expected rate units {dims}")
                return number * factor
            value = number
        if not dims:
            return float(value)
        return float(value) * self._default_factor(dims)
