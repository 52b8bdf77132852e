# surfkin/species_properties.py
"""
Species data needed by interface rates: molecular weight (for sticking
coefficients), electric charge (for charge-transfer reactions) and the
number of sites a surface species occupies.
"""
import re
import logging

logger = logging.getLogger(__name__)

# Atomic weights in kg/kmol (from NIST)
ATOMIC_WEIGHTS = {
    'H': 1.008,
    'He': 4.0026,
    'Li': 6.94,
    'C': 12.011,
    'N': 14.007,
    'O': 15.999,
    'F': 18.998,
    'Ne': 20.180,
    'Na': 22.990,
    'Al': 26.982,
    'Si': 28.085,
    'P': 30.974,
    'S': 32.06,
    'Cl': 35.45,
    'Ar': 39.948,
    'K': 39.098,
    'Fe': 55.845,
    'Co': 58.933,
    'Ni': 58.693,
    'Cu': 63.546,
    'Ga': 69.723,
    'As': 74.922,
    'Br': 79.904,
    'Kr': 83.798,
    'Rh': 102.91,
    'Pd': 106.42,
    'Ag': 107.87,
    'I': 126.90,
    'Xe': 131.29,
    'Pt': 195.08,
    'Au': 196.97,
    'E': 5.48579909e-4,  # electron
}


def molecular_weight_from_composition(composition):
    """
    Molecular weight [kg/kmol] from an elemental composition mapping.

    Raises:
        KeyError: if an element is unknown
    """
    total = 0.0
    for element, count in composition.items():
        if element not in ATOMIC_WEIGHTS:
            raise KeyError(f"Atomic weight for element '{element}' not found.")
        total += ATOMIC_WEIGHTS[element] * count
    return total


def composition_from_formula(species_name):
    """
    Guess an elemental composition from a species name.

    Examples:
        'H2O'      -> {'H': 2, 'O': 1}
        'CO2+'     -> {'C': 1, 'O': 2, 'E': -1}
        'Li+[elyt]'-> {'Li': 1, 'E': -1}
        'H(S)'     -> {'H': 1}   (site notation ignored)

    Returns:
        dict, or None if the name cannot be parsed
    """
    if species_name in ('e', 'electron'):
        return {'E': 1}

    # Strip phase tags and site notation, e.g. [elyt], (S), trailing *
    base = re.sub(r'\[.*?\]|\(.*?\)', '', species_name).rstrip('*')

    charge = 0
    match = re.search(r'([+-]+)$', base)
    if match:
        signs = match.group(1)
        charge = signs.count('+') - signs.count('-')
        base = base[:match.start()]

    matches = re.findall(r'([A-Z][a-z]?)(\d*)', base)
    if not matches or ''.join(e + n for e, n in matches) != base:
        return None

    composition = {}
    for element, count in matches:
        if element not in ATOMIC_WEIGHTS:
            logger.warning(f"Atomic weight for element '{element}' not found (formula: {species_name}).")
            return None
        composition[element] = composition.get(element, 0) + (int(count) if count else 1)
    if charge:
        composition['E'] = -charge
    return composition


def charge_from_composition(composition):
    """Electric charge in units of the elementary charge."""
    return -composition.get('E', 0.0)


class Species:
    """A single species with the properties needed for interface kinetics."""

    def __init__(self, name, composition=None, charge=None, molecular_weight=None, size=1.0):
        self.name = name
        if composition is None:
            composition = composition_from_formula(name)
            if composition is None and molecular_weight is None:
                raise ValueError(
                    f"Cannot determine composition for species '{name}'. "
                    f"Please provide 'composition' or 'molecular-weight' explicitly.")
        self.composition = dict(composition or {})
        self.charge = charge_from_composition(self.composition) if charge is None else charge
        if molecular_weight is None:
            molecular_weight = molecular_weight_from_composition(self.composition)
        self.molecular_weight = molecular_weight
        self.size = size

    def __repr__(self):
        return f"Species({self.name!r}, molecular_weight={self.molecular_weight:.4g}, charge={self.charge:g})"
