# surfkin/constants.py
"""Physical constants in SI units with kmol as the quantity unit."""

import math

AVOGADRO = 6.02214076e26  # [1/kmol]
BOLTZMANN = 1.380649e-23  # [J/K]
ELECTRON_CHARGE = 1.602176634e-19  # [C]

GAS_CONSTANT = AVOGADRO * BOLTZMANN  # [J/kmol/K]
FARADAY = ELECTRON_CHARGE * AVOGADRO  # [C/kmol]
PI = math.pi

ONE_ATM = 101325.0  # [Pa]

# Floor applied before taking logarithms of coverages
TINY = 1.0e-20
