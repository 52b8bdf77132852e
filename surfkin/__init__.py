# surfkin/__init__.py
"""Coverage-dependent and electrochemical rate coefficients for interface reactions."""

from .coverage import CoverageData, CoverageBase, StickingCoverage
from .errors import InputError
from .interface_rate import (
    InterfaceRate, StickingRate,
    InterfaceArrheniusRate, InterfaceBlowersMaselRate,
    StickingArrheniusRate, StickingBlowersMaselRate,
    interface_rate_class, new_interface_rate,
)
from .kinetics import Kinetics, Phase, Reaction
from .mechanism import load_mechanism
from .rate_laws import ArrheniusRate, BlowersMaselRate, RateLaw, register_rate_law
from .species_properties import Species

__version__ = '0.1.0'
