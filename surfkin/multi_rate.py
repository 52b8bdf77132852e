# surfkin/multi_rate.py
"""Batched evaluation of all interface rates of one type over a shared snapshot."""
import logging

from .coverage import CoverageData
from .errors import InputError

logger = logging.getLogger(__name__)


class MultiRate:
    """
    Holds the rates of one type together with the ``CoverageData`` they share.

    ``update`` refreshes the snapshot once per pass; ``get_rate_constants``
    then updates and evaluates each rate in turn. Rates only read the
    snapshot, so their order does not matter.
    """

    def __init__(self, rate_type=None):
        self.rate_type = rate_type
        self.rates = []  # (reaction index, rate)
        self._positions = {}  # reaction index -> position in self.rates
        self.shared_data = CoverageData()

    def __len__(self):
        return len(self.rates)

    def add(self, rxn_index, rate):
        if self.rate_type is None:
            self.rate_type = rate.type
        elif rate.type != self.rate_type:
            raise InputError(f"Cannot add rate of type '{rate.type}' to '{self.rate_type}' evaluator")
        self._positions[rxn_index] = len(self.rates)
        self.rates.append((rxn_index, rate))

    def replace(self, rxn_index, rate):
        """Replace the rate of reaction *rxn_index*; returns False if it is not held here."""
        if rate.type != self.rate_type:
            raise InputError(f"Cannot replace rate of type '{self.rate_type}' with '{rate.type}'")
        if rxn_index not in self._positions:
            return False
        self.rates[self._positions[rxn_index]] = (rxn_index, rate)
        return True

    def update(self, temperature, **state):
        """Refresh the shared snapshot; see ``CoverageData.update``."""
        changed = self.shared_data.update(temperature, **state)
        if changed:
            logger.debug(f"'{self.rate_type}' data updated at T = {temperature} K")
        return changed

    def get_rate_constants(self, kf):
        """Write the rate constant of every held reaction into *kf* (indexed by reaction)."""
        for rxn_index, rate in self.rates:
            rate.update_from_struct(self.shared_data)
            kf[rxn_index] = rate.eval_from_struct(self.shared_data)
        return kf

    def eval_single(self, rate):
        rate.update_from_struct(self.shared_data)
        return rate.eval_from_struct(self.shared_data)
