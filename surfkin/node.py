# surfkin/node.py
"""
Configuration records for reaction rates.

A ``RateNode`` is a plain ``dict`` that also knows the unit system its
numeric fields are written in. Nested mappings are wrapped so that they share
the parent's units, which lets e.g. the ``coverage-dependencies`` block be
converted with the units declared at the top of a mechanism file.
"""
import json
import os

import jsonschema

from .errors import InputError
from .units import UnitSystem


class RateNode(dict):
    """Key/value map with typed lookups and an attached ``UnitSystem``."""

    def __init__(self, data=None, units=None):
        super().__init__()
        self.units = units if units is not None else UnitSystem()
        for key, value in (data or {}).items():
            self[key] = value

    def __setitem__(self, key, value):
        if isinstance(value, dict) and not isinstance(value, RateNode):
            value = RateNode(value, self.units)
        super().__setitem__(key, value)

    def has_key(self, key):
        return key in self

    def get_bool(self, key, default):
        value = self.get(key, default)
        if not isinstance(value, bool):
            raise InputError(f"Key '{key}' must be a boolean, got {value!r}", self.get('equation'))
        return value

    def get_double(self, key, default):
        value = self.get(key, default)
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise InputError(f"Key '{key}' must be a number, got {value!r}", self.get('equation')) from e

    def get_string(self, key, default):
        value = self.get(key, default)
        if value is not None and not isinstance(value, str):
            raise InputError(f"Key '{key}' must be a string, got {value!r}", self.get('equation'))
        return value

    def get_map(self, key):
        value = self.get(key)
        if value is None:
            return RateNode(units=self.units)
        if not isinstance(value, dict):
            raise InputError(f"Key '{key}' must be a mapping, got {value!r}", self.get('equation'))
        return value

    def to_dict(self):
        """Return a plain nested ``dict`` copy (suitable for YAML output)."""
        return {key: value.to_dict() if isinstance(value, RateNode) else value
                for key, value in self.items()}


def load_schema():
    """Load the rate record schema from rate_schema.json"""
    schema_path = os.path.join(os.path.dirname(__file__), 'rate_schema.json')
    with open(schema_path, 'r') as f:
        return json.load(f)


_SCHEMA = None


def validate_rate_node(node):
    """
    Validate the structure of a reaction/rate record against the JSON schema.

    Raises:
        jsonschema.ValidationError: if the record is malformed
    """
    global _SCHEMA
    if _SCHEMA is None:
        _SCHEMA = load_schema()
    data = node.to_dict() if isinstance(node, RateNode) else node
    jsonschema.validate(instance=data, schema=_SCHEMA)
