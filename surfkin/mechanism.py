# surfkin/mechanism.py
"""
Loader for YAML mechanism files describing interface kinetics.

A mechanism file lists phases, species and reactions:

    units: {length: cm, quantity: mol, activation-energy: J/mol}
    phases:
    - name: gas
      thermo: ideal-gas
      species: [H2, H2O]
    - name: surface
      thermo: ideal-surface
      adjacent-phases: [gas]
      species: [PT(S), H(S)]
      site-density: 2.7063e-09
      Motz-Wise: true
      state: {coverages: {PT(S): 1.0}}
    species:
    - name: H2
      composition: {H: 2}
    reactions:
    - equation: H2 + 2 PT(S) => 2 H(S)
      sticking-coefficient: {A: 0.046, b: 0, Ea: 0}

Supports optional Jinja2 templating for parameter sweeps.
"""
import os
import logging

import yaml
from jinja2 import Environment, FileSystemLoader

from .errors import InputError
from .interface_rate import new_interface_rate
from .kinetics import Kinetics, Phase, Reaction
from .node import RateNode, validate_rate_node
from .species_properties import Species
from .units import UnitSystem

logger = logging.getLogger(__name__)

# thermo model -> phase of matter
THERMO_MODELS = {
    'ideal-gas': 'gas',
    'ideal-surface': 'surface',
    'coverage-dependent-surface': 'surface',
    'edge': 'edge',
    'ideal-condensed': 'liquid',
    'ideal-molal-solution': 'liquid',
    'electron-cloud': 'solid',
    'binary-solution-tabulated': 'solid',
    'lattice': 'solid',
}


def read_mechanism(path, use_jinja2=False, jinja_vars=None):
    """
    Read a mechanism file into a dictionary.
    If use_jinja2 is True, renders with Jinja2 before parsing YAML.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Mechanism file not found: {path}")
    if use_jinja2:
        env = Environment(loader=FileSystemLoader(os.path.dirname(os.path.abspath(path))))
        template = env.get_template(os.path.basename(path))
        return yaml.safe_load(template.render(jinja_vars or {}))
    with open(path, 'r') as f:
        return yaml.safe_load(f)


def build_species(entries):
    species = {}
    for entry in entries:
        name = entry['name']
        try:
            species[name] = Species(
                name,
                composition=entry.get('composition'),
                charge=entry.get('charge'),
                molecular_weight=entry.get('molecular-weight'),
                size=float(entry.get('sites', 1.0)),
            )
        except (KeyError, ValueError) as e:
            raise InputError(f"Invalid species entry '{name}': {e}") from e
    return species


def build_phase(entry, species, units):
    name = entry['name']
    phase_of_matter = entry.get('phase-of-matter') or THERMO_MODELS.get(entry.get('thermo'), 'solid')
    missing = [sp for sp in entry.get('species', []) if sp not in species]
    if missing:
        raise InputError(f"Phase '{name}' lists undefined species {missing}")
    site_density = None
    if 'site-density' in entry:
        site_density = units.convert(entry['site-density'], 'kmol/m^2')
    standard_concentration = 1.0
    if 'standard-concentration' in entry:
        standard_concentration = units.convert(entry['standard-concentration'], 'kmol/m^3')
    phase = Phase(name, [species[sp] for sp in entry.get('species', [])],
                  phase_of_matter=phase_of_matter, site_density=site_density,
                  standard_concentration=standard_concentration)
    coverages = entry.get('state', {}).get('coverages')
    if coverages:
        phase.set_coverages(coverages)
    return phase


def _reaction_entries(mech, interface_entry):
    sections = interface_entry.get('reactions')
    if isinstance(sections, list) and all(isinstance(s, str) for s in sections):
        entries = []
        for section in sections:
            if section not in mech:
                raise InputError(f"Reaction section '{section}' not found")
            entries.extend(mech[section])
        return entries
    return mech.get('reactions', [])


def build_reaction(entry, kinetics, units, validate=True):
    node = RateNode(entry, units)
    if validate:
        validate_rate_node(node)
    if 'equation' not in node:
        raise InputError(f"Reaction entry is missing 'equation': {entry}")
    reaction = Reaction(node['equation'], orders=node.get('orders'),
                        id=node.get('id', ''), input=node)
    rate_units = reaction.rate_units(kinetics)
    reaction.rate = new_interface_rate(node, rate_units)
    return reaction


def load_mechanism(path, interface=None, use_jinja2=False, jinja_vars=None, validate=True):
    """
    Load an interface mechanism from a YAML file.

    Args:
        path: Path to the mechanism file
        interface: Name of the interface phase; the first interface phase if None
        use_jinja2: Render the file with Jinja2 before parsing
        jinja_vars: Variables for Jinja2 rendering
        validate: Check reaction records against the rate schema

    Returns:
        Kinetics: kinetics manager holding the interface, its adjacent
        phases and all reactions
    """
    mech = read_mechanism(path, use_jinja2, jinja_vars)
    units = UnitSystem(mech.get('units'))
    species = build_species(mech.get('species', []))

    phase_entries = {entry['name']: entry for entry in mech.get('phases', [])}
    if interface is None:
        candidates = [name for name, entry in phase_entries.items()
                      if THERMO_MODELS.get(entry.get('thermo')) in ('surface', 'edge')
                      or entry.get('phase-of-matter') in ('surface', 'edge')]
        if not candidates:
            raise InputError(f"No interface phase found in '{path}'")
        interface = candidates[0]
    if interface not in phase_entries:
        raise InputError(f"Phase '{interface}' not found in '{path}'")
    interface_entry = phase_entries[interface]
    if 'site-density' not in interface_entry:
        raise InputError(f"Phase '{interface}' is not an interface phase (no 'site-density')")

    adjacent = interface_entry.get('adjacent-phases')
    if adjacent is None:
        adjacent = [name for name in phase_entries if name != interface]
    phases = []
    for name in list(adjacent) + [interface]:
        if name not in phase_entries:
            raise InputError(f"Adjacent phase '{name}' of '{interface}' not found")
        phases.append(build_phase(phase_entries[name], species, units))

    motz_wise = interface_entry.get('Motz-Wise', mech.get('Motz-Wise', False))
    kinetics = Kinetics(phases, motz_wise=motz_wise)

    for entry in _reaction_entries(mech, interface_entry):
        kinetics.add_reaction(build_reaction(entry, kinetics, units, validate))

    logger.info(f"Loaded {kinetics.n_reactions} reactions on '{interface}' "
                f"with {kinetics.n_total_species} species in {kinetics.n_phases} phases")
    return kinetics
