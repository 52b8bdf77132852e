# main.py

import sys
import logging
import traceback

from surfkin.case_utils import discover_cases, get_case_mechanism_path
from surfkin.mechanism import load_mechanism

TEMPERATURES = [300.0, 500.0, 800.0, 1000.0, 1500.0]


def main():
    """
    Load a case from cases/ and print the forward rate constants of all its
    reactions over a range of temperatures, at the coverages given in the
    mechanism file.

    Usage: python main.py [case_name]
    """
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

    available_cases = discover_cases('cases')
    case_name = sys.argv[1] if len(sys.argv) > 1 else 'pt_hydrogen'
    if case_name not in available_cases:
        print(f"Error: case '{case_name}' not found. Available: {available_cases}")
        return 1

    mechanism_path = get_case_mechanism_path(case_name)
    try:
        print(f"Loading mechanism from: {mechanism_path}")
        kinetics = load_mechanism(mechanism_path)
    except Exception as e:
        print(f"An error occurred while loading the mechanism: {e}")
        traceback.print_exc()
        return 1

    interface = kinetics.interface
    print(f"Interface '{interface.name}', site density {interface.site_density:.4e} kmol/m^2")
    for name, theta in zip(interface.species_names, interface.coverages):
        print(f"  theta[{name}] = {theta:.4f}")

    header = f"{'#':<3} | {'Reaction':<40} | {'Type':<22} |"
    for T in TEMPERATURES:
        header += f" {f'T={T:g} K':<11} |"
    print(header)
    print("=" * len(header))

    rows = {i: f"{i:<3} | {rxn.equation:<40} | {rxn.rate.type:<22} |"
            for i, rxn in enumerate(kinetics.reactions)}
    for T in TEMPERATURES:
        kinetics.update_rates(T, interface.coverages)
        kf = kinetics.get_fwd_rate_constants()
        for i in rows:
            rows[i] += f" {kf[i]: 1.4e} |"
    print("\n".join(rows.values()))
    return 0


if __name__ == '__main__':
    sys.exit(main())
