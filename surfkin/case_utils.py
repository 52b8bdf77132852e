# surfkin/case_utils.py
"""
Utilities for discovering case folders.
"""
import os

MECHANISM_FILE = 'mechanism.yml'


def discover_cases(cases_dir='cases'):
    """
    Discover all valid case folders in the cases/ directory.
    A valid case has a mechanism.yml file.

    Returns:
        list: List of case names (subdirectory names)
    """
    if not os.path.isdir(cases_dir):
        return []

    cases = []
    for entry in os.listdir(cases_dir):
        case_path = os.path.join(cases_dir, entry)
        if os.path.isfile(os.path.join(case_path, MECHANISM_FILE)):
            cases.append(entry)

    return sorted(cases)


def get_case_mechanism_path(case_name, cases_dir='cases'):
    """
    Get the full path to a case's mechanism.yml file.

    Args:
        case_name (str): Name of the case folder
        cases_dir (str): Base cases directory

    Returns:
        str: Full path to mechanism.yml
    """
    return os.path.join(cases_dir, case_name, MECHANISM_FILE)
