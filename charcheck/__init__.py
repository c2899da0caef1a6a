"""
Bulk character-name availability checker.

Loads each candidate's CharPage in a headless browser and keeps the ones the
service reports as ``Not Found!``.
"""

from .check import Availability, CheckResult, check_identifier
from .coordinator import RunSummary, partition, run
from .store import ResultStore

__all__ = [
    'Availability', 'CheckResult', 'check_identifier',
    'RunSummary', 'partition', 'run', 'ResultStore',
]
