"""
Conformance cases and the runner that executes them.

Cases live in a flat registry (see cases.py); adding a case is one
decorated function.
"""

from .cases import CaseRegistry, CaseResult, ConformanceCase, DEFAULT_REGISTRY
from .runner import RunReport, format_result, run_cases

__all__ = [
    "CaseRegistry",
    "CaseResult",
    "ConformanceCase",
    "DEFAULT_REGISTRY",
    "RunReport",
    "format_result",
    "run_cases",
]
