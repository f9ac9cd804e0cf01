"""Runs conformance cases and renders their results."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from .cases import CaseResult, ConformanceCase
from ..core.client import HttpClient


logger = logging.getLogger(__name__)

# ANSI escapes
WHITE = "\x1b[37m"
MAGENTA = "\x1b[35m"
GREEN = "\x1b[32m"
RED = "\x1b[31m"
RESET = "\x1b[0m"


@dataclass
class RunReport:
    """Results of one run, in execution order."""

    results: List[CaseResult] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        return len(self.results) - self.passed

    @property
    def all_passed(self) -> bool:
        return self.failed == 0

    def summary(self) -> str:
        return f"{self.passed} passed, {self.failed} failed ({len(self.results)} total)"


def run_cases(client: HttpClient, cases: Iterable[ConformanceCase]) -> RunReport:
    """Run every case in order against the client's server."""
    report = RunReport()
    for case in cases:
        logger.debug(f"Running case {case.identifier} [{case.name}]")
        result = case.run(client)
        if not result.passed:
            logger.info(f"Case {case.identifier} failed: {result.detail}")
        report.results.append(result)
    return report


def format_result(result: CaseResult, color: bool = True) -> str:
    """
    One report line per case:

        > Test 1.1 [GET '/'] passed.
    """
    verdict = "passed" if result.passed else "failed"
    if not color:
        return f"> Test {result.identifier} [{result.name}] {verdict}."

    verdict_color = GREEN if result.passed else RED
    return (
        f"> {WHITE}Test {result.identifier} {RESET}"
        f"[{MAGENTA}{result.name}{RESET}] "
        f"{verdict_color}{verdict}{RESET}."
    )
