"""
=============================================================================
CONFORMANCE CASES
=============================================================================

A case is data: an identifier, a display name and a check function.

    @DEFAULT_REGISTRY.case("1.1", "GET '/'")
    def get_root(client):
        client.request("/", "GET")

A check passes by returning None. It fails by returning a reason string,
or by letting a ConformanceError / HttpClientError escape; run() turns
those into a failed CaseResult carrying the diagnosis or error text.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional

from ..core.client import HttpClient
from ..http.errors import ConformanceError, HttpClientError, ParseDiagnosis


CaseCheck = Callable[[HttpClient], Optional[str]]


@dataclass(frozen=True)
class CaseResult:
    """Outcome of running one case."""

    identifier: str
    name: str
    passed: bool
    detail: Optional[str] = None
    diagnosis: Optional[ParseDiagnosis] = field(default=None, compare=False)


@dataclass(frozen=True)
class ConformanceCase:
    """One named check against a live server."""

    identifier: str
    name: str
    check: CaseCheck = field(compare=False)

    def run(self, client: HttpClient) -> CaseResult:
        try:
            problem = self.check(client)
        except ConformanceError as e:
            return CaseResult(self.identifier, self.name, False, str(e.diagnosis), e.diagnosis)
        except HttpClientError as e:
            return CaseResult(self.identifier, self.name, False, f"{type(e).__name__}: {e}")

        if problem is not None:
            return CaseResult(self.identifier, self.name, False, problem)
        return CaseResult(self.identifier, self.name, True)


class CaseRegistry:
    """Ordered collection of cases; run order is registration order."""

    def __init__(self):
        self._cases: Dict[str, ConformanceCase] = {}

    def register(self, case: ConformanceCase) -> ConformanceCase:
        if case.identifier in self._cases:
            raise ValueError(f"Duplicate case identifier: {case.identifier}")
        self._cases[case.identifier] = case
        return case

    def case(self, identifier: str, name: str) -> Callable[[CaseCheck], CaseCheck]:
        """Decorator registering a check function as a case."""
        def decorator(check: CaseCheck) -> CaseCheck:
            self.register(ConformanceCase(identifier, name, check))
            return check
        return decorator

    def get(self, identifier: str) -> Optional[ConformanceCase]:
        return self._cases.get(identifier)

    @property
    def cases(self) -> List[ConformanceCase]:
        return list(self._cases.values())

    def __iter__(self) -> Iterator[ConformanceCase]:
        return iter(self.cases)

    def __len__(self) -> int:
        return len(self._cases)


DEFAULT_REGISTRY = CaseRegistry()


# =============================================================================
# METHOD SECTION (RFC 7231 Section 4.3)
# =============================================================================

@DEFAULT_REGISTRY.case("1.1", "GET '/'")
def get_root(client: HttpClient) -> Optional[str]:
    client.request("/", "GET")
    return None


@DEFAULT_REGISTRY.case("1.2", "OPTIONS '*'")
def options_asterisk(client: HttpClient) -> Optional[str]:
    response = client.request("*", "OPTIONS")
    if response.status_code >= 400:
        return f"OPTIONS '*' answered with {response.status_text}"
    return None


@DEFAULT_REGISTRY.case("1.3", "HEAD '/'")
def head_root(client: HttpClient) -> Optional[str]:
    response = client.request("/", "HEAD")
    if response.has_body:
        return "a response to HEAD must not have a body"
    return None
