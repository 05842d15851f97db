"""Shared pytest fixtures and test utilities.

This module provides test doubles and factory fixtures for exercising suites
without console or network side effects.
"""

import pytest

from specrunner.channels.sinks import MemorySink
from specrunner.core.domain import Result
from specrunner.core.spec import Spec, vocabulary
from specrunner.core.suite import Suite
from specrunner.core.topic import Test


class RecordingReporter:
    """In-memory test double for reporters.

    Captures spec headers and result lines without performing I/O.
    """

    def __init__(self) -> None:
        self.specs: list[Spec] = []
        self.lines: list[tuple[str, bool]] = []

    def report_spec(self, spec: Spec) -> None:
        """Capture a spec header.

        Args:
            spec: The spec about to run.
        """
        self.specs.append(spec)

    def report_result(self, test: Test, result: Result) -> None:
        """Capture a (behavior text, passed) pair.

        Args:
            test: The test that ran.
            result: Its result.
        """
        self.lines.append((test.behavior_text, result["passed"]))


def build_nested_spec(ran: list[str]) -> Spec:
    """Build a spec with one outer topic, a nested topic and four tests.

    Every test appends its description to `ran` when it executes.

    Args:
        ran: List receiving test descriptions in execution order.

    Returns:
        Spec: The populated spec.
    """
    spec = Spec()
    describe, it, before, after = vocabulary(spec)

    def record(name):
        return lambda context: ran.append(name)

    def define():
        it("has a test", record("outer-test-1"))

        def nested():
            it("also has a test", record("nested-test-1"))
            it("may have another test", record("nested-test-2"))

        describe("nested topic", nested)
        it("may include trailing tests", record("outer-test-2"))

    describe("a spec", define)
    return spec


@pytest.fixture
def nested_spec():
    """Provide the nested four-test spec and the list its tests record into.

    Returns:
        tuple: (Spec, list[str]) pair.
    """
    ran: list[str] = []
    return build_nested_spec(ran), ran


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep ambient configuration from leaking into tests."""
    for name in ("SPECRUNNER_QUERY", "SPECRUNNER_REPORT_URL", "SPECRUNNER_SPECS_FILE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sink():
    """Provide an in-memory result sink."""
    return MemorySink()


@pytest.fixture
def reporter():
    """Provide a recording reporter."""
    return RecordingReporter()


@pytest.fixture
def suite_factory(sink, reporter):
    """Factory fixture for creating suites wired to the in-memory doubles.

    Returns:
        Callable: Factory creating a Suite from specs and a query string.
    """

    def _create(specs: list[Spec], query: str = "") -> Suite:
        """Create a Suite reporting to the shared sink and reporter.

        Args:
            specs: Specs to run.
            query: Query string configuring the suite.

        Returns:
            Suite: The configured suite.
        """
        return Suite(specs, query, sink=sink, reporter=reporter)
    return _create
