"""Core domain types and protocols for the specrunner framework.

This module defines the fundamental types used throughout the framework:
- Context: Type alias for the per-test execution context (dict[str, Any])
- Result: Type alias for the outcome of a single test run
- SuiteAddress: Structural locator for one test within a suite
- ResultSink / Reporter: Protocols for the boundaries results are sent across
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, TypeAlias

from pydantic import BaseModel, ValidationError

if TYPE_CHECKING:
    from specrunner.core.spec import Spec
    from specrunner.core.topic import Test


class MalformedAddressError(ValueError):
    """Raised when a serialized suite address cannot be parsed.

    This is the only configuration error the core reports loudly; every
    failure inside a test is captured into that test's result instead.
    """


class TimeLimitExceeded(TimeoutError):
    """Raised by a TimeLimit that elapsed before it was cancelled."""


Context: TypeAlias = dict[str, Any]
"""Context is the value fixtures build up for a test.

Fixtures receive the context accumulated so far and return a new dict with
their additions. Returning None (or any falsy value) keeps the previous
context. Treat it as immutable: build a copy rather than modifying in place.
"""

Result: TypeAlias = dict[str, Any]
"""Result of one test run: {"passed": bool} plus "error" on failure."""


class SuiteAddress(BaseModel):
    """Logical position of a Test within a Suite.

    Attributes:
        spec: Index of the Spec in the suite.
        topic: Child-topic indices walked from the spec's root topic. An empty
            list addresses the root topic itself.
        test: Index among the addressed topic's direct tests.
    """
    spec: int
    topic: list[int] = []
    test: int

    @classmethod
    def parse(cls, raw: str) -> SuiteAddress:
        """Parse a serialized address such as '{"spec":0,"topic":[1],"test":2}'.

        Args:
            raw: JSON text of the address.

        Returns:
            The parsed SuiteAddress.

        Raises:
            MalformedAddressError: If the text is not a valid address.
        """
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            raise MalformedAddressError(f"Invalid suite address: {raw!r}") from e

    def serialize(self) -> str:
        """Return the compact JSON form accepted by parse()."""
        return self.model_dump_json()


class ResultSink(Protocol):
    """Receiver of projected results on the far side of a boundary.

    A sink might post to a parent process, an HTTP endpoint, or a list in
    memory. The suite calls it once per executed test, whether or not
    console reporting is muted.
    """

    def post_result(self, message: Result) -> None:
        """Accept one cloneable result message.

        Args:
            message: Result projected by cloneable_result().
        """
        ...


class Reporter(Protocol):
    """Human-facing progress output for a suite run."""

    def report_spec(self, spec: Spec) -> None:
        """Announce that a spec is about to run.

        Args:
            spec: The spec whose tests follow.
        """
        ...

    def report_result(self, test: Test, result: Result) -> None:
        """Report the outcome of one test.

        Args:
            test: The test that ran.
            result: Its (unprojected) result.
        """
        ...
