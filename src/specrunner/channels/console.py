"""Console reporter for specrunner suites.

This module provides the ConsoleReporter class, which implements the Reporter
protocol for terminals. Each executed test produces one pass/fail line on
stdout.
"""
import logging
import sys
from typing import Any, TextIO

from specrunner.core.domain import Result
from specrunner.core.spec import Spec
from specrunner.core.topic import Test

logger = logging.getLogger("specrunner.channels.console")

PASSED = " PASSED "
FAILED = " FAILED "
ISOLATED = "[ISOLATED] "


class ConsoleReporter:
    """Reporter writing human-readable results to a text stream.

    Lines take the form "<behavior text>... PASSED". Tests configured as
    isolated carry an [ISOLATED] prefix so they stand out when re-run on
    their own. Failed tests are followed by the error on stderr.

    Attributes:
        type: Always "console" to identify this reporter type.
        stream: Stream receiving result lines. Defaults to stdout.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        """Initialize the reporter.

        Args:
            stream: Stream for result lines. Defaults to sys.stdout at write time.
        """
        self.type = "console"
        self.stream = stream

    def _print(self, message: str, **opts: Any) -> None:
        opts.setdefault("file", self.stream or sys.stdout)
        print(message, flush=True, **opts)

    def report_spec(self, spec: Spec) -> None:
        """Print a header line for a spec.

        Args:
            spec: The spec about to run.
        """
        description = spec.root_topic.description if spec.root_topic is not None else spec.name
        logger.debug(f"Spec header: {description}")
        self._print(f"== {description} ==")

    def report_result(self, test: Test, result: Result) -> None:
        """Print the outcome of one test.

        Args:
            test: The test that ran.
            result: Its result.
        """
        line = f"{test.behavior_text}...{PASSED if result['passed'] else FAILED}"
        if test.isolated:
            line = f"{ISOLATED}{line}"
        self._print(line)

        error = result.get("error")
        if not result["passed"] and error is not None:
            self._print(f"    {type(error).__name__}: {error}", file=sys.stderr)
