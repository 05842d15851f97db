"""Suite execution engine.

The Suite composes an ordered list of Specs and drives their tests:
- Parses query parameters that select a single addressed test or mute output
- Resolves addresses to tests and tests back to addresses
- Runs every test sequentially, or just the addressed one
- Reports each result to a console reporter and a result sink

A Suite is configured by query parameters so that an orchestrating harness can
re-invoke any one test in isolation:

    suite = Suite([foo_spec, bar_spec], "specrunner_suite_address=" + address.serialize())
    await suite.run()
"""
from __future__ import annotations

import logging
import os
import uuid
from datetime import datetime
from typing import Iterator, Mapping
from urllib.parse import parse_qsl, urlencode

from specrunner.core.domain import Reporter, Result, ResultSink, SuiteAddress
from specrunner.core.spec import Spec
from specrunner.core.topic import Test, Topic
from specrunner.helpers.results import cloneable_result

ADDRESS_PARAM = "specrunner_suite_address"
MUTED_PARAM = "specrunner_muted"
QUERY_ENV = "SPECRUNNER_QUERY"


def parse_query(query: str) -> dict[str, str]:
    """Parse a URL query string into a mapping.

    Keys without a value (e.g. "specrunner_muted") map to an empty string.
    A leading "?" is ignored.

    Args:
        query: Query string such as "a=1&b".

    Returns:
        Mapping of parameter names to decoded values.
    """
    return dict(parse_qsl(query.removeprefix("?"), keep_blank_values=True))


class Suite:
    """An ordered set of specs with full-run and single-address-run modes.

    Each Suite instance gets a unique 8-character hex ID and a per-run logger.
    When log_dir is given the logger writes to a timestamped file there and
    does not propagate, keeping log lines off the console.

    Attributes:
        id: Unique identifier for this suite instance.
        specs: Specs in the order they run.
        query_params: Parsed query parameters.
        address: Address of the only test to run, or None for a full run.
        is_muted: Whether console reporting is suppressed.
        sink: Receiver of projected results, or None.
        reporter: Console reporter, or None.
        logger: Per-run logger instance.
    """

    def __init__(
        self,
        specs: list[Spec] | None = None,
        query: str | Mapping[str, str] | None = None,
        *,
        sink: ResultSink | None = None,
        reporter: Reporter | None = None,
        log_dir: str | None = None,
    ) -> None:
        """Initialize a Suite.

        Args:
            specs: Specs to run, in order.
            query: Query string or mapping of parameters. Defaults to the
                SPECRUNNER_QUERY environment variable.
            sink: Receiver of every projected result.
            reporter: Receiver of human-readable output unless muted.
            log_dir: Optional directory for a per-run log file.

        Raises:
            MalformedAddressError: If the address parameter cannot be parsed.
        """
        self.id: str = uuid.uuid4().hex[:8]
        self.specs: list[Spec] = list(specs or [])
        self.sink = sink
        self.reporter = reporter

        self.logger = logging.getLogger(f"specrunner.run.{self.id}")
        if log_dir is not None:
            os.makedirs(log_dir, exist_ok=True)
            timestamp = datetime.now().strftime('%Y%m%d%H%M%S')
            log_path = os.path.join(log_dir, f"{timestamp}-{self.id}.log")
            self.logger.setLevel(logging.DEBUG)
            file_handler = logging.FileHandler(log_path)
            file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s - %(message)s"))
            self.logger.addHandler(file_handler)
            self.logger.propagate = False
            self.logger.debug(f"Log file: {log_path}")

        if query is None:
            query = os.environ.get(QUERY_ENV, "")
        self.query_params: dict[str, str] = parse_query(query) if isinstance(query, str) else dict(query)

        raw_address = self.query_params.get(ADDRESS_PARAM)
        self.address: SuiteAddress | None = SuiteAddress.parse(raw_address) if raw_address else None
        self.is_muted = MUTED_PARAM in self.query_params

        self.logger.info(f"Suite initialized: suite_id={self.id}, specs={len(self.specs)}")
        self.logger.debug(f"Query params: {self.query_params}")

    def get_test_by_address(self, address: SuiteAddress) -> Test | None:
        """Look up a test by address.

        Args:
            address: The address to resolve.

        Returns:
            The test, or None if no test exists at that address.
        """
        if not 0 <= address.spec < len(self.specs):
            return None
        return self.specs[address.spec].get_test_by_address(address)

    def get_address_for_test(self, test: Test) -> SuiteAddress:
        """Resolve the address of a test within this suite.

        Walks from the test's topic up to the root, recording each topic's
        index among its parent's subtopics. The root is matched by identity
        against each spec's root topic. Components that cannot be resolved
        are -1.

        Args:
            test: A test belonging to one of this suite's specs.

        Returns:
            The test's address.
        """
        topic: Topic | None = test.topic
        test_index = _index_of(topic.tests, test)
        topic_address: list[int] = []
        spec_index = -1

        while topic is not None:
            parent = topic.parent
            if parent is not None:
                topic_address.insert(0, _index_of(parent.topics, topic))
            else:
                spec_index = next((i for i, spec in enumerate(self.specs) if spec.root_topic is topic), -1)
            topic = parent

        return SuiteAddress(spec=spec_index, topic=topic_address, test=test_index)

    def query_for_test(self, test: Test) -> str:
        """Build a query string that runs only the given test.

        Args:
            test: A test belonging to this suite.

        Returns:
            A query string carrying the test's serialized address.
        """
        return urlencode({ADDRESS_PARAM: self.get_address_for_test(test).serialize()})

    def iter_addresses(self) -> Iterator[tuple[SuiteAddress, Test]]:
        """Yield every test with its address, in full-run order."""
        for spec_index, spec in enumerate(self.specs):
            if spec.root_topic is not None:
                yield from self._walk(spec.root_topic, spec_index, [])

    def _walk(self, topic: Topic, spec_index: int, topic_address: list[int]) -> Iterator[tuple[SuiteAddress, Test]]:
        for i in range(len(topic.tests)):
            address = SuiteAddress(spec=spec_index, topic=list(topic_address), test=i)
            test = self.get_test_by_address(address)
            if test is not None:
                yield address, test
        for i, subtopic in enumerate(topic.topics):
            yield from self._walk(subtopic, spec_index, [*topic_address, i])

    async def run(self, address: SuiteAddress | None = None) -> list[Result]:
        """Run the addressed test, or every test in every spec.

        With an address (given here, or parsed from the query parameters)
        only that test runs; if nothing exists there, nothing runs and nothing
        is reported. Otherwise each spec's tree is walked depth-first: a
        topic's own tests first, then its subtopics in order. Tests run one at
        a time, each awaited before the next starts.

        Args:
            address: Optional address overriding the parsed one.

        Returns:
            The results of the tests that ran, in run order.

        Raises:
            Exception: Any exception raised by a cleanup is logged and re-raised.
        """
        if address is None:
            address = self.address
        results: list[Result] = []

        if address is not None:
            self.logger.info(f"Addressed run started: {address.serialize()}")
            test = self.get_test_by_address(address)
            if test is None:
                self.logger.info(f"No test found at {address.serialize()}")
            else:
                results.append(await self._test_run(test))
        else:
            self.logger.info(f"Full run started: {len(self.specs)} specs")
            for spec_index, spec in enumerate(self.specs):
                if spec.root_topic is None:
                    continue
                if not self.is_muted and self.reporter is not None:
                    self.reporter.report_spec(spec)
                results.extend(await self._topic_run(spec.root_topic, spec_index))

        failed = sum(1 for result in results if not result["passed"])
        self.logger.info(f"Run completed: {len(results)} tests, {failed} failed")
        return results

    async def _topic_run(self, topic: Topic, spec_index: int, topic_address: list[int] | None = None) -> list[Result]:
        topic_address = topic_address if topic_address is not None else []
        results: list[Result] = []

        for i in range(len(topic.tests)):
            test = self.get_test_by_address(SuiteAddress(spec=spec_index, topic=list(topic_address), test=i))
            if test is not None:
                results.append(await self._test_run(test))

        for i, subtopic in enumerate(topic.topics):
            topic_address.append(i)
            results.extend(await self._topic_run(subtopic, spec_index, topic_address))
            topic_address.pop()

        return results

    async def _test_run(self, test: Test) -> Result:
        self.logger.info(f"Executing test: {test.behavior_text}")
        try:
            result = await test.run(self)
        except Exception as e:
            self.logger.error(f"Cleanup failed: {test.behavior_text} - {type(e).__name__}: {e}")
            raise

        if result["passed"]:
            self.logger.info(f"Test passed: {test.behavior_text}")
        else:
            error = result.get("error")
            self.logger.error(f"Test failed: {test.behavior_text} - {type(error).__name__}: {error}")

        if not self.is_muted and self.reporter is not None:
            self.reporter.report_result(test, result)
        if self.sink is not None:
            self.sink.post_result(cloneable_result(result))
        return result


def _index_of(items: list, item: object) -> int:
    return next((i for i, candidate in enumerate(items) if candidate is item), -1)
