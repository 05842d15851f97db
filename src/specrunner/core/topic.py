"""Test tree nodes: topics that group tests, and the tests themselves.

A Topic owns its child tests and subtopics through its child lists. Each
node also keeps a back-reference to its parent, used only to walk upward when
building behavior text, folding fixtures, running cleanups and resolving
addresses.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, TypeAlias

from specrunner.core.domain import Context, Result
from specrunner.helpers.timing import time_limit

if TYPE_CHECKING:
    from specrunner.core.suite import Suite

logger = logging.getLogger("specrunner.core.topic")

Fixture: TypeAlias = Callable[[Context], Context | None | Awaitable[Context | None]]
Cleanup: TypeAlias = Callable[[Context], Any]
Implementation: TypeAlias = Callable[[Context], Any]


async def _settle(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


@dataclass(frozen=True)
class TestConfig:
    """Per-test options.

    Attributes:
        timeout: Seconds an asynchronous implementation may take before the
            test fails. None means no limit.
        isolated: Marks the test for emphasis when it is reported.
    """
    __test__ = False

    timeout: float | None = None
    isolated: bool = False


class Topic:
    """A named grouping of tests, subtopics, fixtures and cleanups.

    Child ordering is insertion order and defines suite addresses, so it must
    not change once the defining spec has been built.

    Attributes:
        description: Text describing the behavior this topic groups.
        tests: Direct child tests in registration order.
        topics: Direct child topics in registration order.
        fixtures: Setup functions folded into every descendant test's context.
        cleanups: Teardown functions run after every descendant test.
        parent: Enclosing topic, or None for a root.
    """

    def __init__(self, description: str, parent: Topic | None = None) -> None:
        self.description = description
        self.tests: list[Test] = []
        self.topics: list[Topic] = []
        self.fixtures: list[Fixture] = []
        self.cleanups: list[Cleanup] = []
        self.parent = parent

    def __repr__(self) -> str:
        return f"Topic({self.description!r})"

    @property
    def behavior_text(self) -> str:
        parent = self.parent
        if parent is None:
            return self.description
        return f"{parent.behavior_text} {self.description}"

    @property
    def total_test_count(self) -> int:
        return len(self.tests) + sum(topic.total_test_count for topic in self.topics)

    def add_subtopic(self, description: str) -> Topic:
        """Create a child topic, append it, and return it.

        Args:
            description: Description of the new topic.

        Returns:
            The new subtopic.
        """
        subtopic = Topic(description, self)
        self.topics.append(subtopic)
        return subtopic

    def add_test(self, description: str, implementation: Implementation, config: TestConfig | None = None) -> Test:
        """Create a test owned by this topic, append it, and return it.

        Args:
            description: Description of the behavior under test.
            implementation: Callable receiving the context. May return an
                awaitable, which is awaited.
            config: Optional per-test options.

        Returns:
            The new test.
        """
        test = Test(description, implementation, config, self)
        self.tests.append(test)
        return test

    def add_fixture(self, fixture: Fixture) -> Fixture:
        self.fixtures.append(fixture)
        return fixture

    def add_cleanup(self, cleanup: Cleanup) -> Cleanup:
        self.cleanups.append(cleanup)
        return cleanup

    async def build_context(self) -> Context:
        """Fold every fixture from the root topic down to this one.

        The fold starts from a new empty dict on every call, so each test gets
        a fresh context. A fixture returning a falsy value leaves the
        accumulated context unchanged.

        Returns:
            The context for a test directly under this topic.
        """
        parent = self.parent
        context = await parent.build_context() if parent is not None else {}
        for fixture in self.fixtures:
            context = await _settle(fixture(context)) or context
        return context

    async def cleanup_context(self, context: Context) -> None:
        """Run this topic's cleanups last-registered first, then the parent's.

        Args:
            context: The context the test ran with.
        """
        for cleanup in reversed(self.cleanups):
            await _settle(cleanup(context))
        parent = self.parent
        if parent is not None:
            await parent.cleanup_context(context)


class Test:
    """A leaf unit of behavior bound to one topic.

    Attributes:
        description: Text completing the topic's behavior sentence.
        implementation: Callable receiving the context.
        config: Per-test options.
        topic: The topic this test belongs to.
    """
    __test__ = False

    def __init__(self, description: str, implementation: Implementation, config: TestConfig | None, topic: Topic) -> None:
        self.description = description
        self.implementation = implementation
        self.config = config or TestConfig()
        self.topic = topic

    def __repr__(self) -> str:
        return f"Test({self.description!r})"

    @property
    def behavior_text(self) -> str:
        return f"{self.topic.behavior_text} {self.description}"

    @property
    def isolated(self) -> bool:
        return self.config.isolated

    async def _invoke(self, context: Context) -> None:
        outcome = self.implementation(context)
        if not inspect.isawaitable(outcome):
            return
        if self.config.timeout is None:
            await outcome
            return

        task = asyncio.ensure_future(outcome)
        limit = time_limit(self.config.timeout)
        try:
            await asyncio.wait({task, limit.future}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            limit.cancel()
        if not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            await limit
        if limit.expired:
            # Both finished in the same iteration; the task's outcome wins.
            limit.future.exception()
        await task

    async def run(self, suite: Suite | None = None) -> Result:
        """Execute the test in a fresh context and capture the outcome.

        Failures of the implementation, including exceeding the configured
        timeout, become {"passed": False, "error": exc}. A failing fixture is
        captured the same way, but then no cleanup runs because no context was
        produced. Otherwise the topic chain's cleanups run exactly once after
        the result is known.

        Args:
            suite: The suite driving this run, if any.

        Returns:
            The test result.

        Raises:
            Exception: Any exception raised by a cleanup is propagated.
        """
        logger.debug(f"Running test: {self.behavior_text}")
        try:
            context = await self.topic.build_context()
        except Exception as e:
            logger.error(f"Fixture failed for {self.behavior_text}: {type(e).__name__}: {e}")
            return {"passed": False, "error": e}

        try:
            await self._invoke(context)
            result: Result = {"passed": True}
        except Exception as e:
            logger.debug(f"Test failed: {self.behavior_text} - {type(e).__name__}: {e}")
            result = {"passed": False, "error": e}

        await self.topic.cleanup_context(context)
        return result
