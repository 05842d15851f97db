"""Specs and the vocabulary used to define them.

A Spec owns one root Topic. Its tree is built during a synchronous definition
pass using the describe/it/before/after functions returned by vocabulary():

    spec = Spec()
    describe, it, before, after = vocabulary(spec)

    @describe("a stack")
    def _():
        before(lambda context: {**context, "stack": []})

        @it("starts empty")
        def _(context):
            assert context["stack"] == []
"""
from __future__ import annotations

import logging
from typing import Any, Callable, NamedTuple

from specrunner.core.domain import SuiteAddress
from specrunner.core.topic import Cleanup, Fixture, Implementation, Test, TestConfig, Topic

logger = logging.getLogger("specrunner.core.spec")


class Spec:
    """A self-contained tree of topics and tests.

    Attributes:
        name: Description given to the root topic when a test or fixture is
            registered before any describe() call.
        root_topic: The root of the tree, or None until the first definition call.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.root_topic: Topic | None = None

    def __repr__(self) -> str:
        description = self.root_topic.description if self.root_topic is not None else self.name
        return f"Spec({description!r})"

    @property
    def total_test_count(self) -> int:
        return self.root_topic.total_test_count if self.root_topic is not None else 0

    def define(self, definition: Callable[[Vocabulary], None]) -> Spec:
        """Populate this spec by handing its vocabulary to a definition function.

        Args:
            definition: Callable receiving the Vocabulary.

        Returns:
            This spec, for chaining.
        """
        definition(vocabulary(self))
        return self

    def get_test_by_address(self, address: SuiteAddress) -> Test | None:
        """Look up a test by the topic and test components of an address.

        Every index is bounds-checked; an out-of-range or negative index at
        any level yields None.

        Args:
            address: The address to resolve. Its spec component is ignored.

        Returns:
            The test, or None if nothing exists at that address.
        """
        topic = self.root_topic
        if topic is None:
            return None
        for index in address.topic:
            if not 0 <= index < len(topic.topics):
                return None
            topic = topic.topics[index]
        if not 0 <= address.test < len(topic.tests):
            return None
        return topic.tests[address.test]


class Vocabulary(NamedTuple):
    """Tree-building functions bound to one Spec."""
    describe: Callable[..., Any]
    it: Callable[..., Any]
    before: Callable[[Fixture], Fixture]
    after: Callable[[Cleanup], Cleanup]


def vocabulary(spec: Spec) -> Vocabulary:
    """Build describe/it/before/after functions that populate a spec.

    describe() creates a topic and enters it while its definition runs, so
    nested calls attach to the new topic. The first top-level describe()
    creates the spec's root topic; later top-level calls add subtopics to
    that root. it(), before() and after() act on the currently entered
    topic, creating a root named after the spec if none exists yet.

    Args:
        spec: The spec to populate.

    Returns:
        A Vocabulary of free functions closing over the spec.
    """
    entered: list[Topic] = []

    def current_topic() -> Topic:
        if entered:
            return entered[-1]
        if spec.root_topic is None:
            spec.root_topic = Topic(spec.name)
        return spec.root_topic

    def enter(description: str, definition: Callable[[], None]) -> None:
        if entered:
            topic = entered[-1].add_subtopic(description)
        elif spec.root_topic is None:
            topic = spec.root_topic = Topic(description)
        else:
            topic = spec.root_topic.add_subtopic(description)
        logger.debug(f"Defining topic: {topic.behavior_text}")
        entered.append(topic)
        try:
            definition()
        finally:
            entered.pop()

    def describe(description: str, definition: Callable[[], None] | None = None):
        if definition is not None:
            enter(description, definition)
            return None

        def decorator(fn: Callable[[], None]) -> Callable[[], None]:
            enter(description, fn)
            return fn
        return decorator

    def it(description: str, implementation: Implementation | None = None, *, timeout: float | None = None, isolated: bool = False):
        config = TestConfig(timeout=timeout, isolated=isolated)
        if implementation is not None:
            return current_topic().add_test(description, implementation, config)

        def decorator(fn: Implementation) -> Implementation:
            current_topic().add_test(description, fn, config)
            return fn
        return decorator

    def before(fixture: Fixture) -> Fixture:
        return current_topic().add_fixture(fixture)

    def after(cleanup: Cleanup) -> Cleanup:
        return current_topic().add_cleanup(cleanup)

    return Vocabulary(describe, it, before, after)
