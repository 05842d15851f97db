"""Spec and vocabulary tests.

Tests tree building through describe/it/before/after, test counting and
address lookup within a single spec.
"""

import asyncio

from specrunner.core.domain import SuiteAddress
from specrunner.core.spec import Spec, Vocabulary, vocabulary


def address(topic, test):
    return SuiteAddress(spec=0, topic=topic, test=test)


class TestVocabulary:
    def test_counts_total_tests_in_all_topics(self, nested_spec):
        """Test that total_test_count counts tests at every depth."""
        spec, _ = nested_spec
        assert spec.total_test_count == 4

    def test_empty_spec_has_no_tests(self):
        """Test that a spec with no definitions has no root and no tests."""
        spec = Spec()
        assert spec.root_topic is None
        assert spec.total_test_count == 0

    def test_first_describe_creates_root(self, nested_spec):
        """Test that the first top-level describe names the root topic."""
        spec, _ = nested_spec
        assert spec.root_topic.description == "a spec"
        assert [topic.description for topic in spec.root_topic.topics] == ["nested topic"]

    def test_nested_describe_attaches_to_entered_topic(self, nested_spec):
        """Test that calls inside describe attach to the new subtopic."""
        spec, _ = nested_spec
        nested = spec.root_topic.topics[0]
        assert [test.description for test in nested.tests] == ["also has a test", "may have another test"]
        assert [test.description for test in spec.root_topic.tests] == ["has a test", "may include trailing tests"]

    def test_later_top_level_describe_adds_subtopic_of_root(self):
        """Test that a second top-level describe nests under the root."""
        spec = Spec()
        describe, it, before, after = vocabulary(spec)
        describe("first", lambda: None)
        describe("second", lambda: None)
        assert spec.root_topic.description == "first"
        assert [topic.description for topic in spec.root_topic.topics] == ["second"]

    def test_it_without_describe_creates_named_root(self):
        """Test that a top-level it() creates a root named after the spec."""
        spec = Spec("utilities")
        _, it, _, _ = vocabulary(spec)
        test = it("works", lambda context: None)
        assert spec.root_topic.description == "utilities"
        assert test.behavior_text == "utilities works"

    def test_decorator_forms(self):
        """Test that describe, it, before and after work as decorators."""
        spec = Spec()
        describe, it, before, after = vocabulary(spec)

        @describe("a stack")
        def _():
            @before
            def fixture(context):
                return {**context, "stack": []}

            @after
            def cleanup(context):
                context["stack"].clear()

            @it("starts empty", timeout=1, isolated=True)
            def starts_empty(context):
                assert context["stack"] == []

        root = spec.root_topic
        assert root.description == "a stack"
        assert len(root.fixtures) == 1
        assert len(root.cleanups) == 1
        assert root.tests[0].description == "starts empty"
        assert root.tests[0].config.timeout == 1
        assert root.tests[0].isolated is True

    def test_it_returns_test_when_given_implementation(self):
        """Test that it() with an implementation returns the new Test."""
        spec = Spec()
        describe, it, _, _ = vocabulary(spec)
        created = []
        describe("topic", lambda: created.append(it("case", lambda context: None)))
        assert created == [spec.root_topic.tests[0]]

    def test_describe_leaves_topic_after_definition_raises(self):
        """Test that a failing definition still leaves the entered topic."""
        spec = Spec()
        describe, it, _, _ = vocabulary(spec)

        def broken():
            raise RuntimeError("bad definition")

        try:
            describe("root", lambda: describe("broken", broken))
        except RuntimeError:
            pass
        it("after", lambda context: None)
        assert spec.root_topic.tests[0].description == "after"

    def test_define_passes_vocabulary(self):
        """Test that Spec.define hands a Vocabulary to the definition."""
        received = []

        def definition(vocab):
            received.append(vocab)
            vocab.describe("defined", lambda: vocab.it("case", lambda context: None))

        spec = Spec().define(definition)
        assert isinstance(received[0], Vocabulary)
        assert spec.total_test_count == 1

    def test_fixtures_fold_through_defined_tree(self):
        """Test that fixtures registered with before() reach nested tests."""
        spec = Spec()
        describe, it, before, _ = vocabulary(spec)
        seen = []

        def outer():
            before(lambda context: {**context, "result": {"passed": True, "error": False}})

            def inner():
                before(lambda context: {**context, "result": {"passed": False}})
                it("sees the override", lambda context: seen.append(context["result"]))

            describe("inner", inner)
            it("sees the outer value", lambda context: seen.append(context["result"]))

        describe("outer", outer)
        for test in (spec.root_topic.tests[0], spec.root_topic.topics[0].tests[0]):
            asyncio.run(test.run())
        assert seen == [{"passed": True, "error": False}, {"passed": False}]


class TestGetTestByAddress:
    def test_resolves_root_test(self, nested_spec):
        """Test that an empty topic path addresses the root topic."""
        spec, _ = nested_spec
        assert spec.get_test_by_address(address([], 1)).description == "may include trailing tests"

    def test_resolves_nested_test(self, nested_spec):
        """Test that topic indices walk into subtopics."""
        spec, _ = nested_spec
        assert spec.get_test_by_address(address([0], 1)).description == "may have another test"

    def test_out_of_range_returns_none(self, nested_spec):
        """Test that out-of-range indices at any level return None."""
        spec, _ = nested_spec
        assert spec.get_test_by_address(address([], 2)) is None
        assert spec.get_test_by_address(address([1], 0)) is None
        assert spec.get_test_by_address(address([0, 0], 0)) is None
        assert spec.get_test_by_address(address([0], 5)) is None

    def test_negative_index_returns_none(self, nested_spec):
        """Test that negative indices do not wrap around."""
        spec, _ = nested_spec
        assert spec.get_test_by_address(address([], -1)) is None
        assert spec.get_test_by_address(address([-1], 0)) is None

    def test_empty_spec_returns_none(self):
        """Test that a spec without a root finds nothing."""
        assert Spec().get_test_by_address(address([], 0)) is None
