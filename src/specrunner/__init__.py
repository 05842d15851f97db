"""specrunner: A hierarchical test-definition and execution engine.

specrunner groups tests into topics within specs, composes specs into suites,
and runs them sequentially or one addressed test at a time, reporting each
result to the console and across a boundary to an orchestrating harness.
"""

from specrunner.core.domain import (
    Context,
    MalformedAddressError,
    Reporter,
    Result,
    ResultSink,
    SuiteAddress,
    TimeLimitExceeded,
)
from specrunner.core.topic import Test, TestConfig, Topic
from specrunner.core.spec import Spec, Vocabulary, vocabulary
from specrunner.core.suite import Suite
from specrunner.channels.console import ConsoleReporter
from specrunner.channels.sinks import JsonLinesSink, MemorySink, WebhookSink
from specrunner.helpers import TimeLimit, cloneable_result, time_limit, time_passes

__all__ = [
    "Context",
    "Result",
    "SuiteAddress",
    "ResultSink",
    "Reporter",
    "MalformedAddressError",
    "TimeLimitExceeded",
    "Topic",
    "Test",
    "TestConfig",
    "Spec",
    "Vocabulary",
    "vocabulary",
    "Suite",
    "ConsoleReporter",
    "MemorySink",
    "JsonLinesSink",
    "WebhookSink",
    "TimeLimit",
    "cloneable_result",
    "time_limit",
    "time_passes",
]
