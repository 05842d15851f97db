"""Reporting channels for specrunner suites.

This package provides the adapters a Suite reports through:

- ConsoleReporter: Human-readable pass/fail lines on stdout
- MemorySink: In-memory list of projected results
- JsonLinesSink: Projected results as JSON lines on a stream
- WebhookSink: Projected results POSTed to an HTTP endpoint

Reporters are silenced when a suite is muted; sinks always receive results.
"""
