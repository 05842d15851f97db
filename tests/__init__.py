"""Test suite for the specrunner framework.

This package contains unit and integration tests for the specrunner core,
helpers, channels, CLI and server. Each test owns its setup, console and
network I/O are replaced at boundaries, and async code is driven through
asyncio.run.
"""
