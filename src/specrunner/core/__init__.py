"""specrunner core framework components.

This module provides the building blocks for defining and running test trees.

The core framework consists of:
- Topic / Test: Tree nodes holding tests, fixtures and cleanups
- Spec: Owner of one root topic, populated through vocabulary()
- Suite: Ordered specs with full-run and single-address-run modes
- SuiteAddress: Structural locator of one test within a suite
- Context / Result: Type aliases for fixture state and test outcomes

Typical usage:
    from specrunner.core.spec import Spec, vocabulary
    from specrunner.core.suite import Suite

    spec = Spec()
    describe, it, before, after = vocabulary(spec)

    @describe("arithmetic")
    def _():
        @it("adds")
        def _(context):
            assert 1 + 1 == 2

    results = asyncio.run(Suite([spec]).run())
"""
