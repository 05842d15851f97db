"""FastAPI server collecting specrunner results.

An orchestrating harness runs suites (often one addressed test at a time)
with a WebhookSink pointed at this server, then reads the aggregate pass/fail
status back. Routes are defined here and delegate to specrunner.http.
"""
import dotenv
from fastapi import FastAPI

from specrunner.http.results import ResultLedger, ResultMessage, ResultSummary


def create_app(ledger: ResultLedger | None = None) -> FastAPI:
    """Create and configure a FastAPI application for result collection.

    Environment variables are loaded from a .env file if present.

    Args:
        ledger: Ledger to record into. A new empty ledger is used when omitted.

    Returns:
        FastAPI: Configured application with the /results routes.
    """
    dotenv.load_dotenv()
    ledger = ledger if ledger is not None else ResultLedger()
    api = FastAPI()
    api.state.ledger = ledger

    @api.post("/results", response_model=ResultSummary)
    async def post_result(message: ResultMessage):
        """Record one projected test result.

        Args:
            message: Result posted by a suite's sink.

        Returns:
            ResultSummary: Aggregate status including this result.
        """
        return ledger.record(message)

    @api.get("/results", response_model=ResultSummary)
    async def get_results():
        """Return the aggregate status of every recorded result."""
        return ledger.summary()

    @api.delete("/results", status_code=204)
    async def clear_results():
        """Discard every recorded result."""
        ledger.clear()

    return api


app = create_app()
"""FastAPI application instance collecting results.

Example:
    Run with uvicorn:
        uvicorn specrunner.server:app --reload
"""
