"""Result collection endpoint logic for the specrunner server."""
import logging

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger("specrunner.http.results")


class ErrorInfo(BaseModel):
    """Failure details carried by a result message.

    Attributes:
        message: Optional failure message.
        stack: Optional formatted stack text.
    """
    message: str | None = None
    stack: str | None = None


class ResultMessage(BaseModel):
    """Request model for one projected test result.

    Extra keys sent by a suite are kept.

    Attributes:
        passed: Whether the test passed.
        error: Failure details, if any.
    """
    model_config = ConfigDict(extra="allow")

    passed: bool
    error: ErrorInfo | None = None


class ResultSummary(BaseModel):
    """Response model aggregating every recorded result.

    Attributes:
        total: Number of results recorded.
        passed: Number of passing results.
        failed: Number of failing results.
        failures: Error details of each failing result, in arrival order.
    """
    total: int
    passed: int
    failed: int
    failures: list[ErrorInfo]


class ResultLedger:
    """In-memory record of result messages received by the server."""

    def __init__(self) -> None:
        self.messages: list[ResultMessage] = []

    def record(self, message: ResultMessage) -> ResultSummary:
        """Store a message and return the updated summary.

        Args:
            message: The received result.

        Returns:
            Summary including the new message.
        """
        self.messages.append(message)
        logger.info(f"Result recorded: passed={message.passed}, total={len(self.messages)}")
        return self.summary()

    def summary(self) -> ResultSummary:
        failures = [message.error or ErrorInfo() for message in self.messages if not message.passed]
        return ResultSummary(
            total=len(self.messages),
            passed=len(self.messages) - len(failures),
            failed=len(failures),
            failures=failures,
        )

    def clear(self) -> None:
        logger.info(f"Clearing {len(self.messages)} results")
        self.messages.clear()
