"""Result sinks that carry projected results out of a suite run.

- MemorySink: Keeps messages in a list, for embedding and tests
- JsonLinesSink: Writes one JSON document per line to a stream
- WebhookSink: Posts each message to an HTTP endpoint (e.g. the
  specrunner server) via synchronous httpx.Client calls
"""
import json
import logging
import sys
from typing import TextIO

import httpx

from specrunner.core.domain import Result

logger = logging.getLogger("specrunner.channels.sinks")


class MemorySink:
    """Sink collecting result messages in memory.

    Attributes:
        messages: Messages in the order they were posted.
    """

    def __init__(self) -> None:
        self.messages: list[Result] = []

    def post_result(self, message: Result) -> None:
        self.messages.append(message)


class JsonLinesSink:
    """Sink writing each message as a line of JSON.

    Attributes:
        stream: Destination stream. Defaults to stdout at write time.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream

    def post_result(self, message: Result) -> None:
        """Write one message as a JSON line.

        Args:
            message: Projected result to write.
        """
        print(json.dumps(message, default=str), file=self.stream or sys.stdout, flush=True)


class WebhookSink:
    """Sink posting each result message to an HTTP endpoint.

    Uses synchronous httpx because a suite awaits each test to completion
    before reporting and the post is a single small request. Network
    failures are logged and do not interrupt the run.

    Attributes:
        url: Endpoint receiving POSTed messages.
    """

    def __init__(self, url: str, *, client: httpx.Client | None = None, timeout: float = 10.0) -> None:
        """Initialize a WebhookSink.

        Args:
            url: Endpoint receiving POSTed messages.
            client: Optional preconfigured client. A new client is created per
                post when omitted.
            timeout: Request timeout in seconds for created clients.
        """
        self.url = url
        self._client = client
        self._timeout = timeout
        logger.debug(f"WebhookSink initialized: url={url}")

    def _post(self, client: httpx.Client, message: Result) -> None:
        response = client.post(self.url, json=message)
        response.raise_for_status()

    def post_result(self, message: Result) -> None:
        """POST one message as JSON.

        Args:
            message: Projected result to send.
        """
        try:
            if self._client is not None:
                self._post(self._client, message)
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    self._post(client, message)
        except httpx.HTTPError as exc:
            logger.error(f"Failed to post result to {self.url}: {exc}")
