"""Client for the Solar chat-completion API."""

from __future__ import annotations

import logging
from typing import Callable, Iterator, Optional

import httpx
from pydantic import ValidationError
from rich.console import Console

from sgit.errors import SgitError
from sgit.llm.indicator import ThinkingIndicator
from sgit.llm.models import ChatRequest, ChatResponse, StreamChunk

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "solar-pro2-preview"
DEFAULT_BASE_URL = "https://api.upstage.ai/v1/chat/completions"

THINK_OPEN = "<think>"
THINK_CLOSE = "</think>"

_DONE = object()


class LLMError(SgitError):
    """Exception raised for API and transport failures.

    Attributes:
        status_code: HTTP status of a rejected request, if any.
        body: Raw response body of a rejected request, if any.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def strip_thinking(text: str) -> str:
    """Remove ``<think>...</think>`` blocks and trim the result.

    Blocks are removed left to right until none remain. An opening tag
    without a matching close is left in place.
    """
    while True:
        start = text.find(THINK_OPEN)
        if start == -1:
            break
        end = text.find(THINK_CLOSE, start)
        if end == -1:
            break
        text = text[:start] + text[end + len(THINK_CLOSE):]
    return text.strip()


def parse_stream_line(line: str):
    """Decode one line of a server-sent event stream.

    Returns:
        ``None`` for lines that carry no event, the ``_DONE`` sentinel for
        the terminator, or a parsed StreamChunk.

    Raises:
        ValueError: If the event payload is malformed.
    """
    line = line.strip()
    if not line.startswith("data: "):
        return None
    data = line[len("data: "):].strip()
    if data == "[DONE]":
        return _DONE
    try:
        return StreamChunk.model_validate_json(data)
    except ValidationError as e:
        raise ValueError(f"malformed stream event: {data[:80]}") from e


class SolarClient:
    """Blocking and streaming access to a chat-completion endpoint.

    Every call is a single stateless exchange with one user message.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        *,
        console: Optional[Console] = None,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: Optional[float] = None,
        indicator_factory: Callable[[Console], ThinkingIndicator] = ThinkingIndicator,
    ):
        """Initialize the client.

        Args:
            api_key: Bearer credential.
            model: Model name sent with every request.
            base_url: Full URL of the chat-completions endpoint.
            console: Console that streamed output is written to.
            transport: Optional httpx transport, mainly for tests.
            timeout: Request timeout in seconds. ``None`` waits indefinitely.
            indicator_factory: Builds the progress indicator for streaming calls.
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.console = console or Console()
        self._transport = transport
        self._timeout = timeout
        self._indicator_factory = indicator_factory

    def _http(self) -> httpx.Client:
        return httpx.Client(
            transport=self._transport,
            timeout=self._timeout,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
        )

    def _payload(self, prompt: str, stream: bool) -> dict:
        request = ChatRequest.for_prompt(self.model, prompt, stream=stream)
        logger.debug(
            f"POST {self.base_url} model={self.model} stream={stream} prompt_chars={len(prompt)}"
        )
        return request.model_dump()

    def complete(self, prompt: str) -> str:
        """Send ``prompt`` and wait for the full reply.

        Returns:
            Reply text with thinking blocks removed.

        Raises:
            LLMError: On transport failure, a non-200 status, a malformed
                envelope or an empty choice list.
        """
        payload = self._payload(prompt, stream=False)
        try:
            with self._http() as http:
                response = http.post(self.base_url, json=payload)
        except httpx.HTTPError as e:
            raise LLMError(f"error making request: {e}") from e

        if response.status_code != 200:
            raise LLMError(
                f"API request failed with status {response.status_code}: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            envelope = ChatResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise LLMError(f"error parsing response: {e.error_count()} invalid field(s)") from e

        if not envelope.choices:
            raise LLMError("no response choices returned")

        return strip_thinking(envelope.choices[0].message.content or "")

    def _events(self, response: httpx.Response) -> Iterator[str]:
        skipped = 0
        for line in response.iter_lines():
            try:
                event = parse_stream_line(line)
            except ValueError as e:
                skipped += 1
                logger.debug(f"Skipping stream event: {e}")
                continue
            if event is None:
                continue
            if event is _DONE:
                break
            if event.text:
                yield event.text
        if skipped:
            logger.debug(f"Skipped {skipped} malformed stream event(s)")

    def stream(
        self,
        prompt: str,
        *,
        label: Optional[str] = None,
        on_delta: Optional[Callable[[str], None]] = None,
    ) -> str:
        """Send ``prompt`` and relay the reply as it arrives.

        A progress indicator runs until the first content chunk. Then
        ``label`` is printed once and every delta is written immediately,
        in arrival order.

        Args:
            prompt: Prompt text.
            label: Optional header printed before the first chunk.
            on_delta: Receives each delta instead of the console.

        Returns:
            The full reply with thinking blocks removed.

        Raises:
            LLMError: On transport failure, a non-200 status, or a stream
                that produced no content.
        """
        payload = self._payload(prompt, stream=True)
        write = on_delta or self._write
        indicator = self._indicator_factory(self.console)
        parts: list[str] = []

        indicator.start()
        try:
            with self._http() as http:
                with http.stream("POST", self.base_url, json=payload) as response:
                    if response.status_code != 200:
                        body = response.read().decode("utf-8", errors="replace")
                        raise LLMError(
                            f"API request failed with status {response.status_code}: {body}",
                            status_code=response.status_code,
                            body=body,
                        )
                    for delta in self._events(response):
                        if not parts:
                            indicator.stop()
                            if label:
                                write(label)
                        parts.append(delta)
                        write(delta)
        except httpx.HTTPError as e:
            raise LLMError(f"error making request: {e}") from e
        finally:
            indicator.stop()

        if not parts:
            raise LLMError("response stream ended without content")
        if on_delta is None:
            self.console.print()

        return strip_thinking("".join(parts))

    def _write(self, text: str) -> None:
        self.console.print(text, end="", markup=False, highlight=False, soft_wrap=True)
