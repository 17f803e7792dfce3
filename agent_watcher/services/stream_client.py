"""Client for the external agent event feed.

Reads a long-lived streaming response, one JSON event per line (plain
NDJSON or server-sent-event ``data:`` lines), and hands each event to the
Event Parser.
"""

import json
from typing import Any

import httpx

from agent_watcher.core.config import get_settings
from agent_watcher.core.logging import get_logger
from agent_watcher.services.event_parser import EventParser

logger = get_logger(__name__)

STREAM_DONE = "[DONE]"


def _payload(line: str) -> str:
    line = line.strip()
    if line.startswith("data:"):
        return line[len("data:"):].strip()
    return line


def is_stream_done(line: str) -> bool:
    """True for the feed's end-of-stream marker."""
    return _payload(line) == STREAM_DONE


def decode_event_line(line: str) -> dict[str, Any] | None:
    """Decode one line of the feed into an event object.

    Returns:
        The event dict, or None for blank, comment, non-data or
        undecodable lines.
    """
    line = line.strip()
    if not line or line.startswith(":"):
        return None

    if line.startswith("data:"):
        line = line[len("data:"):].strip()
    elif line.startswith(("event:", "id:", "retry:")):
        return None

    try:
        event = json.loads(line)
    except json.JSONDecodeError:
        logger.warning("stream_line_undecodable", line=line[:200])
        return None

    if not isinstance(event, dict):
        logger.warning("stream_line_not_object", line=line[:200])
        return None
    return event


class AgentStreamClient:
    """Pulls the live event feed of one agent session into the Event Parser."""

    def __init__(
        self,
        parser: EventParser,
        api_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.parser = parser
        self.api_url = (api_url or settings.agent_api_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.agent_api_key
        self.timeout = timeout or settings.stream_timeout_seconds
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "OpenAI-Beta": "assistants=v2",
            "Accept": "text/event-stream",
        }

    async def consume(self, agent_id: str, session_id: str) -> int:
        """Read the feed until it ends, dispatching every event.

        Returns:
            Number of events dispatched to the parser.

        Raises:
            httpx.HTTPError: on connection failures or non-2xx responses.
        """
        url = f"{self.api_url}/agents/{agent_id}/events"
        dispatched = 0

        logger.info("stream_opening", agent_id=agent_id, session_id=session_id, url=url)
        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            async with client.stream("GET", url, headers=self._headers()) as response:
                response.raise_for_status()
                async for line in response.aiter_lines():
                    if is_stream_done(line):
                        break
                    event = decode_event_line(line)
                    if event is None:
                        continue
                    logger.debug("stream_event_received", event_type=event.get("type"))
                    if await self.parser.process_event(agent_id, session_id, event):
                        dispatched += 1

        logger.info(
            "stream_completed",
            agent_id=agent_id,
            session_id=session_id,
            dispatched=dispatched,
        )
        return dispatched
