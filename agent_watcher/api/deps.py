"""FastAPI dependencies shared by the routers."""

from typing import Annotated

from fastapi import Depends

from agent_watcher.services.event_parser import EventParser
from agent_watcher.services.watcher_service import WatcherService


def get_watcher_service() -> WatcherService:
    return WatcherService()


def get_event_parser(
    watcher: Annotated[WatcherService, Depends(get_watcher_service)],
) -> EventParser:
    return EventParser(watcher)


Watcher = Annotated[WatcherService, Depends(get_watcher_service)]
Parser = Annotated[EventParser, Depends(get_event_parser)]
