"""Container related dependency providers."""

from fastapi import Depends
from fastapi.requests import HTTPConnection

from classroom_bank.core.container import ApplicationContainer
from classroom_bank.websocket.presence import PresenceRouter


def get_container(connection: HTTPConnection) -> ApplicationContainer:
    return connection.app.state.container


def get_presence(container: ApplicationContainer = Depends(get_container)) -> PresenceRouter:
    return container.presence


__all__ = [
    "get_container",
    "get_presence",
]
