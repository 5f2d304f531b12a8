"""Presence map and fan-out routing for real-time clients."""
import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol

from classroom_bank.schemas import WSMessage

logger = logging.getLogger(__name__)


class Connection(Protocol):
    async def send_text(self, data: str) -> None:
        ...


# WebSocket objects compare by scope and are unhashable, so membership is by identity
def _contains(connections: List[Connection], connection: Connection) -> bool:
    return any(candidate is connection for candidate in connections)


def _without(connections: List[Connection], connection: Connection) -> List[Connection]:
    return [candidate for candidate in connections if candidate is not connection]


def encode_frame(event: str, payload: Optional[dict[str, Any]]) -> str:
    return WSMessage(type=event, data=payload).model_dump_json()


class PresenceRouter:
    """Maps user identities to live connections and routes events to them.

    One identity owns at most one connection; identifying again replaces the
    previous entry. Sends are fire-and-forget: a connection that fails to
    receive is dropped and the send reports ``False``.
    """

    def __init__(self) -> None:
        self.connections: List[Connection] = []
        self.identities: Dict[str, Connection] = {}
        self.groups: Dict[str, List[Connection]] = {}

    def attach(self, connection: Connection) -> None:
        if not _contains(self.connections, connection):
            self.connections.append(connection)

    def identify(self, identity: str, connection: Connection) -> None:
        self.attach(connection)
        for previous in [name for name, candidate in self.identities.items() if candidate is connection]:
            if previous != identity:
                del self.identities[previous]
        self.identities[identity] = connection
        logger.info("User %s identified", identity)

    def lookup(self, identity: str) -> Optional[Connection]:
        return self.identities.get(identity)

    def is_online(self, identity: str) -> bool:
        return identity in self.identities

    def remove(self, connection: Connection) -> Optional[str]:
        """Forget a connection; returns the identity it was bound to, if any."""
        self.connections = _without(self.connections, connection)
        self.groups = {
            key: remaining
            for key, members in self.groups.items()
            if (remaining := _without(members, connection))
        }

        for identity, candidate in self.identities.items():
            if candidate is connection:
                del self.identities[identity]
                logger.info("User %s disconnected", identity)
                return identity
        return None

    def join_group(self, group_key: str, connection: Connection) -> None:
        self.attach(connection)
        members = self.groups.setdefault(group_key, [])
        if not _contains(members, connection):
            members.append(connection)
        logger.info("Connection joined group %s", group_key)

    def get_online_count(self) -> int:
        return len(self.identities)

    def clear(self) -> None:
        self.connections.clear()
        self.identities.clear()
        self.groups.clear()

    async def _deliver(self, connection: Connection, frame: str) -> bool:
        try:
            await connection.send_text(frame)
            return True
        except Exception as exc:  # pylint: disable=broad-except
            logger.error("Failed to deliver frame, dropping connection: %s", exc)
            self.remove(connection)
            return False

    async def send_to(self, identity: str, event: str, payload: Optional[dict[str, Any]] = None) -> bool:
        connection = self.identities.get(identity)
        if connection is None:
            logger.debug("User %s is not online, %s not delivered", identity, event)
            return False
        return await self._deliver(connection, encode_frame(event, payload))

    async def send_to_many(
        self,
        identities: Iterable[str],
        event: str,
        payload: Optional[dict[str, Any]] = None,
    ) -> int:
        delivered = 0
        for identity in identities:
            if await self.send_to(identity, event, payload):
                delivered += 1
        return delivered

    async def send_to_group(self, group_key: str, event: str, payload: Optional[dict[str, Any]] = None) -> int:
        frame = encode_frame(event, payload)
        delivered = 0
        for connection in list(self.groups.get(group_key, ())):
            if await self._deliver(connection, frame):
                delivered += 1
        return delivered

    async def broadcast_all(self, event: str, payload: Optional[dict[str, Any]] = None) -> int:
        frame = encode_frame(event, payload)
        delivered = 0
        for connection in list(self.connections):
            if await self._deliver(connection, frame):
                delivered += 1
        return delivered
