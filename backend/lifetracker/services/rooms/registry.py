import logging
import threading
from typing import Dict, Optional

from lifetracker.models import Room, generate_room_code, next_player_id

logger = logging.getLogger(__name__)


class Connection:
    """Per-socket context: the player id handed out on connect and the room joined."""

    def __init__(self, sid: str, player_id: str):
        self.sid = sid
        self.player_id = player_id
        self.room_code: Optional[str] = None

    def __repr__(self):
        return f"<Connection {self.sid} {self.player_id} room={self.room_code}>"


class RoomRegistry:
    """In-memory rooms and live connections for one server process.

    All handlers take ``lock`` for the whole of an inbound event so room
    mutations never interleave, whichever async mode Socket.IO runs in.
    """

    def __init__(self, max_players: int = 6, code_length: int = 6,
                 starting_life: int = 40, max_log_entries: int = 50):
        self.max_players = max_players
        self.code_length = code_length
        self.starting_life = starting_life
        self.max_log_entries = max_log_entries
        self.lock = threading.RLock()
        self._rooms: Dict[str, Room] = {}
        self._connections: Dict[str, Connection] = {}

    # ---- rooms ----

    def create_room(self) -> Room:
        code = generate_room_code(self.code_length, taken=self._rooms)
        room = Room(code, max_log_entries=self.max_log_entries)
        self._rooms[code] = room
        logger.info(f"[room-create] code={code} active_rooms={len(self._rooms)}")
        return room

    def get_room(self, code) -> Optional[Room]:
        if not isinstance(code, str):
            return None
        return self._rooms.get(code)

    def delete_room(self, code: str) -> None:
        if self._rooms.pop(code, None) is not None:
            logger.info(f"[room-delete] code={code} active_rooms={len(self._rooms)}")

    def is_full(self, room: Room) -> bool:
        return len(room.players) >= self.max_players

    def __contains__(self, code) -> bool:
        return code in self._rooms

    def room_count(self) -> int:
        return len(self._rooms)

    def player_count(self) -> int:
        return sum(len(room.players) for room in self._rooms.values())

    # ---- connections ----

    def connect(self, sid: str) -> Connection:
        conn = Connection(sid, next_player_id())
        self._connections[sid] = conn
        return conn

    def get_connection(self, sid: str) -> Optional[Connection]:
        return self._connections.get(sid)

    def disconnect(self, sid: str) -> Optional[Connection]:
        return self._connections.pop(sid, None)
