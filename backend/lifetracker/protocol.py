"""Wire protocol spoken on the ``/ws`` namespace.

Every frame is a JSON object with a ``type`` field. Inbound frames are
parsed into one of a closed set of event classes; outbound frames are
built with the ``*_message`` helpers below.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Union

# Client -> server
CREATE_ROOM = 'CREATE_ROOM'
JOIN_ROOM = 'JOIN_ROOM'
UPDATE_LIFE = 'UPDATE_LIFE'
UPDATE_COMMANDER_DAMAGE = 'UPDATE_COMMANDER_DAMAGE'
UPDATE_NAME = 'UPDATE_NAME'
RESET_GAME = 'RESET_GAME'

# Server -> client
ROOM_CREATED = 'ROOM_CREATED'
ROOM_JOINED = 'ROOM_JOINED'
GAME_UPDATE = 'GAME_UPDATE'
ERROR = 'ERROR'

ROOM_NOT_FOUND_MESSAGE = 'Room not found'
ROOM_FULL_MESSAGE = 'Room is full'
INVALID_MESSAGE = 'Invalid message'


class ProtocolError(Exception):
    """Base class for errors reported back to a single connection."""

    message = INVALID_MESSAGE

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class MalformedMessage(ProtocolError):
    """The client always sees the generic text; ``detail`` is for the logs."""

    def __init__(self, detail=None):
        self.detail = detail
        super().__init__()


class UnknownEventType(ProtocolError):
    def __init__(self, event_type):
        self.event_type = event_type
        super().__init__(f"Unknown event type: {event_type!r}")


class RoomNotFound(ProtocolError):
    message = ROOM_NOT_FOUND_MESSAGE


class RoomFull(ProtocolError):
    message = ROOM_FULL_MESSAGE


@dataclass(frozen=True)
class CreateRoom:
    pass


@dataclass(frozen=True)
class JoinRoom:
    room_code: str


@dataclass(frozen=True)
class UpdateLife:
    player_id: str
    life: int


@dataclass(frozen=True)
class UpdateCommanderDamage:
    source_player_id: str
    target_player_id: str
    damage: int


@dataclass(frozen=True)
class UpdateName:
    player_id: str
    name: str


@dataclass(frozen=True)
class ResetGame:
    pass


Event = Union[CreateRoom, JoinRoom, UpdateLife, UpdateCommanderDamage, UpdateName, ResetGame]


def _field(data: Dict[str, Any], key: str, kind):
    value = data.get(key)
    if kind is int:
        # JSON numbers may arrive as floats; bools are not numbers here
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise MalformedMessage(f"{key} must be a number")
        if isinstance(value, float):
            if not value.is_integer():
                raise MalformedMessage(f"{key} must be a whole number")
            value = int(value)
        return value
    if not isinstance(value, kind):
        raise MalformedMessage(f"{key} must be a {kind.__name__}")
    return value


def _build_create_room(data):
    return CreateRoom()


def _build_join_room(data):
    return JoinRoom(room_code=_field(data, 'roomCode', str))


def _build_update_life(data):
    return UpdateLife(player_id=_field(data, 'playerId', str), life=_field(data, 'life', int))


def _build_update_commander_damage(data):
    return UpdateCommanderDamage(
        source_player_id=_field(data, 'sourcePlayerId', str),
        target_player_id=_field(data, 'targetPlayerId', str),
        damage=_field(data, 'damage', int),
    )


def _build_update_name(data):
    return UpdateName(player_id=_field(data, 'playerId', str), name=_field(data, 'name', str))


def _build_reset_game(data):
    return ResetGame()


_BUILDERS = {
    CREATE_ROOM: _build_create_room,
    JOIN_ROOM: _build_join_room,
    UPDATE_LIFE: _build_update_life,
    UPDATE_COMMANDER_DAMAGE: _build_update_commander_damage,
    UPDATE_NAME: _build_update_name,
    RESET_GAME: _build_reset_game,
}


def parse_message(raw) -> Event:
    """Decode one inbound frame.

    ``raw`` is JSON text (str or UTF-8 bytes) or an already decoded dict.
    Raises :class:`MalformedMessage` or :class:`UnknownEventType`.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode('utf-8')
        except UnicodeDecodeError as exc:
            raise MalformedMessage('frame is not UTF-8') from exc
    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise MalformedMessage('frame is not valid JSON') from exc
    else:
        data = raw
    if not isinstance(data, dict):
        raise MalformedMessage('frame must be a JSON object')
    event_type = data.get('type')
    if not isinstance(event_type, str):
        raise MalformedMessage('type is required')
    builder = _BUILDERS.get(event_type)
    if builder is None:
        raise UnknownEventType(event_type)
    return builder(data)


# ---- outbound ----

def encode(message: Dict[str, Any]) -> str:
    return json.dumps(message, ensure_ascii=False)


def room_created_message(room_code, player_id, game_state):
    return {'type': ROOM_CREATED, 'roomCode': room_code, 'playerId': player_id, 'gameState': game_state}


def room_joined_message(player_id, game_state):
    return {'type': ROOM_JOINED, 'playerId': player_id, 'gameState': game_state}


def game_update_message(game_state):
    return {'type': GAME_UPDATE, 'gameState': game_state}


def error_message(message):
    return {'type': ERROR, 'message': message}
