from flask import current_app, request
from flask_socketio import emit

from lifetracker import socketio
from lifetracker.protocol import (
    INVALID_MESSAGE,
    CreateRoom,
    JoinRoom,
    MalformedMessage,
    ProtocolError,
    ResetGame,
    RoomFull,
    RoomNotFound,
    UnknownEventType,
    UpdateCommanderDamage,
    UpdateLife,
    UpdateName,
    encode,
    error_message,
    parse_message,
    room_created_message,
    room_joined_message,
)
from lifetracker.services.rooms import actions
from lifetracker.services.rooms.broadcast import broadcast_room
from lifetracker.services.rooms.registry import Connection, RoomRegistry

NAMESPACE = '/ws'


def _registry() -> RoomRegistry:
    return current_app.extensions['room_registry']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _reply(message) -> None:
    emit('message', encode(message))


def _broadcast(room) -> None:
    broadcast_room(socketio, room, namespace=NAMESPACE)


def _leave_current_room(registry: RoomRegistry, conn: Connection) -> None:
    if conn.room_code is None:
        return
    left_code = conn.room_code
    room = actions.leave_room(registry, conn)
    current_app.logger.info(f"[leave] player={conn.player_id} room={left_code} remaining={len(room.players) if room else 0}")
    if room is not None:
        _broadcast(room)


# ---- event handlers ----

def _on_create_room(registry: RoomRegistry, conn: Connection, event: CreateRoom) -> None:
    _leave_current_room(registry, conn)
    room = actions.create_room(registry, conn)
    current_app.logger.info(f"[create] player={conn.player_id} room={room.code}")
    _reply(room_created_message(room.code, conn.player_id, room.to_dict()))


def _on_join_room(registry: RoomRegistry, conn: Connection, event: JoinRoom) -> None:
    if conn.room_code == event.room_code:
        # Already seated here; resend the state rather than taking a second seat
        room = actions.current_room(registry, conn)
        if room is not None:
            _reply(room_joined_message(conn.player_id, room.to_dict()))
            return
    if conn.room_code is not None:
        target = registry.get_room(event.room_code)
        if target is None:
            raise RoomNotFound()
        if registry.is_full(target):
            raise RoomFull()
        _leave_current_room(registry, conn)
    room = actions.join_room(registry, conn, event.room_code)
    current_app.logger.info(f"[join] player={conn.player_id} room={room.code} size={len(room.players)}")
    _reply(room_joined_message(conn.player_id, room.to_dict()))
    _broadcast(room)


def _on_update_life(registry: RoomRegistry, conn: Connection, event: UpdateLife) -> None:
    room = actions.current_room(registry, conn)
    if room is None or not actions.update_life(room, event.player_id, event.life):
        current_app.logger.debug(f"[update-life-skip] player={conn.player_id} target={event.player_id}")
        return
    _broadcast(room)


def _on_update_commander_damage(registry: RoomRegistry, conn: Connection, event: UpdateCommanderDamage) -> None:
    room = actions.current_room(registry, conn)
    if room is None or not actions.update_commander_damage(
        room, event.source_player_id, event.target_player_id, event.damage
    ):
        current_app.logger.debug(
            f"[commander-damage-skip] player={conn.player_id} source={event.source_player_id} target={event.target_player_id}"
        )
        return
    _broadcast(room)


def _on_update_name(registry: RoomRegistry, conn: Connection, event: UpdateName) -> None:
    room = actions.current_room(registry, conn)
    if room is None or not actions.update_name(room, event.player_id, event.name):
        current_app.logger.debug(f"[update-name-skip] player={conn.player_id} target={event.player_id}")
        return
    _broadcast(room)


def _on_reset_game(registry: RoomRegistry, conn: Connection, event: ResetGame) -> None:
    room = actions.current_room(registry, conn)
    if room is None:
        current_app.logger.debug(f"[reset-skip] player={conn.player_id} not in a room")
        return
    actions.reset_game(registry, room)
    current_app.logger.info(f"[reset] room={room.code} by={conn.player_id}")
    _broadcast(room)


EVENT_HANDLERS = {
    CreateRoom: _on_create_room,
    JoinRoom: _on_join_room,
    UpdateLife: _on_update_life,
    UpdateCommanderDamage: _on_update_commander_damage,
    UpdateName: _on_update_name,
    ResetGame: _on_reset_game,
}


# ---- Socket.IO entry points ----

def handle_connect(auth=None):
    registry = _registry()
    with registry.lock:
        conn = registry.connect(_get_sid())
    current_app.logger.info(f"[connect] sid={conn.sid} player={conn.player_id}")


def handle_disconnect(reason=None):
    registry = _registry()
    with registry.lock:
        conn = registry.disconnect(_get_sid())
        if conn is None:
            return
        current_app.logger.info(f"[disconnect] sid={conn.sid} player={conn.player_id} reason={reason}")
        _leave_current_room(registry, conn)


def handle_message(data):
    registry = _registry()
    sid = _get_sid()
    with registry.lock:
        conn = registry.get_connection(sid)
        if conn is None:
            conn = registry.connect(sid)
        try:
            event = parse_message(data)
            EVENT_HANDLERS[type(event)](registry, conn, event)
        except UnknownEventType as exc:
            current_app.logger.warning(f"[unknown-event] player={conn.player_id} type={exc.event_type!r}")
        except MalformedMessage as exc:
            current_app.logger.info(f"[malformed] player={conn.player_id} detail={exc.detail}")
            _reply(error_message(exc.message))
        except ProtocolError as exc:
            _reply(error_message(exc.message))
        except Exception:
            # One bad message must not take down the connection
            current_app.logger.exception(f"[handler-error] player={conn.player_id}")
            _reply(error_message(INVALID_MESSAGE))


def register_socketio_handlers(namespace: str = NAMESPACE) -> None:
    """Register Socket.IO event handlers on ``namespace``.

    Plain ``message`` frames carry JSON text; ``json`` frames (already
    decoded objects) go through the same path.
    """
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('message', handle_message, namespace=namespace)
    socketio.on_event('json', handle_message, namespace=namespace)
