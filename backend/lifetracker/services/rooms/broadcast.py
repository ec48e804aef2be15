import logging

from lifetracker.models import Room
from lifetracker.protocol import encode, game_update_message

logger = logging.getLogger(__name__)


def broadcast_room(socketio, room: Room, namespace='/ws') -> int:
    """Send GAME_UPDATE to every player in the room; returns deliveries made.

    A failed send is logged and skipped so the rest of the room still
    gets the update.
    """
    payload = encode(game_update_message(room.to_dict()))
    delivered = 0
    for player in list(room.players):
        if not player.sid:
            continue
        try:
            socketio.emit('message', payload, to=player.sid, namespace=namespace)
            delivered += 1
        except Exception:
            logger.exception(f"[broadcast-fail] room={room.code} player={player.id} sid={player.sid}")
    return delivered
