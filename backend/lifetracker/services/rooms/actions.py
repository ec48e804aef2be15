from typing import Optional

from lifetracker.models import PLAYER_COLORS, Player, Room
from lifetracker.protocol import RoomFull, RoomNotFound
from .gamelog import append_log, clear_log
from .registry import Connection, RoomRegistry


def _seat_player(registry: RoomRegistry, room: Room, conn: Connection) -> Player:
    seat = len(room.players)
    player = Player(
        id=conn.player_id,
        name=f"Player {seat + 1}",
        life=registry.starting_life,
        color=PLAYER_COLORS[seat % len(PLAYER_COLORS)],
        sid=conn.sid,
    )
    room.players.append(player)
    conn.room_code = room.code
    return player


def current_room(registry: RoomRegistry, conn: Connection) -> Optional[Room]:
    if conn.room_code is None:
        return None
    return registry.get_room(conn.room_code)


def create_room(registry: RoomRegistry, conn: Connection) -> Room:
    """Allocate a room and seat the connection as its first player."""
    room = registry.create_room()
    player = _seat_player(registry, room, conn)
    append_log(room, f"{player.name} created the game")
    return room


def join_room(registry: RoomRegistry, conn: Connection, code: str) -> Room:
    """Seat the connection in an existing room.

    Raises :class:`RoomNotFound` or :class:`RoomFull`.
    """
    room = registry.get_room(code)
    if room is None:
        raise RoomNotFound()
    if registry.is_full(room):
        raise RoomFull()
    player = _seat_player(registry, room, conn)
    append_log(room, f"{player.name} joined the game")
    return room


def leave_room(registry: RoomRegistry, conn: Connection) -> Optional[Room]:
    """Remove the connection's player from its room.

    Returns the room if players remain (so the caller can broadcast), or
    None when there was nothing to leave or the room is now gone.
    """
    room = current_room(registry, conn)
    conn.room_code = None
    if room is None:
        return None
    player = room.remove_player(conn.player_id)
    if not room.players:
        registry.delete_room(room.code)
        return None
    if player is not None:
        append_log(room, f"{player.name} left the game")
    return room


def update_life(room: Room, player_id: str, life: int) -> bool:
    player = room.get_player(player_id)
    if player is None:
        return False
    old_life = player.life
    player.life = max(0, life)
    change = player.life - old_life
    change_str = f"+{change}" if change > 0 else f"{change}"
    append_log(room, f"{player.name}: {old_life} → {player.life} ({change_str})")
    return True


def update_commander_damage(room: Room, source_id: str, target_id: str, damage: int) -> bool:
    """Store ``damage`` from source on target and move target's life by the delta.

    Life moves by the change against the previously stored value, so a
    repeated identical update leaves life untouched.
    """
    source = room.get_player(source_id)
    target = room.get_player(target_id)
    if source is None or target is None:
        return False
    new_damage = max(0, damage)
    old_damage = target.commander_damage.get(source.id, 0)
    delta = new_damage - old_damage
    target.commander_damage[source.id] = new_damage
    if delta == 0:
        append_log(room, f"{source.name} commander damage to {target.name} stays at {new_damage} (no change)")
        return True
    old_life = target.life
    target.life = max(0, old_life - delta)
    if delta > 0:
        verb = 'took'
    else:
        verb = 'recovered'
    append_log(
        room,
        f"{target.name} {verb} {abs(delta)} commander damage from {source.name} ({old_life} → {target.life})",
    )
    return True


def update_name(room: Room, player_id: str, name: str) -> bool:
    player = room.get_player(player_id)
    if player is None:
        return False
    old_name = player.name
    player.name = name
    append_log(room, f"{old_name} changed name to {name}")
    return True


def reset_game(registry: RoomRegistry, room: Room) -> None:
    for player in room.players:
        player.life = registry.starting_life
        player.commander_damage = {}
    clear_log(room)
    append_log(room, 'Game reset')
