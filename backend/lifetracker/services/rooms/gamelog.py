from datetime import datetime

from lifetracker.models import Room


def format_time(moment: datetime) -> str:
    """Local time of day, e.g. ``1:23:45 PM``."""
    hour = moment.hour % 12 or 12
    return f"{hour}:{moment:%M:%S %p}"


def append_log(room: Room, message: str, now=None) -> dict:
    """Push a timestamped entry, evicting the oldest beyond the room's cap."""
    entry = {'time': format_time(now or datetime.now()), 'message': message}
    room.game_log.append(entry)
    overflow = len(room.game_log) - room.max_log_entries
    if overflow > 0:
        del room.game_log[:overflow]
    return entry


def clear_log(room: Room) -> None:
    room.game_log.clear()
