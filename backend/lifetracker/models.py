import itertools
import random
import string

# One colour per seat, assigned in join order
PLAYER_COLORS = ['#FF6B6B', '#4ECDC4', '#45B7D1', '#96CEB4', '#FECA57', '#DDA0DD']

ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits

# Process-wide, never reset and never reused
_player_ids = itertools.count(1)


def next_player_id() -> str:
    return f"player{next(_player_ids)}"


def generate_room_code(length=6, taken=()):
    """Generate a short room code that is not already in ``taken``."""
    while True:
        code = ''.join(random.choices(ROOM_CODE_ALPHABET, k=length))
        if code not in taken:
            return code


class Player:
    def __init__(self, id, name, life, color, sid=None):
        self.id = id
        self.name = name
        self.life = life
        self.color = color
        # source player id -> cumulative damage dealt to this player
        self.commander_damage = {}
        # Socket.IO session id; never leaves the server
        self.sid = sid

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'life': self.life,
            'color': self.color,
            'commanderDamage': dict(self.commander_damage),
        }

    def __repr__(self):
        return f"<Player {self.id} {self.name!r} life={self.life}>"


class Room:
    def __init__(self, code, max_log_entries=50):
        self.code = code
        self.max_log_entries = max_log_entries
        self.players = []  # join order
        self.game_log = []  # [{'time': ..., 'message': ...}], oldest first

    def get_player(self, player_id):
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def remove_player(self, player_id):
        """Remove and return the player, or None if they are not here."""
        player = self.get_player(player_id)
        if player is not None:
            self.players.remove(player)
        return player

    def to_dict(self):
        return {
            'players': [p.to_dict() for p in self.players],
            'gameLog': [dict(entry) for entry in self.game_log],
        }

    def __repr__(self):
        return f"<Room {self.code} players={len(self.players)}>"
