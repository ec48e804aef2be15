from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

STATUS_TEXT = 'bigtable Life Tracker Server Running'


@main.route('/')
@main.route('/health')
def status():
    registry = current_app.extensions['room_registry']
    with registry.lock:
        payload = {
            'status': STATUS_TEXT,
            'activeRooms': registry.room_count(),
            'activePlayers': registry.player_count(),
        }
    return jsonify(payload)
