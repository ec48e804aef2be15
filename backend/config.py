import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    # Comma separated list; '*' allows any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Lets socketio.run serve on Werkzeug outside debug; local development only
    ALLOW_UNSAFE_WERKZEUG = os.environ.get('ALLOW_UNSAFE_WERKZEUG', '0').lower() in ('1', 'true', 'yes')
    # Game rules
    STARTING_LIFE = int(os.environ.get('STARTING_LIFE', '40'))
    MAX_PLAYERS = int(os.environ.get('MAX_PLAYERS', '6'))
    MAX_LOG_ENTRIES = int(os.environ.get('MAX_LOG_ENTRIES', '50'))
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '6'))
