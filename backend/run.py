import logging

from lifetracker import create_app, socketio

app = create_app()

logging.basicConfig(
    level=app.config['LOG_LEVEL'],
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

if __name__ == '__main__':
    app.logger.info(f"Server running on port {app.config['PORT']}")
    socketio.run(app, host=app.config['HOST'], port=app.config['PORT'], allow_unsafe_werkzeug=app.config['ALLOW_UNSAFE_WERKZEUG'])
