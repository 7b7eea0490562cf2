import logging

try:
    from backend.duodraw.server import create_app
except ImportError:  # pragma: no cover
    from duodraw.server import create_app

app, socketio = create_app()

logging.basicConfig(level=str(app.config["LOG_LEVEL"]).upper())
