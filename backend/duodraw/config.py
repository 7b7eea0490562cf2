import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Admin reset endpoint (disabled while empty)
    ADMIN_TOKEN = os.environ.get("ADMIN_TOKEN", "")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Socket.IO (empty = pick per platform)
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Game
    ROOM_ID = os.environ.get("ROOM_ID", "main-room")
    ROUND_DURATION_SEC = int(os.environ.get("ROUND_DURATION_SEC", "60"))
    GUESS_DURATION_SEC = int(os.environ.get("GUESS_DURATION_SEC", "10"))
    CORRECT_GUESS_POINTS = int(os.environ.get("CORRECT_GUESS_POINTS", "10"))

    # How often the background clock polls the timers (seconds)
    CLOCK_POLL_SEC = float(os.environ.get("CLOCK_POLL_SEC", "0.25"))
