import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    CORS_ORIGINS = [o for o in os.environ.get(
        'CORS_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173'
    ).split(',') if o]
    # Disc rotation, full turns per second (0.5 -> one turn every 2s)
    ROTATION_SPEED = float(os.environ.get('ROTATION_SPEED', '0.5'))
    # 'geometric' (marker overlap on the rim) or 'angular' (fixed angle gap)
    COLLISION_MODE = os.environ.get('COLLISION_MODE', 'geometric')
    ANGLE_THRESHOLD_DEG = float(os.environ.get('ANGLE_THRESHOLD_DEG', '20'))
    # Disc diameter and marker diameter, in render units
    BLOCK_SIZE = float(os.environ.get('BLOCK_SIZE', '200'))
    DOT_SIZE = float(os.environ.get('DOT_SIZE', '10'))
    POINTS_PER_PLACEMENT = int(os.environ.get('POINTS_PER_PLACEMENT', '10'))
    # Clock tick interval for the background rotation task (seconds)
    FRAME_INTERVAL_SEC = float(os.environ.get('FRAME_INTERVAL_SEC', str(1 / 30)))
    # Optional: debounce taps (ms), applied to HTTP and socket taps alike. 0 disables.
    TAP_DEBOUNCE_MS = int(os.environ.get('TAP_DEBOUNCE_MS', '0'))
    # Seconds to keep a game alive after its last socket leaves. 0 ends it at once.
    SESSION_GRACE_SEC = float(os.environ.get('SESSION_GRACE_SEC', '5'))
    # Optional: heartbeat interval for rotation worker logs (sec). 0 disables.
    CLOCK_HEARTBEAT_SEC = float(os.environ.get('CLOCK_HEARTBEAT_SEC', '0'))
