import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Session persistence: 'file' keeps it on this device, 'memory' lasts for the process
    SCOREBOARD_STORE = os.environ.get('SCOREBOARD_STORE', 'file')
    # Defaults to <instance folder>/scoreboard.json when unset
    SCOREBOARD_FILE = os.environ.get('SCOREBOARD_FILE')
    SCOREBOARD_KEY = os.environ.get('SCOREBOARD_KEY', 'scoreTrackerData')
    # Saved sessions vanish this long after the last write
    SCOREBOARD_TTL_HOURS = float(os.environ.get('SCOREBOARD_TTL_HOURS', '2'))
    DEFAULT_ROSTER_SIZE = int(os.environ.get('DEFAULT_ROSTER_SIZE', '2'))
    # Point values offered as one-tap +/- buttons
    QUICK_SCORE_VALUES = [int(v) for v in os.environ.get('QUICK_SCORE_VALUES', '1,2').split(',') if v.strip()]
    # Number of history entries shown per player card
    RECENT_HISTORY_LIMIT = int(os.environ.get('RECENT_HISTORY_LIMIT', '2'))
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:5173,http://127.0.0.1:5173,http://localhost:5174,http://127.0.0.1:5174',
        ).split(',') if o.strip()
    ]
