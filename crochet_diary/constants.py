"""Application-wide constants."""

from datetime import datetime, timezone

APP_NAME = "Crochet Diary"
APP_VERSION = "0.1.0"
APP_ORGANIZATION = "Crochet Diary"

# Window constraints
MIN_WINDOW_WIDTH = 960
MIN_WINDOW_HEIGHT = 640

# Database
DB_FILENAME = "crochet_diary.db"

# Preference slots (one blob each)
PATTERNS_DATA_KEY = "patterns_data"
WORKSPACE_STATE_KEY = "workspace_state_dict"

# Dates are stored as seconds since this reference instant
REFERENCE_DATE = datetime(2001, 1, 1, tzinfo=timezone.utc)

# Marker
DEFAULT_MARKER_RATIO = 0.5
MARKER_RADIUS = 11  # pixels

# Zoom: button-driven presets, pinch/wheel range
ZOOM_STEPS = (1.0, 1.8, 2.6)
MIN_ZOOM = 1.0
MAX_ZOOM = 4.0
WHEEL_ZOOM_FACTOR = 1.15

# Nearest-value lookups: distances closer than this count as a tie
TIE_TOLERANCE = 1e-9

# Progress counters (stepper range, UI limit only)
MIN_COUNTER = 0
MAX_COUNTER = 999

# Hook sizes: (millimetres, hook number), selected together by index
HOOK_PAIRS = (
    (2.0, 2.0),
    (2.3, 3.0),
    (2.5, 4.0),
    (3.0, 5.0),
    (3.5, 6.0),
    (4.0, 7.0),
    (4.5, 7.5),
    (5.0, 8.0),
    (5.5, 9.0),
    (6.0, 10.0),
)
DEFAULT_HOOK_INDEX = 3
DEFAULT_HOOK_SIZE_MM = 3.0

# Multi-image picking
MAX_STITCH_IMAGE_SELECTION = 20
IMAGE_LOAD_THREADS = 4
