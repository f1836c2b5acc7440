"""Default configuration values for notegraph."""

# Physics defaults (live-tunable through PhysicsParams)
DEFAULT_REPULSION = 3000.0
DEFAULT_SPRING_LENGTH = 100.0
DEFAULT_SPRING_STRENGTH = 0.08
DEFAULT_CENTER_PULL = 0.015
DEFAULT_FRICTION = 0.88
DEFAULT_DT = 0.15

# Repulsion term constants
REPULSION_CUTOFF = 500.0  # Pairs at or beyond this distance are skipped
REPULSION_SOFTENING = 100.0  # Added to distSq in the denominator
MIN_DISTANCE_SQ = 0.01  # Floor for coincident nodes

# Boundary policies
CIRCULAR_BOUNDARY_FRACTION = 0.45  # Radius as fraction of min(width, height)
CIRCULAR_BOUNDARY_PULL = 0.05  # Pull per unit of overshoot
RECT_BOUNDARY_MARGIN = 30.0
RECT_BOUNDARY_PUSH = 50.0

# Initial layout
SEED_RADIUS = 150.0
SEED_JITTER = 50.0  # Full width of the uniform jitter window

# View transform
MIN_ZOOM = 0.3
MAX_ZOOM = 3.0
WHEEL_ZOOM_OUT = 0.9  # Scroll down
WHEEL_ZOOM_IN = 1.1  # Scroll up
BUTTON_ZOOM_IN = 1.2
BUTTON_ZOOM_OUT = 0.8

# Interaction
DRAG_THRESHOLD_PX = 3.0
PRESS_HIT_SLOP = 8.0
HOVER_HIT_SLOP = 5.0
PRIMARY_BUTTON = 0
SECONDARY_BUTTON = 2

# Node sizing (world pixels)
NODE_MIN_RADIUS = 4.0
NODE_BASE_RADIUS = 5.0
NODE_LOG_SCALE = 4.0
NODE_MAX_RADIUS = 25.0
FOLDER_MIN_RADIUS = 8.0
FOLDER_BASE_RADIUS = 10.0
FOLDER_LOG_SCALE = 3.0
FOLDER_MAX_RADIUS = 30.0

# Labels
LABEL_ZOOM_THRESHOLD = 0.8

# Display option ranges
DEFAULT_NODE_SIZE = 1.0
MIN_NODE_SIZE = 0.5
MAX_NODE_SIZE = 2.5

# Animation
DEFAULT_FRAME_RATE = 60

# Document discovery
DOCUMENT_EXTENSION = ".md"
FOLDER_ID_PREFIX = "folder:"

# Soft folder palette (HSL), assigned to folders in walk order
FOLDER_COLORS = [
    "hsl(210, 50%, 60%)",  # Grey blue
    "hsl(350, 45%, 62%)",  # Rose
    "hsl(160, 40%, 50%)",  # Mint
    "hsl(270, 40%, 60%)",  # Lavender
    "hsl(30, 55%, 58%)",  # Warm orange
    "hsl(185, 40%, 52%)",  # Teal
    "hsl(50, 50%, 55%)",  # Warm yellow
    "hsl(320, 40%, 58%)",  # Magenta
    "hsl(95, 35%, 52%)",  # Olive
    "hsl(225, 45%, 62%)",  # Indigo
]
