# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are the defaults for every tunable read from config.json, plus
framework settings such as window size, slider ranges and UI layout.
"""
import math

# --- Physics defaults ---
BALL_RADIUS = 7
TRAIL_LENGTH = 20
# Container radius as a fraction of the smaller viewport dimension.
CONTAINER_SCALE = 0.4
INITIAL_SPEED_RANGE = (1.0, 3.0)
# Random bright colors: each channel is sampled from this range.
COLOR_RANGE = (100.0, 255.0)
DEFAULT_SEED = 42

# --- Slider ranges and defaults: (min, max, default, step) ---
SPEED_SLIDER = (0.1, 5.0, 1.0, 0.1)
PARTICLE_COUNT_SLIDER = (10, 500, 100, 1)
ROTATION_SLIDER = (0.0, 0.05, 0.005, 0.001)

# --- Follow camera ---
FOLLOW_DISTANCE = 100.0
# Per-frame interpolation factors. Lower is slower and smoother.
VELOCITY_LERP = 0.02
CAMERA_LERP = 0.02
# Below this smoothed speed the camera parks on the default axis.
MIN_FOLLOW_SPEED = 0.001
# Tick rate at which the per-frame lerp factors are defined.
REFERENCE_FPS = 60
UP_VECTOR = (0.0, 1.0, 0.0)

# --- Picking ---
FIELD_OF_VIEW = math.pi / 3
PICKING_MULTIPLIER = 3

# --- Visualization settings ---
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 800
FPS = 60
BACKGROUND_COLOR = (0, 0, 0)
# Alpha value for the motion blur effect (0-255). Lower is a longer afterimage.
MOTION_BLUR_ALPHA = 20
CONTAINER_COLOR = (255, 255, 255, 50)
# Clicks above this line belong to the slider panel.
UI_RESERVED_HEIGHT = 220
TRAIL_MIN_ALPHA = 50
TRAIL_MAX_ALPHA = 255
