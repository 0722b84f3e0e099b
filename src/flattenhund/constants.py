"""
constants.py: Centralized configuration for the simulation, client and persistence.

Per-frame values of the first release were tuned at REFERENCE_RATE frames per
second; everything here is expressed per second so the simulation can run at
any step size.
"""

import os
from pathlib import Path

# -------- Timing --------
REFERENCE_RATE = 60             # Frame rate the original tuning assumed
FPS = 60                        # Client render rate
MAX_STEP = 0.05                 # Largest simulated step (seconds)

# -------- Game World Config --------
SCREEN_WIDTH = 480
SCREEN_HEIGHT = 720
GROUND_HEIGHT = 120             # Ground strip at the bottom of the screen
MIN_X = 40                      # Leftmost actor position
MAX_X_FRACTION = 1 / 3          # Rightmost actor position, as a share of screen width
BOOST_MAX_X_FRACTION = 1 / 2    # ...while boosting

# -------- Actor Config --------
ACTOR_WIDTH = 48
ACTOR_HEIGHT = 48
START_X = 80.0
START_Y = 230.0
START_VELOCITY_Y = -180.0       # Head start upwards (pixels/s)
START_VELOCITY_X = 30.0         # Small initial forward drift (pixels/s)
START_FLOAT_TIME = 20 / REFERENCE_RATE

# -------- Physics Config (Pixels / Second / Second) --------
BASE_GRAVITY = 1080.0           # Vertical acceleration (pixels/s^2)
FLOAT_MULTIPLIER = 0.7          # Share of gravity applied inside the float window
FLOAT_DURATION = 15 / REFERENCE_RATE
FLAP_VELOCITY = -360.0          # Instantaneous vertical velocity after a flap (pixels/s)
FORWARD_IMPULSE = 48.0          # Forward velocity added per flap (pixels/s)
MAX_FORWARD_SPEED = 150.0       # Cap on |velocity_x| (pixels/s)
DRAG_PER_REFERENCE_FRAME = 0.95 # velocity_x decay over one reference frame

# -------- Rotation (cosmetic) --------
ROTATION_VELOCITY_SCALE = 600.0 # velocity_y giving one radian of tilt
ROTATION_LIMIT = 0.5
ROTATION_SMOOTHING = 0.8        # Share of the previous rotation kept per reference frame

# -------- Boost Config --------
BOOST_HOLD_THRESHOLD = 20 / REFERENCE_RATE  # Hold time that arms the boost
BOOST_DURATION = 1.0            # seconds
BOOST_COOLDOWN = 3.0            # seconds before the next boost
BOOST_FLAP_VELOCITY = -600.0
BOOST_FORWARD_IMPULSE = 180.0
BOOST_GRAVITY_MULTIPLIER = 0.5
BOOST_THRUST = 720.0            # Constant forward acceleration while boosting (pixels/s^2)
BOOST_SPEED_FACTOR = 1.5        # Speed cap multiplier while boosting

# -------- Pipe Config --------
PIPE_WIDTH = 90
PIPE_GAP = 170
PIPE_MIN_HEIGHT = 80
PIPE_SPEED = 108.0              # Horizontal speed (pixels/second)
PIPE_SPAWN_INTERVAL_MS = 2200   # Wall-clock time between pipes

# -------- Particles (cosmetic) --------
SMOKE_PARTICLES_MIN = 5
SMOKE_PARTICLES_MAX = 8
BOOST_BURST_PARTICLES = 20
PARTICLE_FADE_RATE = 3.0        # Life lost per second

# -------- Players --------
CHARACTERS = ("taz", "chloe")
DEFAULT_CHARACTER = "taz"
DAY_MODE = "day"
NIGHT_MODE = "night"

# -------- Leaderboard Config --------
LEADERBOARD_LIMIT = 10
NAME_MAX_LENGTH = 10
DEFAULT_PLAYER_NAME = "PLAYER"
REQUEST_TIMEOUT = 5.0           # seconds

# -------- Deployment (environment overrides) --------
SUPABASE_URL = os.environ.get("FLATTENHUND_SUPABASE_URL", "")
SUPABASE_KEY = os.environ.get("FLATTENHUND_SUPABASE_KEY", "")
DB_FILE = os.environ.get("FLATTENHUND_DB_FILE", "flattenhund.db")
BEST_FILE = os.environ.get(
    "FLATTENHUND_BEST_FILE", str(Path.home() / ".flattenhund_best.json"))
