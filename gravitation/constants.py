#!/usr/bin/env python3
"""
Shared constants for the gravity sandbox (normalized units).

Distances are in canvas pixels, masses in arbitrary mass units, times in
seconds of simulation time.
"""

# Physical constants (normalized)
G = 1.0  # gravitational constant
SPEED_OF_LIGHT = 50.0  # px/s; used by horizons, redshift and lasers
MAX_SPEED = 10.0  # px/s; spacecraft speed cap

# Redshift clamp
REDSHIFT_MIN = -2.0
REDSHIFT_MAX = 2.0

# Grid / canvas
GRID_SPACING = 32  # px between grid points
CANVAS_WIDTH = 800  # px
CANVAS_HEIGHT = 800  # px

# Causal versioning
MAX_VERSIONS = 50  # history entries before cleanup halves the history
PROPAGATION_RATE = 10.0  # grid units per second of simulation time

# Masses
NORMAL_MASS_STEP = 1000.0  # added/removed per click
NORMAL_MASS_INITIAL = 1000.0
BLACK_HOLE_INITIAL_MASS = 100000.0
BLACK_HOLE_MIN_MASS = 50000.0  # black holes below this are removed

# Consumers
SPACECRAFT_MASS = 1.0
SPACECRAFT_LAUNCH_FACTOR = 0.5  # initial speed per px of drag
SPACECRAFT_TRAIL_LENGTH = 500
LASER_TRAIL_LENGTH = 300
LASER_DEVIATION_FACTOR = 0.1
MIN_TIME_DILATION = 0.1

# Geodesic line width, px
GEODESIC_MIN_WIDTH = 2.0
GEODESIC_MAX_WIDTH = 12.0

# Rendering
BACKGROUND_COLOR = (10, 12, 18)
GRID_COLOR = (40, 45, 60)
MASS_COLOR = (255, 180, 60)
BLACK_HOLE_COLOR = (0, 0, 0)
HORIZON_COLOR = (200, 60, 255)
FRONT_COLOR = (90, 160, 255)
SPACECRAFT_COLOR = (120, 255, 140)
GEODESIC_COLOR = (255, 255, 255)
CLOCK_COLOR = (255, 230, 120)
SELECTION_COLOR = (255, 255, 0)

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
