#!/usr/bin/env python3
"""
Normalized constants for the light-cone tool (c = 1).
"""

SPEED_OF_LIGHT = 1.0
VELOCITY_EPSILON = 0.001  # closest approach to c
MAX_VELOCITY = SPEED_OF_LIGHT * (1 - VELOCITY_EPSILON)

SAFETY_MARGIN = 0.02  # fraction of the light cone treated as unreachable for segments
MIN_TIME_STEP = 0.001  # spatial displacement below which a segment counts as at rest
ACCELERATION_PRECISION = 0.001  # accelerations below this are treated as zero
MIN_PROPER_TIME = 0.01  # isochrones are not drawn below this
LIGHT_LIKE_DENOMINATOR = 1e-10  # floor of T^2 - X^2 on the light cone

# Sampling
ISOCHRONE_POINTS_COUNT = 500
ISOCHRONE_MARGIN = 50  # spacetime units beyond the canvas edges
TRAJECTORY_STEPS = 50
TAU_SAMPLES = 100

# Newton-Raphson isochrone inversion
NEWTON_MAX_ITERATIONS = 50
NEWTON_TOLERANCE = 1e-10
NEWTON_EPSILON = 1e-8

# View
VIEW_SCALE = 2.0  # px per spacetime unit
VIEW_BOTTOM_MARGIN = 50  # px between the origin and the bottom edge
FRAME_HIT_RADIUS = 15  # px
DRAG_THRESHOLD = 3  # px of motion before a press counts as a drag

# Rendering
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
BACKGROUND_COLOR = (10, 12, 18)
AXIS_COLOR = (70, 75, 95)
CONE_COLOR = (255, 200, 80)
PAST_CONE_COLOR = (120, 100, 60)
FRAME_COLOR = (90, 160, 255)
SELECTED_COLOR = (255, 255, 0)
TRAJECTORY_COLOR = (120, 255, 140)
ISOCHRONE_COLOR = (255, 110, 200)
TEXT_COLOR = (200, 200, 200)
SAFE_COORD_LIMIT = 30000

RESOLUTION_PIXEL_SIZES = {1: 8, 2: 4, 3: 2}
