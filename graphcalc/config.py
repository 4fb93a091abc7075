import logging

# ---------------------- Engine defaults ----------------------
# Scanners (roots / extrema) sample this many subintervals per call.
SAMPLES = 500
BISECTION_ITERATIONS = 50
ROOT_DEDUPE_TOL = 1e-8
ZERO_TOL = 1e-12            # |f(x)| below this at a grid point is a root
EXTREMUM_H_FACTOR = 0.001   # derivative step = grid spacing * factor

NEWTON_MAX_ITER = 100
NEWTON_TOL = 1e-12
NEWTON_H = 1e-8
NEWTON_FLAT = 1e-15
NEWTON_LOOSE_TOL = 1e-6

TANGENT_H = 1e-6

SEEDS = (
    0, 1, -1, 2, -2, 5, -5, 10, -10, 0.5, -0.5,
    0.1, -0.1, 3, -3, 7, -7, 20, -20, 100, -100,
)
MAX_DENOMINATOR = 1000

# Magnet snap radius in pixels (1.5 grid units at the default 50 px/unit).
SNAP_PIXELS = 1.5 * 50
PIXEL_STEP = 2
VIEW_WIDTH = 800           # pixel width assumed when a view omits it

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'


def configure_logging(level="INFO"):
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)


class Config:
    """Flask settings; override with GRAPHCALC_* environment variables."""
    HOST = '0.0.0.0'
    PORT = 5000
    LOG_LEVEL = 'INFO'
    MAX_STEPS = 20000           # cap on request-supplied sample counts
