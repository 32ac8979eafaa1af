"""Application-wide constants.

Defaults for the geometry analyzer.  Per-instance overrides live in
``geomanalyzer.models.config.AnalyzerConfig``.
"""

APP_NAME = "geomanalyzer"
APP_VERSION = "0.1.0"

# Geometry descriptors
GEOMETRY_SCHEMA_VERSION = "1.0"
PATH_LENGTHS_SCHEMA_VERSION = "1.0"
DEFAULT_TOP_VOLUME = "World"

# Units used by geometry descriptors unless told otherwise
DEFAULT_LENGTH_UNITS = "cm"
DEFAULT_DENSITY_UNITS = "g_cm3"

# Max path length scan: rays cast from each of the 6 bounding-box faces
MAX_PL_POINTS_PER_FACE = 200
MAX_PL_RAYS_PER_POINT = 200
MAX_PL_LOOP_GUARD = 100  # boundary steps per sampling ray

# Ray walks
MAX_WALK_STEPS = 10_000
MAX_BOUNDARY_RETRIES = 20

# Vertex micro-walk increment as a fraction of the largest bounding-box extent
VERTEX_STEP_FRACTION = 1.0e-3

# Navigator push past a boundary [geometry length units]
BOUNDARY_PUSH = 1.0e-9
