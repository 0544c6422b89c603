"""
SeaChart shared constants

Layer names, map defaults, grid spacing tiers, upstream URL templates and
other immutable values used across the engine are kept here in one place.
"""

# ─── Layers ───────────────────────────────────────────────
LAYER_SEA_MARKS = "seaMarks"
LAYER_HARBOR_FACILITIES = "harborFacilities"
LAYER_COORDINATE_GRID = "coordinateGrid"
LAYER_DEPTH_SOUNDINGS = "depthSoundings"
LAYER_BATHYMETRIC_CONTOURS = "bathymetricContours"
LAYER_WINDY = "windy"

LAYER_NAMES = (
    LAYER_SEA_MARKS,
    LAYER_HARBOR_FACILITIES,
    LAYER_COORDINATE_GRID,
    LAYER_DEPTH_SOUNDINGS,
    LAYER_BATHYMETRIC_CONTOURS,
    LAYER_WINDY,
)

# Layers backed by a fetchable upstream data set
DATA_LAYERS = (
    LAYER_SEA_MARKS,
    LAYER_HARBOR_FACILITIES,
    LAYER_BATHYMETRIC_CONTOURS,
)

# ─── Map defaults ─────────────────────────────────────────
DEFAULT_CENTER = (51.505, -0.09)        # London
DEFAULT_ZOOM = 5
DEFAULT_COORDINATES = (40.7128, -74.0060)  # geolocation fallback
SETTINGS_STORAGE_KEY = "mapSettings"

# ─── Weather overlay ──────────────────────────────────────
WINDY_OVERLAYS = ("wind", "rain", "temp", "clouds", "waves", "pressure")
WINDY_LEVELS = ("surface", "1000h", "850h", "700h", "500h", "300h", "200h")
DEFAULT_WINDY_OVERLAY = "wind"
DEFAULT_WINDY_LEVEL = "surface"

# ─── Geodesy ──────────────────────────────────────────────
EARTH_RADIUS_M = 6_371_000
METERS_PER_NAUTICAL_MILE = 1852.0
LAT_RANGE = (-90.0, 90.0)
LNG_RANGE = (-180.0, 180.0)

# ─── Coordinate grid (max zoom, spacing in degrees, labelled) ──
GRID_SPACING_TIERS = (
    (1, 45.0, True),
    (2, 30.0, True),
    (3, 15.0, True),
    (4, 10.0, True),
    (6, 5.0, True),
    (7, 1.0, True),
    (9, 0.5, True),
    (11, 0.1, True),
    (13, 0.05, True),
)
GRID_FINEST_TIER = (0.01, True)
GRID_MAX_LINES = 500               # latitude + longitude lines in one grid

# ─── Cache ────────────────────────────────────────────────
BOUNDS_PRECISION = 6               # decimals kept when fingerprinting bounds

# ─── Upstream services ────────────────────────────────────
OSM_TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
HARBOR_ICON_URL = "https://map.openseamap.org/resources/places/harbour_32.png"
DEPTH_RESOLUTIONS = ("10m", "100m")

# Fixed query parameters the harbor service requires
HARBOR_UCID = "2"
HARBOR_MAX_SIZE = "4"
HARBOR_ZOOM = "10"

# ─── Server ───────────────────────────────────────────────
DEV_PORT = 8000
