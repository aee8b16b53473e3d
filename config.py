"""
Configuration constants for Cube Volume Studio.
All thresholds and configurable parameters are centralized here.
"""

import logging

# ==========================================
# Window Settings
# ==========================================
WINDOW_TITLE = "Cube Volume Studio"
WINDOW_SIZE = (1400, 900)
WINDOW_POSITION = (100, 100)

# Number of render views created at startup
DEFAULT_VIEW_COUNT = 2

# ==========================================
# Extension Actions
# ==========================================
EDITOR_MENU_PATH = "&Extensions"
EDITOR_ACTION_TEXT = "Edit Color Opacity Map…"
EDITOR_WINDOW_TITLE = "Color Opacity Map"
EDITOR_WINDOW_SIZE = (800, 600)

# ==========================================
# Histogram Settings
# ==========================================
HISTOGRAM_BINS = 256              # Bin count used when none is given

# ==========================================
# Colormaps
# ==========================================
DEFAULT_COLORMAPS = [
    'viridis', 'plasma', 'coolwarm', 'bwr',
    'magma', 'bone', 'gray', 'jet'
]

DEFAULT_COLORMAP = 'coolwarm'

# Control points sampled from a matplotlib colormap
COLOR_RAMP_SAMPLES = 8

# ==========================================
# Volume Rendering
# ==========================================
OPACITY_PRESETS = [
    'sigmoid', 'sigmoid_10', 'linear',
    'linear_r', 'geom', 'geom_r'
]

DEFAULT_OPACITY = 'linear'

# Control points generated for curved opacity presets
OPACITY_PRESET_SAMPLES = 16

# ==========================================
# Cube Files
# ==========================================
BOHR_TO_ANGSTROM = 0.52917721092

# Relative tolerance for rejecting non-orthogonal voxel axes
CUBE_AXIS_TOLERANCE = 1e-6

# ==========================================
# Synthetic Sample
# ==========================================
DUMMY_FIELD_SIZE = 48
DUMMY_FIELD_SPACING = 0.2         # Angstrom

# ==========================================
# Logging
# ==========================================
LOG_LEVEL = logging.INFO
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%H:%M:%S'
