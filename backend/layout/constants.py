"""
Shared layout constants for chart surfaces.
Margins leave room for axes and labels around the plotting area.
"""

# Plot margins (px) applied when a chart does not pass its own
DEFAULT_MARGIN_TOP = 20
DEFAULT_MARGIN_RIGHT = 20
DEFAULT_MARGIN_BOTTOM = 30
DEFAULT_MARGIN_LEFT = 40

# Below this width charts drop legends and secondary labels
COMPACT_MIN_WIDTH = 300
