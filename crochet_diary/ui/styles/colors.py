"""Color palette constants (warm yarn theme)."""

CREAM_BACKGROUND = "#FBF6EE"
SOFT_BEIGE = "#EADBC8"
WARM_BROWN = "#8B5E3C"
SOFT_BROWN_TEXT = "#5C4033"
ACCENT_ROSE = "#D9778A"

MARKER_FILL_ALPHA = 204  # 80%
MARKER_BORDER = "#FFFFFF"
