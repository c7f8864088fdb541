"""Configuration constants for the scoring pipeline."""

# Frame sampling
COLOR_STRIDE = 4  # Every Nth pixel for channel averages
VARIANCE_STRIDE = 48  # Coarser stride for the luminance variance sample
LUMA_WEIGHTS = (0.2126, 0.7152, 0.0722)  # Rec. 709 (r, g, b)

# Rolling windows
HISTORY_SIZE = 25  # Raw score window
LIGHTING_WINDOW_SIZE = 30  # Brightness and variance windows
TRIM_FRACTION = 0.15  # Dropped from each tail for trimmed means

# Raw score
EPSILON = 1e-6
BALANCE_PENALTY_WEIGHT = 0.15
DEGRADED_PRIOR_WEIGHT = 0.7  # Pull toward prior median under bad lighting
IQR_MULTIPLIER = 1.5

# Lighting thresholds (trimmed means, 0-1 luminance)
DARK_MAX = 0.12
BRIGHT_MIN = 0.85
LOW_TEXTURE_VARIANCE = 0.002

# Confidence weights
WEIGHT_DOMINANCE = 0.45
WEIGHT_CHROMA = 0.25
WEIGHT_STABILITY = 0.30
DOMINANCE_GAIN = 2.2
CHROMA_GAIN = 1.8
FULL_WINDOW_MIN = 10  # Samples before the full-window bonus applies
FULL_WINDOW_BONUS = 0.1
DEGRADED_LIGHTING_FACTOR = 0.7
FLAT_SCENE_FACTOR = 0.75
CONFIDENCE_FLOOR = 0.2

# Score description
LOW_CONFIDENCE_PERCENT = 50

# Announcement gate
CONFIRM_TICKS = 2
