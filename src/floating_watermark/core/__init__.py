# Watermark config limits (inclusive)
MIN_FONT_SIZE: int = 8
MAX_FONT_SIZE: int = 72
MIN_OPACITY: float = 0.1
MAX_OPACITY: float = 1.0
MIN_SPEED: float = 0.1
MAX_SPEED: float = 5.0
MIN_AMPLITUDE: float = 10  # Pixels
MAX_AMPLITUDE: float = 200  # Pixels
MIN_COUNT: int = 1
MAX_COUNT: int = 10

# Watermark config defaults
DEFAULT_COUNT: int = 1
DEFAULT_COLOR: str = "#FFFFFF"
DEFAULT_OPACITY: float = 0.8
DEFAULT_FONT_SIZE: int = 40
DEFAULT_SPEED: float = 2.0
DEFAULT_AMPLITUDE: float = 60

# Fallback frame metadata when probing fails
DEFAULT_VIDEO_WIDTH: int = 1920
DEFAULT_VIDEO_HEIGHT: int = 1080
DEFAULT_VIDEO_DURATION: float = 0.0

# Text footprint estimation (no font metrics available)
TEXT_WIDTH_FACTOR: float = 0.6  # Average glyph width relative to font size
TEXT_HEIGHT_FACTOR: float = 1.2  # Line height relative to font size

# Layout
MAX_AMPLITUDE_PERCENT: float = 0.15  # Drift never exceeds 15% of the shorter side
SAFE_MARGIN_PADDING: int = 20  # Extra pixels between text and frame edge
MAX_SAFE_MARGIN: float = 0.5  # A margin this large pins the center to mid-frame
MAX_PLACEMENT_ATTEMPTS: int = 50

# Motion parameter ranges
SPEED_MULTIPLIER_MIN: float = 0.3
SPEED_MULTIPLIER_SPAN: float = 0.4  # (0.3-0.7)
AMPLITUDE_MULTIPLIER_MIN: float = 0.8
AMPLITUDE_MULTIPLIER_SPAN: float = 0.4  # (0.8-1.2)
SEED_X_STEP: float = 1.618  # Golden ratio
SEED_Y_STEP: float = 2.414  # Silver ratio
SEED_Y_SCALE: float = 0.7

# Motion type selection thresholds
HORIZONTAL_THRESHOLD: float = 0.3  # 30% horizontal dominant
VERTICAL_THRESHOLD: float = 0.6  # 30% vertical dominant, remaining 40% elliptical

# Expression formatting
EXPRESSION_PRECISION: int = 6

# drawtext styling
SHADOW_COLOR: str = "black@0.4"
SHADOW_OFFSET: int = 1
CLOCK_TOKEN: str = "%{localtime\\:%H\\\\\\:%M\\\\\\:%S}"  # already escaped for a quoted drawtext value

# Encoder settings (H.264)
VIDEO_CODEC: str = "libx264"
VIDEO_PRESET: str = "medium"
VIDEO_CRF: int = 23
AUDIO_CODEC: str = "copy"

OUTPUT_SUFFIX: str = "_watermarked"
