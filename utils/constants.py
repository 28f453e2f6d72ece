"""Constants used throughout the preset-to-LUT codebase."""

# Rec. 709 luma coefficients for RGB to luminance conversion
# Y = 0.2126*R + 0.7152*G + 0.0722*B
REC709_LUMA_R = 0.2126
REC709_LUMA_G = 0.7152
REC709_LUMA_B = 0.0722

# Grid sizes offered for export (points per axis)
LUT_SIZES = (17, 25, 33, 65)
DEFAULT_LUT_SIZE = 33

# Tone curve control points live in an 8-bit domain
CURVE_MAX = 255.0

# Hue channels shared by the gray mixer and the HSL panel.
# (name, center in degrees, half-width in degrees)
HUE_CHANNEL_RANGES = (
    ("red", 0.0, 30.0),
    ("orange", 30.0, 30.0),
    ("yellow", 60.0, 30.0),
    ("green", 120.0, 60.0),
    ("aqua", 180.0, 30.0),
    ("blue", 220.0, 40.0),
    ("purple", 270.0, 30.0),
    ("magenta", 310.0, 50.0),
)

# Number of grid nodes pushed through the engine at once when sampling a LUT
SAMPLE_CHUNK_SIZE = 65536

# Decimal places written for every value in a .cube file
CUBE_PRECISION = 6
