"""Configuration constants for remote enrichment."""

# Throttle and backoff (seconds)
BASE_INTERVAL = 2.5  # Minimum time between attempts
BACKOFF_FLOOR = 2.0  # Doubled on the first failure
BACKOFF_MAX = 60.0

# Payload encoding
MAX_SIDE = 512  # Longest side of the uploaded frame
JPEG_QUALITY = 70
MAX_IMAGE_BYTES = 400_000  # Decoded payload budget enforced by the server

# Response sanitation
MAX_LIST_ITEMS = 6
MAX_ITEM_CHARS = 60
MAX_MODEL_CHARS = 40  # Server side
CLIENT_MODEL_CHARS = 24  # Displayed model id

# Defaults for missing fields
DEFAULT_SCORE = 5
DEFAULT_CONFIDENCE = 50
DEFAULT_MODEL = "normalized"

# Mock result served when no model output is available
MOCK_RESULT = {
    "score": 7,
    "pros": ["Sample fresh indicator", "Balanced ingredients"],
    "cons": ["Mock data - integrate real model"],
    "confidence": 65,
}
MOCK_MODEL_FALLBACK = "fallback-mock"  # Model call attempted and failed
MOCK_MODEL_PLACEHOLDER = "placeholder-mock"  # No model call attempted
