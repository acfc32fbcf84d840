"""
Application constants shared across routes, services and the CLI
"""

# Upstream output budget per verification kind
MAX_TOKENS_BED = 512
MAX_TOKENS_SUNLIGHT = 256
MAX_TOKENS_HYDRATION = 256
MAX_TOKENS_CUSTOM_PHOTO = 512
MAX_TOKENS_CUSTOM_VIDEO = 512
MAX_TOKENS_PREDEFINED = 256

# Input limits
MAX_HABIT_NAME_LENGTH = 100
MAX_AI_PROMPT_LENGTH = 2000
MAX_IMAGE_SIZE_BYTES = 10 * 1024 * 1024  # 10MB

# Captured images are always JPEG-encoded by the mobile client
IMAGE_MEDIA_TYPE = "image/jpeg"

# Public failure messages
GENERIC_ERROR_MESSAGE = "Verification failed"
MISSING_FIELDS_MESSAGE = "Missing required fields"
INVALID_BODY_MESSAGE = "Invalid request body"

# Upstream error bodies are truncated to this many characters in logs
UPSTREAM_LOG_BODY_LIMIT = 500

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}
