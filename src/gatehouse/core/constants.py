"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# String field lengths
MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 255
MAX_ROLE_NAME_LENGTH = 100
MAX_ITEM_NAME_LENGTH = 255
MAX_DESCRIPTION_LENGTH = 1000
MAX_ENTITY_SET_LENGTH = 32
MAX_PERMISSION_TYPE_LENGTH = 16

# Password requirements
MIN_PASSWORD_LENGTH = 12
MAX_PASSWORD_LENGTH = 128
BCRYPT_ROUNDS = 12

# Token settings
ACCESS_TOKEN_JTI_LENGTH = 32

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32
DEFAULT_INSECURE_SECRET = "change-me-in-production"

# Upper bound on ids accepted in one comma-joined path parameter
MAX_BATCH_IDS = 100
