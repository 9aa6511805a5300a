"""
Application-wide constants for the relay.

Note: Environment-dependent settings (provider URLs, cache sizing, ports)
belong in settings.py. This file is for values that rarely change.
"""

# ==============================================================================
# ROOMS
# ==============================================================================

# Shareable room codes: 6 characters, uppercase alphanumeric
ROOM_ID_LENGTH: int = 6
ROOM_ID_ALPHABET: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

# Attempts at drawing an unused code before giving up
ROOM_ID_MAX_ATTEMPTS: int = 20

# ==============================================================================
# PARTICIPANTS
# ==============================================================================

# Language used when a participant does not pick one
DEFAULT_LANGUAGE: str = "en"

# Prefix for generated display names ("User123")
DEFAULT_DISPLAY_NAME_PREFIX: str = "User"

# ==============================================================================
# TRANSLATION
# ==============================================================================

# Marker carried on degraded (untranslated) live-translation events
TRANSLATION_FAILED_MESSAGE: str = "Translation failed"

# Per-provider call timeout (seconds)
PROVIDER_TIMEOUT_SEC: float = 10.0

# Source language value meaning "let the provider detect it"
AUTO_LANGUAGE: str = "auto"

# ==============================================================================
# TRANSLATION CACHE
# ==============================================================================

# Entries older than this are removed by the sweeper (seconds)
CACHE_TTL_SEC: float = 30 * 60

# How often the sweeper runs (seconds)
CACHE_SWEEP_INTERVAL_SEC: float = 5 * 60

# Default capacity before insertion-order eviction kicks in
CACHE_MAX_ENTRIES: int = 100

# ==============================================================================
# CONNECTIONS
# ==============================================================================

# Outbound messages queued for one client before further sends are dropped
OUTBOX_MAX_MESSAGES: int = 256

# ==============================================================================
# CALLER-VISIBLE ERRORS
# ==============================================================================

NOT_IN_ROOM_MESSAGE: str = "Not in a room"
INVALID_MESSAGE_MESSAGE: str = "Invalid message"
