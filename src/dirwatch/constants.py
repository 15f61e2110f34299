"""Constants for dirwatch."""

# Seconds between successive snapshots
DEFAULT_POLL_INTERVAL = 1.0

# Configuration file looked up in the working directory
CONFIG_FILE = ".dirwatch.yaml"

# Project-specific ignore file (gitignore syntax), read from each root
IGNORE_FILE = ".dirwatchignore"

# Environment variable overriding the polling interval
INTERVAL_ENV_VAR = "DIRWATCH_INTERVAL"

# Read size used when hashing file contents
HASH_CHUNK_SIZE = 8192

# Version
DIRWATCH_VERSION = "0.1.0"
