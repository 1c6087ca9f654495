"""Server-wide constants."""

PROJECT_NAME = "Cortex Relay"
API_V1_STR = "/api/v1"
VERSION = "0.1.0"
PROTOCOL_VERSION = "v1"
