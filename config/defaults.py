"""Default configuration values."""

# WebAPI
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000
DEFAULT_URL_PATH_PREFIX = "/webapi"
DEFAULT_CORS_ORIGINS = "*"
HTTP_SERVER_NAME = "GraphDefined OCPP v1.6 WebAPI"

# Event log
DEFAULT_EVENT_LOG_CAPACITY = 10000  # Cached events available for replay
DEFAULT_SUBSCRIBER_QUEUE_SIZE = 1000  # Live events a client may lag behind
DEFAULT_OVERFLOW_POLICY = "evict"
DEFAULT_HEARTBEAT_SECONDS = 5.0
DEFAULT_RETRY_MS = 5000  # SSE reconnection delay suggested to clients
DEFAULT_SEND_TIMEOUT_SECONDS = 30.0  # A write blocked longer than this drops the client

# Config files
CONFIG_FILENAME = "ocpp-webapi"
CONFIG_DIRNAME = ".ocpp-webapi"
