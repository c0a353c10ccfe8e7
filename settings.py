"""Hardcoded constants for the UiPath CLI login flow (not user configurable)

User-configurable values (domain, port, timeout, client id, file locations)
are read by config.loader.load_auth_settings() and passed around explicitly.
"""

# Identity provider hosts per domain
DOMAIN_CLOUD = "cloud"
DOMAIN_ALPHA = "alpha"
DOMAIN_STAGING = "staging"
DEFAULT_DOMAIN = DOMAIN_CLOUD

BASE_URLS = {
    DOMAIN_ALPHA: "https://alpha.uipath.com",
    DOMAIN_CLOUD: "https://cloud.uipath.com",
    DOMAIN_STAGING: "https://staging.uipath.com",
}

# Identity server and service paths
AUTHORIZE_PATH = "/identity_/connect/authorize"
TOKEN_PATH = "/identity_/connect/token"
PORTAL_API_PATH = "/portal_/api"
ORCHESTRATOR_API_PATH = "/orchestrator_/api"
TENANTS_AND_ORG_ENDPOINT = "/filtering/leftnav/tenantsAndOrganizationInfo"
FOLDERS_ENDPOINT = "/Folders/GetAllForCurrentUser"

# OAuth client (public client, no secret)
CLIENT_ID = "36dea5b8-e8bb-423d-8e7b-c808df8f1c00"
SCOPES = "offline_access OrchestratorApiUserAccess IdentityServerApi ConnectionService"
RESPONSE_TYPE = "code"
GRANT_TYPE = "authorization_code"
CODE_CHALLENGE_METHOD = "S256"
RANDOM_BYTES_LENGTH = 32
JWT_PARTS_COUNT = 3

# Loopback callback server
DEFAULT_PORT = 8104
ALTERNATIVE_PORTS = [8104, 8055, 42042]
PORT_CHECK_HOSTS = ["localhost", "127.0.0.1", "::1"]
PORT_CHECK_TIMEOUT = 0.1
REDIRECT_URI_TEMPLATE = f"http://localhost:{DEFAULT_PORT}/oidc/login"
AUTH_TIMEOUT = 300.0
# Upper bound for in-flight responses when the server stops
SERVER_SHUTDOWN_TIMEOUT = 1.0

ROUTE_OIDC_LOGIN = "/oidc/login"
ROUTE_TOKEN = "/token"
ROUTE_ERROR = "/error"
ROUTE_HEALTH = "/health"

# Per-route request budgets within RATE_LIMIT_WINDOW seconds
RATE_LIMIT_WINDOW = 60.0
AUTH_MAX_REQUESTS = 10
TOKEN_MAX_REQUESTS = 5
ERROR_MAX_REQUESTS = 20

CORS_ALLOWED_ORIGINS = [
    "http://localhost",
    "http://127.0.0.1",
    "https://localhost",
    "https://127.0.0.1",
]
CORS_ALLOW_METHODS = "GET, POST, OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type"

# Outbound HTTP
REQUEST_TIMEOUT = 30.0

# Persisted state (relative to the working directory)
AUTH_DIR = ".uipath"
AUTH_FILE_NAME = ".auth.json"
ENV_FILE = ".env"
ERROR_LOG_FILE = ".error_log"
DEBUG_LOG_FILE = "uipath_auth_debug.log"

# Environment variables written to the .env file
ENV_ACCESS_TOKEN = "UIPATH_BEARER_TOKEN"
ENV_BASE_URL = "UIPATH_BASE_URL"
ENV_TENANT_ID = "UIPATH_TENANT_ID"
ENV_ORG_ID = "UIPATH_ORG_ID"
ENV_TENANT_NAME = "UIPATH_TENANT_NAME"
ENV_ORG_NAME = "UIPATH_ORG_NAME"
ENV_FOLDER_KEY = "UIPATH_FOLDER_KEY"

AUTH_ENV_KEYS = [
    ENV_ACCESS_TOKEN,
    ENV_BASE_URL,
    ENV_TENANT_ID,
    ENV_ORG_ID,
    ENV_TENANT_NAME,
    ENV_ORG_NAME,
    ENV_FOLDER_KEY,
]
