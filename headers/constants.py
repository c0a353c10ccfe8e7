"""HTTP request header names and values for UiPath API calls"""

# Content types
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"

# User-Agent string for outbound requests
USER_AGENT = "uipath-auth-cli/0.1.0 (python)"
