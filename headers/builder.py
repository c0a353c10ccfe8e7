"""Request header construction"""

from typing import Dict, Optional

from .constants import CONTENT_TYPE_JSON, USER_AGENT


def create_headers(
    content_type: str = CONTENT_TYPE_JSON,
    bearer_token: Optional[str] = None,
) -> Dict[str, str]:
    """Build headers for an outbound request

    Args:
        content_type: Value of the Content-Type header
        bearer_token: Access token for the Authorization header, if any

    Returns:
        Header dictionary
    """
    headers = {
        "Content-Type": content_type,
        "User-Agent": USER_AGENT,
    }
    if bearer_token:
        headers["Authorization"] = f"Bearer {bearer_token}"
    return headers
