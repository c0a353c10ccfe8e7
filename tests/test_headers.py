"""
Tests for outbound request headers
"""

from headers import CONTENT_TYPE_FORM, USER_AGENT, create_headers


class TestCreateHeaders:
    def test_defaults_to_json_without_auth(self):
        headers = create_headers()

        assert headers == {"Content-Type": "application/json", "User-Agent": USER_AGENT}

    def test_bearer_token_and_form_content_type(self):
        headers = create_headers(content_type=CONTENT_TYPE_FORM, bearer_token="abc")

        assert headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert headers["Authorization"] == "Bearer abc"
        assert set(headers) == {"Content-Type", "User-Agent", "Authorization"}
