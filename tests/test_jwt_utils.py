"""
Tests for JWT decoding and claim lookup
"""

import pytest

from oauth.errors import InvalidJWTError
from oauth.jwt_utils import decode_jwt_payload, first_present, parse_jwt
from tests.conftest import make_jwt


class TestFirstPresent:
    def test_returns_first_alias_in_order(self):
        claims = {"organization_id": "org", "prt_id": "prt"}
        assert first_present(claims, ("organization_id", "prt_id")) == "org"
        assert first_present(claims, ("prt_id", "organization_id")) == "prt"

    def test_skips_empty_values(self):
        assert first_present({"organization_id": "", "prt_id": "prt"}, ("organization_id", "prt_id")) == "prt"

    def test_returns_none_when_absent(self):
        assert first_present({}, ("organization_id", "prt_id")) is None


class TestParseJWT:
    def test_maps_claims(self, access_token):
        claims = parse_jwt(access_token)

        assert claims.sub == "user-1"
        assert claims.prt_id == "org-123"
        assert claims.exp == 2000000000
        assert claims.auth_time == 1700000000

    def test_organization_id_from_prt_id(self):
        assert parse_jwt(make_jwt({"prt_id": "prt"})).organization_id == "prt"

    def test_organization_id_claim_used_without_prt_id(self):
        assert parse_jwt(make_jwt({"organization_id": "org"})).organization_id == "org"

    def test_prt_id_wins_over_organization_id(self):
        claims = parse_jwt(make_jwt({"prt_id": "portal-org", "organization_id": "other-org"}))
        assert claims.organization_id == "portal-org"

    def test_missing_organization(self):
        assert parse_jwt(make_jwt({"sub": "user"})).organization_id is None

    def test_payload_must_be_an_object(self):
        with pytest.raises(InvalidJWTError):
            decode_jwt_payload(make_jwt({"a": 1}).split(".")[0] + ".WzEsMl0.sig")
