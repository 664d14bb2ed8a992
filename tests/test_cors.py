# =============================================================================
# tests/test_cors.py - Origin Policy Tests
# =============================================================================

import pytest

from lib.cors import cors_headers, get_allowed_origin, parse_allow_list

ALLOW_LIST = ["http://localhost:3000", "https://pyjama-party.back-on-track.eu"]


class TestParseAllowList:
    """Tests for parsing the comma-separated allow-list."""

    def test_trims_and_drops_empty_entries(self):
        assert parse_allow_list(" http://a.test , ,http://b.test,") == ["http://a.test", "http://b.test"]

    @pytest.mark.parametrize("raw", ["", None, " , "])
    def test_empty_input_gives_empty_list(self, raw):
        assert parse_allow_list(raw) == []


class TestGetAllowedOrigin:
    """Tests for choosing Access-Control-Allow-Origin."""

    def test_listed_origin_is_echoed(self):
        origin = "https://pyjama-party.back-on-track.eu"
        assert get_allowed_origin(origin, ALLOW_LIST) == origin

    def test_unlisted_origin_falls_back_to_first_entry(self):
        assert get_allowed_origin("https://evil.test", ALLOW_LIST) == "http://localhost:3000"

    def test_missing_origin_falls_back_to_first_entry(self):
        assert get_allowed_origin(None, ALLOW_LIST) == "http://localhost:3000"

    def test_empty_allow_list_gives_wildcard(self):
        assert get_allowed_origin("https://any.test", []) == "*"

    def test_match_is_verbatim(self):
        """A trailing slash is a different origin."""
        assert get_allowed_origin("http://localhost:3000/", ALLOW_LIST) == "http://localhost:3000"

    def test_pattern_allows_preview_deployments(self):
        pattern = r"https://pajama-party-[a-z0-9-]+\.vercel\.app"
        origin = "https://pajama-party-git-feature-x.vercel.app"

        assert get_allowed_origin(origin, ALLOW_LIST, pattern=pattern) == origin

    def test_pattern_must_match_whole_origin(self):
        pattern = r"https://pajama-party-[a-z0-9-]+\.vercel\.app"
        origin = "https://pajama-party-x.vercel.app.evil.test"

        assert get_allowed_origin(origin, ALLOW_LIST, pattern=pattern) == "http://localhost:3000"

    def test_invalid_pattern_is_ignored(self):
        assert get_allowed_origin("https://x.test", ALLOW_LIST, pattern="([") == "http://localhost:3000"


class TestCorsHeaders:
    """Tests for the full header set."""

    def test_headers_for_listed_origin(self):
        headers = cors_headers("http://localhost:3000", ALLOW_LIST, ["GET"])

        assert headers == {
            "Access-Control-Allow-Origin": "http://localhost:3000",
            "Vary": "Origin",
            "Access-Control-Allow-Methods": "GET",
            "Access-Control-Allow-Headers": "Content-Type, Authorization",
        }

    def test_methods_are_joined(self):
        headers = cors_headers(None, ALLOW_LIST, ["GET", "POST", "OPTIONS"])
        assert headers["Access-Control-Allow-Methods"] == "GET, POST, OPTIONS"

    @pytest.mark.parametrize("origin", ["http://localhost:3000", "https://other.test", None])
    def test_vary_origin_always_present(self, origin):
        assert cors_headers(origin, ALLOW_LIST)["Vary"] == "Origin"

    def test_wildcard_with_empty_list(self):
        assert cors_headers("https://x.test", [])["Access-Control-Allow-Origin"] == "*"
