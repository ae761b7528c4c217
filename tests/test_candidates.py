"""Tests for candidate generation: header priority and fallback parsing."""

import logging

from clientip.core.candidates import (
    iter_candidates,
    iter_cloudflare_candidates,
    normalize_headers,
    parse_forwarded,
    split_forwarded_for,
)


# =========================================================================
# Header normalization
# =========================================================================


class TestNormalizeHeaders:
    def test_lowercases_names(self):
        assert normalize_headers({"CF-Connecting-IP": "1.2.3.4"}) == {
            "cf-connecting-ip": "1.2.3.4"
        }

    def test_joins_repeated_lines(self):
        class _MultiHeaders:
            def items(self):
                return [("X-Forwarded-For", "1.1.1.1"), ("x-forwarded-for", "2.2.2.2")]

        assert normalize_headers(_MultiHeaders()) == {
            "x-forwarded-for": "1.1.1.1, 2.2.2.2"
        }


# =========================================================================
# X-Forwarded-For / Forwarded parsing
# =========================================================================


class TestSplitForwardedFor:
    def test_splits_on_comma_with_whitespace(self):
        assert split_forwarded_for("1.1.1.1, 2.2.2.2") == ["1.1.1.1", "2.2.2.2"]

    def test_irregular_spacing(self):
        assert split_forwarded_for("1.1.1.1 ,2.2.2.2 ,  3.3.3.3") == [
            "1.1.1.1",
            "2.2.2.2",
            "3.3.3.3",
        ]

    def test_single_entry(self):
        assert split_forwarded_for("1.1.1.1") == ["1.1.1.1"]

    def test_drops_empty_segments(self):
        assert split_forwarded_for("1.1.1.1,") == ["1.1.1.1"]


class TestParseForwarded:
    def test_ipv4_with_other_params(self):
        assert parse_forwarded("for=192.0.2.60;proto=http;by=203.0.113.43") == [
            "192.0.2.60"
        ]

    def test_quoted_ipv6_with_port(self):
        assert parse_forwarded('for="[2001:db8:cafe::17]:4711"') == [
            "2001:db8:cafe::17"
        ]

    def test_parameter_name_is_case_insensitive(self):
        assert parse_forwarded("For=8.8.8.8") == ["8.8.8.8"]

    def test_multiple_elements(self):
        assert parse_forwarded("for=8.8.8.8, for=9.9.9.9;proto=https") == [
            "8.8.8.8",
            "9.9.9.9",
        ]

    def test_non_for_pairs_ignored(self):
        assert parse_forwarded("proto=http;by=203.0.113.43") == []

    def test_obfuscated_identifier_ignored(self):
        assert parse_forwarded("for=_hidden, for=unknown") == []

    def test_extraction_is_permissive(self):
        # Validation happens later, so out-of-range octets pass through.
        assert parse_forwarded("for=999.1.1.1") == ["999.1.1.1"]


# =========================================================================
# Pluggable candidate order
# =========================================================================


class TestIterCandidates:
    def test_headers_in_configured_order(self):
        headers = {"a": "1.1.1.1", "b": "2.2.2.2"}
        assert list(iter_candidates(headers, None, ["b", "a"], [])) == [
            "2.2.2.2",
            "1.1.1.1",
        ]

    def test_missing_header_contributes_nothing(self):
        headers = {"b": "2.2.2.2"}
        assert list(iter_candidates(headers, None, ["a", "b"], [])) == ["2.2.2.2"]

    def test_header_value_not_split(self):
        headers = {"a": "1.1.1.1, 2.2.2.2"}
        assert list(iter_candidates(headers, None, ["a"], [])) == [
            "1.1.1.1, 2.2.2.2"
        ]

    def test_header_names_matched_case_insensitively(self):
        headers = {"cf-connecting-ip": "1.1.1.1"}
        assert list(iter_candidates(headers, None, ["CF-Connecting-IP"], [])) == [
            "1.1.1.1"
        ]

    def test_x_forwarded_for_every_entry(self):
        headers = {"x-forwarded-for": "1.1.1.1, 2.2.2.2"}
        assert list(iter_candidates(headers, None, [], ["x-forwarded-for"])) == [
            "1.1.1.1",
            "2.2.2.2",
        ]

    def test_rfc_7239(self):
        headers = {"forwarded": "for=192.0.2.60;proto=http;by=203.0.113.43"}
        assert list(iter_candidates(headers, None, [], ["rfc-7239"])) == [
            "192.0.2.60"
        ]

    def test_remote_peer_address(self):
        assert list(iter_candidates({}, "8.8.8.8", [], ["remote-peer-address"])) == [
            "8.8.8.8"
        ]

    def test_missing_peer_address(self):
        assert list(iter_candidates({}, None, [], ["remote-peer-address"])) == []

    def test_fallbacks_follow_headers_in_order(self):
        headers = {
            "cf-connecting-ip": "1.1.1.1",
            "x-forwarded-for": "2.2.2.2, 3.3.3.3",
            "forwarded": "for=4.4.4.4",
        }
        result = iter_candidates(
            headers,
            "5.5.5.5",
            ["cf-connecting-ip"],
            ["remote-peer-address", "rfc-7239", "x-forwarded-for"],
        )
        assert list(result) == ["1.1.1.1", "5.5.5.5", "4.4.4.4", "2.2.2.2", "3.3.3.3"]

    def test_fallback_names_case_insensitive(self):
        headers = {"x-forwarded-for": "1.1.1.1"}
        assert list(iter_candidates(headers, None, [], ["X-Forwarded-For"])) == [
            "1.1.1.1"
        ]

    def test_unknown_fallback_warns_and_continues(self, caplog):
        with caplog.at_level(logging.WARNING, logger="clientip.core.candidates"):
            result = list(
                iter_candidates({}, "8.8.8.8", [], ["bogus", "remote-peer-address"])
            )
        assert result == ["8.8.8.8"]
        assert "Unknown fallback option bogus" in caplog.text

    def test_lazy(self):
        headers = {"a": "1.1.1.1", "b": "2.2.2.2"}
        gen = iter_candidates(headers, None, ["a", "b"], [])
        assert next(gen) == "1.1.1.1"

    def test_does_not_mutate_inputs(self):
        headers = {"x-forwarded-for": "1.1.1.1, 2.2.2.2"}
        analyzed = ["a"]
        fallbacks = ["x-forwarded-for"]
        list(iter_candidates(headers, None, analyzed, fallbacks))
        assert headers == {"x-forwarded-for": "1.1.1.1, 2.2.2.2"}
        assert analyzed == ["a"]
        assert fallbacks == ["x-forwarded-for"]


# =========================================================================
# CloudFlare candidate order
# =========================================================================


class TestIterCloudflareCandidates:
    def test_second_to_last_forwarded_for_entry(self):
        headers = {"x-forwarded-for": "10.0.0.1, 1.1.1.1, 2.2.2.2"}
        assert list(iter_cloudflare_candidates(headers, None, [])) == ["1.1.1.1"]

    def test_two_entries_take_first(self):
        headers = {"x-forwarded-for": "1.1.1.1, 2.2.2.2"}
        assert list(iter_cloudflare_candidates(headers, None, [])) == ["1.1.1.1"]

    def test_single_entry(self):
        headers = {"x-forwarded-for": "1.1.1.1"}
        assert list(iter_cloudflare_candidates(headers, None, [])) == ["1.1.1.1"]

    def test_leading_empty_entry_keeps_position(self):
        headers = {"x-forwarded-for": ", 173.245.48.1"}
        assert list(iter_cloudflare_candidates(headers, None, [])) == [""]

    def test_interior_empty_entry_keeps_position(self):
        headers = {"x-forwarded-for": "1.1.1.1, , 173.245.48.1"}
        assert list(iter_cloudflare_candidates(headers, None, [])) == [""]

    def test_trailing_empty_entries_dropped(self):
        headers = {"x-forwarded-for": "1.1.1.1, 173.245.48.1, ,"}
        assert list(iter_cloudflare_candidates(headers, None, [])) == ["1.1.1.1"]

    def test_full_order(self):
        headers = {
            "cf-pseudo-ipv4": "1.1.1.1",
            "cf-connecting-ip": "2.2.2.2",
            "x-forwarded-for": "3.3.3.3, 4.4.4.4",
        }
        result = iter_cloudflare_candidates(
            headers, "5.5.5.5", ["cf-pseudo-ipv4", "cf-connecting-ip"]
        )
        assert list(result) == ["1.1.1.1", "2.2.2.2", "3.3.3.3", "5.5.5.5"]

    def test_peer_only(self):
        assert list(iter_cloudflare_candidates({}, "5.5.5.5", ["a"])) == ["5.5.5.5"]
