"""Tests for the four-stage address validator."""

import pytest

from clientip.core.validator import AddressFamily, AddressValidator, classify_address


class TestClassifyAddress:
    @pytest.mark.parametrize(
        "candidate, family",
        [
            ("1.2.3.4", AddressFamily.IPV4),
            ("2606:4700:4700::1111", AddressFamily.IPV6),
            ("::1", AddressFamily.IPV6),
        ],
    )
    def test_families(self, candidate, family):
        assert classify_address(candidate) == family

    @pytest.mark.parametrize(
        "candidate",
        ["", "a1.2.3.4", "1.2.3", "256.1.1.1", " 1.2.3.4", "fe80::1%eth0", "unknown"],
    )
    def test_invalid_syntax(self, candidate):
        assert classify_address(candidate) is None

    def test_non_string(self):
        assert classify_address(None) is None
        assert classify_address(16909060) is None


class TestIPv4Checks:
    def test_public_accepted(self):
        assert AddressValidator().accepts("1.2.3.4")

    @pytest.mark.parametrize("candidate", ["10.0.0.1", "172.16.5.4", "192.168.1.1"])
    def test_private_rejected(self, candidate):
        assert not AddressValidator().accepts(candidate)

    def test_edge_of_private_range_accepted(self):
        assert AddressValidator().accepts("172.32.0.1")

    @pytest.mark.parametrize(
        "candidate",
        ["0.1.2.3", "100.64.0.1", "192.0.0.1", "198.18.0.1", "240.0.0.1", "255.255.255.255"],
    )
    def test_unroutable_rejected(self, candidate):
        assert not AddressValidator().accepts(candidate)

    def test_loopback_rejected_by_default(self):
        assert not AddressValidator().accepts("127.0.0.1")

    def test_loopback_accepted_when_skipped(self):
        assert AddressValidator(skip_loopback=True).accepts("127.0.0.1")

    def test_skip_loopback_does_not_relax_private(self):
        assert not AddressValidator(skip_loopback=True).accepts("10.0.0.1")


class TestIPv6Checks:
    def test_public_accepted(self):
        assert AddressValidator().accepts("2606:4700:4700::1111")

    @pytest.mark.parametrize("candidate", ["fc00::1", "fd12:3456::1"])
    def test_unique_local_rejected(self, candidate):
        assert not AddressValidator().accepts(candidate)

    def test_documentation_rejected(self):
        assert not AddressValidator().accepts("2001:db8::1")

    def test_loopback(self):
        assert not AddressValidator().accepts("::1")
        assert AddressValidator(skip_loopback=True).accepts("::1")


class TestFamilyRestriction:
    def test_ipv4_only_rejects_ipv6(self):
        validator = AddressValidator(restrict_family=AddressFamily.IPV4)
        assert not validator.accepts("2001:db8::1")
        assert not validator.accepts("2606:4700:4700::1111")
        assert validator.accepts("1.2.3.4")

    def test_ipv6_only_rejects_ipv4(self):
        validator = AddressValidator(restrict_family=AddressFamily.IPV6)
        assert not validator.accepts("1.2.3.4")
        assert validator.accepts("2606:4700:4700::1111")

    def test_accepts_plain_string_family(self):
        validator = AddressValidator(restrict_family="ipv4")
        assert validator.restrict_family is AddressFamily.IPV4


class TestFirstValid:
    def test_returns_first_accepted_unchanged(self):
        validator = AddressValidator()
        candidates = ["garbage", "10.0.0.1", "2606:4700:4700:0::1111", "8.8.8.8"]
        assert validator.first_valid(candidates) == "2606:4700:4700:0::1111"

    def test_exhaustion_returns_empty_string(self):
        assert AddressValidator().first_valid(["10.0.0.1", "nope"]) == ""

    def test_empty_stream(self):
        assert AddressValidator().first_valid([]) == ""

    def test_short_circuits(self):
        pulled = []

        def _stream():
            for candidate in ("8.8.8.8", "9.9.9.9"):
                pulled.append(candidate)
                yield candidate

        assert AddressValidator().first_valid(_stream()) == "8.8.8.8"
        assert pulled == ["8.8.8.8"]
