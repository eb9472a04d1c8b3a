"""Unit tests for validation and best-effort parsing utilities."""

import pytest

from goal_indexer.config.constants import DEFAULT_ACTIVITY_LIMIT
from goal_indexer.utils.security import mask_activity_id, mask_address, mask_tx_hash
from goal_indexer.utils.validation import (
    canonicalize_address,
    parse_limit,
    parse_vault_filter,
)
from tests.fakes import VAULT_A, VAULT_B


class TestCanonicalizeAddress:
    """Tests for address canonicalization."""

    def test_lowercase_address_checksummed(self):
        """Lowercase hex converts to EIP-55 form."""
        assert (
            canonicalize_address("0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")
            == "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
        )

    def test_checksummed_address_unchanged(self):
        """Already canonical address is returned as is."""
        assert canonicalize_address(VAULT_A) == VAULT_A

    def test_surrounding_whitespace_ignored(self):
        """Whitespace around the address is stripped."""
        assert canonicalize_address(f"  {VAULT_A.lower()} ") == VAULT_A

    @pytest.mark.parametrize(
        "address",
        [
            None,
            "",
            "0x1234",
            "not-an-address",
            "0x" + "z" * 40,
            "0x" + "1" * 41,
        ],
    )
    def test_invalid_addresses(self, address):
        """Invalid input returns None instead of raising."""
        assert canonicalize_address(address) is None


class TestParseLimit:
    """Tests for limit parsing."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("5", 5),
            (" 3 ", 3),
            (None, DEFAULT_ACTIVITY_LIMIT),
            ("", DEFAULT_ACTIVITY_LIMIT),
            ("abc", DEFAULT_ACTIVITY_LIMIT),
            ("2.5", DEFAULT_ACTIVITY_LIMIT),
            ("0", DEFAULT_ACTIVITY_LIMIT),
            ("-4", DEFAULT_ACTIVITY_LIMIT),
        ],
    )
    def test_parse_or_default(self, raw, expected):
        """Unusable values fall back to the default."""
        assert parse_limit(raw) == expected

    def test_maximum_clamps(self):
        """Limit never exceeds the given maximum."""
        assert parse_limit("5000", maximum=1000) == 1000


class TestParseVaultFilter:
    """Tests for vault filter parsing."""

    @pytest.mark.parametrize("raw", [None, "", "   ", ",", " , ,"])
    def test_no_filter(self, raw):
        """Missing or blank parameter means no filtering."""
        assert parse_vault_filter(raw) is None

    def test_addresses_canonicalized(self):
        """Addresses are canonicalized regardless of input case."""
        raw = f"{VAULT_A.lower()}, {VAULT_B}"

        assert parse_vault_filter(raw) == {VAULT_A, VAULT_B}

    def test_invalid_addresses_dropped(self):
        """Invalid entries are ignored, valid ones kept."""
        assert parse_vault_filter(f"garbage,{VAULT_A},0x12") == {VAULT_A}

    def test_only_invalid_addresses_gives_empty_set(self):
        """A filter of only invalid addresses matches nothing."""
        assert parse_vault_filter("garbage,0x12") == set()


class TestMasking:
    """Tests for log masking helpers."""

    def test_mask_address(self):
        assert mask_address("0x1234567890abcdef1234567890abcdef12345678") == "0x1234...5678"
        assert mask_address(None) == "***"

    def test_mask_tx_hash(self):
        value = "0x" + "ab" * 32
        assert mask_tx_hash(value) == f"{value[:10]}...{value[-6:]}"
        assert mask_tx_hash("0x12") == "***"

    def test_mask_activity_id_keeps_log_index(self):
        value = "0x" + "ab" * 32
        assert mask_activity_id(f"{value}-7") == f"{mask_tx_hash(value)}-7"
