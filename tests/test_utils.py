"""Tests for utility functions."""

import pytest
from aptos_sdk.account_address import AccountAddress

from aptos_api.constants import U64_MAX
from aptos_api.exceptions import DecodingError, ValidationError
from aptos_api.utils import (
    as_address,
    as_bool,
    as_u64,
    check_u64,
    drop_none,
    partition_range,
    sequence_of,
    to_address,
    to_u64,
)


class TestPartitionRange:
    """Test splitting ranges into pages."""

    def test_exact_pages(self):
        assert partition_range(0, 200, 100) == [(0, 100), (100, 100)]

    def test_short_last_page(self):
        assert partition_range(0, 150, 100) == [(0, 100), (100, 50)]

    def test_offset_start(self):
        assert partition_range(50, 5, 100) == [(50, 5)]

    def test_empty_range(self):
        assert partition_range(10, 0, 100) == []

    def test_invalid_page_size(self):
        with pytest.raises(ValidationError):
            partition_range(0, 10, 0)


class TestU64:
    """Test u64 parsing and validation."""

    def test_parses_decimal_strings(self):
        assert to_u64("18446744073709551615") == U64_MAX

    def test_rejects_out_of_range(self):
        with pytest.raises(DecodingError):
            to_u64(str(U64_MAX + 1))
        with pytest.raises(DecodingError):
            to_u64(-1)

    def test_rejects_garbage(self):
        with pytest.raises(DecodingError):
            to_u64("abc", field="version")

    def test_rejects_bool(self):
        with pytest.raises(DecodingError):
            to_u64(True)

    def test_check_u64_accepts_none(self):
        check_u64(None, "start")

    def test_check_u64_rejects_strings(self):
        with pytest.raises(ValidationError) as excinfo:
            check_u64("5", "start")  # type: ignore[arg-type]
        assert excinfo.value.field == "start"


class TestAddresses:
    def test_relaxed_parsing(self):
        assert to_address("0x1") == AccountAddress.from_str("0x1")
        assert to_address("0x" + "0" * 63 + "1") == AccountAddress.from_str("0x1")

    def test_address_passthrough(self):
        address = AccountAddress.from_str("0x1")
        assert to_address(address) is address

    def test_rejects_non_strings(self):
        with pytest.raises(ValidationError):
            to_address(1)  # type: ignore[arg-type]


class TestViewDecoders:
    def test_scalars(self):
        assert as_u64("7") == 7
        assert as_bool(False) is False
        assert as_address("0x1") == AccountAddress.from_str("0x1")

    def test_bool_rejects_strings(self):
        with pytest.raises(DecodingError):
            as_bool("true")

    def test_sequence_reports_item_index(self):
        decode = sequence_of(as_u64)
        with pytest.raises(DecodingError) as excinfo:
            decode(["1", "2", "x"])
        assert excinfo.value.index == 2


def test_drop_none():
    assert drop_none({"start": None, "limit": 5}) == {"limit": 5}
    assert drop_none(None) == {}
