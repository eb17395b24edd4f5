"""Utility functions for the Aptos node API client."""

from collections.abc import Callable, Mapping
from typing import Any

from aptos_sdk.account_address import AccountAddress

from .constants import U64_MAX
from .exceptions import DecodingError, ValidationError


def to_address(value: AccountAddress | str, field: str = "address") -> AccountAddress:
    """Accept an ``AccountAddress`` or a hex string (with or without leading zeros)."""
    if isinstance(value, AccountAddress):
        return value

    if not isinstance(value, str):
        raise ValidationError(
            f"Expected an account address, got {type(value).__name__}", field=field, value=value
        )

    try:
        return AccountAddress.from_str_relaxed(value)
    except Exception as exc:
        raise ValidationError(
            f"Invalid account address: {value}", field=field, value=value
        ) from exc


def to_u64(value: Any, field: str = "value") -> int:
    """Parse a u64 from an int or the decimal string form the node returns."""
    if isinstance(value, bool):
        raise DecodingError(f"Expected u64 for '{field}', got bool", field=field)

    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise DecodingError(f"Expected u64 for '{field}', got {value!r}", field=field) from exc

    if number < 0 or number > U64_MAX:
        raise DecodingError(f"Value for '{field}' is out of u64 range: {number}", field=field)
    return number


def check_u64(value: int | None, field: str) -> None:
    """Validate an optional caller-supplied u64."""
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"'{field}' must be an integer", field=field, value=value)
    if value < 0 or value > U64_MAX:
        raise ValidationError(f"'{field}' is out of u64 range", field=field, value=value)


def drop_none(params: Mapping[str, Any] | None) -> dict[str, Any]:
    """Remove ``None`` entries so optional query parameters are omitted."""
    if not params:
        return {}
    return {key: value for key, value in params.items() if value is not None}


def partition_range(start: int, limit: int, page_size: int) -> list[tuple[int, int]]:
    """Split ``[start, start + limit)`` into ``(page_start, page_limit)`` sub-ranges.

    Sub-ranges are returned in ascending start order; only the last may be short.
    """
    if page_size <= 0:
        raise ValidationError("Page size must be positive", field="page_size", value=page_size)

    pages: list[tuple[int, int]] = []
    offset = 0
    while offset < limit:
        page_limit = min(page_size, limit - offset)
        pages.append((start + offset, page_limit))
        offset += page_limit
    return pages


# ----------------------------------------------------------------------
# View result decoders
# ----------------------------------------------------------------------
def as_u64(value: Any) -> int:
    return to_u64(value, field="view_result")


def as_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise DecodingError(f"Expected bool, got {value!r}", field="view_result")
    return value


def as_address(value: Any) -> AccountAddress:
    if not isinstance(value, str):
        raise DecodingError(f"Expected address string, got {value!r}", field="view_result")
    try:
        return AccountAddress.from_str_relaxed(value)
    except Exception as exc:
        raise DecodingError(f"Invalid address {value!r}", field="view_result") from exc


def sequence_of(decoder: Callable[[Any], Any]) -> Callable[[Any], list[Any]]:
    """Build a decoder for a Move ``vector<T>`` from a decoder for ``T``."""

    def decode(value: Any) -> list[Any]:
        if not isinstance(value, list):
            raise DecodingError(f"Expected a list, got {type(value).__name__}", field="view_result")

        decoded = []
        for index, item in enumerate(value):
            try:
                decoded.append(decoder(item))
            except DecodingError as exc:
                raise DecodingError(exc.message, field=exc.field, index=index) from exc
        return decoded

    return decode
