"""Read-only view function calls."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from ..constants import ContentType
from ..exceptions import DecodingError, ValidationError
from ..payloads import ViewPayload
from .transport import NodeTransport

logger = logging.getLogger(__name__)


class ViewInvoker:
    """Call Move view functions and decode their results."""

    def __init__(self, transport: NodeTransport) -> None:
        self._transport = transport

    def view(self, payload: ViewPayload, ledger_version: int | None = None) -> list[Any]:
        if not isinstance(payload, ViewPayload):
            raise ValidationError(
                f"Expected a ViewPayload, got {type(payload).__name__}", field="payload"
            )

        logger.debug("View %s", payload.function_id)
        result = self._transport.post_bcs(
            "view",
            payload.to_bcs(),
            ContentType.VIEW_FUNCTION_BCS,
            params={"ledger_version": ledger_version},
        )
        return _as_list(result, payload.function_id)

    def view_json(
        self,
        function_id: str,
        type_arguments: Sequence[str] = (),
        arguments: Sequence[Any] = (),
        ledger_version: int | None = None,
    ) -> list[Any]:
        """Call a view function with JSON-encoded arguments, e.g. ``"0x1::coin::balance"``."""

        result = self._transport.post_json(
            "view",
            {
                "function": function_id,
                "type_arguments": list(type_arguments),
                "arguments": list(arguments),
            },
            params={"ledger_version": ledger_version},
        )
        return _as_list(result, function_id)

    def view_as(
        self,
        payload: ViewPayload,
        decoders: Sequence[Callable[[Any], Any]],
        ledger_version: int | None = None,
    ) -> list[Any]:
        """Call ``payload`` and run each returned value through the matching decoder.

        Raises ``DecodingError`` with the offending index when the number of
        values differs from the number of decoders or a decoder rejects a value.
        """

        values = self.view(payload, ledger_version)
        if len(values) != len(decoders):
            raise DecodingError(
                f"{payload.function_id} returned {len(values)} values, expected {len(decoders)}",
                field=payload.function_id,
                index=min(len(values), len(decoders)),
            )

        decoded = []
        for index, (decoder, value) in enumerate(zip(decoders, values)):
            try:
                decoded.append(decoder(value))
            except DecodingError as exc:
                raise DecodingError(
                    f"{payload.function_id} value {index}: {exc.message}",
                    field=payload.function_id,
                    index=index,
                ) from exc
            except (TypeError, ValueError) as exc:
                raise DecodingError(
                    f"{payload.function_id} value {index}: {exc}",
                    field=payload.function_id,
                    index=index,
                ) from exc
        return decoded


def _as_list(result: Any, function_id: str) -> list[Any]:
    if not isinstance(result, list):
        raise DecodingError(
            f"Expected a list from {function_id}, got {type(result).__name__}",
            field=function_id,
        )
    return result
