"""
Decoding of raw event logs using deserializable events of a contract decorator
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError
from eth_utils import to_bytes, to_checksum_address
from web3 import Web3

from app.components.abi_types import (AbiType, BasicType, DynamicArrayType,
                                      StaticArrayType, StructType)
from app.components.contract_decorator import (DeserializableEvent,
                                               DeserializableEventInput)
from app.core.exceptions import EventDecodingError
from app.core.logging_config import LoggingConfig
from app.core.metrics import decoded_events_total

logger = LoggingConfig.get_logger(__name__)

HexLike = Union[str, bytes]

_TUPLE_PREFIX = re.compile(r"tuple\(")


@dataclass(frozen=True)
class DecodedEvent:
    signature: str
    # (solidity name, value) per event input, in declaration order; names may repeat or be empty
    values: List[Tuple[str, Any]]

    def as_dict(self) -> Dict[str, Any]:
        """Values keyed by name; only meaningful when every input is uniquely named"""
        return dict(self.values)


def event_topic(signature: str) -> str:
    """keccak256 of the canonical event signature, as 0x-prefixed hex"""
    canonical = _TUPLE_PREFIX.sub("(", signature)
    return "0x" + Web3.keccak(text=canonical).hex().removeprefix("0x")


def _as_bytes(value: HexLike) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    try:
        return to_bytes(hexstr=value)
    except (ValueError, TypeError) as e:
        raise EventDecodingError(f"Invalid hex value: {value!r}") from e


def _is_hashed_when_indexed(abi_type: AbiType) -> bool:
    # reference types are stored as keccak hashes in topics
    return not isinstance(abi_type, BasicType) or abi_type.is_dynamic


def _normalize(abi_type: AbiType, value: Any) -> Any:
    if isinstance(abi_type, BasicType):
        if abi_type.canonical == "address":
            return to_checksum_address(value)
        if isinstance(value, bytes):
            return "0x" + value.hex()
        return value
    if isinstance(abi_type, (DynamicArrayType, StaticArrayType)):
        return [_normalize(abi_type.element, v) for v in value]
    if isinstance(abi_type, StructType):
        return [_normalize(e, v) for e, v in zip(abi_type.elements, value)]
    return value


def _decode_indexed(
    inputs: Sequence[DeserializableEventInput],
    topics: Sequence[bytes],
) -> List[Tuple[DeserializableEventInput, Any]]:
    if len(topics) != len(inputs):
        raise EventDecodingError(
            f"Expected {len(inputs)} indexed topics but got {len(topics)}"
        )

    values = []
    for event_input, topic in zip(inputs, topics):
        if _is_hashed_when_indexed(event_input.abi_type):
            values.append((event_input, "0x" + topic.hex()))
        else:
            (decoded,) = abi_decode([event_input.abi_type.canonical], topic)
            values.append((event_input, _normalize(event_input.abi_type, decoded)))
    return values


def _decode_regular(
    inputs: Sequence[DeserializableEventInput],
    data: bytes,
) -> List[Tuple[DeserializableEventInput, Any]]:
    if not inputs:
        return []
    decoded = abi_decode([i.abi_type.canonical for i in inputs], data)
    return [(i, _normalize(i.abi_type, v)) for i, v in zip(inputs, decoded)]


def decode_log(event: DeserializableEvent, topics: Sequence[HexLike], data: HexLike) -> DecodedEvent:
    """
    Decode a single log emitted by `event`.

    Raises:
        EventDecodingError: topic0 does not match the event or the log is malformed
    """
    try:
        topic_bytes = [_as_bytes(t) for t in topics]
        if not topic_bytes or topic_bytes[0] != _as_bytes(event_topic(event.signature)):
            raise EventDecodingError(f"Log does not belong to event {event.signature}")

        decoded = _decode_indexed(event.indexed_inputs, topic_bytes[1:])
        decoded += _decode_regular(event.regular_inputs, _as_bytes(data))
    except EventDecodingError:
        decoded_events_total.labels(status="failed").inc()
        raise
    except DecodingError as e:
        decoded_events_total.labels(status="failed").inc()
        raise EventDecodingError(f"Unable to decode event {event.signature}: {e}") from e

    decoded_events_total.labels(status="decoded").inc()
    return DecodedEvent(
        signature=event.signature,
        values=[(i.name, value) for i, value in sorted(decoded, key=lambda item: item[0].position)],
    )


class EventLogDecoder:
    """Matches logs against a set of events by topic0 and decodes them"""

    def __init__(self, events: List[DeserializableEvent]):
        self._events_by_topic = {_as_bytes(event_topic(e.signature)): e for e in events}

    def decode(self, topics: Sequence[HexLike], data: HexLike) -> Optional[DecodedEvent]:
        """Decode a log, or return None when it was not emitted by any known event"""
        if not topics:
            return None

        event = self._events_by_topic.get(_as_bytes(topics[0]))
        if event is None:
            logger.debug("Skipping log with unknown topic", extra={"topic": str(topics[0])})
            return None

        return decode_log(event, topics, data)
