"""Result-level metadata and options."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

import msgspec
from msgspec import UNSET, UnsetType

from fluent_result.types.records import utcnow

__all__ = ['ResultMetadata', 'ResultOptions']


class ResultMetadata[C: Mapping[str, Any]](msgspec.Struct, frozen=True, kw_only=True):
    """Metadata attached to a whole container.

    Fields left as ``UNSET`` do not take part in a merge, so
    ``ResultMetadata(message='x')`` only overrides the message of whatever
    metadata is already attached.

    Attributes:
        metadata: Free-form key/value pairs.
        message: Optional description.
        context: Caller-defined context mapping.
        timestamp: When the metadata was written.
    """

    metadata: dict[str, Any] | UnsetType = UNSET
    message: str | UnsetType = UNSET
    context: C | UnsetType = UNSET
    timestamp: datetime | UnsetType = UNSET

    def stamped(self) -> ResultMetadata[C]:
        """Return self if it has a timestamp, else a copy stamped with now."""
        if self.timestamp is not UNSET:
            return self
        return msgspec.structs.replace(self, timestamp=utcnow())

    def merged_with(self, other: ResultMetadata[C]) -> ResultMetadata[C]:
        """Shallow-merge ``other`` over self.

        Set fields of ``other`` win. The timestamp is taken from ``other``
        when set, otherwise the existing one is kept (or now, if neither has
        one).
        """
        changes = {
            name: getattr(other, name)
            for name in other.__struct_fields__
            if getattr(other, name) is not UNSET
        }
        return msgspec.structs.replace(self, **changes).stamped()


class ResultOptions(msgspec.Struct, frozen=True, kw_only=True):
    """Per-container policy, fixed at construction.

    Attributes:
        default_value_when_failure: Return the stored value instead of
            raising when reading ``value`` on a failed container.
        preserve_errors_order: Read errors in insertion order when True,
            reversed when False.
        metadata: Metadata to attach at construction.
    """

    default_value_when_failure: bool = False
    preserve_errors_order: bool = True
    metadata: ResultMetadata[Any] | None = None
