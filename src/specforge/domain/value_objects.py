"""Value objects — self-validating domain primitives."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum


class DocumentKind(str, Enum):
    """Structural shape of a submitted document value."""

    SEQUENCE = "sequence"
    MAPPING = "mapping"
    SCALAR = "scalar"
    NULL = "null"


@dataclass(frozen=True, slots=True)
class DocumentValue:
    """Tagged view of an opaque submitted document.

    Only the shape and the number of top-level entries are retained; nothing
    inside the document is ever inspected.  Text and binary values are
    scalars even though Python treats them as sequences.
    """

    kind: DocumentKind
    size: int = 0

    @classmethod
    def from_raw(cls, value: object) -> DocumentValue:
        """Classify a decoded JSON-like value."""
        if isinstance(value, DocumentValue):
            return value
        if value is None:
            return cls(DocumentKind.NULL)
        if isinstance(value, (str, bytes, bytearray)):
            return cls(DocumentKind.SCALAR)
        if isinstance(value, Mapping):
            return cls(DocumentKind.MAPPING, len(value))
        if isinstance(value, Sequence):
            return cls(DocumentKind.SEQUENCE, len(value))
        return cls(DocumentKind.SCALAR)

    @property
    def is_present(self) -> bool:
        """True for a structured document with at least one entry."""
        return self.kind in (DocumentKind.SEQUENCE, DocumentKind.MAPPING) and self.size > 0
