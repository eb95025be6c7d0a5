"""Textual principal ids used to address memory canisters.

A principal is up to 29 raw bytes.  Its text form is the lowercase,
unpadded base32 encoding of ``crc32(raw) || raw`` (checksum big-endian),
split into groups of five characters with ``-``; e.g. ``aaaaa-aa`` for
the empty principal or ``ryjl3-tyaaa-aaaaa-aaaba-cai`` for a canister.
"""

from __future__ import annotations

import base64
import binascii
import zlib

from memory_ingest.errors import ValidationError

MAX_LENGTH_IN_BYTES = 29
CRC_LENGTH_IN_BYTES = 4
_GROUP = 5


def _encode(raw: bytes) -> str:
    checksum = zlib.crc32(raw).to_bytes(CRC_LENGTH_IN_BYTES, "big")
    text = base64.b32encode(checksum + raw).decode("ascii").lower().rstrip("=")
    return "-".join(text[i : i + _GROUP] for i in range(0, len(text), _GROUP))


class Principal:
    """Validated store identifier.

    Build one with :meth:`from_text` (caller input) or from raw bytes.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: bytes) -> None:
        if len(raw) > MAX_LENGTH_IN_BYTES:
            raise ValueError(f"Principal is at most {MAX_LENGTH_IN_BYTES} bytes, got {len(raw)}")
        self._raw = bytes(raw)

    @classmethod
    def from_text(cls, text: str) -> Principal:
        """Parse the canonical text form, checking grouping and checksum."""
        error = "Failed to parse canister id"
        compact = text.replace("-", "")
        if not compact or compact != compact.lower():
            raise ValidationError(error, value=text)

        padded = compact.upper() + "=" * (-len(compact) % 8)
        try:
            decoded = base64.b32decode(padded)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError(error, value=text) from exc

        if not CRC_LENGTH_IN_BYTES <= len(decoded) <= CRC_LENGTH_IN_BYTES + MAX_LENGTH_IN_BYTES:
            raise ValidationError(error, value=text)

        principal = cls(decoded[CRC_LENGTH_IN_BYTES:])
        # Re-encoding catches bad checksums, misplaced dashes and non-zero pad bits.
        if principal.to_text() != text:
            raise ValidationError(error, value=text)
        return principal

    @property
    def raw(self) -> bytes:
        return self._raw

    def to_text(self) -> str:
        return _encode(self._raw)

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"Principal({self.to_text()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Principal):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(self._raw)
