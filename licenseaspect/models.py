"""License record and fingerprint value types."""

from __future__ import annotations

import hashlib
import json

from pydantic import BaseModel, ConfigDict

FINGERPRINT_TYPE = "gh-license"
FINGERPRINT_ABBREVIATION = "lic"
FINGERPRINT_VERSION = "0.0.1"

UNKNOWN = "unknown"


def sha256(text: str) -> str:
    """Hex SHA-256 of the UTF-8 encoding of *text*."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class LicenseRecord(BaseModel):
    """A repository license as reported by GitHub."""

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    spdx: str
    url: str | None = None

    @classmethod
    def unknown(cls) -> LicenseRecord:
        """Sentinel used when the license cannot be determined."""
        return cls(key=UNKNOWN, name="Unknown", spdx=UNKNOWN)

    @property
    def is_unknown(self) -> bool:
        return self.key == UNKNOWN

    def canonical_json(self) -> str:
        """Compact JSON in field order, with absent (None) fields omitted.

        For the ``unknown`` sentinel this is byte-identical to the
        serialisation older fingerprints were hashed from; records with a
        null url or spdx may hash differently than before.
        """
        return json.dumps(
            self.model_dump(exclude_none=True),
            separators=(",", ":"),
            ensure_ascii=False,
        )


class Fingerprint(BaseModel):
    """Content-addressed snapshot of a repository's license.

    Two fingerprints are equal when their ``sha`` is equal.
    """

    model_config = ConfigDict(frozen=True)

    type: str = FINGERPRINT_TYPE
    name: str = FINGERPRINT_TYPE
    abbreviation: str = FINGERPRINT_ABBREVIATION
    version: str = FINGERPRINT_VERSION
    data: LicenseRecord
    sha: str

    @classmethod
    def of(cls, record: LicenseRecord) -> Fingerprint:
        return cls(data=record, sha=sha256(record.canonical_json()))

    def is_consistent(self) -> bool:
        """True if ``sha`` matches the hash of ``data``."""
        return self.sha == sha256(self.data.canonical_json())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fingerprint):
            return NotImplemented
        return self.sha == other.sha

    def __hash__(self) -> int:
        return hash(self.sha)
