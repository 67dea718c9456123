"""Immutable values resolved once per run and shared across all files."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RemoteHead:
    """The single matching remote and the tip of its default branch."""
    url: str
    commit_hash: str


@dataclass(frozen=True)
class ArchiveMetadata:
    """Checksums and date computed from one downloaded source archive."""
    sha256: str  # lowercase hex
    integrity: str  # e.g. "sha384-<base64>"
    date: str  # YYYY-MM-DD of the archive root directory entry


@dataclass(frozen=True)
class UpdateContext:
    """Everything a stanza rewrite needs.

    Created before any file is touched and never modified afterwards.
    """
    commit_hash: str
    archive_checksum: str
    date: str
    archive_integrity: Optional[str] = None

    @classmethod
    def from_metadata(cls, head: RemoteHead, metadata: ArchiveMetadata) -> "UpdateContext":
        """Combine a resolved remote head with its archive metadata."""
        return cls(
            commit_hash=head.commit_hash,
            archive_checksum=metadata.sha256,
            date=metadata.date,
            archive_integrity=metadata.integrity,
        )
