"""Types for the packaging module."""

from dataclasses import dataclass, field
from typing import Optional

from publisher.bundles.types import ArtifactBundle


@dataclass
class UploadReceipt:
    """What the artifact store reports back for one uploaded bundle.

    files holds the root-relative paths that were sent.
    """

    name: str
    artifact_id: str
    file_count: int
    total_bytes: int
    files: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "artifact_id": self.artifact_id,
            "file_count": self.file_count,
            "total_bytes": self.total_bytes,
            "files": self.files,
        }


@dataclass
class PublishOutcome:
    """Result of publishing one bundle.

    receipt is None both on failure and when an optional bundle matched
    nothing; error distinguishes the two.
    """

    bundle: ArtifactBundle
    receipt: Optional[UploadReceipt] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def skipped(self) -> bool:
        return self.error is None and self.receipt is None

    def to_dict(self) -> dict:
        return {
            "bundle": self.bundle.name,
            "ok": self.ok,
            "skipped": self.skipped,
            "receipt": self.receipt.to_dict() if self.receipt else None,
            "error": str(self.error) if self.error else None,
        }
