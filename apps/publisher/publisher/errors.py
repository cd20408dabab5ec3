"""Error taxonomy for the artifact publisher.

Every error is fatal to the unit of work that raised it. Nothing here is
retried locally; the CI orchestrator decides whether to rerun the job.
"""


class PublishError(Exception):
    """Base class for all publisher failures."""


class InvalidReferenceError(PublishError):
    """Raised when a commit reference cannot be resolved."""


class UnknownHostError(PublishError):
    """Raised when a build-matrix host label maps to no known platform."""


class ManifestError(PublishError):
    """Raised when a bundle manifest file is malformed."""


class NoFilesMatchedError(PublishError):
    """Raised when a required bundle matches zero files.

    Attributes:
        bundle_name: Name of the bundle that came up empty.
        patterns: The inclusion patterns that were searched.
    """

    def __init__(self, bundle_name: str, patterns: tuple[str, ...]) -> None:
        self.bundle_name = bundle_name
        self.patterns = patterns
        super().__init__(
            f"No files were found for required bundle '{bundle_name}' "
            f"with patterns: {', '.join(patterns)}"
        )


class UploadError(PublishError):
    """Raised when the artifact store rejects an upload or is unreachable."""

    def __init__(self, bundle_name: str, reason: str, status_code: int | None = None) -> None:
        self.bundle_name = bundle_name
        self.status_code = status_code
        super().__init__(f"Upload of '{bundle_name}' failed: {reason}")
