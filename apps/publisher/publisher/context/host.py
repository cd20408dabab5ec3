"""Maps build-matrix runner labels to host platforms.

The matrix supplies labels like ``ubuntu-20.04`` or ``windows-latest``;
GitHub runners also expose ``RUNNER_OS`` (``Linux``, ``Windows``, ``macOS``).
Both forms are accepted.
"""

import logging

from publisher.context.types import Host
from publisher.errors import UnknownHostError

logger = logging.getLogger(__name__)

# Label prefixes, checked case-insensitively against the start of the label.
HOST_PREFIXES: dict[str, Host] = {
    "ubuntu": Host.LINUX,
    "linux": Host.LINUX,
    "debian": Host.LINUX,
    "windows": Host.WINDOWS,
    "win": Host.WINDOWS,
    "macos": Host.MACOS,
    "darwin": Host.MACOS,
    "osx": Host.MACOS,
}


def resolve_host(label: str) -> Host:
    """Resolve a runner label (or RUNNER_OS value) to a Host.

    Raises:
        UnknownHostError: If the label matches no known platform.
    """
    normalised = label.strip().lower()
    if not normalised:
        raise UnknownHostError("Host label must not be empty")

    for prefix, host in HOST_PREFIXES.items():
        if normalised.startswith(prefix.lower()):
            logger.debug("Resolved host label %r to %s", label, host.value)
            return host

    raise UnknownHostError(
        f"Unrecognised host label {label!r}; expected one of: "
        "ubuntu-*, windows-*, macos-* (or linux, windows, macos)"
    )
