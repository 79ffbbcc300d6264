"""Installed pactum version."""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as metadata_version

DISTRIBUTION = "pactum"
UNKNOWN_VERSION = "0.0.0"


def get_version() -> str:
    """Version recorded in the installed distribution metadata.

    Editable installs carry metadata too; a source tree that was never
    installed reports ``0.0.0``.
    """
    try:
        return metadata_version(DISTRIBUTION)
    except PackageNotFoundError:
        return UNKNOWN_VERSION
