import logging
from importlib import metadata

DISTRIBUTION_NAME = "mtga-arenalog"
FALLBACK_VERSION = "0.3.0"


def get_version() -> str:
    """
    Get the installed arenalog version from the package metadata.

    Falls back to FALLBACK_VERSION when running from a source tree that
    was never installed.
    """
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        logging.debug(f"{DISTRIBUTION_NAME} is not installed, using {FALLBACK_VERSION}")
        return FALLBACK_VERSION
