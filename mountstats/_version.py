import logging
import os
from importlib import metadata
from pathlib import Path

logger = logging.getLogger(__name__)


def get_version() -> str:
    """Resolve the version from, in order: a `version.txt` shipped next to the
    package, the installed distribution metadata, the `MOUNTSTATS_VERSION`
    environment variable.
    """
    version_file = Path(__file__).absolute().parent / "version.txt"
    if version_file.exists():
        return version_file.read_text().strip()

    try:
        return metadata.version("mountstats")
    except metadata.PackageNotFoundError:
        logger.debug("mountstats is not installed", exc_info=True)

    # do not fail due to not able to find version
    return os.environ.get("MOUNTSTATS_VERSION", "unknown")


__version__ = get_version()
