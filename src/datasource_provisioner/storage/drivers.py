"""Driver selection for provisioned pools."""

import importlib.util
from typing import Iterable, Optional

from datasource_provisioner.dialects import MYSQL, DialectDescriptor
from datasource_provisioner.logger import get_logger

logger = get_logger(__name__)


def driver_candidates(driver_class_name: Optional[str]) -> list[str]:
    """Split a driver identifier into its ordered candidates.

    Args:
        driver_class_name: One module path or several comma-separated ones

    Returns:
        Candidate module paths, most preferred first
    """
    if not driver_class_name:
        return []
    return [name.strip() for name in driver_class_name.split(",") if name.strip()]


def is_loadable(module_name: str) -> bool:
    """Check whether a driver module can be imported in this environment.

    Locating a dotted name imports its parent packages; a parent that is
    missing or broken makes the module unavailable.
    """
    try:
        found = importlib.util.find_spec(module_name) is not None
    except (ImportError, ValueError) as e:
        logger.warning(f"Driver {module_name} is unavailable: {e}")
        return False

    if not found:
        logger.warning(f"Driver {module_name} is not installed")
    return found


def first_loadable(candidates: Iterable[str]) -> Optional[str]:
    """Return the first candidate that is loadable, or None."""
    return next((name for name in candidates if is_loadable(name)), None)


def resolve_driver_class_name(dialect: DialectDescriptor) -> Optional[str]:
    """Pick the driver module a pool for ``dialect`` should use.

    MySQL lists several connectors; the first one installed wins. Every
    other dialect passes its driver through unchanged, absent included.

    Args:
        dialect: Resolved dialect

    Returns:
        Driver module path, or None to let the pool pick its default
    """
    if dialect is not MYSQL:
        return dialect.driver_class_name

    driver = first_loadable(driver_candidates(dialect.driver_class_name))
    if driver is None:
        logger.warning(
            f"None of the MySQL drivers ({dialect.driver_class_name}) is installed, "
            "leaving driver selection to the pool"
        )
    return driver
