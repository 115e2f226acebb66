"""ODBC driver discovery for SQL Server connections."""

import os
import re
from functools import lru_cache
from typing import Optional

from tablewriter.core.logging import get_logger

logger = get_logger(__name__)

# Known SQL Server ODBC driver names in order of preference
KNOWN_SQL_SERVER_DRIVERS = [
    "ODBC Driver 18 for SQL Server",
    "ODBC Driver 17 for SQL Server",
    "ODBC Driver 13 for SQL Server",
    "SQL Server Native Client 11.0",
    "SQL Server",
]

DEFAULT_SQL_SERVER_DRIVER = "ODBC Driver 18 for SQL Server"


def _read_odbcinst_drivers() -> list[str]:
    """Read driver section names from odbcinst.ini files."""
    paths = [
        "/etc/odbcinst.ini",
        "/usr/local/etc/odbcinst.ini",
        os.path.expanduser("~/.odbcinst.ini"),
    ]
    odbcsysini = os.environ.get("ODBCSYSINI")
    if odbcsysini:
        paths.insert(0, os.path.join(odbcsysini, "odbcinst.ini"))

    drivers = []
    for path in paths:
        if not os.path.exists(path):
            continue
        try:
            with open(path, "r", encoding="utf-8") as f:
                drivers.extend(re.findall(r"^\[([^\]]+)\]", f.read(), re.MULTILINE))
        except OSError as e:
            logger.debug(f"Could not read {path}: {e}")
    return drivers


def _pyodbc_drivers() -> list[str]:
    """List drivers registered with the ODBC driver manager."""
    try:
        import pyodbc

        return list(pyodbc.drivers())
    except Exception as e:
        # pyodbc raises ImportError when libodbc is missing from the system
        logger.debug(f"Could not get drivers from pyodbc: {e}")
        return []


@lru_cache(maxsize=1)
def get_available_drivers() -> tuple[str, ...]:
    """
    Get available ODBC drivers.

    Returns:
        Driver names reported by pyodbc and odbcinst.ini
    """
    return tuple(sorted(set(_pyodbc_drivers()) | set(_read_odbcinst_drivers())))


def find_sql_server_driver(available: Optional[list[str]] = None) -> Optional[str]:
    """
    Pick the preferred SQL Server driver out of the available ones.

    Args:
        available: Driver names to choose from (defaults to the system's)

    Returns:
        Driver name if found, None otherwise
    """
    if available is None:
        available = list(get_available_drivers())

    for driver in KNOWN_SQL_SERVER_DRIVERS:
        if driver in available:
            return driver

    for driver in available:
        if "sql server" in driver.lower():
            return driver

    return None


def get_odbc_driver_string() -> str:
    """
    Get the ODBC driver for connection strings.

    The ODBC_DRIVER environment variable wins over auto-detection; when
    nothing is detected the newest Microsoft driver name is assumed.

    Returns:
        Driver name wrapped in curly braces
    """
    env_driver = os.environ.get("ODBC_DRIVER")
    if env_driver:
        return "{" + env_driver.strip("{}") + "}"

    driver = find_sql_server_driver()
    if driver is None:
        logger.warning(
            f"No SQL Server ODBC driver detected; falling back to "
            f"'{DEFAULT_SQL_SERVER_DRIVER}'. Set ODBC_DRIVER to override."
        )
        driver = DEFAULT_SQL_SERVER_DRIVER
    return "{" + driver + "}"
