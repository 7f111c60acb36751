"""Database dialect registry for Datasource Provisioner.

This module maps a JDBC URL or a database product name to exactly one entry
of the fixed dialect catalog. Lookups never fail softly into ``None``: when
nothing matches they return ``UNKNOWN``.
"""

from typing import Optional

from datasource_provisioner.dialects.base import DialectDescriptor
from datasource_provisioner.dialects.catalog import (
    CATALOG,
    DAMENG,
    DB2,
    DB2_AS400,
    DERBY,
    FIREBIRD,
    GAE,
    H2,
    HANA,
    HSQLDB,
    INFORMIX,
    JTDS,
    MARIADB,
    MYSQL,
    ORACLE,
    POSTGRESQL,
    SQLITE,
    SQLSERVER,
    TERADATA,
    UNKNOWN,
)
from datasource_provisioner.errors import check_argument

JDBC_SCHEME = "jdbc"

_DIALECTS_BY_NAME: dict[str, DialectDescriptor] = {
    dialect.name: dialect for dialect in CATALOG if dialect is not UNKNOWN
}


def resolve_by_url(url: Optional[str]) -> DialectDescriptor:
    """Find the dialect for a JDBC URL.

    Args:
        url: JDBC URL such as ``jdbc:mysql://localhost:3306/nacos``

    Returns:
        The first catalog entry with a prefix ``p`` such that the URL starts
        with ``jdbc:p:`` (case-insensitive), or UNKNOWN

    Raises:
        ContractViolation: If a non-empty URL does not start with "jdbc"

    Examples:
        >>> resolve_by_url("jdbc:sap://host:30015")
        DialectDescriptor(HANA)
    """
    if not url:
        return UNKNOWN

    check_argument(url.startswith(JDBC_SCHEME), "URL must start with 'jdbc'")
    remainder = url[len(JDBC_SCHEME):].lower()
    for dialect in CATALOG:
        if dialect is UNKNOWN:
            continue
        for prefix in dialect.url_prefixes:
            if remainder.startswith(f":{prefix}:"):
                return dialect
    return UNKNOWN


def resolve_by_product_name(product_name: Optional[str]) -> DialectDescriptor:
    """Find the dialect for a database product name.

    Args:
        product_name: Name reported by the database or declared as the
            storage platform, e.g. "MySQL" or "SQL Server"

    Returns:
        The first catalog entry whose product name rules match, or UNKNOWN
    """
    if not product_name:
        return UNKNOWN

    candidate = product_name.upper()
    for dialect in CATALOG:
        if dialect.match_product_name(candidate):
            return dialect
    return UNKNOWN


def get_dialect(name: str) -> DialectDescriptor:
    """Get a catalog entry by its name.

    Args:
        name: Catalog name, case-insensitive (e.g. "mysql", "DB2_AS400")

    Returns:
        The matching descriptor

    Raises:
        ValueError: If no catalog entry has that name
    """
    dialect = _DIALECTS_BY_NAME.get(name.upper())
    if dialect is None:
        supported = ", ".join(get_supported_dialects())
        raise ValueError(
            f"Unsupported database dialect: {name!r}. "
            f"Supported dialects: {supported}"
        )
    return dialect


def get_supported_dialects() -> list[str]:
    """Get catalog names in declaration order, UNKNOWN excluded."""
    return list(_DIALECTS_BY_NAME)


__all__ = [
    "CATALOG",
    "DAMENG",
    "DB2",
    "DB2_AS400",
    "DERBY",
    "DialectDescriptor",
    "FIREBIRD",
    "GAE",
    "H2",
    "HANA",
    "HSQLDB",
    "INFORMIX",
    "JDBC_SCHEME",
    "JTDS",
    "MARIADB",
    "MYSQL",
    "ORACLE",
    "POSTGRESQL",
    "SQLITE",
    "SQLSERVER",
    "TERADATA",
    "UNKNOWN",
    "get_dialect",
    "get_supported_dialects",
    "resolve_by_product_name",
    "resolve_by_url",
]
