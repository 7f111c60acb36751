"""Dialect descriptor and product-name matching rules."""

from dataclasses import dataclass, field
from typing import Callable, Optional

ProductNameRule = Callable[[str], bool]


def equals_ignore_case(literal: str) -> ProductNameRule:
    """Match a product name equal to ``literal``, ignoring case."""
    expected = literal.lower()
    return lambda candidate: candidate.lower() == expected


def starts_with_ignore_case(prefix: str) -> ProductNameRule:
    """Match a product name starting with ``prefix``, ignoring case."""
    expected = prefix.lower()
    return lambda candidate: candidate.lower().startswith(expected)


def contains_ignore_case(fragment: str) -> ProductNameRule:
    """Match a product name containing ``fragment``, ignoring case."""
    expected = fragment.lower()
    return lambda candidate: expected in candidate.lower()


@dataclass(frozen=True)
class DialectDescriptor:
    """Immutable description of one database dialect.

    A descriptor says how to recognise a dialect, from the prefix of a JDBC
    URL or from the product name a database reports, and which driver
    metadata it implies. Instances live in the fixed catalog and are
    compared by identity when resolving.

    Attributes:
        name: Catalog key, e.g. "MYSQL" or "DB2_AS400"
        product_name: Product name reported by the database, if known
        driver_class_name: Import path of the DB-API driver module. May list
            several comma-separated candidates, most preferred first
        pool_driver_class_name: Import path of the driver's pooling variant
        validation_query: Liveness probe, None to use the driver's default
        sqlalchemy_name: SQLAlchemy backend name, optionally with a driver
            suffix ("db2+pyodbc400"), or None when there is none
        id_override: Identifier reported instead of ``name.lower()``
        url_prefix_override: URL prefixes used instead of ``name.lower()``
        product_name_rules: Extra rules OR'd with the product name check
    """

    name: str
    product_name: Optional[str] = None
    driver_class_name: Optional[str] = None
    pool_driver_class_name: Optional[str] = None
    validation_query: Optional[str] = None
    sqlalchemy_name: Optional[str] = None
    id_override: Optional[str] = None
    url_prefix_override: Optional[tuple[str, ...]] = None
    product_name_rules: tuple[ProductNameRule, ...] = field(default=(), compare=False)

    @property
    def id(self) -> str:
        """Canonical lower-case identifier.

        Two dialects may share an id: MARIADB reports "mysql" and DB2_AS400
        reports "db2", so code switching on the id treats them as members
        of the parent family.
        """
        return self.id_override or self.name.lower()

    @property
    def url_prefixes(self) -> tuple[str, ...]:
        """Prefixes matched against the part of a JDBC URL after ``jdbc:``."""
        if self.url_prefix_override is not None:
            return self.url_prefix_override
        return (self.name.lower(),)

    def match_product_name(self, candidate: str) -> bool:
        """Check whether a database product name identifies this dialect.

        Args:
            candidate: Product name as reported by the database

        Returns:
            True on a case-insensitive match with ``product_name`` or with
            any of the dialect's extra rules
        """
        if self.product_name is not None and self.product_name.lower() == candidate.lower():
            return True
        return any(rule(candidate) for rule in self.product_name_rules)

    def __repr__(self) -> str:
        return f"DialectDescriptor({self.name})"
