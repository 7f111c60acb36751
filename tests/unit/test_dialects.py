"""Tests for the dialect registry."""

import pytest

from datasource_provisioner.dialects import (
    CATALOG,
    DB2,
    DB2_AS400,
    FIREBIRD,
    HANA,
    INFORMIX,
    JTDS,
    MARIADB,
    MYSQL,
    ORACLE,
    POSTGRESQL,
    SQLSERVER,
    UNKNOWN,
    DialectDescriptor,
    get_dialect,
    get_supported_dialects,
    resolve_by_product_name,
    resolve_by_url,
)
from datasource_provisioner.errors import ContractViolation

SUPPORTED = [dialect for dialect in CATALOG if dialect is not UNKNOWN]


class TestCatalog:
    """Tests for catalog contents."""

    def test_unknown_is_first(self):
        """Test UNKNOWN heads the catalog."""
        assert CATALOG[0] is UNKNOWN

    def test_exactly_one_unknown(self):
        """Test only UNKNOWN has no identifying fields."""
        empty = [
            d for d in CATALOG
            if d.product_name is None and d.driver_class_name is None and not d.url_prefixes
        ]
        assert empty == [UNKNOWN]

    def test_unknown_fields_absent(self):
        """Test UNKNOWN carries no metadata."""
        assert UNKNOWN.driver_class_name is None
        assert UNKNOWN.pool_driver_class_name is None
        assert UNKNOWN.validation_query is None
        assert UNKNOWN.url_prefixes == ()

    def test_default_id_and_prefix(self):
        """Test id and URL prefix default to the lower-cased name."""
        assert ORACLE.id == "oracle"
        assert ORACLE.url_prefixes == ("oracle",)

    def test_mariadb_shares_mysql_id(self):
        """Test MariaDB reports the MySQL id but keeps its own driver."""
        assert MARIADB.id == MYSQL.id == "mysql"
        assert MARIADB.driver_class_name == "mariadb"
        assert MARIADB.product_name == "MARIADB"
        assert MARIADB is not MYSQL

    def test_as400_overrides(self):
        """Test the AS/400 variant reports DB2's id and its own prefix."""
        assert DB2_AS400.id == DB2.id == "db2"
        assert DB2_AS400.url_prefixes == ("as400",)

    def test_prefix_overrides(self):
        """Test dialects with non-default URL prefixes."""
        assert HANA.url_prefixes == ("sap",)
        assert FIREBIRD.url_prefixes == ("firebirdsql",)
        assert set(INFORMIX.url_prefixes) == {"informix-sqli", "informix-direct"}

    def test_descriptor_is_immutable(self):
        """Test descriptors cannot be mutated."""
        with pytest.raises(AttributeError):
            MYSQL.validation_query = "SELECT 2"

    def test_mysql_lists_driver_candidates(self):
        """Test MySQL names several connectors in order."""
        assert MYSQL.driver_class_name.split(",")[0] == "pymysql"


class TestResolveByUrl:
    """Tests for URL-based resolution."""

    @pytest.mark.parametrize(
        "dialect,prefix",
        [(d, p) for d in SUPPORTED for p in d.url_prefixes],
        ids=lambda value: value.name if isinstance(value, DialectDescriptor) else value,
    )
    def test_every_prefix_resolves(self, dialect, prefix):
        """Test each catalog prefix resolves to its own dialect."""
        assert resolve_by_url(f"jdbc:{prefix}:host/db") is dialect

    def test_mysql_url(self):
        """Test a typical MySQL URL."""
        url = "jdbc:mysql://127.0.0.1:3306/nacos?characterEncoding=utf8"
        assert resolve_by_url(url) is MYSQL

    def test_prefix_is_case_insensitive(self):
        """Test the prefix is matched case-insensitively."""
        assert resolve_by_url("jdbc:PostgreSQL://localhost/nacos") is POSTGRESQL

    def test_unknown_prefix(self):
        """Test a prefix belonging to no dialect."""
        assert resolve_by_url("jdbc:postgres://localhost/nacos") is UNKNOWN
        assert resolve_by_url("jdbc:cockroach://localhost/nacos") is UNKNOWN

    def test_prefix_needs_trailing_colon(self):
        """Test a prefix only matches as a whole URL segment."""
        assert resolve_by_url("jdbc:mysqlx://localhost") is UNKNOWN

    def test_empty_url(self):
        """Test empty and missing URLs resolve to UNKNOWN."""
        assert resolve_by_url("") is UNKNOWN
        assert resolve_by_url(None) is UNKNOWN

    def test_non_jdbc_url_is_rejected(self):
        """Test a URL without the jdbc scheme is a contract error."""
        with pytest.raises(ContractViolation, match="URL must start with 'jdbc'"):
            resolve_by_url("mysql://localhost:3306/nacos")

    def test_scheme_literal_is_case_sensitive(self):
        """Test the jdbc scheme literal must be lower case."""
        with pytest.raises(ContractViolation):
            resolve_by_url("JDBC:mysql://localhost")

    def test_contract_violation_is_value_error(self):
        """Test callers can catch the violation as ValueError."""
        with pytest.raises(ValueError):
            resolve_by_url("oracle:thin:@localhost")


class TestResolveByProductName:
    """Tests for product-name resolution."""

    @pytest.mark.parametrize("name", ["SQL SERVER", "sqlserver", "Sql Server"])
    def test_sqlserver_aliases(self, name):
        """Test SQL Server resolves from both spellings."""
        assert resolve_by_product_name(name) is SQLSERVER

    def test_firebird_prefix(self):
        """Test Firebird variants resolve by prefix."""
        assert resolve_by_product_name("firebird-embedded") is FIREBIRD
        assert resolve_by_product_name("Firebird 3.0") is FIREBIRD

    def test_db2_prefix(self):
        """Test DB2 product names with a platform suffix."""
        assert resolve_by_product_name("DB2/LINUXX8664") is DB2
        assert resolve_by_product_name("db2") is DB2

    def test_as400_substring(self):
        """Test AS/400 product names resolve to the AS/400 variant."""
        assert resolve_by_product_name("DB2 UDB for AS/400") is DB2_AS400

    def test_hana_product_name(self):
        """Test HANA is recognised by its HDB product name."""
        assert resolve_by_product_name("HDB") is HANA
        assert resolve_by_product_name("HANA") is UNKNOWN

    def test_mariadb(self):
        """Test MariaDB resolves to its own descriptor with the MySQL id."""
        dialect = resolve_by_product_name("MariaDB")
        assert dialect is MARIADB
        assert dialect.id == "mysql"

    def test_case_insensitive(self):
        """Test plain product names ignore case."""
        assert resolve_by_product_name("mysql") is MYSQL
        assert resolve_by_product_name("Oracle") is ORACLE

    def test_dialect_without_product_name(self):
        """Test dialects without a product name never match by name."""
        assert resolve_by_product_name("JTDS") is UNKNOWN
        assert JTDS.match_product_name("JTDS") is False

    def test_empty_and_unknown(self):
        """Test empty, missing and unknown names resolve to UNKNOWN."""
        assert resolve_by_product_name("") is UNKNOWN
        assert resolve_by_product_name(None) is UNKNOWN
        assert resolve_by_product_name("CockroachDB") is UNKNOWN


class TestDialectLookup:
    """Tests for name lookup helpers."""

    def test_get_dialect(self):
        """Test lookup by catalog name ignores case."""
        assert get_dialect("mysql") is MYSQL
        assert get_dialect("DB2_AS400") is DB2_AS400

    def test_get_unknown_dialect(self):
        """Test invalid names raise ValueError."""
        with pytest.raises(ValueError, match="Unsupported database dialect"):
            get_dialect("postgres")

    def test_unknown_is_not_supported(self):
        """Test UNKNOWN cannot be looked up."""
        with pytest.raises(ValueError):
            get_dialect("unknown")

    def test_supported_dialects_in_catalog_order(self):
        """Test supported names follow declaration order."""
        names = get_supported_dialects()
        assert names[0] == "DERBY"
        assert names[-1] == "DAMENG"
        assert "UNKNOWN" not in names
        assert names.index("MYSQL") < names.index("MARIADB")
