"""The fixed dialect catalog.

Declaration order is significant: both resolvers return the first matching
entry of ``CATALOG``, so an earlier entry wins any tie.
"""

from datasource_provisioner.dialects.base import (
    DialectDescriptor,
    contains_ignore_case,
    equals_ignore_case,
    starts_with_ignore_case,
)

UNKNOWN = DialectDescriptor(name="UNKNOWN", url_prefix_override=())

# Apache Derby
DERBY = DialectDescriptor(
    name="DERBY",
    product_name="DERBY",
    validation_query="SELECT 1 FROM SYSIBM.SYSDUMMY1",
)

H2 = DialectDescriptor(name="H2", product_name="H2", validation_query="SELECT 1")

# HyperSQL
HSQLDB = DialectDescriptor(
    name="HSQLDB",
    product_name="HSQLDB",
    validation_query="SELECT COUNT(*) FROM INFORMATION_SCHEMA.SYSTEM_USERS",
)

SQLITE = DialectDescriptor(
    name="SQLITE",
    product_name="SQLITE",
    driver_class_name="sqlite3",
    sqlalchemy_name="sqlite",
)

# Candidate drivers in order of preference
MYSQL = DialectDescriptor(
    name="MYSQL",
    product_name="MYSQL",
    driver_class_name="pymysql,MySQLdb,mysql.connector",
    pool_driver_class_name="mysql.connector.pooling",
    validation_query="/* ping */ SELECT 1",
    sqlalchemy_name="mysql",
)

MARIADB = DialectDescriptor(
    name="MARIADB",
    product_name="MARIADB",
    driver_class_name="mariadb",
    pool_driver_class_name="mariadb",
    validation_query="SELECT 1",
    sqlalchemy_name="mariadb",
    id_override="mysql",
)

# Google App Engine; no single product name to rely on
GAE = DialectDescriptor(
    name="GAE",
    driver_class_name="google.cloud.sql.connector",
)

ORACLE = DialectDescriptor(
    name="ORACLE",
    product_name="ORACLE",
    driver_class_name="oracledb",
    pool_driver_class_name="oracledb",
    validation_query="SELECT 'Hello' from DUAL",
    sqlalchemy_name="oracle",
)

POSTGRESQL = DialectDescriptor(
    name="POSTGRESQL",
    product_name="POSTGRESQL",
    driver_class_name="psycopg2",
    pool_driver_class_name="psycopg2.pool",
    validation_query="SELECT 1",
    sqlalchemy_name="postgresql",
)

# SAP HANA reports itself as HDB
HANA = DialectDescriptor(
    name="HANA",
    product_name="HDB",
    driver_class_name="hdbcli.dbapi",
    validation_query="SELECT 1 FROM SYS.DUMMY",
    sqlalchemy_name="hana",
    url_prefix_override=("sap",),
)

# TDS serves several databases, so there is no product name to match
JTDS = DialectDescriptor(
    name="JTDS",
    driver_class_name="pytds",
    sqlalchemy_name="mssql",
)

SQLSERVER = DialectDescriptor(
    name="SQLSERVER",
    product_name="SQLSERVER",
    driver_class_name="pyodbc",
    validation_query="SELECT 1",
    sqlalchemy_name="mssql",
    product_name_rules=(equals_ignore_case("SQL SERVER"),),
)

FIREBIRD = DialectDescriptor(
    name="FIREBIRD",
    product_name="FIREBIRD",
    driver_class_name="firebird.driver",
    validation_query="SELECT 1 FROM RDB$DATABASE",
    sqlalchemy_name="firebird",
    url_prefix_override=("firebirdsql",),
    product_name_rules=(starts_with_ignore_case("firebird"),),
)

DB2 = DialectDescriptor(
    name="DB2",
    product_name="DB2",
    driver_class_name="ibm_db_dbi",
    validation_query="SELECT 1 FROM SYSIBM.SYSDUMMY1",
    sqlalchemy_name="db2",
    product_name_rules=(starts_with_ignore_case("db2/"),),
)

DB2_AS400 = DialectDescriptor(
    name="DB2_AS400",
    product_name="DB2_AS400",
    driver_class_name="pyodbc",
    validation_query="SELECT 1 FROM SYSIBM.SYSDUMMY1",
    sqlalchemy_name="db2+pyodbc400",
    id_override="db2",
    url_prefix_override=("as400",),
    product_name_rules=(contains_ignore_case("as/400"),),
)

TERADATA = DialectDescriptor(
    name="TERADATA",
    product_name="TERADATA",
    driver_class_name="teradatasql",
    sqlalchemy_name="teradatasql",
)

INFORMIX = DialectDescriptor(
    name="INFORMIX",
    product_name="INFORMIX",
    driver_class_name="IfxPyDbi",
    validation_query="select count(*) from systables",
    url_prefix_override=("informix-sqli", "informix-direct"),
)

DAMENG = DialectDescriptor(
    name="DAMENG",
    product_name="DAMENG",
    driver_class_name="dmPython",
    validation_query="select 1",
    sqlalchemy_name="dm",
)

CATALOG: tuple[DialectDescriptor, ...] = (
    UNKNOWN,
    DERBY,
    H2,
    HSQLDB,
    SQLITE,
    MYSQL,
    MARIADB,
    GAE,
    ORACLE,
    POSTGRESQL,
    HANA,
    JTDS,
    SQLSERVER,
    FIREBIRD,
    DB2,
    DB2_AS400,
    TERADATA,
    INFORMIX,
    DAMENG,
)
