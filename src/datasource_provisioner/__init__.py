"""
Datasource Provisioner - dialect resolution and pooled connection provisioning.

This package identifies the relational database dialect behind a JDBC-style
URL or a product name, and builds SQLAlchemy connection pools with the
matching driver settings and validation query.
"""

__version__ = "0.1.0"
