"""
sinkfields: primary-key and column resolution for table sinks.

Turns the key schema, value schema and headers of a single record into the
authoritative split between primary-key columns and ordinary columns of a
destination table, with the type metadata needed to build DDL and DML.
"""

__version__ = "0.1.0"
