"""
client-sqlite: SQLite query and log-storage procedures.

Nothing is registered on import; call
`client_sqlite.procedures.register_sqlite_procedures(registry)` at startup.
"""

__version__ = "0.1.0"
