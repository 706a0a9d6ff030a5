# src/client_sqlite/procedures/__init__.py
"""
Remote-callable procedures.

- registry: Procedure + ProcedureRegistry (validation and dispatch)
- sqlite: db.query / db.execute / logs.store / logs.query handlers
"""

from .registry import Procedure, ProcedureRegistry, normalize_path
from .sqlite import SqliteProcedures, register_sqlite_procedures

__all__ = [
    "Procedure",
    "ProcedureRegistry",
    "normalize_path",
    "SqliteProcedures",
    "register_sqlite_procedures",
]
