# src/client_sqlite/api/__init__.py
"""
HTTP surface for client-sqlite (FastAPI).

- app: FastAPI instance + lifespan (registry setup)
- routes: health, procedure listing, POST /rpc/{name}
- deps: dependency injection helpers
"""

from .app import app

__all__ = ["app"]
