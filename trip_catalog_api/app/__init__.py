"""
Application package initializer.

The project is organised into a framework‑free core (cache, trip
collection, query building, similarity, statistics and rating
bookkeeping) and an HTTP layer that exposes it.  Routes live under
``api/<version>/endpoints`` and call into ``services``; services never
import FastAPI.
"""

from .main import app  # noqa: F401
