"""
Service layer abstraction.

Each service encapsulates business logic for a domain and talks to
storage only through ``core.collection`` / ``core.db``.  Pure
computations (query building, similarity, rating bookkeeping,
statistics) live in their own modules so they can be tested without a
database.
"""
