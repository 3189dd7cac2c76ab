"""
Pydantic schema definitions for API payloads.

Each domain (trips, reviews, search, statistics, users) defines its
own models for request and response bodies.  The ``Trip`` model also
serves as the in‑process representation handed between the trip
collection and the services.
"""
