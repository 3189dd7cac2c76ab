"""
Core infrastructure: configuration, logging, storage, caching, errors
and security helpers shared by the services and the HTTP layer.
"""
