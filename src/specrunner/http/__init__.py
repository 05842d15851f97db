"""HTTP package for the specrunner server.

Provides the request/response models and the in-memory ledger used by the
result collection routes.
"""
