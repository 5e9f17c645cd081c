"""Case intake and lifecycle engine.

Ingests contact records from CSV/JSON uploads, normalizes them into the
canonical case schema, stages them for review, commits them with
external-id dedup, and manages each case's lifecycle.
"""

__version__ = "1.0.0"
