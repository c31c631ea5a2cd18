"""
Per-domain repository modules for database access.

Each module owns the queries for one aggregate; `surecrm.db.crud` is the
thin facade the API layer imports.
"""
