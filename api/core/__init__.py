"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks that every feature uses (DB pool wiring,
settings, the error taxonomy). Keep registries, SQL and orchestration in the
corresponding feature package (`dispatch/`, `operations/`).
"""
