"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks both features use (settings, logging,
errors, DB wiring, the store handle). Keep feature-specific SQL and validation
in the corresponding feature package (e.g. `exercises/`).
"""
