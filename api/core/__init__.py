"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks that both features use (settings,
logging, the error taxonomy, atomic file writes). Keep item and image logic in
the corresponding feature package (`items/`, `images/`).
"""

