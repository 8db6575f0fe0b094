"""
catalog_store: dialect abstraction and transactional-error classification for a
versioned, content-addressed catalog persisted in SQL databases.

`dialects` is imported first so that its descriptors are loaded before the
exception modules that refer to them.
"""

from catalog_store import dialects  # noqa: F401
