# Services module initialization
# Avoid eager imports; submodules are imported where needed.
__all__ = ["blob_storage", "search_index", "metrics", "observability"]
