from ctxctl.storage.context_storage import ContextStorage, load_context, resolve_directory

__all__ = ["ContextStorage", "load_context", "resolve_directory"]
