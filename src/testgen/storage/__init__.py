"""Storage layer: persistence for repositories, files, summaries and templates."""

from testgen.config.schema import StorageConfig
from testgen.storage.base import Store, StorageError


def create_store(config: StorageConfig) -> Store:
    """Factory function to create a store based on configuration.

    Args:
        config: Storage configuration with store_type

    Returns:
        Store instance (call ``initialize`` before use)

    Raises:
        ValueError: If store_type is unknown

    Example:
        store = create_store(StorageConfig(store_type="memory"))
        await store.initialize()
    """
    store_type = str(getattr(config.store_type, "value", config.store_type)).lower()

    if store_type == "memory":
        from testgen.storage.memory import InMemoryStore

        return InMemoryStore(config)

    raise ValueError(f"Unknown store type: '{store_type}'. Supported types: memory")


__all__ = [
    "Store",
    "StorageConfig",
    "StorageError",
    "create_store",
]
