# Infrastructure Adapters Package
from .memory_store import InMemoryLogStore

__all__ = ["InMemoryLogStore"]
