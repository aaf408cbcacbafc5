from .commands_mixin import CommandsMixin
from .ingest_mixin import IngestMixin

__all__ = [
    "CommandsMixin",
    "IngestMixin",
]
