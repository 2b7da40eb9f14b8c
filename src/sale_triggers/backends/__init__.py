from .application import ApplicationBackend
from .postgres import PostgresTriggerBackend

__all__ = ["ApplicationBackend", "PostgresTriggerBackend"]
