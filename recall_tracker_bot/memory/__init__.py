from .storage import DEFAULT_REPORTER_ID, InsertResult, InsertStatus, StoredMessage
from .store import MessageStore

__all__ = ["DEFAULT_REPORTER_ID", "InsertResult", "InsertStatus", "MessageStore", "StoredMessage"]
