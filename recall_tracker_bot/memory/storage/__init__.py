from .messages import MessageRecordsMixin
from .schema import MessageSchemaMixin
from .settings import DEFAULT_REPORTER_ID, MessageSettingsMixin
from .utils import InsertResult, InsertStatus, StoredMessage

__all__ = [
    "DEFAULT_REPORTER_ID",
    "InsertResult",
    "InsertStatus",
    "MessageRecordsMixin",
    "MessageSchemaMixin",
    "MessageSettingsMixin",
    "StoredMessage",
]
