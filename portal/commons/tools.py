from llama_index.core.tools.tool_spec.base import BaseToolSpec

from portal.core.db import DatabaseSessionManager


class BaseToolSet(BaseToolSpec):
    """
    Base Class for a set of chat tools, inheriting from LlamaIndex BaseToolSpec.
    Tools open their own short-lived sessions from the manager.
    """
    def __init__(self, db: DatabaseSessionManager):
        super().__init__()
        self.db = db
