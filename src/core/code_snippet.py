"""
Custom site code, executed before routers and rules are resolved
"""
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class CodeSnippet:
    """
    A piece of custom site code: its source text, the filename it was read
    from and the time it was last modified. The mtime is only a hint for
    deciding whether previously compiled output is still valid.
    """

    def __init__(self, data: str, filename: str, mtime: Optional[float] = None):
        self.data = data
        self.filename = filename
        self.mtime = mtime
        self.site = None
        self._namespace: Optional[Dict[str, Any]] = None

    @property
    def loaded(self) -> bool:
        return self._namespace is not None

    def load(self, namespace: Dict[str, Any], force: bool = False) -> None:
        """
        Execute the code in the given namespace. Tracebacks point at
        self.filename with the snippet's own line numbers.
        Loading twice into the same namespace is a no-op unless force is
        set; a fresh namespace always runs the code.
        """
        if self._namespace is namespace and not force:
            return

        code = compile(self.data, self.filename, "exec")
        exec(code, namespace)
        self._namespace = namespace
        logger.debug(f"Loaded code snippet {self.filename}")

    def __repr__(self) -> str:
        return f"<CodeSnippet filename={self.filename!r} mtime={self.mtime!r}>"
