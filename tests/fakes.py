from types import SimpleNamespace
from typing import Any, Dict, List, Optional


class FakeCompletions:
    """
    Stands in for `OpenAI().chat.completions`.

    - Captures the keyword arguments of every call
    - Returns `content` as the single choice, or raises `error`
    """

    def __init__(self, content: Optional[str] = None, error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    def __init__(self, content: Optional[str] = None, error: Optional[Exception] = None):
        self.completions = FakeCompletions(content=content, error=error)
        self.chat = SimpleNamespace(completions=self.completions)
