from types import SimpleNamespace

import pytest


class FakeCompletions:
    """Stands in for ``client.chat.completions`` and records requests."""

    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def fake_client():
    def make(content=None, error=None):
        return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(content, error)))
    return make
