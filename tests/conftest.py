import json
from types import SimpleNamespace

import pytest

from archive_client import ArchiveClient


def _chunk(text):
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=text))])


class FakeCompletions:
    """Stands in for ``client.chat.completions`` and records each request."""

    def __init__(self, fragments=(), fail_after=None, fail_on_connect=None):
        self.fragments = list(fragments)
        self.fail_after = fail_after
        self.fail_on_connect = fail_on_connect
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.fail_on_connect is not None:
            raise self.fail_on_connect
        return self._stream()

    async def _stream(self):
        yield SimpleNamespace(choices=[])
        for i, fragment in enumerate(self.fragments):
            if self.fail_after is not None and i == self.fail_after[0]:
                raise self.fail_after[1]
            yield _chunk(fragment)
            yield _chunk(None)
        if self.fail_after is not None and self.fail_after[0] >= len(self.fragments):
            raise self.fail_after[1]


def fake_openai(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def make_archive(completions):
    return ArchiveClient(api_key="gsk_test", client=fake_openai(completions))


def parse_events(body):
    events = []
    for block in body.split("\n\n"):
        block = block.strip()
        if block.startswith("data: "):
            events.append(json.loads(block[len("data: "):]))
    return events


@pytest.fixture
def completions():
    return FakeCompletions(["Intro part A", "|||SECTION|||Intro part B"])
