import asyncio
from typing import Any, Dict, List

import pytest

from paralegal.core.case_data import CaseDataService
from paralegal.core.llm_service import StreamDelta
from paralegal.core.storage import JsonFileStore


class FakeCompletionClient:
    """
    Stands in for CompletionClient with scripted responses.

    Each ``send_stream`` call consumes one script from ``stream_scripts``. A
    script item is a text delta (str), a StreamDelta delivered as-is, an
    exception to raise, or an asyncio.Event to wait on before continuing.
    Each ``send_once`` call consumes one item from ``once_responses``; an
    asyncio.Event there is waited on and the next item is used as the response.
    """

    def __init__(self):
        self.stream_scripts: List[List[Any]] = []
        self.once_responses: List[Any] = []
        self.calls: List[Dict[str, Any]] = []
        self.configured = True

    def is_configured(self) -> bool:
        return self.configured

    async def send_once(self, system_prompt, user_prompt, json_mode=False, model_name=None):
        self.calls.append({
            "kind": "once",
            "system": system_prompt,
            "user": user_prompt,
            "json_mode": json_mode,
            "model": model_name,
        })
        response = self.once_responses.pop(0)
        while isinstance(response, asyncio.Event):
            await response.wait()
            response = self.once_responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    async def send_stream(self, system_prompt, user_prompt, on_delta, model_name=None):
        self.calls.append({
            "kind": "stream",
            "system": system_prompt,
            "user": user_prompt,
            "model": model_name,
        })
        script = self.stream_scripts.pop(0)
        for item in script:
            if isinstance(item, asyncio.Event):
                await item.wait()
            elif isinstance(item, StreamDelta):
                on_delta(item)
            elif isinstance(item, BaseException):
                raise item
            else:
                on_delta(StreamDelta(text=item))


@pytest.fixture
def store(tmp_path):
    return JsonFileStore(str(tmp_path / "data"))


@pytest.fixture
def case_data(store):
    return CaseDataService(store)


@pytest.fixture
def fake_llm():
    return FakeCompletionClient()
