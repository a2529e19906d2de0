import asyncio

import httpx


class RecordingTransport:
    """Fake OpenAI endpoint that records every request it receives."""

    def __init__(self, status_code=200, json_body=None, text=None, error=None):
        self.status_code = status_code
        self.json_body = json_body
        self.text = text
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.json_body)


def completion(content):
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
    }


class BlockingService:
    """Remote summarizer stub that holds every call until released."""

    def __init__(self, result="remote text"):
        self.result = result
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def summarize(self, issue, credential):
        self.entered.set()
        await self.release.wait()
        return self.result
