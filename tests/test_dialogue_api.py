"""Dialogue and template catalog endpoint integration tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from jium.application.dialogue.engine import GREETING
from jium.main import app

GENERATE = {"label": "✨ 프롬프트 생성하기", "triggersFinal": True}


async def _step(client: AsyncClient, state: dict, utterance: str = "", suggestion: dict | None = None) -> dict:
    body = {"state": state, "utterance": utterance}
    if suggestion is not None:
        body["suggestion"] = suggestion
    resp = await client.post("/dialogue/step", json=body)
    assert resp.status_code == 200
    return resp.json()


@pytest.mark.asyncio
async def test_start(app_container):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        resp = await client.post("/dialogue/start")
    assert resp.status_code == 200
    data = resp.json()
    assert data["state"] == {"templateType": None, "stepIndex": 0, "collectedInputs": {}, "rejectedField": None}
    assert data["messages"] == [{"text": GREETING, "kind": "greeting"}]
    assert {"label": "블로그 글쓰기", "triggersFinal": False} in data["suggestions"]
    assert data["phase"] == "idle"


@pytest.mark.asyncio
async def test_full_conversation(app_container, fake_llm):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        data = (await client.post("/dialogue/start")).json()
        data = await _step(client, data["state"], "블로그 글쓰기")
        assert data["state"]["templateType"] == "blog"
        data = await _step(client, data["state"], "AI")
        assert data["messages"][0]["kind"] == "rejection"
        assert data["state"]["rejectedField"] == "topic"
        data = await _step(client, data["state"], "AI 윤리")
        data = await _step(client, data["state"], suggestion={"label": "대학생"})
        data = await _step(client, data["state"], "전문적으로")
        data = await _step(client, data["state"], "없음")
        assert data["phase"] == "awaiting_confirmation"
        assert data["suggestions"] == [GENERATE]
        data = await _step(client, data["state"], suggestion=GENERATE)

    assert data["phase"] == "idle"
    assert data["messages"][0] == {"text": fake_llm.content, "kind": "final"}
    assert data["state"]["templateType"] is None
    assert len(fake_llm.calls) == 1
    assert '"topic": "AI 윤리"' in fake_llm.calls[0][0].content


@pytest.mark.asyncio
async def test_failure_becomes_message(app_container, fake_llm):
    fake_llm.error = RuntimeError("model crashed")
    state = {
        "templateType": "blog",
        "stepIndex": 4,
        "collectedInputs": {"topic": "AI 윤리", "targetAudience": "대학생", "tone": "전문적으로"},
    }
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        data = await _step(client, state, suggestion=GENERATE)
    assert data["phase"] == "failed"
    assert data["messages"][0]["kind"] == "error"
    assert "프롬프트 생성에 실패했습니다." in data["messages"][0]["text"]
    assert "crashed" not in data["messages"][0]["text"]
    assert data["state"]["templateType"] is None


@pytest.mark.asyncio
async def test_invalid_state_shape_is_rejected(app_container):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        resp = await client.post("/dialogue/step", json={"state": {"stepIndex": -1}, "utterance": "안녕"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_templates_catalog(app_container):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        resp = await client.get("/templates")
    assert resp.status_code == 200
    data = resp.json()
    assert [t["templateType"] for t in data] == ["blog", "email", "sns", "naming", "journal"]
    assert data[0]["fields"] == ["topic", "targetAudience", "tone", "constraints"]
