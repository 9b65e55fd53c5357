import asyncio

import pytest

from portfolio.errors import UpstreamConfigError
from portfolio.schemas.chat import ChatRequest
from portfolio.services.admission import AdmissionGate
from portfolio.services.chat_relay import DONE_FRAME, ChatRelay
from portfolio.services.conversation_store import ClientMeta
from portfolio.utils.rate_limit import RateLimiter

from conftest import FakeConversationStore, FakeProvider, parse_sse

LIMIT_MESSAGE = "You've reached the question limit."


def _relay(store, provider, quota=10):
    gate = AdmissionGate(RateLimiter(), store, question_quota=quota)
    return ChatRelay(store, provider, gate, system_prompt="SYSTEM", limit_message=LIMIT_MESSAGE)


def _request(*contents, session_id="sess_1"):
    messages = []
    for i, content in enumerate(contents):
        messages.append({"role": "user" if i % 2 == 0 else "assistant", "content": content})
    return ChatRequest.model_validate({"messages": messages, "sessionId": session_id})


async def _collect(relay, turn):
    return [frame async for frame in relay.events(turn)]


ANSWER = "I led connector reliability work."


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "chunks",
    [
        ["I ", "led ", "connector ", "reliability", " work."],
        list(ANSWER),
        [ANSWER],
        ["I led con", "nector reliab", "ility work", "."],
    ],
    ids=["words", "characters", "whole", "uneven"],
)
async def test_chunks_forwarded_in_order_and_transcript_matches(fake_store, chunks):
    provider = FakeProvider(chunks=chunks)
    relay = _relay(fake_store, provider)

    turn = await relay.open(_request("What do you work on?"), ClientMeta())
    frames = await _collect(relay, turn)
    await relay.wait_for_pending()

    events = parse_sse("".join(frames))
    assert events[:-1] == [{"content": c} for c in chunks]
    assert events[-1] == "[DONE]"
    assert frames[-1] == DONE_FRAME
    assert "".join(event["content"] for event in events[:-1]) == ANSWER
    assert fake_store.contents("user") == ["What do you work on?"]
    assert fake_store.contents("assistant") == [ANSWER]
    assert provider.closed is True


@pytest.mark.asyncio
async def test_provider_gets_fixed_prompt_recent_history_and_limits(fake_store, fake_provider):
    relay = _relay(fake_store, fake_provider)
    contents = [f"m{i}" for i in range(15)]

    turn = await relay.open(_request(*contents), ClientMeta())
    await _collect(relay, turn)

    call = fake_provider.calls[0]
    assert call["system_prompt"] == "SYSTEM"
    assert [m["content"] for m in call["history"]] == contents[-10:]
    assert call["max_tokens"] == 500
    assert call["temperature"] == 0.7


@pytest.mark.asyncio
async def test_storage_failure_is_invisible_to_the_client():
    store = FakeConversationStore(fail=True)
    provider = FakeProvider(chunks=["All ", "good"])
    relay = _relay(store, provider)

    turn = await relay.open(_request("hi"), ClientMeta())
    assert turn.session_handle is None
    events = parse_sse("".join(await _collect(relay, turn)))
    await relay.wait_for_pending()

    assert events == [{"content": "All "}, {"content": "good"}, "[DONE]"]
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_quota_exceeded_streams_canned_message_without_provider(fake_store, fake_provider):
    relay = _relay(fake_store, fake_provider, quota=2)

    for question in ("one", "two"):
        turn = await relay.open(_request(question), ClientMeta())
        assert turn.limited is False
        await _collect(relay, turn)
    await relay.wait_for_pending()
    assert len(fake_provider.calls) == 2

    for question in ("three", "four"):
        turn = await relay.open(_request(question), ClientMeta())
        assert turn.limited is True
        events = parse_sse("".join(await _collect(relay, turn)))
        assert events == [{"content": LIMIT_MESSAGE}, "[DONE]"]
    await relay.wait_for_pending()

    assert len(fake_provider.calls) == 2
    assert fake_store.contents("assistant")[-2:] == [LIMIT_MESSAGE, LIMIT_MESSAGE]


@pytest.mark.asyncio
async def test_stream_completion_does_not_wait_for_transcript_write():
    store = FakeConversationStore(assistant_delay=1.0)
    relay = _relay(store, FakeProvider(chunks=["fast"]))
    loop = asyncio.get_running_loop()

    turn = await relay.open(_request("hi"), ClientMeta())
    started = loop.time()
    frames = await _collect(relay, turn)
    elapsed = loop.time() - started

    assert frames[-1] == DONE_FRAME
    assert elapsed < 0.5
    assert store.contents("assistant") == []

    await relay.wait_for_pending()
    assert store.contents("assistant") == ["fast"]


@pytest.mark.asyncio
async def test_mid_stream_failure_sends_error_frame_and_skips_transcript(fake_store):
    provider = FakeProvider(chunks=["Partial", " answer", " lost"], fail_after=1)
    relay = _relay(fake_store, provider)

    turn = await relay.open(_request("hi"), ClientMeta())
    events = parse_sse("".join(await _collect(relay, turn)))
    await relay.wait_for_pending()

    assert events[0] == {"content": "Partial"}
    assert events[-1] == {"error": "Something went wrong. Please try again."}
    assert "[DONE]" not in events
    assert "secret-provider-detail" not in str(events)
    assert fake_store.contents("assistant") == []


@pytest.mark.asyncio
async def test_client_disconnect_releases_upstream(fake_store):
    provider = FakeProvider(chunks=["a", "b", "c", "d"])
    relay = _relay(fake_store, provider)

    turn = await relay.open(_request("hi"), ClientMeta())
    events = relay.events(turn)
    first = await events.__anext__()
    await events.aclose()
    await relay.wait_for_pending()

    assert parse_sse(first) == [{"content": "a"}]
    assert provider.closed is True
    assert fake_store.contents("assistant") == []


@pytest.mark.asyncio
async def test_upstream_config_error_propagates_from_open(fake_store, unconfigured_provider):
    relay = _relay(fake_store, unconfigured_provider)
    with pytest.raises(UpstreamConfigError):
        await relay.open(_request("hi"), ClientMeta())
    # The question itself is still on record
    assert fake_store.contents("user") == ["hi"]


@pytest.mark.asyncio
async def test_trailing_assistant_message_is_not_stored_as_user(fake_store, fake_provider):
    relay = _relay(fake_store, fake_provider)
    turn = await relay.open(_request("question", "an earlier answer"), ClientMeta())
    await _collect(relay, turn)
    assert fake_store.contents("user") == []
