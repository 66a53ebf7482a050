from __future__ import annotations

import json
import logging

import httpx
import pytest

from bountywatch.adapters.notifications import (
    DiscordWebhookSink,
    LogSink,
    TelegramSink,
    describe_event,
)
from bountywatch.adapters.notifications.render import truncate
from bountywatch.config.http_resilience import notification_resilience
from bountywatch.domain.errors import NotificationError
from bountywatch.domain.model import ChangeEvent, Platform, ProgramType, Reward, ScopeChange
from tests.helpers.http import make_client_factory, uncached_resilience
from tests.helpers.programs import make_program

WEBHOOK = "https://discord.test/api/webhooks/1/secret-token"


def _update_event() -> ChangeEvent:
    return ChangeEvent(
        program=make_program("Acme", platform=Platform.BUGCROWD, program_type=ProgramType.RDP),
        new_scope=["app.acme.com (website)"],
        changed_scope=[ScopeChange(old="api.acme.com (URL)", new="api.acme.com (API)")],
        new_type=ProgramType.RDP,
        reward=Reward("100", ""),
    )


def test_describe_event_lists_only_present_deltas() -> None:
    text = describe_event(_update_event())

    assert text.splitlines() == [
        "Program updated: Acme [bugcrowd]",
        "https://example.com/acme",
        "Type: rdp",
        "Reward: 100 - ?",
        "Scope added (1):",
        "- app.acme.com (website)",
        "Scope changed (1):",
        "- api.acme.com (URL) -> api.acme.com (API)",
    ]


def test_describe_new_program_lists_its_scope() -> None:
    program = make_program("Acme", scope={"t-0": "api.acme.com (URL)"})
    event = ChangeEvent(program=program, is_new=True, new_scope=program.scope_descriptions)

    text = describe_event(event)

    assert text.startswith("New program: Acme [hackerone]")
    assert "- api.acme.com (URL)" in text


def test_truncate_respects_limit() -> None:
    assert truncate("short", 10) == "short"
    assert len(truncate("x" * 50, 10)) == 10


def test_discord_sink_posts_plain_content() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(204)

    sink = DiscordWebhookSink(
        webhook_url=WEBHOOK,
        resilience=uncached_resilience("discord"),
        client_factory=make_client_factory(handler),
    )
    sink.notify(_update_event())

    [request] = captured
    assert str(request.url) == WEBHOOK
    payload = json.loads(request.content)
    assert payload["content"].startswith("Program updated: Acme")


def test_discord_failure_raises_without_leaking_the_webhook() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    sink = DiscordWebhookSink(
        webhook_url=WEBHOOK,
        resilience=uncached_resilience("discord"),
        client_factory=make_client_factory(handler),
    )

    with pytest.raises(NotificationError) as exc:
        sink.notify(_update_event())
    assert "secret-token" not in str(exc.value)


def test_telegram_sink_sends_message_to_chat() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"ok": True, "result": {}})

    sink = TelegramSink(
        bot_token="123:abc",
        chat_id="42",
        resilience=uncached_resilience("telegram"),
        client_factory=make_client_factory(handler),
    )
    sink.notify(_update_event())

    [request] = captured
    assert request.url.path == "/bot123:abc/sendMessage"
    payload = json.loads(request.content)
    assert payload["chat_id"] == "42"
    assert "Acme" in payload["text"]


def test_telegram_rejection_raises() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": False, "description": "chat not found"})

    sink = TelegramSink(
        bot_token="123:abc",
        chat_id="42",
        resilience=uncached_resilience("telegram"),
        client_factory=make_client_factory(handler),
    )

    with pytest.raises(NotificationError, match="chat not found"):
        sink.notify(_update_event())


def test_log_sink_writes_summary(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="bountywatch.adapters.notifications.log"):
        LogSink().notify(_update_event())

    assert "Program updated: Acme [bugcrowd]" in caplog.text


def test_discord_delivery_is_attempted_once_on_server_errors() -> None:
    attempts: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(503)

    sink = DiscordWebhookSink(
        webhook_url=WEBHOOK,
        resilience=notification_resilience("discord"),
        client_factory=make_client_factory(handler, with_retries=True),
    )

    with pytest.raises(NotificationError, match="HTTP 503"):
        sink.notify(_update_event())
    assert len(attempts) == 1


def test_telegram_delivery_is_attempted_once_on_timeouts() -> None:
    attempts: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ReadTimeout("slow", request=request)

    sink = TelegramSink(
        bot_token="123:abc",
        chat_id="42",
        resilience=notification_resilience("telegram"),
        client_factory=make_client_factory(handler, with_retries=True),
    )

    with pytest.raises(NotificationError, match="ReadTimeout"):
        sink.notify(_update_event())
    assert len(attempts) == 1


def test_announcements_are_posted_as_plain_text() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        if request.url.host == "api.telegram.org":
            return httpx.Response(200, json={"ok": True})
        return httpx.Response(204)

    factory = make_client_factory(handler)
    DiscordWebhookSink(
        webhook_url=WEBHOOK, resilience=uncached_resilience("discord"), client_factory=factory
    ).announce("bountywatch started")
    TelegramSink(
        bot_token="123:abc",
        chat_id="42",
        resilience=uncached_resilience("telegram"),
        client_factory=factory,
    ).announce("bountywatch started")

    discord, telegram = (json.loads(request.content) for request in captured)
    assert discord["content"] == "bountywatch started"
    assert telegram["text"] == "bountywatch started"
