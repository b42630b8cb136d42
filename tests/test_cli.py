"""
Tests for the Pudgy Pet CLI.

The CLI's HTTP client is pointed at an ``httpx.MockTransport`` standing in
for the service.
"""

import json

import httpx
import pytest
from typer.testing import CliRunner

from pudgy_pet import cli

runner = CliRunner()

STATS = {
    "hunger": 80,
    "happiness": 80,
    "energy": 80,
    "mood": "ecstatic",
    "lastInteraction": 1_700_000_000_000,
}


@pytest.fixture
def requests(monkeypatch):
    """Route the CLI's AsyncClient through a mock transport."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.params.get("userId") == "ghost":
            return httpx.Response(500, json={"detail": "boom"})
        action = json.loads(request.content)["action"] if request.content else None
        return httpx.Response(
            200, json={"message": "Om nom nom!", "stats": STATS, "action": action}
        )

    real_client = httpx.AsyncClient

    def client_factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return real_client(*args, **kwargs)

    monkeypatch.setattr(cli.httpx, "AsyncClient", client_factory)
    return seen


class TestCLI:
    def test_interact(self, requests):
        result = runner.invoke(cli.app, ["interact", "feed", "--user", "alice"])

        assert result.exit_code == 0
        assert "Om nom nom!" in result.stdout
        assert "mood ecstatic" in result.stdout

        request = requests[0]
        assert request.method == "POST"
        assert request.url.path == "/api/pudgy-ai"
        assert json.loads(request.content) == {"action": "feed", "userId": "alice"}

    def test_interact_with_message_json(self, requests):
        result = runner.invoke(
            cli.app,
            ["interact", "chat", "--user", "alice", "-m", "hello", "--json"],
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout)["action"] == "chat"
        assert json.loads(requests[0].content)["message"] == "hello"

    def test_status(self, requests):
        result = runner.invoke(cli.app, ["status", "--user", "alice"])

        assert result.exit_code == 0
        assert requests[0].method == "GET"
        assert requests[0].url.params["userId"] == "alice"
        assert "hunger 80/100" in result.stdout

    def test_http_error(self, requests):
        result = runner.invoke(cli.app, ["status", "--user", "ghost"])

        assert result.exit_code == 1
        assert "Error: HTTP 500" in result.stdout
