import json

import httpx
import pytest
from click.testing import CliRunner

from ai_artifacts.auth import StaticIdentity
from ai_artifacts.cli import main as cli_main
from ai_artifacts.client import AsyncArtifacts
from ai_artifacts.config import load_config
from ai_artifacts.preferences import PreferenceStore

from conftest import COUNTER_ARTIFACT


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("ARTIFACTS_CONFIG_DIR", str(tmp_path))
    monkeypatch.delenv("ARTIFACTS_BASE_URL", raising=False)
    return CliRunner()


@pytest.fixture
def fake_client(monkeypatch, backend, analytics):
    identity = StaticIdentity(user_id="user-1", api_key="e2b-key")

    def factory(base_url=None, stream_format="text"):
        return AsyncArtifacts(
            base_url="http://artifacts.test",
            identity=identity,
            preferences=PreferenceStore(),
            analytics=analytics,
            stream_format=stream_format,
            transport=httpx.MockTransport(backend.handler),
        )

    monkeypatch.setattr(cli_main, "_get_client", factory)
    return identity


def test_templates_json(runner):
    result = runner.invoke(cli_main.main, ["templates", "--json"])
    assert result.exit_code == 0
    assert "nextjs-developer" in json.loads(result.output)


def test_templates_table(runner):
    result = runner.invoke(cli_main.main, ["templates"])
    assert result.exit_code == 0
    assert "streamlit-developer" in result.output


def test_models_use_persists_selection(runner, tmp_path):
    result = runner.invoke(cli_main.main, ["models", "use", "gpt-4o", "--temperature", "0.3"])
    assert result.exit_code == 0, result.output
    prefs = json.loads((tmp_path / "preferences.json").read_text())
    assert prefs["languageModel"] == {"model": "gpt-4o", "temperature": 0.3}

    listed = runner.invoke(cli_main.main, ["models", "list", "--json"])
    assert any(m["id"] == "gpt-4o" for m in json.loads(listed.output))


def test_models_use_rejects_unknown_model(runner):
    result = runner.invoke(cli_main.main, ["models", "use", "gpt-17"])
    assert result.exit_code == 2


def test_auth_login_status_logout(runner):
    result = runner.invoke(cli_main.main, ["auth", "login", "--user-id", "user-1", "--api-key", "k",
                                           "--base-url", "http://localhost:3000"])
    assert result.exit_code == 0, result.output
    cfg = load_config()
    assert cfg["user_id"] == "user-1"
    assert cfg["base_url"] == "http://localhost:3000"

    status = runner.invoke(cli_main.main, ["auth", "status"])
    assert "Signed in" in status.output

    runner.invoke(cli_main.main, ["auth", "logout"])
    assert "user_id" not in load_config()
    assert "Not signed in" in runner.invoke(cli_main.main, ["auth", "status"]).output


def test_generate_json(runner, fake_client, backend):
    backend.queue_artifact()
    result = runner.invoke(cli_main.main, ["generate", "build a counter app", "--json"])

    assert result.exit_code == 0, result.output
    view = json.loads(result.output)
    assert view["state"] == "done"
    assert view["active_tab"] == "artifact"
    assert view["result"] == {"stdout": "", "exitCode": 0}
    assert view["artifact"]["title"] == COUNTER_ARTIFACT["title"]


def test_generate_without_sign_in_exits(runner, fake_client, backend):
    fake_client.sign_out()
    result = runner.invoke(cli_main.main, ["generate", "build a counter app"])
    assert result.exit_code == 1
    assert "Not signed in" in result.output
    assert backend.chat_bodies == []


def test_generate_failure_exits_nonzero(runner, fake_client, backend):
    backend.queue_artifact({"title": "Counter"})
    result = runner.invoke(cli_main.main, ["generate", "build a counter app"])
    assert result.exit_code == 1
    assert "schema_mismatch" in result.output


def test_repo_opens_project_page(runner, fake_client, analytics, monkeypatch):
    launched = []
    monkeypatch.setattr(cli_main.click, "launch", launched.append)

    result = runner.invoke(cli_main.main, ["repo"])

    assert result.exit_code == 0, result.output
    assert launched == [cli_main.REPO_URL]
    assert analytics.events == [("external_link_click", {"url": cli_main.REPO_URL})]


def test_chat_generates_until_quit(runner, fake_client, backend):
    backend.queue_artifact()
    result = runner.invoke(cli_main.main, ["chat"], input="build a counter app\n/quit\n")

    assert result.exit_code == 0, result.output
    assert backend.chat_bodies[0]["messages"] == [{"role": "user", "content": "build a counter app"}]
    assert len(backend.sandbox_bodies) == 1
