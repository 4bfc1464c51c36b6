import pytest
import requests

from fakes import make_context

AI_ENV_VARS = ("GEMINI_API_KEY", "OPENAI_API_KEY", "AI_ENABLED")


@pytest.fixture(autouse=True)
def _test_env(monkeypatch):
    for name in AI_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(autouse=True)
def _no_network(monkeypatch):
    orig_req = requests.sessions.Session.request

    def block_requests(self, method, url, *args, **kwargs):
        u = str(url)
        if u.startswith("http://testserver") or u.startswith("http://localhost"):
            return orig_req(self, method, url, *args, **kwargs)
        raise RuntimeError("External HTTP blocked")

    monkeypatch.setattr(requests.sessions.Session, "request", block_requests)
    yield


@pytest.fixture
def scenario_a():
    return make_context(category="Electricity", title="live wire exposed near school")


@pytest.fixture
def scenario_b():
    return make_context(
        category="Parks & Recreation",
        title="broken bench",
        description="needs repair",
        similar_issues_count=3,
    )


@pytest.fixture
def scenario_c():
    return make_context(category="Other")
