"""
Web API Endpoint Tests
======================
Integration tests for the case file page and its streaming API.

Usage:
    pytest tests/test_endpoints.py -v
"""
import httpx
import pytest
from fastapi.testclient import TestClient

from archive_client import ArchiveClient
from conftest import FakeCompletions, make_archive, parse_events
from errors import ARCHIVE_ERROR_MESSAGE
from main import SESSION_COOKIE, create_app
from schemas import CATALYST_OPTIONS, DEFAULT_LOCATION, GenerationStatus
from sections import render_story
from settings import Settings


def _client(archive):
    return TestClient(create_app(Settings(), archive=archive))


@pytest.fixture
def client(completions):
    return _client(make_archive(completions))


# ============================================================================
# PAGE / HEALTH
# ============================================================================

class TestPage:
    """Tests for GET / and GET /health"""

    def test_index_serves_page_and_session_cookie(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "The Archive of Collapse" in response.text
        assert SESSION_COOKIE in response.cookies

    def test_health(self, client):
        data = client.get("/health").json()
        assert data["status"] == "ok"
        assert "version" in data

    def test_options(self, client):
        data = client.get("/api/options").json()
        assert data["location"] == DEFAULT_LOCATION
        assert data["languages"] == ["English", "Indonesian"]
        assert data["catalysts"] == CATALYST_OPTIONS
        assert data["section_marker"] == "|||SECTION|||"
        assert data["section_titles"][0] == "I. THE LOCATION"
        assert len(data["section_titles"]) == 8


# ============================================================================
# FORM STATE
# ============================================================================

class TestCaseForm:
    """Tests for GET/PATCH /api/case and POST /api/case/randomize"""

    def test_initial_case_shows_placeholder(self, client):
        data = client.get("/api/case").json()
        assert data["parameters"]["location"] == DEFAULT_LOCATION
        assert data["parameters"]["era"] == ""
        assert data["story"]["status"] == "idle"
        assert data["story"]["sections"] == []
        assert data["story"]["placeholder"] == "Waiting for case parameters..."

    def test_patch_changes_one_field(self, client):
        before = client.get("/api/case").json()["parameters"]
        after = client.patch("/api/case", json={"field": "era", "value": "1880s"}).json()
        assert after["era"] == "1880s"
        for key in ("location", "language", "catalyst"):
            assert after[key] == before[key]
        assert client.get("/api/case").json()["parameters"]["era"] == "1880s"

    def test_patch_rejects_bad_input(self, client):
        assert client.patch("/api/case", json={"field": "language", "value": "Latin"}).status_code == 422
        assert client.patch("/api/case", json={"field": "weather", "value": "fog"}).status_code == 422

    def test_randomize_keeps_location(self, client):
        for _ in range(10):
            data = client.post("/api/case/randomize").json()
            assert data["catalyst"] in CATALYST_OPTIONS
            assert data["location"] == DEFAULT_LOCATION

    def test_sessions_are_isolated(self, completions):
        app = create_app(Settings(), archive=make_archive(completions))
        first, second = TestClient(app), TestClient(app)
        first.patch("/api/case", json={"field": "era", "value": "1920s"})
        assert second.get("/api/case").json()["parameters"]["era"] == ""


# ============================================================================
# GENERATION
# ============================================================================

class TestGenerate:
    """Tests for POST /api/case/generate"""

    def test_incomplete_case_is_rejected(self, client, completions):
        response = client.post("/api/case/generate")
        assert response.status_code == 422
        assert response.json()["detail"]["missing"] == ["era"]
        assert completions.calls == []

    def test_streams_fragments_then_sectioned_story(self, client):
        client.patch("/api/case", json={"field": "era", "value": "1880s"})
        response = client.post("/api/case/generate")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")

        events = parse_events(response.text)
        assert [e["type"] for e in events] == ["fragment", "fragment", "done"]
        assert [e["text"] for e in events[:2]] == ["Intro part A", "|||SECTION|||Intro part B"]
        assert all(e["status"] == "streaming" for e in events[:2])

        buffer = "".join(e["text"] for e in events[:2])
        streaming = render_story(buffer, GenerationStatus.STREAMING)
        assert [(s.title, s.text, s.cursor) for s in streaming.sections] == [
            ("I. THE LOCATION", "Intro part A", False),
            ("II. THE ORIGIN", "Intro part B", True),
        ]

        done = events[-1]["story"]
        assert done["status"] == "idle"
        assert [s["title"] for s in done["sections"]] == ["I. THE LOCATION", "II. THE ORIGIN"]
        assert not any(s["cursor"] for s in done["sections"])

        story = client.get("/api/case").json()["story"]
        assert story["status"] == GenerationStatus.IDLE.value
        assert len(story["sections"]) == 2

    def test_streamed_bytes_grow_linearly_with_story(self):
        fragments = ["fifteen chars. "] * 2000
        client = _client(make_archive(FakeCompletions(fragments)))
        client.patch("/api/case", json={"field": "era", "value": "1880s"})

        body = client.post("/api/case/generate").text
        story_length = sum(len(f) for f in fragments)
        assert story_length == 30000
        assert len(body.encode("utf-8")) < 10 * story_length

    def test_reentry_is_refused_while_streaming(self, client):
        client.patch("/api/case", json={"field": "era", "value": "1880s"})
        client.app.state.registry.get(client.cookies[SESSION_COOKIE]).begin()

        response = client.post("/api/case/generate")
        assert response.status_code == 409

    def test_mid_stream_failure_replaces_story_with_error(self):
        completions = FakeCompletions(
            ["Intro part A", "|||SECTION|||Intro part B"],
            fail_after=(2, httpx.ReadError("connection reset")),
        )
        client = _client(make_archive(completions))
        client.patch("/api/case", json={"field": "era", "value": "1880s"})

        events = parse_events(client.post("/api/case/generate").text)
        assert [e["type"] for e in events] == ["fragment", "fragment", "error"]

        story = events[-1]["story"]
        assert story["status"] == "error"
        assert [s["text"] for s in story["sections"]] == [ARCHIVE_ERROR_MESSAGE]

    def test_missing_credential_surfaces_as_error_event(self):
        client = _client(ArchiveClient(api_key=""))
        client.patch("/api/case", json={"field": "era", "value": "1880s"})

        events = parse_events(client.post("/api/case/generate").text)
        assert [e["type"] for e in events] == ["error"]
        assert events[0]["story"]["sections"][0]["text"] == ARCHIVE_ERROR_MESSAGE

    def test_form_usable_after_error(self):
        completions = FakeCompletions(fail_on_connect=httpx.ConnectError("refused"))
        client = _client(make_archive(completions))
        client.patch("/api/case", json={"field": "era", "value": "1880s"})
        client.post("/api/case/generate")

        completions.fail_on_connect = None
        completions.fragments = ["Recovered"]
        events = parse_events(client.post("/api/case/generate").text)
        assert events[-1]["type"] == "done"
        assert events[-1]["story"]["sections"][0]["text"] == "Recovered"

    def test_unexpected_failure_still_ends_in_error(self):
        completions = FakeCompletions(["Intro part A"], fail_after=(1, ValueError("bad chunk payload")))
        client = _client(make_archive(completions))
        client.patch("/api/case", json={"field": "era", "value": "1880s"})

        events = parse_events(client.post("/api/case/generate").text)
        assert [e["type"] for e in events] == ["fragment", "error"]
        assert events[-1]["story"]["status"] == "error"

        story = client.get("/api/case").json()["story"]
        assert story["status"] == "error"
        assert [s["text"] for s in story["sections"]] == [ARCHIVE_ERROR_MESSAGE]


# ============================================================================
# SESSIONS
# ============================================================================

class TestSessions:
    """Case files live for one page load and the registry stays bounded"""

    def test_reload_discards_previous_case(self, client):
        client.get("/")
        first = client.cookies[SESSION_COOKIE]
        client.patch("/api/case", json={"field": "era", "value": "1880s"})
        client.post("/api/case/generate")

        client.get("/")
        assert client.cookies[SESSION_COOKIE] != first
        assert first not in client.app.state.registry

        data = client.get("/api/case").json()
        assert data["parameters"]["era"] == ""
        assert data["story"]["sections"] == []
        assert data["story"]["placeholder"] == "Waiting for case parameters..."

    def test_unknown_cookie_gets_a_fresh_case(self, client):
        response = client.get("/api/case", headers={"Cookie": f"{SESSION_COOKIE}=made-up-session"})
        assert response.status_code == 200
        assert "made-up-session" not in client.app.state.registry
        assert response.cookies[SESSION_COOKIE] != "made-up-session"
        assert response.cookies[SESSION_COOKIE] in client.app.state.registry

    def test_cookieless_requests_do_not_grow_registry_without_bound(self, completions):
        settings = Settings()
        settings.MAX_SESSIONS = 20
        app = create_app(settings, archive=make_archive(completions))
        for _ in range(100):
            TestClient(app).get("/api/case")
        assert len(app.state.registry) == 20
