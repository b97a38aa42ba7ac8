import pytest
from fastapi.testclient import TestClient

from api_server import create_app
from app_context.context import AppContext
from auth import AuthService
from config.settings import settings


class CapturingMailer:
    def __init__(self) -> None:
        self.sent = []

    def send(self, to_addr, subject, body):
        self.sent.append((to_addr, subject, body))


@pytest.fixture
def mailer():
    return CapturingMailer()


@pytest.fixture
def client(fake_ai, mailer):
    def factory() -> AppContext:
        auth = AuthService(
            secret="test-secret-key-for-signing-tokens-0001",
            token_ttl_minutes=30,
            reset_ttl_minutes=15,
            reset_redirect_url="http://app.local/#/reset-password",
            mailer=mailer,
        )
        return AppContext(settings=settings, ai=fake_ai, auth=auth)

    with TestClient(create_app(context_factory=factory)) as test_client:
        yield test_client


RESUME = "Backend engineer, six years of Python, SQL and FastAPI services."


@pytest.fixture
def signup(client):
    def _sign_up(email, role="candidate"):
        resp = client.post("/api/auth/sign-up", json={"email": email, "password": "secret1", "role": role})
        assert resp.status_code == 201
        body = resp.json()
        return {"Authorization": f"Bearer {body['access_token']}"}, body["user"]

    return _sign_up


@pytest.fixture
def new_session(client):
    def _new_session(headers, job_role="Backend Engineer", *, start=False):
        session_id = client.post("/api/interview-sessions", headers=headers).json()["sessionId"]
        if start:
            client.post(
                f"/api/interview-sessions/{session_id}/setup",
                json={"resumeText": RESUME, "jobRole": job_role},
                headers=headers,
            )
            client.post(f"/api/interview-sessions/{session_id}/start", headers=headers)
        return session_id

    return _new_session


@pytest.fixture
def complete_interview(client, new_session):
    def _complete(headers):
        session_id = new_session(headers, start=True)
        body = None
        for n in range(5):
            resp = client.post(
                f"/api/interview-sessions/{session_id}/answer",
                json={"text": f"Answer number {n + 1} with a concrete example."},
                headers=headers,
            )
            assert resp.status_code == 200
            body = resp.json()
        return body

    return _complete
