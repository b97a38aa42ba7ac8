RESUME = "Backend engineer, six years of Python, SQL and FastAPI services."


def test_requests_without_token_are_rejected(client):
    assert client.post("/api/interview-sessions").status_code == 401
    assert client.get("/api/context", headers={"Authorization": "Bearer not-a-token"}).status_code == 401


def test_setup_requires_resume_and_role(client, signup, new_session):
    headers, _ = signup("ada@example.com")
    session_id = new_session(headers)
    resp = client.post(
        f"/api/interview-sessions/{session_id}/setup",
        json={"resumeText": "   ", "jobRole": "Backend Engineer"},
        headers=headers,
    )
    assert resp.status_code == 422
    view = client.get(f"/api/interview-sessions/{session_id}", headers=headers).json()
    assert view["stage"] == "setup"
    assert view["error"] == "Please provide both a resume and a job role."


def test_empty_answer_and_out_of_order_calls(client, signup, new_session):
    headers, _ = signup("ada@example.com")
    session_id = new_session(headers)
    assert client.post(f"/api/interview-sessions/{session_id}/start", headers=headers).status_code == 409
    assert client.post(f"/api/interview-sessions/{session_id}/answer", json={"text": "hi"}, headers=headers).status_code == 409

    client.post(
        f"/api/interview-sessions/{session_id}/setup",
        json={"resumeText": RESUME, "jobRole": "Backend Engineer"},
        headers=headers,
    )
    client.post(f"/api/interview-sessions/{session_id}/start", headers=headers)
    resp = client.post(f"/api/interview-sessions/{session_id}/answer", json={"text": "  "}, headers=headers)
    assert resp.status_code == 422


def test_sessions_are_private_and_discardable(client, signup, new_session):
    owner, _ = signup("ada@example.com")
    other, _ = signup("bob@example.com")
    session_id = new_session(owner)
    assert client.get(f"/api/interview-sessions/{session_id}", headers=other).status_code == 404

    assert client.delete(f"/api/interview-sessions/{session_id}", headers=owner).status_code == 204
    assert client.get(f"/api/interview-sessions/{session_id}", headers=owner).status_code == 404


def test_sign_out_discards_live_sessions(client, signup, new_session):
    headers, _ = signup("ada@example.com")
    session_id = new_session(headers)
    assert client.post("/api/auth/sign-out", headers=headers).status_code == 204
    assert client.get(f"/api/interview-sessions/{session_id}", headers=headers).status_code == 401

    relogin = client.post("/api/auth/sign-in", json={"email": "ada@example.com", "password": "secret1"})
    fresh = {"Authorization": f"Bearer {relogin.json()['access_token']}"}
    assert client.get(f"/api/interview-sessions/{session_id}", headers=fresh).status_code == 404


def test_report_access_is_owner_or_hr(client, signup, complete_interview):
    owner, _ = signup("ada@example.com")
    other, _ = signup("bob@example.com")
    hr, _ = signup("hr@example.com", role="hr_admin")
    interview_id = complete_interview(owner)["interviewId"]

    denied = client.get(f"/api/reports/{interview_id}", headers=other)
    assert denied.status_code == 403
    detail = denied.json()["detail"]
    assert detail["redirect_to"] == "/"
    assert detail["redirect_after_s"] == 3
    assert detail["message"] == "You do not have permission to view this report."
    assert client.get(f"/api/reports/{interview_id}/pdf", headers=other).status_code == 403

    assert client.get(f"/api/reports/{interview_id}", headers=hr).status_code == 200
    assert client.get("/api/reports/missing-id", headers=hr).status_code == 404


def test_hr_dashboard_is_hr_only(client, signup, complete_interview):
    candidate, _ = signup("ada@example.com")
    hr, _ = signup("hr@example.com", role="hr_admin")
    complete_interview(candidate)

    denied = client.get("/api/dashboard", headers=candidate)
    assert denied.status_code == 403
    assert denied.json()["detail"]["redirect_to"] == "/"

    resp = client.get("/api/dashboard", headers=hr)
    assert resp.status_code == 200
    body = resp.json()
    assert body["candidatesScreened"] == 1
    assert body["averageScore"] == 80
    assert body["recent"][0]["candidateName"] == "ada"
    assert body["skillAverages"][0] == {"skill": "Python", "peerAverage": 85}


def test_speech_returns_wav_until_quota_is_exhausted(client, fake_ai, signup, new_session):
    headers, _ = signup("ada@example.com")
    session_id = new_session(headers)
    resp = client.post("/api/speech", json={"sessionId": session_id, "text": "Hello"}, headers=headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "audio/wav"
    assert resp.content[:4] == b"RIFF"

    fake_ai.quota = True
    assert client.post("/api/speech", json={"sessionId": session_id, "text": "Hi"}, headers=headers).status_code == 204
    fake_ai.quota = False
    assert client.post("/api/speech", json={"sessionId": session_id, "text": "Hi"}, headers=headers).status_code == 204
    assert fake_ai.calls.count("speech_audio") == 2
