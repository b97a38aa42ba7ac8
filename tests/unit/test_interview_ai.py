from __future__ import annotations

import io
import wave
from pathlib import Path

import pytest

import interview_ai.evaluation as evaluation
import interview_ai.questions as questions
import interview_ai.resume_analysis as resume_analysis
import interview_ai.speech as speech_module
import interview_ai.summary as summary
from config import LlmRoute
from domain import Message, Skill
from interview_ai import AnalysisError, InterviewAI, QuotaExceeded, to_wav
from interview_ai.client import TARGETS
from llm_gateway import LlmGatewayError, LlmQuotaError

ROOT = Path(__file__).resolve().parents[2]


def _route() -> LlmRoute:
    return LlmRoute(
        name="ai-test",
        base_url="http://example.com",
        endpoint="/llm",
        model="test",
        timeout_s=1.0,
    )


def test_extract_skills_caps_and_clamps(monkeypatch) -> None:
    captured = {}

    def fake_call(task, schema, *, cfg, **_):
        captured["task"] = task
        entries = [{"skill": f"Skill {i}", "level": 50 + i * 10, "justification": " ok "} for i in range(9)]
        entries[0]["level"] = -5
        return schema.model_validate({"skills": entries})

    monkeypatch.setattr(resume_analysis, "call", fake_call)
    skills = resume_analysis.extract_skills("Built APIs in Python", route=_route())
    assert len(skills) == 7
    assert skills[0].proficiency == 0
    assert skills[6].proficiency == 100
    assert skills[1].justification == "ok"
    assert captured["task"].endswith("Resume:\nBuilt APIs in Python")
    assert "top 5-7 skills" in captured["task"]


def test_extract_skills_empty_result_is_an_error(monkeypatch) -> None:
    monkeypatch.setattr(resume_analysis, "call", lambda task, schema, **_: schema(skills=[]))
    with pytest.raises(AnalysisError):
        resume_analysis.extract_skills("Resume", route=_route())


def test_extract_skills_gateway_failure_is_an_error(monkeypatch) -> None:
    def boom(*_args, **_kwargs):
        raise LlmGatewayError("down")

    monkeypatch.setattr(resume_analysis, "call", boom)
    with pytest.raises(AnalysisError):
        resume_analysis.extract_skills("Resume", route=_route())


def test_next_question_prompt_includes_role_skills_and_context(monkeypatch) -> None:
    captured = {}

    def fake_call(task, schema, *, cfg, system=None, **_):
        captured["task"] = task
        captured["system"] = system
        return schema(question="  Describe a tricky bug you fixed.  ")

    monkeypatch.setattr(questions, "call", fake_call)
    skills = [Skill(name="Python", proficiency=80)]
    text = questions.next_question("Backend Engineer", skills, "interviewer: Hello", route=_route())
    assert text == "Describe a tricky bug you fixed."
    assert '"Backend Engineer"' in captured["task"]
    assert "Python (Proficiency: 80/100)" in captured["task"]
    assert captured["task"].endswith("Context:\ninterviewer: Hello")
    assert captured["system"] == questions.SYSTEM_PROMPT


def test_evaluate_answer_bounds_scores(monkeypatch) -> None:
    def fake_call(task, schema, **_):
        return schema(feedback="Good structure and examples.", score=120.4, confidence=-3)

    monkeypatch.setattr(evaluation, "call", fake_call)
    feedback = evaluation.evaluate_answer("Why Python?", "Because it is readable.", route=_route())
    assert feedback.score == 100
    assert feedback.confidence == 0
    assert feedback.text == "Good structure and examples."


def test_evaluate_answer_prompt_keeps_multiline_answers() -> None:
    task = evaluation._build_task("Why?", "First line\nSecond line")
    assert task.startswith('A candidate was asked the following interview question: "Why?".')
    assert "First line\nSecond line" in task
    assert "max 20 words" in task


def test_summarize_formats_transcript(monkeypatch) -> None:
    captured = {}

    def fake_call(task, schema, **_):
        captured["task"] = task
        return schema(summary=" Solid answers overall. ")

    monkeypatch.setattr(summary, "call", fake_call)
    transcript = [Message(sender="interviewer", text="Hi"), Message(sender="candidate", text="Hello")]
    assert summary.summarize(transcript, route=_route()) == "Solid answers overall."
    assert captured["task"].endswith("Transcript:\ninterviewer: Hi\ncandidate: Hello")


def test_speech_audio_sanitizes_and_maps_errors(monkeypatch) -> None:
    sent = []

    def fake_speech(text, *, cfg):
        sent.append(text)
        return b"\x00\x01"

    monkeypatch.setattr(speech_module, "speech", fake_speech)
    assert speech_module.speech_audio("**Welcome** to _the_ `interview`", route=_route()) == b"\x00\x01"
    assert sent == ["Welcome to the interview"]

    def quota(text, *, cfg):
        raise LlmQuotaError("429")

    monkeypatch.setattr(speech_module, "speech", quota)
    with pytest.raises(QuotaExceeded):
        speech_module.speech_audio("Hello", route=_route())

    def failure(text, *, cfg):
        raise LlmGatewayError("500")

    monkeypatch.setattr(speech_module, "speech", failure)
    with pytest.raises(AnalysisError):
        speech_module.speech_audio("Hello", route=_route())


def test_to_wav_wraps_pcm() -> None:
    payload = to_wav(b"\x00\x00\x10\x00\x20", sample_rate=24000)
    with wave.open(io.BytesIO(payload), "rb") as handle:
        assert handle.getnchannels() == 1
        assert handle.getsampwidth() == 2
        assert handle.getframerate() == 24000
        assert handle.getnframes() == 2


def test_client_resolves_every_operation_from_config() -> None:
    ai = InterviewAI.from_config(ROOT / "app_config.json")
    assert set(ai._routes) == set(TARGETS)
    assert ai._routes["interview_ai.speech"].voice == "Kore"
    assert ai._routes["interview_ai.next_question"].enforce_json is False


def test_client_requires_all_routes() -> None:
    with pytest.raises(KeyError):
        InterviewAI({"interview_ai.extract_skills": _route()})
