import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.settings import settings
from domain import Feedback, Skill
from interview_ai import AnalysisError, QuotaExceeded
from storage.migrate import migrate


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    monkeypatch.setattr(settings, "PREFERENCES_PATH", os.path.join(td.name, "preferences.json"), raising=False)
    migrate(db_path)
    try:
        yield db_path
    finally:
        td.cleanup()


class FakeAI:  # Scripted stand-in for the AI gateway client
    def __init__(self) -> None:
        self.skills = [
            Skill(name=name, proficiency=level, justification="From resume")
            for name, level in [
                ("Python", 85),
                ("SQL", 70),
                ("FastAPI", 75),
                ("Testing", 65),
                ("Docker", 60),
                ("Communication", 80),
            ]
        ]
        self.scores = [80, 70, 90, 60, 100]
        self.confidence = 70
        self.summary = "Strong technical depth with room to grow in system design."
        self.fail = set()
        self.quota = False
        self.calls = []
        self.on_call = None

    def _record(self, op: str) -> None:
        self.calls.append(op)
        if self.on_call is not None:
            self.on_call(op)
        if op in self.fail:
            raise AnalysisError(f"{op} failed")

    def extract_skills(self, resume_text):
        self._record("extract_skills")
        return list(self.skills)

    def next_question(self, job_role, skills, prior_context):
        self._record("next_question")
        return f"Question {self.calls.count('next_question')} for {job_role}?"

    def evaluate_answer(self, question, answer):
        self._record("evaluate_answer")
        index = self.calls.count("evaluate_answer") - 1
        score = self.scores[index % len(self.scores)]
        return Feedback(text="Clear and relevant.", score=score, confidence=self.confidence)

    def summarize(self, transcript):
        self._record("summarize")
        return self.summary

    def speech_audio(self, text):
        self.calls.append("speech_audio")
        if self.quota:
            raise QuotaExceeded("quota")
        return b"\x00\x00\xff\x7f" * 8


@pytest.fixture
def fake_ai():
    return FakeAI()
