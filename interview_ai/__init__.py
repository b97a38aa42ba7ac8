from __future__ import annotations  # Re-export interview_ai public API

from .client import InterviewAI
from .errors import AnalysisError, InterviewAIError, QuotaExceeded
from .evaluation import evaluate_answer
from .questions import next_question
from .resume_analysis import extract_skills
from .speech import speech_audio, to_wav
from .summary import format_transcript, summarize

__all__ = [
    "AnalysisError",
    "InterviewAI",
    "InterviewAIError",
    "QuotaExceeded",
    "evaluate_answer",
    "extract_skills",
    "format_transcript",
    "next_question",
    "speech_audio",
    "summarize",
    "to_wav",
]
