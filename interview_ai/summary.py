from __future__ import annotations  # Transcript summarization module

from typing import Sequence

from pydantic import BaseModel, Field

from config import LlmRoute
from domain import Message
from llm_gateway import LlmGatewayError, call

from .errors import AnalysisError

SYSTEM_PROMPT = (
    "You are an expert HR analyst. Your summary should be professional, balanced, "
    "and directly based on the provided transcript."
)


class PerformanceSummary(BaseModel):  # Short performance summary
    summary: str = Field(min_length=1)

    @classmethod
    def from_raw_content(cls, content: str) -> "PerformanceSummary":
        return cls(summary=content.strip())


def summarize(transcript: Sequence[Message], *, route: LlmRoute) -> str:  # Summarize a transcript via LLM
    task = (
        "Based on the following interview transcript, please generate a concise summary (2-3 sentences) "
        "of the candidate's performance, highlighting strengths and areas for improvement.\n\n"
        f"Transcript:\n{format_transcript(transcript)}"
    )
    try:
        result = call(task, PerformanceSummary, cfg=route, system=SYSTEM_PROMPT)
    except LlmGatewayError as exc:
        raise AnalysisError("Could not summarize the interview") from exc
    return result.summary.strip()


def format_transcript(transcript: Sequence[Message]) -> str:
    return "\n".join(f"{message.sender}: {message.text}" for message in transcript)
