from __future__ import annotations  # Typed failures raised by the AI client


class InterviewAIError(RuntimeError):  # Base error for AI gateway operations
    pass


class AnalysisError(InterviewAIError):  # Extraction, generation, evaluation or summary failed
    pass


class QuotaExceeded(InterviewAIError):  # Speech service reported a rate limit
    pass


__all__ = ["AnalysisError", "InterviewAIError", "QuotaExceeded"]
