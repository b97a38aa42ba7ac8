from __future__ import annotations  # Interview report package exports

from .pdf import ReportPDF, generate_interview_report_pdf, pair_exchanges

__all__ = ["ReportPDF", "generate_interview_report_pdf", "pair_exchanges"]
