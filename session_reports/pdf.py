from __future__ import annotations  # PDF export of a persisted interview

from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from domain import Feedback, Interview, Message
from services.dashboards import score_band

DEJAVU_SANS = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"  # System font
DEJAVU_SANS_BOLD = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"  # System font

ACCENT = (45, 115, 245)
TEXT = (34, 34, 34)
MUTED = (100, 100, 100)
RULE = (230, 230, 230)
CARD_BG = (246, 248, 252)
ROW_FILL = (247, 250, 255)
BAND_COLORS = {"strong": (34, 139, 84), "moderate": (214, 140, 20), "low": (200, 60, 60)}

Exchange = Tuple[str, str, Optional[Feedback]]


class ReportPDF(FPDF):  # Report page chrome and font handling
    def __init__(self, title: str, subtitle: str = "") -> None:
        super().__init__(orientation="P", unit="mm", format="A4")
        self.title_text = title
        self.subtitle_text = subtitle
        self.font_regular = "Helvetica"
        self.font_bold = "Helvetica"
        self.supports_unicode = False
        self.set_margins(15, 20, 15)
        self.set_auto_page_break(auto=True, margin=18)
        self.alias_nb_pages()

    def use_dejavu(self) -> None:  # Unicode font when the host has DejaVu installed
        try:
            self.add_font("DejaVu", "", DEJAVU_SANS)
            self.add_font("DejaVu", "B", DEJAVU_SANS_BOLD)
        except FileNotFoundError:
            return
        self.font_regular = self.font_bold = "DejaVu"
        self.supports_unicode = True

    @property
    def bullet(self) -> str:
        return "•" if self.supports_unicode else "-"

    @property
    def usable_width(self) -> float:
        return self.w - self.l_margin - self.r_margin

    def normalize_text(self, text: str) -> str:
        # Core fonts only cover latin-1
        if not self.supports_unicode:
            text = text.replace("•", "-").encode("latin-1", "ignore").decode("latin-1")
        return super().normalize_text(text)

    def header(self) -> None:
        if self.page_no() == 1:
            self.set_fill_color(*ACCENT)
            self.rect(0, 0, self.w, 28, style="F")
            self.set_text_color(255, 255, 255)
            self.set_xy(self.l_margin, 7)
            self.set_font(self.font_bold, "B", 16)
            self.cell(self.usable_width, 8, self.title_text, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            self.set_font(self.font_regular, "", 10)
            self.cell(self.usable_width, 6, self.subtitle_text, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            self.set_y(34)
        else:
            self.set_xy(self.l_margin, 8)
            self.set_text_color(*MUTED)
            self.set_font(self.font_regular, "", 9)
            self.cell(self.usable_width, 5, f"{self.title_text} ({self.subtitle_text})", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            self.set_y(18)
        self.set_text_color(*TEXT)

    def footer(self) -> None:
        self.set_y(-13)
        self.set_draw_color(*RULE)
        self.line(self.l_margin, self.get_y(), self.w - self.r_margin, self.get_y())
        self.set_text_color(*MUTED)
        self.set_font(self.font_regular, "", 8)
        self.cell(self.usable_width / 2, 8, "FairHire AI interview report")
        self.cell(self.usable_width / 2, 8, f"Page {self.page_no()}/{{nb}}", align="R")


def pair_exchanges(transcript: Sequence[Message]) -> List[Exchange]:
    """Pair each candidate answer with the interviewer line that preceded it."""

    exchanges: List[Exchange] = []
    question = ""
    for message in transcript:
        if message.sender == "interviewer":
            question = message.text
        else:
            exchanges.append((question, message.text, message.feedback))
    return exchanges


def _completed_at(value: str) -> str:
    try:
        stamp = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value or "-"
    return stamp.strftime("%d %b %Y, %H:%M UTC")


def _heading(pdf: ReportPDF, title: str) -> None:
    pdf.ln(3)
    pdf.set_font(pdf.font_bold, "B", 13)
    pdf.set_text_color(*TEXT)
    pdf.cell(pdf.usable_width, 8, title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_draw_color(*ACCENT)
    pdf.set_line_width(0.4)
    pdf.line(pdf.l_margin, pdf.get_y(), pdf.l_margin + 30, pdf.get_y())
    pdf.set_line_width(0.2)
    pdf.ln(3)


def _paragraph(pdf: ReportPDF, text: str, *, size: int = 10, color: Tuple[int, int, int] = TEXT) -> None:
    pdf.set_font(pdf.font_regular, "", size)
    pdf.set_text_color(*color)
    pdf.multi_cell(pdf.usable_width, 5.5, text, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_text_color(*TEXT)


def _overview(pdf: ReportPDF, interview: Interview) -> None:
    facts = [
        ("Candidate", interview.candidate_name),
        ("Role", interview.job_role),
        ("Completed", _completed_at(interview.created_at)),
        ("Questions answered", str(len(pair_exchanges(interview.transcript)))),
        ("Badges", ", ".join(interview.badges) or "None"),
    ]
    label_width = 42
    for label, value in facts:
        pdf.set_font(pdf.font_regular, "", 10)
        pdf.set_text_color(*MUTED)
        pdf.cell(label_width, 6, label)
        pdf.set_font(pdf.font_bold, "B", 10)
        pdf.set_text_color(*TEXT)
        pdf.cell(pdf.usable_width - label_width, 6, value, new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    score = interview.overall_score
    pdf.ln(3)
    top = pdf.get_y()
    pdf.set_fill_color(*CARD_BG)
    pdf.rect(pdf.l_margin, top, pdf.usable_width, 18, style="F")
    pdf.set_xy(pdf.l_margin + 5, top + 5)
    pdf.set_font(pdf.font_regular, "", 10)
    pdf.set_text_color(*MUTED)
    pdf.cell(60, 8, "Overall score")
    pdf.set_font(pdf.font_bold, "B", 16)
    pdf.set_text_color(*BAND_COLORS[score_band(score)])
    pdf.cell(pdf.usable_width - 70, 8, f"{score}% ({score_band(score)})", align="R")
    pdf.set_y(top + 22)
    pdf.set_text_color(*TEXT)


def _benchmark_table(pdf: ReportPDF, interview: Interview) -> None:
    if not interview.peer_benchmark:
        _paragraph(pdf, "No skills were recorded for this interview.", color=MUTED)
        return
    widths = [pdf.usable_width * share for share in (0.4, 0.2, 0.2, 0.2)]
    pdf.set_font(pdf.font_bold, "B", 10)
    pdf.set_fill_color(*ACCENT)
    pdf.set_text_color(255, 255, 255)
    for title, width in zip(("Skill", "Candidate", "Peer average", "Difference"), widths):
        pdf.cell(width, 8, title, fill=True)
    pdf.ln(8)
    pdf.set_font(pdf.font_regular, "", 10)
    pdf.set_text_color(*TEXT)
    pdf.set_fill_color(*ROW_FILL)
    for index, row in enumerate(interview.peer_benchmark):
        shaded = index % 2 == 1
        cells = (row.skill, f"{row.level}%", f"{row.peer_average}%", f"{row.level - row.peer_average:+d}")
        for value, width in zip(cells, widths):
            pdf.cell(width, 7, value, fill=shaded)
        pdf.ln(7)


def _exchange_card(pdf: ReportPDF, number: int, exchange: Exchange) -> None:
    question, answer, feedback = exchange
    if pdf.get_y() > pdf.page_break_trigger - 40:
        pdf.add_page()
    pdf.set_fill_color(*CARD_BG)
    pdf.set_font(pdf.font_bold, "B", 10)
    pdf.set_text_color(*ACCENT)
    pdf.multi_cell(pdf.usable_width, 6, f"Q{number}. {question.strip() or '-'}", fill=True, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(1)
    _paragraph(pdf, answer.strip() or "-")
    pdf.set_font(pdf.font_regular, "", 9)
    pdf.set_text_color(*MUTED)
    if feedback is None:
        note = "Not evaluated."
    else:
        note = f"{pdf.bullet} Score {feedback.score}%  {pdf.bullet} Confidence {feedback.confidence}%  {pdf.bullet} {feedback.text}"
    pdf.multi_cell(pdf.usable_width, 5, note, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_draw_color(*RULE)
    pdf.line(pdf.l_margin, pdf.get_y() + 2, pdf.l_margin + pdf.usable_width, pdf.get_y() + 2)
    pdf.ln(5)
    pdf.set_text_color(*TEXT)


def generate_interview_report_pdf(interview: Interview) -> bytes:
    """Render the report page for ``interview`` as PDF bytes."""

    pdf = ReportPDF(f"Interview Report: {interview.job_role}", interview.candidate_name)
    pdf.use_dejavu()
    pdf.add_page()

    _heading(pdf, "Interview Overview")
    _overview(pdf, interview)

    _heading(pdf, "Performance Summary")
    _paragraph(pdf, interview.summary or "No summary was generated.")

    _heading(pdf, "Skills and Peer Benchmark")
    _benchmark_table(pdf, interview)

    _heading(pdf, "Question and Answer Transcript")
    exchanges = pair_exchanges(interview.transcript)
    if not exchanges:
        _paragraph(pdf, "No answers were recorded for this interview.", color=MUTED)
    for number, exchange in enumerate(exchanges, start=1):
        _exchange_card(pdf, number, exchange)

    return bytes(pdf.output())


__all__ = ["ReportPDF", "generate_interview_report_pdf", "pair_exchanges"]
