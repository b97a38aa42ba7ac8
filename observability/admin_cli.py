"""Lightweight CLI helpers for inspecting persisted interviews."""
from __future__ import annotations

import argparse
from typing import List, Optional

from storage.interviews import get_interview, list_interviews


def tail_interviews(limit: int = 20, candidate_id: Optional[str] = None) -> List[str]:
    lines = []
    for interview in list_interviews(candidate_id=candidate_id, limit=limit):
        lines.append(
            f"[{interview.created_at}] {interview.id} {interview.candidate_name}/{interview.job_role} "
            f"score={interview.overall_score} badges={','.join(interview.badges) or '-'}"
        )
    for line in lines:
        print(line)
    return lines


def show_transcript(interview_id: str) -> List[str]:
    interview = get_interview(interview_id)
    lines = [f"{interview.candidate_name} - {interview.job_role} ({interview.overall_score}%)"]
    for message in interview.transcript:
        line = f"{message.sender}: {message.text}"
        if message.feedback is not None:
            line += f"  [score={message.feedback.score} confidence={message.feedback.confidence}]"
        lines.append(line)
    lines.append(f"summary: {interview.summary}")
    for line in lines:
        print(line)
    return lines


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--tail", type=int, help="Show the latest completed interviews")
    parser.add_argument("--candidate", help="Only show interviews for this candidate id")
    parser.add_argument("--transcript", help="Print the transcript of one interview")
    args = parser.parse_args(argv)

    if args.tail:
        tail_interviews(args.tail, candidate_id=args.candidate)
    if args.transcript:
        show_transcript(args.transcript)


if __name__ == "__main__":
    main()
