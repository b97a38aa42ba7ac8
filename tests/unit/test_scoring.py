from domain import Feedback, Message, Skill
import services.scoring as scoring


def _answer(text: str, score: int | None, confidence: int = 60) -> Message:
    feedback = Feedback(text="ok", score=score, confidence=confidence) if score is not None else None
    return Message(sender="candidate", text=text, feedback=feedback)


def _transcript(scores) -> list[Message]:
    messages = [Message(sender="interviewer", text="Hello")]
    for index, score in enumerate(scores):
        messages.append(Message(sender="interviewer", text=f"Question {index}"))
        messages.append(_answer("An answer", score))
    return messages


def test_overall_score_is_rounded_mean():
    assert scoring.overall_score(_transcript([80, 70, 90, 60, 100])) == 80
    assert scoring.overall_score(_transcript([50, 51])) == 51  # 50.5 rounds up
    assert scoring.overall_score(_transcript([50, 50, 51])) == 50


def test_overall_score_counts_unscored_answers_as_zero():
    assert scoring.overall_score(_transcript([80, None])) == 40


def test_overall_score_without_answers_is_zero():
    assert scoring.overall_score([Message(sender="interviewer", text="Hello")]) == 0
    assert scoring.overall_score([]) == 0


def test_peer_benchmark_uses_history_and_default():
    skills = [Skill(name="Python", proficiency=90), Skill(name="Go", proficiency=40)]
    history = [
        [Skill(name="Python", proficiency=70)],
        [Skill(name="Python", proficiency=75), Skill(name="SQL", proficiency=50)],
    ]
    rows = scoring.peer_benchmark(skills, history, default_average=60)
    assert [(r.skill, r.level, r.peer_average) for r in rows] == [("Python", 90, 73), ("Go", 40, 60)]


def test_default_benchmark_assigns_default_everywhere():
    rows = scoring.default_benchmark([Skill(name="Python", proficiency=90)], default_average=55)
    assert rows[0].peer_average == 55


def test_badges_are_deterministic():
    transcript = [
        Message(sender="interviewer", text="Q"),
        _answer(" ".join(["word"] * 45), 90, confidence=80),
        Message(sender="interviewer", text="Q2"),
        _answer(" ".join(["word"] * 41), 80, confidence=76),
    ]
    first = scoring.assign_badges(transcript, [80, 76], 85)
    second = scoring.assign_badges(transcript, [80, 76], 85)
    assert first == second == [scoring.QUICK_THINKER, scoring.STRONG_COMMUNICATOR, scoring.DETAIL_ORIENTED]


def test_badges_respect_thresholds():
    transcript = [Message(sender="interviewer", text="Q"), _answer("short answer", 60, confidence=50)]
    assert scoring.assign_badges(transcript, [50], 60) == []
    rules = scoring.BadgeRules(quick_thinker_confidence=40, communicator_score=50, detail_words=2)
    assert scoring.assign_badges(transcript, [50], 60, rules) == [
        scoring.QUICK_THINKER,
        scoring.STRONG_COMMUNICATOR,
        scoring.DETAIL_ORIENTED,
    ]


def test_round_half_up():
    assert scoring.round_half_up(72.5) == 73
    assert scoring.round_half_up(72.49) == 72
