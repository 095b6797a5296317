import json

import pytest

from talora_prep.interview import (
    Difficulty,
    Evaluation,
    InvalidSessionStateError,
    ReadinessStatus,
    SessionNotFoundError,
    SessionStatus
)
from talora_prep.utils.text_utils import normalize_question

from conftest import BrokenNotifier, PARTIAL_ANSWER, STRONG_ANSWER


def _start(manager, **overrides):
    kwargs = {
        "candidate_id": "cand-1",
        "job_role": "Backend Developer",
        "skills": ["Python", "PostgreSQL", "Docker"],
        "candidate_name": "Sam",
        "candidate_email": "sam@example.com",
        "max_questions": 6,
    }
    kwargs.update(overrides)
    return manager.start_session(**kwargs)


def _assert_no_duplicate_questions(session):
    normalized = [normalize_question(q) for q in session.previous_questions]
    assert len(normalized) == len(set(normalized))


def test_start_session_creates_one_easy_question(manager, store):
    result = _start(manager)
    session = store.load(result.session_id)

    assert result.difficulty == Difficulty.EASY
    assert result.question_number == 1
    assert session.asked_count == 1
    assert len(session.questions) == 1
    assert session.questions[0].question == result.first_question
    assert session.status == SessionStatus.IN_PROGRESS
    assert session.fallback_calls == 1


@pytest.mark.parametrize("job_role, skills", [
    ("Backend Developer", ["Python"]),
    ("Staff Engineer", ["Kubernetes", "Golang", "Kafka"]),
    ("Designer", []),
])
def test_first_question_is_easy_for_any_role(manager, job_role, skills):
    assert _start(manager, job_role=job_role, skills=skills).difficulty == Difficulty.EASY


def test_skills_are_deduplicated_case_insensitively(manager, store):
    result = _start(manager, skills=["Python", "python ", "Docker", "PYTHON"])
    assert store.load(result.session_id).skills == ["Python", "Docker"]


@pytest.mark.parametrize("overrides", [
    {"candidate_id": " "},
    {"job_role": ""},
    {"max_questions": 0},
    {"max_questions": 21},
])
def test_start_session_rejects_invalid_input(manager, overrides):
    with pytest.raises(ValueError):
        _start(manager, **overrides)


def test_strong_answers_score_needs_practice(manager, store, notifier):
    result = _start(manager)
    session_id = result.session_id

    for expected_count in range(2, 7):
        step = manager.submit_answer(session_id, STRONG_ANSWER)
        assert not step.end_interview
        assert step.question_number == expected_count
        session = store.load(session_id)
        assert session.asked_count == expected_count == len(session.questions)

    final = manager.submit_answer(session_id, STRONG_ANSWER)
    session = store.load(session_id)

    assert final.end_interview
    assert final.final_results.prep_score == 70
    assert final.final_results.status == ReadinessStatus.NEEDS_PRACTICE
    assert session.status == SessionStatus.COMPLETED
    assert session.asked_count == session.max_questions == 6
    assert all(q.evaluation == Evaluation.CORRECT and q.penalty == 5 for q in session.questions)
    assert [q.difficulty for q in session.questions] == [
        Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD, Difficulty.HARD, Difficulty.HARD, Difficulty.HARD
    ]
    _assert_no_duplicate_questions(session)


def test_empty_answers_score_zero(manager, store):
    session_id = _start(manager).session_id

    results = [manager.submit_answer(session_id, "") for _ in range(6)]
    session = store.load(session_id)

    assert results[-1].end_interview
    assert results[-1].final_results.prep_score == 0
    assert results[-1].final_results.status == ReadinessStatus.NOT_READY
    assert all(q.penalty == 20 for q in session.questions)
    assert all(q.difficulty == Difficulty.EASY for q in session.questions)
    _assert_no_duplicate_questions(session)


def test_completion_freezes_transcript_and_analysis(manager, store, notifier):
    session_id = _start(manager, max_questions=2).session_id
    manager.submit_answer(session_id, PARTIAL_ANSWER)
    final = manager.submit_answer(session_id, STRONG_ANSWER)
    session = store.load(session_id)

    assert session.full_transcript.startswith(f"Q1: {session.questions[0].question}\nA1: {PARTIAL_ANSWER}")
    assert session.ai_analysis.overall_score == 100 - 10 - 5
    assert session.completed_at is not None
    assert all(q.is_answered for q in session.questions)

    assert final.notification_sent
    assert "sent to your email" in final.closing_message
    assert len(notifier.sent) == 1
    assert notifier.sent[0]["to"] == "sam@example.com"
    assert notifier.sent[0]["analysis"].overall_score == 85


def test_answer_after_completion_is_rejected(manager, store):
    session_id = _start(manager, max_questions=1).session_id
    manager.submit_answer(session_id, STRONG_ANSWER)

    with pytest.raises(InvalidSessionStateError):
        manager.submit_answer(session_id, STRONG_ANSWER)

    session = store.load(session_id)
    assert len(session.questions) == 1
    assert session.status == SessionStatus.COMPLETED


def test_unknown_session_is_not_found(manager):
    with pytest.raises(SessionNotFoundError):
        manager.submit_answer("no-such-session", "hello there")
    with pytest.raises(SessionNotFoundError):
        manager.get_session("../../etc/passwd")


def test_notifier_failure_does_not_roll_back_completion(make_manager, store):
    manager = make_manager(None, session_notifier=BrokenNotifier())
    session_id = _start(manager, max_questions=1).session_id

    final = manager.submit_answer(session_id, STRONG_ANSWER)

    assert final.end_interview
    assert not final.notification_sent
    assert final.closing_message == "Thank you for completing the interview practice!"
    assert store.load(session_id).status == SessionStatus.COMPLETED


def test_no_email_without_candidate_address(manager, notifier):
    session_id = _start(manager, max_questions=1, candidate_email=None).session_id
    assert not manager.submit_answer(session_id, STRONG_ANSWER).notification_sent
    assert notifier.sent == []


def test_dont_know_answer_returns_hint_with_next_question(manager):
    session_id = _start(manager).session_id
    step = manager.submit_answer(session_id, "I'm not sure")
    assert step.hint is not None
    assert step.next_question
    assert step.difficulty == Difficulty.EASY


def test_low_signals_downgrade_next_question(manager):
    session_id = _start(manager).session_id
    manager.submit_answer(session_id, STRONG_ANSWER)  # easy -> medium
    step = manager.submit_answer(session_id, STRONG_ANSWER, body_language={"eye_contact": "low"})
    assert step.difficulty == Difficulty.EASY


def test_body_language_is_stored_on_answered_question(manager, store):
    session_id = _start(manager).session_id
    manager.submit_answer(session_id, PARTIAL_ANSWER, body_language={"eye_contact": "HIGH", "posture": "stable"})
    record = store.load(session_id).questions[0]
    assert record.body_language.eye_contact == "high"
    assert record.body_language.posture == "stable"


def test_fallback_calls_counter_tracks_bank_usage(manager, store):
    session_id = _start(manager).session_id
    manager.submit_answer(session_id, PARTIAL_ANSWER)
    manager.submit_answer(session_id, PARTIAL_ANSWER)
    assert store.load(session_id).fallback_calls == 3


def test_llm_session_end_to_end(make_manager, scripted_llm, store):
    llm = scripted_llm(
        "What got you into backend development?",
        json.dumps({"evaluation": "correct", "penalty": 2, "reason": "Good"}),
        json.dumps({"acknowledgment": "I see", "question": "How do you design database schemas?"}),
        json.dumps({"evaluation": "partial", "penalty": 9}),
        json.dumps({"final_score": 90, "strengths": ["Clear"], "weaknesses": ["Depth"],
                    "recommendations": ["Practice"], "summary": "Nice work."}),
    )
    manager = make_manager(llm)
    result = _start(manager, max_questions=2)
    assert result.first_question == "What got you into backend development?"

    step = manager.submit_answer(result.session_id, PARTIAL_ANSWER)
    assert step.next_question == "I see, how do you design database schemas?"
    assert step.difficulty == Difficulty.MEDIUM

    final = manager.submit_answer(result.session_id, PARTIAL_ANSWER)
    session = store.load(result.session_id)

    # base 89, LLM may move it by at most 10
    assert final.final_results.prep_score == 90
    assert final.final_results.summary == "Nice work."
    assert session.fallback_calls == 0


def test_llm_outage_never_blocks_the_interview(make_manager, outage_llm, store):
    manager = make_manager(outage_llm)
    session_id = _start(manager, max_questions=3).session_id
    for _ in range(3):
        result = manager.submit_answer(session_id, STRONG_ANSWER)
    assert result.end_interview
    assert result.final_results.prep_score == 85
    assert store.load(session_id).status == SessionStatus.COMPLETED


def test_abandon_session(manager, store):
    session_id = _start(manager).session_id
    abandoned = manager.abandon_session(session_id)
    assert abandoned.status == SessionStatus.ABANDONED
    assert manager.abandon_session(session_id).status == SessionStatus.ABANDONED

    with pytest.raises(InvalidSessionStateError):
        manager.submit_answer(session_id, STRONG_ANSWER)
    assert store.load(session_id).asked_count == 1


def test_abandon_completed_session_is_rejected(manager):
    session_id = _start(manager, max_questions=1).session_id
    manager.submit_answer(session_id, STRONG_ANSWER)
    with pytest.raises(InvalidSessionStateError):
        manager.abandon_session(session_id)


def test_list_sessions_most_recent_first(manager):
    first = _start(manager).session_id
    second = _start(manager, job_role="Data Engineer").session_id
    _start(manager, candidate_id="someone-else")

    sessions = manager.list_sessions("cand-1")
    assert [s.session_id for s in sessions] == [second, first]


def test_null_transcript_segments_score_as_empty_answer(manager, store):
    session_id = _start(manager).session_id
    manager.submit_answer(session_id, [None, {"text": None}])

    record = store.load(session_id).questions[0]
    assert record.transcript == ""
    assert record.evaluation == Evaluation.INCORRECT
    assert record.penalty == 20
