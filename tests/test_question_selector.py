import json

import pytest

from talora_prep.interview import Difficulty, Evaluation, QuestionSelector
from talora_prep.interview.question_bank import bank_questions, first_questions
from talora_prep.utils.text_utils import normalize_question

ROLE = "Backend Developer"
SKILLS = ["Python", "PostgreSQL"]


@pytest.mark.parametrize("job_role, skills", [
    ("Backend Developer", ["Python"]),
    ("Principal Architect", ["Kubernetes", "Terraform", "AWS"]),
    ("Data Scientist", []),
])
def test_first_question_is_always_easy(job_role, skills):
    for rotation in range(8):
        selected = QuestionSelector().first_question(job_role, skills, rotation=rotation)
        assert selected.difficulty == Difficulty.EASY
        assert selected.source == "fallback"


def test_first_question_rotates_through_bank():
    selector = QuestionSelector()
    seen = {selector.first_question(ROLE, SKILLS, rotation=r).question for r in range(8)}
    assert seen == set(first_questions(ROLE, SKILLS))


def test_first_question_from_llm_is_cleaned(scripted_llm):
    selector = QuestionSelector(llm=scripted_llm('"**Question: What drew you to backend work?**"'))
    selected = selector.first_question(ROLE, SKILLS)
    assert selected.question == "What drew you to backend work?"
    assert selected.difficulty == Difficulty.EASY
    assert selected.source == "llm"


def test_blank_first_question_from_llm_falls_back(scripted_llm):
    selected = QuestionSelector(llm=scripted_llm('""')).first_question(ROLE, SKILLS)
    assert selected.source == "fallback"
    assert selected.question in first_questions(ROLE, SKILLS)


@pytest.mark.parametrize("evaluation, expected", [
    (Evaluation.CORRECT, Difficulty.HARD),
    (Evaluation.PARTIAL, Difficulty.MEDIUM),
    (Evaluation.INCORRECT, Difficulty.EASY),
])
def test_next_question_tier_without_current_difficulty(evaluation, expected):
    selected = QuestionSelector().next_question(ROLE, SKILLS, evaluation, 1, [])
    assert selected.difficulty == expected
    assert selected.question in bank_questions(expected, ROLE, SKILLS)


def test_next_question_is_relative_to_current_tier():
    selected = QuestionSelector().next_question(
        ROLE, SKILLS, Evaluation.CORRECT, 1, [], current_difficulty=Difficulty.EASY
    )
    assert selected.difficulty == Difficulty.MEDIUM


def test_llm_question_gets_acknowledgment(scripted_llm):
    reply = json.dumps({"acknowledgment": "Got it.", "question": "How did you scale the Python workers?"})
    selected = QuestionSelector(llm=scripted_llm(reply)).next_question(
        ROLE, SKILLS, Evaluation.PARTIAL, 1, ["Tell me about yourself"]
    )
    assert selected.question == "Got it, how did you scale the Python workers?"
    assert selected.difficulty == Difficulty.MEDIUM
    assert selected.source == "llm"


def test_duplicate_llm_question_falls_back_to_bank(scripted_llm):
    previous = ["How did you scale the Python workers?"]
    reply = json.dumps({"acknowledgment": "", "question": "  how did you SCALE the python workers? "})
    selected = QuestionSelector(llm=scripted_llm(reply)).next_question(
        ROLE, SKILLS, Evaluation.PARTIAL, 1, previous
    )
    assert selected.source == "fallback"
    assert normalize_question(selected.question) not in {normalize_question(q) for q in previous}


def test_llm_outage_falls_back_to_bank(outage_llm):
    selected = QuestionSelector(llm=outage_llm).next_question(ROLE, SKILLS, Evaluation.CORRECT, 2, [])
    assert outage_llm.calls == 1
    assert selected.source == "fallback"
    assert selected.difficulty == Difficulty.HARD


def test_fallback_never_repeats_while_tier_has_unused_questions():
    selector = QuestionSelector()
    asked = []
    for count in range(5):
        selected = selector.next_question(ROLE, SKILLS, Evaluation.PARTIAL, count, asked)
        assert selected.difficulty == Difficulty.MEDIUM
        asked.append(selected.question)
    assert len({normalize_question(q) for q in asked}) == 5


def test_exhausted_tier_moves_to_next_tier_up():
    asked = bank_questions(Difficulty.MEDIUM, ROLE, SKILLS)
    selected = QuestionSelector().next_question(ROLE, SKILLS, Evaluation.PARTIAL, 5, asked)
    assert selected.difficulty == Difficulty.HARD
    assert selected.question in bank_questions(Difficulty.HARD, ROLE, SKILLS)


def test_exhausted_hard_tier_wraps_to_lower_tiers():
    asked = bank_questions(Difficulty.HARD, ROLE, SKILLS)
    selected = QuestionSelector().next_question(ROLE, SKILLS, Evaluation.CORRECT, 5, asked)
    assert selected.difficulty == Difficulty.MEDIUM


def test_fully_exhausted_bank_still_returns_a_new_question():
    asked = [q.upper() for tier in Difficulty for q in bank_questions(tier, ROLE, SKILLS)]
    selected = QuestionSelector().next_question(ROLE, SKILLS, Evaluation.PARTIAL, 15, asked)
    assert normalize_question(selected.question) not in {normalize_question(q) for q in asked}


def test_rotation_varies_fallback_choice():
    selector = QuestionSelector()
    choices = {
        selector.next_question(ROLE, SKILLS, Evaluation.PARTIAL, 1, [], rotation=r).question
        for r in range(5)
    }
    assert len(choices) > 1


def test_question_set_is_distinct_and_sized():
    questions = QuestionSelector().generate_question_set(ROLE, SKILLS, Difficulty.HARD, count=12)
    assert len(questions) == 12
    assert len({normalize_question(q) for q in questions}) == 12


def test_question_set_prefers_llm_and_tops_up(scripted_llm):
    reply = json.dumps({"questions": ["What is a database index?", "what is a database index?", "Explain MVCC."]})
    questions = QuestionSelector(llm=scripted_llm(reply)).generate_question_set(ROLE, SKILLS, count=4)
    assert questions[:2] == ["What is a database index?", "Explain MVCC."]
    assert len(questions) == 4


@pytest.mark.parametrize("acknowledgment", ["Got it", "", "I see"])
def test_llm_question_repeated_under_new_acknowledgment_falls_back(scripted_llm, acknowledgment):
    previous = ["What drew you to backend work?", "I see, how did you scale the Redis cache?"]
    reply = json.dumps({"acknowledgment": acknowledgment, "question": "How did you scale the Redis cache?"})
    selected = QuestionSelector(llm=scripted_llm(reply)).next_question(
        ROLE, SKILLS, Evaluation.PARTIAL, 2, previous
    )
    assert selected.source == "fallback"
    assert selected.question in bank_questions(Difficulty.MEDIUM, ROLE, SKILLS)


def test_new_llm_question_with_acknowledgment_is_accepted(scripted_llm):
    previous = ["I see, how did you scale the Redis cache?"]
    reply = json.dumps({"acknowledgment": "Got it", "question": "How did you invalidate stale cache entries?"})
    selected = QuestionSelector(llm=scripted_llm(reply)).next_question(
        ROLE, SKILLS, Evaluation.PARTIAL, 1, previous
    )
    assert selected.source == "llm"
    assert selected.question == "Got it, how did you invalidate stale cache entries?"
