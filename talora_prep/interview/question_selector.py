"""
Adaptive Question Selector.

Chooses the next interview question:
- Resolves the difficulty tier from the last evaluation (and optional signals)
- Asks the LLM for a conversational follow-up at that tier
- Falls back to the static question bank, never repeating a question
  while an unused alternative exists
"""

from typing import Any, Iterable, List, Optional, Sequence, Set

from langchain_classic.chains import LLMChain
from pydantic import BaseModel, Field

from . import question_bank
from .difficulty import resolve_next_difficulty
from .models import (
    DIFFICULTY_ORDER,
    BodyLanguageSignals,
    ConfidenceLevel,
    Difficulty,
    Evaluation,
    SelectedQuestion
)
from ..llm.groq_service import create_chain, run_chain
from ..llm.response_parser import LLMResponseError, parse_structured_response
from ..utils.config import ANSWER_PROMPT_CHARS, DEFAULT_MAX_QUESTIONS, MAX_QUESTIONS_LIMIT
from ..utils.logger import setup_logger, preview
from ..utils.text_utils import clean_generated_question, normalize_question, question_core

logger = setup_logger("question_selector")

FIRST_QUESTION_TEMPLATE = (
    "You are a real human interviewer having a natural conversation with a candidate. "
    "You're warm, professional, and genuinely interested in learning about them.\n\n"
    "Job Role: {job_role}\n"
    "Required Skills: {skills}\n"
    "Question Focus: {focus}\n\n"
    "Generate ONE natural, conversational opening question.\n"
    "- Make it specific to the {job_role} role and the skills above\n"
    "- Keep it warm, welcoming and easy to answer (opening question)\n"
    "- Do not use \"tell me about yourself\" or other generic templates\n\n"
    "Return ONLY the question text. No quotes, no prefixes, no formatting."
)

NEXT_QUESTION_TEMPLATE = (
    "You are a real human interviewer in a natural, flowing conversation.\n\n"
    "Job Role: {job_role}\n"
    "Required Technical Skills: {skills}\n"
    "Difficulty Level: {difficulty}\n"
    "Question Number: {question_number} of ~{max_questions}\n\n"
    "WHAT THE CANDIDATE JUST SAID:\n\"{previous_answer}\"\n\n"
    "CONVERSATION SO FAR:\n{history}\n\n"
    "Rules:\n"
    "1. Start with a brief acknowledgment (1-3 words) such as \"I see\", \"Got it\" or \"Right\"\n"
    "2. The question must build on something specific the candidate just mentioned\n"
    "3. Match the difficulty level: easy = background, medium = applied experience, "
    "hard = design decisions and trade-offs\n"
    "4. Never repeat or rephrase a question from the conversation so far\n\n"
    "Return ONLY a JSON object:\n"
    '{{"acknowledgment": "<1-3 words>", "question": "<your next question>"}}'
)

QUESTION_SET_TEMPLATE = (
    "You are preparing a candidate for a {job_role} interview.\n"
    "Skills: {skills}\n"
    "Difficulty: {difficulty}\n\n"
    "Write {count} distinct interview questions mixing technical and behavioral topics.\n"
    "Return ONLY a JSON object: {{\"questions\": [\"...\", \"...\"]}}"
)


class NextQuestionResponse(BaseModel):
    acknowledgment: str = ""
    question: str


class QuestionSetResponse(BaseModel):
    questions: List[str] = Field(default_factory=list)


def _skills_text(skills: Optional[Sequence[str]], job_role: str) -> str:
    specific = [s.strip() for s in (skills or []) if s and s.strip()][:3]
    return ", ".join(specific) if specific else f"{job_role}-related technical skills"


def _with_acknowledgment(acknowledgment: str, question: str) -> str:
    acknowledgment = (acknowledgment or "").strip().rstrip(".,!:;")
    if not acknowledgment:
        return question
    first_word = question.split(" ", 1)[0]
    # Keep "I", acronyms and proper-looking tokens as they are
    if first_word != "I" and not first_word[:2].isupper():
        question = question[0].lower() + question[1:]
    return f"{acknowledgment}, {question}"


class QuestionSelector:
    """
    Selects interview questions with an LLM and a static bank fallback.

    The LLM is injected; with llm=None every question comes from the bank.
    """

    def __init__(self, llm: Optional[Any] = None):
        self.llm = llm
        self._first_chain = None
        self._next_chain = None
        self._set_chain = None

        logger.info(f"QuestionSelector initialized (llm={'on' if llm is not None else 'off'})")

    def _get_first_question_chain(self) -> LLMChain:
        if self._first_chain is None:
            self._first_chain = create_chain(
                self.llm, FIRST_QUESTION_TEMPLATE, ["job_role", "skills", "focus"], "question"
            )
        return self._first_chain

    def _get_next_question_chain(self) -> LLMChain:
        if self._next_chain is None:
            self._next_chain = create_chain(
                self.llm,
                NEXT_QUESTION_TEMPLATE,
                ["job_role", "skills", "difficulty", "question_number", "max_questions",
                 "previous_answer", "history"],
                "question"
            )
        return self._next_chain

    def _get_question_set_chain(self) -> LLMChain:
        if self._set_chain is None:
            self._set_chain = create_chain(
                self.llm, QUESTION_SET_TEMPLATE, ["job_role", "skills", "difficulty", "count"], "questions"
            )
        return self._set_chain

    def first_question(
        self,
        job_role: str,
        skills: Optional[Sequence[str]] = None,
        rotation: int = 0
    ) -> SelectedQuestion:
        """
        Opening question of a session. Always tier easy.

        Args:
            job_role: Role being practiced
            skills: Session skills
            rotation: Varies the question focus and fallback choice between sessions
        """
        topic = question_bank.FIRST_QUESTION_TOPICS[rotation % len(question_bank.FIRST_QUESTION_TOPICS)]

        if self.llm is not None:
            try:
                text = run_chain(self._get_first_question_chain(), {
                    "job_role": job_role,
                    "skills": _skills_text(skills, job_role),
                    "focus": question_bank.TOPIC_FOCUS[topic]
                })
                question = clean_generated_question(text)
                if not question:
                    raise LLMResponseError("Empty first question")
                logger.info(f"✅ Generated first question ({topic}): '{preview(question)}'")
                return SelectedQuestion(question=question, difficulty=Difficulty.EASY, source="llm")
            except Exception as e:
                logger.warning(f"⚠️ First question generation failed, using question bank: {e}")

        candidates = question_bank.first_questions(job_role, skills)
        question = candidates[rotation % len(candidates)]
        logger.info(f"Fallback first question: '{preview(question)}'")
        return SelectedQuestion(question=question, difficulty=Difficulty.EASY, source="fallback")

    def next_question(
        self,
        job_role: str,
        skills: Optional[Sequence[str]],
        last_evaluation: Evaluation,
        asked_count: int,
        previous_questions: Iterable[str],
        current_difficulty: Optional[Difficulty] = None,
        confidence: Optional[ConfidenceLevel] = None,
        body_language: Optional[BodyLanguageSignals] = None,
        previous_answer: str = "",
        max_questions: int = DEFAULT_MAX_QUESTIONS,
        rotation: int = 0
    ) -> SelectedQuestion:
        """
        Decide the next question's tier and text.

        Args:
            job_role: Role being practiced
            skills: Session skills
            last_evaluation: Evaluation of the answer just given
            asked_count: Questions asked so far
            previous_questions: Every question already asked in the session
            current_difficulty: Tier of the question just answered. If None,
                tiers are resolved from medium (correct -> hard, incorrect -> easy).
            confidence: Confidence level detected in the last answer
            body_language: Optional body-language signals sent with the answer
            previous_answer: Last answer, used to make the follow-up conversational
            max_questions: Session length, for the prompt
            rotation: Varies fallback choice between calls

        Returns:
            SelectedQuestion that differs (case-insensitive, trimmed) from all
            previous questions
        """
        previous_questions = list(previous_questions)
        # Full texts plus acknowledgment-free cores of everything asked so far
        used = {normalize_question(q) for q in previous_questions}
        used |= {question_core(q) for q in previous_questions}
        difficulty = resolve_next_difficulty(
            current_difficulty or Difficulty.MEDIUM, last_evaluation, confidence, body_language
        )

        if self.llm is not None:
            try:
                question = self._generate_next(
                    job_role, skills, difficulty, asked_count, previous_questions,
                    previous_answer, max_questions, used
                )
                logger.info(f"✅ Generated {difficulty.value} question #{asked_count + 1}: '{preview(question)}'")
                return SelectedQuestion(question=question, difficulty=difficulty, source="llm")
            except Exception as e:
                logger.warning(f"⚠️ Next question generation failed, using question bank: {e}")

        return self.fallback_question(job_role, skills, difficulty, asked_count, used, rotation)

    def _generate_next(
        self,
        job_role: str,
        skills: Optional[Sequence[str]],
        difficulty: Difficulty,
        asked_count: int,
        previous_questions: List[str],
        previous_answer: str,
        max_questions: int,
        used: Set[str]
    ) -> str:
        history = "\n".join(
            f"Q{i}: {q}" for i, q in enumerate(previous_questions, start=1)
        ) or "(none)"
        text = run_chain(self._get_next_question_chain(), {
            "job_role": job_role,
            "skills": _skills_text(skills, job_role),
            "difficulty": difficulty.value,
            "question_number": asked_count + 1,
            "max_questions": max_questions,
            "previous_answer": (previous_answer or "")[:ANSWER_PROMPT_CHARS],
            "history": history
        })
        parsed = parse_structured_response(text, NextQuestionResponse)
        question = clean_generated_question(parsed.question)
        if not question:
            raise LLMResponseError("Empty question")

        combined = _with_acknowledgment(parsed.acknowledgment, question)
        if used & {normalize_question(question), normalize_question(combined), question_core(combined)}:
            raise LLMResponseError("Duplicate question")
        return combined

    def fallback_question(
        self,
        job_role: str,
        skills: Optional[Sequence[str]],
        difficulty: Difficulty,
        asked_count: int,
        used: Set[str],
        rotation: int = 0
    ) -> SelectedQuestion:
        """
        Pick an unused bank question.

        Tries the requested tier, then tiers above it, then tiers below. When
        every tier is exhausted a bank question is varied with a suffix.
        """
        start = DIFFICULTY_ORDER.index(difficulty)
        tiers = DIFFICULTY_ORDER[start:] + list(reversed(DIFFICULTY_ORDER[:start]))
        offset = asked_count * 7 + rotation * 13

        for tier in tiers:
            candidates = [
                q for q in question_bank.bank_questions(tier, job_role, skills)
                if normalize_question(q) not in used
            ]
            if candidates:
                question = candidates[offset % len(candidates)]
                if tier != difficulty:
                    logger.info(f"{difficulty.value} bank exhausted, using {tier.value} question")
                logger.info(f"Fallback {tier.value} question: '{preview(question)}'")
                return SelectedQuestion(question=question, difficulty=tier, source="fallback")

        base_questions = question_bank.bank_questions(difficulty, job_role, skills)
        base = base_questions[offset % len(base_questions)]
        suffixes = question_bank.VARIATION_SUFFIXES
        for i in range(len(suffixes)):
            suffix = suffixes[(offset + i) % len(suffixes)]
            question = base[:-1] + suffix if base.endswith("?") else base + suffix
            if normalize_question(question) not in used:
                return SelectedQuestion(question=question, difficulty=difficulty, source="fallback")

        question = f"{base} (follow-up {asked_count + 1})"
        return SelectedQuestion(question=question, difficulty=difficulty, source="fallback")

    def generate_question_set(
        self,
        job_role: str,
        skills: Optional[Sequence[str]] = None,
        difficulty: Difficulty = Difficulty.MEDIUM,
        count: int = 5
    ) -> List[str]:
        """
        Distinct practice questions for the non-adaptive practice flow.

        Args:
            job_role: Role being practiced
            skills: Skills to cover
            difficulty: Tier used for bank top-up
            count: Number of questions (1-20)

        Returns:
            List of distinct questions; LLM output is topped up from the bank
        """
        count = max(1, min(MAX_QUESTIONS_LIMIT, int(count)))
        questions: List[str] = []
        seen: Set[str] = set()

        def _add(candidate: str):
            candidate = clean_generated_question(candidate)
            key = normalize_question(candidate)
            if candidate and key not in seen and len(questions) < count:
                seen.add(key)
                questions.append(candidate)

        if self.llm is not None:
            try:
                text = run_chain(self._get_question_set_chain(), {
                    "job_role": job_role,
                    "skills": _skills_text(skills, job_role),
                    "difficulty": Difficulty(difficulty).value,
                    "count": count
                })
                for candidate in parse_structured_response(text, QuestionSetResponse).questions:
                    _add(candidate)
            except Exception as e:
                logger.warning(f"⚠️ Practice question generation failed, using question bank: {e}")

        pool = question_bank.practice_questions(job_role, skills)
        pool += question_bank.bank_questions(difficulty, job_role, skills)
        for tier in DIFFICULTY_ORDER:
            if tier != Difficulty(difficulty):
                pool += question_bank.bank_questions(tier, job_role, skills)
        for candidate in pool:
            _add(candidate)

        logger.info(f"Prepared {len(questions)} practice questions for {job_role}")
        return questions


# Singleton instance
_question_selector = None


def get_question_selector(llm=None) -> QuestionSelector:
    """Get or create question selector instance (singleton)."""
    global _question_selector
    if _question_selector is None:
        _question_selector = QuestionSelector(llm=llm)
    return _question_selector
