"""
Answer Evaluator for adaptive interview practice.

Classifies one candidate answer as correct / partial / incorrect and assigns:
- Penalty (0-20) deducted from the final readiness score
- Confidence level (low / medium / high), used only to bias difficulty
- Optional hint when the candidate says they don't know

The LLM is tried first; any failure (outage, timeout, unparseable output)
falls through to a deterministic heuristic. evaluate() never raises.
"""

from typing import Any, Iterable, Optional, Set
import re

from langchain_classic.chains import LLMChain
from pydantic import BaseModel

from .models import AnswerAssessment, ConfidenceLevel, Evaluation, clamp_penalty
from ..llm.groq_service import create_chain, run_chain
from ..llm.response_parser import parse_structured_response
from ..matching.skill_matcher import extract_skills
from ..utils.config import (
    ANSWER_PROMPT_CHARS,
    DEFAULT_PENALTY,
    DONT_KNOW_MAX_CHARS,
    MIN_ANSWER_CHARS,
    MIN_DETAILED_ANSWER_WORDS,
    MIN_KEYWORD_HITS,
    PENALTY_CORRECT,
    PENALTY_DONT_KNOW,
    PENALTY_EMPTY,
    PENALTY_PARTIAL,
    PENALTY_SHORT,
    SHORT_ANSWER_WORDS
)
from ..utils.logger import setup_logger, preview
from ..utils.text_utils import (
    HESITATION_PATTERN,
    UNCERTAINTY_PATTERN,
    count_matches,
    expresses_uncertainty,
    has_examples,
    has_structure,
    tokenize_words,
    word_count
)

logger = setup_logger("answer_evaluator")

# Role-agnostic vocabulary that signals a technical, on-topic answer
TECHNICAL_TERMS = frozenset({
    "api", "database", "algorithm", "design", "architecture", "system",
    "testing", "deployment", "performance", "scalability", "framework",
    "debugging", "cache", "caching", "query", "schema", "pipeline",
    "security", "latency", "component", "service", "refactoring",
    "integration", "monitoring", "project", "requirements"
})

_ROLE_STOPWORDS = frozenset({"senior", "junior", "lead", "with", "and", "for", "the"})

EVALUATION_TEMPLATE = (
    "You are an expert interview evaluator.\n\n"
    "ROLE: {job_role}\n"
    "QUESTION: {question}\n"
    "CANDIDATE ANSWER:\n{answer}\n\n"
    "Classify the answer and return ONLY a JSON object:\n"
    '{{"evaluation": "correct" | "partial" | "incorrect", '
    '"penalty": <number 0-20>, "reason": "<one sentence>"}}\n\n'
    "Guidelines:\n"
    "- \"correct\" (penalty 0-5): relevant, demonstrates understanding\n"
    "- \"partial\" (penalty 6-12): incomplete, needs more detail, somewhat relevant\n"
    "- \"incorrect\" (penalty 13-20): off-topic, wrong or too vague\n"
    "- If the candidate seems unsure or says \"I don't know\", use \"partial\" (penalty 8-10)\n\n"
    "Return ONLY valid JSON, no other text."
)


class EvaluationResponse(BaseModel):
    """Expected shape of the LLM evaluation."""
    evaluation: Evaluation
    penalty: float = DEFAULT_PENALTY
    reason: Optional[str] = None


def detect_confidence_level(answer: str) -> ConfidenceLevel:
    """
    Estimate how confident an answer sounds.

    - low: three or more hesitation markers, or a very short answer (< 10 words)
      with two or more uncertainty phrases; empty answers are low
    - high: structured and illustrated with examples, or detailed (> 30 words)
      without uncertainty phrases
    - medium: everything else
    """
    if not answer or not answer.strip():
        return ConfidenceLevel.LOW

    words = word_count(answer)
    hesitations = count_matches(HESITATION_PATTERN, answer)
    uncertainty = count_matches(UNCERTAINTY_PATTERN, answer)

    if hesitations >= 3 or (words < 10 and uncertainty >= 2):
        return ConfidenceLevel.LOW
    if (has_structure(answer) and has_examples(answer)) or (words > MIN_DETAILED_ANSWER_WORDS and uncertainty == 0):
        return ConfidenceLevel.HIGH
    return ConfidenceLevel.MEDIUM


def role_keywords(job_role: str, skills: Optional[Iterable[str]] = None) -> Set[str]:
    """Lower-cased keywords that make an answer relevant to the role."""
    keywords = set(TECHNICAL_TERMS)
    for skill in skills or []:
        if skill and skill.strip():
            keywords.add(skill.strip().lower())
    for token in tokenize_words(job_role or ""):
        token = token.lower()
        if len(token) > 2 and token not in _ROLE_STOPWORDS:
            keywords.add(token)
    return keywords


def count_keyword_hits(answer: str, keywords: Set[str]) -> int:
    """Number of distinct role keywords (and vocabulary skills) present in answer."""
    if not answer:
        return 0
    tokens = {token.lower() for token in tokenize_words(answer)}
    hits = {keyword for keyword in keywords if " " not in keyword and keyword in tokens}
    lowered = answer.lower()
    for keyword in keywords:
        if " " in keyword and re.search(r"\b" + re.escape(keyword) + r"\b", lowered):
            hits.add(keyword)
    hits.update(skill.lower() for skill in extract_skills(answer))
    return len(hits)


def build_hint(question: str) -> str:
    return (
        f"That's okay! Here's a hint: Think about {question[:100]}. "
        "What aspects of this have you encountered before?"
    )


class AnswerEvaluator:
    """
    Evaluates interview answers with an LLM and a heuristic fallback.

    The LLM is injected; with llm=None every answer is scored by the
    heuristic path.
    """

    def __init__(self, llm: Optional[Any] = None):
        """
        Initialize answer evaluator.

        Args:
            llm: Optional LangChain LLM. If None, only the heuristic is used.
        """
        self.llm = llm
        self._evaluation_chain = None

        logger.info(f"AnswerEvaluator initialized (llm={'on' if llm is not None else 'off'})")

    def _get_evaluation_chain(self) -> LLMChain:
        """Get or create answer evaluation chain."""
        if self._evaluation_chain is None:
            self._evaluation_chain = create_chain(
                self.llm,
                EVALUATION_TEMPLATE,
                ["job_role", "question", "answer"],
                "evaluation"
            )
        return self._evaluation_chain

    def evaluate(
        self,
        job_role: str,
        question: str,
        answer: Optional[str],
        skills: Optional[Iterable[str]] = None
    ) -> AnswerAssessment:
        """
        Evaluate a single answer.

        Args:
            job_role: Role being practiced
            question: Question that was asked
            answer: Candidate transcript (None / blank counts as empty)
            skills: Session skills, used as extra role keywords

        Returns:
            AnswerAssessment (always valid, never raises)
        """
        answer = (answer or "").strip()

        quick = self._quick_check(question, answer)
        if quick is not None:
            return quick

        confidence = detect_confidence_level(answer)

        if self.llm is not None:
            try:
                return self._evaluate_with_llm(job_role, question, answer, confidence)
            except Exception as e:
                logger.warning(f"⚠️ LLM evaluation failed, using heuristic: {e}")

        return self.heuristic_evaluate(job_role, answer, skills, confidence)

    def _quick_check(self, question: str, answer: str) -> Optional[AnswerAssessment]:
        """Rules that settle an answer without the LLM."""
        if not answer:
            logger.info("Empty answer, marking as incorrect")
            return AnswerAssessment(
                evaluation=Evaluation.INCORRECT,
                penalty=PENALTY_EMPTY,
                confidence_level=ConfidenceLevel.LOW,
                reason="No answer was given.",
                source="rule"
            )

        if expresses_uncertainty(answer) and len(answer) < DONT_KNOW_MAX_CHARS:
            logger.info("Candidate said they don't know, providing hint")
            return AnswerAssessment(
                evaluation=Evaluation.PARTIAL,
                penalty=PENALTY_DONT_KNOW,
                confidence_level=ConfidenceLevel.LOW,
                reason="Candidate was unsure.",
                needs_hint=True,
                hint=build_hint(question),
                source="rule"
            )

        if len(answer) < MIN_ANSWER_CHARS:
            logger.info(f"Very short answer ({len(answer)} chars), marking as incorrect")
            return AnswerAssessment(
                evaluation=Evaluation.INCORRECT,
                penalty=PENALTY_SHORT,
                confidence_level=ConfidenceLevel.LOW,
                reason="Answer was too short to assess.",
                source="rule"
            )

        return None

    def _evaluate_with_llm(
        self,
        job_role: str,
        question: str,
        answer: str,
        confidence: ConfidenceLevel
    ) -> AnswerAssessment:
        text = run_chain(self._get_evaluation_chain(), {
            "job_role": job_role,
            "question": question,
            "answer": answer[:ANSWER_PROMPT_CHARS]
        })
        parsed = parse_structured_response(text, EvaluationResponse)
        penalty = clamp_penalty(parsed.penalty, DEFAULT_PENALTY)

        logger.info(
            f"✅ Evaluation: {parsed.evaluation.value}, penalty: {penalty}, "
            f"confidence: {confidence.value} (answer: '{preview(answer)}')"
        )
        return AnswerAssessment(
            evaluation=parsed.evaluation,
            penalty=penalty,
            confidence_level=confidence,
            reason=parsed.reason,
            source="llm"
        )

    def heuristic_evaluate(
        self,
        job_role: str,
        answer: str,
        skills: Optional[Iterable[str]] = None,
        confidence: Optional[ConfidenceLevel] = None
    ) -> AnswerAssessment:
        """
        Deterministic scoring from answer length and role keywords.

        - >= 30 words with >= 2 role keywords: correct, penalty 5
        - < 8 words (or empty): incorrect, penalty 15 (20 when empty)
        - otherwise: partial, penalty 10
        """
        answer = (answer or "").strip()
        if confidence is None:
            confidence = detect_confidence_level(answer)

        if not answer:
            return AnswerAssessment(
                evaluation=Evaluation.INCORRECT,
                penalty=PENALTY_EMPTY,
                confidence_level=ConfidenceLevel.LOW,
                reason="No answer was given.",
                source="fallback"
            )

        words = word_count(answer)
        hits = count_keyword_hits(answer, role_keywords(job_role, skills))

        if words >= MIN_DETAILED_ANSWER_WORDS and hits >= MIN_KEYWORD_HITS:
            evaluation, penalty = Evaluation.CORRECT, PENALTY_CORRECT
            reason = "Detailed answer covering role-relevant topics."
        elif words < SHORT_ANSWER_WORDS:
            evaluation, penalty = Evaluation.INCORRECT, PENALTY_SHORT
            reason = "Answer was too brief."
        else:
            evaluation, penalty = Evaluation.PARTIAL, PENALTY_PARTIAL
            reason = "Answer needs more detail or role-specific examples."

        logger.info(f"Heuristic evaluation: {evaluation.value} ({words} words, {hits} keyword hits)")
        return AnswerAssessment(
            evaluation=evaluation,
            penalty=penalty,
            confidence_level=confidence,
            reason=reason,
            source="fallback"
        )


# Singleton instance
_answer_evaluator = None


def get_answer_evaluator(llm=None) -> AnswerEvaluator:
    """
    Get or create answer evaluator instance (singleton).

    Args:
        llm: Optional LLM instance

    Returns:
        AnswerEvaluator instance
    """
    global _answer_evaluator
    if _answer_evaluator is None:
        _answer_evaluator = AnswerEvaluator(llm=llm)
    return _answer_evaluator
