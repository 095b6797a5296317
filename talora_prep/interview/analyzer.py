"""
Session Analyzer.

Aggregates the evaluated questions of a finished interview into an
AnalysisResult: overall score, strengths, improvements, recommendations,
summary and learning resources.

The penalty-based score is the deterministic floor:
    overall_score = clamp(100 - sum(penalties), 0, 100)
The LLM may adjust it by at most ANALYSIS_SCORE_ADJUSTMENT points; the
fallback reproduces it exactly.
"""

from typing import Any, Dict, List, Optional, Sequence
import math

from langchain_classic.chains import LLMChain
from pydantic import BaseModel, Field

from .models import AnalysisResult, QuestionRecord, ReadinessStatus, readiness_status
from ..llm.groq_service import create_chain, run_chain
from ..llm.response_parser import parse_structured_response
from ..utils.config import ANALYSIS_SCORE_ADJUSTMENT, DEFAULT_PENALTY, PENALTY_CORRECT, PENALTY_SHORT
from ..utils.logger import setup_logger
from ..utils.text_utils import has_examples, has_structure, tokenize_words, word_count
from .answer_evaluator import TECHNICAL_TERMS

logger = setup_logger("session_analyzer")

ANALYSIS_TEMPLATE = (
    "You are an expert interview coach providing constructive feedback on a practice interview.\n\n"
    "Job Role: {job_role}\n"
    "Number of Questions: {question_count}\n"
    "Base Score (from answer quality): {base_score}/100\n\n"
    "Full Interview Transcript:\n{transcript}\n\n"
    "Feedback must reference what the candidate actually said. Return ONLY a JSON object:\n"
    "{{\n"
    '  "final_score": <number between {min_score} and {max_score}>,\n'
    '  "strengths": [<4-6 specific strengths>],\n'
    '  "weaknesses": [<4-6 specific areas needing improvement>],\n'
    '  "recommendations": [<5-7 actionable tips>],\n'
    '  "resources": [{{"title": "...", "url": "...", "type": "article|course|video|documentation"}}],\n'
    '  "courses": [{{"title": "...", "platform": "...", "url": "..."}}],\n'
    '  "summary": "<2-3 sentence overall assessment>"\n'
    "}}\n"
    "{body_language_note}"
)

BODY_LANGUAGE_NOTE = (
    "\nYou MAY add one gentle body-language tip such as \"Try maintaining eye contact\". "
    "Never use judgmental words like \"nervous\" or \"poor body language\".\n"
)


class AnalysisResponse(BaseModel):
    """Expected shape of the LLM analysis."""
    final_score: Optional[float] = None
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    resources: List[Dict[str, str]] = Field(default_factory=list)
    courses: List[Dict[str, str]] = Field(default_factory=list)
    summary: str = ""


def question_penalty(record: QuestionRecord) -> float:
    return DEFAULT_PENALTY if record.penalty is None else record.penalty


def base_score(questions: Sequence[QuestionRecord]) -> int:
    """clamp(100 - sum(penalties), 0, 100), rounded half up."""
    total = sum(question_penalty(record) for record in questions)
    return int(max(0, min(100, math.floor(100 - total + 0.5))))


def build_full_transcript(questions: Sequence[QuestionRecord]) -> str:
    """Q/A transcript of a session."""
    return "\n\n".join(
        f"Q{i}: {record.question}\nA{i}: {record.transcript or ''}"
        for i, record in enumerate(questions, start=1)
    )


def default_resources(job_role: str) -> List[Dict[str, str]]:
    return [
        {"title": f"{job_role} Interview Guide", "url": "https://www.interviewbit.com/blog/interview-questions", "type": "article"},
        {"title": "STAR Method for Behavioral Interviews", "url": "https://www.indeed.com/career-advice/interviewing/how-to-use-the-star-interview-response-technique", "type": "article"},
        {"title": "Technical Interview Preparation", "url": "https://www.hackerrank.com/interview", "type": "article"},
    ]


def default_courses(job_role: str) -> List[Dict[str, str]]:
    return [
        {"title": f"{job_role} Masterclass", "platform": "Udemy", "url": "https://www.udemy.com"},
        {"title": "Interview Skills Course", "platform": "Coursera", "url": "https://www.coursera.org"},
        {"title": "Technical Interview Prep", "platform": "freeCodeCamp", "url": "https://www.freecodecamp.org"},
    ]


def _short(question: str, limit: int = 70) -> str:
    return question if len(question) <= limit else question[:limit].rstrip() + "..."


def _uses_technical_terms(answer: str) -> bool:
    return any(token.lower() in TECHNICAL_TERMS for token in tokenize_words(answer))


def body_language_tip(questions: Sequence[QuestionRecord]) -> Optional[str]:
    """One supportive tip when low eye contact or high movement dominated."""
    observed = [record.body_language for record in questions if record.body_language is not None]
    if not observed:
        return None
    low_eye_contact = sum(1 for signals in observed if signals.eye_contact == "low")
    high_movement = sum(1 for signals in observed if signals.movement == "high")
    if max(low_eye_contact, high_movement) * 2 <= len(observed):
        return None
    if low_eye_contact >= high_movement:
        return "Try maintaining gentle eye contact with the camera while you answer"
    return "Practice a steady, relaxed posture to help your answers come across clearly"


class SessionAnalyzer:
    """
    Builds the final interview analysis with an LLM and a templated fallback.
    """

    def __init__(self, llm: Optional[Any] = None):
        self.llm = llm
        self._analysis_chain = None

        logger.info(f"SessionAnalyzer initialized (llm={'on' if llm is not None else 'off'})")

    def _get_analysis_chain(self) -> LLMChain:
        if self._analysis_chain is None:
            self._analysis_chain = create_chain(
                self.llm,
                ANALYSIS_TEMPLATE,
                ["job_role", "question_count", "base_score", "transcript",
                 "min_score", "max_score", "body_language_note"],
                "analysis"
            )
        return self._analysis_chain

    def analyze(
        self,
        job_role: str,
        questions: Sequence[QuestionRecord],
        full_transcript: Optional[str] = None
    ) -> AnalysisResult:
        """
        Aggregate evaluated questions into an AnalysisResult.

        Args:
            job_role: Role practiced
            questions: Evaluated QuestionRecords, in order asked
            full_transcript: Q/A transcript. Built from questions if None.

        Returns:
            AnalysisResult (always valid, never raises)
        """
        questions = list(questions)
        if full_transcript is None:
            full_transcript = build_full_transcript(questions)
        score = base_score(questions)

        if self.llm is not None and questions:
            try:
                return self._analyze_with_llm(job_role, questions, full_transcript, score)
            except Exception as e:
                logger.warning(f"⚠️ LLM analysis failed, using fallback analysis: {e}")

        return self.fallback_analysis(job_role, questions)

    def _analyze_with_llm(
        self,
        job_role: str,
        questions: List[QuestionRecord],
        full_transcript: str,
        score: int
    ) -> AnalysisResult:
        low = max(0, score - ANALYSIS_SCORE_ADJUSTMENT)
        high = min(100, score + ANALYSIS_SCORE_ADJUSTMENT)
        has_signals = any(record.body_language is not None for record in questions)

        text = run_chain(self._get_analysis_chain(), {
            "job_role": job_role,
            "question_count": len(questions),
            "base_score": score,
            "transcript": full_transcript,
            "min_score": low,
            "max_score": high,
            "body_language_note": BODY_LANGUAGE_NOTE if has_signals else ""
        })
        parsed = parse_structured_response(text, AnalysisResponse)

        final_score = score if parsed.final_score is None else parsed.final_score
        final_score = int(max(low, min(high, math.floor(final_score + 0.5))))
        summary = parsed.summary or "Good effort overall."

        logger.info(f"✅ Analysis complete. Base score: {score}, final score: {final_score}")
        return AnalysisResult(
            overall_score=final_score,
            strengths=parsed.strengths,
            improvements=parsed.weaknesses,
            recommendations=parsed.recommendations,
            summary=summary,
            detailed_feedback=summary,
            resources=parsed.resources or default_resources(job_role),
            courses=parsed.courses or default_courses(job_role),
            source="llm"
        )

    def fallback_analysis(self, job_role: str, questions: Sequence[QuestionRecord]) -> AnalysisResult:
        """
        Templated analysis built only from the session's own data.

        The score is exactly the penalty-based base score.
        """
        questions = list(questions)
        score = base_score(questions)
        status = readiness_status(score)
        total = len(questions)

        strengths: List[str] = []
        improvements: List[str] = []

        for i, record in enumerate(questions, start=1):
            penalty = question_penalty(record)
            if penalty <= PENALTY_CORRECT:
                strengths.append(f"Strong answer to question {i} (\"{_short(record.question)}\")")
            elif penalty >= PENALTY_SHORT:
                improvements.append(f"Revisit question {i} (\"{_short(record.question)}\") and prepare a fuller answer")

        answers = [record.transcript or "" for record in questions]
        avg_words = sum(word_count(a) for a in answers) / total if total else 0
        structured = sum(1 for a in answers if has_structure(a))
        illustrated = sum(1 for a in answers if has_examples(a))
        technical = sum(1 for a in answers if _uses_technical_terms(a))

        if total:
            if avg_words > 30:
                strengths.append(f"You provided detailed answers averaging {round(avg_words)} words")
            elif avg_words > 15:
                improvements.append(f"Your answers averaged {round(avg_words)} words - expand to 40-60 words for more depth")
            else:
                improvements.append(f"Your answers were quite brief ({round(avg_words)} words on average) - aim for 40-60 words with specific examples")

            if structured >= total * 0.5:
                strengths.append(f"You structured {structured} of {total} answers with a clear logical flow")
            else:
                improvements.append(f"{structured} of {total} answers had clear structure - organize thoughts with \"first, then, finally\" or \"because, therefore\"")

            if illustrated >= total * 0.4:
                strengths.append(f"You used concrete examples in {illustrated} answers")
            else:
                improvements.append(f"You used examples in {illustrated} of {total} answers - add specific projects or situations")

            if technical >= total * 0.5:
                strengths.append(f"You used technical terminology in {technical} answers, showing familiarity with {job_role} concepts")
            else:
                improvements.append(f"Only {technical} of {total} answers used technical terminology relevant to {job_role}")

        tip = body_language_tip(questions)
        if tip:
            improvements.append(tip)

        recommendations = [
            "Practice answering interview questions out loud to improve fluency",
            "Prepare 3-5 specific examples from your experience using the STAR method",
            "Record yourself answering questions and listen for clarity and structure",
            "Research the company and role thoroughly to tailor your answers",
            "Practice giving longer, more detailed responses" if avg_words < 30
            else "Continue practicing to maintain detail while improving precision",
        ]

        summary = self._summary(score, status, total, avg_words, structured)
        breakdown = "\n".join(
            f"Q{i} ({record.difficulty.value}): "
            f"{record.evaluation.value if record.evaluation else 'not evaluated'}, penalty {question_penalty(record):g}"
            for i, record in enumerate(questions, start=1)
        )

        logger.info(f"Fallback analysis: score {score} ({status.value}) over {total} questions")
        return AnalysisResult(
            overall_score=score,
            strengths=strengths[:6],
            improvements=improvements[:6],
            recommendations=recommendations,
            summary=summary,
            detailed_feedback=f"{summary}\n\n{breakdown}".strip(),
            resources=default_resources(job_role),
            courses=default_courses(job_role),
            source="fallback"
        )

    @staticmethod
    def _summary(score: int, status: ReadinessStatus, total: int, avg_words: float, structured: int) -> str:
        depth = "good depth and detail" if avg_words > 30 else "room for more detail"
        organization = (
            "You organized your thoughts well." if total and structured >= total * 0.5
            else "Focus on structuring your answers."
        )
        if status == ReadinessStatus.READY:
            return f"You scored {score}/100 and are ready for the real interview. Your answers showed {depth}. {organization}"
        if status == ReadinessStatus.NEEDS_PRACTICE:
            return f"You scored {score}/100. A little more practice will get you there; your answers showed {depth}. {organization}"
        return f"You scored {score}/100. Keep practicing: aim for complete, detailed answers with concrete examples. {organization}"


# Singleton instance
_session_analyzer = None


def get_session_analyzer(llm=None) -> SessionAnalyzer:
    """Get or create session analyzer instance (singleton)."""
    global _session_analyzer
    if _session_analyzer is None:
        _session_analyzer = SessionAnalyzer(llm=llm)
    return _session_analyzer
