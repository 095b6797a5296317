"""
Interview Session Manager.

Drives one adaptive interview practice session:
- Start a session with an easy opening question
- Evaluate each answer, then select the next question or finalize
- Freeze transcript and analysis at completion and notify the candidate

Each operation loads the session, mutates it in memory and saves it once.
"""

from datetime import datetime
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, Field

from .analyzer import SessionAnalyzer, build_full_transcript
from .answer_evaluator import AnswerEvaluator
from .errors import InvalidSessionStateError
from .models import (
    AnalysisResult,
    BodyLanguageSignals,
    Difficulty,
    InterviewSession,
    QuestionRecord,
    ReadinessStatus,
    SessionStatus
)
from .question_selector import QuestionSelector
from .session_store import SessionStore
from ..documents.extractor import transcript_text
from ..utils.config import DEFAULT_MAX_QUESTIONS, MAX_QUESTIONS_LIMIT
from ..utils.logger import setup_logger

logger = setup_logger("session_manager")

CLOSING_MESSAGE = "Thank you for completing the interview practice!"
EMAIL_NOTE = " Your detailed feedback has been sent to your email."


class StartResult(BaseModel):
    session_id: str
    first_question: str
    difficulty: Difficulty
    question_number: int = 1
    max_questions: int


class FinalResults(BaseModel):
    prep_score: int
    status: ReadinessStatus
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    improvement_tips: List[str] = Field(default_factory=list)
    summary: str = ""

    @classmethod
    def from_analysis(cls, analysis: AnalysisResult) -> "FinalResults":
        return cls(
            prep_score=analysis.overall_score,
            status=analysis.status,
            strengths=analysis.strengths,
            weaknesses=analysis.improvements,
            improvement_tips=analysis.recommendations,
            summary=analysis.summary
        )


class SubmitResult(BaseModel):
    end_interview: bool
    question_number: int
    next_question: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    hint: Optional[str] = None
    final_results: Optional[FinalResults] = None
    closing_message: Optional[str] = None
    notification_sent: bool = False


def _rotation_seed(session_id: str) -> int:
    return sum(ord(ch) for ch in session_id)


class InterviewSessionManager:
    """
    Manages adaptive interview sessions.

    Collaborators are injected; the notifier is any object with
    send_interview_feedback(to_email, candidate_name, job_role, analysis) -> bool.
    """

    def __init__(
        self,
        store: Optional[SessionStore] = None,
        evaluator: Optional[AnswerEvaluator] = None,
        selector: Optional[QuestionSelector] = None,
        analyzer: Optional[SessionAnalyzer] = None,
        notifier: Optional[Any] = None
    ):
        self.store = store or SessionStore()
        self.evaluator = evaluator or AnswerEvaluator()
        self.selector = selector or QuestionSelector()
        self.analyzer = analyzer or SessionAnalyzer()
        self.notifier = notifier

        logger.info(f"InterviewSessionManager initialized, storage: {self.store.storage_dir}")

    def start_session(
        self,
        candidate_id: str,
        job_role: str,
        skills: Optional[Iterable[str]] = None,
        candidate_name: Optional[str] = None,
        candidate_email: Optional[str] = None,
        max_questions: int = DEFAULT_MAX_QUESTIONS
    ) -> StartResult:
        """
        Create a session holding one easy opening question.

        Args:
            candidate_id: Owner of the session
            job_role: Role being practiced
            skills: Skills to focus on (deduplicated case-insensitively)
            candidate_name: Used in the feedback email
            candidate_email: Where the feedback email goes. None disables it.
            max_questions: Session length (1-20)

        Returns:
            StartResult with session id and first question

        Raises:
            ValueError: If candidate_id or job_role is blank or max_questions is out of range
        """
        if not candidate_id or not str(candidate_id).strip():
            raise ValueError("candidate_id is required")
        if not job_role or not job_role.strip():
            raise ValueError("job_role is required")
        if not 1 <= int(max_questions) <= MAX_QUESTIONS_LIMIT:
            raise ValueError(f"max_questions must be between 1 and {MAX_QUESTIONS_LIMIT}")

        session = InterviewSession(
            candidate_id=str(candidate_id).strip(),
            candidate_name=candidate_name,
            candidate_email=candidate_email,
            job_role=job_role.strip(),
            skills=list(skills or []),
            max_questions=int(max_questions)
        )

        selected = self.selector.first_question(
            session.job_role, session.skills, rotation=_rotation_seed(session.session_id)
        )
        if selected.source == "fallback":
            session.fallback_calls += 1

        # Opening question is easy regardless of what the selector reports
        session.questions.append(QuestionRecord(question=selected.question, difficulty=Difficulty.EASY))
        session.asked_count = 1
        self.store.save(session)

        logger.info(
            f"Created interview session: {session.session_id} for candidate: {session.candidate_id} "
            f"({session.job_role}, {session.max_questions} questions)"
        )
        return StartResult(
            session_id=session.session_id,
            first_question=selected.question,
            difficulty=Difficulty.EASY,
            max_questions=session.max_questions
        )

    def submit_answer(
        self,
        session_id: str,
        transcript: Any,
        body_language: Optional[BodyLanguageSignals] = None
    ) -> SubmitResult:
        """
        Record the answer to the current question and advance the session.

        Args:
            session_id: Session id
            transcript: Answer text (string or list of transcript segments)
            body_language: Optional client-side signals for this answer

        Returns:
            SubmitResult with either the next question or the final results

        Raises:
            SessionNotFoundError: Unknown session id
            InvalidSessionStateError: Session is completed or abandoned
        """
        session = self.store.load(session_id)
        if not session.is_active:
            raise InvalidSessionStateError(session_id, session.status.value, "answer")

        record = session.current_question
        if record is None or record.is_answered:
            raise InvalidSessionStateError(session_id, session.status.value, "answer")

        answer = transcript_text(transcript)
        if isinstance(body_language, dict):
            body_language = BodyLanguageSignals.model_validate(body_language)

        assessment = self.evaluator.evaluate(session.job_role, record.question, answer, session.skills)

        record.transcript = answer
        record.evaluation = assessment.evaluation
        record.penalty = assessment.penalty
        record.confidence_level = assessment.confidence_level
        record.body_language = body_language
        record.answered_at = datetime.now()

        logger.info(
            f"[{session_id}] Q{session.asked_count}/{session.max_questions}: "
            f"{assessment.evaluation.value}, penalty {assessment.penalty:g} ({assessment.source}, {len(answer)} chars)"
        )

        if session.asked_count >= session.max_questions:
            return self._finalize(session)

        selected = self.selector.next_question(
            session.job_role,
            session.skills,
            assessment.evaluation,
            session.asked_count,
            session.previous_questions,
            current_difficulty=record.difficulty,
            confidence=assessment.confidence_level,
            body_language=body_language,
            previous_answer=answer,
            max_questions=session.max_questions,
            rotation=session.fallback_calls
        )
        if selected.source == "fallback":
            session.fallback_calls += 1

        session.questions.append(QuestionRecord(question=selected.question, difficulty=selected.difficulty))
        session.asked_count += 1
        session.touch()
        self.store.save(session)

        return SubmitResult(
            end_interview=False,
            question_number=session.asked_count,
            next_question=selected.question,
            difficulty=selected.difficulty,
            hint=assessment.hint if assessment.needs_hint else None
        )

    def _finalize(self, session: InterviewSession) -> SubmitResult:
        """Freeze transcript and analysis, save, then notify."""
        session.full_transcript = build_full_transcript(session.questions)
        session.ai_analysis = self.analyzer.analyze(session.job_role, session.questions, session.full_transcript)
        session.status = SessionStatus.COMPLETED
        session.completed_at = datetime.now()
        session.touch()
        self.store.save(session)

        analysis = session.ai_analysis
        logger.info(
            f"Completed interview session: {session.session_id} "
            f"(score {analysis.overall_score}, {analysis.status.value})"
        )

        sent = self._notify(session)
        return SubmitResult(
            end_interview=True,
            question_number=session.asked_count,
            final_results=FinalResults.from_analysis(analysis),
            closing_message=CLOSING_MESSAGE + (EMAIL_NOTE if sent else ""),
            notification_sent=sent
        )

    def _notify(self, session: InterviewSession) -> bool:
        """Send the feedback email. Failures never affect the completed session."""
        if self.notifier is None or not session.candidate_email:
            return False
        try:
            return bool(self.notifier.send_interview_feedback(
                session.candidate_email,
                session.candidate_name,
                session.job_role,
                session.ai_analysis
            ))
        except Exception as e:
            logger.error(f"❌ Feedback notification failed for session {session.session_id}: {e}")
            return False

    def get_session(self, session_id: str) -> InterviewSession:
        """Load a session. Raises SessionNotFoundError if unknown."""
        return self.store.load(session_id)

    def list_sessions(self, candidate_id: str) -> List[InterviewSession]:
        """All sessions of a candidate, most recent first."""
        return self.store.list_by_candidate(candidate_id)

    def abandon_session(self, session_id: str) -> InterviewSession:
        """
        Mark an in-progress session as abandoned.

        Abandoning an abandoned session is a no-op.

        Raises:
            SessionNotFoundError: Unknown session id
            InvalidSessionStateError: Session is already completed
        """
        session = self.store.load(session_id)
        if session.status == SessionStatus.ABANDONED:
            return session
        if session.status == SessionStatus.COMPLETED:
            raise InvalidSessionStateError(session_id, session.status.value, "abandon")

        session.status = SessionStatus.ABANDONED
        session.touch()
        self.store.save(session)
        logger.info(f"Abandoned interview session: {session_id} after {session.asked_count} questions")
        return session


# Singleton instance
_session_manager = None


def get_session_manager(**kwargs) -> InterviewSessionManager:
    """
    Get or create session manager instance (singleton).

    Args:
        **kwargs: Collaborators passed to InterviewSessionManager on first call

    Returns:
        InterviewSessionManager instance
    """
    global _session_manager
    if _session_manager is None:
        _session_manager = InterviewSessionManager(**kwargs)
    return _session_manager
