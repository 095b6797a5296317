"""
Domain models for adaptive interview sessions.

An InterviewSession is append-only: each answered turn fills in the current
QuestionRecord and, unless the session is finished, appends the next one.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
import uuid

from pydantic import BaseModel, Field, field_validator

from ..utils.config import (
    DEFAULT_MAX_QUESTIONS,
    MAX_PENALTY,
    READY_THRESHOLD,
    NEEDS_PRACTICE_THRESHOLD
)


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


DIFFICULTY_ORDER = [Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD]


class Evaluation(str, Enum):
    CORRECT = "correct"
    PARTIAL = "partial"
    INCORRECT = "incorrect"


class ConfidenceLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SessionStatus(str, Enum):
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class ReadinessStatus(str, Enum):
    READY = "READY"
    NEEDS_PRACTICE = "NEEDS PRACTICE"
    NOT_READY = "NOT READY"


def readiness_status(score: float) -> ReadinessStatus:
    """
    Map an overall score (0-100) to the readiness label.

    score >= 80 -> READY, 60 <= score < 80 -> NEEDS PRACTICE, else NOT READY.
    """
    if score >= READY_THRESHOLD:
        return ReadinessStatus.READY
    if score >= NEEDS_PRACTICE_THRESHOLD:
        return ReadinessStatus.NEEDS_PRACTICE
    return ReadinessStatus.NOT_READY


def clamp_penalty(value: Any, default: float) -> float:
    try:
        penalty = float(value)
    except (TypeError, ValueError):
        return default
    return max(0.0, min(float(MAX_PENALTY), penalty))


class BodyLanguageSignals(BaseModel):
    """Optional client-side observations sent alongside an answer."""
    eye_contact: Optional[str] = Field(None, description="low / medium / high")
    movement: Optional[str] = Field(None, description="low / medium / high")
    posture: Optional[str] = Field(None, description="stable / unstable")

    @field_validator("eye_contact", "movement", "posture", mode="before")
    @classmethod
    def _lower(cls, value):
        if isinstance(value, str):
            return value.strip().lower() or None
        return value

    def suggests_slowing_down(self) -> bool:
        return self.eye_contact == "low" or self.movement == "high"


class AnswerAssessment(BaseModel):
    """Result of evaluating one answer."""
    evaluation: Evaluation
    penalty: float = Field(..., ge=0, le=MAX_PENALTY)
    confidence_level: ConfidenceLevel = ConfidenceLevel.MEDIUM
    reason: Optional[str] = None
    needs_hint: bool = False
    hint: Optional[str] = None
    source: str = "llm"  # "llm" or "fallback"


class SelectedQuestion(BaseModel):
    """Question chosen for the next turn."""
    question: str
    difficulty: Difficulty
    source: str = "llm"


class QuestionRecord(BaseModel):
    question: str
    difficulty: Difficulty
    transcript: Optional[str] = None
    evaluation: Optional[Evaluation] = None
    penalty: Optional[float] = None
    confidence_level: Optional[ConfidenceLevel] = None
    body_language: Optional[BodyLanguageSignals] = None
    timestamp: datetime = Field(default_factory=datetime.now)
    answered_at: Optional[datetime] = None

    @property
    def answer(self) -> Optional[str]:
        return self.transcript

    @property
    def is_answered(self) -> bool:
        return self.evaluation is not None and self.penalty is not None


class AnalysisResult(BaseModel):
    """Aggregated interview feedback, frozen on the session at completion."""
    overall_score: int = Field(..., ge=0, le=100)
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    summary: str = ""
    detailed_feedback: str = ""
    resources: List[Dict[str, str]] = Field(default_factory=list)
    courses: List[Dict[str, str]] = Field(default_factory=list)
    source: str = "llm"

    @property
    def status(self) -> ReadinessStatus:
        return readiness_status(self.overall_score)


class InterviewSession(BaseModel):
    session_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    candidate_id: str
    candidate_name: Optional[str] = None
    candidate_email: Optional[str] = None
    job_role: str
    skills: List[str] = Field(default_factory=list)
    questions: List[QuestionRecord] = Field(default_factory=list)
    asked_count: int = 0
    max_questions: int = DEFAULT_MAX_QUESTIONS
    status: SessionStatus = SessionStatus.IN_PROGRESS
    full_transcript: Optional[str] = None
    ai_analysis: Optional[AnalysisResult] = None
    fallback_calls: int = 0
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @field_validator("skills", mode="before")
    @classmethod
    def _dedupe_skills(cls, value):
        # Set semantics, first spelling wins
        seen = set()
        skills = []
        for skill in value or []:
            name = str(skill).strip()
            if name and name.lower() not in seen:
                seen.add(name.lower())
                skills.append(name)
        return skills

    @property
    def current_question(self) -> Optional[QuestionRecord]:
        if self.asked_count < 1 or self.asked_count > len(self.questions):
            return None
        return self.questions[self.asked_count - 1]

    @property
    def previous_questions(self) -> List[str]:
        return [record.question for record in self.questions]

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.IN_PROGRESS

    def touch(self):
        self.updated_at = datetime.now()
