"""
FastAPI request and response models.
"""
from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field

from ..interview.models import (
    BodyLanguageSignals,
    Difficulty,
    Evaluation,
    InterviewSession,
    SessionStatus
)
from ..interview.session_manager import FinalResults
from ..utils.config import DEFAULT_MAX_QUESTIONS, MAX_QUESTIONS_LIMIT


class StartInterviewRequest(BaseModel):
    """Request model for starting an interview practice session."""
    candidate_id: str = Field(..., min_length=1, description="Candidate starting the session")
    job_role: str = Field(..., min_length=1, description="Role being practiced")
    skills: List[str] = Field(default_factory=list, description="Skills to focus on")
    candidate_name: Optional[str] = Field(None, description="Name used in the feedback email")
    candidate_email: Optional[str] = Field(None, description="Feedback email recipient")
    max_questions: int = Field(
        DEFAULT_MAX_QUESTIONS, ge=1, le=MAX_QUESTIONS_LIMIT, description="Number of questions"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "candidate_id": "cand-42",
                "job_role": "Backend Developer",
                "skills": ["Python", "PostgreSQL", "Docker"],
                "candidate_name": "Sam Lee",
                "candidate_email": "sam.lee@example.com",
                "max_questions": 6
            }
        }


class StartInterviewResponse(BaseModel):
    session_id: str
    first_question: str
    difficulty: Difficulty
    question_number: int
    max_questions: int


class SubmitAnswerRequest(BaseModel):
    """Request model for answering the current question."""
    transcript: Union[str, List[Any], None] = Field(
        None, description="Answer text, or a list of transcript segments"
    )
    body_language: Optional[BodyLanguageSignals] = Field(
        None, description="Optional client-side body language signals"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "transcript": "First I profile the slow query, then I add an index because...",
                "body_language": {"eye_contact": "high", "movement": "low", "posture": "stable"}
            }
        }


class SubmitAnswerResponse(BaseModel):
    end_interview: bool
    question_number: int
    next_question: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    hint: Optional[str] = None
    final_results: Optional[FinalResults] = None
    closing_message: Optional[str] = None


class QuestionView(BaseModel):
    """One asked question as shown to the candidate (no confidence level)."""
    question: str
    difficulty: Difficulty
    answer: Optional[str] = None
    evaluation: Optional[Evaluation] = None
    penalty: Optional[float] = None
    timestamp: datetime


class SessionView(BaseModel):
    session_id: str
    candidate_id: str
    job_role: str
    skills: List[str]
    status: SessionStatus
    asked_count: int
    max_questions: int
    questions: List[QuestionView]
    final_results: Optional[FinalResults] = None
    created_at: datetime
    completed_at: Optional[datetime] = None

    @classmethod
    def from_session(cls, session: InterviewSession) -> "SessionView":
        return cls(
            session_id=session.session_id,
            candidate_id=session.candidate_id,
            job_role=session.job_role,
            skills=session.skills,
            status=session.status,
            asked_count=session.asked_count,
            max_questions=session.max_questions,
            questions=[
                QuestionView(
                    question=record.question,
                    difficulty=record.difficulty,
                    answer=record.transcript,
                    evaluation=record.evaluation,
                    penalty=record.penalty,
                    timestamp=record.timestamp
                )
                for record in session.questions
            ],
            final_results=FinalResults.from_analysis(session.ai_analysis) if session.ai_analysis else None,
            created_at=session.created_at,
            completed_at=session.completed_at
        )


class SessionSummary(BaseModel):
    session_id: str
    job_role: str
    status: SessionStatus
    asked_count: int
    max_questions: int
    prep_score: Optional[int] = None
    created_at: datetime

    @classmethod
    def from_session(cls, session: InterviewSession) -> "SessionSummary":
        return cls(
            session_id=session.session_id,
            job_role=session.job_role,
            status=session.status,
            asked_count=session.asked_count,
            max_questions=session.max_questions,
            prep_score=session.ai_analysis.overall_score if session.ai_analysis else None,
            created_at=session.created_at
        )


class PracticeQuestionsRequest(BaseModel):
    job_role: str = Field(..., min_length=1)
    skills: List[str] = Field(default_factory=list)
    difficulty: Difficulty = Difficulty.MEDIUM
    count: int = Field(5, ge=1, le=MAX_QUESTIONS_LIMIT)


class PracticeQuestionsResponse(BaseModel):
    job_role: str
    difficulty: Difficulty
    questions: List[str]


class MatchRequest(BaseModel):
    """Request model for resume / job description skill matching."""
    resume_text: str = Field(..., description="Resume text")
    job_description: str = Field(..., description="Job description text")

    class Config:
        json_schema_extra = {
            "example": {
                "resume_text": "Backend developer with 4 years of Python, Django and PostgreSQL.",
                "job_description": "We need Python, Django, Docker and AWS experience."
            }
        }


class MatchResponse(BaseModel):
    match_score: int = Field(..., ge=0, le=100)
    matching_skills: List[str]
    missing_skills: List[str]
    extra_skills: List[str]
    total_job_skills: int
    total_resume_skills: int
    reason: str
    resume_preview: str


class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str = Field(..., description="Service status")
    llm_ready: bool = Field(..., description="Whether the LLM is configured")
    email_enabled: bool = Field(..., description="Whether feedback emails can be sent")
