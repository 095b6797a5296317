"""
Adaptive interview practice.

This module provides:
- Answer evaluation with heuristic fallback
- Adaptive question selection across difficulty tiers
- Session aggregation into a readiness score
- Session lifecycle management
"""

from .errors import InterviewError, SessionNotFoundError, InvalidSessionStateError
from .models import (
    Difficulty,
    Evaluation,
    ConfidenceLevel,
    SessionStatus,
    ReadinessStatus,
    readiness_status,
    BodyLanguageSignals,
    AnswerAssessment,
    SelectedQuestion,
    QuestionRecord,
    AnalysisResult,
    InterviewSession
)
from .difficulty import resolve_next_difficulty
from .answer_evaluator import AnswerEvaluator, get_answer_evaluator, detect_confidence_level
from .question_selector import QuestionSelector, get_question_selector
from .analyzer import SessionAnalyzer, get_session_analyzer, build_full_transcript
from .session_store import SessionStore
from .session_manager import (
    InterviewSessionManager,
    get_session_manager,
    StartResult,
    SubmitResult,
    FinalResults
)

__all__ = [
    'InterviewError',
    'SessionNotFoundError',
    'InvalidSessionStateError',
    'Difficulty',
    'Evaluation',
    'ConfidenceLevel',
    'SessionStatus',
    'ReadinessStatus',
    'readiness_status',
    'BodyLanguageSignals',
    'AnswerAssessment',
    'SelectedQuestion',
    'QuestionRecord',
    'AnalysisResult',
    'InterviewSession',
    'resolve_next_difficulty',
    'AnswerEvaluator',
    'get_answer_evaluator',
    'detect_confidence_level',
    'QuestionSelector',
    'get_question_selector',
    'SessionAnalyzer',
    'get_session_analyzer',
    'build_full_transcript',
    'SessionStore',
    'InterviewSessionManager',
    'get_session_manager',
    'StartResult',
    'SubmitResult',
    'FinalResults'
]
