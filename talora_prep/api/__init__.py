"""
HTTP API models and service wiring.
"""
from .models import (
    StartInterviewRequest,
    StartInterviewResponse,
    SubmitAnswerRequest,
    SubmitAnswerResponse,
    QuestionView,
    SessionView,
    SessionSummary,
    PracticeQuestionsRequest,
    PracticeQuestionsResponse,
    MatchRequest,
    MatchResponse,
    HealthResponse
)
from .service import InterviewPrepService, get_service

__all__ = [
    'StartInterviewRequest',
    'StartInterviewResponse',
    'SubmitAnswerRequest',
    'SubmitAnswerResponse',
    'QuestionView',
    'SessionView',
    'SessionSummary',
    'PracticeQuestionsRequest',
    'PracticeQuestionsResponse',
    'MatchRequest',
    'MatchResponse',
    'HealthResponse',
    'InterviewPrepService',
    'get_service'
]
