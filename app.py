"""
FastAPI application for Talora interview preparation.

Endpoints:
- POST /interviews/start - Start an adaptive interview practice session
- POST /interviews/{session_id}/answer - Answer the current question
- GET /interviews/{session_id} - Session progress and results
- POST /interviews/{session_id}/abandon - Terminate a session
- GET /candidates/{candidate_id}/interviews - Session history
- POST /practice/questions - Practice question set
- POST /match, POST /match/upload - Resume / job description skill match
- GET /health - Health check
"""
from typing import List

from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from talora_prep.api import (
    HealthResponse,
    InterviewPrepService,
    MatchRequest,
    MatchResponse,
    PracticeQuestionsRequest,
    PracticeQuestionsResponse,
    SessionSummary,
    SessionView,
    StartInterviewRequest,
    StartInterviewResponse,
    SubmitAnswerRequest,
    SubmitAnswerResponse,
    get_service
)
from talora_prep.documents import UnsupportedDocumentError, extract_text_from_bytes
from talora_prep.interview import InvalidSessionStateError, SessionNotFoundError
from talora_prep.matching import analyze_skill_match
from talora_prep.utils.config import MAX_UPLOAD_BYTES
from talora_prep.utils.logger import setup_logger

logger = setup_logger("fastapi_app")

# Create FastAPI app
app = FastAPI(
    title="Talora Interview Prep API",
    description="Adaptive AI interview practice with heuristic fallbacks",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify actual origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Initialize service on startup."""
    logger.info("🚀 Starting Talora Interview Prep API...")
    service = get_service()
    if not service.is_ready() and not service.initialize():
        logger.error("⚠️ Service initialization failed - interview endpoints will not work")


@app.exception_handler(SessionNotFoundError)
async def session_not_found_handler(request: Request, exc: SessionNotFoundError) -> JSONResponse:
    logger.warning(f"Session not found: {exc.session_id}")
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(InvalidSessionStateError)
async def invalid_state_handler(request: Request, exc: InvalidSessionStateError) -> JSONResponse:
    logger.warning(f"Invalid session state: {exc}")
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Something went wrong. Please try again."}
    )


def ready_service(service: InterviewPrepService = Depends(get_service)) -> InterviewPrepService:
    """Service dependency that rejects requests until initialization succeeded."""
    if not service.is_ready():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized. Please check /health endpoint."
        )
    return service


@app.get("/", tags=["General"])
async def root():
    """Root endpoint with API information."""
    return {
        "message": "Talora Interview Prep API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", response_model=HealthResponse, tags=["General"])
async def health_check(service: InterviewPrepService = Depends(get_service)):
    """
    Health check endpoint.

    The API is usable without an LLM; llm_ready only says whether answers are
    scored by the model or by the heuristic fallback.
    """
    return HealthResponse(
        status="healthy" if service.is_ready() else "not ready",
        llm_ready=service.llm is not None,
        email_enabled=service.email_enabled()
    )


@app.post("/interviews/start", response_model=StartInterviewResponse, tags=["Interview"])
def start_interview(request: StartInterviewRequest, service: InterviewPrepService = Depends(ready_service)):
    """
    Start an adaptive interview practice session.

    The first question is always easy.
    """
    try:
        result = service.manager.start_session(
            candidate_id=request.candidate_id,
            job_role=request.job_role,
            skills=request.skills,
            candidate_name=request.candidate_name,
            candidate_email=request.candidate_email,
            max_questions=request.max_questions
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return StartInterviewResponse(**result.model_dump())


@app.post("/interviews/{session_id}/answer", response_model=SubmitAnswerResponse, tags=["Interview"])
def submit_answer(
    session_id: str,
    request: SubmitAnswerRequest,
    service: InterviewPrepService = Depends(ready_service)
):
    """
    Answer the current question.

    Returns the next question, or the final results once the last question
    has been answered. Empty answers are scored, not rejected.
    """
    result = service.manager.submit_answer(session_id, request.transcript, request.body_language)
    return SubmitAnswerResponse(**result.model_dump(exclude={"notification_sent"}))


@app.get("/interviews/{session_id}", response_model=SessionView, tags=["Interview"])
def get_interview(session_id: str, service: InterviewPrepService = Depends(ready_service)):
    """Session progress, answers and (when completed) results."""
    return SessionView.from_session(service.manager.get_session(session_id))


@app.post("/interviews/{session_id}/abandon", response_model=SessionSummary, tags=["Interview"])
def abandon_interview(session_id: str, service: InterviewPrepService = Depends(ready_service)):
    """Terminate an in-progress session."""
    return SessionSummary.from_session(service.manager.abandon_session(session_id))


@app.get("/candidates/{candidate_id}/interviews", response_model=List[SessionSummary], tags=["Interview"])
def list_candidate_interviews(candidate_id: str, service: InterviewPrepService = Depends(ready_service)):
    """Sessions of one candidate, most recent first."""
    return [SessionSummary.from_session(s) for s in service.manager.list_sessions(candidate_id)]


@app.post("/practice/questions", response_model=PracticeQuestionsResponse, tags=["Practice"])
def practice_questions(request: PracticeQuestionsRequest, service: InterviewPrepService = Depends(ready_service)):
    """Distinct practice questions for a role."""
    questions = service.selector.generate_question_set(
        request.job_role, request.skills, request.difficulty, request.count
    )
    return PracticeQuestionsResponse(job_role=request.job_role, difficulty=request.difficulty, questions=questions)


@app.post("/match", response_model=MatchResponse, tags=["Matching"])
def match_resume(request: MatchRequest):
    """Skill match between resume text and a job description."""
    return MatchResponse(**analyze_skill_match(request.resume_text, request.job_description))


@app.post("/match/upload", response_model=MatchResponse, tags=["Matching"])
async def match_uploaded_resume(file: UploadFile = File(...), job_description: str = Form(...)):
    """
    Skill match for an uploaded resume (PDF or plain text).
    """
    content = await file.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty")
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is too large")

    try:
        resume_text = await run_in_threadpool(extract_text_from_bytes, content, file.filename)
    except UnsupportedDocumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error reading uploaded resume {file.filename}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Could not read the uploaded resume")

    logger.info(f"Matching uploaded resume {file.filename} ({len(resume_text)} chars)")
    return MatchResponse(**analyze_skill_match(resume_text, job_description))


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
