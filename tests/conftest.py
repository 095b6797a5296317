import sys
from pathlib import Path
from typing import Any, List, Optional

import pytest
from langchain_core.language_models import FakeListLLM
from langchain_core.language_models.llms import LLM


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from talora_prep.interview import (  # noqa: E402
    AnswerEvaluator,
    InterviewSessionManager,
    QuestionSelector,
    SessionAnalyzer,
    SessionStore
)


STRONG_ANSWER = (
    "First I profiled the slow API endpoint with our monitoring tools, then I redesigned "
    "the database schema and added a cache layer in Redis. For example, the order query "
    "dropped from two seconds to eighty milliseconds because we removed an extra join. "
    "Finally I wrote integration tests and documented the deployment steps for the team."
)

PARTIAL_ANSWER = "I would write unit tests and review the code with my team before each release."


class OutageLLM(LLM):
    """LLM that always fails, like an unreachable or timed-out provider."""

    calls: int = 0

    @property
    def _llm_type(self) -> str:
        return "outage"

    def _call(self, prompt: str, stop: Optional[List[str]] = None, run_manager: Any = None, **kwargs: Any) -> str:
        self.calls += 1
        raise ConnectionError("LLM provider unreachable")


class RecordingNotifier:
    enabled = True

    def __init__(self):
        self.sent = []

    def send_interview_feedback(self, to_email, candidate_name, job_role, analysis):
        self.sent.append({
            "to": to_email,
            "name": candidate_name,
            "job_role": job_role,
            "analysis": analysis,
        })
        return True


class BrokenNotifier:
    enabled = True

    def send_interview_feedback(self, *args, **kwargs):
        raise RuntimeError("mail server down")


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("GROQ_API_KEY", raising=False)


@pytest.fixture
def scripted_llm():
    def _make(*responses: str) -> FakeListLLM:
        return FakeListLLM(responses=list(responses))
    return _make


@pytest.fixture
def outage_llm() -> OutageLLM:
    return OutageLLM()


@pytest.fixture
def store(tmp_path: Path) -> SessionStore:
    return SessionStore(tmp_path / "sessions")


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def manager(store: SessionStore, notifier: RecordingNotifier) -> InterviewSessionManager:
    """Manager running every component on its deterministic fallback."""
    return InterviewSessionManager(
        store=store,
        evaluator=AnswerEvaluator(),
        selector=QuestionSelector(),
        analyzer=SessionAnalyzer(),
        notifier=notifier
    )


@pytest.fixture
def make_manager(store: SessionStore, notifier: RecordingNotifier):
    """Manager whose components share one injected LLM."""
    def _make(llm, session_notifier=None) -> InterviewSessionManager:
        return InterviewSessionManager(
            store=store,
            evaluator=AnswerEvaluator(llm=llm),
            selector=QuestionSelector(llm=llm),
            analyzer=SessionAnalyzer(llm=llm),
            notifier=session_notifier or notifier
        )
    return _make
