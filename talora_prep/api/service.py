"""
Service layer for initializing and managing interview preparation components.
"""
from pathlib import Path
from typing import Any, Optional

from ..interview import (
    AnswerEvaluator,
    InterviewSessionManager,
    QuestionSelector,
    SessionAnalyzer,
    SessionStore
)
from ..llm import try_initialize_llm
from ..notifications import EmailService
from ..utils.logger import setup_logger

logger = setup_logger("api_service")


class InterviewPrepService:
    """
    Service class that wires the interview components together.

    The LLM and the notifier are created once here and injected into every
    component that uses them.
    """

    def __init__(self):
        """Initialize the service (components created in initialize())."""
        self.llm = None
        self.notifier = None
        self.selector = None
        self.manager = None
        self._initialized = False

    def initialize(
        self,
        llm: Optional[Any] = None,
        use_llm: bool = True,
        storage_dir: Optional[Path] = None,
        notifier: Optional[Any] = None
    ) -> bool:
        """
        Initialize the interview preparation service.

        Args:
            llm: LLM to use. If None and use_llm is True, Groq is configured from the environment.
            use_llm: If False, every component runs on its deterministic fallback
            storage_dir: Session storage directory. Default: SESSIONS_DIR
            notifier: Feedback notifier. Default: EmailService()

        Returns:
            True if initialization successful, False otherwise
        """
        try:
            logger.info("Initializing Interview Prep Service...")

            if llm is None and use_llm:
                llm = try_initialize_llm()
            self.llm = llm
            self.notifier = notifier if notifier is not None else EmailService()

            self.selector = QuestionSelector(llm=self.llm)
            self.manager = InterviewSessionManager(
                store=SessionStore(storage_dir),
                evaluator=AnswerEvaluator(llm=self.llm),
                selector=self.selector,
                analyzer=SessionAnalyzer(llm=self.llm),
                notifier=self.notifier
            )

            self._initialized = True
            logger.info(f"✅ Interview Prep Service initialized (llm={'on' if self.llm is not None else 'off'})")
            return True

        except Exception as e:
            logger.error(f"❌ Failed to initialize service: {e}")
            self._initialized = False
            return False

    def is_ready(self) -> bool:
        """Check if service is ready to use."""
        return self._initialized and self.manager is not None

    def email_enabled(self) -> bool:
        return bool(getattr(self.notifier, "enabled", self.notifier is not None))


# Global service instance
_service_instance: Optional[InterviewPrepService] = None


def get_service() -> InterviewPrepService:
    """Get or create the global service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = InterviewPrepService()
    return _service_instance
