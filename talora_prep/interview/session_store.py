"""
JSON-file persistence for interview sessions.

One file per session; each save replaces the whole document atomically.
"""

from typing import List, Optional
from pathlib import Path
import os
import re
import tempfile

from pydantic import ValidationError

from .errors import SessionNotFoundError
from .models import InterviewSession
from ..utils.config import SESSIONS_DIR
from ..utils.logger import setup_logger

logger = setup_logger("session_store")

_SESSION_ID = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]{0,127}$")


class SessionStore:
    """
    Stores sessions in JSON files (can be upgraded to database later).
    """

    def __init__(self, storage_dir: Optional[Path] = None):
        """
        Initialize session store.

        Args:
            storage_dir: Directory to store session files. Default: SESSIONS_DIR
        """
        if storage_dir is None:
            storage_dir = SESSIONS_DIR

        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

        logger.info(f"SessionStore initialized, storage: {self.storage_dir}")

    def _path(self, session_id: str) -> Path:
        if not session_id or not _SESSION_ID.match(session_id):
            raise SessionNotFoundError(session_id)
        return self.storage_dir / f"{session_id}.json"

    def exists(self, session_id: str) -> bool:
        try:
            return self._path(session_id).exists()
        except SessionNotFoundError:
            return False

    def load(self, session_id: str) -> InterviewSession:
        """
        Load a session.

        Raises:
            SessionNotFoundError: If no session file exists for session_id
        """
        session_file = self._path(session_id)
        if not session_file.exists():
            raise SessionNotFoundError(session_id)

        try:
            with open(session_file, 'r', encoding='utf-8') as f:
                return InterviewSession.model_validate_json(f.read())
        except (OSError, ValidationError) as e:
            logger.error(f"Error loading session {session_id}: {e}")
            raise

    def save(self, session: InterviewSession):
        """Write the whole session document, replacing any previous version."""
        session_file = self._path(session.session_id)
        fd, tmp_path = tempfile.mkstemp(dir=self.storage_dir, suffix=".tmp")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(session.model_dump_json(indent=2))
            os.replace(tmp_path, session_file)
        except Exception as e:
            logger.error(f"Error saving session {session.session_id}: {e}")
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def list_by_candidate(self, candidate_id: str) -> List[InterviewSession]:
        """All sessions of one candidate, most recent first."""
        sessions = []
        for session_file in self.storage_dir.glob("*.json"):
            try:
                with open(session_file, 'r', encoding='utf-8') as f:
                    session = InterviewSession.model_validate_json(f.read())
            except (OSError, ValidationError) as e:
                logger.warning(f"⚠️ Skipping unreadable session file {session_file.name}: {e}")
                continue
            if session.candidate_id == candidate_id:
                sessions.append(session)
        return sorted(sessions, key=lambda s: s.created_at, reverse=True)
