"""Push-to-talk recording session.

The microphone is a mutually exclusive resource: starting a new recording
always tears down the previous recognition task first. Partial transcripts
overwrite a single most-recent slot, which is consumed once on stop.
Each start gets a new session id; transcripts delivered by a task from an
earlier session are ignored.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from cass_core.infrastructure.logging.logger import logger
from cass_core.speech.base import MicrophonePermission, RecognitionTask, SpeechRecognizer


class RecordingSession:
    def __init__(
        self,
        recognizer: SpeechRecognizer,
        permission: MicrophonePermission,
        on_final: Optional[Callable[[str], object]] = None,
    ):
        self._recognizer = recognizer
        self._permission = permission
        self._on_final = on_final
        self._lock = threading.Lock()
        self._task: Optional[RecognitionTask] = None
        self._latest = ""
        self._session_id = 0
        self.is_recording = False

    @property
    def latest_transcript(self) -> str:
        with self._lock:
            return self._latest

    def start(self) -> bool:
        """Start listening. Returns False when the mic is not authorized or recognition is unavailable."""

        if not self._permission.authorized:
            logger.warning("Microphone permission not granted")
            return False
        if not self._recognizer.is_available:
            logger.warning("Speech recognition not available")
            return False
        self._teardown()
        with self._lock:
            self._latest = ""
            self._session_id += 1
            session_id = self._session_id
        self._task = self._recognizer.start(lambda text: self._on_transcript(session_id, text))
        self.is_recording = True
        logger.info("Started recording")
        return True

    def stop(self) -> str:
        """Stop listening and hand back the final transcript (empty if nothing was heard)."""

        self._teardown()
        self.is_recording = False
        with self._lock:
            # late results from the stopped task no longer count
            self._session_id += 1
            text, self._latest = self._latest, ""
        logger.info("Stopped recording", extra={"extra": {"transcript_chars": len(text)}})
        return text

    def toggle(self) -> Optional[str]:
        """Push-to-talk: start when idle; when recording, stop and deliver the transcript."""

        if not self.is_recording:
            self.start()
            return None
        text = self.stop()
        if text and self._on_final is not None:
            self._on_final(text)
        return text

    def _on_transcript(self, session_id: int, text: str) -> None:
        if not text:
            return
        with self._lock:
            if session_id != self._session_id:
                logger.debug("Dropped transcript from a cancelled recognition task")
                return
            if text != self._latest:
                self._latest = text

    def _teardown(self) -> None:
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
