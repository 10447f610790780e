"""Narrator: cloud speech with on-device fallback.

A call to ``speak`` plays through exactly one path. The cloud path asks the
text-to-speech function for audio and plays it through the output backend;
the device path synthesizes sentence-bounded chunks locally. Cloud failures
fall back to the device path with an info notice; device chunk failures are
logged and skipped; only a total failure reaches ``on_error``.
"""

import logging
import threading
from typing import Callable, Optional

from palace.config import settings
from palace.modules.narration.backends import AudioOutput, SpeechSynthesizer, silent_wav
from palace.modules.narration.chunking import chunk_text
from palace.modules.narration.errors import NarrationError, RemoteTimeout
from palace.modules.narration.handles import AudioHandle, HandleRegistry
from palace.modules.narration.network import ONLINE, NetworkMonitor
from palace.modules.narration.remote import RemoteTTSClient

logger = logging.getLogger(__name__)

MODE_AUTO = "auto"
MODE_CLOUD = "cloud"
MODE_DEVICE = "device"

MODE_ALIASES = {
    "auto": MODE_AUTO,
    "cloud": MODE_CLOUD,
    "speechify": MODE_CLOUD,
    "elevenlabs": MODE_CLOUD,
    "openai": MODE_CLOUD,
    "device": MODE_DEVICE,
    "browser": MODE_DEVICE,
}

IDLE = "idle"
LOADING = "loading"
PLAYING = "playing"
ENDED = "ended"
ERROR = "error"

MIN_RATE = 0.5
MAX_RATE = 2.0


def normalize_mode(mode: str) -> str:
    try:
        return MODE_ALIASES[(mode or MODE_AUTO).lower()]
    except KeyError:
        raise ValueError(f"Unknown narration mode: {mode}")


class Narrator:
    def __init__(
        self,
        remote: RemoteTTSClient,
        synthesizer: SpeechSynthesizer,
        output: AudioOutput,
        network: NetworkMonitor,
        registry: Optional[HandleRegistry] = None,
        mode: Optional[str] = None,
        voice: Optional[str] = None,
        chunk_chars: Optional[int] = None,
        chunk_pause_ms: Optional[int] = None,
        on_start: Optional[Callable[[], None]] = None,
        on_end: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[str], None]] = None,
        on_notice: Optional[Callable[[str, str], None]] = None,
    ):
        self.remote = remote
        self.synthesizer = synthesizer
        self.output = output
        self.network = network
        self.registry = registry or HandleRegistry()
        self.mode = normalize_mode(mode or settings.narration_mode)
        self.voice = voice or settings.narration_default_voice
        self.chunk_chars = chunk_chars or settings.narration_chunk_chars
        self.chunk_pause = (chunk_pause_ms if chunk_pause_ms is not None else settings.narration_chunk_pause_ms) / 1000
        self.on_start = on_start
        self.on_end = on_end
        self.on_error = on_error
        self.on_notice = on_notice

        self._lock = threading.Lock()
        self._cancel = threading.Event()
        self._state = IDLE
        self._rate = 1.0
        self._unlocked = False
        self._session_started = False
        self.current_path: Optional[str] = None
        self.was_cached = False

    # State

    @property
    def state(self) -> str:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state == PLAYING

    @property
    def unlocked(self) -> bool:
        return self._unlocked

    @property
    def rate(self) -> float:
        return self._rate

    @rate.setter
    def rate(self, value: float) -> None:
        if not MIN_RATE <= value <= MAX_RATE:
            raise ValueError(f"Playback rate must be between {MIN_RATE} and {MAX_RATE}")
        self._rate = value

    def _set_state(self, state: str) -> None:
        logger.debug(f"Narration state {self._state} -> {state}")
        self._state = state

    def notify(self, level: str, message: str) -> None:
        getattr(logger, "error" if level == "error" else "info")(message)
        if self.on_notice:
            self.on_notice(level, message)

    def _started(self) -> None:
        if self._state != PLAYING:
            self._set_state(PLAYING)
            if not self._session_started:
                self._session_started = True
                if self.on_start:
                    self.on_start()

    # Public API

    def speak(self, text: str, voice: Optional[str] = None, book: Optional[str] = None,
              chapter: Optional[int] = None, verse: Optional[int] = None, use_cache: bool = True) -> bool:
        """Narrate text, blocking until playback ends or stop() is called.

        Returns True when audio was played. Never raises for playback failures.
        """
        if not text or not text.strip():
            self.notify("error", "No text to speak")
            return False

        cancel = self.start_session()
        played = False
        try:
            if self.should_use_device():
                logger.info("Using on-device speech (offline or requested)")
                played = self.play_device(text, cancel)
            else:
                try:
                    played = self.play_cloud(text, voice, book, chapter, verse, use_cache, cancel)
                except Exception as e:
                    if cancel.is_set():
                        played = False
                    else:
                        logger.warning(f"Cloud speech failed, falling back to on-device speech: {e}")
                        self.notify("info", "Using offline voice mode")
                        played = self.play_device(text, cancel)
        except NarrationError as e:
            if not cancel.is_set():
                self.fail(str(e))
                return False
        finally:
            stopped = cancel.is_set()
            cancel.set()

        return self.end_session(played, stopped)

    def start_session(self) -> threading.Event:
        """Stop anything in progress and return the cancel event for a new playback session"""
        self.stop()
        cancel = threading.Event()
        with self._lock:
            self._cancel = cancel
        self.was_cached = False
        self.current_path = None
        self._session_started = False
        self._set_state(LOADING)
        return cancel

    def stop(self) -> None:
        """Halt playback, cancel pending chunks and release every audio handle"""
        with self._lock:
            self._cancel.set()
        for backend in (self.output, self.synthesizer):
            try:
                backend.stop()
            except Exception as e:
                logger.debug(f"Error stopping {type(backend).__name__}: {e}")
        self.registry.release_all()
        if self._state in (LOADING, PLAYING):
            self._set_state(IDLE)

    def should_use_device(self) -> bool:
        if self.mode == MODE_DEVICE:
            return True
        if self.mode == MODE_CLOUD:
            return False
        return self.network.is_offline

    def unlock(self) -> bool:
        """Play a near-silent clip at zero volume once before the first real playback"""
        if self._unlocked:
            return True
        handle = self.registry.create(silent_wav(), suffix=".wav")
        try:
            self.output.play(handle.path, rate=1.0, volume=0)
            self._unlocked = True
            logger.debug("Audio output unlocked")
        except Exception as e:
            logger.info(f"Audio unlock attempt failed: {e}")
        finally:
            handle.release()
        return self._unlocked

    # Playback paths

    def fetch_handle(self, text: str, voice: Optional[str] = None, book: Optional[str] = None,
                     chapter: Optional[int] = None, verse: Optional[int] = None,
                     use_cache: bool = True) -> AudioHandle:
        """Fetch cloud audio into a handle; on timeout the network is marked slow.

        The handle's ``cached`` flag records whether the server answered from its audio cache.
        """
        try:
            audio = self.remote.fetch(text, voice or self.voice, book, chapter, verse, use_cache)
        except RemoteTimeout:
            self.network.mark_slow()
            raise
        if self.network.status != ONLINE:
            self.network.mark_online()
        if not audio.data:
            raise NarrationError("No audio content received")
        handle = self.registry.create(audio.data)
        handle.cached = audio.cached
        return handle

    def play_handle(self, handle: AudioHandle, cancel: threading.Event) -> bool:
        """Play and release a handle. Returns False if cancelled before playback."""
        try:
            if cancel.is_set():
                return False
            self.unlock()
            self.was_cached = handle.cached
            self._started()
            self.output.play(handle.path, rate=self._rate)
            return True
        except Exception as e:
            if cancel.is_set():
                return False
            raise NarrationError(f"Audio playback failed: {e}") from e
        finally:
            handle.release()

    def play_cloud(self, text: str, voice: Optional[str], book: Optional[str], chapter: Optional[int],
                   verse: Optional[int], use_cache: bool, cancel: threading.Event) -> bool:
        logger.info("Attempting cloud speech")
        handle = self.fetch_handle(text, voice, book, chapter, verse, use_cache)
        if cancel.is_set():
            handle.release()
            return False
        self.current_path = MODE_CLOUD
        return self.play_handle(handle, cancel)

    def play_device(self, text: str, cancel: threading.Event,
                    interrupt: Optional[threading.Event] = None) -> bool:
        """Speak chunk by chunk. Raises NarrationError only if every chunk failed.

        Setting ``interrupt`` ends this text early without cancelling the session.
        """
        chunks = chunk_text(text, self.chunk_chars)
        self.current_path = MODE_DEVICE
        spoken = 0
        failed = 0

        def halted() -> bool:
            return cancel.is_set() or (interrupt is not None and interrupt.is_set())

        for index, chunk in enumerate(chunks):
            if halted():
                break
            if index and (cancel.wait(self.chunk_pause) or halted()):
                break
            self._started()
            try:
                self.synthesizer.speak(chunk, rate=self._rate)
                spoken += 1
            except Exception as e:
                failed += 1
                logger.error(f"On-device speech failed for chunk {index + 1}/{len(chunks)}: {e}")
        if failed and not spoken and not halted():
            raise NarrationError("Speech synthesis failed")
        return spoken > 0

    def fail(self, message: str) -> None:
        """Surface a total failure once: error state, error notice and on_error"""
        logger.error(f"Narration failed: {message}")
        self._set_state(ERROR)
        self.notify("error", message)
        if self.on_error:
            self.on_error(message)

    def end_session(self, played: bool, stopped: bool) -> bool:
        self._set_state(IDLE if stopped or not played else ENDED)
        if self._session_started and self.on_end:
            self.on_end()
        return played
