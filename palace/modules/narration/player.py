"""Sequential verse playback with look-ahead prefetch."""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from palace.config import settings
from palace.modules.narration.engine import ERROR, Narrator
from palace.modules.narration.errors import NarrationError

logger = logging.getLogger(__name__)


@dataclass
class Verse:
    number: int
    text: str


def _release_result(future: Future) -> None:
    if future.cancelled() or future.exception() is not None:
        return
    future.result().release()


class VerseNarrator:
    """Reads a chapter verse by verse on a worker thread.

    While a verse plays, the next ``prefetch_ahead`` verses are fetched in the
    background into a cache keyed by verse index. Entries are removed as they
    are consumed; changing the voice or stopping releases the whole cache.
    """

    def __init__(
        self,
        narrator: Narrator,
        verses: List[Verse],
        book: str = "",
        chapter: int = 1,
        prefetch_ahead: Optional[int] = None,
        verse_pause_ms: Optional[int] = None,
        on_verse: Optional[Callable[[int], None]] = None,
    ):
        self.narrator = narrator
        self.verses = list(verses)
        self.book = book
        self.chapter = chapter
        self.prefetch_ahead = prefetch_ahead if prefetch_ahead is not None else settings.narration_prefetch_ahead
        self.verse_pause = (verse_pause_ms if verse_pause_ms is not None else settings.narration_verse_pause_ms) / 1000
        self.on_verse = on_verse

        self._executor = ThreadPoolExecutor(max_workers=max(self.prefetch_ahead, 1),
                                            thread_name_prefix="verse-prefetch")
        self._cache: Dict[int, Future] = {}
        self._cache_lock = threading.Lock()
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._cancel = threading.Event()
        self._jump_to: Optional[int] = None
        self._verse_interrupt = threading.Event()
        self._current_index = 0
        self._fallback_noticed = False

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_verse(self) -> Optional[Verse]:
        if 0 <= self._current_index < len(self.verses):
            return self.verses[self._current_index]
        return None

    @property
    def is_playing(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._cancel.is_set()

    @property
    def voice(self) -> str:
        return self.narrator.voice

    def cached_indexes(self) -> List[int]:
        with self._cache_lock:
            return sorted(self._cache)

    # Controls

    def play(self, start_index: Optional[int] = None) -> None:
        """Start reading from start_index (default: the current verse)"""
        if self.is_playing:
            return
        self.join()
        index = self._current_index if start_index is None else start_index
        if not 0 <= index < len(self.verses):
            raise IndexError(f"Verse index {index} out of range")
        self._current_index = index
        self._fallback_noticed = False
        self._cancel = self.narrator.start_session()
        self.narrator.unlock()
        self._thread = threading.Thread(target=self._run, args=(index, self._cancel),
                                        name="verse-narrator", daemon=True)
        self._thread.start()

    def pause(self) -> None:
        """Stop playback but keep the current verse"""
        self._halt()

    def stop(self) -> None:
        self._halt()
        self._current_index = 0

    def next(self) -> None:
        self._jump(self._current_index + 1)

    def previous(self) -> None:
        self._jump(max(self._current_index - 1, 0))

    def set_voice(self, voice: str) -> None:
        """Switch voice; audio prefetched with the old voice is discarded"""
        if voice == self.narrator.voice:
            return
        self.narrator.voice = voice
        self.clear_cache()
        logger.info(f"Voice changed to {voice}, prefetch cache cleared")

    def set_rate(self, rate: float) -> None:
        self.narrator.rate = rate

    def join(self, timeout: Optional[float] = None) -> None:
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def close(self) -> None:
        self._halt()
        self._executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # Cache

    def clear_cache(self, wait_pending: bool = False) -> None:
        with self._cache_lock:
            futures = list(self._cache.values())
            self._cache.clear()
        if wait_pending:
            wait(futures, timeout=self.narrator.remote.timeout)
        for future in futures:
            future.add_done_callback(_release_result)

    def _evict_outside(self, index: int) -> None:
        """Release cached entries behind the current verse or beyond the look-ahead window"""
        with self._cache_lock:
            stale = [i for i in self._cache if i < index or i > index + self.prefetch_ahead]
            futures = [self._cache.pop(i) for i in stale]
        for future in futures:
            future.add_done_callback(_release_result)

    def _take_cached(self, index: int) -> Optional[Future]:
        with self._cache_lock:
            return self._cache.pop(index, None)

    def _prefetch(self, index: int) -> None:
        voice = self.narrator.voice
        with self._cache_lock:
            for i in range(index + 1, min(index + 1 + self.prefetch_ahead, len(self.verses))):
                if i in self._cache:
                    continue
                verse = self.verses[i]
                self._cache[i] = self._executor.submit(
                    self.narrator.fetch_handle, verse.text, voice, self.book, self.chapter, verse.number
                )

    # Worker

    def _halt(self) -> None:
        self._cancel.set()
        self.narrator.stop()
        self.clear_cache(wait_pending=True)
        self.join()
        # Prefetches that finished during the join
        self.narrator.registry.release_all()

    def _jump(self, index: int) -> None:
        index = min(max(index, 0), len(self.verses) - 1)
        if not self.is_playing:
            self._current_index = index
            return
        with self._lock:
            self._jump_to = index
            self._verse_interrupt.set()
        for backend in (self.narrator.output, self.narrator.synthesizer):
            try:
                backend.stop()
            except Exception as e:
                logger.debug(f"Error interrupting playback: {e}")

    def _run(self, index: int, cancel: threading.Event) -> None:
        played_any = False
        failures = 0
        try:
            while 0 <= index < len(self.verses) and not cancel.is_set():
                self._current_index = index
                verse = self.verses[index]
                if self.on_verse:
                    self.on_verse(verse.number)
                self._evict_outside(index)
                with self._lock:
                    interrupt = self._verse_interrupt = threading.Event()
                    if self._jump_to is not None:
                        interrupt.set()
                try:
                    played_any = self._play_verse(index, verse, cancel, interrupt) or played_any
                except NarrationError as e:
                    failures += 1
                    logger.error(f"Verse {verse.number} could not be played: {e}")

                with self._lock:
                    jump, self._jump_to = self._jump_to, None
                if cancel.is_set():
                    break
                if jump is not None:
                    index = jump
                    continue
                index += 1
                if index < len(self.verses) and cancel.wait(self.verse_pause):
                    break

            if not cancel.is_set():
                if failures and not played_any:
                    self.narrator.fail("Failed to generate audio")
                    return
                self.narrator.notify("success", "Finished reading chapter")
        finally:
            stopped = cancel.is_set()
            self.clear_cache()
            if self.narrator.state != ERROR:
                self.narrator.end_session(played_any, stopped)

    def _play_verse(self, index: int, verse: Verse, cancel: threading.Event, interrupt: threading.Event) -> bool:
        if self.narrator.should_use_device():
            return self.narrator.play_device(verse.text, cancel, interrupt)

        future = self._take_cached(index)
        try:
            if future is not None:
                handle = future.result()
            else:
                handle = self.narrator.fetch_handle(verse.text, None, self.book, self.chapter, verse.number)
            self._prefetch(index)
            if interrupt.is_set():
                handle.release()
                return False
            return self.narrator.play_handle(handle, cancel)
        except Exception as e:
            if cancel.is_set() or interrupt.is_set():
                return False
            logger.warning(f"Cloud audio failed for verse {verse.number}, using on-device speech: {e}")
            if not self._fallback_noticed:
                self._fallback_noticed = True
                self.narrator.notify("info", "Using offline voice mode")
            return self.narrator.play_device(verse.text, cancel, interrupt)
