"""On-device speech synthesis and audio output.

Both backends import their library when constructed so the API server never
needs pyttsx3 or libVLC installed.
"""

import io
import logging
import os
import sys
import threading
import wave

logger = logging.getLogger(__name__)

PREFERRED_VOICE_NAMES = ("Daniel", "Samantha", "Google", "Premium")


def silent_wav(duration_ms: int = 10, sample_rate: int = 22050) -> bytes:
    """A mono 16-bit WAV of silence, used to unlock the output device"""
    frames = int(sample_rate * duration_ms / 1000) or 1
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(b"\x00\x00" * frames)
    return buffer.getvalue()


class SpeechSynthesizer:
    """speak() blocks until the utterance is finished or stop() is called."""

    def speak(self, text: str, rate: float = 1.0) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        raise NotImplementedError


class AudioOutput:
    """play() blocks until the file has finished playing or stop() is called."""

    def play(self, path: str, rate: float = 1.0, volume: int = 100) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        raise NotImplementedError


class Pyttsx3Synthesizer(SpeechSynthesizer):
    def __init__(self, engine=None, base_rate: int = 175):
        if engine is None:
            try:
                import pyttsx3
            except ImportError as e:
                raise RuntimeError("pyttsx3 is not available") from e
            engine = pyttsx3.init()
        self.engine = engine
        self.base_rate = base_rate
        self._lock = threading.Lock()
        self._select_voice()

    def _select_voice(self) -> None:
        """Prefer a well-known English voice, then any English voice"""
        try:
            voices = self.engine.getProperty("voices") or []
        except Exception as e:
            logger.debug(f"Could not list voices: {e}")
            return
        english = [v for v in voices if "en" in str(getattr(v, "languages", "") or getattr(v, "id", "")).lower()]
        preferred = next(
            (v for v in english if any(name in (v.name or "") for name in PREFERRED_VOICE_NAMES)),
            english[0] if english else None,
        )
        if preferred is not None:
            self.engine.setProperty("voice", preferred.id)
            logger.debug(f"Using on-device voice {preferred.name}")

    def speak(self, text: str, rate: float = 1.0) -> None:
        with self._lock:
            self.engine.setProperty("rate", int(self.base_rate * rate))
            self.engine.say(text)
            self.engine.runAndWait()

    def stop(self) -> None:
        self.engine.stop()


class VlcAudioOutput(AudioOutput):
    """Audio-only libVLC playback"""

    POLL_SECONDS = 0.05

    def __init__(self, vlc_module=None, platform_name=None):
        if vlc_module is None:
            try:
                import vlc as vlc_module
            except ImportError as e:
                raise RuntimeError("python-vlc is not available") from e
        self._vlc = vlc_module
        platform_value = platform_name if platform_name is not None else sys.platform
        args = ["--no-xlib"] if str(platform_value).startswith("linux") else []
        self.instance = self._vlc.Instance(args)
        self.player = self.instance.media_player_new()
        self._stopped = threading.Event()

    def play(self, path: str, rate: float = 1.0, volume: int = 100) -> None:
        if not os.path.isfile(path):
            raise FileNotFoundError(path)
        self._stopped.clear()
        media = self.instance.media_new(os.path.abspath(path))
        try:
            self.player.set_media(media)
            self.player.audio_set_volume(max(0, min(100, int(volume))))
            if int(self.player.play()) == -1:
                raise RuntimeError("VLC failed to start playback.")
            self.player.set_rate(rate)
            done = (self._vlc.State.Ended, self._vlc.State.Stopped, self._vlc.State.Error)
            while not self._stopped.wait(self.POLL_SECONDS):
                state = self.player.get_state()
                if state == self._vlc.State.Error:
                    raise RuntimeError("Audio playback failed")
                if state in done:
                    break
        finally:
            self.player.stop()
            media.release()

    def stop(self) -> None:
        self._stopped.set()
        self.player.stop()

    def release(self) -> None:
        self.stop()
        self.player.release()
        self.instance.release()
