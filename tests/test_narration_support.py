import base64
import os
import threading

import pytest
import requests

from fakes import FakeResponse, FakeSession
from palace.modules.narration.backends import silent_wav
from palace.modules.narration.chunking import chunk_text, split_sentences
from palace.modules.narration.errors import RemoteError, RemoteTimeout
from palace.modules.narration.handles import HandleRegistry
from palace.modules.narration.network import OFFLINE, ONLINE, SLOW, NetworkMonitor
from palace.modules.narration.remote import RemoteTTSClient

PSALM = (
    "The LORD is my shepherd; I shall not want. He maketh me to lie down in green pastures: "
    "he leadeth me beside the still waters. He restoreth my soul: he leadeth me in the paths of "
    "righteousness for his name's sake. Yea, though I walk through the valley of the shadow of death, "
    "I will fear no evil: for thou art with me; thy rod and thy staff they comfort me."
)


# Chunking

def test_split_sentences_keeps_titles_together():
    assert split_sentences("Dr. Luke wrote it. Paul agreed!") == ["Dr. Luke wrote it.", "Paul agreed!"]


def test_split_sentences_empty():
    assert split_sentences("   ") == []


def test_short_text_is_one_chunk():
    text = "In the beginning God created the heaven and the earth."
    assert chunk_text(text) == [text]


def test_chunks_respect_limit_and_sentence_boundaries():
    chunks = chunk_text(PSALM, 200)
    assert len(chunks) > 1
    assert all(len(c) <= 200 for c in chunks)
    assert all(c.endswith((".", ":", ";", "!", "?")) or c == chunks[-1] for c in chunks)
    assert " ".join(chunks).split() == PSALM.split()


def test_long_sentence_is_split_on_words():
    sentence = " ".join(["selah"] * 60) + "."
    chunks = chunk_text(sentence, 50)
    assert all(len(c) <= 50 for c in chunks)
    assert " ".join(chunks).split() == sentence.split()


def test_oversized_word_is_sliced():
    assert chunk_text("x" * 25, 10) == ["x" * 10, "x" * 10, "x" * 5]


def test_chunk_limit_must_be_positive():
    with pytest.raises(ValueError):
        chunk_text("text", 0)


# Handles

def test_handle_release_deletes_file_once(tmp_path):
    registry = HandleRegistry(str(tmp_path))
    handle = registry.create(b"audio")
    assert os.path.isfile(handle.path)
    assert registry.live_count() == 1

    assert handle.release() is True
    assert handle.release() is False
    assert handle.released
    assert not os.path.exists(handle.path)
    assert registry.live_count() == 0


def test_release_all(tmp_path):
    registry = HandleRegistry(str(tmp_path))
    handles = [registry.create(b"a"), registry.create(b"b", suffix=".wav")]
    handles[0].release()
    assert registry.release_all() == 1
    assert os.listdir(tmp_path) == []


def test_concurrent_release_is_safe(tmp_path):
    registry = HandleRegistry(str(tmp_path))
    handle = registry.create(b"audio")
    results = []
    threads = [threading.Thread(target=lambda: results.append(handle.release())) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert results.count(True) == 1


def test_silent_wav_is_a_wav_file():
    data = silent_wav()
    assert data[:4] == b"RIFF"
    assert data[8:12] == b"WAVE"


# Network

@pytest.mark.parametrize("response, expected", [
    (FakeResponse(status_code=204), ONLINE),
    (FakeResponse(status_code=503), OFFLINE),
    (requests.ConnectionError("down"), OFFLINE),
    (requests.Timeout("slow"), SLOW),
])
def test_network_check(response, expected):
    monitor = NetworkMonitor("https://probe.test/ping", session=FakeSession([("HEAD", "probe.test", response)]))
    assert monitor.check() == expected
    assert monitor.status == expected


def test_network_status_transitions():
    monitor = NetworkMonitor("https://probe.test", session=FakeSession())
    monitor.mark_slow()
    assert monitor.status == SLOW
    assert not monitor.is_offline
    monitor.set_status(OFFLINE)
    assert monitor.is_offline
    monitor.mark_online()
    assert monitor.status == ONLINE
    with pytest.raises(ValueError):
        monitor.set_status("flaky")


# Remote client

def _remote(routes, **kwargs):
    return RemoteTTSClient("https://api.palace.test/api/v1/", timeout=2, session=FakeSession(routes), **kwargs)


def test_remote_downloads_cached_audio_url():
    client = _remote([
        ("POST", "/functions/text-to-speech", FakeResponse(json_data={"audioUrl": "https://cdn.test/a.mp3", "cached": True})),
        ("GET", "cdn.test/a.mp3", FakeResponse(content=b"mp3")),
    ], access_token="jwt")
    audio = client.fetch("  Jesus wept.  ", "daniel", "John", 11, 35)

    assert audio.data == b"mp3"
    assert audio.cached is True
    method, url, kwargs = client.session.calls[0]
    assert url == "https://api.palace.test/api/v1/functions/text-to-speech"
    assert kwargs["json"] == {"text": "Jesus wept.", "voice": "daniel", "book": "John", "chapter": 11,
                              "verse": 35, "useCache": True}
    assert kwargs["timeout"] == 2
    assert client.session.headers["Authorization"] == "Bearer jwt"


def test_remote_decodes_inline_audio():
    encoded = base64.b64encode(b"mp3").decode()
    client = _remote([("POST", "text-to-speech", FakeResponse(json_data={"audioContent": encoded}))])
    audio = client.fetch("Hello", "onyx")
    assert audio.data == b"mp3"
    assert audio.cached is False


def test_remote_timeout():
    client = _remote([("POST", "text-to-speech", requests.Timeout("read timed out"))])
    with pytest.raises(RemoteTimeout):
        client.fetch("Hello", "onyx")


def test_remote_error_message_from_function():
    client = _remote([("POST", "text-to-speech", FakeResponse(status_code=502, json_data={"error": "openai API error: 500"}))])
    with pytest.raises(RemoteError, match="openai API error: 500"):
        client.fetch("Hello", "onyx")


def test_remote_without_audio():
    client = _remote([("POST", "text-to-speech", FakeResponse(json_data={}))])
    with pytest.raises(RemoteError, match="No audio content received"):
        client.fetch("Hello", "onyx")


def test_remote_rejects_non_json_reply():
    portal = FakeResponse(content=b"<html>Sign in to Wi-Fi</html>")
    client = _remote([("POST", "text-to-speech", portal)])
    with pytest.raises(RemoteError, match="non-JSON"):
        client.fetch("Hello", "onyx")


def test_remote_rejects_unexpected_json_shape():
    client = _remote([("POST", "text-to-speech", FakeResponse(json_data=["audio"]))])
    with pytest.raises(RemoteError, match="unexpected response"):
        client.fetch("Hello", "onyx")


def test_remote_error_status_with_list_body():
    client = _remote([("POST", "text-to-speech", FakeResponse(status_code=500, json_data=["oops"]))])
    with pytest.raises(RemoteError, match="status 500"):
        client.fetch("Hello", "onyx")
