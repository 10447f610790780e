"""Sentence-bounded chunking for on-device synthesis."""

import logging
import re
from typing import List

logger = logging.getLogger(__name__)

SENTENCE_BREAK_RE = re.compile(r'([.!?]+)(["\'”’)\]]*)(\s+|$)')

ABBREV_TITLES = {"mr", "mrs", "ms", "dr", "st", "vs", "etc"}


def _is_abbrev(text: str, punct_index: int) -> bool:
    i = punct_index - 1
    while i >= 0 and text[i].isalpha():
        i -= 1
    return text[i + 1:punct_index].lower() in ABBREV_TITLES


def split_sentences(text: str) -> List[str]:
    if not text or not text.strip():
        return []
    sentences = []
    start = 0
    for match in SENTENCE_BREAK_RE.finditer(text):
        if _is_abbrev(text, match.start(1)):
            continue
        sentence = text[start:match.end(2)].strip()
        if sentence:
            sentences.append(sentence)
        start = match.end()
    tail = text[start:].strip()
    if tail:
        sentences.append(tail)
    return sentences


def _split_long_sentence(sentence: str, max_chars: int) -> List[str]:
    """Pack words into pieces of at most max_chars; words longer than that are sliced."""
    pieces = []
    current = ""
    for word in sentence.split():
        while len(word) > max_chars:
            if current:
                pieces.append(current)
                current = ""
            pieces.append(word[:max_chars])
            word = word[max_chars:]
        if not word:
            continue
        if not current:
            current = word
        elif len(current) + 1 + len(word) <= max_chars:
            current = f"{current} {word}"
        else:
            pieces.append(current)
            current = word
    if current:
        pieces.append(current)
    return pieces


def chunk_text(text: str, max_chars: int = 200) -> List[str]:
    """Split text into chunks of at most max_chars, preferring sentence boundaries.

    Joining the chunks reproduces the input apart from whitespace.
    """
    if max_chars <= 0:
        raise ValueError("max_chars must be positive")
    chunks: List[str] = []
    current = ""
    for sentence in split_sentences(text):
        if len(sentence) > max_chars:
            if current:
                chunks.append(current)
                current = ""
            chunks.extend(_split_long_sentence(sentence, max_chars))
            continue
        if not current:
            current = sentence
        elif len(current) + 1 + len(sentence) <= max_chars:
            current = f"{current} {sentence}"
        else:
            chunks.append(current)
            current = sentence
    if current:
        chunks.append(current)
    logger.debug("Chunked %s chars into %s chunk(s)", len(text or ""), len(chunks))
    return chunks
