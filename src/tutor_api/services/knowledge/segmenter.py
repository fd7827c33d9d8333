from __future__ import annotations

import re

DEFAULT_TERMINATOR = "。"

_SENTENCE_BOUNDARY = re.compile(r"[\n.!?。！？]")


def split_sentences(text: str) -> list[str]:
    return [sentence.strip() for sentence in _SENTENCE_BOUNDARY.split(text) if sentence.strip()]


def segment(text: str, max_length: int, *, terminator: str = DEFAULT_TERMINATOR) -> list[str]:
    """Greedily pack whole sentences into fragments of at most ``max_length`` characters.

    Each sentence is followed by ``terminator``. A sentence is never split, so a
    single sentence longer than ``max_length`` becomes its own fragment.
    """
    if max_length <= 0:
        raise ValueError("max_length must be > 0")

    fragments: list[str] = []
    buffer = ""

    for sentence in split_sentences(text):
        if buffer and len(buffer + sentence) > max_length:
            fragments.append(buffer)
            buffer = ""
        buffer += sentence + terminator

    if buffer.strip():
        fragments.append(buffer)

    return fragments
