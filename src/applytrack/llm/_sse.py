from __future__ import annotations

import codecs
from typing import Iterable, Iterator

_DATA_PREFIX = "data:"


def _data_payload(line: str) -> str | None:
    trimmed = line.strip()
    if not trimmed or not trimmed.startswith(_DATA_PREFIX):
        return None
    return trimmed[len(_DATA_PREFIX) :].strip()


def iter_sse_data(chunks: Iterable[bytes]) -> Iterator[str]:
    """Yield the payload of every ``data:`` line in a server-sent-events byte stream.

    Bytes are decoded incrementally, so a frame (or a multi-byte character)
    split across two reads still comes out as one line. Comment, ``event:``
    and blank lines are dropped.
    """

    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    buffer = ""

    for chunk in chunks:
        if not chunk:
            continue
        buffer += decoder.decode(chunk)

        while True:
            newline = buffer.find("\n")
            if newline == -1:
                break
            line, buffer = buffer[:newline], buffer[newline + 1 :]
            payload = _data_payload(line)
            if payload is not None:
                yield payload

    buffer += decoder.decode(b"", final=True)
    payload = _data_payload(buffer)
    if payload is not None:
        yield payload
