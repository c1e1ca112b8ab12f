"""Raw audio input sources for the ingest stage."""

from __future__ import annotations

import asyncio
import io
import os
import stat
import sys
from pathlib import Path
from typing import BinaryIO, Protocol


class AudioSource(Protocol):
    """Represents a byte stream of raw LINEAR16 audio."""

    async def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; an empty result means end of input."""

    def close(self) -> None:
        """Release the underlying stream."""


class StreamAudioSource:
    """Read a blocking binary stream (regular file, BytesIO) in a worker thread."""

    def __init__(self, stream: BinaryIO, *, close_stream: bool = False) -> None:
        self._stream = stream
        self._close_stream = close_stream

    @classmethod
    def from_path(cls, path: str | Path) -> StreamAudioSource:
        return cls(Path(path).expanduser().open("rb"), close_stream=True)

    async def read(self, size: int) -> bytes:
        data = await asyncio.to_thread(self._stream.read, size)
        return bytes(data) if data else b""

    def close(self) -> None:
        if self._close_stream:
            self._stream.close()


class PipeAudioSource:
    """Read a pipe or tty through the event loop so pending reads can be cancelled."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._reader: asyncio.StreamReader | None = None
        self._transport: asyncio.ReadTransport | None = None

    async def read(self, size: int) -> bytes:
        if self._reader is None:
            loop = asyncio.get_running_loop()
            reader = asyncio.StreamReader()
            self._transport, _ = await loop.connect_read_pipe(
                lambda: asyncio.StreamReaderProtocol(reader), self._stream
            )
            self._reader = reader
        return await self._reader.read(size)

    def close(self) -> None:
        if self._transport is not None:
            self._transport.close()
            self._transport = None


def open_stdin_source(stream: BinaryIO | None = None) -> StreamAudioSource | PipeAudioSource:
    """Pick a reader for stdin: regular files are read in a thread, pipes via the event loop."""
    stream = stream if stream is not None else sys.stdin.buffer
    try:
        mode = os.fstat(stream.fileno()).st_mode
    except (OSError, ValueError, io.UnsupportedOperation):
        return StreamAudioSource(stream)

    if stat.S_ISREG(mode):
        return StreamAudioSource(stream)
    return PipeAudioSource(stream)
