"""
Hand-off of rendered buffers to a realtime consumer.

Renders publish a finished RenderedAudio into a BufferSlot. The realtime side only
takes the slot lock long enough to copy one reference, then reads the (immutable)
samples without locking, so it sees either a complete buffer or none.
"""
import threading
from typing import Optional

import numpy as np

from boom808.core.types import RenderedAudio


class BufferSlot:
    """Single-reference mailbox guarded by a short critical section."""

    def __init__(self):
        self._lock = threading.Lock()
        self._audio: Optional[RenderedAudio] = None

    def publish(self, audio: Optional[RenderedAudio]) -> None:
        with self._lock:
            self._audio = audio

    def current(self) -> Optional[RenderedAudio]:
        with self._lock:
            return self._audio

    def has_audio(self) -> bool:
        audio = self.current()
        return audio is not None and audio.num_samples > 0


class PreviewStream:
    """
    Streams the slot's buffer into caller-owned output blocks.

    process_block() is safe to call from an audio callback: it does not allocate,
    it only takes short locks to read one buffer reference and the cursor, and it
    never runs analysis.
    start()/stop() may be called from another thread. The cursor is guarded by its
    own lock and a generation counter: a block that was in flight when start() or
    stop() ran does not write its position back over the new cursor.
    """

    def __init__(self, slot: Optional[BufferSlot] = None):
        self.slot = slot or BufferSlot()
        self._cursor_lock = threading.Lock()
        self._position = 0
        self._previewing = False
        self._generation = 0

    def start(self) -> None:
        with self._cursor_lock:
            self._position = 0
            self._previewing = True
            self._generation += 1

    def stop(self) -> None:
        with self._cursor_lock:
            self._previewing = False
            self._position = 0
            self._generation += 1

    @property
    def is_previewing(self) -> bool:
        with self._cursor_lock:
            return self._previewing

    @property
    def position(self) -> int:
        with self._cursor_lock:
            return self._position

    def process_block(self, out: np.ndarray) -> int:
        """
        Fill out (frames, channels) with the next frames of the published buffer.
        Output channels beyond the source reuse its last channel. Past the end the
        block is zero-filled and the preview stops. Returns frames written.
        """
        frames = out.shape[0]
        with self._cursor_lock:
            previewing = self._previewing
            pos = self._position
            generation = self._generation
        audio = self.slot.current() if previewing else None
        if audio is None or audio.num_samples == 0:
            out[:] = 0.0
            return 0

        remaining = audio.num_samples - pos
        count = max(0, min(frames, remaining))
        src_channels = audio.num_channels
        for ch in range(out.shape[1]):
            src = audio.samples[min(ch, src_channels - 1)]
            out[:count, ch] = src[pos:pos + count]
        out[count:] = 0.0

        with self._cursor_lock:
            if self._generation == generation:
                if count < frames:
                    self._previewing = False
                    self._position = 0
                else:
                    self._position = pos + count
        return count
