"""
Preview hand-off: BufferSlot publishing and PreviewStream block filling.
"""
import sys
import os
import threading

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import numpy as np
import pytest
from boom808.core.playback import BufferSlot, PreviewStream
from boom808.core.types import RenderedAudio


def _ramp(n=10, channels=2):
    data = np.tile(np.arange(n, dtype=np.float32) / n, (channels, 1))
    return RenderedAudio(data, 48000.0)


def test_empty_slot_outputs_silence():
    stream = PreviewStream()
    stream.start()
    out = np.ones((4, 2), dtype=np.float32)
    assert stream.process_block(out) == 0
    assert not out.any()
    assert not stream.slot.has_audio()


def test_not_previewing_outputs_silence():
    stream = PreviewStream()
    stream.slot.publish(_ramp())
    out = np.ones((4, 2), dtype=np.float32)
    assert stream.process_block(out) == 0
    assert not out.any()


def test_blocks_advance_then_stop_at_end():
    stream = PreviewStream()
    stream.slot.publish(_ramp(10))
    stream.start()

    out = np.zeros((4, 2), dtype=np.float32)
    assert stream.process_block(out) == 4
    assert np.allclose(out[:, 0], [0.0, 0.1, 0.2, 0.3])
    assert stream.position == 4

    assert stream.process_block(out) == 4
    assert stream.process_block(out) == 2
    assert np.allclose(out[:2, 1], [0.8, 0.9])
    assert not out[2:].any()
    assert not stream.is_previewing
    assert stream.position == 0


def test_fills_caller_buffer_in_place():
    stream = PreviewStream()
    stream.slot.publish(_ramp(8))
    stream.start()
    out = np.zeros((8, 2), dtype=np.float32)
    before = out.__array_interface__["data"][0]
    stream.process_block(out)
    assert out.__array_interface__["data"][0] == before
    assert out[7, 0] == pytest.approx(0.875)


def test_extra_output_channels_repeat_last_source_channel():
    mono = RenderedAudio(np.arange(6, dtype=np.float32).reshape(1, 6), 48000.0)
    stream = PreviewStream()
    stream.slot.publish(mono)
    stream.start()
    out = np.zeros((6, 3), dtype=np.float32)
    stream.process_block(out)
    for ch in range(3):
        assert np.array_equal(out[:, ch], np.arange(6, dtype=np.float32))


def test_publish_swaps_whole_buffer():
    slot = BufferSlot()
    first, second = _ramp(10), _ramp(20)
    slot.publish(first)
    assert slot.current() is first
    slot.publish(second)
    assert slot.current() is second
    slot.publish(None)
    assert slot.current() is None


def test_concurrent_publish_never_exposes_partial_buffer():
    slot = BufferSlot()
    stream = PreviewStream(slot)
    buffers = [RenderedAudio(np.full((2, 256), float(i + 1), dtype=np.float32), 48000.0) for i in range(50)]
    stop = threading.Event()

    def producer():
        for audio in buffers:
            slot.publish(audio)
        stop.set()

    out = np.zeros((64, 2), dtype=np.float32)
    worker = threading.Thread(target=producer)
    worker.start()
    while not stop.is_set():
        stream.start()
        if stream.process_block(out):
            # a block always comes from exactly one published buffer
            assert np.all(out == out[0, 0])
    worker.join()
    assert slot.current() is buffers[-1]


class _InterruptingSlot(BufferSlot):
    """Runs a control action while a block is being filled, after the cursor was read."""

    def __init__(self, action=None):
        super().__init__()
        self.action = action

    def current(self):
        audio = super().current()
        if self.action is not None:
            action, self.action = self.action, None
            action()
        return audio


def test_stop_during_block_is_not_overwritten():
    slot = _InterruptingSlot()
    stream = PreviewStream(slot)
    slot.publish(_ramp(10))
    stream.start()
    slot.action = stream.stop

    out = np.zeros((4, 2), dtype=np.float32)
    stream.process_block(out)
    assert not stream.is_previewing
    assert stream.position == 0


def test_restart_during_block_keeps_new_cursor():
    slot = _InterruptingSlot()
    stream = PreviewStream(slot)
    slot.publish(_ramp(10))
    stream.start()
    out = np.zeros((4, 2), dtype=np.float32)
    stream.process_block(out)
    assert stream.position == 4

    slot.action = stream.start
    stream.process_block(out)
    assert stream.is_previewing
    assert stream.position == 0
