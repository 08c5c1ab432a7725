"""
808 engine: seeded sine body with pitch glide, optional growl/sub/analog contributions,
then tone shaping, stereo width and mastering.

Random draw order per render (must stay fixed for seeded reproducibility):
    1. base pitch
    2. pitch-glide window length
    then, for every sample in order:
    3. FM modulator draw  (only when growl > epsilon; consumed, not used in the mix)
    4. analog noise draw  (only when analog > epsilon)
"""
import logging
from typing import Union

import torch

from boom808.core.pitch import midi_to_hz, semitones_to_ratio
from boom808.core.rng import RandomStream
from boom808.core.types import ParameterSet, RenderedAudio
from boom808.dsp.envelopes import Envelope, ms_to_s, time_axis
from boom808.dsp.filters import Filter, Effects
from boom808.dsp.oscillators import Oscillator
from boom808.dsp.postchain import PostChain
from boom808.dsp.stereo import StereoImager
from boom808.params.resolve import resolve_params, num_samples

logger = logging.getLogger(__name__)

EPSILON = 1e-3

# Pitch
BASE_MIDI_LOW = 32.0
BASE_MIDI_SPAN = 10.0
SUB_BIAS_SEMITONES = -2.0

# Envelope
BASE_DECAY_S = 0.8
ATTACK_MS = 2.0
GLIDE_MIN_S = 0.015
GLIDE_SPAN_S = 0.010
DROP_BASE_ST = 0.24

# Mix
HARMONIC_LEVEL = 0.25
GROWL_DEPTH = 0.25
SUB_LEVEL = 0.8
ANALOG_NOISE = 0.002

# Tone
LOWPASS_HZ = 1400.0
LOWPASS_Q = 0.7
LOW_SHELF_HZ = 60.0


class WaveformSynthesizer:
    """Raw mono waveform, one sample per index, from a resolved ParameterSet."""

    @staticmethod
    def decay_seconds(params: ParameterSet) -> float:
        decay = BASE_DECAY_S
        decay *= 1.0 + 0.8 * params.boom_amount  # boomy -> longer
        decay *= 0.4 + 0.6 * (1.0 - params.shortness)  # short -> tighter
        return decay

    @staticmethod
    def base_frequency(params: ParameterSet, rng: RandomStream) -> float:
        """Draw #1. MIDI 32..42 plus tune, then the sub bias of up to -2 st."""
        base_midi = BASE_MIDI_LOW + rng.uniform() * BASE_MIDI_SPAN
        base_midi += params.tune_semitones
        freq = midi_to_hz(base_midi)
        return freq * semitones_to_ratio(SUB_BIAS_SEMITONES * params.sub_amount)

    @staticmethod
    def synthesize(params: ParameterSet, rng: RandomStream, n: int) -> torch.Tensor:
        """Returns a float64 tensor of length n."""
        sr = params.sample_rate
        freq = WaveformSynthesizer.base_frequency(params, rng)

        decay = WaveformSynthesizer.decay_seconds(params)
        attack = ms_to_s(ATTACK_MS)
        glide = GLIDE_MIN_S + GLIDE_SPAN_S * rng.uniform()  # draw #2
        drop = DROP_BASE_ST + 1.0 * params.punch

        growl_on = params.growl > EPSILON
        sub_on = params.sub_amount > EPSILON
        analog_on = params.analog > EPSILON

        t = time_axis(n, sr)
        env = Envelope.attack_exp_decay(t, attack, decay)
        pitch_mult = Envelope.pitch_glide(t, glide, drop)

        fund_phase = Oscillator.phase_from_frequency(freq * pitch_mult, sr)
        harm_phase = Oscillator.phase_from_frequency(torch.full_like(t, 2.0 * freq), sr)

        # Per-sample draws, interleaved FM then analog
        draw_cols = int(growl_on) + int(analog_on)
        draws = rng.uniform_block(n, draw_cols) if draw_cols else None

        body = (1.0 - HARMONIC_LEVEL * params.growl) * torch.sin(fund_phase)
        body = body + HARMONIC_LEVEL * torch.sin(harm_phase)
        if growl_on:
            body = body + params.growl * GROWL_DEPTH * torch.sin(harm_phase * 0.5 + 0.3)

        sample = body * (1.0 - params.sub_amount * 0.5)
        if sub_on:
            sample = sample + params.sub_amount * SUB_LEVEL * Oscillator.sine(freq * 0.5, t)

        if analog_on:
            noise = draws[:, draw_cols - 1]
            sample = sample + (noise - 0.5) * ANALOG_NOISE * params.analog

        return sample * env


class ToneShaper:
    @staticmethod
    def shape(mono: torch.Tensor, params: ParameterSet) -> torch.Tensor:
        """Low-pass 1400 Hz -> 60 Hz follower boost -> clamp + tanh saturation."""
        sr = params.sample_rate
        x = Filter.lowpass(mono, sr, LOWPASS_HZ, q=LOWPASS_Q)
        x = Effects.low_shelf_boost(x, sr, 1.0 + 0.5 * params.boom_amount, center_freq=LOW_SHELF_HZ)
        return Effects.saturate(x, drive=1.0 + 0.5 * params.analog)


class Kick808Engine:
    """
    Render pipeline: ParameterSet -> RenderedAudio (stereo).
    Stateless between calls; every render owns its own RandomStream.
    """

    def render(self, params: Union[ParameterSet, dict, None] = None, seed: int = None) -> RenderedAudio:
        resolved = resolve_params(params)
        if seed is not None:
            resolved = resolve_params({**resolved.to_dict(), "seed": seed})

        n = num_samples(resolved)
        sr = resolved.sample_rate
        if n == 0:
            logger.debug("Zero-length render requested (sr=%s, length=%s)", sr, resolved.length_seconds)
            return RenderedAudio(torch.zeros((2, 0)).numpy(), sr)

        rng = RandomStream(resolved.seed)
        mono = WaveformSynthesizer.synthesize(resolved, rng, n)
        mono = ToneShaper.shape(mono, resolved)
        stereo = StereoImager.widen(mono, sr, resolved.detune)
        master = PostChain.process(stereo, resolved.master_gain_db)

        return RenderedAudio(master.float().numpy(), sr)


def render(params: Union[ParameterSet, dict, None] = None) -> RenderedAudio:
    """Convenience wrapper around Kick808Engine().render."""
    return Kick808Engine().render(params)
