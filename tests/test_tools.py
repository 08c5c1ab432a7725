"""
CLI entry point (tools/render.py).
"""
import sys
import os
import json

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import numpy as np
import soundfile as sf
from boom808.core.io import AudioIO
from tools.render import main


def _params_file(tmp_path, **fields):
    path = tmp_path / "params.json"
    path.write_text(json.dumps({"length_seconds": 0.1, "sample_rate": 22050, **fields}))
    return str(path)


def _sine_wav(tmp_path, freq=110.0, sr=22050):
    t = np.arange(sr // 2) / sr
    path = tmp_path / "in.wav"
    AudioIO.save_wav(0.8 * np.sin(2 * np.pi * freq * t), sr, str(path), bit_depth=16)
    return str(path)


def test_one_shot_writes_wav(tmp_path, capsys):
    out = tmp_path / "kick.wav"
    code = main(["one-shot", "--params", _params_file(tmp_path), "--seed", "4",
                 "--descriptor", "sub=1", "--descriptor", "growl", "--bit-depth", "16",
                 "--output", str(out)])
    assert code == 0
    info = sf.info(str(out))
    assert info.subtype == "PCM_16"
    assert info.frames == 2205
    assert "Seed: 4" in capsys.readouterr().out


def test_one_shot_same_seed_same_file(tmp_path):
    params = _params_file(tmp_path)
    a, b = tmp_path / "a.wav", tmp_path / "b.wav"
    main(["one-shot", "--params", params, "--seed", "8", "--output", str(a)])
    main(["one-shot", "--params", params, "--seed", "8", "--output", str(b)])
    assert a.read_bytes() == b.read_bytes()


def test_one_shot_failed_write_exits_nonzero(tmp_path):
    out = tmp_path / "nope" / "kick.wav"
    assert main(["one-shot", "--params", _params_file(tmp_path), "--output", str(out)]) == 1


def test_analyze_json(tmp_path, capsys):
    assert main(["analyze", _sine_wav(tmp_path), "--json"]) == 0
    result = json.loads(capsys.readouterr().out)
    assert abs(result["dominant_frequency_hz"] - 110.0) <= 22050 / 4096
    assert result["note_name"] == "A2"


def test_analyze_text(tmp_path, capsys):
    assert main(["analyze", _sine_wav(tmp_path)]) == 0
    assert "A2" in capsys.readouterr().out


def test_resynth_writes_wav(tmp_path):
    out = tmp_path / "resynth.wav"
    assert main(["resynth", _sine_wav(tmp_path), "--seed", "2", "--output", str(out)]) == 0
    info = sf.info(str(out))
    assert info.samplerate == 22050
    assert info.channels == 2
