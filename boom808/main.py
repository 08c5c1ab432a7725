from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
import logging
import base64
import binascii

from boom808.params.engine_params import LOG_LEVEL, SERVICE_SAMPLE_RATE, EXPORT_BIT_DEPTH

# Configure Logging
logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))
logger = logging.getLogger("boom808")

app = FastAPI(
    title="boom808 Engine",
    version="1.0.0",
    description="Procedural 808 generation and sample analysis"
)

# CORS (Allow Frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], # Allow any local port
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "boom808-engine"}

from boom808.instruments.kick808 import Kick808Engine
from boom808.core.io import AudioIO
from boom808.params.engine_params import to_engine_params
from boom808.params.descriptors import apply_descriptors
from boom808.analysis.features import FeatureExtractor
from boom808.analysis.resynth import ResynthKnobs, params_from_analysis

engine = Kick808Engine()
extractor = FeatureExtractor()


def _encode(audio) -> str:
    wav_bytes = AudioIO.to_bytes(audio, audio.sample_rate, format="WAV", bit_depth=EXPORT_BIT_DEPTH)
    return base64.b64encode(wav_bytes).decode("utf-8")


def _decode_upload(data: dict):
    """base64 WAV in data['audio'] -> (mono samples, sample_rate). 400 on bad input."""
    encoded = data.get("audio")
    if not isinstance(encoded, str) or not encoded:
        raise HTTPException(status_code=400, detail="Missing base64 'audio' field")
    try:
        raw = base64.b64decode(encoded, validate=True)
        return AudioIO.load_mono(raw)
    except (binascii.Error, ValueError, RuntimeError) as e:
        logger.info("Rejected upload: %s", e)
        raise HTTPException(status_code=400, detail="Could not decode audio upload")


@app.post("/generate/808")
async def generate_808(params: dict):
    """
    Generates an 808.
    Returns JSON with base64-encoded audio and resolved_params.
    Optional 'descriptors': {token: intensity} applied on top of the fields.
    """
    # Don't mutate original params
    params_copy = params.copy()
    descriptors = params_copy.pop("descriptors", None) or {}

    fields = to_engine_params(params_copy)
    fields.setdefault("sample_rate", SERVICE_SAMPLE_RATE)
    resolved = apply_descriptors(fields, descriptors if isinstance(descriptors, dict) else {})

    audio = engine.render(resolved)
    return {
        "audio": _encode(audio),
        "sample_rate": audio.sample_rate,
        "resolved_params": resolved.to_dict(),
    }


@app.post("/analyze")
async def analyze_sample(data: dict):
    """
    Receives { audio: base64 WAV }. Returns the detected pitch and envelope timing.
    """
    samples, sample_rate = _decode_upload(data)
    result = extractor.analyze(samples, sample_rate)
    return result.to_dict()


@app.post("/resynth")
async def resynth(data: dict):
    """
    Receives { audio: base64 WAV, knobs: {...}, seed: int }.
    Analyzes the upload and renders an 808 tuned to it.
    """
    raw_knobs = data.get("knobs")
    if raw_knobs is not None and not isinstance(raw_knobs, dict):
        raise HTTPException(status_code=400, detail="'knobs' must be an object of name -> value")
    samples, sample_rate = _decode_upload(data)
    analysis = extractor.analyze(samples, sample_rate)
    knobs = ResynthKnobs.from_dict(raw_knobs)
    params = params_from_analysis(analysis, knobs, seed=data.get("seed"))

    audio = engine.render(params)
    return {
        "audio": _encode(audio),
        "sample_rate": audio.sample_rate,
        "analysis": analysis.to_dict(),
        "resolved_params": params.to_dict(),
    }


if __name__ == "__main__":
    uvicorn.run("boom808.main:app", host="0.0.0.0", port=8000, reload=True)
