"""
Sample analysis: spectral/envelope features and the resynthesis mapping built on them.
"""
from boom808.analysis.features import FeatureExtractor, analyze
from boom808.analysis.resynth import ResynthKnobs, params_from_analysis

__all__ = ["FeatureExtractor", "analyze", "ResynthKnobs", "params_from_analysis"]
