"""
Parameter schema, defaults and resolution.
Default values: single source is canonical_defaults.ENGINE_DEFAULTS; use resolve_params({}) for resolved defaults.
"""
from boom808.params.schema import PARAM_SCHEMA
from boom808.params.resolve import resolve_params, num_samples
from boom808.params.descriptors import apply_descriptors, DESCRIPTOR_MAP

__all__ = ["PARAM_SCHEMA", "resolve_params", "num_samples", "apply_descriptors", "DESCRIPTOR_MAP"]
