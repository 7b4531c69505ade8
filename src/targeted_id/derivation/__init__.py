"""Derivation core - turn session facts into targeted identifiers.

The derivation core is stateless and side-effect free. Reading the
session state and writing the output attribute happens in filter.py.

Structure:
    outcome.py        - ValueOutcome enum (DERIVED / SKIPPED_*)
    protocol.py       - PatternEngine and NameIdEncoder protocols
    matcher.py        - Filter patterns and targetTransform rewrites
    composer.py       - Hash input composition and digests
    spec.py           - ValueSpec + configuration layering
    engine.py         - DerivationEngine
"""

from targeted_id.derivation.composer import ResolvedInputs, compose_fields, hash_digest
from targeted_id.derivation.engine import DerivationEngine, ValueResult
from targeted_id.derivation.matcher import RegexPatternEngine, apply_transforms, matches_any
from targeted_id.derivation.outcome import ValueOutcome
from targeted_id.derivation.protocol import NameIdEncoder, PatternEngine
from targeted_id.derivation.spec import HARD_DEFAULTS, ValueSpec, resolve_value_specs

__all__ = [
    # Outcome
    "ValueOutcome",
    # Engine
    "DerivationEngine",
    "ValueResult",
    # Protocols
    "NameIdEncoder",
    "PatternEngine",
    # Matching
    "RegexPatternEngine",
    "apply_transforms",
    "matches_any",
    # Composition
    "ResolvedInputs",
    "compose_fields",
    "hash_digest",
    # Specs
    "HARD_DEFAULTS",
    "ValueSpec",
    "resolve_value_specs",
]
