"""Derivation engine - produce targeted identifiers from the session state.

This module provides the DerivationEngine class that runs every configured
ValueSpec against one attribute bag.

Derivation flow (per value, in declaration order):
1. Resolve userID (mandatory unless disabled) → MissingAttributeError if absent
2. ifUser gate → skip value if no pattern matches
3. Resolve targetID (optional) and apply targetTransform rewrites
4. ifTarget gate on the rewritten targetID → skip value if no pattern matches
5. Resolve sourceID (optional), take salt
6. Compose hash input from `fields`, hash, prepend prefix
7. Optionally encode as a name-identifier element

Design principles:
1. Pure and synchronous: no I/O, no state across calls
2. Output order follows declaration order, whatever is skipped
3. A missing user identifier aborts the whole event (no partial output)
4. Salts and hash inputs never reach the logs
"""

from __future__ import annotations

__all__ = [
    "DerivationEngine",
    "ValueResult",
]

from collections.abc import Mapping
from dataclasses import dataclass

from targeted_id.context.paths import OnMissing, resolve_value
from targeted_id.context.state import AttributeBag
from targeted_id.derivation.composer import ResolvedInputs, compose_fields, hash_digest
from targeted_id.derivation.matcher import apply_transforms, default_pattern_engine, matches_any
from targeted_id.derivation.outcome import ValueOutcome
from targeted_id.derivation.protocol import NameIdEncoder, PatternEngine
from targeted_id.derivation.spec import ValueSpec
from targeted_id.exceptions import MissingAttributeError
from targeted_id.telemetry.system.system_logger import get_system_logger


@dataclass(frozen=True, slots=True)
class ValueResult:
    """Result of deriving one configured value.

    Attributes:
        name: Value name.
        outcome: Whether the value was derived or skipped by a filter gate.
        value: The identifier (or encoded element). None when skipped.
    """

    name: str
    outcome: ValueOutcome
    value: str | None = None


class DerivationEngine:
    """Targeted identifier derivation engine.

    Holds the resolved ValueSpecs and the collaborators they need. Specs are
    immutable, so one engine can serve concurrent authentication events.

    Attributes:
        specs: Value name -> ValueSpec, in declaration order.
    """

    def __init__(
        self,
        specs: Mapping[str, ValueSpec],
        *,
        pattern_engine: PatternEngine | None = None,
        name_id_encoder: NameIdEncoder | None = None,
    ) -> None:
        """Initialize the derivation engine.

        Args:
            specs: Resolved value specs (see resolve_value_specs).
            pattern_engine: Engine for ifUser/ifTarget/targetTransform.
                Defaults to RegexPatternEngine.
            name_id_encoder: Encoder used for values with nameId enabled.
                Defaults to Saml2NameIdEncoder.
        """
        self.specs = dict(specs)
        self._patterns = pattern_engine or default_pattern_engine()
        if name_id_encoder is None:
            # Imported here: the SAML encoder is only a default collaborator
            from targeted_id.saml.nameid import Saml2NameIdEncoder

            name_id_encoder = Saml2NameIdEncoder()
        self._name_id_encoder = name_id_encoder

    @property
    def value_count(self) -> int:
        """Number of configured values."""
        return len(self.specs)

    def derive_all(self, bag: AttributeBag) -> list[str]:
        """Derive every configured value and collect the produced identifiers.

        Args:
            bag: Session state of the authentication event.

        Returns:
            Identifiers in declaration order. Values skipped by a filter
            gate are absent.

        Raises:
            MissingAttributeError: If a value needs a user identifier and
                none can be resolved. No identifiers are returned.
        """
        return [result.value for result in self.derive(bag) if result.value is not None]

    def derive(self, bag: AttributeBag) -> list[ValueResult]:
        """Derive every configured value, reporting skipped values too.

        Args:
            bag: Session state of the authentication event.

        Returns:
            One ValueResult per configured value, in declaration order.

        Raises:
            MissingAttributeError: If a user identifier cannot be resolved.
        """
        return [self._derive_one(spec, bag) for spec in self.specs.values()]

    def _derive_one(self, spec: ValueSpec, bag: AttributeBag) -> ValueResult:
        """Run the derivation pipeline for one value."""
        logger = get_system_logger()

        user_id = ""
        if spec.user_id:
            try:
                user_id = resolve_value(
                    bag,
                    spec.user_id,
                    OnMissing.FAIL,
                    f"No user identifier found for value '{spec.name}' "
                    f"(tried: {', '.join(str(p) for p in spec.user_id)})",
                )
            except MissingAttributeError as e:
                raise MissingAttributeError(e.message, value_name=spec.name) from e

        if spec.if_user and not matches_any(user_id, spec.if_user, self._patterns):
            logger.debug(
                {"event": "value_skipped", "value": spec.name, "reason": "ifUser", "user_id": user_id}
            )
            return ValueResult(name=spec.name, outcome=ValueOutcome.SKIPPED_USER)

        target_id = resolve_value(bag, spec.target_id, OnMissing.DEFAULT_EMPTY) if spec.target_id else ""
        target_id = apply_transforms(target_id, spec.target_transform, self._patterns)

        if spec.if_target and not matches_any(target_id, spec.if_target, self._patterns):
            logger.debug(
                {"event": "value_skipped", "value": spec.name, "reason": "ifTarget", "target_id": target_id}
            )
            return ValueResult(name=spec.name, outcome=ValueOutcome.SKIPPED_TARGET)

        source_id = resolve_value(bag, spec.source_id, OnMissing.DEFAULT_EMPTY) if spec.source_id else ""

        inputs: ResolvedInputs = {
            "salt": spec.salt,
            "userID": user_id,
            "targetID": target_id,
            "sourceID": source_id,
        }
        raw = compose_fields(inputs, spec.fields, spec.field_separator)
        result = spec.prefix + hash_digest(spec.hash_function, raw)

        logger.debug(
            {
                "event": "value_derived",
                "value": spec.name,
                "hash_function": spec.hash_function,
                "fields": [field for field in spec.fields if inputs[field]],
                "result": result,
            }
        )

        if spec.name_id:
            result = self._name_id_encoder.encode(
                result,
                name_qualifier=source_id or None,
                sp_name_qualifier=target_id or None,
            )

        return ValueResult(name=spec.name, outcome=ValueOutcome.DERIVED, value=result)
