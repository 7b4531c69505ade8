"""Authentication processing filter producing eduPersonTargetedID.

TargetedIDFilter is the integration point for the protocol engine:

    id_filter = TargetedIDFilter(config)     # once per configuration load
    id_filter.process(state)                 # once per authentication event

Configuration is validated completely in the constructor. A filter that was
constructed successfully never raises ConfigurationError afterwards.
"""

from __future__ import annotations

__all__ = ["TargetedIDFilter"]

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from targeted_id.config import FilterConfig, parse_filter_config
from targeted_id.context.state import AttributeBag, SessionState, get_attributes, set_output_attribute
from targeted_id.derivation.engine import DerivationEngine, ValueResult
from targeted_id.derivation.protocol import NameIdEncoder, PatternEngine
from targeted_id.derivation.spec import resolve_value_specs
from targeted_id.telemetry.system.system_logger import get_system_logger


class TargetedIDFilter:
    """Filter generating one or more targeted identifier values.

    Attributes:
        config: Validated filter configuration.
        attribute_name: Output attribute name in state["Attributes"].
        engine: Derivation engine built from the resolved value specs.
    """

    def __init__(
        self,
        config: Mapping[str, Any] | FilterConfig,
        *,
        pattern_engine: PatternEngine | None = None,
        name_id_encoder: NameIdEncoder | None = None,
    ) -> None:
        """Validate the configuration and resolve every value spec.

        Args:
            config: Raw configuration mapping or a FilterConfig.
            pattern_engine: Optional PatternEngine (default: Python `re`).
            name_id_encoder: Optional NameIdEncoder (default: SAML 2.0).

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        self.config = parse_filter_config(config)
        self.attribute_name = self.config.attribute_name
        specs = resolve_value_specs(self.config, engine=pattern_engine)
        self.engine = DerivationEngine(
            specs,
            pattern_engine=pattern_engine,
            name_id_encoder=name_id_encoder,
        )

        get_system_logger().debug(
            {
                "event": "config_loaded",
                "attribute": self.attribute_name,
                "values": list(specs),
            }
        )

    @classmethod
    def from_file(cls, config_path: Path, **kwargs: Any) -> "TargetedIDFilter":
        """Create a filter from a JSON configuration file.

        Raises:
            ConfigurationError: If the file is missing or invalid.
        """
        return cls(FilterConfig.load_from_file(config_path), **kwargs)

    def process(self, state: SessionState) -> list[str]:
        """Add the targeted identifier attribute to the session state.

        Replaces state["Attributes"][attribute_name] with the produced
        identifiers (possibly an empty list if every value was filtered out).

        Args:
            state: Session state of the authentication event.

        Returns:
            The produced identifiers.

        Raises:
            MissingAttributeError: If the state has no Attributes mapping or
                a value's user identifier cannot be resolved. The state is
                left unchanged.
        """
        get_attributes(state)
        values = self.engine.derive_all(state)
        set_output_attribute(state, self.attribute_name, values)
        return values

    def explain(self, state: AttributeBag) -> list[ValueResult]:
        """Derive every value without touching the state, reporting skips."""
        return self.engine.derive(state)
