from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from ffm.contracts import ConfigurationError, FairnessRules, MatchConfig, PositionCounts, WaveDurations

logger = logging.getLogger(__name__)


def default_match_config() -> MatchConfig:
    return MatchConfig()


def _pick(mapping: Mapping[str, Any], *keys: str, default: Any) -> Any:
    for key in keys:
        if key in mapping and mapping[key] is not None:
            return mapping[key]
    return default


def _as_int(value: Any, field_path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or int(value) != value:
        raise ConfigurationError([f"{field_path} must be an integer, got {value!r}"])
    return int(value)


def config_from_mapping(overrides: Mapping[str, Any] | None, base: MatchConfig | None = None) -> MatchConfig:
    """Merge a partial rules override onto ``base`` (defaults when omitted).

    Accepts the stored rules shape (``quarters``, ``quarterDuration``,
    ``waves.first``, ``positions.GK``, ``fairness.maxVariance`` ...) as well as
    the snake_case field names of :class:`MatchConfig`. Missing keys keep the
    base value. The merged config is validated before it is returned.
    """
    base = base or default_match_config()
    overrides = overrides or {}

    waves = _pick(overrides, "waves", "wave_durations", default={}) or {}
    positions = _pick(overrides, "positions", "position_counts", default={}) or {}
    fairness = overrides.get("fairness") or {}
    for name, section in (("waves", waves), ("positions", positions), ("fairness", fairness)):
        if not isinstance(section, Mapping):
            raise ConfigurationError([f"{name} must be an object"])

    gk_outfield = _pick(
        fairness, "gkRequiresOutfield", "gk_requires_outfield", default=base.fairness.gk_requires_outfield
    )
    if not isinstance(gk_outfield, bool):
        raise ConfigurationError([f"fairness.gkRequiresOutfield must be a boolean, got {gk_outfield!r}"])

    config = MatchConfig(
        quarter_count=_as_int(_pick(overrides, "quarters", "quarter_count", default=base.quarter_count), "quarters"),
        quarter_duration_minutes=_as_int(
            _pick(
                overrides,
                "quarterDuration",
                "quarter_duration_minutes",
                default=base.quarter_duration_minutes,
            ),
            "quarterDuration",
        ),
        wave_durations=WaveDurations(
            first=_as_int(_pick(waves, "first", default=base.wave_durations.first), "waves.first"),
            second=_as_int(_pick(waves, "second", default=base.wave_durations.second), "waves.second"),
        ),
        position_counts=PositionCounts(
            gk=_as_int(_pick(positions, "GK", "gk", default=base.position_counts.gk), "positions.GK"),
            defenders=_as_int(
                _pick(positions, "DEF", "defenders", default=base.position_counts.defenders), "positions.DEF"
            ),
            attackers=_as_int(
                _pick(positions, "ATT", "attackers", default=base.position_counts.attackers), "positions.ATT"
            ),
        ),
        fairness=FairnessRules(
            max_variance_minutes=_as_int(
                _pick(
                    fairness,
                    "maxVariance",
                    "maxVarianceMinutes",
                    "max_variance_minutes",
                    default=base.fairness.max_variance_minutes,
                ),
                "fairness.maxVariance",
            ),
            gk_requires_outfield=gk_outfield,
        ),
        max_attempts=_as_int(_pick(overrides, "maxAttempts", "max_attempts", default=base.max_attempts), "maxAttempts"),
        roster_min=base.roster_min,
        roster_max=base.roster_max,
    )
    config.validate()
    return config


def config_to_mapping(config: MatchConfig) -> dict[str, Any]:
    return {
        "quarters": config.quarter_count,
        "quarterDuration": config.quarter_duration_minutes,
        "waves": {"first": config.wave_durations.first, "second": config.wave_durations.second},
        "positions": {
            "GK": config.position_counts.gk,
            "DEF": config.position_counts.defenders,
            "ATT": config.position_counts.attackers,
        },
        "fairness": {
            "maxVariance": config.fairness.max_variance_minutes,
            "gkRequiresOutfield": config.fairness.gk_requires_outfield,
        },
        "maxAttempts": config.max_attempts,
    }


def load_rules_file(path: Path) -> MatchConfig:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError([f"{path} is not valid JSON: {exc.msg} (line {exc.lineno})"]) from exc
    if not isinstance(raw, dict):
        raise ConfigurationError([f"{path} must contain a JSON object"])
    config = config_from_mapping(raw)
    logger.debug("loaded rules from %s: %s", path, config_to_mapping(config))
    return config
