"""
Evaluator configuration.

Controls the decimal context used for rounded operations (division,
exponent literals, and any result that exceeds the working precision).

Resolution order:
    1. Defaults: 28 significant digits, ROUND_HALF_EVEN
    2. A TOML file, when one is given: the ``[evaluator]`` table of an
       ``exactcalc.toml`` or the ``[tool.exactcalc]`` table of a
       ``pyproject.toml``
    3. Environment overrides: EXACTCALC_PRECISION, EXACTCALC_ROUNDING

Usage:
    from exactcalc.core.config import load_config

    config = load_config(Path("exactcalc.toml"))
    context = config.context()
"""

from __future__ import annotations

import decimal
import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from exactcalc.core.errors import ConfigError

logger = logging.getLogger(__name__)

PRECISION_ENV_VAR = "EXACTCALC_PRECISION"
ROUNDING_ENV_VAR = "EXACTCALC_ROUNDING"

_DEFAULT_PRECISION = 28
_DEFAULT_ROUNDING = decimal.ROUND_HALF_EVEN

_ROUNDING_MODES = frozenset(
    {
        decimal.ROUND_CEILING,
        decimal.ROUND_DOWN,
        decimal.ROUND_FLOOR,
        decimal.ROUND_HALF_DOWN,
        decimal.ROUND_HALF_EVEN,
        decimal.ROUND_HALF_UP,
        decimal.ROUND_UP,
        decimal.ROUND_05UP,
    }
)

# Signals that must surface as errors rather than produce NaN or Infinity
_TRAPS = [decimal.DivisionByZero, decimal.InvalidOperation, decimal.Overflow]


@dataclass(frozen=True)
class EvaluatorConfig:
    """Decimal arithmetic settings."""

    precision: int = _DEFAULT_PRECISION
    rounding: str = _DEFAULT_ROUNDING

    def context(self) -> decimal.Context:
        """Build a fresh decimal context from these settings."""
        return decimal.Context(prec=self.precision, rounding=self.rounding, traps=_TRAPS)


def default_context() -> decimal.Context:
    """Context for callers that pass none: the built-in defaults."""
    return EvaluatorConfig().context()


def parse_precision(value: Any) -> int:
    """Validate a precision setting.

    Raises:
        ConfigError: If the value is not a positive integer.
    """
    if isinstance(value, bool):
        raise ConfigError(f"Precision must be a positive integer, got {value!r}")
    try:
        precision = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Precision must be a positive integer, got {value!r}") from None
    if isinstance(value, float) and value != precision:
        raise ConfigError(f"Precision must be a positive integer, got {value!r}")
    if precision < 1 or precision > decimal.MAX_PREC:
        raise ConfigError(f"Precision out of range: {precision}")
    return precision


def parse_rounding(value: str) -> str | None:
    """Normalize a rounding mode name.

    Accepts decimal's constants (``ROUND_HALF_UP``) as well as short,
    case-insensitive names (``half_up``, ``half-up``).

    Returns:
        The decimal rounding constant, or None if the name is unknown.
    """
    name = str(value).strip().upper().replace("-", "_")
    if not name.startswith("ROUND_"):
        name = f"ROUND_{name}"
    return name if name in _ROUNDING_MODES else None


def load_config(path: Path | None = None) -> EvaluatorConfig:
    """Load evaluator configuration.

    Args:
        path: Optional TOML file. ``pyproject.toml`` files are read from
            ``[tool.exactcalc]``, any other file from ``[evaluator]``.

    Returns:
        EvaluatorConfig with file values and environment overrides applied.

    Raises:
        ConfigError: If the file cannot be read or holds invalid values.
    """
    config = EvaluatorConfig()

    if path is not None:
        config = _apply(config, _read_table(path), source=str(path))

    env: dict[str, Any] = {}
    if precision := os.environ.get(PRECISION_ENV_VAR, "").strip():
        env["precision"] = precision
    if rounding := os.environ.get(ROUNDING_ENV_VAR, "").strip():
        env["rounding"] = rounding
    return _apply(config, env, source="environment")


def _read_table(path: Path) -> dict[str, Any]:
    """Read the evaluator settings table from a TOML file."""
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    if path.name == "pyproject.toml":
        table = data.get("tool", {}).get("exactcalc", {})
    else:
        table = data.get("evaluator", {})

    if not isinstance(table, dict):
        raise ConfigError(f"Expected a table of evaluator settings in {path}")
    return table


def _apply(config: EvaluatorConfig, values: dict[str, Any], source: str) -> EvaluatorConfig:
    """Overlay known settings onto ``config``."""
    for key in values:
        if key not in ("precision", "rounding"):
            logger.warning("Ignoring unknown evaluator setting '%s' from %s", key, source)

    if "precision" in values:
        config = replace(config, precision=parse_precision(values["precision"]))

    if "rounding" in values:
        rounding = parse_rounding(values["rounding"])
        if rounding is None:
            logger.warning(
                "Unknown rounding mode '%s' from %s. Defaulting to %s.",
                values["rounding"],
                source,
                _DEFAULT_ROUNDING,
            )
            rounding = _DEFAULT_ROUNDING
        config = replace(config, rounding=rounding)

    return config
