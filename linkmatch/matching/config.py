"""
Matching configuration.

Weights are the maximum points a component can contribute. Thresholds are
similarity cutoffs in [0, 1] below which the name or company component is
zeroed. Both are validated at construction; a config that exists is valid.
"""

import math
import os
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, Optional

from .similarity import DEFAULT_ALGORITHM, Algorithm


class ConfigError(ValueError):
    """Raised when a matching configuration is invalid."""
    pass


# Environment variable -> (section, field)
ENV_KEYS = {
    "LINKMATCH_ALGORITHM": (None, "algorithm"),
    "LINKMATCH_EMAIL_WEIGHT": ("weights", "email"),
    "LINKMATCH_NAME_WEIGHT": ("weights", "name"),
    "LINKMATCH_COMPANY_WEIGHT": ("weights", "company"),
    "LINKMATCH_LOCATION_WEIGHT": ("weights", "location"),
    "LINKMATCH_JOB_TITLE_WEIGHT": ("weights", "job_title"),
    "LINKMATCH_NAME_THRESHOLD": (None, "name_threshold"),
    "LINKMATCH_COMPANY_THRESHOLD": (None, "company_threshold"),
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class MatchingWeights:
    """Maximum points per component. Defaults sum to 110."""

    email: float = 50
    name: float = 30
    company: float = 15
    location: float = 10
    job_title: float = 5

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if not _is_number(value) or not math.isfinite(value):
                raise ConfigError(f"Weight '{f.name}' must be a finite number, got {value!r}")
            if value < 0:
                raise ConfigError(f"Weight '{f.name}' must be >= 0, got {value}")

    @property
    def total(self) -> float:
        return self.email + self.name + self.company + self.location + self.job_title


@dataclass(frozen=True)
class MatchingConfig:
    weights: MatchingWeights = field(default_factory=MatchingWeights)
    algorithm: Algorithm = DEFAULT_ALGORITHM
    name_threshold: float = 0.7
    company_threshold: float = 0.6

    def __post_init__(self):
        if not isinstance(self.weights, MatchingWeights):
            raise ConfigError("weights must be a MatchingWeights instance")
        try:
            object.__setattr__(self, "algorithm", Algorithm(self.algorithm))
        except ValueError:
            choices = ", ".join(a.value for a in Algorithm)
            raise ConfigError(
                f"Unknown algorithm {self.algorithm!r}. Use one of: {choices}"
            ) from None
        for name in ("name_threshold", "company_threshold"):
            value = getattr(self, name)
            if not _is_number(value) or not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be within [0, 1], got {value!r}")

    @property
    def max_score(self) -> float:
        return self.weights.total

    @classmethod
    def create(
        cls,
        weights: Optional[Mapping[str, float]] = None,
        **overrides: Any,
    ) -> "MatchingConfig":
        """
        Build a config from defaults plus partial overrides.

        Args:
            weights: Partial weight mapping, e.g. {"name": 40}
            **overrides: algorithm, name_threshold, company_threshold

        Example:
            MatchingConfig.create(weights={"email": 60}, algorithm="levenshtein")
        """
        base = cls()
        clean = {k: v for k, v in overrides.items() if v is not None}
        try:
            merged_weights = replace(base.weights, **dict(weights or {}))
            return replace(base, weights=merged_weights, **clean)
        except TypeError as e:
            # Unknown field names
            raise ConfigError(str(e)) from e

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "MatchingConfig":
        """Build a config from LINKMATCH_* environment variables."""
        env = os.environ if environ is None else environ
        weights: dict = {}
        overrides: dict = {}
        for key, (section, name) in ENV_KEYS.items():
            raw = env.get(key)
            if raw is None or raw.strip() == "":
                continue
            if name == "algorithm":
                overrides[name] = raw.strip()
                continue
            try:
                value = float(raw)
            except ValueError:
                raise ConfigError(f"{key} must be a number, got {raw!r}")
            if section == "weights":
                weights[name] = value
            else:
                overrides[name] = value
        return cls.create(weights=weights, **overrides)

    def describe(self) -> str:
        w = self.weights
        return (
            f"algorithm={self.algorithm.value} "
            f"weights(email={w.email:g}, name={w.name:g}, company={w.company:g}, "
            f"location={w.location:g}, job_title={w.job_title:g}) "
            f"thresholds(name={self.name_threshold:g}, company={self.company_threshold:g})"
        )


DEFAULT_CONFIG = MatchingConfig()
