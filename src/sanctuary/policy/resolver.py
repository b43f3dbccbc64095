"""Policy resolver: loads registry_params.json and exposes every
registry parameter as a typed method call.

No magic. If a value is missing from the config, it fails loud.
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

PARAMS_FILENAME = "registry_params.json"

_DEFAULT_PARAMS: dict[str, Any] = {
    "version": "1.0",
    "defaults": {
        "renewal_fee": 500,
        "grace_period_days": 30,
        "history_limit": 10,
        "max_statuses": 1_000_000,
    },
    "limits": {
        "max_grace_period_days": 90,
        "min_history_limit": 1,
        "max_history_limit": 20,
        "max_location_length": 100,
        "max_country_length": 50,
        "max_reason_length": 200,
        "max_appeal_reason_length": 200,
        "document_hash_length": 32,
        "max_score": 100,
        "max_rating": 5,
    },
    "blocks_per_day": 144,
    "null_principal": "SP000000000000000000002Q6VF78",
    "admin": {"strict_setters": False},
}


@dataclass(frozen=True)
class FieldLimits:
    """Resolved bounds used by the validation layer."""
    max_grace_period_days: int
    min_history_limit: int
    max_history_limit: int
    max_location_length: int
    max_country_length: int
    max_reason_length: int
    max_appeal_reason_length: int
    document_hash_length: int
    max_score: int
    max_rating: int


class PolicyResolver:
    """Loads and resolves all registry policy.

    Usage:
        resolver = PolicyResolver.from_config_dir(Path("config"))
        limits = resolver.field_limits()
        fee = resolver.default_renewal_fee()
    """

    def __init__(self, params: dict[str, Any]) -> None:
        self._params = params
        self._validate()

    @classmethod
    def from_config_dir(cls, config_dir: Path) -> PolicyResolver:
        """Load from the canonical config directory."""
        return cls(_load_json(config_dir / PARAMS_FILENAME))

    @classmethod
    def default(cls, **overrides: Any) -> PolicyResolver:
        """Build from the built-in parameters.

        Keyword overrides replace top-level sections, e.g.
        ``PolicyResolver.default(admin={"strict_setters": True})``.
        """
        params = copy.deepcopy(_DEFAULT_PARAMS)
        params.update(overrides)
        return cls(params)

    def _validate(self) -> None:
        for key in ("version", "defaults", "limits", "blocks_per_day",
                    "null_principal", "admin"):
            if key not in self._params:
                raise ValueError(f"{PARAMS_FILENAME} missing {key}")
        limits = self.field_limits()
        if limits.min_history_limit < 1:
            raise ValueError("min_history_limit must be at least 1")
        if limits.min_history_limit > limits.max_history_limit:
            raise ValueError("min_history_limit exceeds max_history_limit")
        if self.blocks_per_day() <= 0:
            raise ValueError("blocks_per_day must be positive")

    # ------------------------------------------------------------------
    # Initial authority configuration
    # ------------------------------------------------------------------

    def default_renewal_fee(self) -> int:
        return self._params["defaults"]["renewal_fee"]

    def default_grace_period(self) -> int:
        """Return the initial grace period in days."""
        return self._params["defaults"]["grace_period_days"]

    def default_history_limit(self) -> int:
        return self._params["defaults"]["history_limit"]

    def max_statuses(self) -> int:
        """Return the capacity of the status store."""
        return self._params["defaults"]["max_statuses"]

    # ------------------------------------------------------------------
    # Validation bounds
    # ------------------------------------------------------------------

    def field_limits(self) -> FieldLimits:
        """Return every field bound enforced before mutation."""
        lim = self._params["limits"]
        return FieldLimits(
            max_grace_period_days=lim["max_grace_period_days"],
            min_history_limit=lim["min_history_limit"],
            max_history_limit=lim["max_history_limit"],
            max_location_length=lim["max_location_length"],
            max_country_length=lim["max_country_length"],
            max_reason_length=lim["max_reason_length"],
            max_appeal_reason_length=lim["max_appeal_reason_length"],
            document_hash_length=lim["document_hash_length"],
            max_score=lim["max_score"],
            max_rating=lim["max_rating"],
        )

    # ------------------------------------------------------------------
    # Chain parameters
    # ------------------------------------------------------------------

    def blocks_per_day(self) -> int:
        """Return the number of height units per grace-period day."""
        return self._params["blocks_per_day"]

    def null_principal(self) -> str:
        """Return the reserved burn address that can never be authority."""
        return self._params["null_principal"]

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def strict_admin_setters(self) -> bool:
        """Whether admin setters also require caller == authority.

        False reproduces the historical behaviour where any caller may
        change fee, grace period and history limit once an authority
        exists.
        """
        return bool(self._params["admin"]["strict_setters"])


def _load_json(path: Path) -> dict[str, Any]:
    """Load a JSON file or raise with clear path."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)
