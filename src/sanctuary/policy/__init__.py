"""Policy module: registry parameters loaded from config."""

from sanctuary.policy.resolver import FieldLimits, PolicyResolver

__all__ = ["FieldLimits", "PolicyResolver"]
