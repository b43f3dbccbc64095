"""Registry state: every map and counter one registry owns.

Operations receive the state explicitly instead of reaching for module
globals, so independent registries never share anything.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sanctuary.appeals.book import AppealBook
from sanctuary.models.authority import AuthorityConfig
from sanctuary.policy.resolver import PolicyResolver
from sanctuary.registry.history import HistoryLog
from sanctuary.registry.statuses import StatusStore
from sanctuary.registry.verifiers import VerifierRegistry


@dataclass
class RegistryState:
    config: AuthorityConfig
    verifiers: VerifierRegistry = field(default_factory=VerifierRegistry)
    statuses: StatusStore = field(default_factory=StatusStore)
    history: HistoryLog = field(default_factory=HistoryLog)
    appeals: AppealBook = field(default_factory=AppealBook)

    @classmethod
    def fresh(cls, resolver: PolicyResolver) -> RegistryState:
        """Empty state with the resolver's initial parameters."""
        return cls(
            config=AuthorityConfig(
                renewal_fee=resolver.default_renewal_fee(),
                grace_period=resolver.default_grace_period(),
                history_limit=resolver.default_history_limit(),
                max_statuses=resolver.max_statuses(),
            ),
        )
