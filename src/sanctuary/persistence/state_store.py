"""State store: JSON-based persistence for registry state.

Stores and recovers:
- Authority configuration (principal, fee, grace period, limits)
- Verifier records
- Status records, the subject index and the id counter
- History trails
- Appeal records

This is a simple file-based store suitable for single-node deployment.
The whole document is rewritten on every save, so a save is all or
nothing from the reader's point of view.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from sanctuary.models.appeal import AppealRecord, AppealState
from sanctuary.models.authority import AuthorityConfig
from sanctuary.models.status import StatusRecord, StatusType
from sanctuary.models.verifier import VerifierRecord
from sanctuary.state import RegistryState

SCHEMA_VERSION = 1


class StateStore:
    """JSON file-based state persistence.

    Usage:
        store = StateStore(Path("data/registry_state.json"))
        store.save(state)

        # On recovery:
        if store.has_state:
            state = store.load()
    """

    def __init__(self, storage_path: Path) -> None:
        self._path = storage_path
        self._state: dict[str, Any] = {}
        if storage_path.exists():
            self._load()

    @property
    def has_state(self) -> bool:
        return bool(self._state)

    def _load(self) -> None:
        with self._path.open("r", encoding="utf-8") as f:
            self._state = json.load(f)
        version = self._state.get("schema_version")
        if version != SCHEMA_VERSION:
            raise ValueError(
                f"Unsupported state schema version {version!r} in {self._path}"
            )

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(self._state, f, indent=2, sort_keys=True, ensure_ascii=False)
        os.replace(tmp, self._path)

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save(self, state: RegistryState) -> None:
        """Serialize the full registry state and write it out."""
        cfg = state.config
        self._state = {
            "schema_version": SCHEMA_VERSION,
            "config": {
                "authority": cfg.authority,
                "renewal_fee": cfg.renewal_fee,
                "grace_period": cfg.grace_period,
                "history_limit": cfg.history_limit,
                "max_statuses": cfg.max_statuses,
            },
            "verifiers": [
                {
                    "principal": v.principal,
                    "verified": v.verified,
                    "score": v.score,
                    "assignments": v.assignments,
                }
                for v in state.verifiers.all_verifiers()
            ],
            "next_status_id": state.statuses.next_id,
            "statuses": {
                str(sid): _status_to_dict(record)
                for sid, record in state.statuses.items()
            },
            "subject_index": {
                str(subject): sid
                for subject, sid in state.statuses.subject_index().items()
            },
            "history": {
                str(sid): trail for sid, trail in state.history.all_trails().items()
            },
            "appeals": [
                {
                    "status_id": a.status_id,
                    "appeal_reason": a.appeal_reason,
                    "filed_at": a.filed_at,
                    "resolver": a.resolver,
                    "state": a.state.value,
                    "outcome": a.outcome,
                }
                for a in state.appeals.all_appeals()
            ],
        }
        self._save()

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    def load(self) -> RegistryState:
        """Deserialize registry state.

        Raises ValueError if nothing has been stored or the stored
        document is internally inconsistent.
        """
        if not self._state:
            raise ValueError(f"No registry state stored at {self._path}")
        data = self._state
        cfg = data["config"]
        state = RegistryState(
            config=AuthorityConfig(
                authority=cfg["authority"],
                renewal_fee=cfg["renewal_fee"],
                grace_period=cfg["grace_period"],
                history_limit=cfg["history_limit"],
                max_statuses=cfg["max_statuses"],
            ),
        )

        for v in data.get("verifiers", []):
            state.verifiers.put(VerifierRecord(
                principal=v["principal"],
                verified=v["verified"],
                score=v["score"],
                assignments=v["assignments"],
            ))

        statuses = {
            int(sid): _status_from_dict(s)
            for sid, s in data.get("statuses", {}).items()
        }
        subject_index = {
            int(subject): sid
            for subject, sid in data.get("subject_index", {}).items()
        }
        state.statuses.restore(statuses, subject_index, data["next_status_id"])

        state.history.restore({
            int(sid): trail for sid, trail in data.get("history", {}).items()
        })

        for a in data.get("appeals", []):
            state.appeals.put(AppealRecord(
                status_id=a["status_id"],
                appeal_reason=a["appeal_reason"],
                filed_at=a["filed_at"],
                resolver=a["resolver"],
                state=AppealState(a["state"]),
                outcome=a["outcome"],
            ))

        return state


def _status_to_dict(record: StatusRecord) -> dict[str, Any]:
    return {
        "subject_id": record.subject_id,
        "status_type": record.status_type.value,
        "created_at": record.created_at,
        "updated_at": record.updated_at,
        "expiration": record.expiration,
        "assigner": record.assigner,
        "location": record.location,
        "country": record.country,
        "document_hash": record.document_hash.hex(),
        "reason": record.reason,
        "score": record.score,
        "rating": record.rating,
        "active": record.active,
    }


def _status_from_dict(data: dict[str, Any]) -> StatusRecord:
    return StatusRecord(
        subject_id=data["subject_id"],
        status_type=StatusType(data["status_type"]),
        created_at=data["created_at"],
        updated_at=data["updated_at"],
        expiration=data["expiration"],
        assigner=data["assigner"],
        location=data["location"],
        country=data["country"],
        document_hash=bytes.fromhex(data["document_hash"]),
        reason=data["reason"],
        score=data["score"],
        rating=data["rating"],
        active=data["active"],
    )
