from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from appointments.application.exceptions import StoreError
from appointments.application.ports.participant_directory import ParticipantDirectoryPort
from appointments.domain.entities.participant import Participant, ParticipantRole


class JsonParticipantDirectory(ParticipantDirectoryPort):
    """
    Read-only participant records loaded once from a JSON file:

        [{"id": 1, "name": "Dr. Smith", "email": "smith@example.com",
          "role": "SERVICE_PROVIDER", "active": true}, ...]
    """

    def __init__(self, path: str) -> None:
        self._path = Path(path)
        self._logger = logging.getLogger(__name__)
        self._participants = self._load()

    def _load(self) -> dict[int, Participant]:
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                records = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise StoreError(f"Cannot read participants file {self._path}: {e}") from e

        participants = {}
        for record in records:
            participant = _to_participant(record)
            participants[participant.id] = participant
        self._logger.info("Loaded participants", extra={"count": len(participants)})
        return participants

    def get(self, participant_id: int) -> Participant | None:
        return self._participants.get(participant_id)


def _to_participant(record: dict[str, Any]) -> Participant:
    try:
        return Participant(
            id=int(record["id"]),
            name=str(record["name"]),
            email=str(record.get("email", "")),
            role=ParticipantRole(str(record.get("role", ParticipantRole.CUSTOMER.value)).upper()),
            active=bool(record.get("active", True)),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise StoreError(f"Invalid participant record: {record!r}") from e
