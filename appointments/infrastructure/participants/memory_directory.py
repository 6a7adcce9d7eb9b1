from __future__ import annotations

import threading

from appointments.application.ports.participant_directory import ParticipantDirectoryPort
from appointments.domain.entities.participant import Participant


class MemoryParticipantDirectory(ParticipantDirectoryPort):
    def __init__(self, participants: list[Participant] | None = None) -> None:
        self._participants: dict[int, Participant] = {p.id: p for p in participants or []}
        self._lock = threading.Lock()

    def get(self, participant_id: int) -> Participant | None:
        with self._lock:
            return self._participants.get(participant_id)

    def add(self, participant: Participant) -> Participant:
        with self._lock:
            self._participants[participant.id] = participant
            return participant

    def remove(self, participant_id: int) -> bool:
        with self._lock:
            return self._participants.pop(participant_id, None) is not None
