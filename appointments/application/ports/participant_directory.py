from __future__ import annotations

from abc import ABC, abstractmethod

from appointments.domain.entities.participant import Participant, ParticipantInfo


class ParticipantDirectoryPort(ABC):
    @abstractmethod
    def get(self, participant_id: int) -> Participant | None:
        raise NotImplementedError

    def exists(self, participant_id: int) -> bool:
        return self.get(participant_id) is not None

    def is_service_provider(self, participant_id: int) -> bool:
        participant = self.get(participant_id)
        return participant is not None and participant.is_service_provider

    def get_display_info(self, participant_id: int) -> ParticipantInfo | None:
        """Name and email used in response projections."""
        participant = self.get(participant_id)
        if participant is None:
            return None
        return ParticipantInfo(name=participant.name, email=participant.email)
