from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ParticipantRole(str, Enum):
    CUSTOMER = "CUSTOMER"
    SERVICE_PROVIDER = "SERVICE_PROVIDER"
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class Participant:
    id: int
    name: str
    email: str
    role: ParticipantRole = ParticipantRole.CUSTOMER
    active: bool = True

    @property
    def is_service_provider(self) -> bool:
        return self.role is ParticipantRole.SERVICE_PROVIDER


@dataclass(frozen=True)
class ParticipantInfo:
    name: str
    email: str
