from __future__ import annotations

import json
import threading
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any

from appointments.application.exceptions import StoreError
from appointments.application.ports.appointment_store import AppointmentStorePort
from appointments.domain.entities.appointment import Appointment, AppointmentStatus, ServiceType


class JsonAppointmentStore(AppointmentStorePort):
    """All appointments in one JSON file, rewritten atomically on every mutation."""

    def __init__(self, data_file: str = "./data/appointments.json") -> None:
        self._file_path = Path(data_file)
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _load_data(self) -> dict[str, Any]:
        """Load store data from the JSON file, return an empty store if missing."""
        if not self._file_path.exists():
            return {"next_id": 1, "appointments": [], "version": 1}

        try:
            with open(self._file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise StoreError(f"Cannot read appointment store {self._file_path}: {e}") from e

        if not isinstance(data, dict):
            raise StoreError(f"Corrupted appointment store {self._file_path}: expected an object")
        if "version" not in data:
            data["version"] = 1
        data.setdefault("appointments", [])
        if "next_id" not in data:
            try:
                data["next_id"] = max((int(a["id"]) for a in data["appointments"]), default=0) + 1
            except (KeyError, TypeError, ValueError) as e:
                raise StoreError(f"Corrupted appointment store {self._file_path}: cannot derive next_id") from e
        return data

    def _save_data(self, data: dict[str, Any]) -> None:
        """Save store data to the JSON file atomically."""
        temp_path = self._file_path.with_suffix(".json.tmp")

        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._file_path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise StoreError(f"Cannot write appointment store {self._file_path}: {e}") from e

    def _serialize(self, appointment: Appointment) -> dict[str, Any]:
        return {
            "id": appointment.id,
            "customer_id": appointment.customer_id,
            "provider_id": appointment.provider_id,
            "service_type": appointment.service_type.value,
            "scheduled_at": appointment.scheduled_at.isoformat(),
            "status": appointment.status.value,
            "notes": appointment.notes,
            "created_at": appointment.created_at.isoformat() if appointment.created_at else None,
            "updated_at": appointment.updated_at.isoformat() if appointment.updated_at else None,
        }

    def _deserialize(self, data: dict[str, Any]) -> Appointment:
        try:
            return Appointment(
                id=int(data["id"]),
                customer_id=int(data["customer_id"]),
                provider_id=int(data["provider_id"]),
                service_type=ServiceType(data["service_type"]),
                scheduled_at=datetime.fromisoformat(data["scheduled_at"]),
                status=AppointmentStatus(data["status"]),
                notes=data.get("notes"),
                created_at=_parse_optional(data.get("created_at")),
                updated_at=_parse_optional(data.get("updated_at")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise StoreError(f"Corrupted appointment record: {data!r}") from e

    def get(self, appointment_id: int) -> Appointment | None:
        with self._lock:
            for record in self._load_data()["appointments"]:
                if record.get("id") == appointment_id:
                    return self._deserialize(record)
            return None

    def insert(self, appointment: Appointment) -> Appointment:
        with self._lock:
            data = self._load_data()
            saved = replace(appointment, id=data["next_id"])
            data["appointments"].append(self._serialize(saved))
            data["next_id"] = saved.id + 1
            self._save_data(data)
            return saved

    def update(self, appointment: Appointment) -> Appointment | None:
        with self._lock:
            data = self._load_data()
            records = data["appointments"]
            for index, record in enumerate(records):
                if record.get("id") == appointment.id:
                    records[index] = self._serialize(appointment)
                    self._save_data(data)
                    return appointment
            return None

    def delete(
        self,
        appointment_id: int,
        expected_status: AppointmentStatus | None = None,
        scheduled_before: datetime | None = None,
    ) -> bool:
        with self._lock:
            data = self._load_data()
            records = data["appointments"]
            for index, record in enumerate(records):
                if record.get("id") != appointment_id:
                    continue
                if expected_status is not None and record.get("status") != expected_status.value:
                    return False
                if scheduled_before is not None and not self._deserialize(record).scheduled_at < scheduled_before:
                    return False
                del records[index]
                self._save_data(data)
                return True
            return False

    def list_all(self) -> list[Appointment]:
        with self._lock:
            return [self._deserialize(r) for r in self._load_data()["appointments"]]


def _parse_optional(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value)
