"""Shared FastAPI dependency injection."""

from __future__ import annotations

from flowform.services.admission import AdmissionCounter

_admission_counter: AdmissionCounter | None = None


def set_admission_counter(counter: AdmissionCounter | None) -> None:
    global _admission_counter
    _admission_counter = counter


def get_admission_counter() -> AdmissionCounter:
    if _admission_counter is None:
        raise RuntimeError("Admission counter not initialized")
    return _admission_counter
