"""
PoolPulse – Domain Exceptions
==============================
Excepciones específicas del dominio de estadísticas del pool.

JERARQUÍA:
    DomainError (base)
    ├── SourceUnavailableError   (fallo de un colaborador: store, daemon, host)
    ├── ParticipantNotFoundError (participante sin registro base)
    └── MalformedRecordError     (contador o serie que no se puede parsear)

NINGUNA de estas excepciones es fatal para el proceso:
- SourceUnavailable → se reintenta en el próximo ciclo.
- NotFound → se devuelve al llamador como resultado explícito.
- MalformedRecord → el registro se trata como ausente/cero.
"""

from __future__ import annotations


class DomainError(Exception):
    """Excepción base para errores de dominio."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
        }


class SourceUnavailableError(DomainError):
    """Un colaborador externo (store, daemon, host metrics) no respondió."""

    def __init__(self, message: str, source: str = None):
        super().__init__(message, code="SOURCE_UNAVAILABLE")
        self.source = source


class ParticipantNotFoundError(DomainError):
    """El participante no tiene registro base en el store."""

    def __init__(self, participant_id: str):
        super().__init__(f"Participante '{participant_id}' no encontrado", code="NOT_FOUND")
        self.participant_id = participant_id


class MalformedRecordError(DomainError):
    """Un registro crudo no respeta el formato esperado."""

    def __init__(self, message: str, raw: object = None):
        super().__init__(message, code="MALFORMED_RECORD")
        self.raw = raw
