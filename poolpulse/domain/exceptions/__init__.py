"""Domain exceptions."""
from poolpulse.domain.exceptions.domain_errors import (
    DomainError,
    SourceUnavailableError,
    ParticipantNotFoundError,
    MalformedRecordError,
)

__all__ = [
    "DomainError",
    "SourceUnavailableError",
    "ParticipantNotFoundError",
    "MalformedRecordError",
]
