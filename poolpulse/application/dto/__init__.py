"""Application DTOs - Data Transfer Objects."""
from poolpulse.application.dto.history_dto import TopMinerDTO, shorten_address

__all__ = [
    "TopMinerDTO",
    "shorten_address",
]
