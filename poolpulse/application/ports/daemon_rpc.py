"""
PoolPulse – Application Port: Daemon RPC
=========================================
Interfaz hacia el daemon de la red upstream (JSON-RPC).

Cada llamada devuelve un RpcOutcome explícito (resultado O error),
nunca lanza: los errores de transporte, HTTP y los miembros "error" de
JSON-RPC se convierten en RpcOutcome(error=...).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True, slots=True)
class RpcOutcome:
    """Resultado uniforme de una llamada RPC."""

    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, result: Dict[str, Any]) -> "RpcOutcome":
        return cls(result=result or {}, error=None)

    @classmethod
    def failure(cls, error: object) -> "RpcOutcome":
        return cls(result=None, error=str(error) or "unknown error")


class IDaemonRpc(ABC):
    """
    Cliente JSON-RPC del daemon.

    IMPLEMENTACIONES POSIBLES:
    - DaemonRpcClient (aiohttp)
    - FakeDaemonRpc (tests)
    """

    @abstractmethod
    async def call(self, method: str, params: Optional[Dict[str, Any]] = None) -> RpcOutcome:
        """
        Invoca un método del daemon.

        Args:
            method: Nombre del método (e.g. "get_info", "getlastblockheader")
            params: Parámetros JSON-RPC

        Returns:
            RpcOutcome con result o error
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        pass
