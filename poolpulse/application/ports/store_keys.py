"""
PoolPulse – Application Port: Store Keys
=========================================
Contrato de nombres de claves del store: "<namespace>:<kind>[:<id>]".

Todas las lecturas del core construyen sus claves aquí; ninguna capa
concatena strings de claves por su cuenta.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class StoreKeys:
    namespace: str

    def _key(self, *parts: object) -> str:
        return ":".join([self.namespace, *(str(p) for p in parts)])

    # ─── Pool ───────────────────────────────────────────────────────────
    def hashrate(self) -> str:
        """Sorted-set de contadores "<valor>:<id>" (score = timestamp)."""
        return self._key("hashrate")

    def pool_stats(self) -> str:
        return self._key("stats")

    def candidates(self) -> str:
        return self._key("blocks", "candidates")

    def matured(self) -> str:
        return self._key("blocks", "matured")

    def round_scores(self, height: Optional[int] = None) -> str:
        """Tabla de score de la ronda actual o de la ronda cerrada en `height`."""
        suffix = "Current" if height is None else height
        return self._key("scores", f"round{suffix}")

    def round_hashes(self) -> str:
        return self._key("shares_actual", "roundCurrent")

    def payments(self, address: Optional[str] = None) -> str:
        return self._key("payments", address or "all")

    def payments_pattern(self) -> str:
        return self._key("payments", "*")

    def chart(self, name: str) -> str:
        return self._key("charts", name)

    # ─── Participante ───────────────────────────────────────────────────
    def worker(self, address: str) -> str:
        """Hash base del participante (balance, paid, lastShare, hashes...)."""
        return self._key("workers", address)

    def workers_pattern(self) -> str:
        return self._key("workers", "*")

    def unique_worker(self, address: str, name: str) -> str:
        return self._key("unique_workers", f"{address}~{name}")

    def unique_workers_pattern(self, address: str) -> str:
        return self._key("unique_workers", f"{address}~*")

    def block_stats(self, address: str) -> str:
        """Rondas completadas por el participante."""
        return self._key("blockstat", address)

    def participant_chart(self, address: str) -> str:
        return self._key("charts", "hashrate", address)

    def worker_chart(self, address: str, name: str) -> str:
        return self._key("charts", "worker_hashrate", f"{address}~{name}")

    # ─── Inverso ────────────────────────────────────────────────────────
    def id_of(self, kind: str, key: str) -> Optional[str]:
        """
        Extrae el id de una clave "<namespace>:<kind>:<id>".

        Returns:
            El id, o None si la clave no pertenece a ese kind.
        """
        prefix = self._key(kind) + ":"
        if not key.startswith(prefix) or len(key) == len(prefix):
            return None
        return key[len(prefix):]
