"""
PoolPulse – Settings (Pydantic BaseSettings)
=============================================
Configuración centralizada cargada desde variables de entorno / .env.
Se usa pydantic-settings para validación estricta al arranque.

Los componentes NO leen este singleton directamente: reciben sus
parámetros por constructor desde el container. Solo container.py y
main.py importan `settings`.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings
from pydantic import BaseModel, Field
from typing import List, Optional


class PoolPort(BaseModel):
    """Puerto stratum publicado por el pool (eco estático en el snapshot)."""

    port: int
    difficulty: int = 0
    desc: str = ""
    hidden: bool = False


class Settings(BaseSettings):
    # ─── Store (Redis) ──────────────────────────────────────────────────
    redis_url: str = Field(
        default="redis://127.0.0.1:6379/0", description="URL del store Redis del pool"
    )
    coin: str = Field(
        default="pool", description="Namespace de todas las claves del store"
    )

    # ─── Daemon RPC ─────────────────────────────────────────────────────
    daemon_host: str = Field(default="127.0.0.1")
    daemon_port: int = Field(default=18081)
    daemon_rpc_path: str = Field(default="/json_rpc")
    rpc_timeout_seconds: float = Field(
        default=10.0, description="Timeout (seg) por llamada JSON-RPC al daemon"
    )
    use_first_vout: bool = Field(
        default=False,
        description="Leer la recompensa del último bloque desde el primer vout de la coinbase",
    )

    # ─── Agregación ─────────────────────────────────────────────────────
    hashrate_window: int = Field(
        default=600, description="Ventana (seg) para normalizar contadores a hashrate"
    )
    update_interval: float = Field(
        default=5.0, description="Intervalo (seg) entre ciclos de recolección"
    )
    api_payments: int = Field(default=30, description="Tamaño de página de pagos")
    api_blocks: int = Field(default=30, description="Tamaño de página de bloques")
    api_worker_blocks: int = Field(
        default=30, description="Rondas completadas por participante en el detalle"
    )
    top_miners_limit: int = Field(default=25)
    long_poll_timeout: float = Field(
        default=60.0, description="Espera máxima (seg) de un long-poll antes de responder"
    )

    # ─── Charts ─────────────────────────────────────────────────────────
    pool_charts: List[str] = Field(
        default=["hashrate", "miners", "workers", "difficulty"],
        description="Series JSON del pool leídas en cada ciclo",
    )
    charts_blocks_enabled: bool = Field(default=True)
    charts_blocks_days: int = Field(default=30)

    # ─── Descripción estática del pool (eco en el snapshot) ─────────────
    pool_host: str = Field(default="")
    pool_ports: List[PoolPort] = Field(default_factory=list)
    cn_algorithm: str = Field(default="cryptonight")
    cn_variant: int = Field(default=0)
    cn_blob_type: int = Field(default=0)
    pool_fee: float = Field(default=0.8)
    network_fee: float = Field(default=0.0)
    coin_units: int = Field(default=1_000_000_000_000)
    coin_decimal_places: int = Field(default=4)
    coin_difficulty_target: int = Field(default=120)
    symbol: str = Field(default="COIN")
    unlock_depth: int = Field(default=60)
    payments_interval: int = Field(default=600)
    min_payment: int = Field(default=100_000_000_000)
    max_payment: Optional[int] = Field(default=None)
    transfer_fee: int = Field(default=10_000_000_000)
    denomination_unit: int = Field(default=10_000_000_000)
    slush_mining_enabled: bool = Field(default=False)
    slush_weight: int = Field(default=300)
    payment_id_separator: str = Field(default=".")
    fixed_diff_enabled: bool = Field(default=True)
    fixed_diff_separator: str = Field(default="+")
    version: str = Field(default="v1.4.6")

    # ─── Server ─────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8117)
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    def public_config(self) -> dict:
        """Descripción estática del pool que se adjunta a cada snapshot."""
        return {
            "poolHost": self.pool_host,
            "ports": [p.model_dump() for p in self.pool_ports if not p.hidden],
            "cnAlgorithm": self.cn_algorithm,
            "cnVariant": self.cn_variant,
            "cnBlobType": self.cn_blob_type,
            "hashrateWindow": self.hashrate_window,
            "fee": self.pool_fee,
            "networkFee": self.network_fee,
            "coin": self.coin,
            "coinUnits": self.coin_units,
            "coinDecimalPlaces": self.coin_decimal_places,
            "coinDifficultyTarget": self.coin_difficulty_target,
            "symbol": self.symbol,
            "depth": self.unlock_depth,
            "version": self.version,
            "paymentsInterval": self.payments_interval,
            "minPaymentThreshold": self.min_payment,
            "maxPaymentThreshold": self.max_payment,
            "transferFee": self.transfer_fee,
            "denominationUnit": self.denomination_unit,
            "slushMiningEnabled": self.slush_mining_enabled,
            "weight": self.slush_weight,
            "paymentIdSeparator": self.payment_id_separator,
            "fixedDiffEnabled": self.fixed_diff_enabled,
            "fixedDiffSeparator": self.fixed_diff_separator,
            "blocksChartEnabled": self.charts_blocks_enabled,
            "blocksChartDays": self.charts_blocks_days if self.charts_blocks_enabled else None,
        }


# Singleton global – se importa donde se necesite
settings = Settings()
