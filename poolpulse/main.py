"""
PoolPulse – Main Application Entry Point
=========================================
Orquesta todos los componentes: Stats Collector + Broadcast + API.

ARQUITECTURA DE ARRANQUE:
  1. Configurar logging
  2. Crear el container (adaptadores perezosos)
  3. FastAPI lifespan startup:
     a. Inyectar dependencias al router
     b. Iniciar StatsCollector (timer de ciclos)
  4. FastAPI lifespan shutdown:
     a. Detener el collector
     b. Cerrar long-polls pendientes
     c. Cerrar Redis y la sesión RPC

FLUJO DE DATOS:
  timer → StatsCollector.collect()
       → Redis (lote) + daemon RPC + host metrics + charts   (en paralelo)
       → RateCalculator → Snapshot → SnapshotHolder
       → BroadcastDispatcher → long-polls de /live_stats y /stats_address
  uvicorn poolpulse.main:app --host 0.0.0.0 --port 8117
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from poolpulse import __version__
from poolpulse.container import init_container
from poolpulse.presentation.api.routes import init_routes, router
from poolpulse.shared.config.settings import settings
from poolpulse.shared.logging.logger import get_logger, setup_logging

# ─── Logging ────────────────────────────────────────────────────────────
setup_logging(settings.log_level.upper())
logger = get_logger("main")

# ─── Contenedor de Dependencias ─────────────────────────────────────────
container = init_container(settings)


# ─── FastAPI Lifespan ───────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle de la aplicación."""
    logger.info("=" * 60)
    logger.info("  PoolPulse v%s", __version__)
    logger.info("  Coin: %s  (store %s)", settings.coin, settings.redis_url)
    logger.info("  Daemon: %s:%d%s", settings.daemon_host, settings.daemon_port, settings.daemon_rpc_path)
    logger.info("  Ventana hashrate: %ds, intervalo: %.1fs", settings.hashrate_window, settings.update_interval)
    logger.info("  Charts: %s  (bloques: %s)",
                ", ".join(settings.pool_charts) or "-",
                settings.charts_blocks_days if settings.charts_blocks_enabled else "off")
    logger.info("=" * 60)

    init_routes(
        snapshots=container.snapshot_holder,
        live_registry=container.live_registry,
        detail_registry=container.detail_registry,
        detail_use_case=container.detail_use_case,
        history_use_case=container.history_use_case,
        long_poll_timeout=settings.long_poll_timeout,
    )

    await container.collector.start()
    logger.info("✓ Todos los componentes iniciados correctamente")

    yield  # ← La app está corriendo aquí

    # ── SHUTDOWN ──
    logger.info("Iniciando shutdown...")
    await container.collector.stop()
    container.live_registry.close_all()
    container.detail_registry.close_all()
    await container.close()
    logger.info("✓ Shutdown completo")


# ─── FastAPI App ────────────────────────────────────────────────────────

app = FastAPI(
    title="PoolPulse",
    description="Agregación periódica y broadcast en vivo de estadísticas de un pool de minería",
    version=__version__,
    lifespan=lifespan,
)

# Los frontends del pool se sirven desde otros dominios
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(router)


def run() -> None:
    """Entry point de consola."""
    uvicorn.run(
        "poolpulse.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
