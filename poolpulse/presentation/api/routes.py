"""
PoolPulse – API Routes (FastAPI)
=================================
Superficie HTTP delgada sobre los casos de uso.

Endpoints disponibles:
  GET  /api/health                          → health check
  GET  /stats?address=                      → snapshot actual + "miner"
  GET  /live_stats?address=                 → long-poll hasta el próximo ciclo
  GET  /stats_address?address=&longpoll=    → detalle del participante
  GET  /get_payments?time=&address=         → página de pagos
  GET  /get_blocks?height=                  → página de bloques madurados
  GET  /get_blocks_user?address=&height=    → rondas completadas del participante
  GET  /get_top25miners                     → ranking por hashrate

LONG-POLL:
  El handler registra una Subscription, espera una única entrega (o el
  timeout) y SIEMPRE la des-registra en finally. Si vence el timeout
  responde con el estado actual.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse

from poolpulse.domain.entities.detail_view import NOT_FOUND_PAYLOAD
from poolpulse.domain.exceptions.domain_errors import SourceUnavailableError
from poolpulse.shared.logging.logger import get_logger

logger = get_logger("api.routes")

router = APIRouter()

NO_CACHE_HEADERS = {"Cache-Control": "no-cache"}

# Referencias a componentes inyectados desde main.py
_snapshots = None
_live_registry = None
_detail_registry = None
_detail_use_case = None
_history_use_case = None
_long_poll_timeout: float = 60.0


def init_routes(
    snapshots,
    live_registry,
    detail_registry,
    detail_use_case,
    history_use_case,
    long_poll_timeout: float = 60.0,
) -> None:
    """Inyectar dependencias desde main.py al arrancar."""
    global _snapshots, _live_registry, _detail_registry
    global _detail_use_case, _history_use_case, _long_poll_timeout
    _snapshots = snapshots
    _live_registry = live_registry
    _detail_registry = detail_registry
    _detail_use_case = detail_use_case
    _history_use_case = history_use_case
    _long_poll_timeout = long_poll_timeout


def _reply(data: Any) -> JSONResponse:
    return JSONResponse(content=data, headers=NO_CACHE_HEADERS)


def _require_ready() -> None:
    if _snapshots is None:
        raise HTTPException(status_code=503, detail="Server not ready")


# ─── Estado ────────────────────────────────────────────────────────────

@router.get("/api/health")
async def health_check() -> dict:
    """Health check para monitoreo."""
    return {
        "status": "ok",
        "service": "poolpulse",
        "cycles": _snapshots.cycles if _snapshots is not None else 0,
    }


@router.get("/stats")
async def pool_stats(address: Optional[str] = Query(None)) -> JSONResponse:
    _require_ready()
    return _reply(_snapshots.for_participant(address))


@router.get("/live_stats")
async def live_stats(address: Optional[str] = Query(None)) -> JSONResponse:
    """Espera el próximo broadcast; con timeout responde el snapshot actual."""
    _require_ready()
    handle = _live_registry.subscribe(address)
    try:
        payload = await handle.wait(_long_poll_timeout)
    finally:
        _live_registry.unregister(handle.key)

    if payload is None:
        payload = _snapshots.for_participant(address)
    return _reply(payload)


@router.get("/stats_address")
async def address_stats(
    address: Optional[str] = Query(None),
    longpoll: bool = Query(False),
) -> JSONResponse:
    """Detalle del participante, inmediato o en long-poll."""
    _require_ready()
    if not address:
        return _reply(dict(NOT_FOUND_PAYLOAD))

    if not longpoll:
        snapshot = _snapshots.get()
        # Candidatos del más reciente al más antiguo
        candidates = list(reversed(snapshot.candidates))
        result = await _detail_use_case.get_detail(address, candidates=candidates, snapshot=snapshot)
        return _reply(result.to_dict())

    try:
        exists = await _detail_use_case.participant_exists(address)
    except SourceUnavailableError as e:
        logger.warning("No se pudo verificar %s: %s", address, e.message)
        exists = False
    if not exists:
        return _reply(dict(NOT_FOUND_PAYLOAD))

    handle = _detail_registry.subscribe(address)
    try:
        payload = await handle.wait(_long_poll_timeout)
    finally:
        _detail_registry.unregister(handle.key)

    if payload is None:
        payload = (await _detail_use_case.get_detail(address)).to_dict()
    return _reply(payload)


# ─── Historial ─────────────────────────────────────────────────────────

@router.get("/get_payments")
async def get_payments(
    time: Optional[int] = Query(None),
    address: Optional[str] = Query(None),
) -> JSONResponse:
    _require_ready()
    try:
        data = await _history_use_case.get_payments(address, time)
    except SourceUnavailableError as e:
        logger.error("Consulta de pagos falló: %s", e.message)
        data = {"error": "Query failed"}
    return _reply(data)


@router.get("/get_blocks")
async def get_blocks(height: Optional[int] = Query(None)) -> JSONResponse:
    _require_ready()
    try:
        data = await _history_use_case.get_blocks(height)
    except SourceUnavailableError as e:
        logger.error("Consulta de bloques falló: %s", e.message)
        data = {"error": "Query failed"}
    return _reply(data)


@router.get("/get_blocks_user")
async def get_user_blocks(
    address: Optional[str] = Query(None),
    height: Optional[int] = Query(None),
) -> JSONResponse:
    _require_ready()
    if not address:
        return _reply({"error": "Query failed"})
    try:
        data = await _history_use_case.get_user_blocks(address, height)
    except SourceUnavailableError as e:
        logger.error("Consulta de rondas de %s falló: %s", address, e.message)
        data = {"error": "Query failed"}
    return _reply(data)


@router.get("/get_top25miners")
async def top_miners() -> JSONResponse:
    _require_ready()
    try:
        miners = await _history_use_case.get_top_miners()
    except SourceUnavailableError as e:
        logger.error("Ranking de mineros falló: %s", e.message)
        return _reply({"error": "Error collecting top miners stats"})
    return _reply([m.to_dict() for m in miners])
