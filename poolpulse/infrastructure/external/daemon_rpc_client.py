"""
Daemon JSON-RPC Client.

Implementación de IDaemonRpc con aiohttp.

Una ClientSession por proceso, creada en la primera llamada (dentro del
event loop) y cerrada en el shutdown. Todos los fallos (transporte,
HTTP != 200, JSON inválido, miembro "error") se devuelven como
RpcOutcome.failure; call() nunca lanza.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from poolpulse.application.ports.daemon_rpc import IDaemonRpc, RpcOutcome
from poolpulse.shared.logging.logger import get_logger

logger = get_logger("daemon_rpc")


class DaemonRpcClient(IDaemonRpc):

    def __init__(
        self,
        host: str,
        port: int,
        path: str = "/json_rpc",
        timeout_seconds: float = 10.0,
    ) -> None:
        self._url = f"http://{host}:{port}{path}"
        self._timeout = ClientTimeout(total=timeout_seconds)
        self._session: Optional[ClientSession] = None
        self._request_id = 0

    @property
    def url(self) -> str:
        return self._url

    def _get_session(self) -> ClientSession:
        if self._session is None or self._session.closed:
            self._session = ClientSession(timeout=self._timeout)
        return self._session

    async def call(self, method: str, params: Optional[Dict[str, Any]] = None) -> RpcOutcome:
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": str(self._request_id),
            "method": method,
            "params": params or {},
        }
        try:
            async with self._get_session().post(self._url, json=payload) as response:
                if response.status != 200:
                    return RpcOutcome.failure(f"HTTP {response.status} en {method}")
                body = await response.json(content_type=None)
        except (ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.debug("RPC %s falló: %r", method, e)
            return RpcOutcome.failure(f"{type(e).__name__}: {e}")

        if not isinstance(body, dict):
            return RpcOutcome.failure(f"Respuesta inválida en {method}")
        if body.get("error"):
            return RpcOutcome.failure(body["error"])
        result = body.get("result")
        if not isinstance(result, dict):
            return RpcOutcome.failure(f"Respuesta sin result en {method}")
        return RpcOutcome.success(result)

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
        logger.info("Sesión RPC del daemon cerrada")
