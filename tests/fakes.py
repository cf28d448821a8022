"""
In-memory fakes for the three collaborator ports.

InMemoryStatsStore mimics the subset of redis-py (decode_responses=True)
that the core uses, including exclusive "(" score bounds and glob keys.
"""

from __future__ import annotations

import json
from fnmatch import fnmatchcase
from typing import Any, Dict, List, Optional

from poolpulse.application.ports.daemon_rpc import IDaemonRpc, RpcOutcome
from poolpulse.application.ports.host_metrics import IHostMetrics
from poolpulse.application.ports.stats_store import IReadBatch, IStatsStore
from poolpulse.domain.entities.snapshot import HostLoad
from poolpulse.domain.exceptions.domain_errors import SourceUnavailableError


def _bound(value):
    """Parse a redis score bound into (number, exclusive)."""
    text = str(value)
    if text in ("-inf", "+inf", "inf"):
        return float(text), False
    if text.startswith("("):
        return float(text[1:]), True
    return float(text), False


def _slice(items: list, start: int, end: int) -> list:
    if end < 0:
        end = len(items) + end
    return items[start:end + 1]


class InMemoryReadBatch(IReadBatch):

    def __init__(self, store: "InMemoryStatsStore") -> None:
        self._store = store
        self._commands: List[tuple] = []

    def _queue(self, name: str, key: str, fn) -> "InMemoryReadBatch":
        self._commands.append((name, key, fn))
        return self

    def keys(self, pattern):
        return self._queue("keys", pattern, lambda: sorted(
            k for k in self._store.all_keys() if fnmatchcase(k, pattern)
        ))

    def get(self, key):
        return self._queue("get", key, lambda: self._store.strings.get(key))

    def hget(self, key, field):
        return self._queue("hget", key, lambda: self._store.hashes.get(key, {}).get(field))

    def hgetall(self, key):
        return self._queue("hgetall", key, lambda: dict(self._store.hashes.get(key, {})))

    def hmget(self, key, fields):
        return self._queue("hmget", key, lambda: [self._store.hashes.get(key, {}).get(f) for f in fields])

    def zcard(self, key):
        return self._queue("zcard", key, lambda: len(self._store.zsets.get(key, {})))

    def _sorted(self, key, reverse=False):
        zset = self._store.zsets.get(key, {})
        return sorted(zset.items(), key=lambda kv: (kv[1], kv[0]), reverse=reverse)

    @staticmethod
    def _shape(items, withscores):
        if withscores:
            return [(member, float(score)) for member, score in items]
        return [member for member, _ in items]

    def zrange(self, key, start, end, withscores=False):
        return self._queue("zrange", key, lambda: self._shape(
            _slice(self._sorted(key), start, end), withscores
        ))

    def zrevrange(self, key, start, end, withscores=False):
        return self._queue("zrevrange", key, lambda: self._shape(
            _slice(self._sorted(key, reverse=True), start, end), withscores
        ))

    @staticmethod
    def _in_range(score, low, high) -> bool:
        low_value, low_excl = _bound(low)
        high_value, high_excl = _bound(high)
        above = score > low_value if low_excl else score >= low_value
        below = score < high_value if high_excl else score <= high_value
        return above and below

    def zrangebyscore(self, key, min, max, withscores=False):
        return self._queue("zrangebyscore", key, lambda: self._shape(
            [kv for kv in self._sorted(key) if self._in_range(kv[1], min, max)], withscores
        ))

    def zrevrangebyscore(self, key, max, min, start=None, num=None, withscores=False):
        def run():
            items = [kv for kv in self._sorted(key, reverse=True) if self._in_range(kv[1], min, max)]
            if num is not None:
                items = items[start or 0:(start or 0) + num]
            return self._shape(items, withscores)
        return self._queue("zrevrangebyscore", key, run)

    def sismember(self, key, member):
        return self._queue("sismember", key, lambda: member in self._store.sets.get(key, set()))

    def exists(self, key):
        return self._queue("exists", key, lambda: int(key in self._store.all_keys()))

    async def execute(self) -> List[Any]:
        if self._store.failing or any(
            fragment in key for _, key, _ in self._commands for fragment in self._store.fail_keys
        ):
            raise SourceUnavailableError("store down", source="store")
        self._store.executed.append([(name, key) for name, key, _ in self._commands])
        return [fn() for _, _, fn in self._commands]


class InMemoryStatsStore(IStatsStore):

    def __init__(self) -> None:
        self.strings: Dict[str, str] = {}
        self.hashes: Dict[str, Dict[str, str]] = {}
        self.zsets: Dict[str, Dict[str, float]] = {}
        self.sets: Dict[str, set] = {}
        self.failing = False
        self.fail_keys: set = set()
        self.executed: List[list] = []
        self.closed = False

    # ─── Seeding helpers ────────────────────────────────────────────────

    def zadd(self, key: str, member: str, score: float) -> None:
        self.zsets.setdefault(key, {})[member] = score

    def hset(self, key: str, mapping: Dict[str, Any]) -> None:
        self.hashes.setdefault(key, {}).update({k: str(v) for k, v in mapping.items()})

    def set_chart(self, key: str, series: list) -> None:
        self.strings[key] = json.dumps(series)

    def all_keys(self) -> set:
        return set(self.strings) | set(self.hashes) | set(self.zsets) | set(self.sets)

    def executed_keys(self) -> List[str]:
        return [key for batch in self.executed for _, key in batch]

    # ─── IStatsStore ────────────────────────────────────────────────────

    def batch(self) -> InMemoryReadBatch:
        return InMemoryReadBatch(self)

    async def close(self) -> None:
        self.closed = True


class FakeDaemonRpc(IDaemonRpc):
    """Returns a configured RpcOutcome per method; unknown methods fail."""

    def __init__(self) -> None:
        self.responses: Dict[str, RpcOutcome] = {}
        self.calls: List[str] = []
        self.closed = False

    def respond(self, method: str, result: Optional[dict] = None, error: Optional[str] = None) -> None:
        if error is not None:
            self.responses[method] = RpcOutcome.failure(error)
        else:
            self.responses[method] = RpcOutcome.success(result or {})

    async def call(self, method, params=None) -> RpcOutcome:
        self.calls.append(method)
        return self.responses.get(method, RpcOutcome.failure(f"no handler for {method}"))

    async def close(self) -> None:
        self.closed = True


class FakeHostMetrics(IHostMetrics):

    def __init__(self, load=(0.5, 0.25, 0.1)) -> None:
        self.load = load
        self.failing = False

    def read(self) -> HostLoad:
        if self.failing:
            raise SourceUnavailableError("no loadavg", source="host")
        return HostLoad(machine="linux", load=tuple(self.load))
