"""
PoolPulse – Application Layer
==============================
Orquestación de casos de uso. Depende SOLO de domain/ y de sus propios
puertos (interfaces); las implementaciones concretas viven en
infrastructure/ y se inyectan desde el container.

Este módulo contiene:
- ports/: Interfaces hacia store, daemon RPC y métricas del host
- services/: Estado compartido (SnapshotHolder, SubscriberRegistry) y NetworkProbe
- use_cases/: StatsCollector, BroadcastDispatcher, MinerDetailUseCase, HistoryQueryUseCase
- dto/: Objetos de transferencia
"""
