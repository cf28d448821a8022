"""
PoolPulse
=========
Motor de agregación periódica y broadcast en vivo de estadísticas para
un pool de minería: contadores crudos + estado de la red → Snapshot →
long-polls agrupados por participante.
"""

__version__ = "1.0.0"
