"""
PoolPulse – Presentation Layer
===============================
Adaptadores de entrada: router FastAPI (JSON + long-poll).
"""
