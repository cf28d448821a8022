"""Configuración."""
