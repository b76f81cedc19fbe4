"""Regras de negócio puras (sem banco)."""
