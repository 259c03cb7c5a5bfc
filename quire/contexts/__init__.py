"""Bounded contexts for QUIRE (templating, rendering)."""
