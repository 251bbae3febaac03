"""Shared helpers: deterministic RNG streams, numeric utilities and the game result record."""
