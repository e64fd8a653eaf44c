"""Deterministic seeded random number generation."""

from .random_number_generator import RandomNumberGenerator, hash_seed

__all__ = [
    "RandomNumberGenerator",
    "hash_seed",
]
