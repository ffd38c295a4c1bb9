"""
Deterministic pseudo-randomness.

Neither function keeps state: every value is derived from an explicit seed,
so callers draw several independent values from one base seed by offsetting
it (``seed + 50``, ``seed + 100``, ...).
"""

MODULUS = 2147483647
MULTIPLIER = 16807


def hash_str(value: str) -> int:
    """Polynomial rolling hash (x31) with signed 32-bit wraparound, folded to >= 0."""
    h = 0
    for ch in value:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def seeded_random(seed: int) -> float:
    """
    Map a seed to a float in [0, 1).

    Args:
        seed: Integer seed (use seeds >= 1 when the result is floored)

    Returns:
        (seed * 16807 mod 2147483647 - 1) / 2147483646
    """
    s = (seed * MULTIPLIER) % MODULUS
    return (s - 1) / (MODULUS - 1)
