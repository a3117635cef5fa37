_FNV_OFFSET_BASIS = 0x811C9DC5
_FNV_PRIME = 0x01000193


def stable_hash(value: str) -> int:
    """32-bit FNV-1a over the UTF-8 bytes of ``value``.

    Used instead of a PRNG wherever the pipeline needs a seeded shuffle, so
    ordering depends only on the input string.
    """
    h = _FNV_OFFSET_BASIS
    for byte in value.encode("utf-8"):
        h ^= byte
        h = (h * _FNV_PRIME) & 0xFFFFFFFF
    return h


def seeded_order_key(seed: str, scope: str, core_key: str) -> tuple[int, str]:
    """Sort key for shuffling-without-randomness, ties by core key."""
    return (stable_hash(f"{seed}:{scope}:{core_key}"), core_key)
