from .hashing import canonical_json, hash_value, md5_hash, values_equal

__all__ = [
    "canonical_json",
    "hash_value",
    "md5_hash",
    "values_equal",
]
