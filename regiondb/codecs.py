"""
Record Codecs

Conversions between plain YAML values (lists, dicts, strings, ints) and
the region data structures.

Vector decoding is strict and raises IncompleteDataError. Flag and domain
decoding never fail: anything they do not recognize is ignored.
"""

from typing import Any

from .exceptions import IncompleteDataError
from .region_data import BlockVector, BlockVector2D, RegionFlags, Domain, is_valid_flag_key
from .region_types import FlagState


# Field names inside an owners/member record
DOMAIN_PLAYERS_FIELD = "owners"
DOMAIN_GROUPS_FIELD = "groups"


def _is_int(value: Any) -> bool:
    # bool is an int subclass but never a coordinate
    return isinstance(value, int) and not isinstance(value, bool)


def _read_ints(value: Any, count: int) -> list[int]:
    if value is None or not isinstance(value, (list, tuple)):
        raise IncompleteDataError("vector expected, not defined")
    if len(value) != count:
        raise IncompleteDataError(
            f"{count}d vector expected, list not {count} elements"
        )
    if not all(_is_int(v) for v in value):
        raise IncompleteDataError(
            f"{count}d vector expected, expected {count} numbers"
        )
    return list(value)


# ========================================
# VECTORS
# ========================================

def decode_vector3(value: Any) -> BlockVector:
    """Decode a [x, y, z] list of ints."""
    x, y, z = _read_ints(value, 3)
    return BlockVector(x, y, z)


def decode_vector2(value: Any) -> BlockVector2D:
    """Decode a [x, z] list of ints."""
    x, z = _read_ints(value, 2)
    return BlockVector2D(x, z)


def encode_vector3(vector: BlockVector) -> list[int]:
    return [vector.x, vector.y, vector.z]


def encode_vector2(vector: BlockVector2D) -> list[int]:
    return [vector.x, vector.z]


# ========================================
# FLAGS
# ========================================

def decode_flag_token(token: str):
    """
    Parse one flag token.

    "+A" / "-A" set the one-character key "A"; "-T_" or "+_X" set a
    two-character key containing an underscore. Returns (key, state), or
    None when the token has any other shape.
    """
    key = token[1:]
    if len(token) not in (2, 3) or not is_valid_flag_key(key):
        return None

    state = FlagState.from_prefix(token[0])
    if state == FlagState.UNSET:
        return None
    return key, state


def decode_flags(value: Any) -> RegionFlags:
    """Decode a list of flag tokens. Non-list values give an empty table."""
    flags = RegionFlags()
    if not isinstance(value, list):
        return flags

    for item in value:
        parsed = decode_flag_token(str(item))
        if parsed is not None:
            flags.set(*parsed)

    return flags


def encode_flags(flags: RegionFlags) -> list[str]:
    return [state.value + key for key, state in flags.items()]


# ========================================
# DOMAINS
# ========================================

def _read_names(record: dict, key: str) -> list[str]:
    names = record.get(key)
    if not isinstance(names, list):
        return []
    return [str(n) for n in names if n is not None]


def decode_domain(value: Any) -> Domain:
    """Decode an {owners: [...], groups: [...]} record. Never fails."""
    domain = Domain()
    if not isinstance(value, dict):
        return domain

    for name in _read_names(value, DOMAIN_PLAYERS_FIELD):
        domain.add_player(name)
    for name in _read_names(value, DOMAIN_GROUPS_FIELD):
        domain.add_group(name)

    return domain


def encode_domain(domain: Domain) -> dict:
    return {
        DOMAIN_PLAYERS_FIELD: sorted(domain.players),
        DOMAIN_GROUPS_FIELD: sorted(domain.groups),
    }
