# protoguard/services/guarded_enum.py
from __future__ import annotations

import logging
import warnings
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

from protoguard import config
from protoguard.services.proto_errors import (
    DuplicateEnumNameError,
    DuplicateValueWarning,
    EmptyEnumError,
    FrozenEnumError,
    InvalidEnumMemberError,
    ReservedEnumNameError,
)

logger = logging.getLogger(__name__)

MembersLike = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


class GuardedEnum:
    """
    A fixed name -> value mapping whose reads of undefined names fail at once.

        Color = define_enum("Color", {"RED": "R", "GREEN": "G"})
        Color.RED          # "R"
        Color["GREEN"]     # "G"
        Color.BLUE         # InvalidEnumMemberError: "BLUE" is not a valid member of Color

    Use ``"BLUE" in Color`` to check without raising. Build enums with
    define_enum(); the constructor validates and copies the same way but
    never warns about duplicate values.
    """

    __slots__ = ("_name", "_members")

    def __init__(self, name: str, members: MembersLike):
        if not isinstance(name, str) or not name.strip():
            raise TypeError(f"Enum name must be a non-empty string, not {name!r}")
        if members is None:
            raise EmptyEnumError(name)
        collected = _collect_members(name, members)
        if not collected:
            raise EmptyEnumError(name)
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_members", collected)

    @property
    def name(self) -> str:
        return self._name

    @property
    def members(self) -> Mapping[str, Any]:
        return MappingProxyType(self._members)

    # ---------- guarded reads ----------
    def get(self, key: str) -> Any:
        try:
            return self._members[key]
        except (KeyError, TypeError):
            raise InvalidEnumMemberError(self._name, key) from None

    __getitem__ = get

    def __getattr__(self, key: str) -> Any:
        # Only reached on a normal attribute miss. Private and dunder names stay
        # ordinary AttributeErrors so copy/pickle/introspection keep working.
        if key.startswith("_"):
            raise AttributeError(key)
        return self.get(key)

    # ---------- immutability ----------
    def __setattr__(self, attr, value):
        raise FrozenEnumError(self._name, attr)

    def __delattr__(self, attr):
        raise FrozenEnumError(self._name, attr)

    # ---------- non-raising introspection ----------
    def __contains__(self, key) -> bool:
        try:
            return key in self._members
        except TypeError:
            return False

    def __iter__(self) -> Iterator[str]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def names(self):
        return list(self._members)

    def values(self):
        return list(self._members.values())

    def items(self):
        return list(self._members.items())

    def name_of(self, value: Any) -> str:
        for name, member_value in self._members.items():
            if member_value == value:
                return name
        raise ValueError(f"{value!r} is not a value of {self._name}")

    def to_dict(self) -> dict:
        return {"name": self._name, "members": dict(self._members)}

    def __reduce__(self):
        return (GuardedEnum, (self._name, dict(self._members)))

    def __repr__(self):
        inner = ", ".join(f"{k}={v!r}" for k, v in self._members.items())
        return f"<GuardedEnum {self._name}: {inner}>"


# Names that attribute access resolves to the enum itself, never to a member.
RESERVED_NAMES = frozenset(n for n in dir(GuardedEnum) if not n.startswith("_"))


def _collect_members(name: str, members: MembersLike) -> Dict[str, Any]:
    pairs = members.items() if isinstance(members, Mapping) else members
    collected: Dict[str, Any] = {}
    for pair in pairs:
        try:
            key, value = pair
        except (TypeError, ValueError):
            raise TypeError(f"Enum '{name}' members must be (name, value) pairs, got {pair!r}") from None
        if not isinstance(key, str) or not key:
            raise TypeError(f"Enum '{name}' member names must be non-empty strings, got {key!r}")
        if key.startswith("_") or key in RESERVED_NAMES:
            raise ReservedEnumNameError(name, key)
        if key in collected:
            raise DuplicateEnumNameError(name, key)
        collected[key] = value
    return collected


def _warn_duplicate_values(name: str, members: Mapping[str, Any]):
    seen: Dict[Any, str] = {}
    for key, value in members.items():
        try:
            first = seen.setdefault(value, key)
        except TypeError:  # unhashable value
            continue
        if first != key:
            warnings.warn(
                f"Enum '{name}': {key!r} repeats the value of {first!r} ({value!r})",
                DuplicateValueWarning,
                stacklevel=3,
            )


def define_enum(name: str, members: MembersLike, *,
                warn_duplicate_values: Optional[bool] = None) -> GuardedEnum:
    """
    Build a GuardedEnum from a mapping or an iterable of (name, value) pairs.

    Raises EmptyEnumError for no members, DuplicateEnumNameError when a
    name repeats (only possible in pair form) and ReservedEnumNameError for
    names attribute access could not reach (GuardedEnum's own attributes and
    anything starting with "_"). Duplicate values are allowed; pass
    warn_duplicate_values=True to get a DuplicateValueWarning for them.
    """
    enum = GuardedEnum(name, members)

    if warn_duplicate_values is None:
        warn_duplicate_values = config.WARN_DUPLICATE_VALUES
    if warn_duplicate_values:
        _warn_duplicate_values(name, enum.members)

    logger.debug("Defined enum %s with %d members", name, len(enum))
    return enum
