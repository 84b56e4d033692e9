# protoguard/services/proto_class.py

from __future__ import annotations
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

from protoguard.services.proto_errors import MissingMemberError
from protoguard.utils.proto_helpers import pid_prefix

_MISSING = object()


class ProtoClass:
    """
    A named bundle of shared members (methods, defaults, class constants)
    and static members (callables that take no instance, e.g. ``new``).

    Instances never copy ``shared_members``; they hold a reference to the
    class and fall back to it on a miss. Updating a shared member through
    ``set_shared`` is therefore seen by every existing instance that has no
    local override.
    """

    __slots__ = ("_name", "_prefix", "_static", "_shared", "__weakref__")

    def __init__(
        self,
        name: str,
        static_members: Optional[Mapping[str, Callable[..., Any]]] = None,
        shared_members: Optional[Mapping[str, Any]] = None,
    ):
        if not isinstance(name, str) or not name.strip():
            raise TypeError(f"Class name must be a non-empty string, not {name!r}")
        self._name = name
        self._prefix = pid_prefix(name)
        self._static: Dict[str, Callable[..., Any]] = {}
        self._shared: Dict[str, Any] = dict(shared_members or {})
        for member, fn in dict(static_members or {}).items():
            self._check_static(member, fn)
            self._static[member] = fn

    def _check_static(self, member: str, fn: Any):
        if not callable(fn):
            raise TypeError(
                f"Static member {member!r} of {self._name} must be callable, not {type(fn).__name__}"
            )

    @property
    def name(self) -> str:
        return self._name

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def shared_members(self) -> Mapping[str, Any]:
        """Live, read-only view of the shared table."""
        return MappingProxyType(self._shared)

    @property
    def static_members(self) -> Mapping[str, Callable[..., Any]]:
        return MappingProxyType(self._static)

    # ---------- lookups ----------
    def has_shared(self, member: str) -> bool:
        return member in self._shared

    def has_static(self, member: str) -> bool:
        return member in self._static

    def shared(self, member: str, default: Any = _MISSING) -> Any:
        try:
            return self._shared[member]
        except KeyError:
            if default is not _MISSING:
                return default
            raise MissingMemberError(self._name, member) from None

    def static(self, member: str) -> Callable[..., Any]:
        try:
            return self._static[member]
        except KeyError:
            raise MissingMemberError(self._name, member, kind="static") from None

    # ---------- class-wide updates ----------
    def set_shared(self, member: str, value: Any):
        """Add or replace a shared member; applies to all instances retroactively."""
        self._shared[member] = value

    def set_static(self, member: str, fn: Callable[..., Any]):
        self._check_static(member, fn)
        self._static[member] = fn

    def __repr__(self):
        return (
            f"<ProtoClass {self._name} "
            f"static={sorted(self._static)} shared={sorted(self._shared)}>"
        )
