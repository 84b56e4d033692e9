# protoguard/services/proto_instance.py
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, TYPE_CHECKING

from protoguard.utils.proto_helpers import issue_pid

if TYPE_CHECKING:
    from protoguard.services.proto_class import ProtoClass


class ProtoInstance:
    """
    Own fields plus a fixed reference to one ProtoClass.

    Member resolution (own fields first, then the class's shared table) lives
    in ProtoRegistry.get(); this object only stores state.
    """

    __slots__ = ("_pid", "_proto", "_fields", "__weakref__")

    def __init__(self, proto: "ProtoClass", fields: Optional[Mapping[str, Any]] = None,
                 pid: Optional[str] = None):
        self._proto = proto
        self._fields: Dict[str, Any] = dict(fields or {})
        self._pid = pid or issue_pid(proto.name)

    @property
    def pid(self) -> str:
        return self._pid

    @property
    def proto(self) -> "ProtoClass":
        return self._proto

    @property
    def fields(self) -> Dict[str, Any]:
        return self._fields

    def has_own(self, name: str) -> bool:
        return name in self._fields

    def set(self, name: str, value: Any):
        self._fields[name] = value

    def unset(self, name: str):
        """Drop a local override so lookups fall back to the class again."""
        self._fields.pop(name, None)

    def __repr__(self):
        return f"<{self._proto.name} {self._pid} fields={sorted(self._fields)}>"
