# protoguard/services/proto_errors.py
from typing import Any


class ProtoError(Exception):
    """Base class for every error raised by protoguard."""


class DuplicateClassError(ProtoError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Class '{name}' is already defined in this registry.")


class UnknownClassError(ProtoError, LookupError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Class '{name}' is not defined in this registry.")


class MissingMemberError(ProtoError, LookupError):
    """
    A lookup miss on a class or instance. Callers may check for optional
    members and recover from this.
    """

    def __init__(self, class_name: str, member: Any, kind: str = "member"):
        self.class_name = class_name
        self.member = member
        self.kind = kind
        super().__init__(f"{member!r} is not a {kind} of {class_name}")


class EmptyEnumError(ProtoError, ValueError):
    def __init__(self, enum_name: str):
        self.enum_name = enum_name
        super().__init__(f"Enum '{enum_name}' must define at least one member.")


class DuplicateEnumNameError(ProtoError, ValueError):
    def __init__(self, enum_name: str, key: str):
        self.enum_name = enum_name
        self.key = key
        super().__init__(f"Enum '{enum_name}' defines member {key!r} more than once.")


class ReservedEnumNameError(ProtoError, ValueError):
    """A member name that attribute access could not reach as a member."""

    def __init__(self, enum_name: str, key: str):
        self.enum_name = enum_name
        self.key = key
        super().__init__(
            f"Enum '{enum_name}' cannot define member {key!r}: the name is reserved "
            f"or private and would not read back as a member."
        )


class InvalidEnumMemberError(ProtoError):
    """
    Raised at the moment an undefined enum member is read.

    Deliberately not a LookupError: this signals a typo at the call site and
    should not be swallowed by handlers written for ordinary lookup misses.
    """

    def __init__(self, enum_name: str, key: Any):
        self.enum_name = enum_name
        self.key = key
        super().__init__(f'"{key}" is not a valid member of {enum_name}')


class FrozenEnumError(ProtoError, TypeError):
    def __init__(self, enum_name: str, attr: str):
        self.enum_name = enum_name
        self.attr = attr
        super().__init__(f"Enum '{enum_name}' is read-only; cannot modify {attr!r}.")


class DefinitionError(ProtoError, ValueError):
    """A definition document failed validation or referenced something unimportable."""


class DuplicateValueWarning(UserWarning):
    pass
