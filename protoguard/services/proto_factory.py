# protoguard/services/proto_factory.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from protoguard import config
from protoguard.services.guarded_enum import GuardedEnum, define_enum
from protoguard.services.proto_class import ProtoClass
from protoguard.services.proto_errors import DefinitionError, DuplicateClassError
from protoguard.utils.proto_helpers import dotted_path_of, import_path
from protoguard.utils.validator import SchemaValidator

if TYPE_CHECKING:
    from protoguard.services.proto_registry import ProtoRegistry

logger = logging.getLogger(__name__)


class ProtoFactory:
    """
    Builds classes and enums from plain definition documents and dumps them back.

    - Static members are dotted import paths ("pkg.module.func").
    - Shared members are JSON constants, or {"$ref": "pkg.module.obj"} for
      anything that has to be imported (methods, non-JSON defaults).
    - Resolution goes through import_path(), which is cached.
    """

    _validator: Optional[SchemaValidator] = None

    @classmethod
    def validator(cls) -> SchemaValidator:
        if cls._validator is None:
            cls._validator = SchemaValidator()
        return cls._validator

    # ---------- Resolution ----------
    @staticmethod
    def resolve(dotted: str, where: str) -> Any:
        try:
            return import_path(dotted)
        except (ImportError, AttributeError, ValueError) as e:
            raise DefinitionError(f"{where}: cannot import '{dotted}': {e}") from e

    @classmethod
    def _resolve_shared(cls, class_name: str, member: str, value: Any) -> Any:
        if isinstance(value, dict) and set(value) == {config.REF_KEY}:
            return cls.resolve(value[config.REF_KEY], f"{class_name}.{member}")
        return value

    # ---------- Loading ----------
    @classmethod
    def load(cls, data: dict, *, registry: "ProtoRegistry") -> Dict[str, List[Any]]:
        """
        Build every class and enum in the document before registering any
        class, so a bad entry leaves the registry untouched.
        """
        if registry.settings.validate_documents:
            cls.check(data, "document")
        if not isinstance(data, dict):
            raise DefinitionError(f"A definition document must be an object, not {type(data).__name__}")

        built = [cls._build_class(c) for c in data.get("classes", [])]
        enums = [cls.enum_from_dict(e, registry=registry, validate=False)
                 for e in data.get("enums", [])]

        seen = set()
        for proto in built:
            if proto.name in seen or registry.has_class(proto.name):
                raise DuplicateClassError(proto.name)
            seen.add(proto.name)

        classes = [registry.register(proto) for proto in built]
        logger.debug("Loaded %d classes and %d enums", len(classes), len(enums))
        return {"classes": classes, "enums": enums}

    @classmethod
    def check(cls, data: Any, kind: str):
        ok, message = cls.validator().validate(data, kind)
        if not ok:
            logger.warning("Rejected %s definition: %s", kind, message)
            raise DefinitionError(message)

    @staticmethod
    def _require(data: Any, key: str, kind: str) -> Any:
        try:
            return data[key]
        except (KeyError, TypeError):
            raise DefinitionError(f"{kind} definition is missing {key!r}: {data!r}") from None

    @classmethod
    def class_from_dict(cls, data: dict, *, registry: "ProtoRegistry",
                        validate: bool = True) -> ProtoClass:
        if validate and registry.settings.validate_documents:
            cls.check(data, "class")
        return registry.register(cls._build_class(data))

    @classmethod
    def _build_class(cls, data: dict) -> ProtoClass:
        """Resolve references and build the ProtoClass without registering it."""
        name = cls._require(data, "name", "class")
        static = {
            member: cls.resolve(path, f"{name}.{member}")
            for member, path in data.get("static", {}).items()
        }
        for member, fn in static.items():
            if not callable(fn):
                raise DefinitionError(f"{name}.{member}: static member must be callable")
        shared = {
            member: cls._resolve_shared(name, member, value)
            for member, value in data.get("shared", {}).items()
        }
        try:
            return ProtoClass(name, static, shared)
        except TypeError as e:
            raise DefinitionError(str(e)) from e

    @classmethod
    def enum_from_dict(cls, data: dict, *, registry: Optional["ProtoRegistry"] = None,
                       validate: bool = True) -> GuardedEnum:
        settings = registry.settings if registry is not None else None
        if validate and (settings is None or settings.validate_documents):
            cls.check(data, "enum")

        name = cls._require(data, "name", "enum")
        members = cls._require(data, "members", "enum")
        warn = settings.warn_duplicate_values if settings is not None else None
        return define_enum(name, members, warn_duplicate_values=warn)

    # ---------- Dumping ----------
    @staticmethod
    def _ref(obj: Any, where: str) -> str:
        path = dotted_path_of(obj)
        if path is None:
            raise TypeError(f"{where} ({obj!r}) has no importable path and cannot be serialized")
        return path

    @classmethod
    def class_to_dict(cls, proto: ProtoClass) -> dict:
        data: Dict[str, Any] = {"name": proto.name}
        if proto.static_members:
            data["static"] = {
                member: cls._ref(fn, f"{proto.name}.{member}")
                for member, fn in proto.static_members.items()
            }
        if proto.shared_members:
            shared = {}
            for member, value in proto.shared_members.items():
                if value is None or isinstance(value, (str, int, float, bool, list, dict)):
                    shared[member] = value
                else:
                    shared[member] = {config.REF_KEY: cls._ref(value, f"{proto.name}.{member}")}
            data["shared"] = shared
        return data

    @classmethod
    def dump(cls, classes, enums=()) -> dict:
        data: Dict[str, Any] = {"classes": [cls.class_to_dict(p) for p in classes]}
        enums = list(enums)
        if enums:
            data["enums"] = [e.to_dict() for e in enums]
        return data
