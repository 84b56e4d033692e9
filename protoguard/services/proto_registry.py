# proto_registry.py
import json
import logging
from functools import partial
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from PySide6.QtCore import QObject, Signal

from protoguard import config
from protoguard.services.proto_class import ProtoClass
from protoguard.services.proto_errors import (
    DefinitionError,
    DuplicateClassError,
    UnknownClassError,
)
from protoguard.services.proto_factory import ProtoFactory
from protoguard.services.proto_instance import ProtoInstance
from protoguard.services.proto_settings import ProtoSettings
from protoguard.utils.valid_path import ValidPath

logger = logging.getLogger(__name__)


class ProtoRegistry(QObject):
    """
    Defines prototype classes by name and resolves members for their instances.

    Resolution is exactly two stages: the instance's own fields, then the
    class's shared table. There is no deeper chain. Instances are not kept
    by the registry; whoever holds one owns it.
    """

    class_defined = Signal(str)      # class name
    instance_created = Signal(str)   # pid

    def __init__(self, settings: Optional[ProtoSettings] = None, parent=None):
        super().__init__(parent)
        self._settings = settings if settings is not None else ProtoSettings()
        self._factory = ProtoFactory()
        self._store: Dict[str, ProtoClass] = {}

    @property
    def settings(self) -> ProtoSettings:
        return self._settings

    @settings.setter
    def settings(self, obj: ProtoSettings):
        if isinstance(obj, ProtoSettings):
            self._settings = obj
        else:
            raise TypeError(f"Settings must be a ProtoSettings object, not {type(obj)}")

    @property
    def factory(self) -> ProtoFactory:
        return self._factory

    # ---------- class definitions ----------
    def define_class(
        self,
        name: str,
        static_members: Optional[Mapping[str, Callable[..., Any]]] = None,
        shared_members: Optional[Mapping[str, Any]] = None,
    ) -> ProtoClass:
        if name in self._store:
            raise DuplicateClassError(name)
        return self.register(ProtoClass(name, static_members, shared_members))

    def register(self, proto: ProtoClass) -> ProtoClass:
        """Add an already built class under its name."""
        if not isinstance(proto, ProtoClass):
            raise TypeError(f"[Registry] expected a ProtoClass, got {type(proto).__name__}")
        if proto.name in self._store:
            raise DuplicateClassError(proto.name)

        self._store[proto.name] = proto
        logger.debug("[Registry] defined class %s", proto)
        self.class_defined.emit(proto.name)
        return proto

    def get_class(self, name: str) -> ProtoClass:
        try:
            return self._store[name]
        except KeyError:
            raise UnknownClassError(name) from None

    def has_class(self, name: str) -> bool:
        return name in self._store

    def classes(self) -> List[ProtoClass]:
        return list(self._store.values())

    def __contains__(self, name) -> bool:
        return name in self._store

    def _check_owned(self, proto: ProtoClass):
        if not isinstance(proto, ProtoClass):
            raise TypeError(f"Expected a ProtoClass, got {type(proto).__name__}")
        if self._store.get(proto.name) is not proto:
            raise UnknownClassError(proto.name)

    # ---------- instances ----------
    def instantiate(self, proto: ProtoClass,
                    initial_fields: Optional[Mapping[str, Any]] = None) -> ProtoInstance:
        self._check_owned(proto)
        if initial_fields is not None and not isinstance(initial_fields, Mapping):
            raise TypeError(
                f"initial_fields for {proto.name} must be a mapping, not {type(initial_fields).__name__}"
            )
        instance = ProtoInstance(proto, initial_fields)
        logger.debug("[Registry] instantiated %s as %s", proto.name, instance.pid)
        self.instance_created.emit(instance.pid)
        return instance

    def construct(self, proto: ProtoClass, *args, constructor: Optional[str] = None,
                  **kwargs) -> ProtoInstance:
        """
        Run the class's constructor static member and instantiate from its result.

        The constructor returns either a mapping of initial fields or a
        ProtoInstance of this class (e.g. one it built via instantiate()).
        """
        name = constructor or self._settings.constructor_name
        result = self.invoke_static(proto, name, *args, **kwargs)
        if isinstance(result, ProtoInstance):
            if result.proto is not proto:
                raise TypeError(
                    f"Constructor {proto.name}.{name} returned an instance of {result.proto.name}"
                )
            return result
        if not isinstance(result, Mapping):
            raise TypeError(
                f"Constructor {proto.name}.{name} must return a mapping of fields, "
                f"not {type(result).__name__}"
            )
        return self.instantiate(proto, result)

    # ---------- member resolution ----------
    def get(self, instance: ProtoInstance, member: str) -> Any:
        fields = instance.fields
        if member in fields:
            return fields[member]
        return instance.proto.shared(member)

    def has(self, instance: ProtoInstance, member: str) -> bool:
        return instance.has_own(member) or instance.proto.has_shared(member)

    def set(self, instance: ProtoInstance, member: str, value: Any):
        """Write an own field. Writes never reach the class."""
        instance.set(member, value)

    def invoke_static(self, proto: ProtoClass, member: str, *args, **kwargs) -> Any:
        return proto.static(member)(*args, **kwargs)

    def invoke_instance_method(self, instance: ProtoInstance, member: str,
                               *args, **kwargs) -> Any:
        method = self._resolve_callable(instance, member)
        return method(instance, *args, **kwargs)

    def bind(self, instance: ProtoInstance, member: str) -> Callable[..., Any]:
        """Return the resolved method with ``instance`` already supplied."""
        return partial(self._resolve_callable(instance, member), instance)

    def _resolve_callable(self, instance: ProtoInstance, member: str) -> Callable[..., Any]:
        value = self.get(instance, member)
        if not callable(value):
            raise TypeError(f"{instance.proto.name}.{member} is not callable ({type(value).__name__})")
        return value

    # ---------- documents ----------
    def to_dict(self, enums=()) -> dict:
        """Dump every class (and any enums passed in) as a definition document."""
        return self._factory.dump(self._store.values(), enums)

    def load_dict(self, data: dict) -> Dict[str, List[Any]]:
        """
        Define every class and build every enum in a definition document.
        Returns {"classes": [...ProtoClass], "enums": [...GuardedEnum]}.
        """
        return self._factory.load(data, registry=self)

    def load_file(self, path: Union[str, Path]) -> Dict[str, List[Any]]:
        checked = ValidPath.file(path, must_exist=True, ext=config.DOCUMENT_EXTENSIONS)
        if not checked:
            raise FileNotFoundError(f"No definition document at {path!s}")
        try:
            data = json.loads(checked.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning("[Registry] JSON error in %s: %s", checked.name, e)
            raise DefinitionError(f"{checked.name} is not valid JSON: {e}") from e
        return self.load_dict(data)

    def __repr__(self):
        return f"<ProtoRegistry classes={sorted(self._store)}>"
