from PySide6.QtCore import QObject, Signal, Property

from protoguard import config


class ProtoSettings(QObject):
    constructor_name_changed = Signal(str)
    warn_duplicate_values_changed = Signal(bool)
    validate_documents_changed = Signal(bool)

    def __init__(self, constructor_name=config.DEFAULT_CONSTRUCTOR,
                 warn_duplicate_values=config.WARN_DUPLICATE_VALUES,
                 validate_documents=config.VALIDATE_DOCUMENTS):
        super().__init__()
        self._constructor_name = constructor_name
        self._warn_duplicate_values = warn_duplicate_values
        self._validate_documents = validate_documents

    @Property(str)
    def constructor_name(self):
        return self._constructor_name

    @constructor_name.setter
    def constructor_name(self, name):
        if not isinstance(name, str) or not name:
            raise TypeError(f"constructor_name must be a non-empty string, not {name!r}")
        if self._constructor_name != name:
            self._constructor_name = name
            self.constructor_name_changed.emit(name)

    @Property(bool)
    def warn_duplicate_values(self):
        return self._warn_duplicate_values

    @warn_duplicate_values.setter
    def warn_duplicate_values(self, flag):
        flag = bool(flag)
        if self._warn_duplicate_values != flag:
            self._warn_duplicate_values = flag
            self.warn_duplicate_values_changed.emit(flag)

    @Property(bool)
    def validate_documents(self):
        return self._validate_documents

    @validate_documents.setter
    def validate_documents(self, flag):
        flag = bool(flag)
        if self._validate_documents != flag:
            self._validate_documents = flag
            self.validate_documents_changed.emit(flag)
