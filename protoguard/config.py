# protoguard/config.py
from pathlib import Path

# Static member invoked by ProtoRegistry.construct() when no name is given.
DEFAULT_CONSTRUCTOR = "new"

# Duplicate enum values are legal; the warning is opt-in.
WARN_DUPLICATE_VALUES = False

VALIDATE_DOCUMENTS = True

SCHEMA_DIR = Path(__file__).parent / "schemas"

# Document kind -> schema filename
SCHEMA_MAP = {
    "document": "document.json",
    "class":    "class_definition.json",
    "enum":     "enum_definition.json",
}

# Marker key for shared members that point at an importable object.
REF_KEY = "$ref"

DOCUMENT_EXTENSIONS = [".json"]
