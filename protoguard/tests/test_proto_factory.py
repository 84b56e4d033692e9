import json

import pytest

from protoguard.services.proto_registry import ProtoRegistry
from protoguard.services.proto_settings import ProtoSettings
from protoguard.services.proto_errors import (
    DefinitionError,
    DuplicateClassError,
    DuplicateEnumNameError,
    EmptyEnumError,
    InvalidEnumMemberError,
    ReservedEnumNameError,
)
from protoguard.utils.validator import SchemaValidator

SAMPLES = "protoguard.tests.sample_protos"

ACCOUNT_DOC = {
    "classes": [
        {
            "name": "Account",
            "static": {"new": f"{SAMPLES}.new_account", "open": f"{SAMPLES}.Ledger.open"},
            "shared": {
                "currency": "USD",
                "limits": [100, 500],
                "deposit": {"$ref": f"{SAMPLES}.deposit"},
                "describe": {"$ref": f"{SAMPLES}.describe"},
                "symbols": {"$ref": f"{SAMPLES}.CURRENCY_SYMBOLS"},
            },
        }
    ],
    "enums": [
        {"name": "Status", "members": {"OPEN": "open", "CLOSED": "closed"}},
        {"name": "Tier", "members": [["BASIC", 1], ["GOLD", 2]]},
    ],
}


@pytest.fixture
def registry():
    return ProtoRegistry()


def test_load_dict_builds_classes_and_enums(registry):
    loaded = registry.load_dict(ACCOUNT_DOC)

    account = registry.get_class("Account")
    assert loaded["classes"] == [account]
    status, tier = loaded["enums"]

    acc = registry.construct(account, "ada", balance=10)
    assert registry.invoke_instance_method(acc, "deposit", 5) == 15
    assert registry.invoke_instance_method(acc, "describe") == "ada: 15"
    assert registry.get(acc, "currency") == "USD"
    assert registry.get(acc, "symbols")["USD"] == "$"

    opened = registry.construct(account, "bob", constructor="open")
    assert registry.get(opened, "balance") == 0

    assert status.OPEN == "open"
    assert tier.GOLD == 2
    with pytest.raises(InvalidEnumMemberError):
        tier.PLATINUM


def test_schema_rejects_bad_static_path(registry):
    doc = {"classes": [{"name": "Bad", "static": {"new": "not a path"}}]}
    with pytest.raises(DefinitionError, match="classes->0->static->new"):
        registry.load_dict(doc)
    assert not registry.has_class("Bad")


def test_schema_rejects_unknown_keys(registry):
    with pytest.raises(DefinitionError):
        registry.load_dict({"classes": [{"name": "X", "methods": {}}]})


def test_validation_can_be_disabled():
    registry = ProtoRegistry(settings=ProtoSettings(validate_documents=False))
    loaded = registry.load_dict({"classes": [{"name": "Loose"}], "comment": "ignored"})
    assert loaded["classes"][0].name == "Loose"


def test_unimportable_reference(registry):
    doc = {"classes": [{"name": "Ghost", "shared": {"haunt": {"$ref": f"{SAMPLES}.nope"}}}]}
    with pytest.raises(DefinitionError, match="Ghost.haunt"):
        registry.load_dict(doc)
    assert not registry.has_class("Ghost")


def test_static_reference_must_be_callable(registry):
    doc = {"classes": [{"name": "Odd", "static": {"new": f"{SAMPLES}.CURRENCY_SYMBOLS"}}]}
    with pytest.raises(DefinitionError):
        registry.load_dict(doc)


def test_duplicate_class_leaves_registry_untouched(registry):
    first = registry.define_class("Account")
    doc = {"classes": [{"name": "Fresh"}, {"name": "Account"}]}

    with pytest.raises(DuplicateClassError):
        registry.load_dict(doc)

    assert registry.get_class("Account") is first
    assert not registry.has_class("Fresh")


def test_duplicate_class_within_document(registry):
    with pytest.raises(DuplicateClassError):
        registry.load_dict({"classes": [{"name": "Twice"}, {"name": "Twice"}]})
    assert not registry.has_class("Twice")


def test_enum_errors_from_documents(registry):
    with pytest.raises(EmptyEnumError):
        registry.load_dict({"enums": [{"name": "Nothing", "members": {}}]})
    with pytest.raises(DuplicateEnumNameError):
        registry.load_dict({"enums": [{"name": "Dup", "members": [["A", 1], ["A", 2]]}]})


def test_dump_and_reload(registry):
    loaded = registry.load_dict(ACCOUNT_DOC)
    dumped = registry.to_dict(enums=loaded["enums"])

    assert dumped["classes"][0]["static"]["new"] == f"{SAMPLES}.new_account"
    assert dumped["classes"][0]["shared"]["deposit"] == {"$ref": f"{SAMPLES}.deposit"}
    assert dumped["classes"][0]["shared"]["limits"] == [100, 500]
    assert dumped["enums"][1] == {"name": "Tier", "members": {"BASIC": 1, "GOLD": 2}}

    fresh = ProtoRegistry()
    fresh.load_dict(json.loads(json.dumps(dumped)))
    acc = fresh.construct(fresh.get_class("Account"), "cy")
    assert fresh.invoke_instance_method(acc, "deposit", 3) == 3


def test_dump_rejects_local_callables(registry):
    registry.define_class("Local", static_members={"new": lambda: {}})
    with pytest.raises(TypeError):
        registry.to_dict()


def test_load_file(registry, tmp_path):
    path = tmp_path / "defs.json"
    path.write_text(json.dumps(ACCOUNT_DOC), encoding="utf-8")
    loaded = registry.load_file(path)
    assert [c.name for c in loaded["classes"]] == ["Account"]


def test_load_file_missing_or_wrong_extension(registry, tmp_path):
    with pytest.raises(FileNotFoundError):
        registry.load_file(tmp_path / "absent.json")

    other = tmp_path / "defs.txt"
    other.write_text("{}", encoding="utf-8")
    with pytest.raises(FileNotFoundError):
        registry.load_file(other)


def test_load_file_bad_json(registry, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(DefinitionError, match="broken.json"):
        registry.load_file(path)


def test_validator_reports_paths():
    ok, message = SchemaValidator().validate({"enums": [{"name": "E"}]})
    assert not ok
    assert message.startswith("Validation Error in enums->0")

    assert SchemaValidator().validate({"name": "E", "members": {"A": 1}}, kind="enum") == (True, None)

    with pytest.raises(ValueError):
        SchemaValidator().validate({}, kind="widget")


def test_bad_class_name_leaves_registry_untouched(registry):
    doc = {"classes": [{"name": "First"}, {"name": "  "}]}
    with pytest.raises(DefinitionError):
        registry.load_dict(doc)
    assert not registry.has_class("First")
    assert registry.classes() == []


def test_bad_enum_leaves_registry_untouched(registry):
    doc = {"classes": [{"name": "First"}], "enums": [{"name": "Field", "members": {"name": "N"}}]}
    with pytest.raises(ReservedEnumNameError):
        registry.load_dict(doc)
    assert not registry.has_class("First")


@pytest.mark.parametrize("doc", [
    {"classes": [{"static": {}}]},
    {"enums": [{"members": {"A": 1}}]},
    {"enums": [{"name": "NoMembers"}]},
    {"enums": ["not an object"]},
])
def test_missing_keys_without_validation(doc):
    registry = ProtoRegistry(settings=ProtoSettings(validate_documents=False))
    with pytest.raises(DefinitionError):
        registry.load_dict(doc)
    assert registry.classes() == []
