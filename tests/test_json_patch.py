"""
JSON Patch applier tests.
"""

import pytest

from app.controllers.contact_controller import PATCHABLE_FIELDS, PROTECTED_PATCH_PATHS
from app.schemas.contact import PatchOperation
from app.utils.json_patch import JsonPatchError, apply_patch, parse_pointer, strip_operations


def ops(*items):
    return [PatchOperation(**item) for item in items]


@pytest.fixture
def document():
    return {
        "firstName": "Ann",
        "lastName": None,
        "homeAddress": {"city": "Springfield", "zipCode": "12345"},
        "emergencyContacts": [{"name": "Tom"}, {"name": "Sue"}],
    }


def test_operations_apply_in_order(document):
    result = apply_patch(
        document,
        ops(
            {"op": "replace", "path": "/lastName", "value": "Smith"},
            {"op": "replace", "path": "/homeAddress/city", "value": "Shelbyville"},
            {"op": "remove", "path": "/homeAddress/zipCode"},
            {"op": "add", "path": "/emergencyContacts/1", "value": {"name": "Max"}},
            {"op": "add", "path": "/emergencyContacts/-", "value": {"name": "Zoe"}},
            {"op": "remove", "path": "/emergencyContacts/0"},
        ),
    )

    assert result["lastName"] == "Smith"
    assert result["homeAddress"] == {"city": "Shelbyville"}
    assert [item["name"] for item in result["emergencyContacts"]] == ["Max", "Sue", "Zoe"]


def test_source_document_is_untouched_on_failure(document):
    with pytest.raises(JsonPatchError) as excinfo:
        apply_patch(
            document,
            ops(
                {"op": "replace", "path": "/firstName", "value": "Annie"},
                {"op": "replace", "path": "/emergencyContacts/5/name", "value": "Nobody"},
            ),
        )

    assert excinfo.value.path == "/emergencyContacts/5/name"
    assert document["firstName"] == "Ann"


@pytest.mark.parametrize(
    "operation",
    [
        {"op": "replace", "path": "/missing", "value": 1},
        {"op": "remove", "path": "/homeAddress/country"},
        {"op": "replace", "path": "/firstName/x", "value": 1},
        {"op": "add", "path": "/emergencyContacts/01", "value": {}},
        {"op": "replace", "path": "", "value": {}},
        {"op": "replace", "path": "firstName", "value": "Ann"},
    ],
)
def test_invalid_operations_raise(document, operation):
    with pytest.raises(JsonPatchError):
        apply_patch(document, ops(operation))


def test_allowed_roots_reject_unknown_members(document):
    with pytest.raises(JsonPatchError) as excinfo:
        apply_patch(document, ops({"op": "add", "path": "/nickname", "value": "Annie"}), allowed_roots={"firstName"})

    assert excinfo.value.message == "Unknown field path"


def test_pointer_escapes():
    assert parse_pointer("/a~1b/c~0d") == ["a/b", "c~d"]
    assert parse_pointer("") == []


def test_protected_paths_are_stripped():
    operations = ops(
        {"op": "replace", "path": "/email", "value": "x@y.com"},
        {"op": "remove", "path": "/id"},
        {"op": "add", "path": "/createdOn", "value": "2001-01-01"},
        {"op": "replace", "path": "/updatedOn", "value": None},
        {"op": "replace", "path": "/notes", "value": "kept"},
    )

    remaining = strip_operations(operations, PROTECTED_PATCH_PATHS)

    assert [operation.path for operation in remaining] == ["/notes"]


def test_patchable_fields_exclude_generated_members():
    assert "firstName" in PATCHABLE_FIELDS
    assert "homeAddress" in PATCHABLE_FIELDS
    assert "emergencyContacts" in PATCHABLE_FIELDS
    assert not {"id", "email", "createdOn", "updatedOn"} & PATCHABLE_FIELDS
