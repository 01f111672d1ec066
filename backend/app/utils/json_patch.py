"""
Apply add/remove/replace JSON Patch operations (RFC 6902 subset) to a document.
"""

import copy
from typing import Any, Collection, Dict, List, Optional, Sequence

from app.core import messages
from app.schemas.contact import PatchOperation


class JsonPatchError(ValueError):
    """Raised when an operation cannot be applied to the document."""

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


def parse_pointer(path: str) -> List[str]:
    """Split a JSON Pointer into unescaped reference tokens."""
    if path == "":
        return []
    if not path.startswith("/"):
        raise JsonPatchError(path, "Path must start with '/'")
    return [token.replace("~1", "/").replace("~0", "~") for token in path[1:].split("/")]


def strip_operations(
    operations: Sequence[PatchOperation],
    protected_paths: Collection[str],
) -> List[PatchOperation]:
    """Drop every operation that targets one of the protected paths."""
    return [operation for operation in operations if operation.path not in protected_paths]


def apply_patch(
    document: Dict[str, Any],
    operations: Sequence[PatchOperation],
    allowed_roots: Optional[Collection[str]] = None,
) -> Dict[str, Any]:
    """
    Apply operations in order to a deep copy of ``document``.

    The input document is never modified, so a failing operation leaves
    nothing half-applied. ``allowed_roots`` restricts the top-level members
    an operation may target.
    """
    result = copy.deepcopy(document)
    for operation in operations:
        tokens = parse_pointer(operation.path)
        if not tokens:
            raise JsonPatchError(operation.path, "Cannot patch the whole document")
        if allowed_roots is not None and tokens[0] not in allowed_roots:
            raise JsonPatchError(operation.path, messages.UNKNOWN_PATCH_PATH)
        parent = _resolve(result, tokens[:-1], operation.path)
        _apply(parent, tokens[-1], operation)
    return result


def _resolve(document: Any, tokens: List[str], path: str) -> Any:
    target = document
    for token in tokens:
        if isinstance(target, dict):
            if token not in target:
                raise JsonPatchError(path, f"Member '{token}' not found")
            target = target[token]
        elif isinstance(target, list):
            target = target[_index(target, token, path)]
        else:
            raise JsonPatchError(path, f"Cannot traverse into '{token}'")
    return target


def _index(items: List[Any], token: str, path: str, allow_end: bool = False) -> int:
    if not token.isdigit() or (len(token) > 1 and token.startswith("0")):
        raise JsonPatchError(path, f"Invalid array index '{token}'")
    index = int(token)
    upper = len(items) if allow_end else len(items) - 1
    if index > upper:
        raise JsonPatchError(path, f"Array index {index} out of range")
    return index


def _apply(parent: Any, token: str, operation: PatchOperation) -> None:
    path = operation.path
    if isinstance(parent, dict):
        if operation.op == "add":
            parent[token] = operation.value
        elif token not in parent:
            raise JsonPatchError(path, f"Member '{token}' not found")
        elif operation.op == "remove":
            del parent[token]
        else:
            parent[token] = operation.value
    elif isinstance(parent, list):
        if operation.op == "add":
            if token == "-":
                parent.append(operation.value)
            else:
                parent.insert(_index(parent, token, path, allow_end=True), operation.value)
        elif operation.op == "remove":
            del parent[_index(parent, token, path)]
        else:
            parent[_index(parent, token, path)] = operation.value
    else:
        raise JsonPatchError(path, "Target location is not an object or array")
