# protoguard/utils/proto_helpers.py
from __future__ import annotations

import importlib
import re
import uuid
from enum import IntEnum
from functools import lru_cache
from typing import Any, Optional, Tuple

_PREFIX_RE = re.compile(r"[^a-z0-9]+")


class PIDState(IntEnum):
    NOT  = 0   # not a string or no prefix
    PRE  = 1   # prefix present, uuid missing/invalid
    FULL = 2   # prefix + valid uuid4


def _is_valid_uuid4_str(s: Optional[str]) -> bool:
    try:
        u = uuid.UUID(s)
        return u.version == 4
    except (ValueError, TypeError, AttributeError):
        return False


def pid_prefix(name: str) -> str:
    """Lower-case, underscore-free prefix derived from a class name."""
    prefix = _PREFIX_RE.sub("", str(name).lower())
    return prefix or "obj"


def issue_pid(name: str) -> str:
    return f"{pid_prefix(name)}_{uuid.uuid4()}"


def split_pid(pid: Optional[str]) -> Tuple[PIDState, Optional[str], Optional[str]]:
    if not isinstance(pid, str) or not pid:
        return PIDState.NOT, None, None

    prefix, _, uid = pid.partition("_")
    if not prefix:
        return PIDState.NOT, None, None
    if _is_valid_uuid4_str(uid):
        return PIDState.FULL, prefix, uid.lower()
    return PIDState.PRE, prefix, None


def is_valid_pid(pid: Optional[str]) -> bool:
    state, _, _ = split_pid(pid)
    return state is PIDState.FULL


@lru_cache(maxsize=None)
def import_path(dotted: str) -> Any:
    """
    Resolve 'package.module.attr' to the named object.
    The longest importable module prefix wins, so nested attributes
    ('pkg.mod.Class.method') resolve too.
    """
    if not isinstance(dotted, str) or "." not in dotted:
        raise ValueError(f"'{dotted}' is not a dotted import path")

    parts = dotted.split(".")
    for split in range(len(parts) - 1, 0, -1):
        module_path = ".".join(parts[:split])
        try:
            obj = importlib.import_module(module_path)
        except ModuleNotFoundError:
            continue
        for attr in parts[split:]:
            obj = getattr(obj, attr)
        return obj
    raise ImportError(f"No importable module in '{dotted}'")


def dotted_path_of(obj: Any) -> Optional[str]:
    """Inverse of import_path() for module-level objects; None for locals/lambdas."""
    module = getattr(obj, "__module__", None)
    qualname = getattr(obj, "__qualname__", None)
    if not module or not qualname or "<" in qualname:
        return None
    return f"{module}.{qualname}"
