# valid_path.py
from __future__ import annotations

from os import fspath
from pathlib import Path
from typing import Callable, List, Optional, Union

Predicate = Callable[[Path], bool]


class ValidPath:
    """Path checks for definition documents, composed from simple flags."""

    @staticmethod
    def _to_path(pathlike: Union[str, Path]) -> Optional[Path]:
        try:
            return pathlike if isinstance(pathlike, Path) else Path(fspath(pathlike))
        except TypeError:
            return None

    is_file: Predicate = staticmethod(lambda p: p.is_file())

    @staticmethod
    def has_any_ext(exts: Union[str, List[str]]) -> Predicate:
        """Match the last suffix against '.json' / 'json' style extensions."""
        if isinstance(exts, str):
            exts = [exts]
        canon = [(e if e.startswith(".") else "." + e).lower() for e in exts]
        return lambda p: p.suffix.lower() in canon

    @classmethod
    def file(
        cls,
        pathlike: Union[str, Path],
        *,
        must_exist: bool = False,
        ext: Optional[Union[str, List[str]]] = None,
        normalize: bool = True,
    ) -> Optional[Path]:
        """
        Return the (optionally normalized) Path when every requested check
        passes, else None.
        - must_exist: the path must be an existing regular file
        - ext: a single extension or list of allowed extensions
        """
        p = cls._to_path(pathlike)
        if p is None:
            return None
        if normalize:
            p = p.expanduser().resolve()

        preds: List[Predicate] = []
        if must_exist:
            preds.append(cls.is_file)
        if ext is not None:
            preds.append(cls.has_any_ext(ext))

        return p if all(pred(p) for pred in preds) else None
