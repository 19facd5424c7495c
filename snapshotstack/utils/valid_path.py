# snapshotstack/utils/valid_path.py
from __future__ import annotations

from os import fspath
from pathlib import Path
from typing import Callable, Optional, Union

from snapshotstack.config import IMAGE_EXTENSIONS

Predicate = Callable[[Path], bool]
PathLike = Union[str, Path]


class ValidPath:
    """Path checks for CLI inputs and export targets, composed from flags."""

    @staticmethod
    def _to_path(pathlike: PathLike) -> Optional[Path]:
        if pathlike is None:
            return None
        try:
            return pathlike if isinstance(pathlike, Path) else Path(fspath(pathlike))
        except TypeError:
            return None

    @staticmethod
    def normalize(p: Path) -> Path:
        """Expand '~' and resolve to an absolute path (non-strict)."""
        return p.expanduser().resolve()

    # -------- Predicates --------
    exists: Predicate   = staticmethod(lambda p: p.exists())
    is_file: Predicate  = staticmethod(lambda p: p.is_file())
    parent_is_dir: Predicate = staticmethod(lambda p: p.parent.is_dir())

    @staticmethod
    def has_any_ext(exts: list[str]) -> Predicate:
        canon = [(e if e.startswith(".") else "." + e).lower() for e in exts]
        return lambda p: p.suffix.lower() in canon

    # -------- Core API --------
    @classmethod
    def check(
        cls,
        pathlike: PathLike,
        *,
        must_exist: bool = False,
        require_file: bool = False,
        parent_must_exist: bool = False,
        has_ext: Optional[Union[str, list[str]]] = None,
        normalize: bool = True,
    ) -> Optional[Path]:
        """
        Return the (normalized) Path when every requested check passes, else None.

        - must_exist / require_file: the path exists / is a regular file
        - parent_must_exist: the containing directory exists (for outputs)
        - has_ext: '.png', 'png' or a list of allowed last suffixes
        """
        p = cls._to_path(pathlike)
        if not p:
            return None
        if normalize:
            p = cls.normalize(p)

        preds: list[Predicate] = []
        if must_exist:
            preds.append(cls.exists)
        if require_file:
            preds.append(cls.is_file)
        if parent_must_exist:
            preds.append(cls.parent_is_dir)
        if has_ext is not None:
            preds.append(cls.has_any_ext(has_ext if isinstance(has_ext, list) else [has_ext]))

        return p if all(pred(p) for pred in preds) else None

    @classmethod
    def image_file(cls, pathlike: PathLike, *, must_exist: bool = True) -> Optional[Path]:
        return cls.check(pathlike, must_exist=must_exist, require_file=must_exist, has_ext=IMAGE_EXTENSIONS)

    @classmethod
    def output_file(cls, pathlike: PathLike, ext: str) -> Optional[Path]:
        return cls.check(pathlike, parent_must_exist=True, has_ext=ext)
