"""Local file store for uploaded course materials and notice documents.

Stored objects are addressed by a POSIX path relative to the uploads root,
e.g. ``materials/cse-4101/lecture-1.pdf``. Removal helpers never raise: a
missing or undeletable object is logged and reported as not removed.
"""

import logging
import re
import shutil
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional

from course_portal import config
from course_portal.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def sanitize_name(name: str) -> str:
    """Reduce a client-supplied file or directory name to a safe single segment."""
    cleaned = re.sub(r"[^\w\-_\. ]", "_", Path(name).name.strip())
    cleaned = cleaned.lstrip(".")
    if not cleaned:
        raise ValidationError(f"Invalid file name: '{name}'")
    return cleaned


class FileStore:
    """Reads and writes uploaded objects under one root directory."""

    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root) if root is not None else config.UPLOADS_DIR

    def resolve(self, relative_path: str) -> Path:
        """Absolute path of a stored object.

        Raises:
            ValidationError: If the path escapes the store root.
        """
        root = self.root.resolve()
        target = (root / relative_path.lstrip("/")).resolve()
        if target != root and root not in target.parents:
            raise ValidationError(f"Path escapes the upload store: '{relative_path}'")
        return target

    def within(self, relative_path: str, namespace: str) -> bool:
        """Whether ``relative_path`` names an object inside ``namespace``.

        Paths with ``..`` segments are never inside, even when they resolve there.
        """
        if ".." in PurePosixPath(relative_path).parts:
            return False
        try:
            target = self.resolve(relative_path)
        except ValidationError:
            return False
        return self.resolve(namespace) in target.parents

    def save(self, relative_dir: str, filename: str, content: bytes) -> str:
        """Write ``content`` and return its store-relative path.

        An existing object with the same name is overwritten.
        """
        safe_name = sanitize_name(filename)
        directory = self.resolve(relative_dir)
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / safe_name
        with open(target, "wb") as f:
            f.write(content)
        relative = target.relative_to(self.root.resolve()).as_posix()
        logger.info("Stored file %s (%d bytes)", relative, len(content))
        return relative

    def exists(self, relative_path: str) -> bool:
        return self.resolve(relative_path).is_file()

    def delete(self, relative_path: Optional[str]) -> bool:
        """Remove one stored object.

        Returns:
            True if a file was removed, False if it was absent or removal failed.
        """
        if not relative_path:
            return False
        try:
            target = self.resolve(relative_path)
            if not target.is_file():
                logger.warning("Stored file already gone: %s", relative_path)
                return False
            target.unlink()
            logger.info("Deleted stored file: %s", relative_path)
            return True
        except (OSError, ValidationError) as e:
            logger.error("Failed to delete stored file %s: %s", relative_path, e)
            return False

    def delete_tree(self, relative_dir: str) -> bool:
        """Recursively remove a directory namespace, e.g. one course's materials."""
        try:
            target = self.resolve(relative_dir)
            if target == self.root.resolve():
                raise ValidationError("Refusing to delete the upload store root")
            if not target.exists():
                return False
            shutil.rmtree(target)
            logger.info("Deleted stored directory: %s", relative_dir)
            return True
        except (OSError, ValidationError) as e:
            logger.error("Failed to delete stored directory %s: %s", relative_dir, e)
            return False

    def remove_orphans(
        self, namespaces: Iterable[str], referenced: Iterable[str]
    ) -> List[str]:
        """Delete files under ``namespaces`` that no record references.

        Empty directories left behind are pruned too.

        Args:
            namespaces: Store-relative directories to scan.
            referenced: Store-relative paths still in use.

        Returns:
            Store-relative paths of the removed files.
        """
        keep = {self.resolve(path) for path in referenced}
        removed: List[str] = []
        root = self.root.resolve()
        for namespace in namespaces:
            base = self.resolve(namespace)
            if not base.is_dir():
                continue
            for path in sorted(base.rglob("*")):
                if path.is_file() and path not in keep:
                    try:
                        path.unlink()
                        removed.append(path.relative_to(root).as_posix())
                    except OSError as e:
                        logger.error("Failed to remove orphaned file %s: %s", path, e)
            # Deepest directories first so parents empty out
            for directory in sorted(
                (p for p in base.rglob("*") if p.is_dir()),
                key=lambda p: len(p.parts),
                reverse=True,
            ):
                if not any(directory.iterdir()):
                    directory.rmdir()
        logger.info("Removed %d orphaned files", len(removed))
        return removed
