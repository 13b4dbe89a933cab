# restaurant/services/asset_store.py
"""
Asset Store - uploaded images on local disk

Files live under ``{root}/{category}/{category}_{unix_ts}_{rand}{ext}``.
Rows keep only the path relative to ``root``; the public URL is built
when a response is serialized.
"""
import logging
import os
import random
import re
import shutil
import time
from pathlib import Path

from werkzeug.utils import secure_filename

from restaurant.errors import AssetNotFoundError, AssetStoreError

logger = logging.getLogger(__name__)

URL_PREFIX = "uploads"


class AssetStore:

    def __init__(self, root, base_url):
        self.root = Path(root).resolve()
        self.base_url = (base_url or "").rstrip("/")

    @staticmethod
    def _extension(original_filename):
        """Extension of the uploaded name, reduced to [a-z0-9.]"""
        ext = os.path.splitext(os.path.basename(original_filename or ""))[1].lower()
        ext = re.sub(r"[^a-z0-9.]", "", ext)
        return ext if len(ext) > 1 else ""

    @classmethod
    def _generate_filename(cls, category, original_filename):
        """{category}_{unix_ts}_{0-999}{ext}, timestamp + random keeps names apart"""
        return f"{category}_{int(time.time())}_{random.randint(0, 999)}{cls._extension(original_filename)}"

    def resolve(self, relative_path):
        """Absolute path for a stored relative path, refusing anything outside root"""
        full = (self.root / relative_path).resolve()
        if full != self.root and self.root not in full.parents:
            raise AssetStoreError(f"Asset path escapes upload root: {relative_path}")
        return full

    def exists(self, relative_path):
        if not relative_path:
            return False
        return self.resolve(relative_path).is_file()

    def store(self, file, category, original_filename):
        """
        Persist an uploaded file and return its path relative to the root.

        ``file`` may be raw bytes, a werkzeug FileStorage or any readable
        binary stream.
        """
        category = secure_filename(category)
        if not category:
            raise AssetStoreError("Asset category is required")

        directory = self.root / category
        filename = self._generate_filename(category, original_filename)
        while (directory / filename).exists():
            filename = self._generate_filename(category, original_filename)
        relative_path = f"{category}/{filename}"

        try:
            directory.mkdir(parents=True, exist_ok=True)
            target = directory / filename

            if isinstance(file, (bytes, bytearray)):
                target.write_bytes(file)
            elif hasattr(file, "save"):
                file.save(str(target))
            else:
                with open(target, "wb") as dest:
                    shutil.copyfileobj(file, dest)
        except OSError as e:
            logger.error(f"[Assets] Failed to store {relative_path}: {e}", exc_info=True)
            raise AssetStoreError() from e

        logger.info(f"[Assets] Stored {relative_path}")
        return relative_path

    def delete(self, relative_path):
        """Remove a stored file. A missing file is an AssetNotFoundError."""
        full = self.resolve(relative_path)
        try:
            full.unlink()
        except FileNotFoundError as e:
            raise AssetNotFoundError(f"Image not found: {relative_path}") from e
        except OSError as e:
            logger.error(f"[Assets] Failed to delete {relative_path}: {e}", exc_info=True)
            raise AssetStoreError("Failed to delete image") from e

        logger.info(f"[Assets] Deleted {relative_path}")

    def public_url(self, relative_path):
        if not relative_path:
            return None
        return f"{self.base_url}/{URL_PREFIX}/{relative_path}"

    def iter_files(self):
        """Relative paths of every stored file"""
        if not self.root.is_dir():
            return
        for path in sorted(self.root.rglob("*")):
            if path.is_file():
                yield path.relative_to(self.root).as_posix()

    def sweep_orphans(self, referenced_paths):
        """
        Delete files no row refers to any more.

        Orphans appear when a request dies between writing a file and
        committing the row that points at it.
        """
        referenced = {p for p in referenced_paths if p}
        removed = []
        for relative_path in list(self.iter_files()):
            if relative_path in referenced:
                continue
            try:
                self.delete(relative_path)
                removed.append(relative_path)
            except AssetNotFoundError:
                continue
        if removed:
            logger.info(f"[Assets] Swept {len(removed)} orphaned file(s)")
        return removed
