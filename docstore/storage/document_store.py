from __future__ import annotations

import copy
import logging
import os
import stat
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from ..errors import DocumentNotFoundError, ParseError, StorageIOError
from .codecs import DEFAULT_ROOT_TAG, Codec, Encoding, codec_for
from .schema import SequenceSchema

logger = logging.getLogger(__name__)


class DocumentStore:
    """One document on disk: loaded whole, saved whole.

    The file extension picks the codec (.json, .yml/.yaml, .xml). With a
    ``seed`` configured, a missing file is bootstrapped from it; without one, a
    missing file is a ``DocumentNotFoundError``.
    """

    def __init__(
        self,
        path,
        schema: Optional[SequenceSchema] = None,
        seed: Optional[Dict[str, Any]] = None,
        root_tag: str = DEFAULT_ROOT_TAG,
    ):
        self.path = Path(path)
        self.encoding: Encoding = Encoding.from_path(self.path)
        self.codec: Codec = codec_for(self.encoding, schema=schema, root_tag=root_tag)
        self.seed = seed
        self._lock = threading.RLock()

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Dict[str, Any]:
        if not self.path.exists():
            if self.seed is None:
                raise DocumentNotFoundError(f"Database file not found: {self.path}")
            self.bootstrap()
            return copy.deepcopy(self.seed)

        try:
            data = self.path.read_bytes()
        except OSError as e:
            raise StorageIOError(f"Cannot read {self.path}: {e}") from e

        tree = self.codec.decode(data)
        if not isinstance(tree, dict):
            raise ParseError(f"Document root in {self.path.name} must be a mapping")
        logger.debug("Loaded %s (%d bytes, %s)", self.path, len(data), self.encoding.value)
        return tree

    def save(self, tree: Dict[str, Any]) -> None:
        """Encode the whole tree and atomically replace the file with it."""
        # Encode before touching the disk so a bad tree never clobbers the file.
        data = self.codec.encode(tree)

        tmp_path: Optional[Path] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "wb",
                dir=str(self.path.parent),
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_path = Path(handle.name)
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            # NamedTemporaryFile is 0600; keep the mode the file already had.
            if self.path.exists():
                os.chmod(tmp_path, stat.S_IMODE(self.path.stat().st_mode))
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise StorageIOError(f"Cannot write {self.path}: {e}") from e
        logger.debug("Saved %s (%d bytes, %s)", self.path, len(data), self.encoding.value)

    def bootstrap(self, seed: Optional[Dict[str, Any]] = None) -> bool:
        """Write the seed document if the file does not exist yet.

        Returns True when the file was written.
        """
        seed = seed if seed is not None else self.seed
        if seed is None:
            raise ValueError("No seed document configured")
        with self._lock:
            if self.path.exists():
                return False
            self.save(copy.deepcopy(seed))
        logger.info("Bootstrapped %s with seed document", self.path)
        return True

    @contextmanager
    def mutate(self) -> Iterator[Dict[str, Any]]:
        """Load, hand the tree to the caller, save it back if no error escaped.

        Mutations through one store are serialized in-process only; separate
        processes writing the same file still race (last writer wins).
        """
        with self._lock:
            tree = self.load()
            yield tree
            self.save(tree)
