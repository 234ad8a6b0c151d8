import logging
import os
import tempfile

logger = logging.getLogger(__name__)


class ScratchSpace:
    """
    Per-request working directory for temporary files.

    Every path handed out by path() is registered for deletion right away, so
    leaving the with-block removes it whether or not the pipeline succeeded.
    """

    def __init__(self, root=None, prefix="cmyk-"):
        self.root = root
        self.prefix = prefix
        self.directory = None
        self._files = []

    def __enter__(self):
        if self.root:
            os.makedirs(self.root, exist_ok=True)
        self.directory = tempfile.mkdtemp(prefix=self.prefix, dir=self.root)
        logger.debug(f"Scratch directory created: {self.directory}")
        return self

    def path(self, name: str) -> str:
        if self.directory is None:
            raise RuntimeError("ScratchSpace used outside of its with-block")
        file_path = os.path.join(self.directory, os.path.basename(name))
        self._files.append(file_path)
        return file_path

    def cleanup(self):
        for file_path in reversed(self._files):
            try:
                if os.path.exists(file_path):
                    os.remove(file_path)
            except OSError as e:
                logger.warning(f"Could not delete temporary file {file_path}: {e}")
        self._files = []

        if self.directory:
            try:
                # Anything left behind was not registered; remove it too
                for leftover in os.listdir(self.directory):
                    os.remove(os.path.join(self.directory, leftover))
                os.rmdir(self.directory)
                logger.debug(f"Scratch directory removed: {self.directory}")
            except OSError as e:
                logger.warning(f"Could not remove scratch directory {self.directory}: {e}")
            self.directory = None

    def __exit__(self, exc_type, exc, tb):
        self.cleanup()
        return False
