"""Invoice artifact stores.

Provides get_invoice_store() / set_invoice_store() to swap implementations:
- FileInvoiceStore writes ``invoice-{order_id}.pdf`` under INVOICE_DIR
- MemoryInvoiceStore keeps documents in process (tests)
"""

import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path

import structlog

from shared.config import get_settings
from shared.errors import StoreUnavailable

logger = structlog.get_logger(__name__)


class InvoiceStore(ABC):
    @abstractmethod
    def write(self, filename: str, content: bytes) -> None:
        """Store a complete document. Either all of it is stored or nothing is."""

    @abstractmethod
    def read(self, filename: str) -> bytes | None: ...


class FileInvoiceStore(InvoiceStore):
    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def write(self, filename: str, content: bytes) -> None:
        tmp_path = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{filename}.", suffix=".tmp")
            with os.fdopen(fd, "wb") as fh:
                fh.write(content)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.directory / filename)
        except OSError as exc:
            logger.error("Invoice write failed", filename=filename, directory=str(self.directory), error=str(exc))
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)
            raise StoreUnavailable("Invoice could not be stored", filename=filename) from exc

    def read(self, filename: str) -> bytes | None:
        path = self.directory / filename
        return path.read_bytes() if path.exists() else None


class MemoryInvoiceStore(InvoiceStore):
    def __init__(self) -> None:
        self.documents: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def write(self, filename: str, content: bytes) -> None:
        with self._lock:
            self.documents[filename] = bytes(content)

    def read(self, filename: str) -> bytes | None:
        with self._lock:
            return self.documents.get(filename)


_current_store: InvoiceStore | None = None


def get_invoice_store() -> InvoiceStore:
    """Return the active invoice store, defaulting to the configured directory."""
    global _current_store
    if _current_store is None:
        settings = get_settings()
        _current_store = MemoryInvoiceStore() if settings.env == "test" else FileInvoiceStore(settings.invoice_dir)
    return _current_store


def set_invoice_store(store: InvoiceStore) -> None:
    global _current_store
    _current_store = store


def reset_invoice_store() -> None:
    global _current_store
    _current_store = None
