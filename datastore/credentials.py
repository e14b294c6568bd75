from __future__ import annotations
import json
from dataclasses import asdict, dataclass
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Optional

from settings import get_settings


@dataclass(frozen=True)
class CredentialRecord:
    username: str
    password_hash: str
    salt: str


class CredentialStore:
    """Holds the single local account, optionally mirrored to a JSON file."""

    def __init__(self, persistence_path: Optional[Path] = None) -> None:
        self._record: Optional[CredentialRecord] = None
        self.persistence_path = persistence_path
        self._lock = Lock()
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    def get_record(self) -> Optional[CredentialRecord]:
        with self._lock:
            return self._record

    def put_record(self, record: CredentialRecord) -> None:
        with self._lock:
            self._record = record
            self._persist()

    def _persist(self) -> None:
        if not self.persistence_path or self._record is None:
            return
        self.persistence_path.write_text(json.dumps(asdict(self._record), indent=2, sort_keys=True))

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            raw = self.persistence_path.read_text() or "{}"
            data = json.loads(raw)
            record = CredentialRecord(
                username=data["username"],
                password_hash=data["password_hash"],
                salt=data["salt"],
            )
            if not all(isinstance(value, str) for value in asdict(record).values()):
                raise TypeError("Credential fields must be strings.")
            bytes.fromhex(record.salt)
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError):
            self._record = None
            return
        self._record = record


@lru_cache
def build_default_store(path: Optional[str] = None) -> CredentialStore:
    settings = get_settings()
    store_path = settings.credentials_path if path is None else path
    persistence = Path(store_path) if store_path else None
    return CredentialStore(persistence_path=persistence)
