import hmac
import threading
from typing import Dict, Optional

class StoredCode:
    def __init__(self, code: str, expires_at: float):
        self.code = code
        self.expires_at = expires_at

    def is_expired(self, now: float) -> bool:
        return self.expires_at <= now

class CodeStore:
    """
    In-memory phone -> issued code map.
    At most one code is valid per phone; issuing again replaces the old one.
    """

    def __init__(self):
        self.codes: Dict[str, StoredCode] = {}
        self._lock = threading.Lock()

    def put(self, phone: str, code: str, expires_at: float, now: float):
        with self._lock:
            self._purge(now)
            self.codes[phone] = StoredCode(code, expires_at)

    def get(self, phone: str, now: float) -> Optional[StoredCode]:
        with self._lock:
            stored = self.codes.get(phone)
            if stored and stored.is_expired(now):
                del self.codes[phone]
                return None
            return stored

    def consume(self, phone: str, code: str, now: float) -> bool:
        with self._lock:
            stored = self.codes.get(phone)
            if stored is None:
                return False
            if stored.is_expired(now):
                del self.codes[phone]
                return False
            if not hmac.compare_digest(stored.code, code):
                return False
            del self.codes[phone]
            return True

    def purge_expired(self, now: float) -> int:
        with self._lock:
            return self._purge(now)

    def _purge(self, now: float) -> int:
        expired = [phone for phone, stored in self.codes.items() if stored.is_expired(now)]
        for phone in expired:
            del self.codes[phone]
        return len(expired)

    def __len__(self):
        return len(self.codes)
