"""
In-Memory Token Storage
Holds the single user's OAuth credential for the lifetime of the process
"""

import logging
from typing import Optional

from utils.locks import ReadWriteLock

from .models import Credential

logger = logging.getLogger(__name__)


class TokenStorage:
    """
    Thread-safe slot for exactly one OAuth credential

    Features:
    - Concurrent readers, exclusive writers (reader-writer lock)
    - Whole-value replacement only; stored credentials are immutable
    - No disk or network side effects: starts empty, discarded at exit
    """

    def __init__(self, credential: Optional[Credential] = None):
        """
        Initialize token storage

        Args:
            credential: Initial credential (default: empty)
        """
        self._lock = ReadWriteLock()
        self._credential = credential

    def get(self) -> Optional[Credential]:
        """
        Get the current credential

        Returns:
            Immutable credential snapshot, or None if nobody has authenticated
        """
        with self._lock.read_locked():
            return self._credential

    def set(self, credential: Optional[Credential]):
        """
        Replace the stored credential

        Args:
            credential: New credential, or None to clear
        """
        if credential is not None and not isinstance(credential, Credential):
            raise TypeError(f"Expected Credential, got {type(credential).__name__}")

        with self._lock.write_locked():
            self._credential = credential

    def replace_if(self, expected: Optional[Credential], credential: Optional[Credential]) -> bool:
        """
        Replace the stored credential only if it is still ``expected``

        Used by refreshes, which read a credential, talk to Google without
        holding the lock, then write back: a credential stored meanwhile
        (e.g. by a new browser login) must not be overwritten or cleared.

        Args:
            expected: The credential the caller read before refreshing
            credential: New credential, or None to clear

        Returns:
            True if the value was replaced
        """
        if credential is not None and not isinstance(credential, Credential):
            raise TypeError(f"Expected Credential, got {type(credential).__name__}")

        with self._lock.write_locked():
            if self._credential is not expected:
                return False
            self._credential = credential
            return True

    def clear(self):
        """Forget the stored credential"""
        self.set(None)
        logger.info("Stored credential cleared")

    def exists(self) -> bool:
        """Check if a credential is held"""
        return self.get() is not None
