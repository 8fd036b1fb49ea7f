from __future__ import annotations

from typing import Dict, Optional, Protocol


class SettingRepository(Protocol):
    """Flat key -> value string store with upsert semantics."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def all(self) -> Dict[str, str]:
        raise NotImplementedError
