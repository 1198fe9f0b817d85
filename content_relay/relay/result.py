from dataclasses import dataclass
from typing import Any

from content_relay.errors import RelayError


@dataclass(frozen=True)
class RelayOk:
    body: Any
    status_code: int = 200
    media_type: str | None = None


@dataclass(frozen=True)
class RelayErr:
    error: RelayError

    @property
    def status_code(self) -> int:
        return self.error.status_code


RelayResult = RelayOk | RelayErr
