import json
from dataclasses import asdict, dataclass
from pathlib import Path

from ghost_protocol.logging.logger import Log


@dataclass(frozen=True)
class WalletPreference:
    """Whether to reconnect the last wallet connector at session start.

    Only the preference is kept; addresses are always read from the connector.
    """

    auto_connect: bool = False
    connector: str = ""


class SessionStore:
    """JSON file holding the wallet connection preference between sessions."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def restore(self) -> WalletPreference:
        if not self._path.exists():
            return WalletPreference()
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            Log.warning(f"Ignoring unreadable session file {self._path}: {exc}")
            return WalletPreference()
        if not isinstance(raw, dict):
            Log.warning(f"Ignoring malformed session file {self._path}")
            return WalletPreference()
        return WalletPreference(
            auto_connect=raw.get("auto_connect") is True,
            connector=str(raw.get("connector") or ""),
        )

    def save(self, preference: WalletPreference) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(asdict(preference)), encoding="utf-8")
        Log.debug(f"Session preference saved to {self._path}")
