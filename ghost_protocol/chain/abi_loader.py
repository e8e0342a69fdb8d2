import json
from functools import cache
from pathlib import Path
from typing import Any

from ghost_protocol.chain.exceptions import ChainConfigurationError

_ABI_DIR = Path(__file__).parent / "abi"


@cache
def load_abi(name: str) -> list[dict[str, Any]]:
    """Load a bundled contract ABI by file stem (e.g. ``"ip_registry"``).

    Raises:
        ChainConfigurationError: if the ABI file is missing or malformed.
    """
    path = _ABI_DIR / f"{name}.json"
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ChainConfigurationError(f"Failed to load ABI '{name}': {exc}") from exc
