# genelinker/prefs.py
# Small JSON-file store for what the browser app kept in local storage.
from __future__ import annotations
import json, logging, os
from pathlib import Path
from typing import Any, Dict, List, Optional

from genelinker.errors import UserInputError

log = logging.getLogger(__name__)

API_KEY = "genelinker_api_key"
MODEL_NAME = "genelinker_model_name"
TOUR_COMPLETED = "genelinker_tour_completed"
RECENT_SEARCHES = "genelinker_recent_searches"

MAX_RECENT = 10


def default_path() -> Path:
    p = os.environ.get("GENELINKER_STATE_PATH")
    if p:
        return Path(p)
    return Path.home() / ".genelinker" / "prefs.json"


class Preferences:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else default_path()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            log.warning("ignoring unreadable preferences at %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, Any]) -> None:
        os.makedirs(self.path.parent, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, *keys: str) -> None:
        data = self._read()
        for k in keys:
            data.pop(k, None)
        self._write(data)

    # ---- credential / model ----
    def save_api_config(self, api_key: str, model_name: str) -> None:
        if not (api_key or "").strip():
            raise UserInputError("API key required")
        data = self._read()
        data[API_KEY] = api_key.strip()
        data[MODEL_NAME] = (model_name or "").strip()
        self._write(data)

    def clear_api_config(self) -> None:
        self.remove(API_KEY, MODEL_NAME)

    # ---- tour ----
    @property
    def tour_completed(self) -> bool:
        return bool(self.get(TOUR_COMPLETED, False))

    def mark_tour_completed(self, done: bool = True) -> None:
        self.set(TOUR_COMPLETED, bool(done))

    # ---- recent searches ----
    def recent_searches(self) -> List[str]:
        xs = self.get(RECENT_SEARCHES, []) or []
        return [x for x in xs if isinstance(x, str)][:MAX_RECENT]

    def add_recent_search(self, query: str) -> List[str]:
        q = (query or "").strip()
        if not q:
            return self.recent_searches()
        xs = [q] + [x for x in self.recent_searches() if x != q]
        xs = xs[:MAX_RECENT]
        self.set(RECENT_SEARCHES, xs)
        return xs
