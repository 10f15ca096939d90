#!/usr/bin/env python3
"""
JSON persistence for light-cone diagrams.

Each key is stored as <storage_dir>/<key>.json:
- lightConeDiagram: {comments, coneOrigins, cartoucheOffsets,
  selectedReferenceFrame, config, timestamp}
- lightConeComments: free text notes
- lightConeAppState: front-end state (window size, last selection)

Reads are best-effort: a missing or corrupt file yields None and never
interrupts the editor.
"""
import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from .config import DiagramConfig
from .errors import LightConeError
from .frames import FrameDiagram

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_DIR = os.path.join(os.path.expanduser("~"), ".lightcone")

COMMENTS_KEY = "lightConeComments"
DIAGRAM_KEY = "lightConeDiagram"
APP_STATE_KEY = "lightConeAppState"


def _read_json(path: str) -> Optional[Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        logger.debug("No stored data at %s", path)
    except (OSError, ValueError) as e:
        logger.debug("Unreadable stored data at %s: %s", path, e)
    return None


class DiagramStore:
    def __init__(self, storage_dir: Optional[str] = None):
        self.storage_dir = storage_dir or DEFAULT_STORAGE_DIR

    def path_for(self, key: str) -> str:
        return os.path.join(self.storage_dir, f"{key}.json")

    def save(self, key: str, value: Any) -> bool:
        path = self.path_for(key)
        tmp = path + ".tmp"
        try:
            os.makedirs(self.storage_dir, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=2)
            os.replace(tmp, path)
        except OSError as e:
            logger.warning("Could not save %s: %s", key, e)
            return False
        return True

    def load(self, key: str) -> Optional[Any]:
        return _read_json(self.path_for(key))

    # -----------------------
    # Typed helpers
    # -----------------------

    def save_diagram(self, diagram: FrameDiagram, config: DiagramConfig, comments: str = "") -> bool:
        payload: Dict[str, Any] = {"comments": comments}
        payload.update(diagram.to_dict())
        payload["config"] = config.to_dict()
        payload["timestamp"] = datetime.now().isoformat(timespec="seconds")
        saved = self.save(DIAGRAM_KEY, payload)
        return self.save(COMMENTS_KEY, comments) and saved

    def load_diagram(self) -> Optional[Tuple[FrameDiagram, DiagramConfig, str]]:
        data = self.load(DIAGRAM_KEY)
        if not isinstance(data, dict):
            return None
        try:
            diagram = FrameDiagram.from_dict(data)
        except (LightConeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Stored diagram is invalid: %s", e)
            return None
        config = DiagramConfig.from_dict(data.get("config") or {})
        comments = data.get("comments")
        if not isinstance(comments, str):
            comments = self.load_comments()
        return diagram, config, comments

    def save_comments(self, comments: str) -> bool:
        return self.save(COMMENTS_KEY, comments)

    def load_comments(self) -> str:
        comments = self.load(COMMENTS_KEY)
        return comments if isinstance(comments, str) else ""

    def save_app_state(self, state: Dict[str, Any]) -> bool:
        return self.save(APP_STATE_KEY, state)

    def load_app_state(self) -> Dict[str, Any]:
        state = self.load(APP_STATE_KEY)
        return state if isinstance(state, dict) else {}
