import json
import logging
import os
import re
import time
from typing import Dict, List, Optional

from logic.quiz_store import now_iso

logger = logging.getLogger(__name__)

# "note" records live under "notes", "video" under "videos"
LIST_KEYS = {"note": "notes", "video": "videos"}


def safe_filename(name: str) -> str:
    return re.sub(r"[^a-zA-Z0-9._-]", "_", name)


class UploadStore:
    """
    Metadata for teacher uploads in a JSON file, binaries under
    `<public_dir>/uploads/notes` and `<public_dir>/uploads/videos`.
    """

    def __init__(self, path: str, public_dir: str):
        self.path = path
        self.public_dir = public_dir

    def read(self) -> Dict:
        os.makedirs(os.path.dirname(self.path), exist_ok=True)
        if not os.path.exists(self.path):
            empty = {"notes": [], "videos": []}
            self.write(empty)
            return empty
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s, treating as empty: %s", self.path, e)
            return {"notes": [], "videos": []}
        if not isinstance(data, dict):
            data = {}
        data.setdefault("notes", [])
        data.setdefault("videos", [])
        return data

    def write(self, data: Dict):
        os.makedirs(os.path.dirname(self.path), exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def list(self, upload_type: str) -> List[dict]:
        return self.read()[LIST_KEYS[upload_type]]

    def add(self, item: dict) -> dict:
        data = self.read()
        data[LIST_KEYS[item["type"]]].append(item)
        self.write(data)
        return item

    def update(self, item_id: str, upload_type: str, title: Optional[str] = None,
               description: Optional[str] = None) -> Optional[dict]:
        data = self.read()
        item = next((x for x in data[LIST_KEYS[upload_type]] if x["id"] == item_id), None)
        if item is None:
            return None
        if title is not None:
            item["title"] = title
        if description is not None:
            item["description"] = description
        self.write(data)
        return item

    def delete(self, item_id: str, upload_type: str) -> Optional[dict]:
        data = self.read()
        items = data[LIST_KEYS[upload_type]]
        for index, item in enumerate(items):
            if item["id"] == item_id:
                removed = items.pop(index)
                self.write(data)
                self.remove_file(removed)
                return removed
        return None

    def file_path(self, relative_path: str) -> str:
        return os.path.join(self.public_dir, relative_path.lstrip("/"))

    def remove_file(self, item: dict):
        path = self.file_path(item["relativePath"])
        if os.path.exists(path):
            os.remove(path)

    def save_file(self, upload_type: str, original_name: str, content: bytes, index: int = 0,
                  title: str = "", description: Optional[str] = None, teacher_id: Optional[str] = None,
                  unit_number: Optional[int] = None) -> dict:
        folder = LIST_KEYS[upload_type]
        target_dir = os.path.join(self.public_dir, "uploads", folder)
        os.makedirs(target_dir, exist_ok=True)

        safe = safe_filename(original_name)
        taken = {x["id"] for x in self.list(upload_type)}
        millis = int(time.time() * 1000)
        # same-millisecond uploads must not share an id or a stored file
        while f"{millis}-{index}" in taken or os.path.exists(os.path.join(target_dir, f"{millis}-{index}-{safe}")):
            millis += 1
        stamped = f"{millis}-{index}-{safe}"
        with open(os.path.join(target_dir, stamped), "wb") as f:
            f.write(content)

        item = {
            "id": f"{millis}-{index}",
            "type": upload_type,
            "title": title if index == 0 else f"{title} ({index + 1})",
            "fileName": stamped,
            "relativePath": f"/uploads/{folder}/{stamped}",
            "uploadedAt": now_iso(),
        }
        if description is not None:
            item["description"] = description
        if teacher_id is not None:
            item["teacherId"] = teacher_id
        if unit_number is not None:
            item["unitNumber"] = unit_number
        return self.add(item)
