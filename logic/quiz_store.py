import json
import logging
import os
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def validate_questions(questions: List[dict]) -> bool:
    for q in questions:
        options = q.get("options")
        correct = q.get("correctIndex")
        if not isinstance(q.get("question"), str):
            return False
        if not isinstance(options, list) or len(options) < 2:
            return False
        if not isinstance(correct, int) or isinstance(correct, bool) or not 0 <= correct < len(options):
            return False
    return True


class QuizStore:
    """Quizzes kept in one JSON file: {"quizzes": [...]}, newest first."""

    def __init__(self, path: str):
        self.path = path

    def read(self) -> Dict:
        os.makedirs(os.path.dirname(self.path), exist_ok=True)
        if not os.path.exists(self.path):
            empty = {"quizzes": []}
            self.write(empty)
            return empty
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s, treating as empty: %s", self.path, e)
            return {"quizzes": []}
        if not isinstance(data, dict) or not isinstance(data.get("quizzes"), list):
            data = {"quizzes": []}
        return data

    def write(self, data: Dict):
        os.makedirs(os.path.dirname(self.path), exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def list(self) -> List[dict]:
        return self.read()["quizzes"]

    def get(self, quiz_id: str) -> Optional[dict]:
        return next((q for q in self.list() if q["id"] == quiz_id), None)

    def add(self, title: str, questions: List[dict], unit_number: Optional[int] = None) -> dict:
        data = self.read()
        now = now_iso()
        taken = {q["id"] for q in data["quizzes"]}
        millis = int(time.time() * 1000)
        while str(millis) in taken:
            millis += 1
        quiz = {
            "id": str(millis),
            "title": title,
            "questions": questions,
            "createdAt": now,
            "updatedAt": now,
        }
        if unit_number is not None:
            quiz["unitNumber"] = unit_number
        data["quizzes"].insert(0, quiz)
        self.write(data)
        return quiz

    def update(self, quiz_id: str, title: Optional[str] = None, unit_number: Optional[int] = None,
               questions: Optional[List[dict]] = None) -> Optional[dict]:
        data = self.read()
        quiz = next((q for q in data["quizzes"] if q["id"] == quiz_id), None)
        if quiz is None:
            return None
        if title is not None:
            quiz["title"] = title
        if unit_number is not None:
            quiz["unitNumber"] = unit_number
        if questions is not None:
            quiz["questions"] = questions
        quiz["updatedAt"] = now_iso()
        self.write(data)
        return quiz

    def delete(self, quiz_id: str) -> Optional[dict]:
        data = self.read()
        for index, quiz in enumerate(data["quizzes"]):
            if quiz["id"] == quiz_id:
                removed = data["quizzes"].pop(index)
                self.write(data)
                return removed
        return None
