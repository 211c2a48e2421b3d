"""
Drag and drop mini-games.

The browser owns the layout: it reports each drop zone's bounding rectangle
when a round starts and the pointer position when an item is released. A
release is judged with a plain point-in-rectangle test.
"""

from typing import Dict, List, NamedTuple, Optional, Sequence

POINTS_PER_ITEM = 10
SUCCESS = "success"
ERROR = "error"


class Rect(NamedTuple):
    left: float
    top: float
    right: float
    bottom: float

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom


class DropZone(NamedTuple):
    key: str
    label: str
    rect: Rect


class DragItem(NamedTuple):
    key: str
    label: str
    target: str  # key of the zone the item belongs in
    hint: str


class DropResult(NamedTuple):
    item: str
    zone: Optional[str]
    resolved: bool
    hint: str = ""
    cue: Optional[str] = None


def zone_at(zones: Sequence[DropZone], x: float, y: float) -> Optional[DropZone]:
    for zone in zones:
        if zone.rect.contains(x, y):
            return zone
    return None


def judge_drop(item: DragItem, zones: Sequence[DropZone], x: float, y: float,
               hint_on_miss: bool = False) -> DropResult:
    zone = zone_at(zones, x, y)
    if zone is None and not hint_on_miss:
        # released outside every zone: nothing happens
        return DropResult(item.key, None, False)
    if zone is not None and zone.key == item.target:
        return DropResult(item.key, zone.key, True, "", SUCCESS)
    return DropResult(item.key, zone.key if zone else None, False, item.hint, ERROR)


def build_zones(labels: Dict[str, str], rects: Dict[str, dict]) -> List[DropZone]:
    missing = [key for key in labels if key not in rects]
    if missing:
        raise ValueError(f"Missing drop zone rectangles: {', '.join(missing)}")
    return [DropZone(key, label, Rect(**rects[key])) for key, label in labels.items()]


class DragRound:
    def __init__(self, items: Sequence[DragItem], zones: Sequence[DropZone], total_seconds: int,
                 hint_on_miss: bool = False):
        self.items = list(items)
        self.zones = list(zones)
        self.total_seconds = total_seconds
        self.seconds_left = total_seconds
        self.hint_on_miss = hint_on_miss
        self.score = 0
        self.resolved: List[str] = []
        self.last_hint = ""

    @property
    def all_resolved(self) -> bool:
        return len(self.resolved) == len(self.items)

    @property
    def finished(self) -> bool:
        return self.seconds_left <= 0 or self.all_resolved

    def remaining_items(self) -> List[DragItem]:
        return [item for item in self.items if item.key not in self.resolved]

    def drop(self, item_key: str, x: float, y: float) -> DropResult:
        if self.finished:
            raise ValueError("Round is over")
        item = next((i for i in self.remaining_items() if i.key == item_key), None)
        if item is None:
            raise ValueError(f"Item {item_key!r} is not in play")

        result = judge_drop(item, self.zones, x, y, self.hint_on_miss)
        if result.resolved:
            self.resolved.append(item.key)
            self.score += POINTS_PER_ITEM
            self.last_hint = ""
        elif result.cue == ERROR:
            self.last_hint = result.hint
        return result

    def tick(self, seconds: int = 1):
        self.seconds_left = max(self.seconds_left - seconds, 0)

    def state(self) -> Dict:
        return {
            "score": self.score,
            "seconds_left": self.seconds_left,
            "total_seconds": self.total_seconds,
            "remaining": [{"key": i.key, "label": i.label} for i in self.remaining_items()],
            "resolved": list(self.resolved),
            "hint": self.last_hint,
            "finished": self.finished,
        }


# --------- Soluble vs insoluble ---------
SORTING_SECONDS = 60
SORTING_ZONES = {"soluble": "Soluble", "insoluble": "Insoluble"}
SORTING_ITEMS = [
    DragItem("spoon", "Spoon", "insoluble", "Metal spoon does not dissolve in water and is a metal object."),
    DragItem("glass", "Glass", "insoluble", "A plastic glass does not dissolve and is plastic."),
    DragItem("eraser", "Eraser", "insoluble", "An eraser is made of rubber/plastic and does not dissolve."),
    DragItem("leaf", "Leaf", "insoluble", "A leaf does not dissolve in water and is not metal."),
    DragItem("coin", "Coin", "insoluble", "A coin is made of metal and does not dissolve."),
    DragItem("sugar", "Sugar", "soluble", "Sugar dissolves in water, so it's soluble!"),
    DragItem("salt", "Salt", "soluble", "Salt dissolves in water, so it's soluble!"),
    DragItem("stone", "Stone", "insoluble", "A stone is not metal-plastic category friendly and does not dissolve."),
]


def new_sorting_round(rects: Dict[str, dict]) -> DragRound:
    return DragRound(SORTING_ITEMS, build_zones(SORTING_ZONES, rects), SORTING_SECONDS)


# --------- Plant assembly ---------
PLANT_SECONDS = 90
PLANT_HINTS = {
    "root": "Roots help the plant absorb water and anchor it!",
    "stem": "Stems transport water and food across the plant.",
    "leaf": "Leaves make food by photosynthesis!",
    "flower": "Flowers help in reproduction.",
    "fruit": "Fruits carry seeds.",
    "seed": "Seeds grow into new plants.",
}
PLANT_LABELS = {"root": "Root", "stem": "Stem", "leaf": "Leaf", "flower": "Flower", "fruit": "Fruit", "seed": "Seed"}
DIAGRAM_SLOTS = {"root": "Root", "stem": "Stem", "leaf": "Leaf", "flower": "Flower"}
FUNCTION_MAP = {
    "root": "absorbs-water",
    "stem": "transport",
    "leaf": "photosynthesis",
    "flower": "reproduction",
    "fruit": "seeds",
    "seed": "new-plant",
}
FUNCTION_LABELS = {
    "photosynthesis": "Photosynthesis",
    "absorbs-water": "Absorbs water",
    "transport": "Transport",
    "reproduction": "Reproduction",
    "seeds": "Seeds",
    "new-plant": "Grows into new plant",
}

ASSEMBLE = "assemble"
FUNCTIONS = "functions"
END = "end"


class PlantRound:
    """
    Two phases on one countdown: place four parts on the diagram, then match
    all six parts to what they do. Any release in the functions phase that
    misses the right box shows the part's hint.
    """

    def __init__(self, rects: Dict[str, dict]):
        assembly_items = [DragItem(k, PLANT_LABELS[k], k, PLANT_HINTS[k]) for k in DIAGRAM_SLOTS]
        function_items = [DragItem(k, PLANT_LABELS[k], FUNCTION_MAP[k], PLANT_HINTS[k]) for k in PLANT_LABELS]
        self.assembly = DragRound(assembly_items, build_zones(DIAGRAM_SLOTS, rects), PLANT_SECONDS)
        self.functions = DragRound(function_items, build_zones(FUNCTION_LABELS, rects), PLANT_SECONDS,
                                   hint_on_miss=True)
        self.seconds_left = PLANT_SECONDS

    @property
    def phase(self) -> str:
        if self.seconds_left <= 0 or self.functions.all_resolved:
            return END
        if self.assembly.all_resolved:
            return FUNCTIONS
        return ASSEMBLE

    @property
    def finished(self) -> bool:
        return self.phase == END

    @property
    def score(self) -> int:
        return self.assembly.score + self.functions.score

    def drop(self, item_key: str, x: float, y: float) -> DropResult:
        phase = self.phase
        if phase == END:
            raise ValueError("Round is over")
        current = self.assembly if phase == ASSEMBLE else self.functions
        current.seconds_left = self.seconds_left
        return current.drop(item_key, x, y)

    def tick(self, seconds: int = 1):
        self.seconds_left = max(self.seconds_left - seconds, 0)

    def stars(self) -> int:
        max_score = POINTS_PER_ITEM * (len(self.assembly.items) + len(self.functions.items))
        all_correct = self.assembly.all_resolved and self.functions.all_resolved
        if all_correct and self.seconds_left >= 30:
            return 3
        if self.score >= max_score * 7 // 10:
            return 2
        return 1

    def state(self) -> Dict:
        phase = self.phase
        current = self.assembly if phase == ASSEMBLE else self.functions
        return {
            "phase": phase,
            "score": self.score,
            "seconds_left": self.seconds_left,
            "total_seconds": PLANT_SECONDS,
            "remaining": [] if phase == END else [{"key": i.key, "label": i.label} for i in current.remaining_items()],
            "hint": current.last_hint,
            "finished": phase == END,
            "stars": self.stars() if phase == END else None,
        }


GAMES = {
    "sorting": new_sorting_round,
    "plants": PlantRound,
}


def new_round(game: str, rects: Dict[str, dict]):
    if game not in GAMES:
        raise KeyError(game)
    return GAMES[game](rects)
