from typing import List, NamedTuple, Sequence

LOCKED = "LOCKED"
ACTIVE = "ACTIVE"
COMPLETE = "COMPLETE"

# an ACTIVE treasure chest completes this many lessons at once
TREASURE_LESSONS = 4


class Tile(NamedTuple):
    type: str
    description: str = ""


class Unit(NamedTuple):
    unit_number: int
    description: str
    tiles: List[Tile]


UNITS = [
    Unit(1, "Materials around us", [
        Tile("star", "Hard and soft materials"),
        Tile("book", "Soluble or insoluble?"),
        Tile("star", "Transparent, translucent, opaque"),
        Tile("treasure"),
        Tile("dumbbell", "Practice: sorting materials"),
        Tile("trophy", "Unit 1 review"),
    ]),
    Unit(2, "Parts of a plant", [
        Tile("fast-forward", "Roots and stems"),
        Tile("book", "Leaves and photosynthesis"),
        Tile("star", "Flowers, fruits and seeds"),
        Tile("treasure"),
        Tile("dumbbell", "Practice: plant assembly"),
        Tile("trophy", "Unit 2 review"),
    ]),
    Unit(3, "Numbers and fractions", [
        Tile("fast-forward", "Place value"),
        Tile("star", "Comparing fractions"),
        Tile("book", "Adding fractions"),
        Tile("treasure"),
        Tile("dumbbell", "Practice: fractions"),
        Tile("trophy", "Unit 3 review"),
    ]),
]


def flatten_tiles(units: Sequence[Unit] = UNITS) -> List[Tile]:
    return [tile for unit in units for tile in unit.tiles]


def tile_status(index: int, lessons_completed: int) -> str:
    if index < lessons_completed:
        return COMPLETE
    if index > lessons_completed:
        return LOCKED
    return ACTIVE


def tile_statuses(tiles: Sequence[Tile], lessons_completed: int) -> List[str]:
    return [tile_status(i, lessons_completed) for i in range(len(tiles))]


def first_tile_index(unit_number: int, units: Sequence[Unit] = UNITS) -> int:
    index = 0
    for unit in units:
        if unit.unit_number == unit_number:
            return index
        index += len(unit.tiles)
    raise ValueError(f"Unknown unit {unit_number}")


class LessonSlice:
    def __init__(self, units: Sequence[Unit] = UNITS):
        self.units = list(units)
        self.lessons_completed = 0

    def increase_lessons_completed(self, n: int = 1):
        if n < 0:
            raise ValueError("lessons completed can only grow")
        self.lessons_completed += n

    def tiles(self) -> List[Tile]:
        return flatten_tiles(self.units)

    def statuses(self) -> List[str]:
        return tile_statuses(self.tiles(), self.lessons_completed)

    def open_treasure(self, index: int) -> bool:
        tiles = self.tiles()
        if not 0 <= index < len(tiles) or tiles[index].type != "treasure":
            raise ValueError(f"Tile {index} is not a treasure chest")
        if tile_status(index, self.lessons_completed) != ACTIVE:
            return False
        self.increase_lessons_completed(TREASURE_LESSONS)
        return True

    def jump_to_unit(self, unit_number: int):
        # fast-forward never moves the learner backwards
        target = first_tile_index(unit_number, self.units)
        self.lessons_completed = max(self.lessons_completed, target)
