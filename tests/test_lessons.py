import pytest

from logic.lessons import (
    ACTIVE, COMPLETE, LOCKED, TREASURE_LESSONS, UNITS,
    LessonSlice, Tile, first_tile_index, flatten_tiles, tile_statuses,
)


@pytest.mark.parametrize("counter", [0, 1, 3, 5, 6, 9])
def test_tile_gating_counts(counter):
    tiles = [Tile("star")] * 6
    statuses = tile_statuses(tiles, counter)

    assert statuses.count(COMPLETE) == min(counter, len(tiles))
    assert statuses.count(ACTIVE) == (1 if counter < len(tiles) else 0)
    assert statuses.count(LOCKED) == len(tiles) - min(counter, len(tiles)) - statuses.count(ACTIVE)
    if counter < len(tiles):
        assert statuses[counter] == ACTIVE


def test_gating_follows_list_order():
    tiles = flatten_tiles(UNITS)
    statuses = tile_statuses(tiles, 2)
    assert statuses[:3] == [COMPLETE, COMPLETE, ACTIVE]
    assert set(statuses[3:]) == {LOCKED}


def test_lessons_counter_only_grows():
    lessons = LessonSlice()
    lessons.increase_lessons_completed()
    lessons.increase_lessons_completed(3)
    assert lessons.lessons_completed == 4
    with pytest.raises(ValueError):
        lessons.increase_lessons_completed(-1)


def test_treasure_opens_only_when_active():
    lessons = LessonSlice()
    treasure = [i for i, t in enumerate(lessons.tiles()) if t.type == "treasure"][0]

    assert lessons.open_treasure(treasure) is False
    assert lessons.lessons_completed == 0

    lessons.increase_lessons_completed(treasure)
    assert lessons.open_treasure(treasure) is True
    assert lessons.lessons_completed == treasure + TREASURE_LESSONS


def test_open_treasure_rejects_other_tiles():
    with pytest.raises(ValueError):
        LessonSlice().open_treasure(0)


def test_jump_to_unit_never_moves_back():
    lessons = LessonSlice()
    lessons.jump_to_unit(2)
    assert lessons.lessons_completed == first_tile_index(2)

    lessons.increase_lessons_completed(8)
    before = lessons.lessons_completed
    lessons.jump_to_unit(2)
    assert lessons.lessons_completed == before

    with pytest.raises(ValueError):
        lessons.jump_to_unit(42)
