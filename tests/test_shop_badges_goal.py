import pytest

from logic.badges import BadgeSlice, STARTER_BADGES
from logic.goal import GoalSlice
from logic.shop import ShopSlice, SHOP_ITEMS, find_item
from logic.xp import XpSlice


@pytest.fixture
def xp(clock):
    return XpSlice(clock)


def test_purchase_scenario(xp):
    shop = ShopSlice(xp)
    xp.increase_xp(10)
    xp.increase_xp(5)
    assert xp.xp_all_time() == 15

    assert shop.purchase_item("advanced-math", 25) is False
    assert shop.get_purchased_items() == []
    assert xp.xp_all_time() == 15

    xp.increase_xp(10)
    assert shop.purchase_item("advanced-math", 25) is True
    assert xp.xp_all_time() == 0
    assert shop.get_purchased_items() == ["advanced-math"]
    assert shop.is_purchased("advanced-math")


def test_second_purchase_of_same_item_fails(xp):
    shop = ShopSlice(xp)
    xp.increase_xp(100)

    assert shop.purchase_item("grammar-guide", 30)
    assert not shop.purchase_item("grammar-guide", 30)
    assert xp.xp_all_time() == 70
    assert shop.get_purchased_items() == ["grammar-guide"]


def test_failed_purchase_leaves_ledger_untouched(xp):
    shop = ShopSlice(xp)
    xp.increase_xp(24)
    events_before = list(xp.events)

    assert not shop.purchase_item("advanced-math", 25)
    assert xp.events == events_before
    assert not shop.is_purchased("advanced-math")


def test_get_purchased_items_is_a_copy(xp):
    shop = ShopSlice(xp)
    shop.get_purchased_items().append("science-lab")
    assert shop.get_purchased_items() == []


def test_catalog_lookup():
    assert find_item("advanced-math").price == 25
    assert find_item("missing") is None
    assert len({item.id for item in SHOP_ITEMS}) == len(SHOP_ITEMS)


def test_add_badge_is_idempotent():
    badges = BadgeSlice([])
    assert badges.add_badge("Quiz Master")
    assert not badges.add_badge("Quiz Master")
    assert badges.badges.count("Quiz Master") == 1
    assert badges.has_badge("Quiz Master")
    assert not badges.has_badge("Perfect Lesson")


def test_new_learner_has_starter_badges():
    assert BadgeSlice().badges == STARTER_BADGES


def test_goal_must_be_a_known_option():
    goal = GoalSlice()
    assert goal.goal_xp == 100
    goal.set_goal_xp(20)
    assert goal.goal_xp == 20
    with pytest.raises(ValueError):
        goal.set_goal_xp(15)
    assert goal.goal_xp == 20


def test_goal_progress_is_capped():
    goal = GoalSlice(10)
    assert goal.goal_progress(4) == {"goal_xp": 10, "xp_today": 4, "xp_remaining": 6, "percentage": 40.0}
    assert goal.goal_progress(25)["percentage"] == 100
    assert goal.goal_progress(25)["xp_remaining"] == 0
