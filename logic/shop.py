import logging
from typing import Dict, List, NamedTuple, Optional

from logic.xp import XpSlice

logger = logging.getLogger(__name__)


class ShopItem(NamedTuple):
    id: str
    name: str
    description: str
    price: int
    type: str  # "module" or "book"
    category: str


SHOP_ITEMS = [
    # Educational modules
    ShopItem("advanced-math", "Advanced Mathematics",
             "Unlock advanced math concepts including calculus, algebra, and geometry",
             25, "module", "Mathematics"),
    ShopItem("science-lab", "Virtual Science Lab",
             "Interactive experiments and simulations for physics and chemistry",
             750, "module", "Science"),
    ShopItem("coding-basics", "Programming Fundamentals",
             "Learn basic programming concepts with interactive coding exercises",
             600, "module", "Technology"),
    ShopItem("language-master", "Language Mastery",
             "Advanced language learning with pronunciation and grammar tools",
             400, "module", "Languages"),
    # Reference books
    ShopItem("math-handbook", "Complete Mathematics Handbook",
             "Comprehensive reference for all mathematical concepts and formulas",
             200, "book", "Mathematics"),
    ShopItem("science-encyclopedia", "Science Encyclopedia",
             "Detailed explanations of scientific principles and discoveries",
             300, "book", "Science"),
    ShopItem("history-atlas", "Interactive History Atlas",
             "Visual timeline and maps of world history events",
             250, "book", "History"),
    ShopItem("grammar-guide", "Grammar & Writing Guide",
             "Complete guide to grammar rules and writing techniques",
             150, "book", "Languages"),
]

CATALOG: Dict[str, ShopItem] = {item.id: item for item in SHOP_ITEMS}


def find_item(item_id: str) -> Optional[ShopItem]:
    return CATALOG.get(item_id)


class ShopSlice:
    """
    Purchased item ids. Buying spends XP through the XP slice, so the balance
    shown everywhere else drops by the price in the same step.
    """

    def __init__(self, xp: XpSlice):
        self.xp = xp
        self.purchased_items: List[str] = []

    def purchase_item(self, item_id: str, price: int) -> bool:
        if item_id in self.purchased_items:
            return False
        if self.xp.xp_all_time() < price:
            return False

        self.xp.increase_xp(-price)
        self.purchased_items.append(item_id)
        logger.info("Purchased %s for %s XP", item_id, price)
        return True

    def is_purchased(self, item_id: str) -> bool:
        return item_id in self.purchased_items

    def get_purchased_items(self) -> List[str]:
        return list(self.purchased_items)
