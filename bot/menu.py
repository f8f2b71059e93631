"""
MenuControl — shows one of the restaurant menus as a card.

The menu shown is, in order of preference: the menu named by the user's
reply (the menu buttons send the menu name back), the `menu_name` passed
in the begin options, or the control's default menu. A card of buttons
for every menu always follows. The control ends in the same turn, so it
never sits on the stack waiting for input.
"""
from __future__ import annotations

from typing import Any, Optional

from dialogs import Dialog, DialogContext
from models.messages import CardFactory, MessageFactory

MENUS: dict[str, dict[str, dict[str, Any]]] = {
    "burgerMenu": {
        "cheeseBurger": {"description": "Cheese Burger", "price": 1.99},
        "hamBurger": {"description": "Hamburger", "price": 2.99},
        "chickenBurger": {"description": "Grilled Chicken Burger", "price": 3.99},
    },
    "dessertMenu": {
        "applePie": {"description": "Apple Pie", "price": 3.99},
        "cherryPie": {"description": "Cherry Pie", "price": 3.99},
        "chocolateChipCookie": {"description": "Chocolate Chip Cookie", "price": 0.99},
    },
    "drinkMenu": {
        "coke": {"description": "Coca-Cola", "price": 1.25},
        "pepsi": {"description": "Pepsi", "price": 1.25},
        "mtdew": {"description": "Mt. Dew", "price": 1.25},
    },
}


def menu_facts(items: dict[str, dict[str, Any]]) -> list[dict[str, str]]:
    facts = []
    for item in items.values():
        facts.append({"title": "Item:", "value": item["description"]})
        facts.append({"title": "Price", "value": f"{item['price']:.2f}"})
    return facts


class MenuControl(Dialog):

    def __init__(self, menu_name: str = "burgerMenu", menus: dict[str, dict] = None):
        self.menus = menus or MENUS
        if menu_name not in self.menus:
            raise ValueError(f"Unknown menu '{menu_name}'")
        self.menu_name = menu_name

    def select_menu(self, utterance: str, options: Any) -> str:
        if utterance in self.menus:
            return utterance
        requested: Optional[str] = None
        if isinstance(options, dict):
            requested = options.get("menu_name")
        if requested in self.menus:
            return requested
        return self.menu_name

    async def dialog_begin(self, dc: DialogContext, options: Any = None) -> Any:
        utterance = dc.context.text.strip()
        name = self.select_menu(utterance, options)
        dc.active_dialog.state["menu_name"] = name

        cards = [
            CardFactory.fact_set_card(name, menu_facts(self.menus[name])),
            CardFactory.actions(list(self.menus)),
        ]
        await dc.context.send_activity(MessageFactory.list(cards))
        return await dc.end_dialog()
