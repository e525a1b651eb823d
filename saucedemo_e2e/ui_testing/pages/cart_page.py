"""
================================================================================
Cart Page Object
================================================================================

Sauce Demo "Your Cart" screen.

================================================================================
"""

from __future__ import annotations

from typing import List

import allure

from saucedemo_e2e.ui_testing.framework.element_actions import ElementActions, Locator
from saucedemo_e2e.ui_testing.pages.products_page import item_slug


class CartPage:
    """Cart page object."""

    PAGE_TITLE = "Your Cart"

    TITLE = Locator.css(".title")
    ITEM_NAMES = Locator.css(".cart_item .inventory_item_name")
    CHECKOUT_BUTTON = Locator.id("checkout")
    CONTINUE_SHOPPING_BUTTON = Locator.id("continue-shopping")

    def __init__(self, actions: ElementActions):
        self.actions = actions

    def title(self) -> str:
        return self.actions.get_text(self.TITLE)

    def item_names(self) -> List[str]:
        return self.actions.get_texts(self.ITEM_NAMES)

    @allure.step("Remove {item_name} from cart page")
    def remove(self, item_name: str) -> None:
        self.actions.click(Locator.id(f"remove-{item_slug(item_name)}"))

    def is_checkout_available(self) -> bool:
        return self.actions.is_displayed(self.CHECKOUT_BUTTON)

    @allure.step("Continue shopping")
    def continue_shopping(self) -> None:
        self.actions.click(self.CONTINUE_SHOPPING_BUTTON)
