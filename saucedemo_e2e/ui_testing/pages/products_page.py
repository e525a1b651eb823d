"""
================================================================================
Products Page Object
================================================================================

Sauce Demo inventory screen reached after a successful login.

================================================================================
"""

from __future__ import annotations

from typing import List

import allure

from saucedemo_e2e.ui_testing.framework.element_actions import ElementActions, Locator


def item_slug(item_name: str) -> str:
    """Sauce Demo button ids use the lower-cased item name with dashes."""
    return item_name.strip().lower().replace(" ", "-")


class ProductsPage:
    """Inventory page object."""

    PAGE_TITLE = "Products"

    TITLE = Locator.css(".title")
    ITEM_NAMES = Locator.css(".inventory_item_name")
    CART_BADGE = Locator.css(".shopping_cart_badge")
    CART_LINK = Locator.css(".shopping_cart_link")
    MENU_BUTTON = Locator.id("react-burger-menu-btn")
    LOGOUT_LINK = Locator.id("logout_sidebar_link")

    def __init__(self, actions: ElementActions):
        self.actions = actions

    def title(self) -> str:
        return self.actions.get_text(self.TITLE)

    def is_loaded(self) -> bool:
        return self.actions.is_displayed(self.TITLE) and self.title() == self.PAGE_TITLE

    def item_names(self) -> List[str]:
        return self.actions.get_texts(self.ITEM_NAMES)

    @allure.step("Add {item_name} to cart")
    def add_to_cart(self, item_name: str) -> None:
        self.actions.click(Locator.id(f"add-to-cart-{item_slug(item_name)}"))

    @allure.step("Remove {item_name} from cart")
    def remove_from_cart(self, item_name: str) -> None:
        self.actions.click(Locator.id(f"remove-{item_slug(item_name)}"))

    def cart_count(self) -> int:
        """Number on the cart badge; the badge is absent when the cart is empty."""
        if not self.actions.is_displayed(self.CART_BADGE):
            return 0
        return int(self.actions.get_text(self.CART_BADGE))

    @allure.step("Open cart")
    def open_cart(self) -> None:
        self.actions.click(self.CART_LINK)

    @allure.step("Logout")
    def logout(self) -> None:
        self.actions.click(self.MENU_BUTTON)
        self.actions.click(self.LOGOUT_LINK)
