"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for Sauce Demo screens.

Each page class holds an ElementActions instance and encapsulates:
    - Element locators
    - Page-specific actions
    - Verification helpers

Author: Automation Team
License: MIT
================================================================================
"""

from .login_page import LoginPage
from .products_page import ProductsPage
from .cart_page import CartPage

__all__ = [
    "LoginPage",
    "ProductsPage",
    "CartPage",
]
