"""
================================================================================
Login Page Object
================================================================================

Sauce Demo login screen, built on ElementActions.

================================================================================
"""

from __future__ import annotations

import allure

from saucedemo_e2e.ui_testing.framework.element_actions import ElementActions, Locator


class LoginPage:
    """Login page object."""

    URL_PATH = "/"

    USERNAME_INPUT = Locator.id("user-name")
    PASSWORD_INPUT = Locator.id("password")
    LOGIN_BUTTON = Locator.id("login-button")
    ERROR_MESSAGE = Locator.css("[data-test='error']")

    def __init__(self, actions: ElementActions, base_url: str):
        self.actions = actions
        self.base_url = base_url.rstrip("/")

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.URL_PATH}"

    @allure.step("Open login page")
    def open(self) -> "LoginPage":
        self.actions.open(self.url)
        return self

    def enter_username(self, username: str) -> None:
        self.actions.set_text(self.USERNAME_INPUT, username)

    def enter_password(self, password: str) -> None:
        self.actions.set_text(self.PASSWORD_INPUT, password)

    def submit(self) -> None:
        self.actions.click(self.LOGIN_BUTTON)

    @allure.step("Login (username={username})")
    def login(self, username: str, password: str) -> None:
        """Fill both credentials and submit the form."""
        self.enter_username(username)
        self.enter_password(password)
        self.submit()

    def is_form_displayed(self) -> bool:
        return (
            self.actions.is_displayed(self.USERNAME_INPUT)
            and self.actions.is_displayed(self.PASSWORD_INPUT)
            and self.actions.is_displayed(self.LOGIN_BUTTON)
        )

    def is_error_displayed(self) -> bool:
        return self.actions.is_displayed(self.ERROR_MESSAGE)

    def error_message(self) -> str:
        return self.actions.get_text(self.ERROR_MESSAGE)
