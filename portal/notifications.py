"""
Toast notifications.

Thin layer over Flask's flash(); the base template renders flashed messages
as toasts, coloured by category.
"""

from typing import Callable

from flask import flash

SUCCESS = "success"
ERROR = "error"
INFO = "info"
WARNING = "warning"

Notifier = Callable[[str], None]


def toast(message: str, category: str = INFO) -> None:
    flash(message, category)


def toast_success(message: str) -> None:
    toast(message, SUCCESS)


def toast_error(message: str) -> None:
    toast(message, ERROR)


def toast_info(message: str) -> None:
    toast(message, INFO)


def toast_warning(message: str) -> None:
    toast(message, WARNING)
