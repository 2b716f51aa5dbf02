"""System-tray icon setup via pystray."""

from typing import Callable

import pystray
from PIL import Image
from pystray import MenuItem, Menu

ONBOARDING_TEXT = (
    "1. Add the widget from your desktop's widget gallery.\n"
    "2. Search for \"Calendar\".\n"
    "3. Small shows 1 month, Medium 2 months, Large 4 months in a grid.\n"
    "4. Drag it where you want it. This app can stay in the tray."
)


def create_tray(
    icon_image: Image.Image,
    title: str,
    on_exit: Callable[[], None],
) -> pystray.Icon:
    """Build and return a pystray Icon (not yet started)."""

    def show_help(icon: pystray.Icon, _item) -> None:
        icon.notify(ONBOARDING_TEXT, "Easy Calendar Widget")

    menu = Menu(
        MenuItem("How to add the widget", show_help, default=True),
        Menu.SEPARATOR,
        MenuItem("Exit", lambda _icon, _item: on_exit()),
    )
    return pystray.Icon("easy-calendar-widget", icon_image, title, menu)
