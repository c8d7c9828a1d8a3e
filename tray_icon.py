"""System-tray icon setup via pystray."""

from typing import Callable

import pystray
from PIL import Image
from pystray import MenuItem, Menu

from activity_state import ActivityState
from icon_gen import create_icon_image


def tray_title(state: ActivityState) -> str:
    return (f"Learning Streak – {state.topic} "
            f"{state.days_completed}/{state.required_days}")


def create_tray(
    icon_image: Image.Image,
    title: str,
    on_show: Callable[[], None],
    on_exit: Callable[[], None],
    on_log: Callable[[], None] | None = None,
    on_history: Callable[[], None] | None = None,
) -> pystray.Icon:
    """Build and return a pystray Icon (not yet started)."""
    items: list[MenuItem | Menu] = [
        MenuItem("Show Tracker", lambda _icon, _item: on_show(), default=True),
    ]
    if on_log is not None:
        items.append(MenuItem("Log as Learned", lambda _icon, _item: on_log()))
    if on_history is not None:
        items.append(MenuItem("All Activities", lambda _icon, _item: on_history()))
    items.append(Menu.SEPARATOR)
    items.append(MenuItem("Exit", lambda _icon, _item: on_exit()))
    menu = Menu(*items)
    return pystray.Icon("learning-streak", icon_image, title, menu)


def refresh_tray(tray: pystray.Icon, state: ActivityState) -> None:
    """Redraw icon and tooltip from the current goal progress."""
    tray.icon = create_icon_image(state.days_completed, state.is_goal_complete())
    tray.title = tray_title(state)
