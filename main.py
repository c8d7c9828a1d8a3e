"""Entry point: glues pystray (daemon thread) with tkinter (main thread)."""

import threading

from loguru import logger

from activity_state import ActivityState, OverwritePolicy
from goal_policy import Duration
from icon_gen import create_icon_image
from log_config import setup_logger
from settings import load_settings
from tracker_window import TrackerWindow
from tray_icon import create_tray, refresh_tray, tray_title


def main() -> None:
    settings = load_settings()
    setup_logger(level=settings["log_level"], log_file=settings["log_file"])

    state = ActivityState(
        duration=Duration.parse(settings["default_duration"]),
        topic=settings["default_topic"],
        first_weekday=settings["first_weekday"],
        overwrite_policy=OverwritePolicy(settings["overwrite_policy"]),
    )
    win = TrackerWindow(state)

    # Callbacks marshalled onto the tkinter main thread
    def on_show() -> None:
        win.root.after(0, win.toggle)

    def on_log() -> None:
        win.root.after(0, win.log_today)

    def on_history() -> None:
        win.root.after(0, win.open_history)

    def on_exit() -> None:
        def _quit() -> None:
            tray.stop()
            win.root.destroy()
        win.root.after(0, _quit)

    tray = create_tray(
        create_icon_image(state.days_completed), tray_title(state),
        on_show, on_exit, on_log=on_log, on_history=on_history,
    )
    state.subscribe(lambda s: refresh_tray(tray, s))

    # Run pystray in a daemon thread so it doesn't block tkinter
    tray_thread = threading.Thread(target=tray.run, daemon=True)
    tray_thread.start()

    logger.info("Learning tracker started")
    win.show()
    # tkinter main loop on the main thread
    win.root.mainloop()


if __name__ == "__main__":
    main()
