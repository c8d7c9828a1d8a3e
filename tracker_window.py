"""Tracker windows (tkinter): goal setup, weekly activity and history calendar."""

from datetime import date
from tkinter import font as tkfont
import tkinter as tk

from loguru import logger

from activity_state import ActivityState, ActivityStatus
from calendar_logic import (
    day_of_month,
    month_grid,
    month_title,
    next_month,
    prev_month,
    week_numbers,
    weekday_abbreviation,
    weekday_headers,
)
from goal_policy import Duration, freeze_allowance
from settings import load_settings, save_settings

# Colours
ACCENT = "#FF9230"
LOGGED_BG = "#FFC58F"
FREEZED_BG = "#8FE3F0"
FREEZE_BTN = "#2BC8E0"
HEADER_BG = "#F3F3F3"
GRID_BG = "white"
MUTED_FG = "#888888"

_MAIN_LABELS = {
    ActivityStatus.DEFAULT: ("Log as Learned", ACCENT),
    ActivityStatus.LOGGED: ("Learned Today", LOGGED_BG),
    ActivityStatus.FREEZED: ("Day Freezed", FREEZED_BG),
}


class _MonthPanel:
    """Pre-allocated widget pool for a single month (header + 6 weeks)."""

    __slots__ = ("frame", "header", "day_headers", "week_nums", "day_cells")

    def __init__(self, parent: tk.Misc, fonts: dict, headers: list[str],
                 on_click) -> None:
        self.frame = tk.Frame(parent, bg=GRID_BG)

        self.header = tk.Label(
            self.frame, font=fonts["header"], bg=HEADER_BG, fg="#333333",
        )
        self.header.grid(row=0, column=0, columnspan=8, sticky="we", pady=(0, 2))

        tk.Label(
            self.frame, text="Wk", font=fonts["bold"], bg=GRID_BG, fg=MUTED_FG, width=3,
        ).grid(row=1, column=0)

        self.day_headers: list[tk.Label] = []
        for col, abbr in enumerate(headers):
            lbl = tk.Label(
                self.frame, text=abbr, font=fonts["bold"], bg=GRID_BG, fg="#333333", width=3,
            )
            lbl.grid(row=1, column=col + 1)
            self.day_headers.append(lbl)

        self.week_nums: list[tk.Label] = []
        self.day_cells: list[list[tk.Label]] = []
        for r in range(6):
            grid_row = r + 2
            wn = tk.Label(self.frame, font=fonts["wn"], bg=GRID_BG, fg=MUTED_FG, width=3)
            wn.grid(row=grid_row, column=0)
            self.week_nums.append(wn)

            row_cells: list[tk.Label] = []
            for c in range(7):
                cell = tk.Label(self.frame, font=fonts["normal"], bg=GRID_BG, width=3)
                cell.grid(row=grid_row, column=c + 1, padx=1, pady=1)
                cell.bind("<Button-1>", on_click)
                row_cells.append(cell)
            self.day_cells.append(row_cells)


class TrackerWindow:
    """Main tracker window plus the lazily created history window."""

    def __init__(self, state: ActivityState) -> None:
        self.state = state
        self.root = tk.Tk()
        self.root.title("Learning")
        self.root.configure(bg=GRID_BG)

        self._setup_fonts()

        settings = load_settings()
        self.history_months: int = settings["history_months"]
        self.history_months_before: int = settings["history_months_before"]
        self._saved_width: int | None = settings["window_width"]
        self._saved_height: int | None = settings["window_height"]

        self._topic_var = tk.StringVar(value=state.topic)
        self._duration_choice: Duration = state.duration
        self._duration_buttons: dict[Duration, tk.Label] = {}
        self._goal_error: tk.Label | None = None
        self._on_activity = False

        # History window state (filled in open_history)
        self._history: tk.Toplevel | None = None
        self._panels: list[_MonthPanel] = []
        self._widget_dates: dict[int, date] = {}

        self._goal_frame = self._build_goal_view()
        self._activity_frame = self._build_activity_view()
        self._show_goal_view()

        state.subscribe(self._on_state_change)

        self.root.protocol("WM_DELETE_WINDOW", self.hide)
        self.root.withdraw()

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------
    def _setup_fonts(self) -> None:
        base = "TkDefaultFont"
        self.font_normal = tkfont.Font(family=base, size=10)
        self.font_bold = tkfont.Font(family=base, size=10, weight="bold")
        self.font_header = tkfont.Font(family=base, size=11, weight="bold")
        self.font_title = tkfont.Font(family=base, size=16, weight="bold")
        self.font_big = tkfont.Font(family=base, size=22, weight="bold")
        self.font_wn = tkfont.Font(family=base, size=8)

    # ------------------------------------------------------------------
    # Goal setup view
    # ------------------------------------------------------------------
    def _build_goal_view(self) -> tk.Frame:
        frame = tk.Frame(self.root, bg=GRID_BG, padx=24, pady=16)

        tk.Label(frame, text="Hello Learner", font=self.font_title,
                 bg=GRID_BG).pack(anchor="w")
        tk.Label(frame, text="This app will help you learn everyday!",
                 font=self.font_normal, bg=GRID_BG, fg=MUTED_FG).pack(anchor="w", pady=(0, 16))

        tk.Label(frame, text="I want to learn", font=self.font_normal,
                 bg=GRID_BG).pack(anchor="w")
        tk.Entry(frame, textvariable=self._topic_var, font=self.font_normal,
                 width=30).pack(anchor="w", pady=(2, 16))

        tk.Label(frame, text="I want to learn it in a", font=self.font_normal,
                 bg=GRID_BG).pack(anchor="w")
        row = tk.Frame(frame, bg=GRID_BG)
        row.pack(anchor="w", pady=(4, 16))
        for duration in Duration:
            btn = tk.Label(row, text=duration.value, font=self.font_bold,
                           padx=14, pady=6, cursor="hand2")
            btn.pack(side="left", padx=(0, 8))
            btn.bind("<Button-1>", lambda _e, d=duration: self._choose_duration(d))
            self._duration_buttons[duration] = btn
        self._paint_duration_buttons()

        self._goal_error = tk.Label(frame, text="", font=self.font_normal,
                                    bg=GRID_BG, fg="#CC0000")
        self._goal_error.pack(anchor="w")

        tk.Button(frame, text="Start learning", font=self.font_bold, bg=ACCENT,
                  fg="white", width=20, command=self._start_goal).pack(pady=(8, 0))
        return frame

    def _choose_duration(self, duration: Duration) -> None:
        self._duration_choice = duration
        self._paint_duration_buttons()

    def _paint_duration_buttons(self) -> None:
        for duration, btn in self._duration_buttons.items():
            selected = duration == self._duration_choice
            btn.configure(bg=ACCENT if selected else HEADER_BG,
                          fg="white" if selected else "#333333")

    def _start_goal(self) -> None:
        try:
            self.state.start_goal(self._topic_var.get(), self._duration_choice)
        except ValueError as exc:
            self._goal_error.configure(text=str(exc))
            return
        self._goal_error.configure(text="")
        self._show_activity_view()

    def _show_goal_view(self) -> None:
        self._topic_var.set(self.state.topic)
        self._duration_choice = self.state.duration
        self._paint_duration_buttons()
        self._on_activity = False
        self._activity_frame.pack_forget()
        self._goal_frame.pack(fill="both", expand=True)
        self.root.title("Learning Goal")

    # ------------------------------------------------------------------
    # Activity view
    # ------------------------------------------------------------------
    def _build_activity_view(self) -> tk.Frame:
        frame = tk.Frame(self.root, bg=GRID_BG, padx=16, pady=12)

        # Navigation row: Month Year   Go [date]  Today  ◀  ▶
        nav = tk.Frame(frame, bg=GRID_BG)
        nav.pack(fill="x")
        self._month_label = tk.Label(nav, font=self.font_header, bg=GRID_BG)
        self._month_label.pack(side="left")
        for text, action in (("▶", lambda: self.state.navigate_week(1)),
                             ("◀", lambda: self.state.navigate_week(-1)),
                             ("Today", self.state.go_today)):
            btn = tk.Label(nav, text=text, font=self.font_bold, bg=GRID_BG,
                           fg=ACCENT, cursor="hand2")
            btn.pack(side="right", padx=6)
            btn.bind("<Button-1>", lambda _e, a=action: a())

        # Jump to any date: YYYY-MM-DD
        self._jump_var = tk.StringVar()
        jump_entry = tk.Entry(nav, textvariable=self._jump_var, font=self.font_normal, width=11)
        jump_entry.pack(side="right", padx=(6, 0))
        jump_entry.bind("<Return>", lambda _e: self._jump_to_entered_date())
        go = tk.Label(nav, text="Go", font=self.font_bold, bg=GRID_BG, fg=ACCENT, cursor="hand2")
        go.pack(side="right")
        go.bind("<Button-1>", lambda _e: self._jump_to_entered_date())
        self._jump_error = tk.Label(frame, text="", font=self.font_normal,
                                    bg=GRID_BG, fg="#CC0000")
        self._jump_error.pack(anchor="w")

        # Week strip
        week = tk.Frame(frame, bg=GRID_BG)
        week.pack(fill="x", pady=8)
        self._week_abbr: list[tk.Label] = []
        self._week_days: list[tk.Label] = []
        for col in range(7):
            abbr = tk.Label(week, font=self.font_wn, bg=GRID_BG, fg=MUTED_FG)
            abbr.grid(row=0, column=col, padx=4)
            num = tk.Label(week, font=self.font_header, bg=GRID_BG, width=3,
                           pady=6, cursor="hand2")
            num.grid(row=1, column=col, padx=4)
            num.bind("<Button-1>", lambda _e, c=col: self.state.select_day(
                self.state.visible_week()[c]))
            self._week_abbr.append(abbr)
            self._week_days.append(num)

        self._topic_label = tk.Label(frame, font=self.font_header, bg=GRID_BG)
        self._topic_label.pack(anchor="w")

        summary = tk.Frame(frame, bg=GRID_BG)
        summary.pack(fill="x", pady=8)
        self._learned_label = tk.Label(summary, font=self.font_bold, bg=LOGGED_BG,
                                       padx=12, pady=6)
        self._learned_label.pack(side="left", expand=True, fill="x", padx=(0, 4))
        self._freezed_label = tk.Label(summary, font=self.font_bold, bg=FREEZED_BG,
                                       padx=12, pady=6)
        self._freezed_label.pack(side="left", expand=True, fill="x", padx=(4, 0))

        self._main_button = tk.Button(frame, font=self.font_big, width=14, height=3,
                                      fg="white", command=self._log_learned)
        self._main_button.pack(pady=8)
        self._freeze_button = tk.Button(frame, text="Log as Freezed", font=self.font_bold,
                                        bg=FREEZE_BTN, fg="white",
                                        command=self.state.log_freezed)
        self._freeze_button.pack()
        self._freeze_usage = tk.Label(frame, font=self.font_normal, bg=GRID_BG, fg=MUTED_FG)
        self._freeze_usage.pack(pady=(4, 0))
        self._goal_status = tk.Label(frame, font=self.font_bold, bg=GRID_BG, fg="#34C759")
        self._goal_status.pack(pady=(4, 0))

        footer = tk.Frame(frame, bg=GRID_BG)
        footer.pack(fill="x", pady=(8, 0))
        tk.Button(footer, text="All Activities", command=self.open_history).pack(side="left")
        tk.Button(footer, text="Edit Goal", command=self._show_goal_view).pack(side="right")
        return frame

    def _jump_to_entered_date(self) -> None:
        try:
            day = date.fromisoformat(self._jump_var.get().strip())
        except ValueError:
            self._jump_error.configure(text="Enter a date as YYYY-MM-DD")
            return
        self._jump_error.configure(text="")
        self._jump_var.set("")
        self.state.jump_to_day(day)

    def _show_activity_view(self) -> None:
        self._on_activity = True
        self._goal_frame.pack_forget()
        self._activity_frame.pack(fill="both", expand=True)
        self.root.title("Activity")
        self._refresh_activity()

    def _refresh_activity(self) -> None:
        state = self.state
        self._month_label.configure(
            text=month_title(state.week_cursor.year, state.week_cursor.month))

        today = state.today()
        for col, d in enumerate(state.visible_week()):
            status = state.status_of(d)
            if d == state.selected_day:
                bg, fg = ACCENT, "white"
            elif status == ActivityStatus.LOGGED:
                bg, fg = LOGGED_BG, "black"
            elif status == ActivityStatus.FREEZED:
                bg, fg = FREEZED_BG, "black"
            else:
                bg, fg = GRID_BG, ACCENT if d == today else "black"
            self._week_abbr[col].configure(text=weekday_abbreviation(d))
            self._week_days[col].configure(text=str(day_of_month(d)), bg=bg, fg=fg)

        self._topic_label.configure(text=state.topic)
        self._learned_label.configure(text=f"{state.aggregate_logged_count()}  Days Learned")
        self._freezed_label.configure(text=f"{state.aggregate_freezed_count()}  Days Freezed")

        text, bg = _MAIN_LABELS[state.current_status()]
        self._main_button.configure(text=text, bg=bg)
        self._freeze_button.configure(state="normal" if state.can_freeze() else "disabled")
        self._freeze_usage.configure(
            text=f"{state.goal_freeze_count} out of {freeze_allowance(state.duration)} "
                 f"Freezes used")
        if state.is_goal_complete():
            self._goal_status.configure(
                text=f"Well done! Goal completed: {state.days_completed}/{state.required_days} days")
        else:
            self._goal_status.configure(
                text=f"{state.days_completed}/{state.required_days} days toward your goal")

    # ------------------------------------------------------------------
    # History window (all activities)
    # ------------------------------------------------------------------
    def open_history(self) -> None:
        if self._history is not None and self._history.winfo_exists():
            self._history.lift()
            self._rebuild_history()
            return

        self._history = tk.Toplevel(self.root)
        self._history.title("All Activities")
        self._history.configure(bg=GRID_BG)
        self._panels = []
        fonts = {"header": self.font_header, "bold": self.font_bold,
                 "normal": self.font_normal, "wn": self.font_wn}
        headers = weekday_headers(self.state.first_weekday)
        body = tk.Frame(self._history, bg=GRID_BG)
        body.pack(padx=6, pady=4)
        for _ in range(self.history_months_before + 1 + self.history_months):
            self._panels.append(_MonthPanel(body, fonts, headers, self._on_cell_click))
        self._rebuild_history()

    def _rebuild_history(self) -> None:
        self._widget_dates.clear()
        today = self.state.today()
        y, m = today.year, today.month
        for _ in range(self.history_months_before):
            y, m = prev_month(y, m)
        for i, panel in enumerate(self._panels):
            panel.frame.grid(row=i // 3, column=i % 3, padx=6, pady=2, sticky="n")
            self._fill_panel(panel, y, m, today)
            y, m = next_month(y, m)

    def _fill_panel(self, panel: _MonthPanel, year: int, month: int, today: date) -> None:
        """Reconfigure an existing panel's labels without creating widgets."""
        panel.header.configure(text=month_title(year, month))
        first_weekday = self.state.first_weekday
        weeks = week_numbers(year, month, first_weekday)

        for r, row_days in enumerate(month_grid(year, month, first_weekday)):
            panel.week_nums[r].configure(text=weeks[r])
            for c, d in enumerate(row_days):
                cell = panel.day_cells[r][c]
                if d is None:
                    cell.configure(text="", bg=GRID_BG, cursor="")
                    continue
                bg, fg = self._history_colors(self.state.status_of(d), d == today)
                cell.configure(
                    text=str(d.day), bg=bg, fg=fg, cursor="hand2",
                    font=self.font_bold if d == today else self.font_normal,
                )
                self._widget_dates[id(cell)] = d

    @staticmethod
    def _history_colors(status: ActivityStatus, is_today: bool) -> tuple[str, str]:
        if status == ActivityStatus.LOGGED:
            return LOGGED_BG, "black"
        if status == ActivityStatus.FREEZED:
            return FREEZED_BG, "black"
        if is_today:
            return ACCENT, "white"
        return GRID_BG, "black"

    def _on_cell_click(self, event: tk.Event) -> None:
        d = self._widget_dates.get(id(event.widget))
        if d:
            self.state.jump_to_day(d)
            self._show_activity_view()
            self.show()

    # ------------------------------------------------------------------
    # State change -> re-render
    # ------------------------------------------------------------------
    def _on_state_change(self, _state: ActivityState) -> None:
        if self._on_activity:
            self._refresh_activity()
        if self._history is not None and self._history.winfo_exists():
            self._rebuild_history()

    # ------------------------------------------------------------------
    # Persist window size
    # ------------------------------------------------------------------
    def _persist_size(self) -> None:
        settings = load_settings()
        settings["window_width"] = self._saved_width
        settings["window_height"] = self._saved_height
        try:
            save_settings(settings)
        except OSError as exc:
            logger.warning(f"Could not save window size: {exc}")

    # ------------------------------------------------------------------
    # Show / Hide / Toggle
    # ------------------------------------------------------------------
    def toggle(self) -> None:
        if self.root.state() == "withdrawn" or not self.root.winfo_viewable():
            self.show()
        else:
            self.hide()

    def show(self) -> None:
        if self._saved_width is not None and self._saved_height is not None:
            self.root.geometry(f"{self._saved_width}x{self._saved_height}")
        self.root.deiconify()
        self.root.lift()
        self.root.focus_force()

    def hide(self) -> None:
        if self.root.winfo_viewable():
            self._saved_width = self.root.winfo_width()
            self._saved_height = self.root.winfo_height()
            self._persist_size()
        self.root.withdraw()

    def _log_learned(self) -> None:
        if self.state.current_status() != ActivityStatus.LOGGED:
            self.state.log_learned()

    def log_today(self) -> None:
        """Tray shortcut: log today as learned."""
        self.state.go_today()
        self._log_learned()
