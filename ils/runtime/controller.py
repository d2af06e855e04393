"""Top-level browser state machine.

``BrowserController`` owns the selection, the active mode, the preview
pipeline and the undo log. The event loop feeds it one key token at a time
through ``handle_key``; a non-``None`` return is the exit intent that ends
the session. Terminal-facing effects (editor launch, input draining,
settings persistence, the exit file) arrive as injected callables.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

from ..browser.entries import LOCAL_FILESYSTEM, Entry, LocalFileSystem
from ..browser.layout import ScreenGeometry, clamp_preview_ratio, compute_geometry
from ..browser.modes import (
    HELP,
    NORMAL,
    PROMPT_CONFIRM_DELETE,
    PROMPT_NEW_DIR,
    PROMPT_NEW_FILE,
    PROMPT_RENAME,
    FuzzyFindMode,
    HelpMode,
    Mode,
    PromptMode,
)
from ..browser.selection import DOWN, LEFT, RIGHT, UP, SelectionModel
from ..colors import build_palette
from ..errors import DirectoryLoadError, FileOperationError
from ..fileops.operations import FileOperations
from ..fileops.undo import CopyAction, CreateAction, RenameAction, UndoAction, UndoLog, describe_action
from ..input.key_fuzzy import FuzzyKeyContext, enter_fuzzy_mode, handle_fuzzy_key
from ..input.key_normal import NormalKeyContext, NormalKeyHandler
from ..input.key_prompt import PromptKeyContext, handle_prompt_key
from ..input.reader import RESIZE_TOKEN
from ..preview.directory import entry_size, format_size
from ..preview.pipeline import PreviewContent, PreviewPipeline
from ..render import GridCell, RenderContext
from ..render.help import help_lines
from .config import LAYOUT_LIST, AppConfig, Settings
from .exit import EXIT_NONE, ExitIntent, ExitOpenInFileManager, ExitTarget
from .terminal import terminal_size as default_terminal_size

LOGGER = logging.getLogger(__name__)

LIST_INFO_NONE = "none"
LIST_INFO_SIZE = "size"
LIST_INFO_MODIFIED = "modified"
LIST_INFO_CYCLE = (LIST_INFO_NONE, LIST_INFO_SIZE, LIST_INFO_MODIFIED)
PREVIEW_RATIO_STEP = 0.1


def _noop(*_args) -> None:
    return None


def display_path(path: Path, home: Path | None, use_tilde: bool) -> str:
    text = str(path)
    if not use_tilde or home is None:
        return text
    home_text = str(home)
    if text == home_text:
        return "~"
    if text.startswith(home_text.rstrip(os.sep) + os.sep):
        return "~" + text[len(home_text.rstrip(os.sep)) :]
    return text


class BrowserController:
    """Interprets key tokens against the active mode and mutates browser state."""

    def __init__(
        self,
        config: AppConfig,
        start_dir: Path,
        *,
        filesystem: LocalFileSystem = LOCAL_FILESYSTEM,
        pipeline: PreviewPipeline | None = None,
        file_operations: FileOperations | None = None,
        terminal_size: Callable[[], tuple[int, int]] = default_terminal_size,
        launch_editor: Callable[[Path], str | None] = _noop,
        discard_pending_input: Callable[[], None] = _noop,
        save_settings: Callable[[Settings], None] = _noop,
        write_exit_target: Callable[[Path], None] = _noop,
        home_dir: Path | None = None,
        no_color: bool = False,
        show_help: bool = False,
        status_message: str | None = None,
    ) -> None:
        self.config = config
        self.settings = config.settings
        self.start_dir = start_dir
        self.selection = SelectionModel(start_dir, show_hidden=self.settings.show_hidden, filesystem=filesystem)
        self.pipeline = pipeline if pipeline is not None else PreviewPipeline(
            style=self.settings.syntax_style, no_color=no_color
        )
        self.file_operations = file_operations if file_operations is not None else FileOperations()
        self.undo_log = UndoLog(self.file_operations.mutator)
        self.terminal_size = terminal_size
        self.launch_editor = launch_editor
        self.discard_pending_input = discard_pending_input
        self.save_settings = save_settings
        self.write_exit_target = write_exit_target
        self.home_dir = home_dir if home_dir is not None else Path.home()
        self.palette = build_palette(config.colors, no_color)

        self.mode: Mode = HELP if show_help else NORMAL
        self.preview_visible = self.settings.preview_on_start
        self.list_mode = self.settings.layout == LAYOUT_LIST
        self.list_info = LIST_INFO_NONE
        self.status_message = status_message
        self.pending_exit: ExitIntent | None = None
        self.width, self.height = 80, 24
        self.geometry = ScreenGeometry(grid_rows=1, preview_rows=0)

        self._normal_handler = NormalKeyHandler(NormalKeyContext(config.keybindings, self._normal_actions()))
        self._fuzzy_context = FuzzyKeyContext(
            keybindings=config.keybindings,
            selection=self.selection,
            case_sensitive=self.settings.case_sensitive_search,
            open_selected=self.fuzzy_open_selected,
            go_back=self.go_back,
            go_home=self.go_home,
            activate_selected=self.edit_selected,
            quit=self.quit,
            quit_file_manager=self.quit_file_manager,
            discard_pending_input=self.discard_pending_input,
        )
        self._prompt_context = PromptKeyContext(commit=self.commit_prompt)

    def start(self) -> None:
        """Load the start directory; raises ``DirectoryLoadError`` on failure."""
        self.sync_viewport()
        self.selection.reload(self.start_dir)

    def _normal_actions(self) -> dict[str, Callable[[], bool | None]]:
        return {
            "up": lambda: self.move(UP),
            "down": lambda: self.move(DOWN),
            "left": lambda: self.move(LEFT),
            "right": lambda: self.move(RIGHT),
            "jump_up": lambda: self.move(UP, self.settings.jump_amount),
            "jump_down": lambda: self.move(DOWN, self.settings.jump_amount),
            "jump_left": lambda: self.move(LEFT, self.settings.jump_amount),
            "jump_right": lambda: self.move(RIGHT, self.settings.jump_amount),
            "open": self.open_selected,
            "back": self.go_back,
            "home": self.go_home,
            "edit": self.edit_selected,
            "quit": self.quit,
            "quit_cd": self.quit_cd,
            "quit_file_manager": self.quit_file_manager,
            "help": self.show_help,
            "preview_toggle": self.toggle_preview,
            "preview_up": lambda: self.scroll_preview(-1, page=False),
            "preview_down": lambda: self.scroll_preview(1, page=False),
            "preview_page_up": lambda: self.scroll_preview(-1, page=True),
            "preview_page_down": lambda: self.scroll_preview(1, page=True),
            "preview_height_decrease": lambda: self.adjust_preview_ratio(-PREVIEW_RATIO_STEP),
            "preview_height_increase": lambda: self.adjust_preview_ratio(PREVIEW_RATIO_STEP),
            "toggle_hidden": self.toggle_hidden,
            "toggle_layout": self.toggle_layout,
            "cycle_list_info": self.cycle_list_info,
            "sibling_next": lambda: self.sibling(1),
            "sibling_prev": lambda: self.sibling(-1),
            "fuzzy_find": lambda: self.begin_fuzzy(jump_on_unique=True),
            "fuzzy_find_stay": lambda: self.begin_fuzzy(jump_on_unique=False),
            "copy": self.copy_selected,
            "rename": lambda: self.begin_prompt(PROMPT_RENAME),
            "new_file": lambda: self.begin_prompt(PROMPT_NEW_FILE),
            "new_dir": lambda: self.begin_prompt(PROMPT_NEW_DIR),
            "trash": self.trash_selected,
            "delete": lambda: self.begin_prompt(PROMPT_CONFIRM_DELETE),
            "toggle_executable": self.toggle_executable,
            "undo": self.undo,
            "redo": self.redo,
        }

    # Event entry point

    def handle_key(self, key: str) -> ExitIntent | None:
        """Apply one key token; returns the exit intent once the session ends."""
        if key == RESIZE_TOKEN:
            self.sync_viewport()
            return None
        if not key:
            return None

        self.status_message = None
        mode = self.mode
        if isinstance(mode, HelpMode):
            self.mode = NORMAL
        elif isinstance(mode, FuzzyFindMode):
            self.mode = handle_fuzzy_key(key, mode, self._fuzzy_context)
        elif isinstance(mode, PromptMode):
            self.mode = handle_prompt_key(key, mode, self._prompt_context)
        else:
            self._normal_handler.handle(key)

        self.sync_viewport()
        intent, self.pending_exit = self.pending_exit, None
        return intent

    def sync_viewport(self) -> None:
        """Re-measure the terminal and re-derive geometry, layout and scroll."""
        self.width, self.height = self.terminal_size()
        self.geometry = compute_geometry(self.height, self.preview_visible, self.settings.preview_split_ratio)
        self.selection.set_viewport(self.width, self.geometry.grid_rows, self.list_mode)

    def has_pending_previews(self) -> bool:
        return self.pipeline.has_pending()

    # Navigation

    def move(self, direction: str, amount: int = 1) -> bool:
        return self.selection.move(direction, amount)

    def navigate(self, directory: Path) -> bool:
        """Reload into ``directory``; on failure keep everything and show why."""
        try:
            self.selection.reload(directory)
        except DirectoryLoadError as exc:
            self.status_message = exc.user_message
            return False
        return True

    def open_selected(self) -> None:
        entry = self.selection.selected_entry
        if entry is None:
            return
        if entry.is_dir:
            self.navigate(entry.path)
        else:
            self.pending_exit = ExitTarget(entry.path)

    def fuzzy_open_selected(self) -> None:
        """Auto-navigation target of a unique match: enter directories, keep files selected."""
        entry = self.selection.selected_entry
        if entry is not None and entry.is_dir:
            self.navigate(entry.path)

    def go_back(self) -> None:
        current = self.selection.current_dir
        parent = current.parent
        if parent == current:
            return
        if self.navigate(parent):
            self.selection.select_path(current)

    def go_home(self) -> None:
        self.navigate(self.home_dir)

    def sibling(self, step: int) -> None:
        try:
            self.selection.sibling(step)
        except DirectoryLoadError as exc:
            self.status_message = exc.user_message

    def edit_selected(self) -> None:
        """Edit a file in place; a directory (or an empty listing) ends the session there."""
        current = self.selection.current_dir
        entry = self.selection.selected_entry
        if entry is None:
            self.pending_exit = ExitTarget(current)
            return
        if not entry.is_file:
            self.pending_exit = ExitTarget(entry.path)
            return
        self.write_exit_target(current)
        error = self.launch_editor(entry.path)
        if error:
            self.status_message = error
        if self.settings.exit_after_edit:
            self.pending_exit = ExitTarget(current)

    def quit(self) -> None:
        self.pending_exit = EXIT_NONE

    def quit_cd(self) -> None:
        self.pending_exit = ExitTarget(self.selection.current_dir)

    def quit_file_manager(self) -> None:
        self.pending_exit = ExitOpenInFileManager(self.selection.current_dir)

    # View

    def show_help(self) -> None:
        self.mode = HELP

    def begin_fuzzy(self, jump_on_unique: bool = True) -> None:
        self.mode = enter_fuzzy_mode(self.selection, jump_on_unique)

    def toggle_preview(self) -> None:
        self.preview_visible = not self.preview_visible

    def scroll_preview(self, direction: int, page: bool) -> None:
        entry = self.selection.selected_entry
        if not self.preview_visible or entry is None:
            return
        visible = self.geometry.preview_rows
        amount = visible if page else self.settings.preview_scroll_amount
        self.pipeline.scroll(entry.path, direction * max(1, amount), visible)

    def adjust_preview_ratio(self, delta: float) -> None:
        if not self.preview_visible:
            return
        ratio = round(clamp_preview_ratio(self.settings.preview_split_ratio + delta), 2)
        if ratio == self.settings.preview_split_ratio:
            return
        self.settings = replace(self.settings, preview_split_ratio=ratio)
        self.save_settings(self.settings)

    def toggle_hidden(self) -> None:
        selection = self.selection
        selected = selection.selected_entry
        selection.show_hidden = not selection.show_hidden
        try:
            selection.reload()
        except DirectoryLoadError as exc:
            selection.show_hidden = not selection.show_hidden
            self.status_message = exc.user_message
            return
        if selected is not None:
            selection.select_path(selected.path)

    def toggle_layout(self) -> None:
        self.list_mode = not self.list_mode

    def cycle_list_info(self) -> None:
        index = LIST_INFO_CYCLE.index(self.list_info)
        self.list_info = LIST_INFO_CYCLE[(index + 1) % len(LIST_INFO_CYCLE)]
        if self.list_info != LIST_INFO_NONE and not self.list_mode:
            self.list_mode = True
        self.status_message = f"List info: {self.list_info}"

    # File operations

    def refresh(self, select: Path | None = None) -> None:
        """Reload the current directory after a mutation, keeping the cursor near."""
        previous_index = self.selection.selected
        try:
            self.selection.reload()
        except DirectoryLoadError as exc:
            self.status_message = exc.user_message
            return
        if select is not None and self.selection.select_path(select):
            return
        self.selection.select(previous_index)

    def _selected_or_none(self) -> Entry | None:
        entry = self.selection.selected_entry
        if entry is None:
            self.status_message = "Nothing selected."
        return entry

    def copy_selected(self) -> None:
        entry = self._selected_or_none()
        if entry is None:
            return
        try:
            action = self.file_operations.copy(entry.path)
        except FileOperationError as exc:
            self.status_message = exc.message
            return
        self.undo_log.record(action)
        self.refresh(select=action.dest)
        self.status_message = f"Copied to {action.dest.name}"

    def trash_selected(self) -> None:
        entry = self._selected_or_none()
        if entry is None:
            return
        try:
            self.file_operations.trash(entry.path)
        except FileOperationError as exc:
            self.status_message = exc.message
            return
        self.refresh()
        self.status_message = f"Moved {entry.name} to trash"

    def toggle_executable(self) -> None:
        entry = self._selected_or_none()
        if entry is None:
            return
        try:
            executable = self.file_operations.toggle_executable(entry.path)
        except FileOperationError as exc:
            self.status_message = exc.message
            return
        state = "now" if executable else "no longer"
        self.status_message = f"{entry.name} is {state} executable"

    def begin_prompt(self, action: str) -> None:
        if action in {PROMPT_NEW_FILE, PROMPT_NEW_DIR}:
            self.mode = PromptMode(action=action, target=self.selection.current_dir)
            return
        entry = self._selected_or_none()
        if entry is None:
            return
        text = entry.name if action == PROMPT_RENAME else ""
        self.mode = PromptMode(action=action, text=text, target=entry.path)

    def commit_prompt(self, prompt: PromptMode) -> None:
        target = prompt.target if prompt.target is not None else self.selection.current_dir
        try:
            if prompt.action == PROMPT_RENAME:
                action: UndoAction = self.file_operations.rename(target, prompt.text)
                self.undo_log.record(action)
                self.refresh(select=action.new)
                self.status_message = f"Renamed to {action.new.name}"
            elif prompt.action in {PROMPT_NEW_FILE, PROMPT_NEW_DIR}:
                action = self.file_operations.create(target, prompt.text, prompt.action == PROMPT_NEW_DIR)
                self.undo_log.record(action)
                self.refresh(select=action.path)
                self.status_message = f"Created {action.path.name}"
            elif prompt.action == PROMPT_CONFIRM_DELETE:
                self.file_operations.delete(target)
                self.refresh()
                self.status_message = f"Deleted {target.name}"
        except FileOperationError as exc:
            self.status_message = exc.message

    def _reselect_after(self, action: UndoAction, undone: bool) -> Path | None:
        if isinstance(action, RenameAction):
            return action.old if undone else action.new
        if isinstance(action, CopyAction):
            return action.src if undone else action.dest
        if isinstance(action, CreateAction) and not undone:
            return action.path
        return None

    def undo(self) -> None:
        if not self.undo_log.can_undo:
            self.status_message = "Nothing to undo."
            return
        action = self.undo_log.undo()
        if action is None:
            self.status_message = "Undo failed; the change was dropped from history."
            self.refresh()
            return
        self.refresh(select=self._reselect_after(action, undone=True))
        self.status_message = f"Undid {describe_action(action)}"

    def redo(self) -> None:
        if not self.undo_log.can_redo:
            self.status_message = "Nothing to redo."
            return
        action = self.undo_log.redo()
        if action is None:
            self.status_message = "Redo failed; the change was dropped from history."
            self.refresh()
            return
        self.refresh(select=self._reselect_after(action, undone=False))
        self.status_message = f"Redid {describe_action(action)}"

    # Rendering snapshot

    def _cell_info(self, entry: Entry) -> str:
        if not self.list_mode or self.list_info == LIST_INFO_NONE:
            return ""
        if self.list_info == LIST_INFO_SIZE:
            size = entry_size(entry.path)
            return "?" if size is None else format_size(size)
        try:
            mtime = entry.path.stat().st_mtime
        except OSError:
            return "?"
        return time.strftime("%Y-%m-%d %H:%M", time.localtime(mtime))

    def _footer(self) -> tuple[str, bool]:
        mode = self.mode
        if isinstance(mode, PromptMode):
            return f"{mode.label}: {mode.text}_", False
        if isinstance(mode, FuzzyFindMode):
            return f"Find: {mode.query}_", False
        if self.status_message:
            return self.status_message, True
        entry = self.selection.selected_entry
        if self.preview_visible and entry is not None:
            return entry.name, False
        return f"{len(self.selection.entries)} items", False

    def render_context(self) -> RenderContext:
        selection = self.selection
        cols = selection.num_cols
        start = selection.scroll_offset * cols
        end = start + self.geometry.grid_rows * cols
        cells = [
            GridCell(index=index, name=entry.name, is_dir=entry.is_dir, info=self._cell_info(entry))
            for index, entry in enumerate(selection.entries[start:end], start)
        ]

        preview: PreviewContent | None = None
        if self.preview_visible and self.geometry.preview_rows > 0:
            entry = selection.selected_entry
            if entry is None:
                preview = PreviewContent.placeholder("(empty directory)")
            else:
                preview = self.pipeline.render(entry.path, self.geometry.preview_rows, show_hidden=selection.show_hidden)

        footer, is_status = self._footer()
        mode = self.mode
        return RenderContext(
            width=self.width,
            height=self.height,
            geometry=self.geometry,
            header=display_path(selection.current_dir, self.home_dir, self.settings.show_tilde_for_home),
            cells=cells,
            num_cols=cols,
            selected=selection.selected,
            palette=self.palette,
            list_mode=self.list_mode,
            show_dir_slash=self.settings.show_dir_slash,
            match_query=mode.query if isinstance(mode, FuzzyFindMode) else "",
            case_sensitive=self.settings.case_sensitive_search,
            preview=preview,
            footer=footer,
            footer_is_status=is_status,
            show_help=isinstance(mode, HelpMode),
            help_lines=help_lines(self.config.keybindings) if isinstance(mode, HelpMode) else [],
        )
