"""Frame rendering for the tree pane, preview pane and status row.

Renderers are pure: they read a ``RenderContext`` snapshot and return text.
Writing the frame to the terminal is the runtime loop's job.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..file_tree_model import Node, Tree, TreeRow
from ..input.operation import Operation
from ..ui_theme import DEFAULT_THEME, UITheme
from .ansi import display_width, pad_ansi_line

HEADER_ROWS = 1
STATUS_ROWS = 1


@dataclass
class RenderContext:
    tree: Tree
    operation: Operation
    input_text: str
    width: int
    height: int
    tree_start: int = 0
    preview_lines: list[str] | None = None
    status_message: str = ""
    theme: UITheme = DEFAULT_THEME


def compute_left_width(total_width: int) -> int:
    """Return tree-pane width for a split layout of ``total_width`` columns."""
    if total_width <= 60:
        return max(16, total_width // 2)
    return max(20, min(48, total_width // 3))


def tree_view_rows(height: int) -> int:
    return max(1, height - HEADER_ROWS - STATUS_ROWS)


def selected_row_index(rows: list[TreeRow], current_dir: Node) -> int | None:
    """Return the index of the row holding ``current_dir``'s selected child."""
    selected = current_dir.selected_child()
    if selected is None:
        return None
    for idx, row in enumerate(rows):
        if row.depth == 0 and row.node is selected:
            return idx
    return None


def scroll_tree_start(selected: int | None, tree_start: int, visible_rows: int, total: int) -> int:
    """Adjust the first visible tree row so ``selected`` stays on screen."""
    if selected is not None:
        if selected < tree_start:
            tree_start = selected
        elif selected >= tree_start + visible_rows:
            tree_start = selected - visible_rows + 1
    return max(0, min(tree_start, max(0, total - visible_rows)))


def format_tree_row(row: TreeRow, theme: UITheme, marked: Node | None) -> str:
    node = row.node
    indent = "  " * row.depth
    if node.is_dir:
        marker = "▾ " if node.children is not None else "▸ "
        label = f"{theme.tree_dir}{node.name}/{theme.reset}"
    elif node.info.is_symlink:
        marker = "  "
        label = f"{theme.tree_symlink}{node.name}@{theme.reset}"
    else:
        marker = "  "
        label = f"{theme.tree_file}{node.name}{theme.reset}"
    if node is marked:
        label = f"{theme.tree_marked}* {node.name}{theme.reset}"
    return f"{indent}{marker}{label}"


def selected_with_ansi(text: str, theme: UITheme) -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not text:
        return text
    # Keep reverse video active even when the text contains internal resets.
    return theme.reverse + text.replace("\033[0m", "\033[0;7m") + theme.reset


def build_status_line(context: RenderContext) -> str:
    """Build the bottom row: error message, pending operation, or current path."""
    theme = context.theme
    if context.status_message:
        return f"{theme.status_error}{context.status_message}{theme.reset}"

    operation = context.operation
    marked = context.tree.marked
    if operation is Operation.NOOP:
        return str(context.tree.current_dir.path)

    label = f"{theme.status_label}{operation.label}{theme.reset}"
    if operation is Operation.RENAME:
        name = marked.name if marked is not None else ""
        return f"{label} {name} -> {theme.status_input}{context.input_text}_{theme.reset}"
    if operation.is_input:
        return f"{label} {theme.status_input}{context.input_text}_{theme.reset}"
    if operation in {Operation.COPY, Operation.MOVE, Operation.DELETE} and marked is not None:
        return f"{label} {marked.path}"
    return label


def build_tree_pane_lines(context: RenderContext, width: int) -> list[str]:
    """Return header plus visible tree rows, each padded to ``width``."""
    theme = context.theme
    tree = context.tree
    header = pad_ansi_line(f"{theme.tree_dir}{tree.current_dir.path}{theme.reset}", width)
    out = [header]

    rows = tree.visible_rows()
    visible = tree_view_rows(context.height)
    selected = selected_row_index(rows, tree.current_dir)
    if not rows:
        out.append(pad_ansi_line(f"{theme.tree_empty}(empty){theme.reset}", width))
    for idx in range(context.tree_start, min(len(rows), context.tree_start + visible)):
        text = format_tree_row(rows[idx], theme, tree.marked)
        if idx != selected:
            text = pad_ansi_line(text, width)
        elif theme.reverse:
            text = selected_with_ansi(pad_ansi_line(text, width), theme)
        else:
            text = pad_ansi_line("> " + text, width)
        out.append(text)
    while len(out) < HEADER_ROWS + visible:
        out.append(" " * width)
    return out


def build_frame_lines(context: RenderContext) -> list[str]:
    """Compose tree pane, optional preview pane and status row into screen rows."""
    width = max(1, context.width)
    theme = context.theme
    if context.preview_lines is None:
        left_width = width
    else:
        left_width = compute_left_width(width)
    right_width = max(0, width - left_width - 1)

    left = build_tree_pane_lines(context, left_width)
    lines: list[str] = []
    for row, left_text in enumerate(left):
        if context.preview_lines is None or right_width <= 0:
            lines.append(left_text)
            continue
        preview_idx = row - HEADER_ROWS
        right_text = ""
        if 0 <= preview_idx < len(context.preview_lines):
            right_text = context.preview_lines[preview_idx]
        divider = f"{theme.divider}│{theme.reset}"
        lines.append(left_text + divider + pad_ansi_line(right_text, right_width))

    status = build_status_line(context)
    lines.append(pad_ansi_line(status, width))
    return lines


def render_frame(context: RenderContext) -> str:
    """Return a full-screen frame: cursor home, rows, and clear-to-end."""
    lines = build_frame_lines(context)
    return "\033[H" + "\r\n".join(lines) + "\033[J"


__all__ = [
    "RenderContext",
    "build_frame_lines",
    "build_status_line",
    "build_tree_pane_lines",
    "compute_left_width",
    "display_width",
    "format_tree_row",
    "render_frame",
    "scroll_tree_start",
    "selected_row_index",
    "tree_view_rows",
]
