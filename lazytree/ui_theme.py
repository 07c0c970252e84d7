"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the tree pane and status row. Syntax
highlighting of the file preview uses a separate Pygments style.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    divider: str
    reverse: str
    reset: str
    tree_dir: str
    tree_file: str
    tree_symlink: str
    tree_marked: str
    tree_empty: str
    status_label: str
    status_input: str
    status_error: str
    pygments_style: str


DEFAULT_THEME = UITheme(
    name="default",
    divider="\033[2m",
    reverse="\033[7m",
    reset="\033[0m",
    tree_dir="\033[1;34m",
    tree_file="\033[38;5;252m",
    tree_symlink="\033[38;5;44m",
    tree_marked="\033[1;38;5;214m",
    tree_empty="\033[2;38;5;250m",
    status_label="\033[1;38;5;81m",
    status_input="\033[38;5;229m",
    status_error="\033[1;31m",
    pygments_style="monokai",
)

OCEAN_THEME = UITheme(
    name="ocean",
    divider="\033[2;38;5;31m",
    reverse="\033[7m",
    reset="\033[0m",
    tree_dir="\033[1;38;5;45m",
    tree_file="\033[38;5;252m",
    tree_symlink="\033[38;5;117m",
    tree_marked="\033[1;38;5;220m",
    tree_empty="\033[2;38;5;110m",
    status_label="\033[1;38;5;45m",
    status_input="\033[38;5;153m",
    status_error="\033[1;38;5;203m",
    pygments_style="native",
)

PLAIN_THEME = UITheme(
    name="plain",
    divider="",
    reverse="",
    reset="",
    tree_dir="",
    tree_file="",
    tree_symlink="",
    tree_marked="",
    tree_empty="",
    status_label="",
    status_input="",
    status_error="",
    pygments_style="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode.

    Unknown or empty names fall back to the default theme.
    """
    if no_color:
        return PLAIN_THEME
    candidate = str(name or "").strip().lower()
    return _THEMES.get(candidate, DEFAULT_THEME)


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "resolve_theme",
]
