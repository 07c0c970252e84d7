"""Runtime orchestration: app context, dispatch loop, terminal and watching."""

from .app import AppContext, build_app_context, run_app
from .config import Settings, load_settings, save_settings
from .loop import RuntimeLoopTiming, run_main_loop
from .terminal import TerminalController
from .watch import ChangeNotifier, directory_signature

__all__ = [
    "AppContext",
    "build_app_context",
    "run_app",
    "Settings",
    "load_settings",
    "save_settings",
    "RuntimeLoopTiming",
    "run_main_loop",
    "TerminalController",
    "ChangeNotifier",
    "directory_signature",
]
