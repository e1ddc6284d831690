"""Terminal surfaces: console prompter, rendering and clipboard.

The argparse router lives in ``gateway_installer.ui.cli`` and is imported
lazily by ``gateway_installer.main`` since it depends on every other package.
"""

from gateway_installer.ui.clipboard import copy_to_clipboard
from gateway_installer.ui.prompter import ConsoleIO, is_interactive_terminal
from gateway_installer.ui.render import CLIRenderer, create_renderer

__all__ = [
    "CLIRenderer",
    "ConsoleIO",
    "copy_to_clipboard",
    "create_renderer",
    "is_interactive_terminal",
]
