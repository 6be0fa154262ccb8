"""env-swap: pick a preset environment variable value from a terminal list."""

__version__ = "0.1.0"

# Event loop
from env_swap.app import POLL_INTERVAL, run

# Configuration
from env_swap.config import (
    CONFIG_FILE_NAME,
    ConfigError,
    ConfigNotFoundError,
    Configuration,
    EnvValue,
    EnvVar,
    load_config,
)

# Input handling
from env_swap.handler import apply_action, handle_input

# Messages
from env_swap.i18n import Messages, load_messages

# Keybindings
from env_swap.keybindings import (
    DEFAULT_SELECTION_KEYBINDINGS,
    SelectionAction,
    SelectionKeybindingsManager,
    get_selection_keybindings,
    set_selection_keybindings,
)

# Keyboard input decoding
from env_swap.keys import KeyId, is_key_release, is_key_repeat, matches_key, parse_key

# Command output
from env_swap.output import generate_powershell_command

# Rendering
from env_swap.render import DefaultTheme, DrawModel, Rect, build_draw_model, centered_rect, draw_frame, render

# Selection state
from env_swap.state import Phase, SelectionState, ValueSelect, VariableSelect

# Terminal
from env_swap.terminal import ProcessTerminal, Terminal, TerminalError

__all__ = [
    "__version__",
    "POLL_INTERVAL",
    "run",
    "CONFIG_FILE_NAME",
    "ConfigError",
    "ConfigNotFoundError",
    "Configuration",
    "EnvValue",
    "EnvVar",
    "load_config",
    "apply_action",
    "handle_input",
    "Messages",
    "load_messages",
    "DEFAULT_SELECTION_KEYBINDINGS",
    "SelectionAction",
    "SelectionKeybindingsManager",
    "get_selection_keybindings",
    "set_selection_keybindings",
    "KeyId",
    "is_key_release",
    "is_key_repeat",
    "matches_key",
    "parse_key",
    "generate_powershell_command",
    "DefaultTheme",
    "DrawModel",
    "Rect",
    "build_draw_model",
    "centered_rect",
    "draw_frame",
    "render",
    "Phase",
    "SelectionState",
    "ValueSelect",
    "VariableSelect",
    "ProcessTerminal",
    "Terminal",
    "TerminalError",
]
