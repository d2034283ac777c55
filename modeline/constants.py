"""Constants and configuration defaults for the modeline engine."""


class ModelineConstants:
    """Central configuration constants for the modeline."""
    
    # Bar decoration
    BAR_WIDTH = 1  # Columns taken by the bar block
    BAR_HEIGHT = 1  # Rows the bar bitmap spans
    BAR_POSITION = "start"  # "start" or "end" of the line
    BAR_POSITIONS = ("start", "end")
    BAR_ACTIVE_COLOR = "blue"
    BAR_INACTIVE_COLOR = "bright_black"
    
    # Faces applied to styled segments (blessed formatter names)
    ACTIVE_FACE = "normal"
    INACTIVE_FACE = "bright_black"
    
    # Segment display
    BUFFER_FILE_NAME_STYLES = ("buffer-name", "file-name", "relative-to-project")
    DEFAULT_BUFFER_FILE_NAME_STYLE = "buffer-name"
    DEFAULT_ENCODING = "utf-8"
    DEFAULT_EOL = "LF"
    WORD_COUNT_MODES = ("text", "markdown", "org", "rst")
    
    # Presets
    DEFAULT_PRESET = "main"
    
    # Icons (plain-text fallbacks are used when icons are disabled)
    ICON_MODIFIED = "●"
    ICON_READ_ONLY = "🔒"
    ICON_SAVED = " "
    ICON_VC_BRANCH = "⎇"
    ICON_CHECKER_OK = "✔"
    ICON_CHECKER_ERROR = "✖"
    ICON_CHECKER_RUNNING = "…"
    
    TEXT_MODIFIED = "*"
    TEXT_READ_ONLY = "%"
    TEXT_SAVED = "-"
    
    # Demo
    DEMO_TICK_SECONDS = 1.0  # Redraw interval while waiting for input
    MIN_DEMO_WIDTH = 40  # Minimum terminal width for the demo layout
    TERMINAL_TOO_NARROW_MESSAGE = "Terminal too narrow! Need at least {} columns."
