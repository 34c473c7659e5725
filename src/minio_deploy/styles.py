"""Custom styling for questionary prompts.

This module provides a consistent style for all interactive CLI prompts.
"""

from questionary import Style

# Custom color palette using ANSI 256 colors for broad terminal compatibility
PROMPT_STYLE = Style(
    [
        ("qmark", "fg:#af87ff bold"),  # Purple question mark
        ("question", "bold"),  # Bold question text
        ("answer", "fg:#ff87d7 bold"),  # Pink submitted answer
        ("pointer", "fg:#ff87d7 bold"),  # Pink pointer for selections
        ("highlighted", "fg:#1c1c1c bg:#ff87d7 bold"),  # Dark text on pink background
        ("instruction", "fg:#6c6c6c italic"),  # Gray italic instructions
        ("text", ""),  # Default text
    ]
)

# Icon prefix for prompts
QMARK = "? "
