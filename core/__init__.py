"""
Editing engine: interaction state machine, session wiring and settings
"""

from .config import EditorSettings, setup_logging
from .interaction import InteractionController, Idle, Dragging, Connecting
from .session import EditorSession

__all__ = [
    'EditorSettings', 'setup_logging',
    'InteractionController', 'Idle', 'Dragging', 'Connecting',
    'EditorSession',
]
