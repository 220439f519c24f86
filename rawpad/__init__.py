"""rawpad - a minimal terminal text editor."""

import logging

from .cursor import Bounds, ClampedValue, Cursor
from .editor import Editor
from .keyboard import Key, KeyDecoder, KeyType
from .model import TextBuffer
from .view import RenderPipeline, Viewport

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'Bounds',
    'ClampedValue',
    'Cursor',
    'Editor',
    'Key',
    'KeyDecoder',
    'KeyType',
    'RenderPipeline',
    'TextBuffer',
    'Viewport',
]
