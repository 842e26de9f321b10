"""wolfchat - a werewolf game engine for group chat rooms."""

__version__ = "0.1.0"
