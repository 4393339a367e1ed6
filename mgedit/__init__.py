"""Buffer, motion, directory-editor and C-mode machinery for an Emacs-style editor."""

__version__ = "0.1.0"