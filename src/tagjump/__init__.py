"""Jump-to-definition for C/C++ sources backed by a ctags index."""

__version__ = "0.1.0"
