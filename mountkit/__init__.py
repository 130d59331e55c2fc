"""Read the mount table, detect mount points and handle mount option strings."""

__version__ = "0.1.0"
__all__ = ["errors", "flags", "info", "mounted"]