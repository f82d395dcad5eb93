from .png import read_rgba, write_rgba, to_bgra

__all__ = ["read_rgba", "write_rgba", "to_bgra"]
