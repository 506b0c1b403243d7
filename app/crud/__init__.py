from .place import place

__all__ = ["place"]
