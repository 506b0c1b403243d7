from .place import Place
