from .shape import IExampleShape, IShape

__all__ = ["IExampleShape", "IShape"]
