from .diagram_generator import DiagramGenerator

__all__ = [
    "DiagramGenerator",
]
