from .loop import FrameListener, LayoutLoop

__all__ = ["FrameListener", "LayoutLoop"]
