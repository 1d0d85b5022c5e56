from .payfast import bp as payfast_bp

__all__ = ["payfast_bp"]
