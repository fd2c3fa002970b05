from .service import BlackoutValidator

__all__ = ["BlackoutValidator"]
