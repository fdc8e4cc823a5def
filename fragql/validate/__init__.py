"""fragQL declaration-time validation."""
from fragql.validate.validator import TemplateValidator

__all__ = ["TemplateValidator"]
