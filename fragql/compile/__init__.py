"""fragQL compilation layer: template text → fragments → bound SQL."""
from fragql.compile.assembler import Binding, BoundStatement, StatementAssembler
from fragql.compile.cache import TemplateCache
from fragql.compile.parser import TemplateParser, compile_template
from fragql.compile.registry import PlaceholderStyle, PlaceholderStyleRegistry

__all__ = [
    "Binding",
    "BoundStatement",
    "StatementAssembler",
    "TemplateCache",
    "TemplateParser",
    "compile_template",
    "PlaceholderStyle",
    "PlaceholderStyleRegistry",
]
