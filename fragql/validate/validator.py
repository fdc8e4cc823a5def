"""Declaration-time template validation.

``TemplateValidator`` checks a compiled template against the method it is
attached to before any call is made, so a typo such as ``{tabelName}``
surfaces when the data-access method is declared rather than on its first
invocation.  Only root qualifiers can be checked statically; deeper path
segments depend on the runtime shape of the arguments.
"""
from __future__ import annotations

from fragql.errors import UnknownParameterError
from fragql.schema.invocation import MethodMetadata
from fragql.schema.template import CompiledTemplate


class TemplateValidator:
    """Validates a :class:`CompiledTemplate` against :class:`MethodMetadata`.

    Args:
        method: Metadata of the method the template belongs to.
    """

    def __init__(self, method: MethodMetadata) -> None:
        self._method = method

    def validate(self, template: CompiledTemplate) -> None:
        """Raise on the first placeholder whose root is not a parameter.

        Raises:
            UnknownParameterError: For the first unknown root qualifier.
        """
        for fragment in template.value_fragments:
            if not self._method.has_parameter(fragment.parameter_name):
                raise UnknownParameterError(
                    fragment.parameter_name,
                    fragment.expression,
                    parameters=self._method.parameter_names,
                )

    def unknown_parameters(self, template: CompiledTemplate) -> list[str]:
        """Return every unknown root qualifier, in order of appearance."""
        return [
            name for name in template.parameter_names if not self._method.has_parameter(name)
        ]
