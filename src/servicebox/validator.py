"""Schema validation capability built on jsonschema.

Schemas are plain JSON Schema (draft 7) dictionaries. A single
``SchemaCompiler`` is shared by every method and event in the process so
that the validator class, format checker and extension keywords are set up
once rather than per method.

Extension keywords are application metadata carried inside schemas (for
example ``kind`` or ``modifier`` emitted by schema builders). The compiler
registers them so they are tolerated, and optionally checked when a keyword
validator is supplied.
"""

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

from jsonschema import Draft7Validator, FormatChecker
from jsonschema.exceptions import ValidationError
from jsonschema.validators import extend

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION_KEYWORDS: tuple[str, ...] = ("kind", "modifier")

# jsonschema keyword validator signature: (validator, value, instance, schema)
KeywordValidator = Callable[[Any, Any, Any, dict[str, Any]], Iterator[ValidationError] | None]


def _tolerate(validator: Any, value: Any, instance: Any, schema: Any) -> None:
    return None


class Validator:
    """A compiled schema."""

    def __init__(self, schema: Mapping[str, Any] | bool, validator: Any):
        self.schema = schema
        self._validator = validator

    def valid(self, value: Any) -> bool:
        return self._validator.is_valid(value)

    def errors(self, value: Any) -> list[dict[str, Any]]:
        """Structured error detail for a value, empty when it is valid."""
        errors = sorted(self._validator.iter_errors(value), key=lambda e: list(e.path))
        return [
            {
                "path": "/" + "/".join(str(part) for part in error.path),
                "message": error.message,
                "keyword": error.validator,
            }
            for error in errors
        ]

    def validate(self, value: Any) -> tuple[bool, list[dict[str, Any]]]:
        if self.valid(value):
            return True, []
        return False, self.errors(value)


class SchemaCompiler:
    """Compiles JSON Schema documents into ``Validator`` instances."""

    def __init__(
        self,
        extension_keywords: Iterable[str] = DEFAULT_EXTENSION_KEYWORDS,
        keyword_validators: Mapping[str, KeywordValidator] | None = None,
        check_formats: bool = True,
    ):
        keywords: dict[str, KeywordValidator] = {
            keyword: _tolerate for keyword in extension_keywords
        }
        if keyword_validators:
            keywords.update(keyword_validators)
        self.extension_keywords = tuple(sorted(keywords))
        self._cls = extend(Draft7Validator, validators=keywords)
        self._format_checker = FormatChecker() if check_formats else None

    def compile(self, schema: Mapping[str, Any] | bool) -> Validator:
        """Compile a schema.

        Raises:
            jsonschema.SchemaError: If the schema itself is malformed.
        """
        self._cls.check_schema(schema)
        validator = self._cls(schema, format_checker=self._format_checker)
        return Validator(schema, validator)


_compiler: SchemaCompiler | None = None


def get_compiler() -> SchemaCompiler:
    """Process-wide compiler, created with defaults on first use."""
    global _compiler
    if _compiler is None:
        logger.debug("Creating default schema compiler")
        _compiler = SchemaCompiler()
    return _compiler


def configure_compiler(
    extension_keywords: Iterable[str] = DEFAULT_EXTENSION_KEYWORDS,
    check_formats: bool = True,
) -> SchemaCompiler:
    """Replace the process-wide compiler.

    Call before services are built; methods compile their schemas when they
    are created.
    """
    global _compiler
    _compiler = SchemaCompiler(
        extension_keywords=extension_keywords, check_formats=check_formats
    )
    return _compiler
