"""Schema-typed remote methods."""

import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from servicebox.context import Context
from servicebox.exceptions import InternalErrorException, InvalidParamsException
from servicebox.middleware import Middleware
from servicebox.validator import SchemaCompiler, get_compiler

logger = logging.getLogger(__name__)

Schema = dict[str, Any] | bool

MethodCallback = Callable[..., Any | Awaitable[Any]]

UNEXPECTED_RETURN = "Method returned unexpected value"


@dataclass(frozen=True)
class Signature:
    """Positional parameter schemas and the return schema of a method."""

    params: Sequence[Schema] = field(default_factory=tuple)
    returns: Schema = True

    @classmethod
    def any(cls) -> "Signature":
        """No parameters, any return value."""
        return cls(params=(), returns=True)


class Method:
    """A remote procedure with validated arguments and return value.

    Validators are compiled once at construction; instances are read-only
    afterwards and shared by all concurrent requests.
    """

    def __init__(
        self,
        middleware: Sequence[Middleware],
        signature: Signature,
        callback: MethodCallback,
        compiler: SchemaCompiler | None = None,
    ):
        compiler = compiler or get_compiler()
        self.middleware = tuple(middleware)
        self.signature = signature
        self.callback = callback
        self._param_validators = tuple(compiler.compile(s) for s in signature.params)
        self._return_validator = compiler.compile(signature.returns)

    def _assert_arguments(self, args: Sequence[Any]) -> None:
        if len(args) != len(self._param_validators):
            raise InvalidParamsException(
                {"expected": len(self._param_validators), "received": len(args)}
            )
        for index, (validator, value) in enumerate(
            zip(self._param_validators, args, strict=True)
        ):
            valid, errors = validator.validate(value)
            if not valid:
                raise InvalidParamsException({"index": index, "errors": errors})

    def _assert_return(self, value: Any) -> None:
        if not self._return_validator.valid(value):
            logger.warning(
                "Method returned value not matching its schema",
                extra={"callback": getattr(self.callback, "__qualname__", None)},
            )
            raise InternalErrorException(UNEXPECTED_RETURN)

    async def execute(self, context: Context, *args: Any) -> Any:
        """Validate arguments, run the callback and validate its result."""
        self._assert_arguments(args)
        result = self.callback(context, *args)
        if inspect.isawaitable(result):
            result = await result
        self._assert_return(result)
        return result

    def describe(self) -> dict[str, Any]:
        return {"params": list(self.signature.params), "returns": self.signature.returns}

    def __repr__(self) -> str:
        name = getattr(self.callback, "__qualname__", repr(self.callback))
        return f"Method({name}, params={len(self._param_validators)})"
