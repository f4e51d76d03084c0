"""Operation handler base classes.

Every operation runs the same three phases:

1. Validate the parameter bag against the operation's descriptor.
   Failures raise ``OperationError`` and never reach the backend.
2. Resolve prerequisites (video operations only, see ``video.py``).
3. Invoke the backend once and shape the result. Backend failures are
   mapped to the operation's failure code.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from ..backend import BackendError, BackendInvoker, PatternResult
from ..protocol.errors import ErrorCode, OperationError
from .catalog import CATALOG, OperationDescriptor, ParameterSpec

logger = logging.getLogger(__name__)


def is_present(value: Any) -> bool:
    """Check that a parameter value was supplied and is not blank."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def compact(**values: Any) -> dict[str, Any]:
    """Build a backend parameter bag, omitting absent values."""
    return {key: value for key, value in values.items() if value is not None}


def _matches_type(spec: ParameterSpec, value: Any) -> bool:
    if spec.type == "string":
        return isinstance(value, str)
    if spec.type == "boolean":
        return isinstance(value, bool)
    if spec.type == "array":
        return isinstance(value, list) and all(isinstance(item, str) for item in value)
    return True


class OperationHandler:
    """Base class for operation handlers.

    Subclasses set ``name`` to their catalog entry and implement
    ``execute``. Handlers are stateless apart from their collaborators,
    so one instance serves every concurrent call.
    """

    name: ClassVar[str]

    def __init__(self, backend: BackendInvoker) -> None:
        self._backend = backend
        self.descriptor: OperationDescriptor = CATALOG[self.name]

    async def run(self, params: dict[str, Any]) -> dict[str, Any]:
        """Validate ``params`` and execute the operation.

        Returns:
            The operation-specific result payload.

        Raises:
            OperationError: Validation failed or the backend failed.
        """
        self.validate(params)
        return await self.execute(params)

    def validate(self, params: dict[str, Any]) -> None:
        """Check parameters against the descriptor."""
        descriptor = self.descriptor

        if descriptor.alternatives and not any(
            is_present(params.get(name)) for name in descriptor.alternatives
        ):
            raise self.invalid()

        for spec in descriptor.parameters:
            value = params.get(spec.name)
            if spec.required and not is_present(value):
                raise self.invalid()
            if value is None:
                continue

            primary = spec.required or spec.name in descriptor.alternatives
            if not _matches_type(spec, value):
                if primary:
                    raise self.invalid()
                raise OperationError(
                    ErrorCode.INVALID_REQUEST,
                    f"Parameter {spec.name} must be of type {spec.type}",
                )
            if spec.choices and value not in spec.choices:
                raise OperationError(
                    ErrorCode.INVALID_REQUEST,
                    f"Parameter {spec.name} must be one of: {', '.join(spec.choices)}",
                )

    async def execute(self, params: dict[str, Any]) -> dict[str, Any]:
        """Run the operation on validated parameters."""
        raise NotImplementedError

    def invalid(self) -> OperationError:
        """Build the validation error for this operation's primary input."""
        return OperationError(self.descriptor.invalid_code, self.descriptor.invalid_message)

    async def invoke(self, params: dict[str, Any]) -> PatternResult:
        """Call the backend once, mapping any failure to the failure code."""
        descriptor = self.descriptor
        try:
            return await self._backend.invoke(descriptor.pattern, params)
        except BackendError as e:
            logger.warning(f"Backend failed for {descriptor.name}: {e.message}")
            raise OperationError(
                descriptor.failure_code, f"{descriptor.failure_message}: {e.message}"
            ) from e
        except Exception as e:
            logger.exception(f"Backend raised for {descriptor.name}")
            raise OperationError(
                descriptor.failure_code, f"{descriptor.failure_message}: {e}"
            ) from e


class PatternOperation(OperationHandler):
    """An operation that forwards its input to a single pattern.

    Subclasses map request parameters to the backend parameter bag.
    """

    def backend_params(self, params: dict[str, Any]) -> dict[str, Any]:
        raise NotImplementedError

    async def execute(self, params: dict[str, Any]) -> dict[str, Any]:
        result = await self.invoke(self.backend_params(params))
        return {"patternResult": result.to_wire()}
