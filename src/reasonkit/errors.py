"""Exception hierarchy for reasonkit modules.

Every failure a module can produce is one of these types (or an adapter
exception propagated unchanged), so callers can tell apart bad input, a
delegate that broke its output contract, and unsupported operations.
"""

from typing import Any


class ReasonkitError(Exception):
    """Base exception for all reasonkit errors."""

    pass


class SignatureError(ReasonkitError):
    """Exception raised when a signature definition is malformed."""

    pass


class InputValidationError(ReasonkitError):
    """Exception raised when module inputs do not satisfy the signature."""

    def __init__(
        self,
        signature_name: str,
        missing: list[str] | None = None,
        reason: str | None = None,
    ):
        """Initialize with the offending signature and missing fields.

        Args:
            signature_name: Name of the signature that rejected the inputs
            missing: Required input fields that were absent
            reason: Free-form reason when the failure is not about missing fields
        """
        self.signature_name = signature_name
        self.missing = list(missing or [])
        self.reason = reason

        if self.missing:
            detail = f"missing required input fields: {', '.join(self.missing)}"
        else:
            detail = reason or "invalid inputs"
        super().__init__(f"Invalid inputs for signature '{signature_name}': {detail}")


class InvalidStepOutputsError(ReasonkitError):
    """Exception raised when a step prediction lacks the decision fields."""

    def __init__(self, outputs: dict[str, Any], missing: list[str]):
        """Initialize with the delegate's outputs.

        Args:
            outputs: Fields actually returned by the step predictor
            missing: Decision fields that were absent
        """
        self.outputs = dict(outputs)
        self.missing = list(missing)
        super().__init__(
            f"Invalid step outputs: missing {', '.join(self.missing)} "
            f"(got {sorted(self.outputs)})"
        )


class UnsupportedParametersError(ReasonkitError):
    """Exception raised when exporting/applying parameters on a module without them."""

    def __init__(self, module: Any):
        self.module = module
        super().__init__(
            f"Module {type(module).__name__} does not support parameter export/apply"
        )


class ToolConfigurationError(ReasonkitError):
    """Exception raised when a tool table cannot be built from the given tools."""

    pass
