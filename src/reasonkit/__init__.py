"""reasonkit - composable reasoning modules for language-model programs.

Signatures describe a task's inputs and outputs; modules (Predict,
ChainOfThought, ReAct) turn inputs into predictions through a pluggable
adapter.
"""

__version__ = "0.1.0"

from reasonkit.config import Settings, get_settings, reload_settings
from reasonkit.modules import ChainOfThought, Module, Predict, compose, parallel
from reasonkit.prediction import Example, Prediction
from reasonkit.react import ReAct
from reasonkit.signature import InputField, OutputField, Signature, SignatureSpec
from reasonkit.tools import BaseTool, FunctionTool, ToolResult, tool

__all__ = [
    "__version__",
    # Config
    "Settings",
    "get_settings",
    "reload_settings",
    # Signatures
    "Signature",
    "SignatureSpec",
    "InputField",
    "OutputField",
    # Data
    "Example",
    "Prediction",
    # Modules
    "Module",
    "Predict",
    "ChainOfThought",
    "ReAct",
    "compose",
    "parallel",
    # Tools
    "BaseTool",
    "FunctionTool",
    "ToolResult",
    "tool",
]
