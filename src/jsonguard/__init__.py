"""jsonguard - JSON Schema validation with custom formats and a local schema registry.

jsonguard compiles JSON Schema documents into validators that resolve
"$ref" against locally registered schemas only, and adds checksum and
calendar formats for identifiers such as the Russian INN and Kazakh IIN.
"""

__version__ = "0.3.0"
__author__ = "jsonguard contributors"
__description__ = "JSON Schema validation with custom formats and a local schema registry"

from jsonguard.config import Draft, EngineConfig, JsonGuardConfig
from jsonguard.engine import JsonSchemaEngine

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "Draft",
    "EngineConfig",
    "JsonGuardConfig",
    "JsonSchemaEngine",
]
