"""TypeScript code generation."""

from enumsync.generate.typescript import LOCALIZATION_MODES, TypeScriptGenerator

__all__ = ["LOCALIZATION_MODES", "TypeScriptGenerator"]
