"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (ENUMSYNC__SECTION__KEY)
3. Repo YAML (.enumsync/config.yaml)
4. Global YAML (~/.config/enumsync/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    ENUMSYNC__<SECTION>__<KEY>=<VALUE>

Examples:
    ENUMSYNC__LOGGING__LEVEL=DEBUG
    ENUMSYNC__PATHS__OUTPUT=web/src/enums
    ENUMSYNC__LOCALIZATION__MODE=react
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from enumsync.core.excludes import DEFAULT_REFACTOR_EXCLUDES

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
FileCaseName = Literal["kebab", "camel", "pascal"]
LocalizationMode = Literal["none", "react", "vue"]
MatchMode = Literal["cast", "strict", "loose"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        ENUMSYNC__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. Per-item skips are logged at DEBUG.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class PathsConfig(BaseModel):
    """Source and output locations, relative to the project root.

    Env vars:
        ENUMSYNC__PATHS__OUTPUT: Generated TypeScript directory
    """

    enums: list[str] = Field(
        default_factory=lambda: ["app/enums"],
        description="Directories scanned for Python enums.",
    )
    output: str = Field(
        default="frontend/src/enums",
        description="Directory receiving the generated .ts modules.",
    )
    models: list[str] = Field(
        default_factory=lambda: ["app/models"],
        description="Directories scanned for model field casts (refactor only).",
    )


class NamingConfig(BaseModel):
    """File naming for generated modules.

    kebab: order-status.ts, camel: orderStatus.ts, pascal: OrderStatus.ts
    """

    file_case: FileCaseName = "kebab"


class FeaturesConfig(BaseModel):
    """Independent generator feature toggles."""

    generate_union_types: bool = True
    generate_label_maps: bool = True
    generate_method_maps: bool = True
    generate_index_barrel: bool = True


class LocalizationConfig(BaseModel):
    """Localization of generated label helpers.

    none: static XUtils object
    react: useXUtils() hook backed by react-i18next
    vue: useXUtils() composable backed by vue-i18n
    """

    mode: LocalizationMode = "none"


class FiltersConfig(BaseModel):
    """Qualified-name glob filters (``*`` stops at dots, ``**`` crosses them)."""

    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)


class RefactorConfig(BaseModel):
    """Hardcoded-value scanner configuration.

    Env vars:
        ENUMSYNC__REFACTOR__PATH: Default scan root
        ENUMSYNC__REFACTOR__MATCH_MODE: cast, strict or loose
    """

    path: str = Field(default="app", description="Default scan root.")
    exclude: list[str] = Field(
        default_factory=lambda: list(DEFAULT_REFACTOR_EXCLUDES),
        description="Path fragments skipped while scanning.",
    )
    match_mode: MatchMode = Field(
        default="cast",
        description="cast: only fields with a typed model cast; strict: field name "
        "must relate to the enum name; loose: any matching value.",
    )
    backup_dir: str = Field(
        default=".enumsync/backups",
        description="Where --backup snapshots are written.",
    )


class EnumSyncConfig(BaseModel):
    """Root configuration model."""

    project_root: Path = Field(default_factory=Path.cwd)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    naming: NamingConfig = Field(default_factory=NamingConfig)
    features: FeaturesConfig = Field(default_factory=FeaturesConfig)
    localization: LocalizationConfig = Field(default_factory=LocalizationConfig)
    filters: FiltersConfig = Field(default_factory=FiltersConfig)
    refactor: RefactorConfig = Field(default_factory=RefactorConfig)

    def resolve(self, path: str | Path) -> Path:
        """Resolve a configured path against the project root."""
        candidate = Path(path).expanduser()
        if candidate.is_absolute():
            return candidate
        return self.project_root / candidate

    @property
    def output_path(self) -> Path:
        return self.resolve(self.paths.output)

    @property
    def enum_paths(self) -> list[Path]:
        return [self.resolve(p) for p in self.paths.enums]

    @property
    def model_paths(self) -> list[Path]:
        return [self.resolve(p) for p in self.paths.models]
