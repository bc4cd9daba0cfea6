# crossbuild/shared/config.py
from enum import Enum
from pathlib import Path
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Dependency order: a module may use symbols defined by any module before it.
LIBRARY_MODULES: Tuple[str, ...] = (
    "cli/platform",
    "exceptions",
    "renderable",
    "color",
    "window",
    "dsl",
    "entity",
    "quad",
    "line",
    "circle",
    "rectangle",
    "square",
    "triangle",
    "pixel",
    "image",
    "sprite",
    "tileset",
    "font",
    "text",
    "sound",
    "music",
    "texture",
    "vertices",
)


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


class Settings(BaseSettings):
    """
    Central Configuration Registry.
    Read from CROSSBUILD_* environment variables or a local .env file.
    """

    # --- Application Meta ---
    APP_NAME: str = "crossbuild"

    # --- Logging & Observability ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: LogFormat = LogFormat.CONSOLE
    TRACE_CONSOLE: bool = False

    # --- Library Installation ---
    LIBRARY_NAME: str = "ruby2d"
    LIBRARY_NAMESPACE: str = "Ruby2D"
    LIBRARY_ROOT: str = "/usr/local/lib/ruby2d"

    # --- Build Layout ---
    BUILD_DIR: str = "build"

    # --- External Toolchains ---
    BYTECODE_COMPILER: str = "mrbc"
    TRANSPILER: str = "opal"
    C_COMPILER: str = "cc"
    PROJECT_TOOL: str = "simple2d"
    NATIVE_LINK_FLAGS: List[str] = ["-lmruby", "-lsimple2d"]

    # --- Apple Targets ---
    APPLE_FRAMEWORKS_DIR: str = "/usr/local/Frameworks/Simple2D"
    IOS_SIMULATOR: str = "iPhone XR"
    TVOS_SIMULATOR: str = "Apple TV 4K"
    APP_BUNDLE_ID: str = "Ruby2D.MyApp"

    model_config = SettingsConfigDict(
        env_prefix="CROSSBUILD_", env_file=".env", extra="ignore"
    )

    def build_config(self, debug: bool = False) -> "BuildConfig":
        return BuildConfig.from_settings(self, debug=debug)


class BuildConfig(BaseModel):
    """
    Immutable snapshot of everything a pipeline needs.

    Built once from ``Settings`` and handed to every pipeline, launcher and
    diagnostic. The debug flag travels here too, so no step consults global
    state.
    """

    model_config = ConfigDict(frozen=True)

    library_name: str = "ruby2d"
    library_namespace: str = "Ruby2D"
    library_root: Path
    modules: Tuple[str, ...] = LIBRARY_MODULES
    build_dir: Path = Path("build")
    debug: bool = False

    bytecode_compiler: str = "mrbc"
    transpiler: str = "opal"
    c_compiler: str = "cc"
    project_tool: str = "simple2d"
    native_link_flags: Tuple[str, ...] = ("-lmruby", "-lsimple2d")

    apple_frameworks_dir: Path = Path("/usr/local/Frameworks/Simple2D")
    ios_simulator: str = "iPhone XR"
    tvos_simulator: str = "Apple TV 4K"
    app_bundle_id: str = "Ruby2D.MyApp"

    native_backend_flag: str = Field(default="MRUBY")
    apple_family_flag: str = Field(default="RUBY2D_IOS_TVOS")

    @classmethod
    def from_settings(cls, settings: Settings, debug: bool = False) -> "BuildConfig":
        return cls(
            library_name=settings.LIBRARY_NAME,
            library_namespace=settings.LIBRARY_NAMESPACE,
            library_root=Path(settings.LIBRARY_ROOT),
            build_dir=Path(settings.BUILD_DIR),
            debug=debug,
            bytecode_compiler=settings.BYTECODE_COMPILER,
            transpiler=settings.TRANSPILER,
            c_compiler=settings.C_COMPILER,
            project_tool=settings.PROJECT_TOOL,
            native_link_flags=tuple(settings.NATIVE_LINK_FLAGS),
            apple_frameworks_dir=Path(settings.APPLE_FRAMEWORKS_DIR),
            ios_simulator=settings.IOS_SIMULATOR,
            tvos_simulator=settings.TVOS_SIMULATOR,
            app_bundle_id=settings.APP_BUNDLE_ID,
        )

    # --- Library Installation Layout ---

    @property
    def lib_source_dir(self) -> Path:
        return self.library_root / "lib" / self.library_name

    @property
    def native_glue(self) -> Path:
        """C runtime glue appended after the compiled units."""
        return self.library_root / "ext" / self.library_name / f"{self.library_name}.c"

    @property
    def web_shim(self) -> Path:
        """Interop module bridging the library to the browser runtime."""
        return self.library_root / "ext" / self.library_name / f"{self.library_name}-opal.rb"

    @property
    def assets_dir(self) -> Path:
        return self.library_root / "assets"

    @property
    def web_support_script(self) -> Path:
        return self.assets_dir / "simple2d.js"

    @property
    def transpiler_runtime(self) -> Path:
        return self.assets_dir / "opal.js"

    @property
    def html_template(self) -> Path:
        return self.assets_dir / "template.html"

    def module_path(self, module: str) -> Path:
        return self.lib_source_dir / f"{module}.rb"

    def project_template(self, family: str) -> Path:
        return self.assets_dir / family

    def framework_path(self, family: str) -> Path:
        folder = {"ios": "iOS", "tvos": "tvOS"}[family]
        return self.apple_frameworks_dir / folder / "Simple2D.framework"

    def simulator_device(self, family: str) -> str:
        return self.ios_simulator if family == "ios" else self.tvos_simulator

    @property
    def library_epilogue(self) -> str:
        """Activates the library namespace for a top-level script."""
        ns = self.library_namespace
        return f"\ninclude {ns}\nextend {ns}::DSL\n"


settings = Settings()
