# crossbuild/core/use_cases/build_directory.py
import os
import shutil
import stat
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional

import structlog

from crossbuild.core.domain.models import Artifact, ArtifactKind, CleanupScope, Target
from crossbuild.shared.config import BuildConfig

logger = structlog.get_logger()

# Xcode output folder per device family
_SIMULATOR_PRODUCTS = {
    "ios": "Release-iphonesimulator",
    "tvos": "Release-appletvsimulator",
}

APP_NAME = "MyApp"

# Source files are not guaranteed to be UTF-8. Undecodable bytes survive a
# read/write round trip as lone surrogates.
TEXT_ERRORS = "surrogateescape"


def read_source_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors=TEXT_ERRORS)


def _target_mode(path: Path) -> int:
    """Mode of the file being replaced, or what a plain ``open()`` would give."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_text_atomic(path: Path, text: str) -> Path:
    """
    Writes ``text`` to a temporary file next to ``path`` and renames it into
    place, so readers see either the complete file or no file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", errors=TEXT_ERRORS, newline="") as f:
            f.write(text)
        # mkstemp creates owner-only files
        os.chmod(tmp_name, _target_mode(path))
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path


class BuildDirectory:
    """
    Layout and lifecycle of the shared build directory.

    Every target writes to the same fixed intermediate filenames, so
    pipelines must run one at a time.
    """

    def __init__(self, config: BuildConfig):
        self.config = config
        self.root = Path(config.build_dir)

    # --- Intermediate Artifacts ---

    @property
    def library_bundle(self) -> Path:
        return self.root / "lib.rb"

    @property
    def source_bundle(self) -> Path:
        return self.root / "src.rb"

    @property
    def library_c_unit(self) -> Path:
        return self.root / "lib.c"

    @property
    def source_c_unit(self) -> Path:
        return self.root / "src.c"

    @property
    def native_combined(self) -> Path:
        return self.root / "app.c"

    @property
    def library_js_unit(self) -> Path:
        return self.root / "lib.js"

    @property
    def source_js_unit(self) -> Path:
        return self.root / "src.js"

    @property
    def web_shim_source(self) -> Path:
        return self.root / self.config.web_shim.name

    @property
    def web_shim_js_unit(self) -> Path:
        return self.web_shim_source.with_suffix(".js")

    # --- Final Artifacts ---

    @property
    def native_executable(self) -> Path:
        return self.root / "app"

    @property
    def web_bundle(self) -> Path:
        return self.root / "app.js"

    @property
    def web_page(self) -> Path:
        return self.root / "app.html"

    def project_dir(self, family: str) -> Path:
        return self.root / family

    def project_combined(self, family: str) -> Path:
        return self.project_dir(family) / "main.c"

    def project_file(self, family: str) -> Path:
        return self.project_dir(family) / f"{APP_NAME}.xcodeproj"

    def app_bundle(self, family: str) -> Path:
        return self.project_dir(family) / "build" / _SIMULATOR_PRODUCTS[family] / f"{APP_NAME}.app"

    def final_artifact(self, target: Target) -> Path:
        """The file a launch of ``target`` needs."""
        if target == Target.NATIVE:
            return self.native_executable
        if target == Target.WEB:
            return self.web_page
        return self.app_bundle(target.value)

    # --- Classification ---

    def intermediate_artifacts(self) -> List[Artifact]:
        paths = {
            "library_bundle": self.library_bundle,
            "source_bundle": self.source_bundle,
            "library_c_unit": self.library_c_unit,
            "source_c_unit": self.source_c_unit,
            "native_combined": self.native_combined,
            "library_js_unit": self.library_js_unit,
            "source_js_unit": self.source_js_unit,
            "web_shim_source": self.web_shim_source,
            "web_shim_js_unit": self.web_shim_js_unit,
        }
        return [Artifact(name=n, path=p, kind=ArtifactKind.INTERMEDIATE) for n, p in paths.items()]

    def final_artifacts(self) -> List[Artifact]:
        paths = {
            "native_executable": self.native_executable,
            "web_bundle": self.web_bundle,
            "web_page": self.web_page,
            "ios_project": self.project_dir("ios"),
            "tvos_project": self.project_dir("tvos"),
        }
        return [Artifact(name=n, path=p, kind=ArtifactKind.FINAL) for n, p in paths.items()]

    # --- Lifecycle ---

    def ensure(self) -> Path:
        """Creates the build directory; a no-op when it already exists."""
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def cleanup(
        self,
        scope: CleanupScope = CleanupScope.INTERMEDIATE,
        artifacts: Optional[Iterable[Artifact]] = None,
    ) -> List[Path]:
        """
        Removes build artifacts and returns the paths actually deleted.

        INTERMEDIATE removes ``artifacts`` (default: every known intermediate)
        and refuses to touch anything classified final. FULL also removes every
        final artifact and then the build directory itself if it ended empty.
        Absent files are skipped, so repeated calls are harmless.
        """
        if artifacts is None:
            artifacts = self.intermediate_artifacts()
        targets = [a for a in artifacts if a.kind == ArtifactKind.INTERMEDIATE]

        if scope == CleanupScope.FULL:
            targets = self.intermediate_artifacts() + self.final_artifacts()

        removed = []
        for artifact in targets:
            if self._remove(artifact.path):
                removed.append(artifact.path)

        if scope == CleanupScope.FULL and self.root.is_dir() and not any(self.root.iterdir()):
            self.root.rmdir()

        logger.info("build_dir_cleaned", scope=scope.value, removed=len(removed), root=str(self.root))
        return removed

    @staticmethod
    def _remove(path: Path) -> bool:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
            return True
        if path.exists() or path.is_symlink():
            path.unlink()
            return True
        return False
