# crossbuild/core/use_cases/assemble_library.py
from pathlib import Path

import structlog

from crossbuild.core.domain.exceptions import ResourceMissingError
from crossbuild.core.use_cases.build_directory import (
    BuildDirectory,
    read_source_text,
    write_text_atomic,
)
from crossbuild.shared.config import BuildConfig

logger = structlog.get_logger()

MODULE_SEPARATOR = "\n\n"


class LibraryAssembler:
    """
    Use Case: Concatenates the library's modules into one source bundle.

    The module order comes from the configuration and is never rediscovered:
    later modules rely on symbols defined by earlier ones.
    """

    def __init__(self, config: BuildConfig, directory: BuildDirectory):
        self.config = config
        self.directory = directory

    def assemble(self) -> str:
        """
        Returns the bundle text without writing it.

        Raises:
            ResourceMissingError: If any module file is absent.
        """
        paths = [self.config.module_path(m) for m in self.config.modules]

        # Check every module first so a corrupt installation fails before any read
        for path in paths:
            if not path.is_file():
                raise ResourceMissingError(path)

        chunks = [read_source_text(path) + MODULE_SEPARATOR for path in paths]
        chunks.append(self.config.library_epilogue)
        return "".join(chunks)

    def assemble_library(self) -> Path:
        bundle = write_text_atomic(self.directory.library_bundle, self.assemble())
        logger.info("library_assembled", modules=len(self.config.modules), bundle=str(bundle))
        return bundle
