# tests/core/test_library_assembly.py
import pytest

from crossbuild.core.domain.exceptions import ResourceMissingError
from crossbuild.core.use_cases.assemble_library import LibraryAssembler
from crossbuild.core.use_cases.build_directory import BuildDirectory


@pytest.fixture
def assembler(build_config):
    return LibraryAssembler(build_config, BuildDirectory(build_config))


class TestLibraryAssembler:

    def test_modules_concatenated_in_order(self, assembler, build_config):
        """
        Scenario: A complete installation.
        Expected: Every module appears once, in list order, followed by the epilogue.
        """
        bundle = assembler.assemble_library()
        text = bundle.read_text()

        positions = [text.index(f"# module {m}\n") for m in build_config.modules]
        assert positions == sorted(positions)
        assert text.startswith("# module cli/platform\n\n\n# module exceptions\n")
        assert text.endswith("# module vertices\n\n\n\ninclude Ruby2D\nextend Ruby2D::DSL\n")

    def test_bundle_written_to_build_directory(self, assembler, build_config):
        bundle = assembler.assemble_library()
        assert bundle == build_config.build_dir / "lib.rb"

    def test_deterministic(self, assembler):
        first = assembler.assemble_library().read_bytes()
        second = assembler.assemble_library().read_bytes()
        assert first == second

    def test_missing_module_is_fatal(self, assembler, build_config):
        """
        Scenario: One module was deleted from the installation.
        Expected: ResourceMissingError naming the file, and no bundle on disk.
        """
        missing = build_config.module_path("sprite")
        missing.unlink()

        with pytest.raises(ResourceMissingError) as excinfo:
            assembler.assemble_library()

        assert excinfo.value.path == missing
        assert not (build_config.build_dir / "lib.rb").exists()

    def test_failed_assembly_keeps_previous_bundle_intact(self, assembler, build_config):
        previous = assembler.assemble_library().read_text()
        build_config.module_path("font").unlink()

        with pytest.raises(ResourceMissingError):
            assembler.assemble_library()

        assert (build_config.build_dir / "lib.rb").read_text() == previous
        assert [p.name for p in build_config.build_dir.iterdir()] == ["lib.rb"]
