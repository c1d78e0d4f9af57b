"""Tests for adminschema.toml loading."""

from pathlib import Path

import pytest

from adminschema.core.errors import ManifestError
from adminschema.core.manifest import (
    DEFAULT_BUNDLES,
    MANIFEST_FILENAME,
    load_manifest,
    load_project_manifest,
)


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / MANIFEST_FILENAME
    path.write_text(content)
    return path


class TestLoadManifest:
    """Tests for manifest parsing."""

    def test_full_manifest(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            """
[registry]
bundles = ["tls"]
page_size = 25

[logging]
level = "debug"
log_dir = "logs"
""",
        )
        manifest = load_manifest(path)

        assert manifest.registry.bundles == ["tls"]
        assert manifest.registry.page_size == 25
        assert manifest.logging.level == "DEBUG"
        assert manifest.logging.log_dir == str(tmp_path / "logs")
        assert manifest.project_root == tmp_path

    def test_empty_manifest_uses_defaults(self, tmp_path: Path) -> None:
        manifest = load_manifest(_write(tmp_path, ""))

        assert manifest.registry.bundles == DEFAULT_BUNDLES
        assert manifest.registry.page_size == 10
        assert manifest.logging.level == "WARNING"
        assert manifest.logging.log_dir is None

    def test_invalid_toml(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestError, match="Invalid TOML"):
            load_manifest(_write(tmp_path, "[registry\n"))

    def test_unreadable_file(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestError, match="Cannot read"):
            load_manifest(tmp_path / "missing.toml")

    @pytest.mark.parametrize(
        "content,message",
        [
            ('[registry]\nbundles = "tls"\n', "bundles must be a list"),
            ("[registry]\nbundles = [1]\n", "bundles must be a list"),
            ("[registry]\npage_size = 0\n", "page_size must be a positive integer"),
            ("[registry]\npage_size = true\n", "page_size must be a positive integer"),
            ('[logging]\nlevel = "chatty"\n', "unknown logging.level"),
            ("registry = 1\n", r"\[registry\] must be a table"),
            ('logging = "x"\n', r"\[logging\] must be a table"),
            ("[logging]\nlog_dir = 5\n", "log_dir must be a string"),
        ],
    )
    def test_invalid_values(self, tmp_path: Path, content: str, message: str) -> None:
        with pytest.raises(ManifestError, match=message):
            load_manifest(_write(tmp_path, content))


class TestLoadProjectManifest:
    """Tests for project directory lookup."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        manifest = load_project_manifest(tmp_path)
        assert manifest.registry.bundles == DEFAULT_BUNDLES
        assert manifest.project_root == tmp_path

    def test_defaults_are_not_shared(self, tmp_path: Path) -> None:
        first = load_project_manifest(tmp_path)
        first.registry.bundles.append("extra")
        assert load_project_manifest(tmp_path).registry.bundles == DEFAULT_BUNDLES

    def test_reads_file(self, tmp_path: Path) -> None:
        _write(tmp_path, '[registry]\nbundles = ["tls"]\n')
        assert load_project_manifest(tmp_path).registry.bundles == ["tls"]

    def test_log_dir_relative_to_project(self, tmp_path: Path) -> None:
        project = tmp_path / "project"
        project.mkdir()
        _write(project, '[logging]\nlog_dir = ".adminschema/logs"\n')

        manifest = load_project_manifest(project)

        assert manifest.logging.log_dir == str(project / ".adminschema" / "logs")

    def test_absolute_log_dir_kept(self, tmp_path: Path) -> None:
        log_dir = tmp_path / "elsewhere"
        _write(tmp_path, f'[logging]\nlog_dir = "{log_dir.as_posix()}"\n')
        assert load_project_manifest(tmp_path).logging.log_dir == str(log_dir)
