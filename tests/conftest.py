"""
Shared test fixtures and configuration.

No test runs a real package manager: commands go through a recording
executor, a dry-run executor, or a patched ``subprocess.run``.
"""

from pathlib import Path

import pytest

from kopsdev.core.models.command import CommandSpec, Receipt
from kopsdev.core.models.platform import Platform, PlatformInfo
from kopsdev.core.services.executor import CommandExecutor


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test in an empty directory with no KOPS_* overrides."""
    for var in ("KOPS_CONFIG", "KOPS_LOG_LEVEL", "KOPS_LOG_FILE", "KOPS_LOG_FILE_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def os_release(tmp_path: Path):
    """Factory: write an os-release file with the given ID."""

    def _write(distro_id: str, quoted: bool = False) -> Path:
        value = f'"{distro_id}"' if quoted else distro_id
        path = tmp_path / "os-release"
        path.write_text(f'NAME="Test Linux"\nID={value}\nVERSION_ID="1"\n')
        return path

    return _write


@pytest.fixture
def ubuntu() -> PlatformInfo:
    return PlatformInfo(platform=Platform.DEBIAN, system="Linux", distro_id="ubuntu")


@pytest.fixture
def macos() -> PlatformInfo:
    return PlatformInfo(platform=Platform.MACOS, system="Darwin")


@pytest.fixture
def which_only():
    """Factory: ``shutil.which`` stand-in where only ``present`` binaries exist."""

    def _factory(*present: str):
        def _which(binary: str) -> str | None:
            return f"/usr/bin/{binary}" if binary in present else None

        return _which

    return _factory


class RecordingExecutor(CommandExecutor):
    """Records commands instead of running them.

    ``fail`` maps a program name, or an exact argument, to an exit code.
    """

    def __init__(self, fail: dict[str, int] | None = None) -> None:
        super().__init__(dry_run=False, use_sudo=False)
        self.fail = fail or {}
        self.commands: list[CommandSpec] = []

    def run(self, command: CommandSpec) -> Receipt:
        self.commands.append(command)
        rendered = self.render(command)
        for key, code in self.fail.items():
            if rendered.startswith(key) or key in command.args:
                return Receipt.failure(
                    rendered, f"Command failed (exit {code})", return_code=code,
                )
        return Receipt.success(rendered)


@pytest.fixture
def recorder() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def failing_recorder():
    """Factory: a RecordingExecutor whose matching commands fail."""

    def _factory(**fail: int) -> RecordingExecutor:
        return RecordingExecutor(fail=fail)

    return _factory
