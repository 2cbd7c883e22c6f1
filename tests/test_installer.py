"""
Tests for install planning and plan execution.

Planning is exercised with injected ``which`` lookups; execution uses
the RecordingExecutor from conftest. Nothing is installed.
"""

import pytest

from kopsdev.core.errors import MissingDependencyError, UnsupportedPlatformError
from kopsdev.core.models.options import InstallOptions
from kopsdev.core.models.platform import Platform, PlatformInfo
from kopsdev.core.models.settings import DEFAULT_K3D_INSTALL_URL, Settings, ToolPolicy
from kopsdev.core.services.executor import CommandExecutor
from kopsdev.core.services.installer import (
    execute_plan,
    resolve_install_plan,
    run_install,
)


def _linux(distro_id: str, platform: Platform) -> PlatformInfo:
    return PlatformInfo(platform=platform, system="Linux", distro_id=distro_id)


def _argvs(plan) -> list[list[str]]:
    return [s.command.argv() for s in plan if s.command is not None]


# ═══════════════════════════════════════════════════════════════════
#  resolve_install_plan
# ═══════════════════════════════════════════════════════════════════


class TestPlanDebian:
    def test_full_plan_order(self, ubuntu, which_only):
        plan = resolve_install_plan(InstallOptions(), ubuntu, which=which_only())
        assert _argvs(plan) == [
            ["apt-get", "update"],
            ["apt-get", "install", "-y", "docker.io"],
            ["apt-get", "install", "-y", "kubectl"],
            ["sh", "-c", f"curl -s {DEFAULT_K3D_INSTALL_URL} | sh"],
        ]
        assert [s.kind for s in plan] == ["refresh", "install", "install", "install"]

    def test_package_commands_need_sudo(self, ubuntu, which_only):
        plan = resolve_install_plan(InstallOptions(), ubuntu, which=which_only())
        sudo = {s.tool or "refresh": s.command.needs_sudo for s in plan}
        assert sudo == {"refresh": True, "docker": True, "kubectl": True, "k3d": False}

    def test_no_docker_plan_has_no_docker_command(self, ubuntu, which_only):
        options = InstallOptions(install_docker=False)
        plan = resolve_install_plan(options, ubuntu, which=which_only())
        assert not any("docker" in " ".join(argv) for argv in _argvs(plan))
        skipped = [s for s in plan if s.kind == "skip"]
        assert [(s.tool, s.reason) for s in skipped] == [("docker", "disabled")]

    def test_installed_tools_skipped(self, ubuntu, which_only):
        plan = resolve_install_plan(
            InstallOptions(), ubuntu, which=which_only("docker", "kubectl"),
        )
        assert [(s.tool, s.reason) for s in plan if s.kind == "skip"] == [
            ("docker", "already installed"),
            ("kubectl", "already installed"),
        ]

    def test_refresh_only_when_package_install_pending(self, ubuntu, which_only):
        # Only k3d missing: the vendor script needs no index refresh.
        plan = resolve_install_plan(
            InstallOptions(), ubuntu, which=which_only("docker", "kubectl"),
        )
        assert [s.kind for s in plan if s.kind != "skip"] == ["install"]
        assert plan[-1].tool == "k3d"

    def test_all_disabled_issues_no_commands(self, ubuntu, which_only):
        options = InstallOptions(install_docker=False, install_kubectl=False, install_k3d=False)
        plan = resolve_install_plan(options, ubuntu, which=which_only())
        assert _argvs(plan) == []
        assert all(s.kind == "skip" for s in plan)

    def test_kubectl_allowed_to_fail_by_default(self, ubuntu, which_only):
        plan = resolve_install_plan(InstallOptions(), ubuntu, which=which_only())
        allowed = {s.tool: s.allow_failure for s in plan if s.kind == "install"}
        assert allowed == {"docker": False, "kubectl": True, "k3d": False}

    def test_policy_from_settings(self, ubuntu, which_only):
        settings = Settings(tools={"kubectl": ToolPolicy(allow_failure=False)})
        plan = resolve_install_plan(InstallOptions(), ubuntu, settings, which=which_only())
        assert not any(s.allow_failure for s in plan)

    @pytest.mark.parametrize(
        "info",
        [
            PlatformInfo(platform=Platform.MACOS, system="Darwin"),
            _linux("alpine", Platform.ALPINE),
            _linux("arch", Platform.ARCH),
        ],
    )
    def test_kubectl_strict_off_debian_by_default(self, info, which_only):
        plan = resolve_install_plan(
            InstallOptions(), info, which=which_only("brew"),
        )
        assert not any(s.allow_failure for s in plan)

    def test_unscoped_policy_applies_everywhere(self, which_only):
        settings = Settings(tools={"kubectl": {"allow_failure": True}})
        plan = resolve_install_plan(
            InstallOptions(), _linux("alpine", Platform.ALPINE), settings, which=which_only(),
        )
        allowed = {s.tool: s.allow_failure for s in plan if s.kind == "install"}
        assert allowed["kubectl"] is True

    def test_custom_k3d_url(self, ubuntu, which_only):
        settings = Settings(k3d_install_url="https://mirror.example/k3d.sh")
        plan = resolve_install_plan(InstallOptions(), ubuntu, settings, which=which_only())
        assert plan[-1].command.args == ("-c", "curl -s https://mirror.example/k3d.sh | sh")


class TestPlanOtherPlatforms:
    def test_alpine_has_no_refresh(self, which_only):
        plan = resolve_install_plan(
            InstallOptions(), _linux("alpine", Platform.ALPINE), which=which_only(),
        )
        assert _argvs(plan)[:2] == [
            ["apk", "add", "--no-cache", "docker"],
            ["apk", "add", "--no-cache", "kubectl"],
        ]
        assert "refresh" not in [s.kind for s in plan]

    def test_arch_refreshes_with_pacman(self, which_only):
        plan = resolve_install_plan(
            InstallOptions(install_docker=False), _linux("artix", Platform.ARCH),
            which=which_only(),
        )
        assert _argvs(plan)[:2] == [
            ["pacman", "-Sy", "--noconfirm"],
            ["pacman", "-S", "--noconfirm", "kubectl"],
        ]

    def test_macos_uses_brew_without_sudo(self, macos, which_only):
        plan = resolve_install_plan(InstallOptions(), macos, which=which_only("brew"))
        installs = [s for s in plan if s.kind == "install"]
        assert [s.command.argv() for s in installs[:2]] == [
            ["brew", "install", "docker"],
            ["brew", "install", "kubernetes-cli"],
        ]
        assert not any(s.command.needs_sudo for s in installs)

    def test_macos_without_brew_fails(self, macos, which_only):
        with pytest.raises(MissingDependencyError, match="Homebrew required"):
            resolve_install_plan(InstallOptions(), macos, which=which_only())

    def test_k3d_script_identical_everywhere(self, ubuntu, macos, which_only):
        infos = [
            ubuntu,
            macos,
            _linux("alpine", Platform.ALPINE),
            _linux("arch", Platform.ARCH),
        ]
        k3d_cmds = {
            resolve_install_plan(InstallOptions(), info, which=which_only("brew"))[-1].command
            for info in infos
        }
        assert len(k3d_cmds) == 1

    def test_unsupported_distro_fails_fast(self, which_only):
        info = _linux("gentoo", Platform.UNSUPPORTED)
        with pytest.raises(UnsupportedPlatformError, match="gentoo"):
            resolve_install_plan(InstallOptions(), info, which=which_only())

    def test_unsupported_os_fails_fast(self, which_only):
        info = PlatformInfo(platform=Platform.UNSUPPORTED, system="SunOS")
        with pytest.raises(UnsupportedPlatformError, match="Unsupported OS: SunOS"):
            resolve_install_plan(InstallOptions(), info, which=which_only())

    def test_which_defaults_to_shutil(self, ubuntu, monkeypatch):
        monkeypatch.setattr("shutil.which", lambda name: f"/bin/{name}")
        plan = resolve_install_plan(InstallOptions(), ubuntu)
        assert all(s.kind == "skip" for s in plan)


# ═══════════════════════════════════════════════════════════════════
#  execute_plan
# ═══════════════════════════════════════════════════════════════════


class TestExecutePlan:
    def test_runs_every_command_in_order(self, ubuntu, which_only, recorder):
        plan = resolve_install_plan(InstallOptions(), ubuntu, which=which_only())
        results, halted = execute_plan(plan, recorder)
        assert not halted
        assert [c.argv() for c in recorder.commands] == _argvs(plan)
        assert [r.receipt.status for r in results] == ["ok"] * 4

    def test_tolerated_kubectl_failure_continues(self, ubuntu, which_only, failing_recorder):
        executor = failing_recorder(kubectl=100)
        plan = resolve_install_plan(InstallOptions(), ubuntu, which=which_only())
        results, halted = execute_plan(plan, executor)

        assert not halted
        kubectl = next(r for r in results if r.step.tool == "kubectl")
        assert kubectl.receipt.failed
        assert kubectl.receipt.tolerated
        assert kubectl.receipt.ok
        # k3d still attempted after the kubectl failure
        assert executor.commands[-1].program == "sh"

    def test_docker_failure_halts(self, ubuntu, which_only, failing_recorder):
        executor = failing_recorder(**{"docker.io": 1})
        plan = resolve_install_plan(InstallOptions(), ubuntu, which=which_only())
        results, halted = execute_plan(plan, executor)

        assert halted
        assert results[-1].step.tool == "docker"
        assert len(executor.commands) == 2  # refresh + docker, nothing after

    def test_kubectl_failure_halts_when_policy_strict(self, ubuntu, which_only, failing_recorder):
        settings = Settings(tools={"kubectl": {"allow_failure": False}})
        executor = failing_recorder(kubectl=100)
        plan = resolve_install_plan(InstallOptions(), ubuntu, settings, which=which_only())
        _, halted = execute_plan(plan, executor)
        assert halted
        assert executor.commands[-1].args[-1] == "kubectl"

    def test_callbacks_fire_around_each_step(self, ubuntu, which_only, recorder):
        plan = resolve_install_plan(
            InstallOptions(install_docker=False), ubuntu, which=which_only(),
        )
        started, finished = [], []
        execute_plan(plan, recorder, on_start=started.append, on_step=finished.append)
        assert started == plan
        assert [r.step for r in finished] == plan


class TestRunInstall:
    def test_dry_run_executes_nothing(self, ubuntu, which_only, monkeypatch):
        def _boom(*args, **kwargs):
            raise AssertionError("subprocess.run called in dry-run")

        monkeypatch.setattr("subprocess.run", _boom)
        options = InstallOptions(dry_run=True, install_docker=False)
        report = run_install(options, info=ubuntu, which=which_only())

        assert report.status == "ok"
        assert report.dry_run
        statuses = {r.step.tool or "refresh": r.receipt.status for r in report.results}
        assert statuses == {
            "docker": "skipped",
            "refresh": "dry_run",
            "kubectl": "dry_run",
            "k3d": "dry_run",
        }

    def test_dry_run_is_deterministic(self, ubuntu, which_only):
        options = InstallOptions(dry_run=True)

        def _commands():
            executor = CommandExecutor(dry_run=True, use_sudo=True)
            report = run_install(options, info=ubuntu, executor=executor, which=which_only())
            return [r.receipt.command for r in report.executed]

        first = _commands()
        assert first == _commands()
        assert first[0] == "sudo apt-get update"

    def test_report_names_failed_step(self, ubuntu, which_only, failing_recorder):
        report = run_install(
            InstallOptions(), info=ubuntu, executor=failing_recorder(sh=1), which=which_only(),
        )
        assert report.status == "failed"
        assert report.failed_step.step.tool == "k3d"
        assert report.to_dict()["status"] == "failed"
