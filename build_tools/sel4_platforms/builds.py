"""
Build definitions for seL4 CI jobs and a small runner for build scripts.

A builds.yml file looks like

    default:
        settings:
            VERIFICATION: "TRUE"
    builds:
    - X64:
        platform: PC99
        mode: 64
        l4v_arch: X64
        settings:
          KernelVTX: "TRUE"

Each entry names a platform from platforms.yml. `mode` may be left out when
the platform supports a single mode. The cmake settings of a build are, in
increasing priority: the `default` settings, the settings derived from
platform and mode, and the entry's own settings.
"""

from dataclasses import dataclass, field
from pathlib import Path
import shlex
import shutil
import subprocess
import sys
from typing import Callable, Dict, Iterable, List, Optional

sys.path.insert(0, str(Path(__file__).parent.parent))

from github_actions.github_actions_utils import gha_append_step_summary, gha_group
from github_actions.utils.config import ConfigParser, BUILDS_SCHEMA
from github_actions.utils.constants import Constants
from github_actions.utils.exceptions import BuildError, ConfigurationError
from github_actions.utils.logger import log
from sel4_platforms.platforms import Platform, PlatformTable, get_platforms


def mode_settings(platform: Platform, mode: int) -> Dict[str, str]:
    """The cmake settings selecting platform and word size."""
    settings = {"PLATFORM": platform.platform}
    if platform.arch == "arm":
        settings[f"AARCH{mode}"] = "TRUE"
    elif platform.arch == "riscv":
        settings[f"RISCV{mode}"] = "TRUE"
    elif platform.arch == "x86":
        settings["KernelSel4Arch"] = "ia32" if mode == 32 else "x86_64"
    elif platform.arch == "Loongarch64":
        settings["LOONGARCH64"] = "TRUE"
    return settings


@dataclass
class Build:
    """One build configuration of the kernel."""

    name: str
    platform: Platform
    mode: int
    l4v_arch: Optional[str] = None
    settings: Dict[str, str] = field(default_factory=dict)

    def settings_args(self) -> List[str]:
        """Settings as init-build.sh/cmake arguments."""
        return [f"-D{key}={value}" for key, value in self.settings.items()]

    def is_smp(self) -> bool:
        return self.platform.can_smp(self.mode)


def _settings_to_str(settings: Optional[dict]) -> Dict[str, str]:
    # YAML booleans and numbers are passed to cmake as written
    out = {}
    for key, value in (settings or {}).items():
        if isinstance(value, bool):
            value = "TRUE" if value else "FALSE"
        out[str(key)] = str(value)
    return out


def make_build(
    name: str, entry: dict, default_settings: Dict[str, str], platforms: PlatformTable
) -> Build:
    """Creates a Build from one builds.yml entry.

    Raises:
        ConfigurationError: unknown platform, or missing/unsupported mode
    """
    platform = platforms.get_platform(str(entry["platform"]))

    mode = entry.get("mode")
    if mode is None:
        mode = platform.get_mode()
        if mode is None:
            raise ConfigurationError(
                f"Build {name}: platform {platform.name} supports modes "
                f"{platform.modes}, 'mode' must be given"
            )
    elif not platform.has_mode(mode):
        raise ConfigurationError(
            f"Build {name}: platform {platform.name} does not support mode {mode}"
        )

    settings = dict(default_settings)
    settings.update(mode_settings(platform, mode))
    settings.update(_settings_to_str(entry.get("settings")))

    return Build(
        name=name,
        platform=platform,
        mode=mode,
        l4v_arch=entry.get("l4v_arch"),
        settings=settings,
    )


def load_builds(
    yml_path,
    platforms: Optional[PlatformTable] = None,
    filter_fn: Optional[Callable[[Build], bool]] = None,
) -> List[Build]:
    """Loads the build definitions of a builds.yml file, in file order."""
    if platforms is None:
        platforms = get_platforms()

    config = ConfigParser(str(yml_path), schema=BUILDS_SCHEMA)
    default_settings = _settings_to_str(config.get("default.settings", {}))

    builds = []
    for item in config.get("builds"):
        ((name, entry),) = item.items()
        build = make_build(str(name), entry, default_settings, platforms)
        if filter_fn is None or filter_fn(build):
            builds.append(build)

    log.debug(f"Loaded {len(builds)} builds from {yml_path}")
    return builds


def filter_builds(builds: List[Build], names: Iterable[str]) -> List[Build]:
    """Selects builds by name, keeping file order.

    Raises:
        ConfigurationError: if a requested name is not defined
    """
    wanted = [n.strip() for n in names if n.strip()]
    if not wanted:
        return builds
    known = {b.name for b in builds}
    unknown = [n for n in wanted if n not in known]
    if unknown:
        raise ConfigurationError(
            f"Unknown builds requested: {', '.join(unknown)}. "
            f"Known builds: {', '.join(b.name for b in builds)}"
        )
    return [b for b in builds if b.name in wanted]


def _run_step(step: List[str], cwd: Path):
    try:
        result = subprocess.run(step, cwd=cwd)
    except OSError as e:
        raise BuildError(f"Could not run '{shlex.join(step)}': {e}")
    if result.returncode != 0:
        raise BuildError(
            f"'{shlex.join(step)}' failed with exit code {result.returncode}"
        )


def run_build_script(manifest_dir, build: Build, script: List[List[str]]) -> int:
    """Runs the commands of `script` in a fresh build directory for `build`.

    The directory is `<manifest_dir>/build_<name>`. Execution stops at the
    first failing command.

    Returns:
        0 on success, 1 on failure
    """
    build_dir = Path(manifest_dir) / f"build_{build.name}"
    if build_dir.exists():
        shutil.rmtree(build_dir)
    build_dir.mkdir(parents=True)

    with gha_group(f"Build {build.name}"):
        for step in script:
            log.info(f"[{build.name}] {shlex.join(step)}")
            try:
                _run_step(step, build_dir)
            except BuildError as e:
                log.error(f"[{build.name}] {e}")
                return Constants.EXIT_FAILURE
    return Constants.EXIT_SUCCESS


def run_builds(
    builds: List[Build],
    run_fn: Callable[[Path, Build], int],
    manifest_dir=None,
) -> int:
    """Runs `run_fn(manifest_dir, build)` for every build, then reports.

    All builds are attempted even if some fail.

    Returns:
        0 if every build succeeded, 1 otherwise
    """
    manifest_dir = Path(manifest_dir) if manifest_dir else Path.cwd()
    failures = []
    for build in builds:
        if run_fn(manifest_dir, build) != 0:
            failures.append(build.name)

    summary = ["## Build results", ""]
    for build in builds:
        status = "FAILED" if build.name in failures else "passed"
        summary.append(f"* {build.name}: {status}")
    gha_append_step_summary("\n".join(summary))

    print(Constants.SEPARATOR_LINE)
    if failures:
        print(f"{len(failures)} of {len(builds)} builds failed: {', '.join(failures)}")
        return Constants.EXIT_FAILURE
    print(f"All {len(builds)} builds passed")
    return Constants.EXIT_SUCCESS
