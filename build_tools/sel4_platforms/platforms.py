"""
Hardware and simulation platform table for seL4 builds.

Parses platforms.yml, which lists every platform the CI knows about together
with its architecture, supported word sizes (modes) and the machines it is
tested on. Build definitions (see builds.py) refer to platforms by key.
"""

from dataclasses import dataclass, field
from pathlib import Path
import sys
from typing import Dict, List, Optional

sys.path.insert(0, str(Path(__file__).parent.parent))

from github_actions.utils.config import ConfigParser, PLATFORMS_SCHEMA
from github_actions.utils.exceptions import ConfigurationError
from github_actions.utils.logger import log

DEFAULT_PLATFORMS_YML = Path(__file__).parent / "platforms.yml"


@dataclass
class Platform:
    """A hardware or simulation platform the kernel can be built for."""

    name: str
    arch: str
    modes: List[int]
    platform: str  # value for the PLATFORM cmake setting
    smp: List[int] = field(default_factory=list)  # modes with SMP support
    aarch_hyp: List[int] = field(default_factory=list)  # modes with hyp support
    image_platform: Optional[str] = None  # name used in image files, if different
    simulation_binary: Optional[str] = None
    march: Optional[str] = None
    req: List[str] = field(default_factory=list)  # test machines
    disabled: bool = False  # no hardware test
    no_hw_build: bool = False  # no hardware build

    def has_mode(self, mode: int) -> bool:
        return mode in self.modes

    def can_smp(self, mode: int) -> bool:
        return mode in self.smp

    def can_aarch_hyp(self, mode: int) -> bool:
        return mode in self.aarch_hyp

    def get_image_platform(self) -> str:
        return self.image_platform or self.platform

    def get_mode(self) -> Optional[int]:
        """The only supported mode, or None if the platform has several."""
        if len(self.modes) == 1:
            return self.modes[0]
        return None

    def can_simulate(self) -> bool:
        return self.simulation_binary is not None


@dataclass
class PlatformTable:
    """All platforms from one platforms.yml."""

    modes: List[int]
    architectures: List[str]
    platforms: Dict[str, Platform]
    mcs_unsupported_platforms: List[str] = field(default_factory=list)

    def get_platform(self, name: str) -> Platform:
        try:
            return self.platforms[name]
        except KeyError:
            raise ConfigurationError(
                f"Unknown platform '{name}'. Known platforms: "
                f"{', '.join(sorted(self.platforms))}"
            )

    def supports_mcs(self, name: str) -> bool:
        return name not in self.mcs_unsupported_platforms

    def hw_build_platforms(self) -> List[Platform]:
        return [p for p in self.platforms.values() if not p.no_hw_build]

    def hw_test_platforms(self) -> List[Platform]:
        return [p for p in self.platforms.values() if not p.disabled]


def _platform_from_dict(name: str, data: dict) -> Platform:
    return Platform(
        name=name,
        arch=data["arch"],
        modes=list(data["modes"]),
        platform=data["platform"],
        # null entries in the YAML mean "empty" / "false"
        smp=list(data.get("smp") or []),
        aarch_hyp=list(data.get("aarch_hyp") or []),
        image_platform=data.get("image_platform"),
        simulation_binary=data.get("simulation_binary"),
        march=data.get("march"),
        req=list(data.get("req") or []),
        disabled=bool(data.get("disabled")),
        no_hw_build=bool(data.get("no_hw_build")),
    )


def _check_consistency(table: PlatformTable):
    """Cross-field checks the JSON schema cannot express."""
    for p in table.platforms.values():
        if p.arch not in table.architectures:
            raise ConfigurationError(
                f"Platform {p.name}: unknown arch '{p.arch}', "
                f"expected one of {table.architectures}"
            )
        for mode in p.modes:
            if mode not in table.modes:
                raise ConfigurationError(f"Platform {p.name}: unknown mode {mode}")
        for attr in ("smp", "aarch_hyp"):
            extra = set(getattr(p, attr)) - set(p.modes)
            if extra:
                raise ConfigurationError(
                    f"Platform {p.name}: {attr} modes {sorted(extra)} not in {p.modes}"
                )
    for name in table.mcs_unsupported_platforms:
        if name not in table.platforms:
            raise ConfigurationError(f"mcs_unsupported_platforms: unknown platform '{name}'")


def load_platforms(yml_path=DEFAULT_PLATFORMS_YML) -> PlatformTable:
    """Loads and validates a platforms.yml file.

    Raises:
        FileNotFoundError: if the file does not exist
        ConfigurationError: if the file is not a valid platform table
    """
    config = ConfigParser(str(yml_path), schema=PLATFORMS_SCHEMA, expand_env_vars=False)
    data = config.get_config()

    table = PlatformTable(
        modes=list(data["modes"]),
        architectures=list(data["architectures"]),
        platforms={
            str(name): _platform_from_dict(str(name), p)
            for name, p in data["platforms"].items()
        },
        mcs_unsupported_platforms=[str(n) for n in data.get("mcs_unsupported_platforms") or []],
    )
    _check_consistency(table)
    log.debug(f"Loaded {len(table.platforms)} platforms from {yml_path}")
    return table


_default_table: Optional[PlatformTable] = None


def get_platforms() -> PlatformTable:
    """The platform table from the platforms.yml next to this file (loaded once)."""
    global _default_table
    if _default_table is None:
        _default_table = load_platforms(DEFAULT_PLATFORMS_YML)
    return _default_table


def get_platform(name: str) -> Platform:
    return get_platforms().get_platform(name)
