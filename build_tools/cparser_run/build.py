#!/usr/bin/env python3
"""
Parse builds.yml and run the l4v C Parser test on each of the build definitions.

Runs inside the cparser-run docker image (see steps.sh), from the directory
the sel4test manifest was checked out into.

Example usage:

    python build.py                  # run all builds
    python build.py --builds X64,TX2 # run a subset
    python build.py --dump           # print the parsed build definitions
"""

import argparse
import os
from pathlib import Path
from pprint import pprint
import sys
from typing import List

sys.path.insert(0, str(Path(__file__).parent.parent))

from github_actions.utils.constants import Constants
from github_actions.utils.exceptions import ConfigurationError
from github_actions.utils.logger import log, set_log_level
from sel4_platforms.builds import (
    Build,
    filter_builds,
    load_builds,
    run_build_script,
    run_builds,
)

BUILDS_YML = Path(__file__).parent / "builds.yml"
C_PARSER = "/c-parser/standalone-parser/c-parser"


def cparser_script(build: Build) -> List[List[str]]:
    if not build.l4v_arch:
        raise ConfigurationError(f"Build {build.name} has no l4v_arch")
    return [
        ["../init-build.sh"] + build.settings_args(),
        ["ninja", "kernel_all_pp_wrapper"],
        [C_PARSER, build.l4v_arch, "--underscore_idents", "kernel/kernel_all_pp.c"],
    ]


def run_cparser(manifest_dir, build: Build) -> int:
    """Single run of the C Parser test, for one build definition"""
    try:
        script = cparser_script(build)
    except ConfigurationError as e:
        log.error(str(e))
        return Constants.EXIT_FAILURE
    return run_build_script(manifest_dir, build, script)


def main(argv: List[str]) -> int:
    p = argparse.ArgumentParser(
        prog="build.py",
        description="Run the l4v C Parser test for seL4 build definitions",
    )
    p.add_argument("--dump", action="store_true", help="Print builds and exit")
    p.add_argument(
        "--builds",
        type=str,
        default=os.getenv(Constants.ENV_BUILD_FILTER, ""),
        help="Comma-separated build names to run (default: all, or $BUILD_FILTER)",
    )
    p.add_argument(
        "--builds-yml", type=str, default=str(BUILDS_YML), help="Build definitions file"
    )
    p.add_argument(
        "--manifest-dir",
        type=str,
        default=os.getcwd(),
        help="Directory the manifest was checked out into",
    )
    p.add_argument("--log-level", type=str, default=Constants.DEFAULT_LOG_LEVEL)
    args = p.parse_args(argv)

    set_log_level(args.log_level)

    try:
        builds = load_builds(args.builds_yml)
        builds = filter_builds(builds, args.builds.split(","))
    except (ConfigurationError, FileNotFoundError) as e:
        log.error(str(e))
        return Constants.EXIT_FAILURE

    if args.dump:
        pprint(builds)
        return Constants.EXIT_SUCCESS

    # by default, run all builds from builds.yml
    return run_builds(builds, run_cparser, manifest_dir=args.manifest_dir)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
