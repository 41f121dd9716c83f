#!/usr/bin/env python3
"""
Unit tests for the C Parser run driver (cparser_run/build.py).
"""

import io
import os
import sys
import unittest
from pathlib import Path
from unittest import mock

sys.path.insert(0, os.fspath(Path(__file__).parent.parent))

from cparser_run import build as cparser_build
from sel4_platforms.builds import Build, load_builds
from sel4_platforms.platforms import get_platform


class CParserRunTest(unittest.TestCase):
    def setUp(self):
        self.builds = load_builds(cparser_build.BUILDS_YML)
        self.stdout = io.StringIO()
        patcher = mock.patch("sys.stdout", self.stdout)
        patcher.start()
        self.addCleanup(patcher.stop)

    def get_build(self, name: str) -> Build:
        return next(b for b in self.builds if b.name == name)

    def test_shipped_builds(self):
        names = [b.name for b in self.builds]
        self.assertEqual(names[0], "Loongarch64")
        self.assertIn("X64VTX", names)
        self.assertEqual(len(names), 11)
        self.assertTrue(all(b.settings["VERIFICATION"] == "TRUE" for b in self.builds))
        self.assertTrue(all(b.l4v_arch for b in self.builds))

    def test_cparser_script(self):
        script = cparser_build.cparser_script(self.get_build("X64VTX"))
        self.assertEqual(
            script,
            [
                [
                    "../init-build.sh",
                    "-DVERIFICATION=TRUE",
                    "-DPLATFORM=x86_64",
                    "-DKernelSel4Arch=x86_64",
                    "-DKernelVTX=TRUE",
                ],
                ["ninja", "kernel_all_pp_wrapper"],
                [
                    "/c-parser/standalone-parser/c-parser",
                    "X64",
                    "--underscore_idents",
                    "kernel/kernel_all_pp.c",
                ],
            ],
        )

    def test_cparser_script_uses_word_size_arch(self):
        script = cparser_build.cparser_script(self.get_build("RISCV32"))
        self.assertEqual(script[2][1], "ARM")

    def test_run_cparser_without_l4v_arch(self):
        build = Build(name="NOARCH", platform=get_platform("TX2"), mode=64)
        with mock.patch.object(cparser_build, "run_build_script") as run_script:
            rc = cparser_build.run_cparser("/tmp", build)
        self.assertEqual(rc, 1)
        run_script.assert_not_called()

    def test_run_cparser(self):
        build = self.get_build("AARCH64")
        with mock.patch.object(
            cparser_build, "run_build_script", return_value=0
        ) as run_script:
            rc = cparser_build.run_cparser("/manifest", build)
        self.assertEqual(rc, 0)
        run_script.assert_called_once_with(
            "/manifest", build, cparser_build.cparser_script(build)
        )

    def test_main_dump(self):
        rc = cparser_build.main(["--dump", "--builds", "TX2"])
        self.assertEqual(rc, 1)
        rc = cparser_build.main(["--dump", "--builds", "AARCH64,X64"])
        self.assertEqual(rc, 0)
        self.assertIn("name='AARCH64'", self.stdout.getvalue())
        self.assertIn("name='X64'", self.stdout.getvalue())
        self.assertNotIn("name='IA32'", self.stdout.getvalue())

    def test_main_runs_selected_builds(self):
        with mock.patch.object(cparser_build, "run_builds", return_value=0) as run:
            rc = cparser_build.main(["--builds", "IA32", "--manifest-dir", "/m"])
        self.assertEqual(rc, 0)
        builds, run_fn = run.call_args.args
        self.assertEqual([b.name for b in builds], ["IA32"])
        self.assertIs(run_fn, cparser_build.run_cparser)
        self.assertEqual(run.call_args.kwargs, {"manifest_dir": "/m"})

    def test_main_missing_builds_file(self):
        rc = cparser_build.main(["--builds-yml", "/nonexistent/builds.yml"])
        self.assertEqual(rc, 1)


if __name__ == "__main__":
    unittest.main()
