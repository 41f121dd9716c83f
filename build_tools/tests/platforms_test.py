#!/usr/bin/env python3
"""
Unit tests for the sel4_platforms.platforms module.
"""

import os
import sys
import tempfile
import textwrap
import unittest
from pathlib import Path

sys.path.insert(0, os.fspath(Path(__file__).parent.parent))

from github_actions.utils.exceptions import ConfigurationError
from sel4_platforms.platforms import (
    Platform,
    get_platform,
    get_platforms,
    load_platforms,
)


class PlatformTableTest(unittest.TestCase):
    """Test cases for loading platforms.yml."""

    def setUp(self):
        with tempfile.NamedTemporaryFile(
            mode="w", suffix=".yml", delete=False
        ) as temp_file:
            self.yml_path = temp_file.name

    def tearDown(self):
        if os.path.exists(self.yml_path):
            os.unlink(self.yml_path)

    def write_platforms(self, content: str):
        with open(self.yml_path, "w") as f:
            f.write(textwrap.dedent(content))

    def test_minimal_table(self):
        self.write_platforms(
            """
            modes: [32, 64]
            architectures: [arm, x86]
            platforms:
              SABRE:
                arch: arm
                modes: [32]
                smp: [32]
                platform: sabre
                image_platform: imx6
                req: [sabre, sabre4]
              PC99:
                arch: x86
                modes: [32, 64]
                platform: x86_64
                smp:
                disabled: true
            """
        )
        table = load_platforms(self.yml_path)
        self.assertEqual(list(table.platforms), ["SABRE", "PC99"])

        sabre = table.get_platform("SABRE")
        self.assertEqual(sabre.arch, "arm")
        self.assertEqual(sabre.get_mode(), 32)
        self.assertTrue(sabre.can_smp(32))
        self.assertFalse(sabre.can_aarch_hyp(32))
        self.assertEqual(sabre.get_image_platform(), "imx6")
        self.assertEqual(sabre.req, ["sabre", "sabre4"])
        self.assertFalse(sabre.disabled)

        pc99 = table.get_platform("PC99")
        self.assertIsNone(pc99.get_mode())
        self.assertEqual(pc99.smp, [])
        self.assertEqual(pc99.get_image_platform(), "x86_64")
        self.assertTrue(pc99.disabled)
        self.assertFalse(pc99.can_simulate())
        self.assertEqual(table.hw_test_platforms(), [sabre])
        self.assertEqual(table.hw_build_platforms(), [sabre, pc99])
        self.assertEqual(table.mcs_unsupported_platforms, [])

    def test_unknown_platform(self):
        self.write_platforms(
            """
            modes: [32]
            architectures: [arm]
            platforms:
              SABRE: {arch: arm, modes: [32], platform: sabre}
            """
        )
        table = load_platforms(self.yml_path)
        with self.assertRaises(ConfigurationError):
            table.get_platform("NOPE")

    def test_missing_required_field(self):
        self.write_platforms(
            """
            modes: [32]
            architectures: [arm]
            platforms:
              SABRE: {arch: arm, modes: [32]}
            """
        )
        with self.assertRaises(ConfigurationError):
            load_platforms(self.yml_path)

    def test_unknown_field(self):
        self.write_platforms(
            """
            modes: [32]
            architectures: [arm]
            platforms:
              SABRE: {arch: arm, modes: [32], platform: sabre, colour: red}
            """
        )
        with self.assertRaises(ConfigurationError):
            load_platforms(self.yml_path)

    def test_unknown_arch(self):
        self.write_platforms(
            """
            modes: [32]
            architectures: [arm]
            platforms:
              SPIKE32: {arch: riscv, modes: [32], platform: spike}
            """
        )
        with self.assertRaises(ConfigurationError):
            load_platforms(self.yml_path)

    def test_smp_mode_not_supported(self):
        self.write_platforms(
            """
            modes: [32, 64]
            architectures: [arm]
            platforms:
              TX2: {arch: arm, modes: [64], smp: [32], platform: tx2}
            """
        )
        with self.assertRaises(ConfigurationError):
            load_platforms(self.yml_path)

    def test_unknown_mcs_unsupported_platform(self):
        self.write_platforms(
            """
            modes: [64]
            architectures: [arm]
            platforms:
              TX2: {arch: arm, modes: [64], platform: tx2}
            mcs_unsupported_platforms:
            - TX1
            """
        )
        with self.assertRaises(ConfigurationError):
            load_platforms(self.yml_path)

    def test_empty_file(self):
        self.write_platforms("")
        with self.assertRaises(ConfigurationError):
            load_platforms(self.yml_path)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_platforms(self.yml_path + ".missing")


class DefaultPlatformsTest(unittest.TestCase):
    """The platforms.yml shipped with the repository."""

    def test_shipped_table_is_valid(self):
        table = get_platforms()
        self.assertIn("PC99", table.platforms)
        self.assertIs(get_platforms(), table)

    def test_known_platforms(self):
        pc99 = get_platform("PC99")
        self.assertIsInstance(pc99, Platform)
        self.assertEqual(pc99.arch, "x86")
        self.assertEqual(pc99.modes, [32, 64])
        self.assertTrue(pc99.can_smp(64))

        tx2 = get_platform("TX2")
        self.assertTrue(tx2.can_aarch_hyp(64))
        self.assertEqual(tx2.get_mode(), 64)

        loongarch = get_platform("3A5000")
        self.assertEqual(loongarch.arch, "Loongarch64")
        self.assertTrue(loongarch.no_hw_build)

    def test_mcs_support(self):
        table = get_platforms()
        self.assertFalse(table.supports_mcs("ZYNQ7000"))
        self.assertTrue(table.supports_mcs("PC99"))


if __name__ == "__main__":
    unittest.main()
