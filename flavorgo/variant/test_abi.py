#!/usr/bin/env python3
"""
Tests for architecture split selection.

Run with: python3 -m pytest flavorgo/variant/test_abi.py
"""

import unittest

from flavorgo.variant.abi import enabled_architectures, select_target_abi
from flavorgo.variant.project import ARCHITECTURES


class TestSelectTargetAbi(unittest.TestCase):

    def test_arm64(self):
        self.assertEqual(select_target_abi(["assembleArm64Release"]), "arm64-v8a")

    def test_arm(self):
        self.assertEqual(select_target_abi(["assembleFdroidArmRelease"]), "armeabi-v7a")

    def test_x64(self):
        self.assertEqual(select_target_abi([":app:assembleFdroidX64Release"]), "x86_64")

    def test_x86_is_not_x64(self):
        self.assertEqual(select_target_abi(["assembleX86Debug"]), "x86")

    def test_case_insensitive(self):
        self.assertEqual(select_target_abi(["ASSEMBLEARM64"]), "arm64-v8a")

    def test_multiple_tasks_never_narrow(self):
        self.assertIsNone(select_target_abi(["assembleRelease", "check"]))
        self.assertIsNone(select_target_abi(["assembleArm64Release", "check"]))

    def test_no_tasks(self):
        self.assertIsNone(select_target_abi([]))

    def test_no_marker(self):
        self.assertIsNone(select_target_abi(["assembleOssRelease"]))


class TestEnabledArchitectures(unittest.TestCase):

    def test_full_matrix(self):
        self.assertEqual(enabled_architectures(ARCHITECTURES, None), ARCHITECTURES)

    def test_narrowed_excludes_others(self):
        self.assertEqual(enabled_architectures(ARCHITECTURES, "x86"), ("x86",))


if __name__ == "__main__":
    unittest.main()
