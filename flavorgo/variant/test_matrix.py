#!/usr/bin/env python3
"""
Tests for variant matrix resolution.

Run with: python3 -m pytest flavorgo/variant/test_matrix.py
"""

import os
import tempfile
import unittest

from flavorgo.variant.errors import (
    ConfigMissingError,
    DuplicateVariantCodeError,
    VersionFieldMissingError,
)
from flavorgo.variant.matrix import VariantMatrixBuilder
from flavorgo.variant.project import FLAVORS, Flavor, load_project_config

APP_METADATA = (
    "PACKAGE_NAME=com.example.app\n"
    "VERSION_NAME=1.2.0\n"
    "VERSION_CODE=40\n"
)


class MatrixTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.project_dir = self.tmp.name
        self.write("FLAVORGO.toml", '[project]\nname = "myapp"\ndisplay_name = "MA"\n')
        self.write("project.properties", APP_METADATA)

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, name, text):
        with open(os.path.join(self.project_dir, name), "w") as f:
            f.write(text)

    def builder(self, environ=None, flavors=FLAVORS):
        config = load_project_config(self.project_dir, environ or {})
        return VariantMatrixBuilder(config, flavors=flavors)


class TestVariantMatrixBuilder(MatrixTestCase):

    def test_full_matrix(self):
        plan = self.builder().build()
        self.assertIsNone(plan.target_abi)
        self.assertEqual([v.flavor for v in plan.variants], [f.name for f in FLAVORS])

        oss = plan.variant("oss")
        self.assertEqual(oss.application_id, "com.example.app")
        self.assertEqual(oss.version_code, 40)
        self.assertEqual(oss.version_name, "1.2.0")
        self.assertEqual(oss.enabled_architectures, ("arm64-v8a", "armeabi-v7a", "x86_64", "x86"))
        self.assertEqual(oss.output_file_name, "MA-1.2.0.apk")
        self.assertEqual(oss.name, "ossRelease")

        arm64 = plan.variant("fdroidArm64")
        self.assertEqual(arm64.version_code, 39)
        self.assertEqual(arm64.version_name, "1.2.0-arm64")
        self.assertEqual(arm64.enabled_architectures, ("arm64-v8a",))
        self.assertEqual(arm64.output_file_name, "MA-1.2.0-arm64-fdroidArm64-arm64-v8a.apk")

        self.assertEqual(plan.variant("fdroidArm").version_code, 38)

    def test_codes_strictly_decrease(self):
        plan = self.builder().build()
        codes = [v.version_code for v in plan.variants]
        self.assertEqual(codes, [40, 39, 38, 37, 36])

    def test_single_task_narrows(self):
        plan = self.builder().build(["assembleArm64Release"])
        self.assertEqual(plan.target_abi, "arm64-v8a")
        self.assertEqual([v.flavor for v in plan.variants], ["oss", "fdroidArm64"])
        self.assertEqual(plan.variant("oss").enabled_architectures, ("arm64-v8a",))
        self.assertEqual(plan.variant("oss").output_file_name, "MA-1.2.0-arm64-v8a.apk")

    def test_abi_filters_restrict_matrix(self):
        self.write(
            "FLAVORGO.toml",
            '[project]\nname = "myapp"\ndisplay_name = "MA"\n'
            '\n[android]\nabi_filters = ["x86", "arm64-v8a"]\n',
        )
        plan = self.builder().build()
        self.assertEqual([v.flavor for v in plan.variants], ["oss", "fdroidArm64", "fdroidX86"])
        self.assertEqual(plan.variant("oss").enabled_architectures, ("arm64-v8a", "x86"))
        self.assertEqual(plan.variant("fdroidX86").version_code, 36)

    def test_narrowing_to_filtered_out_abi(self):
        self.write(
            "FLAVORGO.toml",
            '[project]\nname = "myapp"\n\n[android]\nabi_filters = ["arm64-v8a"]\n',
        )
        plan = self.builder().build(["assembleX86Release"])
        self.assertEqual(plan.target_abi, "x86")
        self.assertEqual(plan.variants, ())

    def test_multiple_tasks_keep_full_matrix(self):
        plan = self.builder().build(["assembleX86Release", "check"])
        self.assertIsNone(plan.target_abi)
        self.assertEqual(len(plan.variants), len(FLAVORS))

    def test_signing_shared_across_matrix(self):
        plan = self.builder({"KEYSTORE_PASS": "store", "ALIAS_NAME": "a"}).build()
        self.assertEqual(plan.signing_identity.name, "release")
        self.assertEqual(plan.signing_identity.store_location,
                         os.path.join(self.project_dir, "release.keystore"))
        for variant in plan.variants:
            self.assertIs(variant.signing_identity, plan.signing_identity)

    def test_local_properties_signing(self):
        self.write("local.properties", "KEYSTORE_PASS=store\n")
        plan = self.builder().build()
        self.assertFalse(plan.signing_identity.is_debug)

    def test_debug_signing_fallback(self):
        plan = self.builder().build()
        self.assertTrue(plan.signing_identity.is_debug)

    def test_debug_build_type(self):
        plan = self.builder({"KEYSTORE_PASS": "store"}).build(build_type="debug")
        self.assertTrue(plan.signing_identity.is_debug)
        self.assertEqual(plan.variant("oss").output_file_name, "MA-1.2.0-debug.apk")
        self.assertEqual(plan.variant("oss").name, "ossDebug")

    def test_invalid_build_type(self):
        with self.assertRaises(ValueError):
            self.builder().build(build_type="profile")

    def test_publishing_detected(self):
        plan = self.builder({"ANDROID_PUBLISHER_CREDENTIALS": "{}"}).build()
        self.assertTrue(plan.publishing.enabled)

    def test_to_dict(self):
        data = self.builder().build(["assembleX64Release"]).to_dict()
        self.assertEqual(data["project"], {"name": "myapp", "kind": "app"})
        self.assertEqual(data["target_abi"], "x86_64")
        self.assertEqual(data["signing"]["name"], "debug")
        self.assertEqual([v["flavor"] for v in data["variants"]], ["oss", "fdroidX64"])


class TestVariantMatrixErrors(MatrixTestCase):

    def test_missing_metadata_file(self):
        os.remove(os.path.join(self.project_dir, "project.properties"))
        with self.assertRaises(ConfigMissingError):
            self.builder().build()

    def test_missing_version_code(self):
        self.write("project.properties", "PACKAGE_NAME=com.example.app\nVERSION_NAME=1.0\n")
        with self.assertRaises(VersionFieldMissingError):
            self.builder().build()

    def test_duplicate_codes_halt(self):
        flavors = FLAVORS + (Flavor("expert"),)
        with self.assertRaises(DuplicateVariantCodeError) as ctx:
            self.builder(flavors=flavors).build()
        app_id, code, names = ctx.exception.collisions[0]
        self.assertEqual((app_id, code), ("com.example.app", 40))
        self.assertEqual(names, ("oss", "expert"))


class TestPluginMatrix(MatrixTestCase):

    def setUp(self):
        super().setUp()
        self.write("FLAVORGO.toml", '[project]\nname = "naive"\nkind = "plugin"\n')
        self.write(
            "project.properties",
            "PACKAGE_NAME=com.example.app\nNAIVE_VERSION_NAME=107.0.0\nNAIVE_VERSION=3\n",
        )

    def test_plugin_plan(self):
        plan = self.builder().build()
        oss = plan.variant("oss")
        self.assertEqual(oss.application_id, "com.example.app.plugin.naive")
        self.assertEqual(oss.version_code, 15)
        self.assertEqual(oss.output_file_name, "naive-plugin-107.0.0.apk")
        self.assertEqual(plan.variant("fdroidX86").version_code, 11)


if __name__ == "__main__":
    unittest.main()
