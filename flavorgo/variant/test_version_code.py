#!/usr/bin/env python3
"""
Tests for version code allocation.

Run with: python3 -m pytest flavorgo/variant/test_version_code.py
"""

import unittest

from flavorgo.variant.errors import VersionFieldMissingError
from flavorgo.variant.metadata import Metadata
from flavorgo.variant.project import FLAVORS, AppProject, PluginProject
from flavorgo.variant.version_code import (
    VersionSpec,
    adjust_base_code,
    allocate_version_codes,
    version_name,
)


class TestVersionSpec(unittest.TestCase):
    """Test the code formula."""

    def test_formula(self):
        spec = VersionSpec(base_code=42, skip_offset=40, flavor_delta=-2)
        self.assertEqual(spec.adjusted_base, 50)
        self.assertEqual(spec.final_code, 48)

    def test_plugin_has_no_skip(self):
        self.assertEqual(adjust_base_code(7, 0), 35)


class TestAllocateVersionCodes(unittest.TestCase):
    """Test per-flavor codes."""

    def setUp(self):
        self.app = AppProject(name="myapp", display_name="myapp")

    def test_first_release_of_scheme(self):
        codes = allocate_version_codes(self.app, Metadata({"VERSION_CODE": "40"}), FLAVORS)
        self.assertEqual(codes["oss"], 40)
        self.assertEqual(codes["fdroidArm64"], 39)
        self.assertEqual(codes["fdroidArm"], 38)

    def test_universal_is_highest_and_splits_decrease(self):
        codes = allocate_version_codes(self.app, Metadata({"VERSION_CODE": "57"}), FLAVORS)
        ordered = [codes[flavor.name] for flavor in FLAVORS]
        self.assertEqual(ordered, sorted(ordered, reverse=True))
        self.assertEqual(len(set(ordered)), len(ordered))

    def test_releases_do_not_overlap(self):
        older = allocate_version_codes(self.app, Metadata({"VERSION_CODE": "41"}), FLAVORS)
        newer = allocate_version_codes(self.app, Metadata({"VERSION_CODE": "42"}), FLAVORS)
        self.assertLess(max(older.values()), min(newer.values()))

    def test_plugin_codes(self):
        plugin = PluginProject(name="naive")
        codes = allocate_version_codes(plugin, Metadata({"NAIVE_VERSION": "3"}), FLAVORS)
        self.assertEqual(codes["oss"], 15)
        self.assertEqual(codes["fdroidX86"], 11)

    def test_missing_version_key(self):
        with self.assertRaises(VersionFieldMissingError):
            allocate_version_codes(self.app, Metadata({}), FLAVORS)

    def test_non_numeric_version_key(self):
        plugin = PluginProject(name="naive")
        with self.assertRaises(VersionFieldMissingError):
            allocate_version_codes(plugin, Metadata({"NAIVE_VERSION": "3a"}), FLAVORS)


class TestVersionName(unittest.TestCase):
    """Test flavor version name suffixes."""

    def test_suffix_appended(self):
        app = AppProject(name="myapp", display_name="myapp")
        metadata = Metadata({"VERSION_NAME": "1.2.0"})
        self.assertEqual(version_name(app, metadata, FLAVORS[0]), "1.2.0")
        self.assertEqual(version_name(app, metadata, FLAVORS[1]), "1.2.0-arm64")

    def test_plugin_key(self):
        plugin = PluginProject(name="naive")
        metadata = Metadata({"NAIVE_VERSION_NAME": "107.0.0"})
        self.assertEqual(version_name(plugin, metadata, FLAVORS[3]), "107.0.0-x64")


if __name__ == "__main__":
    unittest.main()
