#!/usr/bin/env python3
"""Tests for package version lookup."""
import os
import tempfile
import unittest
from importlib import metadata
from pathlib import Path
from unittest import mock

import pycqlsh


class VersionTests(unittest.TestCase):

    def test_version_is_a_string(self):
        self.assertTrue(pycqlsh.__version__)

    def test_falls_back_to_source_tree(self):
        with mock.patch.object(pycqlsh.metadata, "version", side_effect=metadata.PackageNotFoundError):
            with mock.patch.object(pycqlsh, "_source_tree_version", return_value="9.9.9"):
                self.assertEqual(pycqlsh._installed_version(), "9.9.9")

    def test_source_tree_without_pyproject(self):
        with tempfile.TemporaryDirectory() as tmp:
            fake_module = os.path.join(tmp, "pkg", "__init__.py")
            with mock.patch.object(pycqlsh, "__file__", fake_module):
                self.assertEqual(pycqlsh._source_tree_version(), pycqlsh.DEV_VERSION)

    def test_source_tree_reads_pyproject(self):
        with tempfile.TemporaryDirectory() as tmp:
            Path(tmp, "pyproject.toml").write_text('[project]\nname = "x"\nversion = "1.2.3"\n', encoding="utf-8")
            with mock.patch.object(pycqlsh, "__file__", os.path.join(tmp, "pkg", "__init__.py")):
                self.assertEqual(pycqlsh._source_tree_version(), "1.2.3")


if __name__ == "__main__":
    unittest.main()
