"""Tests for the package root exports."""

from __future__ import annotations

import editflow


class TestPackageRoot:
    def test_exports_library_entry_points(self):
        assert editflow.SubmissionController is not None
        assert editflow.RemoteMutationSequence is not None
        assert editflow.__version__ == "0.1.0"

    def test_cli_not_exported_from_root(self):
        assert "cli" not in editflow.__all__
