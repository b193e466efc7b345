"""
Pytest configuration for local imports.
"""

# Standard Library
import datetime
import os
import sys

# PIP3 modules
import pytest

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()


#============================================
@pytest.fixture
def fixed_now() -> datetime.datetime:
	"""
	Fixed batch timestamp, 2:05:09 PM on July 31 2025.
	"""
	return datetime.datetime(2025, 7, 31, 14, 5, 9)
