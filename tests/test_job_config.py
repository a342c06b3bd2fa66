#!/usr/bin/env python3

import dataclasses
import os
import sys
import tempfile
import unittest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

from vcrlib.core.errors import DirectoryCreateFailed
from vcrlib.core.errors import InvalidOutputExtension
from vcrlib.core.errors import InvalidOutputPath
from vcrlib.core.errors import NoSuchJob
from vcrlib.core.loader import JobLoader

#============================================

def _make_loader(tmpdir: str, output_path: str, **kwargs) -> JobLoader:
	"""Build a loader with fixed capture devices.

	Args:
		tmpdir: Parent directory for job directories.
		output_path: Requested output file.
	"""
	return JobLoader(output_path, video_source="/dev/video1",
		audio_source="hw:1,0", tmpdir=tmpdir, **kwargs)

#============================================

class JobConfigTest(unittest.TestCase):
	#============================================
	def test_new_job_creates_stamped_directory(self) -> None:
		"""Ensure a fresh job gets {name}-{stamp} under the tmpdir."""
		with tempfile.TemporaryDirectory() as temp_dir:
			output_path = os.path.join(temp_dir, "out", "tape.mp4")
			config = _make_loader(temp_dir, output_path, timestamp="1700000000").load()
			expected = os.path.join(temp_dir, "tape.mp4-1700000000")
			self.assertEqual(config.work_dir, expected)
			self.assertTrue(os.path.isdir(expected))
			self.assertEqual(config.output_name, "tape.mp4")
			self.assertEqual(config.job_id, "1700000000")
			self.assertEqual(config.output_path, output_path)
			self.assertIsNone(config.duration)

	#============================================
	def test_bad_extension_creates_nothing(self) -> None:
		"""Ensure a non-mp4 output is rejected before any directory exists."""
		with tempfile.TemporaryDirectory() as temp_dir:
			for output_path in ("tape.mkv", "tape", "tape.mp4.bak"):
				with self.assertRaises(InvalidOutputExtension):
					_make_loader(temp_dir, output_path, timestamp="1").load()
			self.assertEqual(os.listdir(temp_dir), [])

	#============================================
	def test_uppercase_extension_is_rejected(self) -> None:
		"""Ensure only a lower case .mp4 extension is accepted."""
		with tempfile.TemporaryDirectory() as temp_dir:
			for output_path in ("TAPE.MP4", "tape.Mp4"):
				with self.assertRaises(InvalidOutputExtension):
					_make_loader(temp_dir, output_path, timestamp="5").load()
			self.assertEqual(os.listdir(temp_dir), [])

	#============================================
	def test_validate_touches_nothing(self) -> None:
		"""Ensure validation alone returns the name and creates no directory."""
		with tempfile.TemporaryDirectory() as temp_dir:
			parent = os.path.join(temp_dir, "jobs")
			loader = _make_loader(parent, "out/tape.mp4", timestamp="5")
			self.assertEqual(loader.validate(), "tape.mp4")
			self.assertFalse(os.path.exists(parent))
			with self.assertRaises(InvalidOutputExtension):
				_make_loader(parent, "tape.avi").validate()
			self.assertFalse(os.path.exists(parent))

	#============================================
	def test_missing_file_name_is_rejected(self) -> None:
		"""Ensure a directory-like output path is rejected."""
		with tempfile.TemporaryDirectory() as temp_dir:
			with self.assertRaises(InvalidOutputPath):
				_make_loader(temp_dir, "videos/", timestamp="1").load()
			self.assertEqual(os.listdir(temp_dir), [])

	#============================================
	def test_resume_requires_existing_job(self) -> None:
		"""Ensure resuming an unknown job fails without creating it."""
		with tempfile.TemporaryDirectory() as temp_dir:
			with self.assertRaises(NoSuchJob):
				_make_loader(temp_dir, "tape.mp4", resume="1234").load()
			with self.assertRaises(NoSuchJob):
				_make_loader(temp_dir, "tape.mp4", resume="").load()
			self.assertEqual(os.listdir(temp_dir), [])

	#============================================
	def test_resume_finds_existing_job(self) -> None:
		"""Ensure the resume id maps back to the job directory."""
		with tempfile.TemporaryDirectory() as temp_dir:
			first = _make_loader(temp_dir, "tape.mp4", timestamp="1234").load()
			second = _make_loader(temp_dir, "tape.mp4", resume="1234").load()
			self.assertEqual(first.work_dir, second.work_dir)
			self.assertEqual(second.job_id, "1234")

	#============================================
	def test_collision_fails_to_create(self) -> None:
		"""Ensure an existing directory for the same stamp is not reused."""
		with tempfile.TemporaryDirectory() as temp_dir:
			_make_loader(temp_dir, "tape.mp4", timestamp="42").load()
			with self.assertRaises(DirectoryCreateFailed):
				_make_loader(temp_dir, "tape.mp4", timestamp="42").load()

	#============================================
	def test_missing_parent_fails_to_create(self) -> None:
		"""Ensure only the job directory itself is ever created."""
		with tempfile.TemporaryDirectory() as temp_dir:
			parent = os.path.join(temp_dir, "missing")
			with self.assertRaises(DirectoryCreateFailed):
				_make_loader(parent, "tape.mp4", timestamp="42").load()
			self.assertFalse(os.path.exists(parent))

	#============================================
	def test_config_is_immutable(self) -> None:
		"""Ensure a loaded config cannot be changed."""
		with tempfile.TemporaryDirectory() as temp_dir:
			config = _make_loader(temp_dir, "tape.mp4", timestamp="7",
				duration="00:00:30").load()
			self.assertEqual(config.duration, "00:00:30")
			with self.assertRaises(dataclasses.FrozenInstanceError):
				config.duration = "10"

#============================================

def main() -> None:
	"""Run the unit tests."""
	unittest.main()

#============================================

if __name__ == "__main__":
	main()
