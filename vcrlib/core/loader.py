#!/usr/bin/env python3

import copy
import dataclasses
import os
import tempfile
import yaml
from vcrlib.core import utils
from vcrlib.core.errors import ConfigError
from vcrlib.core.errors import DirectoryCreateFailed
from vcrlib.core.errors import InvalidOutputExtension
from vcrlib.core.errors import InvalidOutputPath
from vcrlib.core.errors import NoSuchJob

#============================================

OUTPUT_EXTENSION = ".mp4"
DEFAULT_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".config", "vcr",
	"config.yaml")

#============================================

@dataclasses.dataclass(frozen=True)
class JobConfig():
	work_dir: str
	output_path: str
	output_name: str
	job_id: str
	video_source: str
	audio_source: str
	duration: str = None

#============================================

def default_settings() -> dict:
	"""
	Build the default settings dictionary.

	Returns:
		dict: Default settings values.
	"""
	return {
		'vcr': 1,
		'video': "/dev/video1",
		'audio': "hw:1,0",
		'tmpdir': os.path.join(tempfile.gettempdir(), "vcr"),
		'ffmpeg': "ffmpeg",
		'capture': {
			'standard': "NTSC",
			'framerate': "29.97",
			'thread_queue_size': 1024,
			'crf': 24,
			'audio_channels': 2,
			'deinterlace': "yadif",
		},
	}

#============================================

def load_settings(settings_path: str = None) -> dict:
	"""
	Load settings from a YAML file, overlaid on the defaults.

	A missing file at the default location yields the defaults. A missing
	file that was asked for explicitly is an error.

	Args:
		settings_path: Settings file path, or None for the default location.

	Returns:
		dict: Merged settings.
	"""
	settings = default_settings()
	explicit = settings_path is not None
	if settings_path is None:
		settings_path = DEFAULT_SETTINGS_PATH
	if not os.path.exists(settings_path):
		if explicit:
			raise ConfigError(f"config file not found: {settings_path}")
		return settings
	with open(settings_path, 'r', encoding='utf-8') as handle:
		try:
			data = yaml.safe_load(handle)
		except yaml.YAMLError as exc:
			raise ConfigError(f"config {settings_path}: invalid yaml: {exc}") from exc
	if not isinstance(data, dict):
		raise ConfigError(f"config {settings_path}: must be a mapping")
	if data.get('vcr') != 1:
		raise ConfigError(f"config {settings_path}: must set vcr: 1")
	return merge_settings(settings, data, settings_path)

#============================================

def merge_settings(settings: dict, data: dict, settings_path: str) -> dict:
	merged = copy.deepcopy(settings)
	for key in ('video', 'audio', 'tmpdir', 'ffmpeg'):
		value = data.get(key)
		if value is None:
			continue
		if not isinstance(value, str) or value == "":
			raise ConfigError(f"config {settings_path}: {key} must be a non-empty string")
		merged[key] = value
	capture = data.get('capture')
	if capture is None:
		return merged
	if not isinstance(capture, dict):
		raise ConfigError(f"config {settings_path}: capture must be a mapping")
	for key, value in capture.items():
		if key not in merged['capture']:
			raise ConfigError(f"config {settings_path}: unknown capture setting {key}")
		if key in ('thread_queue_size', 'crf', 'audio_channels'):
			if isinstance(value, bool) or not isinstance(value, int) or value < 0:
				raise ConfigError(
					f"config {settings_path}: capture.{key} must be a non-negative integer")
		merged['capture'][key] = value
	return merged

#============================================

class JobLoader():
	def __init__(self, output_path: str, video_source: str, audio_source: str,
		duration: str = None, resume: str = None, tmpdir: str = None,
		timestamp: str = None):
		self.output_path = output_path
		self.video_source = video_source
		self.audio_source = audio_source
		self.duration = duration
		self.resume = resume
		self.tmpdir = tmpdir
		if self.tmpdir is None:
			self.tmpdir = default_settings()['tmpdir']
		self.timestamp = timestamp

	#============================
	def validate(self) -> str:
		"""
		Check the output path without touching the filesystem.

		Returns:
			str: The output file name.
		"""
		output_name = self._parse_output_name(self.output_path)
		self._validate_extension(self.output_path)
		return output_name

	#============================
	def load(self) -> JobConfig:
		output_name = self.validate()
		if self.resume is None:
			(job_id, work_dir) = self._create_job_dir(output_name)
		else:
			(job_id, work_dir) = self._resume_job_dir(output_name, self.resume)
		return JobConfig(
			work_dir=work_dir,
			output_path=self.output_path,
			output_name=output_name,
			job_id=job_id,
			video_source=self.video_source,
			audio_source=self.audio_source,
			duration=self.duration,
		)

	#============================
	def _parse_output_name(self, output_path: str) -> str:
		if output_path is None:
			raise InvalidOutputPath(str(output_path))
		output_name = os.path.basename(output_path)
		if output_name == "":
			raise InvalidOutputPath(output_path)
		return output_name

	#============================
	def _validate_extension(self, output_path: str) -> None:
		extension = os.path.splitext(output_path)[1]
		if extension != OUTPUT_EXTENSION:
			raise InvalidOutputExtension(output_path, OUTPUT_EXTENSION)

	#============================
	def _create_job_dir(self, output_name: str) -> tuple:
		job_id = self.timestamp
		if job_id is None:
			job_id = utils.make_job_stamp()
		work_dir = job_dir_path(self.tmpdir, output_name, job_id)
		try:
			os.mkdir(work_dir)
		except OSError as exc:
			raise DirectoryCreateFailed(work_dir, exc.strerror or str(exc)) from exc
		return (job_id, work_dir)

	#============================
	def _resume_job_dir(self, output_name: str, resume: str) -> tuple:
		job_id = str(resume).strip()
		work_dir = job_dir_path(self.tmpdir, output_name, job_id)
		if job_id == "" or not os.path.isdir(work_dir):
			raise NoSuchJob(work_dir)
		return (job_id, work_dir)

#============================================

def job_dir_path(tmpdir: str, output_name: str, job_id: str) -> str:
	return os.path.join(tmpdir, f"{output_name}-{job_id}")
