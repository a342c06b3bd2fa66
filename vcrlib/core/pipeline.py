#!/usr/bin/env python3

import os
import re
import shutil
from vcrlib.core import markers
from vcrlib.core import stages
from vcrlib.core import utils
from vcrlib.core.errors import CopyFailed
from vcrlib.media.ffmpeg import FfmpegTool

#============================================

JOB_DIR_RE = re.compile(r"^(?P<name>.+)-(?P<job_id>[0-9]+)$")

#============================================

class CapturePipeline():
	def __init__(self, config, tool=None):
		self.config = config
		self.tool = tool
		if self.tool is None:
			self.tool = FfmpegTool()

	#============================
	def run(self) -> str:
		utils.echo(f"[VCR CONFIG] {self.config}")
		initial = stages.record_initial(self.config, self.tool)
		utils.echo(f"[VCR INITIAL RECORDING] {initial.path}")
		detect = stages.detect_markers(self.config, self.tool, initial)
		utils.echo(f"[VCR MARKER INTERVALS] {list(detect.intervals)}")
		trimmed = stages.trim_recording(self.config, self.tool, initial, detect)
		utils.echo(f"[VCR TRIMMED RECORDING] {trimmed.path}")
		self._copy_output(trimmed.path, self.config.output_path)
		return self.config.output_path

	#============================
	def _copy_output(self, source: str, destination: str) -> None:
		utils.echo(f"[VCR] copying {source} to {destination}")
		try:
			shutil.copy(source, destination)
		except OSError as exc:
			raise CopyFailed(source, destination, exc.strerror or str(exc)) from exc

#============================================

def job_status(work_dir: str) -> dict:
	"""
	Report which stages of a job have finished.

	Args:
		work_dir: Job working directory.

	Returns:
		dict: Stage completion flags and, once detection is done, its intervals.
	"""
	status = {
		'work_dir': work_dir,
		'initial_recording': stages.initial_recording_complete(work_dir),
		'marker_detect': stages.marker_detect_complete(work_dir),
		'trimmed_recording': stages.trimmed_recording_complete(work_dir),
		'intervals': None,
	}
	if status['marker_detect']:
		status['intervals'] = markers.read_marker_file(stages.marker_detect_path(work_dir))
	return status

#============================================

def list_jobs(tmpdir: str, output_name: str = None) -> list:
	"""
	Find job directories under tmpdir, oldest first.

	Returns:
		list: dicts with 'output_name', 'job_id', and 'work_dir'.
	"""
	if not os.path.isdir(tmpdir):
		return []
	jobs = []
	for entry in sorted(os.listdir(tmpdir)):
		work_dir = os.path.join(tmpdir, entry)
		if not os.path.isdir(work_dir):
			continue
		match = JOB_DIR_RE.match(entry)
		if match is None:
			continue
		if output_name is not None and match.group('name') != output_name:
			continue
		jobs.append({
			'output_name': match.group('name'),
			'job_id': match.group('job_id'),
			'work_dir': work_dir,
		})
	jobs.sort(key=lambda job: (int(job['job_id']), job['output_name']))
	return jobs
