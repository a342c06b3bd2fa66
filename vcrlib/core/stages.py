#!/usr/bin/env python3

import dataclasses
import os
from vcrlib import blueframe
from vcrlib.core import markers
from vcrlib.core import utils

#============================================

INITIAL_RECORDING_NAME = "initial-recording.mkv"
MARKER_DETECT_NAME = "marker-detect.out"
TRIMMED_RECORDING_NAME = "trimmed-recording.mp4"

# blue must persist this long to count as the end-of-tape marker
MARKER_MIN_SECONDS = 10.0
# keep this much past the start of the marker
TRIM_MARGIN_SECONDS = 5.0

TRIM_REMUX = 'remux'
TRIM_CUT = 'cut'
TRIM_TRANSCODE = 'transcode'

#============================================

@dataclasses.dataclass(frozen=True)
class InitialRecording():
	"""
	The raw recording from the deck. Normal operation lets the capture run
	well past the end of the tape, so this is expected to be too long.
	"""
	path: str

#============================================

@dataclasses.dataclass(frozen=True)
class MarkerDetectResult():
	path: str
	intervals: tuple

#============================================

@dataclasses.dataclass(frozen=True)
class TrimmedRecording():
	path: str

#============================================

def initial_recording_path(work_dir: str) -> str:
	return os.path.join(work_dir, INITIAL_RECORDING_NAME)

def marker_detect_path(work_dir: str) -> str:
	return os.path.join(work_dir, MARKER_DETECT_NAME)

def trimmed_recording_path(work_dir: str) -> str:
	return os.path.join(work_dir, TRIMMED_RECORDING_NAME)

#============================================

def initial_recording_complete(work_dir: str) -> bool:
	return os.path.exists(initial_recording_path(work_dir))

def marker_detect_complete(work_dir: str) -> bool:
	return os.path.exists(marker_detect_path(work_dir))

def trimmed_recording_complete(work_dir: str) -> bool:
	return os.path.exists(trimmed_recording_path(work_dir))

#============================================

def part_path(filepath: str) -> str:
	"""
	In-progress name for a stage artifact, keeping the container extension
	last so the media tool still picks the right muxer.
	"""
	(base, extension) = os.path.splitext(filepath)
	return f"{base}.part{extension}"

#============================================

def promote_part(filepath: str) -> None:
	in_progress = part_path(filepath)
	utils.ensure_file_exists(in_progress)
	os.replace(in_progress, filepath)

#============================================

def record_initial(config, tool) -> InitialRecording:
	output = initial_recording_path(config.work_dir)
	if initial_recording_complete(config.work_dir):
		utils.echo(f"[VCR] {output} already exists, skipping recording")
		return InitialRecording(output)
	tool.capture(config.video_source, config.audio_source, part_path(output),
		duration=config.duration)
	promote_part(output)
	return InitialRecording(output)

#============================================

def detect_markers(config, tool, initial: InitialRecording) -> MarkerDetectResult:
	output = marker_detect_path(config.work_dir)
	if marker_detect_complete(config.work_dir):
		utils.echo(f"[VCR] {output} already exists, skipping marker detection")
	else:
		reference = blueframe.blue_frame_path()
		# ffmpeg writes straight into the final file, there is no part file
		with open(output, 'w', encoding='utf-8') as handle:
			tool.detect(initial.path, reference, handle, MARKER_MIN_SECONDS)
	intervals = markers.read_marker_file(output)
	return MarkerDetectResult(output, tuple(intervals))

#============================================

def choose_trim_strategy(intervals) -> str:
	"""
	Pick how to finish the recording from the detected marker intervals.

	No marker means the whole recording is content. Several markers are
	ambiguous, so the whole recording is transcoded and left for a manual
	stream copy cut.
	"""
	if len(intervals) == 0:
		return TRIM_REMUX
	if len(intervals) == 1:
		return TRIM_CUT
	return TRIM_TRANSCODE

#============================================

def trim_end_seconds(interval) -> float:
	return interval.start + TRIM_MARGIN_SECONDS

#============================================

def trim_recording(config, tool, initial: InitialRecording,
	detect: MarkerDetectResult) -> TrimmedRecording:
	output = trimmed_recording_path(config.work_dir)
	if trimmed_recording_complete(config.work_dir):
		utils.echo(f"[VCR] {output} already exists, skipping trimmed recording")
		return TrimmedRecording(output)
	in_progress = part_path(output)
	strategy = choose_trim_strategy(detect.intervals)
	if strategy == TRIM_REMUX:
		utils.echo("[VCR] no blue frames detected, doing cheap conversion")
		tool.remux(initial.path, in_progress)
	elif strategy == TRIM_CUT:
		end_seconds = trim_end_seconds(detect.intervals[0])
		utils.echo(f"[VCR] blue frames at {detect.intervals[0].start}s, "
			f"trimming to {end_seconds}s")
		tool.cut(initial.path, in_progress, end_seconds)
	else:
		utils.echo(f"[VCR] {len(detect.intervals)} blue frame intervals detected, "
			"transcoding without trimming")
		tool.transcode(initial.path, in_progress)
	promote_part(output)
	return TrimmedRecording(output)
