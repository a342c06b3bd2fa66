#!/usr/bin/env python3

import subprocess
from vcrlib import blueframe
from vcrlib.core import utils
from vcrlib.core.loader import default_settings
from vcrlib.media.tool import MediaTool

#============================================

class FfmpegTool(MediaTool):
	def __init__(self, settings: dict = None):
		if settings is None:
			settings = default_settings()
		self.binary = settings.get('ffmpeg', "ffmpeg")
		self.capture_settings = dict(default_settings()['capture'])
		self.capture_settings.update(settings.get('capture', {}))

	#============================
	def capture(self, video_source: str, audio_source: str, out_file: str,
		duration: str = None) -> None:
		conf = self.capture_settings
		cmd = [self.binary, "-y"]
		cmd += ["-f", "v4l2"]
		cmd += ["-standard", conf['standard']]
		cmd += ["-thread_queue_size", conf['thread_queue_size']]
		cmd += ["-framerate", conf['framerate']]
		cmd += ["-i", video_source]
		cmd += ["-f", "alsa"]
		cmd += ["-thread_queue_size", conf['thread_queue_size']]
		cmd += ["-i", audio_source]
		cmd += ["-framerate", conf['framerate']]
		cmd += ["-vf", conf['deinterlace']]
		cmd += ["-ac", conf['audio_channels']]
		cmd += ["-crf", conf['crf']]
		if duration is not None:
			cmd += ["-t", duration]
		cmd += [out_file]
		utils.run_command(cmd)

	#============================
	def detect(self, video_file: str, reference_file: str, out_handle,
		min_duration: float) -> None:
		# blend refuses inputs whose frame sizes or sample aspect ratios differ
		(width, height) = blueframe.BLUE_FRAME_SIZE
		filters = f"[0:v]scale={width}:{height},setsar=1[tape];[1:v]setsar=1[blue];"
		filters += "[tape][blue]blend=difference:shortest=1,"
		filters += f"blackdetect=d={min_duration:g}"
		cmd = [self.binary, "-y"]
		cmd += ["-i", video_file]
		cmd += ["-loop", "1"]
		cmd += ["-i", reference_file]
		cmd += ["-filter_complex", filters]
		cmd += ["-f", "null", "-"]
		utils.run_command(cmd, stdout=out_handle, stderr=subprocess.STDOUT)

	#============================
	def remux(self, source_file: str, out_file: str) -> None:
		cmd = [self.binary, "-y"]
		cmd += ["-i", source_file]
		cmd += ["-codec", "copy"]
		cmd += [out_file]
		utils.run_command(cmd)

	#============================
	def cut(self, source_file: str, out_file: str, end_seconds: float) -> None:
		cmd = [self.binary, "-y"]
		cmd += ["-t", utils.format_seconds(end_seconds)]
		cmd += ["-i", source_file]
		cmd += [out_file]
		utils.run_command(cmd)

	#============================
	def transcode(self, source_file: str, out_file: str) -> None:
		cmd = [self.binary, "-y"]
		cmd += ["-i", source_file]
		cmd += [out_file]
		utils.run_command(cmd)
