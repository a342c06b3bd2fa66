#!/usr/bin/env python3

from abc import ABC, abstractmethod

#============================================

class MediaTool(ABC):
	"""
	Capabilities the capture pipeline needs from an external media tool.

	Every method blocks until the tool exits and raises CommandFailed on a
	failing exit status.
	"""

	#============================
	@abstractmethod
	def capture(self, video_source: str, audio_source: str, out_file: str,
		duration: str = None) -> None:
		"""Record deinterlaced video plus audio from capture devices."""
		raise NotImplementedError

	#============================
	@abstractmethod
	def detect(self, video_file: str, reference_file: str, out_handle,
		min_duration: float) -> None:
		"""Write black-segment diagnostics of video minus reference to out_handle."""
		raise NotImplementedError

	#============================
	@abstractmethod
	def remux(self, source_file: str, out_file: str) -> None:
		"""Stream copy into a new container without re-encoding."""
		raise NotImplementedError

	#============================
	@abstractmethod
	def cut(self, source_file: str, out_file: str, end_seconds: float) -> None:
		"""Re-encode the first end_seconds of the source."""
		raise NotImplementedError

	#============================
	@abstractmethod
	def transcode(self, source_file: str, out_file: str) -> None:
		"""Re-encode the whole source."""
		raise NotImplementedError
