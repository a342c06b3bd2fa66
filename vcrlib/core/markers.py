#!/usr/bin/env python3

"""
Parse ffmpeg blackdetect diagnostics into marker intervals.

The detection run blends the recording with a solid blue frame using a
difference blend, so blue marker frames come out black and blackdetect
reports them on stderr, interleaved with ffmpeg's normal log lines.
"""

import dataclasses
import re
from vcrlib.core.errors import MalformedMarkerLine

#============================================

MARKER_LINE_RE = re.compile(
	r"black_start:(?P<start>[0-9.]+)"
	r"\s+"
	r"black_end:(?P<end>[0-9.]+)"
	r"\s+"
	r"black_duration:(?P<duration>[0-9.]+)"
)

#============================================

@dataclasses.dataclass(frozen=True)
class MarkerInterval():
	start: float
	end: float
	duration: float

#============================================

def parse_marker_line(line: str):
	"""
	Parse one diagnostic line.

	Returns:
		MarkerInterval or None when the line is not a blackdetect report.
	"""
	match = MARKER_LINE_RE.search(line)
	if match is None:
		return None
	values = {}
	for field in ('start', 'end', 'duration'):
		try:
			values[field] = float(match.group(field))
		except ValueError as exc:
			raise MalformedMarkerLine(line, f"bad {field} value") from exc
	return MarkerInterval(**values)

#============================================

def parse_marker_lines(lines) -> list:
	intervals = []
	for line in lines:
		interval = parse_marker_line(line)
		if interval is not None:
			intervals.append(interval)
	return intervals

#============================================

def read_marker_file(filepath: str) -> list:
	with open(filepath, 'r', encoding='utf-8', errors='replace') as handle:
		return parse_marker_lines(handle)
