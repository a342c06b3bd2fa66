#!/usr/bin/env python3

"""
vcr: capture a tape and trim it at the blue end-of-tape marker.
"""

# Standard Library
import argparse
import os
import re
import sys

# PIP3 modules
from rich.console import Console
from rich.text import Text

# local repo modules
from vcrlib.core import utils
from vcrlib.core.loader import JobLoader
from vcrlib.core.loader import load_settings
from vcrlib.core.pipeline import CapturePipeline
from vcrlib.core.pipeline import job_status
from vcrlib.core.pipeline import list_jobs
from vcrlib.media.ffmpeg import FfmpegTool

#============================================

NORD_COLORS = {
	'dim': "#4C566A",
	'command': "#ECEFF4",
	'flags': "#81A1C1",
	'numbers': "#B48EAD",
	'paths': "#A3BE8C",
	'strings': "#EBCB8B",
	'error': "#BF616A",
}

#============================================

def build_parser() -> argparse.ArgumentParser:
	"""
	Build the command-line parser.
	"""
	parser = argparse.ArgumentParser(prog="vcr",
		description="Capture a tape and trim it at the blue end marker")
	parser.add_argument('-c', '--config', dest='config_file', default=None,
		help='settings yaml file (default ~/.config/vcr/config.yaml)')
	parser.add_argument('-q', '--quiet', dest='quiet', action='store_true',
		help='only print errors')
	subparsers = parser.add_subparsers(dest='command')

	capture = subparsers.add_parser('capture',
		help='record, find the end marker, and trim')
	capture.add_argument('output', help='output .mp4 file')
	capture.add_argument('--video', dest='video', default=None,
		help='video capture device')
	capture.add_argument('--audio', dest='audio', default=None,
		help='audio capture device')
	capture.add_argument('-t', '--duration', dest='duration', default=None,
		help='a duration to record, useful for dry-run tests')
	capture.add_argument('--tmpdir', dest='tmpdir', default=None,
		help='parent directory for job directories')
	capture.add_argument('--resume', dest='resume', default=None,
		help='the timestamp of a capture job to resume')

	status = subparsers.add_parser('status',
		help='list capture jobs and their finished stages')
	status.add_argument('output', nargs='?', default=None,
		help='only show jobs for this output file')
	status.add_argument('--tmpdir', dest='tmpdir', default=None,
		help='parent directory for job directories')
	parser.set_defaults(quiet=False)
	return parser

#============================================

class CommandPrinter():
	def __init__(self, console: Console):
		self.console = console
		self.command_styles = [
			(re.compile(r"--?[A-Za-z0-9][A-Za-z0-9_:-]*"), NORD_COLORS['flags']),
			(re.compile(r"\b\d+\.\d+\b"), NORD_COLORS['numbers']),
			(re.compile(r"\b\d+\b(?!\.\d)"), NORD_COLORS['numbers']),
			(re.compile(r"'[^']*'|\"[^\"]*\""), NORD_COLORS['strings']),
			(re.compile(r"(?:/|~|\./|\.\./)[^\s'\"`]+"), NORD_COLORS['paths']),
		]

	#============================
	def __call__(self, event: dict) -> None:
		if utils.is_quiet_mode():
			return
		command = event.get('command', '')
		if event.get('event') == 'start':
			self.console.print(self.highlight(command))
			return
		code = event.get('returncode', 0)
		seconds = event.get('seconds', 0.0)
		if code == 0:
			self.console.print(Text(f"done in {seconds:.1f}s", style=NORD_COLORS['dim']))
		else:
			self.console.print(Text(f"exit {code} after {seconds:.1f}s",
				style=NORD_COLORS['dim']))

	#============================
	def highlight(self, command: str) -> Text:
		text = Text(f"CMD: {command}", style=f"bold {NORD_COLORS['command']}")
		for pattern, style in self.command_styles:
			for match in pattern.finditer(command):
				text.stylize(style, match.start() + 5, match.end() + 5)
		return text

#============================================

def run_capture(args: argparse.Namespace, settings: dict) -> None:
	tmpdir = args.tmpdir or settings['tmpdir']
	loader = JobLoader(args.output,
		video_source=args.video or settings['video'],
		audio_source=args.audio or settings['audio'],
		duration=args.duration,
		resume=args.resume,
		tmpdir=tmpdir)
	loader.validate()
	if not os.path.exists(tmpdir):
		os.makedirs(tmpdir)
	config = loader.load()
	utils.echo(f"[VCR] job {config.job_id}, resume with --resume {config.job_id}")
	pipeline = CapturePipeline(config, tool=FfmpegTool(settings))
	try:
		output = pipeline.run()
	except (RuntimeError, OSError, KeyboardInterrupt):
		utils.echo(f"[VCR] to retry: vcr capture {args.output} --resume {config.job_id}")
		raise
	utils.echo(f"[VCR] finished: {output}")

#============================================

def run_status(args: argparse.Namespace, settings: dict, console: Console) -> None:
	tmpdir = args.tmpdir or settings['tmpdir']
	output_name = None
	if args.output is not None:
		output_name = os.path.basename(args.output)
	jobs = list_jobs(tmpdir, output_name=output_name)
	if len(jobs) == 0:
		console.print(f"no jobs in {tmpdir}")
		return
	for job in jobs:
		status = job_status(job['work_dir'])
		line = Text()
		line.append(f"{job['output_name']} ", style=NORD_COLORS['paths'])
		line.append(f"{job['job_id']} ", style=NORD_COLORS['numbers'])
		for key, label in (('initial_recording', 'recorded'),
			('marker_detect', 'detected'), ('trimmed_recording', 'trimmed')):
			style = NORD_COLORS['command'] if status[key] else NORD_COLORS['dim']
			line.append(f"{label} ", style=style)
		if status['intervals'] is not None:
			starts = ", ".join(f"{interval.start}s" for interval in status['intervals'])
			line.append(f"markers: [{starts}]", style=NORD_COLORS['strings'])
		console.print(line)

#============================================

def main(argv: list = None) -> int:
	parser = build_parser()
	args = parser.parse_args(argv)
	console = Console(stderr=True, highlight=False, soft_wrap=True)
	if args.command is None:
		parser.print_help()
		return 0
	utils.set_quiet_mode(args.quiet)
	utils.set_command_reporter(CommandPrinter(console))
	try:
		settings = load_settings(args.config_file)
		if args.command == 'capture':
			run_capture(args, settings)
		elif args.command == 'status':
			run_status(args, settings, Console(highlight=False, soft_wrap=True))
	except (RuntimeError, OSError) as exc:
		console.print(Text(f"error: {exc}", style=f"bold {NORD_COLORS['error']}"))
		return 1
	except KeyboardInterrupt:
		console.print(Text("interrupted", style=f"bold {NORD_COLORS['error']}"))
		return 130
	finally:
		utils.clear_command_reporter()
		utils.set_quiet_mode(False)
	return 0

#============================================

if __name__ == '__main__':
	sys.exit(main())
