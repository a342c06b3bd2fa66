#!/usr/bin/env python3

import os
import shlex
import subprocess
import sys
import time
from vcrlib.core.errors import CommandFailed

#============================================

# ffmpeg exits with 255 when it is stopped by SIGTERM/SIGINT and has
# finalized its output. Stopping the capture by hand ends a recording.
FFMPEG_SIGNAL_EXIT_CODE = 255

_QUIET_MODE = False
_COMMAND_REPORTER = None

#============================================

def set_quiet_mode(value: bool) -> None:
	global _QUIET_MODE
	_QUIET_MODE = bool(value)

#============================================

def is_quiet_mode() -> bool:
	return _QUIET_MODE

#============================================

def set_command_reporter(reporter) -> None:
	"""
	Register a callable that receives command start/end events.

	Events are dicts with 'event' ('start' or 'end') and 'command'. End
	events also carry 'returncode' and 'seconds'.
	"""
	global _COMMAND_REPORTER
	_COMMAND_REPORTER = reporter

#============================================

def clear_command_reporter() -> None:
	global _COMMAND_REPORTER
	_COMMAND_REPORTER = None

#============================================

def echo(message: str) -> None:
	if _QUIET_MODE:
		return
	print(message, file=sys.stderr, flush=True)

#============================================

def format_command(cmd: list) -> str:
	return shlex.join([str(part) for part in cmd])

#============================================

def is_success_code(returncode: int) -> bool:
	if returncode == 0:
		return True
	if returncode == FFMPEG_SIGNAL_EXIT_CODE:
		return True
	return False

#============================================

def run_command(cmd: list, stdout=None, stderr=None) -> None:
	"""
	Run an external command and classify its exit status.

	The command is announced before it runs. Output is not captured here;
	callers that need it pass their own stdout/stderr handles.

	Args:
		cmd: Command list to execute.
		stdout: Optional file handle for standard output.
		stderr: Optional file handle (or subprocess.STDOUT) for standard error.

	A Ctrl-C reaches the child as well, so an interrupt only makes this wait
	for the child to finish its output; the exit code decides the outcome.
	"""
	showcmd = format_command(cmd)
	_report({'event': 'start', 'command': showcmd})
	t0 = time.time()
	proc = subprocess.Popen([str(part) for part in cmd], stdout=stdout, stderr=stderr)
	while True:
		try:
			proc.wait()
			break
		except KeyboardInterrupt:
			echo("[VCR] interrupted, waiting for the command to finish")
	seconds = time.time() - t0
	_report({'event': 'end', 'command': showcmd,
		'returncode': proc.returncode, 'seconds': seconds})
	if not is_success_code(proc.returncode):
		raise CommandFailed(showcmd, proc.returncode)
	if proc.returncode == FFMPEG_SIGNAL_EXIT_CODE:
		echo(f"[VCR] command stopped by signal (exit {proc.returncode}), continuing")
	return

#============================================

def _report(event: dict) -> None:
	if _COMMAND_REPORTER is not None:
		_COMMAND_REPORTER(event)
		return
	if event['event'] == 'start':
		echo(f"CMD: '{event['command']}'")

#============================================

def ensure_file_exists(filepath: str) -> None:
	if not os.path.isfile(filepath):
		raise RuntimeError(f"file not found: {filepath}")
	return

#============================================

def make_job_stamp() -> str:
	return str(int(time.time()))

#============================================

def format_seconds(seconds: float) -> str:
	return str(float(seconds))
