#!/usr/bin/env python3

"""
Helpers that imitate an operator pressing Ctrl-C during a long command.
"""

# Standard Library
import os
import signal
import stat
import sys
import threading
import time

#============================================

FINALIZED_BYTES = b"finalized after interrupt\n"

# child: writes its pid, then on SIGINT takes a moment to finish its
# output file (the last argument) and exits 255 like ffmpeg does
STOPPABLE_SCRIPT = """
import os
import signal
import sys
import time

READY_PATH = {ready_path!r}

def stop(signum, frame):
	time.sleep(0.5)
	with open(sys.argv[-1], "wb") as handle:
		handle.write({finalized!r})
	os._exit(255)

if "v4l2" not in sys.argv:
	sys.exit(1)
signal.signal(signal.SIGINT, stop)
with open(READY_PATH + ".tmp", "w") as handle:
	handle.write(str(os.getpid()))
os.replace(READY_PATH + ".tmp", READY_PATH)
deadline = time.time() + 30
while time.time() < deadline:
	time.sleep(0.05)
sys.exit(1)
"""

#============================================

def write_stoppable_command(directory: str) -> tuple:
	"""
	Write an executable stand-in for ffmpeg that waits to be interrupted.

	Invocations without v4l2 among the arguments exit 1 at once.

	Returns:
		tuple: (script path, ready file path)
	"""
	ready_path = os.path.join(directory, "child.ready")
	script_path = os.path.join(directory, "stoppable-ffmpeg")
	text = f"#!{sys.executable}\n"
	text += STOPPABLE_SCRIPT.format(ready_path=ready_path, finalized=FINALIZED_BYTES)
	with open(script_path, "w", encoding="utf-8") as handle:
		handle.write(text)
	os.chmod(script_path, os.stat(script_path).st_mode | stat.S_IXUSR)
	return script_path, ready_path

#============================================

def interrupt_when_ready(ready_path: str, timeout: float = 20.0) -> threading.Thread:
	"""
	Send SIGINT to the child and to this process, as a terminal Ctrl-C would.
	"""
	def worker() -> None:
		deadline = time.time() + timeout
		while not os.path.exists(ready_path):
			if time.time() > deadline:
				return
			time.sleep(0.02)
		with open(ready_path, "r", encoding="utf-8") as handle:
			child_pid = int(handle.read())
		os.kill(child_pid, signal.SIGINT)
		os.kill(os.getpid(), signal.SIGINT)

	thread = threading.Thread(target=worker, daemon=True)
	thread.start()
	return thread
