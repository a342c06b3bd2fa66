#!/usr/bin/env python3

#============================================

class VcrError(RuntimeError):
	pass

#============================================

class ConfigError(VcrError):
	pass

#============================================

class InvalidOutputExtension(VcrError):
	def __init__(self, output_path: str, extension: str):
		self.output_path = output_path
		self.extension = extension
		super().__init__(f"output path must have {extension} extension: {output_path}")

#============================================

class InvalidOutputPath(VcrError):
	def __init__(self, output_path: str):
		self.output_path = output_path
		super().__init__(f"output path has no base name: {output_path}")

#============================================

class NoSuchJob(VcrError):
	def __init__(self, work_dir: str):
		self.work_dir = work_dir
		super().__init__(f"no such job exists: {work_dir}")

#============================================

class DirectoryCreateFailed(VcrError):
	def __init__(self, work_dir: str, reason: str):
		self.work_dir = work_dir
		super().__init__(f"could not create job directory {work_dir}: {reason}")

#============================================

class CommandFailed(VcrError):
	def __init__(self, command: str, returncode: int):
		self.command = command
		self.returncode = returncode
		super().__init__(f"command exited with code {returncode}: {command}")

#============================================

class MalformedMarkerLine(VcrError):
	def __init__(self, line: str, reason: str):
		self.line = line
		super().__init__(f"malformed marker line ({reason}): {line.strip()}")

#============================================

class CopyFailed(VcrError):
	def __init__(self, source: str, destination: str, reason: str):
		self.source = source
		self.destination = destination
		super().__init__(f"could not copy {source} to {destination}: {reason}")
