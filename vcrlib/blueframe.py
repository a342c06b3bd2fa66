#!/usr/bin/env python3

###
# solid blue reference frame used to find the end-of-tape marker
###

import os
import tempfile
from PIL import Image

#===============================
BLUE_FRAME_NAME = "vcr-blue-frame.png"
BLUE_FRAME_COLOR = (0, 0, 255)
# detection scales the tape to this size, so PAL and NTSC both match
BLUE_FRAME_SIZE = (720, 480)

#===============================
def blue_frame_path(temp_dir: str = None) -> str:
	"""
	Return the path of the blue reference frame, writing it on first use.

	An existing file is reused as is.
	"""
	if temp_dir is None:
		temp_dir = tempfile.gettempdir()
	blue_path = os.path.join(temp_dir, BLUE_FRAME_NAME)
	if not os.path.exists(blue_path):
		write_blue_frame(blue_path)
	return blue_path

#===============================
def write_blue_frame(filepath: str) -> None:
	image = Image.new("RGB", BLUE_FRAME_SIZE, color=BLUE_FRAME_COLOR)
	image.save(filepath, format="PNG")
	return
