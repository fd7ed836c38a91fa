"""
Still-frame extraction from video bytes via ffmpeg.

The pipeline only depends on the FrameExtractor protocol: "give me one JPEG
frame of this video at this timestamp". FfmpegFrameExtractor is the real
implementation; tests plug in a fake that returns canned bytes.

How the ffmpeg extractor works:

    1. Write the video bytes to  <tmp>/video_<uuid>.<ext>
    2. ffmpeg -ss <ts> -i <video> -frames:v 1 -y <tmp>/frame_<uuid>.jpg
    3. Read the frame back
    4. Delete both files, whatever happened in steps 1-3

Temp names use a random uuid per call, so concurrent video requests sharing
the same temp directory can never collide.

ffmpeg runs synchronously: the calling thread blocks until it exits (or the
configured timeout kills it). A failure carries ffmpeg's combined output so
the log shows why the video was rejected.
"""

import logging
import os
import re
import subprocess
import tempfile
import uuid
from typing import Optional, Protocol

from thumbnail.errors import FrameExtractionError

logger = logging.getLogger(__name__)

DEFAULT_TIMESTAMP = "00:00:01.000"
TIMESTAMP_PATTERN = re.compile(r"^\d{2}:[0-5]\d:[0-5]\d(\.\d{1,3})?$")

_VIDEO_EXTENSIONS = {
    "video/mp4": ".mp4",
    "video/quicktime": ".mov",
    "video/webm": ".webm",
    "video/x-matroska": ".mkv",
    "video/x-msvideo": ".avi",
    "video/mpeg": ".mpeg",
    "video/ogg": ".ogv",
}


class FrameExtractor(Protocol):
    def extract(self, video: bytes, timestamp: str, mime_type: str = "") -> bytes:
        """Return the encoded bytes of one frame, or raise FrameExtractionError."""
        ...


class FfmpegFrameExtractor:

    def __init__(
        self,
        binary: str = "ffmpeg",
        temp_dir: Optional[str] = None,
        timeout: Optional[float] = 60.0,
    ):
        self._binary = binary
        self._temp_dir = temp_dir or tempfile.gettempdir()
        self._timeout = timeout

    def extract(self, video: bytes, timestamp: str, mime_type: str = "") -> bytes:
        timestamp = timestamp or DEFAULT_TIMESTAMP
        if not TIMESTAMP_PATTERN.match(timestamp):
            raise FrameExtractionError(
                f"invalid timestamp '{timestamp}', expected HH:MM:SS.mmm"
            )

        token = uuid.uuid4().hex
        video_path = os.path.join(self._temp_dir, f"video_{token}{_extension_for(mime_type)}")
        frame_path = os.path.join(self._temp_dir, f"frame_{token}.jpg")

        try:
            try:
                with open(video_path, "wb") as f:
                    f.write(video)
            except OSError as e:
                raise FrameExtractionError(f"failed to write video file: {e}") from e

            self._run_ffmpeg(video_path, frame_path, timestamp)

            try:
                with open(frame_path, "rb") as f:
                    frame = f.read()
            except OSError as e:
                raise FrameExtractionError(f"failed to read frame file: {e}") from e

            if not frame:
                raise FrameExtractionError("failed to extract frame: ffmpeg produced an empty frame")
            return frame

        finally:
            _remove_quietly(video_path)
            _remove_quietly(frame_path)

    def _run_ffmpeg(self, video_path: str, frame_path: str, timestamp: str) -> None:
        cmd = [
            self._binary,
            "-ss", timestamp,
            "-i", video_path,
            "-frames:v", "1",
            "-y",
            frame_path,
        ]
        logger.debug(f"Running {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=self._timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise FrameExtractionError(f"ffmpeg not found: {self._binary}") from e
        except subprocess.TimeoutExpired as e:
            raise FrameExtractionError(
                f"ffmpeg timed out after {self._timeout}s", _decode(e.output)
            ) from e

        output = _decode(result.stdout)
        if result.returncode != 0:
            raise FrameExtractionError(
                f"ffmpeg failed: exit status {result.returncode}", output
            )
        if not os.path.exists(frame_path):
            # ffmpeg exits 0 when the timestamp is past the end of the video
            raise FrameExtractionError(
                f"ffmpeg produced no frame at {timestamp}", output
            )


def _extension_for(mime_type: str) -> str:
    return _VIDEO_EXTENSIONS.get((mime_type or "").lower(), ".mp4")


def _decode(output) -> str:
    if not output:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


def _remove_quietly(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Failed to remove temp file {path}: {e}")
