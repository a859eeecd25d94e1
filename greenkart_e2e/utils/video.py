import asyncio
import logging
import os
import shutil
import subprocess
from typing import Optional


def find_ffmpeg() -> Optional[str]:
    return shutil.which("ffmpeg")


def compress_video(source: str, crf: int, timeout: float = 300.0) -> str:
    """Transcode a recording to H.264 mp4 at constant rate factor ``crf``.

    The source is removed on success. When ffmpeg is missing or fails the
    source is kept and returned unchanged.
    """
    ffmpeg = find_ffmpeg()
    if not ffmpeg:
        logging.warning(f"ffmpeg not found in PATH, keeping uncompressed video: {source}")
        return source

    target = os.path.splitext(source)[0] + ".mp4"
    cmd = [
        ffmpeg,
        "-y",
        "-i",
        source,
        "-c:v",
        "libx264",
        "-preset",
        "fast",
        "-crf",
        str(crf),
        "-pix_fmt",
        "yuv420p",
        target,
    ]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired:
        logging.warning(f"ffmpeg timed out compressing {source}, keeping uncompressed video")
        return source

    if result.returncode != 0:
        logging.warning(f"ffmpeg failed compressing {source}: {result.stderr.strip()[-500:]}")
        return source

    os.remove(source)
    logging.debug(f"Video compressed with crf {crf}: {target}")
    return target


async def compress_video_async(source: str, crf: int) -> str:
    """Run compress_video in a thread to avoid blocking the event loop."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, compress_video, source, crf)
