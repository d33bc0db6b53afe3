"""
ytdlp-hq: download the best audio and video streams separately with yt-dlp
and merge them into a single file with FFmpeg.
"""

__version__ = "1.0.0"
