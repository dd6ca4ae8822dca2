"""yt-dlp-api — HTTP microservice that shapes yt-dlp output into JSON.

Runs the ``yt-dlp`` executable per request and returns video, channel,
and channel-listing metadata to a separate front-end application.
"""

from ytdlp_api.version import __version__

__all__: list[str] = ["__version__"]
