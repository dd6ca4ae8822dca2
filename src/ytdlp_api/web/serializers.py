"""camelCase JSON shapes expected by the front-end."""

from __future__ import annotations

from typing import Any

from ytdlp_api.core.models import (
    ChannelDetails,
    ChannelVideo,
    ChannelVideoList,
    ChannelVideosMeta,
    VideoDetails,
)


def serialize_video(video: VideoDetails) -> dict[str, Any]:
    return {
        "id": video.id,
        "title": video.title,
        "description": video.description,
        "pinnedComment": video.pinned_comment,
        "channelId": video.channel_id,
        "channelName": video.channel_name,
        "channelUrl": video.channel_url,
        "thumbnailUrl": video.thumbnail_url,
        "publishedAt": video.published_at,
        "viewCount": video.view_count,
        "languageCode": video.language_code,
        "duration": video.duration,
        "url": video.url,
    }


def serialize_channel(channel: ChannelDetails) -> dict[str, Any]:
    return {
        "id": channel.id,
        "name": channel.name,
        "url": channel.url,
        "description": channel.description,
        "subscriberCount": channel.subscriber_count,
        "videoCount": channel.video_count,
    }


def serialize_channel_video(video: ChannelVideo) -> dict[str, Any]:
    return {
        "id": video.id,
        "title": video.title,
        "url": video.url,
        "publishedAt": video.published_at,
        "viewCount": video.view_count,
        "duration": video.duration,
    }


def serialize_channel_videos_meta(meta: ChannelVideosMeta) -> dict[str, Any]:
    return {
        "requestedSinceDate": meta.requested_since_date,
        "ytDlpDateafter": meta.ytdlp_dateafter,
        "maxVideos": meta.max_videos,
        "totalEntries": meta.total_entries,
        "returned": meta.returned,
        "filteredOut": meta.filtered_out,
    }


def serialize_channel_videos(listing: ChannelVideoList) -> dict[str, Any]:
    return {
        "videos": [serialize_channel_video(video) for video in listing.videos],
        "meta": serialize_channel_videos_meta(listing.meta),
    }
