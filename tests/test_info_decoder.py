import json
from urllib.parse import quote

import pytest

from conftest import VIDEO_ID, make_format, make_info_body, make_player_response
from tubeloader.core import (
    MalformedInfoResponse,
    StreamDescriptor,
    TubeLoaderError,
    VideoNotFound,
    VideoUnplayable,
    decode_video_info,
    parse_video_info,
)


class TestParseVideoInfo:
    def test_plus_is_space_and_percent_escapes_are_decoded(self):
        info = parse_video_info("title=Hello+World%21&author=caf%C3%A9")
        assert info == {"title": "Hello World!", "author": "café"}

    def test_json_values_replace_strings(self):
        payload = quote(json.dumps({"a": [1, 2]}))
        info = parse_video_info(f"obj={payload}&num=42&flag=true&text=OK")
        assert info["obj"] == {"a": [1, 2]}
        assert info["num"] == 42
        assert info["flag"] is True
        assert info["text"] == "OK"

    def test_non_standard_json_constants_stay_strings(self):
        info = parse_video_info("a=NaN&b=Infinity")
        assert info == {"a": "NaN", "b": "Infinity"}

    def test_decoded_separators_are_not_resplit(self):
        info = parse_video_info("url=https%3A%2F%2Fx.example%2F%3Fa%3D1%26b%3D2&k=v")
        assert info["url"] == "https://x.example/?a=1&b=2"
        assert info["k"] == "v"

    def test_pair_without_equals_gets_empty_value(self):
        assert parse_video_info("lonely&k=v&") == {"lonely": "", "k": "v"}

    def test_keys_are_decoded_too(self):
        assert parse_video_info("my+key%21=1") == {"my key!": 1}

    @pytest.mark.parametrize("body", ["title=%FF%FE", "k=v&%C3=1", "title=caf%C3"])
    def test_invalid_utf8_escapes_raise(self, body):
        with pytest.raises(MalformedInfoResponse):
            parse_video_info(body)


class TestDecodeVideoInfo:
    def test_projects_video_details(self, info_body):
        meta = decode_video_info(VIDEO_ID, info_body)
        assert meta.video_id == VIDEO_ID
        assert meta.title == "Big Buck Bunny"
        assert meta.creator == "Blender"
        assert meta.view_count == 12345
        assert meta.keywords == ("animation", "open movie")
        assert meta.short_description == "A large rabbit & some rodents."
        assert [t.width for t in meta.thumbnails] == [120, 480]
        assert meta.best_thumbnail.url == "https://i.example/hq.jpg"

    def test_streams_are_formats_then_adaptive_formats(self, info_body):
        meta = decode_video_info(VIDEO_ID, info_body)
        assert [s.itag for s in meta.streams] == [18, 137, 248, 140]

        muxed, video_only, webm, audio = meta.streams
        assert muxed == StreamDescriptor(
            itag=18, url="https://media.example/18", width=640, height=360,
            quality="medium", quality_label="360p", fps=30, has_audio=True,
            mime_type='video/mp4; codecs="avc1.42001E, mp4a.40.2"',
        )
        assert not video_only.has_audio
        assert video_only.is_video_only
        assert webm.extension == "webm"
        assert audio.has_audio
        assert audio.resolution == "N/A"

    def test_missing_fields_use_defaults(self):
        body = make_info_body(make_player_response(formats=[{}], details={}))
        meta = decode_video_info(VIDEO_ID, body)
        assert meta.title == ""
        assert meta.creator == ""
        assert meta.view_count == 0
        assert meta.keywords == ()
        assert meta.thumbnails == ()
        assert meta.streams == (StreamDescriptor(),)
        stream = meta.streams[0]
        assert (stream.itag, stream.url, stream.quality, stream.quality_label) == (0, "", "low", "320p")

    @pytest.mark.parametrize("view_count", ["not a number", None, "-5", ""])
    def test_unparseable_view_count_defaults_to_zero(self, view_count):
        details = {"title": "x"}
        if view_count is not None:
            details["viewCount"] = view_count
        body = make_info_body(make_player_response(details=details))
        assert decode_video_info(VIDEO_ID, body).view_count == 0

    def test_missing_formats_default_to_empty(self):
        body = make_info_body(make_player_response(adaptive_formats=[make_format(140)]))
        meta = decode_video_info(VIDEO_ID, body)
        assert [s.itag for s in meta.streams] == [140]

    def test_no_streaming_data_gives_empty_stream_list(self):
        body = make_info_body(make_player_response())
        assert decode_video_info(VIDEO_ID, body).streams == ()

    @pytest.mark.parametrize("channels, expected", [(2, True), (1, True), (0, False), (None, False)])
    def test_has_audio_requires_positive_audio_channels(self, channels, expected):
        fmt = make_format(1) if channels is None else make_format(1, audioChannels=channels)
        body = make_info_body(make_player_response(formats=[fmt]))
        assert decode_video_info(VIDEO_ID, body).streams[0].has_audio is expected

    def test_unplayable_status_raises_video_unplayable(self):
        body = make_info_body(make_player_response(status="UNPLAYABLE", reason="Private video"))
        with pytest.raises(VideoUnplayable) as excinfo:
            decode_video_info(VIDEO_ID, body)
        assert excinfo.value.status == "UNPLAYABLE"
        assert excinfo.value.reason == "Private video"

    @pytest.mark.parametrize("status", ["ERROR", "LOGIN_REQUIRED", "CONTENT_CHECK_REQUIRED"])
    def test_other_statuses_raise_video_not_found(self, status):
        body = make_info_body(make_player_response(status=status))
        with pytest.raises(VideoNotFound) as excinfo:
            decode_video_info(VIDEO_ID, body)
        assert not isinstance(excinfo.value, VideoUnplayable)
        assert excinfo.value.status == status

    def test_invalid_utf8_in_body_raises_classified_error(self):
        body = make_info_body(make_player_response()) + "&title=%FF%FE"
        with pytest.raises(MalformedInfoResponse) as excinfo:
            decode_video_info(VIDEO_ID, body)
        assert isinstance(excinfo.value, TubeLoaderError)

    def test_missing_player_response_raises_video_not_found(self):
        with pytest.raises(VideoNotFound):
            decode_video_info(VIDEO_ID, "status=fail&errorcode=150&reason=Invalid+parameters.")

    def test_missing_playability_status_raises_video_not_found(self):
        player_response = make_player_response()
        del player_response["playabilityStatus"]
        with pytest.raises(VideoNotFound):
            decode_video_info(VIDEO_ID, make_info_body(player_response))

    def test_metadata_is_immutable(self, info_body):
        meta = decode_video_info(VIDEO_ID, info_body)
        with pytest.raises(AttributeError):
            meta.title = "changed"
