import base64

import pytest

from app.exceptions import DecodeError
from app.video.notification import decode_notification, derive_identity, processed_filename
from payloads import encode_notification


def test_decode_returns_name() -> None:
    assert decode_notification(encode_notification({"name": "abc-123.mp4"})) == "abc-123.mp4"


def test_decode_ignores_extra_fields() -> None:
    data = encode_notification({"name": "abc-123.mp4", "bucket": "raw", "size": "1024"})
    assert decode_notification(data) == "abc-123.mp4"


@pytest.mark.parametrize(
    ("data", "kind"),
    [
        ("not base64!!", "encoding"),
        ("YWJj=", "encoding"),
        ("ünïcode", "encoding"),
        (base64.b64encode(b"\xff\xfe\xfa").decode(), "charset"),
        (base64.b64encode(b"{not json").decode(), "format"),
        (base64.b64encode(b"").decode(), "format"),
        (encode_notification({"bucket": "raw"}), "missing_field"),
        (encode_notification({"name": 42}), "missing_field"),
        (encode_notification({"name": None}), "missing_field"),
        (encode_notification(["abc-123.mp4"]), "missing_field"),
        (encode_notification("abc-123.mp4"), "missing_field"),
    ],
)
def test_decode_rejects_malformed_payload(data: str, kind: str) -> None:
    with pytest.raises(DecodeError) as exc_info:
        decode_notification(data)
    assert exc_info.value.kind == kind
    assert exc_info.value.status_code == 400


def test_derive_identity_splits_on_first_separators() -> None:
    identity = derive_identity("abc-123.mp4")
    assert identity.video_id == "abc-123"
    assert identity.owner_id == "abc"
    assert identity.processed_filename == "processed-abc-123.mp4"


@pytest.mark.parametrize(
    ("name", "video_id", "owner_id"),
    [
        ("u1-17.final.mp4", "u1-17", "u1"),
        ("u1-17-b.tar.gz", "u1-17-b", "u1"),
        ("0af3c2e1-1700000000000.webm", "0af3c2e1-1700000000000", "0af3c2e1"),
        ("a-.mp4", "a-", "a"),
    ],
)
def test_derive_identity_with_repeated_separators(name: str, video_id: str, owner_id: str) -> None:
    identity = derive_identity(name)
    assert (identity.video_id, identity.owner_id) == (video_id, owner_id)
    assert identity.processed_filename == "processed-" + name


@pytest.mark.parametrize(
    "name",
    [
        "abc-123",       # no "."
        "abc123.mp4",    # no "-"
        "abc.de-f.mp4",  # "-" only after the first "."
        ".mp4",          # empty id
        "-123.mp4",      # empty owner
        "",
        "..",
        "nested/abc-123.mp4",
        "..\\abc-123.mp4",
    ],
)
def test_derive_identity_rejects_bad_names(name: str) -> None:
    with pytest.raises(DecodeError) as exc_info:
        derive_identity(name)
    assert exc_info.value.kind == "bad_identifier"


@pytest.mark.parametrize("name", ["x", "a-b.c", "a.b.c-d-e", "processed-a-1.mp4"])
def test_processed_filename_prefixes_name(name: str) -> None:
    assert processed_filename(name) == "processed-" + name
