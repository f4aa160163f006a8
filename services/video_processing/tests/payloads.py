import base64
import json


def encode_notification(payload: object) -> str:
    """Base64 JSON, the way the push subscription delivers object notifications."""
    return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")


def envelope(data: str) -> dict:
    return {
        "message": {"data": data, "messageId": "1234567890", "attributes": {}},
        "subscription": "projects/clipstream/subscriptions/raw-videos",
    }
