from collections import namedtuple

from botscaffold.logging import redact_secrets

_TOKEN = "MTIzNDU2Nzg5MDEyMzQ1Njc4.GabcDe.abcdefghijklmnopqrstuvwxyz0123"


def test_secret_keys_are_redacted() -> None:
    event = redact_secrets(None, "info", {"event": "x", "token": "abc", "bot_token": None})

    assert event["token"] == "[REDACTED]"
    assert event["bot_token"] is None


def test_discord_tokens_redacted_inside_values() -> None:
    event = redact_secrets(
        None,
        "error",
        {
            "event": "discord.http_error",
            "error": f"bad token {_TOKEN}",
            "headers": {"Authorization": "Bot abcdefghijklmnopqrstuvwxyz"},
            "items": [_TOKEN],
        },
    )

    assert _TOKEN not in event["error"]
    assert event["error"].endswith("[REDACTED]")
    assert event["headers"]["Authorization"] == "Bot [REDACTED]"
    assert event["items"] == ["[REDACTED]"]


def test_plain_values_untouched() -> None:
    event = redact_secrets(None, "info", {"event": "deploy.succeeded", "count": 2})

    assert event == {"event": "deploy.succeeded", "count": 2}


def test_namedtuple_values_keep_their_type() -> None:
    Pair = namedtuple("Pair", ["left", "right"])

    event = redact_secrets(None, "info", {"event": "x", "value": Pair(1, _TOKEN)})

    assert event["value"] == Pair(1, "[REDACTED]")
    assert isinstance(event["value"], Pair)
