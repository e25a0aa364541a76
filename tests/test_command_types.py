import msgspec
import pytest

from botscaffold.commands import (
    CommandMeta,
    CommandOption,
    OptionChoice,
    OptionType,
    SlashCommandData,
)


@pytest.mark.parametrize("name", ["ping", "echo-back", "set_role", "a", "x" * 32])
def test_valid_names(name: str) -> None:
    assert SlashCommandData(name=name, description="ok").name == name


@pytest.mark.parametrize("name", ["", "Ping", "has space", "x" * 33, "bang!"])
def test_invalid_names(name: str) -> None:
    with pytest.raises(ValueError, match="name"):
        SlashCommandData(name=name, description="ok")


@pytest.mark.parametrize("description", ["", "d" * 101])
def test_invalid_descriptions(description: str) -> None:
    with pytest.raises(ValueError, match="description"):
        SlashCommandData(name="ping", description=description)


def test_payload_includes_options() -> None:
    data = SlashCommandData(
        name="echo",
        description="Echo text back",
        options=(
            CommandOption(
                type=OptionType.STRING,
                name="text",
                description="What to say",
                required=True,
            ),
            CommandOption(
                type=OptionType.STRING,
                name="tone",
                description="How to say it",
                choices=(OptionChoice("loud", "loud"), OptionChoice("quiet", "quiet")),
            ),
        ),
    )

    payload = data.to_payload()

    assert payload["type"] == 1
    assert isinstance(payload["options"], list)
    assert payload["options"][0] == {
        "type": 3,
        "name": "text",
        "description": "What to say",
        "required": True,
    }
    assert payload["options"][1]["choices"] == [
        {"name": "loud", "value": "loud"},
        {"name": "quiet", "value": "quiet"},
    ]


def test_required_option_after_optional_is_rejected() -> None:
    with pytest.raises(ValueError, match="follows an optional"):
        SlashCommandData(
            name="echo",
            description="Echo",
            options=(
                CommandOption(type=OptionType.STRING, name="tone", description="tone"),
                CommandOption(
                    type=OptionType.STRING, name="text", description="text", required=True
                ),
            ),
        )


def test_meta_rejects_unknown_keys() -> None:
    with pytest.raises(msgspec.ValidationError):
        msgspec.convert({"required_role": "mod", "extra": 1}, CommandMeta)
