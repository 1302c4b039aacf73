from pathlib import Path

import pytest

from nufmt.config import CONFIG_FILE_NAME, Config, find_config, load_config, parse_config
from nufmt.errors import ConfigError


def test_defaults() -> None:
    config = Config()

    assert (config.indent_width, config.line_length, config.margin, config.exclude) == (4, 80, 1, ())


def test_parse_full_record() -> None:
    config = parse_config('{indent: 2, line_length: 100, margin: 0, exclude: ["a*.nu", "vendor/*"]}')

    assert config == Config(indent_width=2, line_length=100, margin=0, exclude=("a*.nu", "vendor/*"))


def test_limit_is_an_alias_for_line_length() -> None:
    assert parse_config("{limit: 60}").line_length == 60


def test_quoted_keys_and_multiline_record() -> None:
    config = parse_config('{\n    "indent": 8\n    margin: 2\n}\n')

    assert config.indent_width == 8
    assert config.margin == 2


def test_empty_record_keeps_defaults() -> None:
    assert parse_config("{}") == Config()


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("{indent: 2, colour: 1}", "Found unknown configuration option: colour"),
        ('{indent: "two"}', "Found invalid type for option 'indent': got string, expected int"),
        ("{indent: 2.5}", "Found invalid type for option 'indent': got float, expected int"),
        ("{indent: 0}", "Found invalid value for option 'indent': got 0, expected a positive integer"),
        ("{margin: -1}", "Found invalid value for option 'margin': got -1, expected a non-negative integer"),
        ('{exclude: "a*"}', "Found invalid type for option 'exclude': got string, expected list<string>"),
        ("{exclude: [1]}", "Found invalid type for option 'exclude': got list<int>, expected list<string>"),
        ("[1, 2]", "The configuration is not a valid nuon record"),
        ("{indent: 2} {margin: 1}", "The configuration is not a valid nuon record"),
        ("{indent: ", "The configuration is not a valid nuon record"),
    ],
    ids=[
        "unknown_key",
        "wrong_type",
        "float_value",
        "non_positive_indent",
        "negative_margin",
        "exclude_not_list",
        "exclude_item_not_string",
        "not_a_record",
        "two_records",
        "syntax_error",
    ],
)
def test_invalid_configuration(text: str, message: str) -> None:
    with pytest.raises(ConfigError) as exc_info:
        parse_config(text)

    assert exc_info.value.message == message


def test_load_config_reads_file(tmp_path: Path) -> None:
    path = tmp_path / CONFIG_FILE_NAME
    path.write_text("{indent: 2}\n", encoding="utf-8")

    assert load_config(path) == Config(indent_width=2)


def test_load_config_error_names_the_file(tmp_path: Path) -> None:
    path = tmp_path / CONFIG_FILE_NAME
    path.write_text("{bogus: 1}\n", encoding="utf-8")

    with pytest.raises(ConfigError) as exc_info:
        load_config(path)

    assert exc_info.value.path == str(path)
    assert str(exc_info.value).startswith(str(path))


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError) as exc_info:
        load_config(tmp_path / "missing.nuon")

    assert exc_info.value.message.startswith("Failed read the configuration file")


def test_find_config(tmp_path: Path) -> None:
    assert find_config(tmp_path) is None

    (tmp_path / CONFIG_FILE_NAME).write_text("{}", encoding="utf-8")

    assert find_config(tmp_path) == tmp_path / CONFIG_FILE_NAME
