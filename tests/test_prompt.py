import io

import pytest

from opsdkutil.prompt import get_optional_input, get_required_input, get_string_array


@pytest.mark.parametrize(
    "content, expected",
    [
        ("Memcached Operator\n", "Memcached Operator"),
        ("\nMemcached Operator\n", "Memcached Operator"),
        ("'Memcached Operator'\n", "Memcached Operator"),
    ],
)
def test_required_input(content, expected):
    assert get_required_input("Enter a word: ", io.StringIO(content)) == expected


@pytest.mark.parametrize(
    "content, expected",
    [
        ("app, memcached-operator \n", ["app", "memcached-operator"]),
        ("\noperator, app\n", ["operator", "app"]),
    ],
)
def test_string_array(content, expected):
    assert get_string_array("Enter list of words", io.StringIO(content)) == expected


def test_required_prompt_text(capsys):
    get_required_input("Enter a word: ", io.StringIO("x\n"))
    assert capsys.readouterr().out == "\nEnter a word: (required): \n> "


def test_required_reprompts_after_empty(capsys):
    result = get_required_input("Word", io.StringIO("\nvalue\n"))
    out = capsys.readouterr().out
    assert result == "value"
    assert out.count("(required)") == 2
    assert "Input is required. " in out


def test_optional_input_may_be_empty(capsys):
    assert get_optional_input("Name", io.StringIO("\n")) == ""
    assert capsys.readouterr().out == "\nName (optional): \n> "


def test_optional_input_strips_quotes():
    assert get_optional_input("Name", io.StringIO('  "value"  \n')) == "value"


def test_end_of_input_raises():
    with pytest.raises(EOFError):
        get_required_input("Word", io.StringIO("\n"))


def test_partial_line_raises():
    with pytest.raises(EOFError):
        get_string_array("List", io.StringIO("a, b"))