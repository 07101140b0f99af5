import pytest

from comicsearch.words import (
    FORBIDDEN_WORDS,
    PhraseTooLongError,
    norm,
    norm_request,
    split_words,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("hello world", ["hello", "world"]),
        ("hello, world!", ["hello", "world"]),
        ("hello   world  test", ["hello", "world", "test"]),
        ("hello123 world456", ["hello123", "world456"]),
        ("привет мир", ["привет", "мир"]),
        ("hello-world test_phrase", ["hello", "world", "test", "phrase"]),
        ("", []),
        ("!!! , ,, ...", []),
    ],
)
def test_split_words(text, expected):
    assert split_words(text) == expected


@pytest.mark.parametrize(
    ("phrase", "expected"),
    [
        ("Hello beautiful world", ["beauti", "hello", "world"]),
        ("the cat and the dog", ["cat", "dog"]),
        ("Hello, world! This is a test.", ["hello", "is", "test", "this", "world"]),
        ("running jumping swimmer", ["jump", "run", "swimmer"]),
        ("Running JUMPING swimmer", ["jump", "run", "swimmer"]),
        ("the and or a", []),
        ("", []),
        ("hello hello world world", ["hello", "world"]),
        ("test123 hello456", ["hello456", "test123"]),
    ],
)
def test_norm(phrase, expected):
    assert sorted(norm(phrase)) == sorted(expected)


@pytest.mark.parametrize(
    ("word", "filtered"),
    [
        ("of", True),
        ("the", True),
        ("a", True),
        ("and", True),
        ("or", True),
        ("will", True),
        ("would", True),
        ("i", True),
        ("me", True),
        ("you", True),
        ("your", True),
        ("he", True),
        ("his", True),
        ("him", True),
        ("who", True),
        ("it", True),
        ("that", True),
        ("she", True),
        ("her", True),
        ("we", True),
        ("our", True),
        ("they", True),
        ("their", True),
        ("them", True),
        ("is", False),
        ("this", False),
        ("hello", False),
        ("world", False),
        ("test", False),
    ],
)
def test_norm_filters_forbidden_words(word, filtered):
    assert (len(norm(word)) == 0) is filtered


def test_norm_results_are_unique():
    result = norm("hello hello world world hello")
    assert len(result) == len(set(result))


def test_norm_never_returns_forbidden_words():
    result = norm("The cat and her dog would run with them and their friends")
    assert FORBIDDEN_WORDS.isdisjoint(result)
    assert "cat" in result


def test_norm_request_accepts_limit():
    phrase = "a" * 4095 + " "
    assert norm_request(phrase) == []


def test_norm_request_same_as_norm():
    phrase = "Hello beautiful world"
    assert norm_request(phrase) == norm(phrase)


def test_norm_request_rejects_long_phrase():
    with pytest.raises(PhraseTooLongError) as excinfo:
        norm_request("x" * 4097)
    assert excinfo.value.size == 4097
    assert "got 4097 bytes" in str(excinfo.value)


def test_norm_request_counts_bytes_not_characters():
    phrase = "я" * 2049
    with pytest.raises(PhraseTooLongError) as excinfo:
        norm_request(phrase)
    assert excinfo.value.size == len(phrase.encode("utf-8"))


def test_phrase_too_long_is_value_error():
    with pytest.raises(ValueError):
        norm_request("y" * 5000)