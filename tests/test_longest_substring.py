import pytest

from gee.leetcode.longest_substring import (
    length_of_longest_substring_bitset,
    length_of_longest_substring_hash,
    length_of_longest_substring_window,
)

KNOWN = [
    ("abcabcbb", 3),
    ("asdasdasd", 3),
    ("abcabcbb z", 3),
    ("", 0),
    ("bbbbb", 1),
    ("pwwkew", 3),
    ("a", 1),
    ("dvdf", 3),
]


@pytest.mark.parametrize("text, expected", KNOWN)
def test_bitset_known_lengths(text, expected):
    assert length_of_longest_substring_bitset(text) == expected


@pytest.mark.parametrize("text, expected", KNOWN)
def test_window_known_lengths(text, expected):
    assert length_of_longest_substring_window(text) == expected


@pytest.mark.parametrize("text, expected", KNOWN)
def test_hash_known_lengths(text, expected):
    assert length_of_longest_substring_hash(text) == expected


@pytest.mark.parametrize(
    "text", ["abba", "tmmzuxt", "abcdefg", "aab", "zzzyx", "héllo wörld"]
)
def test_implementations_agree(text):
    bitset = length_of_longest_substring_bitset(text)
    window = length_of_longest_substring_window(text)
    hashed = length_of_longest_substring_hash(text)
    assert bitset == window == hashed


def test_all_distinct_is_whole_length():
    assert length_of_longest_substring_bitset("abcdefg") == 7
    assert length_of_longest_substring_window("abcdefg") == 7
    assert length_of_longest_substring_hash("abcdefg") == 7