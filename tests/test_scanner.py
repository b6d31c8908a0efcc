import io

import pytest

from brace.errors import ScanError
from brace.scanner import is_identifier, is_reserved, next_token, scan_token, skip_group


def tokens(data: bytes):
    stream = io.BytesIO(data)
    out = []
    while True:
        token = next_token(stream)
        if token is None:
            return out
        out.append(token)


def test_whitespace_and_comments_are_skipped():
    assert tokens(b'  + foo\t# a comment { }\n{\r\n}') == [b'+', b'foo', b'{', b'}']


def test_comment_directly_after_token():
    assert tokens(b'+# increment\n-') == [b'+', b'-']


def test_comment_reaching_end_of_source():
    assert tokens(b'x # trailing, no newline') == [b'x']
    assert tokens(b'# only a comment') == []


def test_adjacent_symbols_form_one_identifier():
    assert tokens(b'{} ++ a|b') == [b'{}', b'++', b'a|b']


def test_position_is_past_the_delimiter():
    stream = io.BytesIO(b'ab cd')
    assert next_token(stream) == b'ab'
    assert stream.tell() == 3
    assert next_token(stream) == b'cd'
    assert stream.tell() == 5
    assert next_token(stream) is None


def test_scan_token_reports_start_offset():
    stream = io.BytesIO(b'   main {')
    assert scan_token(stream) == (3, b'main')
    assert scan_token(stream) == (8, b'{')
    assert scan_token(stream) is None


def test_classification():
    for symbol in b'+-{}|#?!@':
        assert is_reserved(bytes([symbol]))
    assert is_identifier(b'x')
    assert is_identifier(b'++')
    assert not is_identifier(b'|')


def test_skip_group_finds_matching_close():
    stream = io.BytesIO(b' a { b } } c')
    assert skip_group(stream) == 9
    assert next_token(stream) == b'c'


def test_skip_group_ignores_braces_in_comments_and_identifiers():
    stream = io.BytesIO(b' # { \n a{ } tail')
    assert skip_group(stream) == 10
    assert next_token(stream) == b'tail'


def test_skip_group_unclosed():
    with pytest.raises(ScanError) as exc:
        skip_group(io.BytesIO(b' { + } '), 'prog.brc')
    assert exc.value.err.name == 'UnclosedGroup'
    assert 'prog.brc' in str(exc.value)
