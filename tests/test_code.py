import pytest

from befunge.befunge import Code, InvalidWrite


def test_rows_are_jagged():
    code = Code('ab\ncde')
    assert code.rows == [['a', 'b'], ['c', 'd', 'e']]


def test_crlf_line_endings():
    assert Code('a\r\nb').rows == [['a'], ['b']]


def test_empty_source_has_one_empty_row():
    assert Code('').rows == [[]]


def test_trailing_newline_keeps_empty_row():
    assert Code('ab\n').rows == [['a', 'b'], []]


def test_get_is_bounds_checked():
    code = Code('ab\ncde')
    assert code.get(1, 0) == 'b'
    assert code.get(2, 1) == 'e'
    assert code.get(2, 0) is None
    assert code.get(0, 2) is None
    assert code.get(-1, 0) is None
    assert code.get(0, -1) is None


def test_set():
    code = Code('ab\ncde')
    code.set(2, 1, '*')
    assert code.get(2, 1) == '*'
    assert str(code) == 'ab\ncd*'


@pytest.mark.parametrize('x, y', [(2, 0), (0, 2), (-1, 0), (0, -1)])
def test_set_out_of_range(x, y):
    code = Code('ab\ncde')
    with pytest.raises(InvalidWrite):
        code.set(x, y, '*')
    assert str(code) == 'ab\ncde'


def test_wrap():
    code = Code('abc\nd')
    assert code.wrap(1, 0) == (1, 0)
    assert code.wrap(3, 0) == (0, 0)
    assert code.wrap(-1, 0) == (2, 0)
    assert code.wrap(0, -1) == (0, 1)
    assert code.wrap(0, 2) == (0, 0)


def test_wrap_uses_target_row_length():
    code = Code('abc\nd')
    assert code.wrap(2, 1) == (0, 1)
    assert code.wrap(2, 2) == (2, 0)


def test_wrap_onto_empty_row():
    assert Code('ab\n\ncd').wrap(1, 1) == (0, 0)


def test_wrap_without_rows():
    code = Code('x')
    code.rows = []
    assert code.wrap(5, 5) == (0, 0)
    assert code.get(0, 0) is None
