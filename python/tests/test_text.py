from pytest import raises

from tally import Text

from . import assert_marks_dirty

def test_construction():
    text = Text('blah')
    assert text.text == 'blah'

    with raises(TypeError):
        Text(0)  # type: ignore

def test_set_text():
    t = Text('foo')
    with assert_marks_dirty(t):
        t.text = 'bar'
    assert t.text == 'bar'

def test_set_text__rejects_non_str():
    t = Text('foo')
    with raises(TypeError):
        t.text = 3  # type: ignore
    assert t.text == 'foo'

def test_subtree_json():
    assert Text('hi').subtree_json() == {'text': 'hi'}
