"""Tests for cursor movement."""

import pytest

from textengine import Cursor, Document, Paragraph, Unit

EARTH = "\U0001F30D"


def make_document(*paragraphs):
    document = Document(paragraphs[0])
    for text in paragraphs[1:]:
        document.root.append_block(Paragraph([document.create_run(text)]))
    return document


def test_character_movement_within_run():
    cursor = Cursor(Document("hello world"))
    cursor.move_forward(3, Unit.CHARACTER)
    assert (cursor.run_index, cursor.offset) == (0, 3)
    assert cursor.byte_offset == 3


def test_characters_are_code_points_not_bytes():
    cursor = Cursor(Document(f"Hell{EARTH} World"))
    cursor.move_forward(5, Unit.CHARACTER)
    assert cursor.offset == 5
    assert cursor.byte_offset == 8


def test_character_movement_crosses_runs():
    document = Document("Hello World")
    document.insert(5, ",")
    cursor = Cursor(document)
    cursor.move_forward(5, Unit.CHARACTER)
    assert (cursor.run_index, cursor.offset) == (1, 0)
    cursor.move_forward(1, Unit.CHARACTER)
    assert (cursor.run_index, cursor.offset) == (2, 0)
    cursor.move_forward(2, Unit.CHARACTER)
    assert (cursor.run_index, cursor.offset) == (2, 2)


def test_character_movement_clamps_at_end():
    document = Document("Hello World")
    document.insert(5, ",")
    cursor = Cursor(document)
    cursor.move_forward(100, Unit.CHARACTER)
    assert (cursor.run_index, cursor.offset) == (2, 6)
    assert cursor.index == 12


def test_word_movement():
    cursor = Cursor(Document("hello world test"))
    cursor.move_forward(1, Unit.WORD)
    assert cursor.index == 6
    cursor.move_forward(1, Unit.WORD)
    assert cursor.index == 12
    cursor.move_forward(1, Unit.WORD)
    assert cursor.index == 16
    cursor.move_forward(1, Unit.WORD)
    assert cursor.index == 16


def test_word_movement_multiple_spaces():
    cursor = Cursor(Document("hello    world"))
    cursor.move_forward(1, Unit.WORD)
    assert cursor.index == 9


def test_word_movement_stops_at_paragraph_end():
    cursor = Cursor(make_document("first para", "second"))
    cursor.move_forward(2, Unit.WORD)
    assert cursor.index == 10
    assert (cursor.run_index, cursor.offset) == (1, 0)


def test_paragraph_movement():
    cursor = Cursor(make_document("ab", "cd", "ef"))
    cursor.move_forward(1, Unit.PARAGRAPH)
    assert cursor.index == 2
    cursor.move_forward(5, Unit.PARAGRAPH)
    assert cursor.index == 6


def test_sentence_movement_is_not_supported():
    with pytest.raises(NotImplementedError):
        Cursor(Document("One. Two.")).move_forward(1, Unit.SENTENCE)


def test_negative_quantity_is_rejected():
    with pytest.raises(ValueError):
        Cursor(Document("abc")).move_forward(-1, Unit.CHARACTER)


def test_cursor_in_empty_document():
    cursor = Cursor(Document())
    cursor.move_forward(3, Unit.CHARACTER)
    assert (cursor.run_index, cursor.offset) == (0, 0)
    assert cursor.byte_offset == 0


def test_byte_offset_feeds_insert():
    document = Document(f"Hell{EARTH} World")
    cursor = Cursor(document)
    cursor.move_to(5)
    document.insert(cursor.byte_offset, "!")
    assert document.get_all_text() == f"Hell{EARTH}! World"


RUN5 = "This is some text that is pa"
RUN6 = "RT OF TWO DIFFE"
RUN7 = "rent runs"


def make_run_document():
    document = Document(RUN5)
    paragraph = next(document.paragraphs())
    paragraph.append_inline(document.create_run(RUN6))
    paragraph.append_inline(document.create_run(RUN7))
    return document


def make_story_document():
    document = Document("Once upon a time there was a little dog, ")
    next(document.paragraphs()).append_inline(document.create_run("AND HIS NAME WAS ROVER."))
    for text in ["By J. R. R. Tolkien", "Roverandom, 1920s"]:
        document.root.append_block(Paragraph([document.create_run(text)]))
    return document


@pytest.mark.parametrize("amount", [1, 10])
def test_backward_at_start_stays_put(amount):
    cursor = Cursor(Document("Once upon a time"))
    cursor.move_backward(amount, Unit.CHARACTER)
    assert cursor.index == 0


@pytest.mark.parametrize("amount", [2, 10])
def test_backward_across_run(amount):
    cursor = Cursor(make_run_document())
    cursor.move_forward(29, Unit.CHARACTER)
    assert cursor.run_index == 1
    cursor.move_backward(amount, Unit.CHARACTER)
    assert cursor.run_index == 0
    assert cursor.index == 29 - amount


@pytest.mark.parametrize("amount", [1, 5])
def test_backward_across_paragraph(amount):
    cursor = Cursor(make_story_document())
    cursor.move_forward(64, Unit.CHARACTER)
    assert (cursor.run_index, cursor.offset) == (2, 0)
    cursor.move_backward(amount, Unit.CHARACTER)
    assert cursor.run_index == 1
    assert cursor.index == 64 - amount


def test_backward_across_several_paragraphs():
    cursor = Cursor(make_story_document())
    cursor.move_forward(83, Unit.CHARACTER)
    assert (cursor.run_index, cursor.offset) == (3, 0)
    cursor.move_backward(62, Unit.CHARACTER)
    assert (cursor.run_index, cursor.offset) == (0, 21)


@pytest.mark.parametrize("amount", [1, 7, 30])
def test_balanced_traversal(amount):
    cursor = Cursor(make_story_document())
    cursor.move_forward(40, Unit.CHARACTER)
    cursor.move_forward(amount, Unit.CHARACTER)
    cursor.move_backward(amount, Unit.CHARACTER)
    assert cursor.index == 40


def test_backward_counts_code_points():
    cursor = Cursor(Document(f"Hell{EARTH} World"))
    cursor.move_last()
    cursor.move_backward(7, Unit.CHARACTER)
    assert cursor.index == 4
    assert cursor.byte_offset == 4


def test_backward_word_movement():
    cursor = Cursor(Document("hello world test"))
    cursor.move_last()
    cursor.move_backward(1, Unit.WORD)
    assert cursor.index == 12
    cursor.move_backward(1, Unit.WORD)
    assert cursor.index == 6
    cursor.move_backward(5, Unit.WORD)
    assert cursor.index == 0


def test_backward_word_from_inside_word():
    cursor = Cursor(Document("hello    world"))
    cursor.move_to(11)
    cursor.move_backward(1, Unit.WORD)
    assert cursor.index == 9
    cursor.move_backward(1, Unit.WORD)
    assert cursor.index == 0


def test_backward_paragraph_movement():
    cursor = Cursor(make_document("ab", "cd", "ef"))
    cursor.move_to(5)
    cursor.move_backward(1, Unit.PARAGRAPH)
    assert cursor.index == 4
    cursor.move_backward(1, Unit.PARAGRAPH)
    assert cursor.index == 2
    cursor.move_backward(5, Unit.PARAGRAPH)
    assert cursor.index == 0


def test_backward_rejects_negative_and_sentence():
    cursor = Cursor(Document("One. Two."))
    with pytest.raises(ValueError):
        cursor.move_backward(-1, Unit.CHARACTER)
    with pytest.raises(NotImplementedError):
        cursor.move_backward(1, Unit.SENTENCE)


def test_move_first_and_last():
    cursor = Cursor(make_story_document())
    cursor.move_last()
    assert (cursor.run_index, cursor.offset) == (3, 17)
    assert cursor.byte_offset == cursor.document.length
    cursor.move_first()
    assert (cursor.run_index, cursor.offset) == (0, 0)


def test_move_last_in_empty_document():
    cursor = Cursor(Document())
    cursor.move_last()
    assert (cursor.run_index, cursor.offset) == (0, 0)
