"""Tests for ordering, date parsing and form parsing helpers."""

from datetime import datetime, timezone

from werkzeug.datastructures import MultiDict

from schemas import Achievement, ContactMessage, Project
from utils.helpers import (
    parse_date, sort_by_display_order, sort_by_date_desc, sort_by_created_desc,
    form_text, form_int, form_bool, form_list
)


def test_display_order_ascending_and_stable():
    projects = [
        Project(title='second-a', display_order=2),
        Project(title='first', display_order=1),
        Project(title='second-b', display_order=2),
        Project(title='unordered', display_order=0),
    ]
    ordered = [p.title for p in sort_by_display_order(projects)]
    assert ordered == ['unordered', 'first', 'second-a', 'second-b']


def test_lower_display_order_comes_first():
    projects = [Project(title='B', display_order=2), Project(title='A', display_order=1)]
    assert sort_by_display_order(projects)[0].title == 'A'


def test_achievements_newest_first():
    achievements = [
        Achievement(title='old', date='2019-05-01'),
        Achievement(title='undated', date='someday'),
        Achievement(title='new', date='2023-01-15'),
        Achievement(title='month', date='March 2021'),
    ]
    assert [a.title for a in sort_by_date_desc(achievements)] == ['new', 'month', 'old', 'undated']


def test_messages_newest_first():
    older = ContactMessage(name='a', email='a@x.io', message='m',
                           createdAt=datetime(2024, 1, 1, tzinfo=timezone.utc))
    newer = ContactMessage(name='b', email='b@x.io', message='m',
                           createdAt=datetime(2024, 6, 1, tzinfo=timezone.utc))
    assert sort_by_created_desc([older, newer]) == [newer, older]


def test_parse_date_formats():
    assert parse_date('2024-03-05') == datetime(2024, 3, 5)
    assert parse_date('2024-03') == datetime(2024, 3, 1)
    assert parse_date('2024') == datetime(2024, 1, 1)
    assert parse_date('Jan 2022') == datetime(2022, 1, 1)
    assert parse_date('') is None
    assert parse_date('not a date') is None


def test_form_parsers():
    form = MultiDict([
        ('name', '  Ada  '),
        ('empty', '   '),
        ('order', '3'),
        ('bad', 'three'),
        ('featured', 'on'),
        ('stack', 'Flask, SQLAlchemy, ,pytest'),
        ('tags[]', 'one'),
        ('tags[]', 'two'),
    ])

    assert form_text(form, 'name') == 'Ada'
    assert form_text(form, 'name', max_length=2) == 'Ad'
    assert form_text(form, 'empty') is None
    assert form_int(form, 'order') == 3
    assert form_int(form, 'bad', default=0) == 0
    assert form_int(form, 'missing') is None
    assert form_bool(form, 'featured') is True
    assert form_bool(form, 'missing') is False
    assert form_list(form, 'stack') == ['Flask', 'SQLAlchemy', 'pytest']
    assert form_list(form, 'tags') == ['one', 'two']
