from src.instant_answer.config import BASE_URL
from src.instant_answer.models import RelatedEntry
from src.instant_answer.topics import absolute_url, extract_related_topics


# --- absolute_url -------------------------------------------------------------


def test_absolute_url_prefixes_api_origin():
    assert absolute_url("/i/abc.png") == f"{BASE_URL}/i/abc.png"


def test_absolute_url_empty_or_missing_path_is_none():
    """Empty paths must never turn into an image URL (or an empty string)."""
    assert absolute_url("") is None
    assert absolute_url(None) is None
    assert absolute_url(42) is None


# --- extract_related_topics ---------------------------------------------------


def test_leaf_topic_defaults_to_general_category():
    related = [
        {
            "FirstURL": "https://duckduckgo.com/Bart_Simpson",
            "Icon": {"URL": "/i/bart.png"},
            "Result": '<a href="https://duckduckgo.com/Bart_Simpson">Bart Simpson</a> A character',
        }
    ]

    entries = extract_related_topics(related)

    assert entries == [
        RelatedEntry(
            url="https://duckduckgo.com/Bart_Simpson",
            image=f"{BASE_URL}/i/bart.png",
            text='<a href="https://duckduckgo.com/Bart_Simpson">Bart Simpson</a><br /> A character',
            category="General",
        )
    ]


def test_group_topics_are_flattened_with_group_name():
    related = [
        {"FirstURL": "u0", "Result": "r0</a>"},
        {
            "Name": "Family",
            "Topics": [
                {"FirstURL": "u1", "Result": "r1</a>"},
                {"FirstURL": "u2", "Result": "r2</a>"},
            ],
        },
        {"Name": "Friends", "Topics": [{"FirstURL": "u3", "Result": "r3</a>"}]},
    ]

    entries = extract_related_topics(related)

    assert [e.url for e in entries] == ["u0", "u1", "u2", "u3"]
    assert [e.category for e in entries] == ["General", "Family", "Family", "Friends"]
    assert entries[1].text == "r1</a><br />"


def test_nested_groups_are_flattened_unconditionally():
    related = [
        {
            "Name": "Outer",
            "Topics": [
                {"Name": "Inner", "Topics": [{"FirstURL": "deep"}]},
                {"FirstURL": "shallow"},
            ],
        }
    ]

    entries = extract_related_topics(related)

    assert [(e.url, e.category) for e in entries] == [
        ("deep", "Inner"),
        ("shallow", "Outer"),
    ]


def test_every_closing_anchor_gets_a_line_break():
    related = [{"Result": "<a>one</a> and <a>two</a>"}]

    (entry,) = extract_related_topics(related)

    assert entry.text == "<a>one</a><br /> and <a>two</a><br />"


def test_missing_fields_degrade_to_absent_values():
    related = [{}, {"Icon": {"URL": ""}}, {"Icon": "not-a-dict"}]

    entries = extract_related_topics(related)

    assert len(entries) == 3
    for entry in entries:
        assert entry.url is None
        assert entry.image is None
        assert entry.text is None
        assert entry.category == "General"


def test_non_list_input_and_non_object_entries_are_ignored():
    assert extract_related_topics(None) == []
    assert extract_related_topics("") == []
    assert extract_related_topics(["junk", 3, {"FirstURL": "u"}]) == [
        RelatedEntry(url="u")
    ]
