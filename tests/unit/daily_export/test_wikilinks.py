import pytest

from daily_export.wikilinks import extract_wiki_links


@pytest.mark.unit
@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ("[[A]] [[A]]", ["A"]),
        ("[[A|B]]", ["A"]),
        ("[[A#S]]", ["A"]),
        ("[[A#S|Alias]]", ["A"]),
        ("[[Folder/Page]]", ["Folder/Page"]),
        ("Just plain text", []),
        ("", []),
        ("[[First]] and [[Second]] and [[Third]]", ["First", "Second", "Third"]),
        ("[[  Padded Page  ]]", ["Padded Page"]),
        ("[[B]] [[A]] [[B|again]]", ["B", "A"]),
    ],
)
def test_extract_wiki_links(content: str, expected: list[str]) -> None:
    assert extract_wiki_links(content) == expected


@pytest.mark.unit
def test_extract_wiki_links_ignores_empty_and_single_brackets() -> None:
    assert extract_wiki_links("[[]] and [single] and [[|alias]] and [[#anchor]]") == []
