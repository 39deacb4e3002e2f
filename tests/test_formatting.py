from aha_mcp_server import (
    DISCLAIMER_TEXT,
    EMPTY_QUERY_TEXT,
    format_search_response,
    format_widget_response,
)
from aha_resources import AhaResource


def _sodium(id: str, content: str = "sodium", url: str | None = None) -> AhaResource:
    return AhaResource(id=id, title=f"Title {id}", category="Prevention", content=content, url=url)


def test_blank_query_asks_for_a_topic() -> None:
    result = format_search_response("  ", [_sodium("a")])
    assert result.text == EMPTY_QUERY_TEXT
    assert result.structured is None


def test_no_matches_is_a_normal_message() -> None:
    result = format_search_response("xyzzy", [_sodium("a")])

    assert 'couldn\'t find specific information about "xyzzy"' in result.text
    assert "rephrasing" in result.text
    assert "healthcare professional" in result.text
    assert result.structured is None


def test_single_match_layout() -> None:
    resource = AhaResource(
        id="cpr",
        title="Hands-Only CPR",
        category="Emergency Response",
        content="Push hard.",
        url="https://cpr.heart.org",
    )

    result = format_search_response("cpr", [resource])

    assert result.text == (
        'Based on American Heart Association resources, here is information about "cpr":\n\n'
        "1. **Hands-Only CPR**\n"
        "   Category: Emergency Response\n\n"
        "   Push hard.\n\n"
        "   Learn more: https://cpr.heart.org\n"
        f"\n\n{DISCLAIMER_TEXT}"
    )
    assert result.structured == {
        "query": "cpr",
        "resourcesFound": 1,
        "resources": [{"id": "cpr", "title": "Hands-Only CPR", "category": "Emergency Response"}],
    }


def test_truncates_to_top_results_and_discloses_total() -> None:
    resources = [
        _sodium("a", content="sodium sodium", url="https://a"),
        _sodium("b"),
        _sodium("c"),
        _sodium("d"),
    ]

    result = format_search_response("sodium", resources, max_results=3)

    assert result.text.count("\n---\n\n") == 2
    assert "Learn more: https://a" in result.text
    assert "Learn more:" not in result.text.split("\n---\n\n")[1]
    assert "Note: Found 4 relevant resources. Showing the top 3 most relevant results." in result.text
    assert result.text.endswith(DISCLAIMER_TEXT)
    assert result.structured["resourcesFound"] == 4
    assert [r["id"] for r in result.structured["resources"]] == ["a", "b", "c"]


def test_no_note_when_everything_fits() -> None:
    result = format_search_response("sodium", [_sodium("a"), _sodium("b")], max_results=3)
    assert "Note: Found" not in result.text


def test_widget_response() -> None:
    assert format_widget_response("chest pain").text == "Processing your request: chest pain"
    loaded = format_widget_response(None)
    assert loaded.text == "American Heart Association widget loaded."
    assert loaded.structured == {"message": "American Heart Association", "query": ""}
