import httpx
from pagedate.extract.extractor import (
    extract_metadata_from,
    find_date_in_json_ld,
    find_date_in_meta,
    get_date_metadata,
)
from pagedate.fetch.base import FetchOutcome
from pagedate.parse.html_parser import parse_html

def _outcome(html: str, headers=None) -> FetchOutcome:
    return FetchOutcome(
        url="https://news.example.com/story",
        status_code=200,
        content=html,
        headers=httpx.Headers(headers or {}),
    )

class TestDatePriority:
    """Date sources are tried in a fixed order"""

    def test_json_ld_beats_meta(self):
        html = """
        <meta name="date" content="2023-12-31">
        <script type="application/ld+json">{"datePublished": "2024-01-15T08:00:00Z"}</script>
        """
        assert extract_metadata_from(_outcome(html), "date") == "2024-01-15T08:00:00.000Z"

    def test_meta_beats_last_modified(self):
        html = '<meta property="article:published_time" content="2024-02-10T12:00:00Z">'
        outcome = _outcome(html, {"Last-Modified": "Wed, 21 Oct 2015 07:28:00 GMT"})
        assert extract_metadata_from(outcome, "date") == "2024-02-10T12:00:00.000Z"

    def test_time_tag_beats_last_modified(self):
        html = '<p>Posted <time datetime="2024-04-04">April 4</time></p>'
        outcome = _outcome(html, {"Last-Modified": "Wed, 21 Oct 2015 07:28:00 GMT"})
        assert extract_metadata_from(outcome, "date") == "2024-04-04T00:00:00.000Z"

    def test_last_modified_fallback(self):
        html = "<html><head><title>No dates here</title></head><body></body></html>"
        outcome = _outcome(html, {"Last-Modified": "Wed, 21 Oct 2015 07:28:00 GMT"})
        assert extract_metadata_from(outcome, "date") == "2015-10-21T07:28:00.000Z"

    def test_date_header_is_never_used(self):
        outcome = _outcome("<p>hello</p>", {"Date": "Wed, 21 Oct 2015 07:28:00 GMT"})
        assert extract_metadata_from(outcome, "date") is None

    def test_full_article(self, article_html):
        # JSON-LD datePublished, 09:30 at UTC-5
        assert extract_metadata_from(_outcome(article_html), "date") == "2024-03-05T14:30:00.000Z"

    def test_rescued_json_ld(self):
        html = """
        <script type="application/ld+json">
        {"@type": "NewsArticle", "datePublished": "2024-06-01", "articleBody": "trunc
        </script>
        """
        assert extract_metadata_from(_outcome(html), "date") == "2024-06-01T00:00:00.000Z"

class TestSingleCandidateTiers:
    """JSON-LD and meta offer one candidate each; time tags are looped"""

    def test_bad_json_ld_candidate_falls_through_to_meta(self):
        html = """
        <script type="application/ld+json">{"datePublished": "sometime soon"}</script>
        <script type="application/ld+json">{"datePublished": "2024-01-01"}</script>
        <meta name="date" content="2023-05-05">
        """
        assert get_date_metadata(parse_html(html), {}) == "2023-05-05T00:00:00.000Z"

    def test_bad_meta_candidate_falls_through_to_time(self):
        html = """
        <meta property="article:published_time" content="yesterday">
        <meta name="date" content="2023-05-05">
        <time datetime="2022-02-02">Feb 2</time>
        """
        assert get_date_metadata(parse_html(html), {}) == "2022-02-02T00:00:00.000Z"

    def test_time_tags_loop_until_success(self):
        html = """
        <time>a while ago</time>
        <time datetime="not-a-date">x</time>
        <time>Jan 9, 2024</time>
        """
        assert get_date_metadata(parse_html(html), {}) == "2024-01-09T00:00:00.000Z"

    def test_time_only_tag_skipped(self):
        html = '<time>14:05</time> <time datetime="2024-03-05">March 5, 2024</time>'
        assert get_date_metadata(parse_html(html), {}) == "2024-03-05T00:00:00.000Z"

    def test_time_datetime_preferred_over_text(self):
        html = '<time datetime="2024-07-07">June 6, 2020</time>'
        assert get_date_metadata(parse_html(html), {}) == "2024-07-07T00:00:00.000Z"

    def test_nothing_found(self):
        assert get_date_metadata(parse_html(""), None) is None

class TestFindDateInMeta:
    """Meta names are probed in priority order, not document order"""

    def test_published_before_modified(self):
        meta = {"article:modified_time": "B", "article:published_time": "A"}
        assert find_date_in_meta(meta) == "A"

    def test_generic_before_modified(self):
        meta = {"og:updated_time": "B", "pubdate": "A"}
        assert find_date_in_meta(meta) == "A"

    def test_modified_as_last_resort(self):
        assert find_date_in_meta({"modifieddate": "C", "description": "x"}) == "C"

    def test_no_match(self):
        assert find_date_in_meta({"og:title": "x"}) is None

class TestFindDateInJsonLd:
    """Depth-first search through blocks, arrays and @graph"""

    def test_key_order_within_object(self):
        blocks = [{"dateModified": "M", "datePublished": "P"}]
        assert find_date_in_json_ld(blocks) == "P"

    def test_modified_when_no_published(self):
        assert find_date_in_json_ld([{"dateModified": "M"}]) == "M"

    def test_non_string_values_skipped(self):
        blocks = [{"datePublished": {"@value": "x"}, "publishedAt": "A"}]
        assert find_date_in_json_ld(blocks) == "A"

    def test_graph(self):
        blocks = [{
            "@context": "https://schema.org",
            "@graph": [
                {"@type": "WebSite", "name": "Example"},
                {"@type": "Article", "datePublished": "G"},
            ],
        }]
        assert find_date_in_json_ld(blocks) == "G"

    def test_nested_arrays(self):
        blocks = [{"@type": "Organization"}, [[{"pubDate": "N"}]]]
        assert find_date_in_json_ld(blocks) == "N"

    def test_first_block_wins(self):
        blocks = [{"datePublished": "first"}, {"datePublished": "second"}]
        assert find_date_in_json_ld(blocks) == "first"

    def test_other_nesting_not_searched(self):
        blocks = [{"mainEntity": {"datePublished": "hidden"}}]
        assert find_date_in_json_ld(blocks) is None

    def test_scalars(self):
        assert find_date_in_json_ld(["2024-01-01", 5, None]) is None

class TestUnsupportedKind:
    """Kinds other than 'date' are an extension point"""

    def test_returns_none(self, article_html):
        assert extract_metadata_from(_outcome(article_html), "author") is None
