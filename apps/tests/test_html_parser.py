from apps.services.change_ai.utils.html_parser import (
    TRUNCATION_MARKER,
    clean_html,
    extract_json_ld,
    extract_text_content,
    iter_json_ld_nodes,
)


class TestCleanHtml:
    def test_removes_scripts_styles_and_comments(self, plain_page):
        cleaned = clean_html(plain_page)
        assert "dataLayer" not in cleaned
        assert "color: red" not in cleaned
        assert "promo banner" not in cleaned
        assert '<span class="price">$24.50</span>' in cleaned

    def test_collapses_whitespace(self):
        assert clean_html("  <p>a\n\n\t b</p>  ") == "<p>a b</p>"

    def test_script_tags_are_case_insensitive(self):
        assert clean_html("<SCRIPT type='x'>bad()</SCRIPT><p>ok</p>") == "<p>ok</p>"

    def test_unclosed_script_is_dropped(self):
        # html.parser keeps everything after an unclosed <script> inside it
        assert "var a" not in clean_html("<p>ok</p><script>var a = 1;")


class TestExtractTextContent:
    def test_strips_tags(self, plain_page):
        assert extract_text_content(plain_page) == "Desk Lamp $24.50"

    def test_truncates_with_marker(self):
        text = extract_text_content("<p>" + "x" * 100 + "</p>", max_length=10)
        assert text == "x" * 10 + TRUNCATION_MARKER

    def test_never_longer_than_limit_plus_marker(self):
        html = "<div>" + " ".join(["word"] * 5000) + "</div>"
        for limit in (0, 1, 7, 100, 24999):
            assert len(extract_text_content(html, max_length=limit)) <= limit + len(TRUNCATION_MARKER)

    def test_short_text_is_not_marked(self):
        assert extract_text_content("<b>hi</b>", max_length=10) == "hi"

    def test_entities_are_decoded(self):
        assert extract_text_content("<span>&euro;89.99&nbsp;incl.</span>") == "\u20ac89.99 incl."


class TestExtractJsonLd:
    def test_parses_every_block(self, product_page):
        html = product_page + '<script type="application/ld+json">{"@type": "BreadcrumbList"}</script>'
        blocks = extract_json_ld(html)
        assert [b["@type"] for b in blocks] == ["Product", "BreadcrumbList"]

    def test_skips_invalid_json(self):
        html = (
            "<script type='application/ld+json'>{not json}</script>"
            "<SCRIPT TYPE=\"application/ld+json\">{\"@type\": \"Product\"}</SCRIPT>"
        )
        assert extract_json_ld(html) == [{"@type": "Product"}]

    def test_unquoted_type_attribute(self):
        html = '<script type=application/ld+json>{"@type":"Product","offers":{"price":"9.99"}}</script>'
        assert extract_json_ld(html) == [{"@type": "Product", "offers": {"price": "9.99"}}]

    def test_empty_block_is_skipped(self):
        assert extract_json_ld('<script type="application/ld+json">  </script>') == []

    def test_ignores_other_scripts(self):
        assert extract_json_ld("<script type='text/javascript'>{\"a\": 1}</script>") == []

    def test_iter_nodes_expands_arrays_and_graphs(self):
        blocks = [
            [{"@type": "Organization"}],
            {"@context": "https://schema.org", "@graph": [{"@type": "WebPage"}, {"@type": "Product"}]},
        ]
        types = [node.get("@type") for node in iter_json_ld_nodes(blocks)]
        assert types == ["Organization", None, "WebPage", "Product"]
