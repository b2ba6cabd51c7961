from vidyapith_content.html_text import (
    Anchor,
    anchors,
    clean_html,
    decode_cloudflare_email,
    elements,
    email_from_anchor,
    image_urls,
    resolve_href,
    text_after_heading,
)

BASE = "https://www.vidyapith.org/"


def _cf_encode(email: str, key: int = 0x42) -> str:
    return f"{key:02x}" + "".join(f"{ord(char) ^ key:02x}" for char in email)


def test_clean_html_strips_tags_scripts_and_entities() -> None:
    fragment = (
        "<script>var x = 1;</script><p>Hello&nbsp;<b>world</b></p>"
        "<!-- hidden --><div>Line<br/>two &amp; three</div>"
    )

    assert clean_html(fragment) == "Hello world\nLine\ntwo & three"


def test_elements_filters_by_class() -> None:
    page = (
        '<div class="paragraph">one</div><div class="other">two</div>'
        '<div class="wsite paragraph">three</div>'
    )

    assert elements(page, "div", class_contains="paragraph") == ["one", "three"]


def test_anchors_and_resolve_href() -> None:
    page = '<a href="/events.html">Events</a><a href="mailto:x@y.org">Mail</a>'

    found = anchors(page)

    assert [anchor.text for anchor in found] == ["Events", "Mail"]
    assert resolve_href(found[0].href, BASE) == "https://www.vidyapith.org/events.html"
    assert resolve_href(found[1].href, BASE) is None
    assert resolve_href("javascript:void(0)", BASE) is None


def test_image_urls_skips_logos_dedupes_and_limits() -> None:
    page = (
        '<img src="/uploads/logo.png"><img src="/uploads/a.jpg?1">'
        '<img data-src="/uploads/a.jpg?2"><img src="/uploads/b.jpg"><img src="/uploads/c.jpg">'
    )

    assert image_urls(page, BASE, limit=2) == [
        "https://www.vidyapith.org/uploads/a.jpg",
        "https://www.vidyapith.org/uploads/b.jpg",
    ]


def test_text_after_heading_stops_at_next_heading() -> None:
    page = "<h2>Thought of the Day</h2><p>Be fearless.</p><h2>Upcoming</h2><p>Other</p>"

    assert text_after_heading(page, "thought of the day") == "Be fearless."
    assert text_after_heading(page, "missing") is None


def test_cloudflare_email_decoding() -> None:
    encoded = _cf_encode("office@vidyapith.org")

    assert decode_cloudflare_email(encoded) == "office@vidyapith.org"
    assert decode_cloudflare_email("zz") is None
    assert decode_cloudflare_email("abc") is None

    href = f"/cdn-cgi/l/email-protection#{encoded}"
    anchor = Anchor(href=href, text="[email protected]", attrs={})
    assert email_from_anchor(anchor) == "office@vidyapith.org"


def test_email_from_anchor_prefers_visible_text_then_mailto() -> None:
    assert email_from_anchor(Anchor(href="#", text="a@b.org", attrs={})) == "a@b.org"
    assert (
        email_from_anchor(Anchor(href="mailto:c@d.org?subject=Hi", text="Write", attrs={}))
        == "c@d.org"
    )
    assert email_from_anchor(Anchor(href="/contact", text="Contact", attrs={})) is None
