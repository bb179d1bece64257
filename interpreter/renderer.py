"""HTML rendering of interpreted schedule segments."""

from typing import Optional

from bs4 import BeautifulSoup, Tag

from .models import ScheduleSegment, SegmentKind


def render_html(segments: list[ScheduleSegment]) -> str:
    """Render segments as an HTML fragment.

    Headers become ``h4``, timed blocks ``div.time-block`` (with icon and
    colour data attributes), consecutive tips share one ``ul.tips`` list,
    and anything else is a ``p``.
    """
    soup = BeautifulSoup("", "html.parser")
    root = soup.new_tag("div", attrs={"class": "schedule"})
    soup.append(root)
    tips: Optional[Tag] = None

    for segment in segments:
        if segment.kind is SegmentKind.TIP:
            if tips is None:
                tips = soup.new_tag("ul", attrs={"class": "tips"})
                root.append(tips)
            item = soup.new_tag("li", attrs={"class": "tip"})
            item.string = segment.text
            tips.append(item)
            continue
        tips = None

        if segment.kind is SegmentKind.SECTION_HEADER:
            node = soup.new_tag("h4", attrs={"class": "section-header"})
            node.string = segment.text
        elif segment.kind is SegmentKind.TIMED_BLOCK:
            node = _render_time_block(soup, segment)
        else:
            node = soup.new_tag("p", attrs={"class": "plain-text"})
            node.string = segment.text
        root.append(node)

    return str(soup)


def _render_time_block(soup: BeautifulSoup, segment: ScheduleSegment) -> Tag:
    category = segment.category
    block = soup.new_tag(
        "div",
        attrs={
            "class": f"time-block {category.label}" if category else "time-block",
            "data-icon": category.icon if category else "",
            "data-color": category.color if category else "",
        },
    )

    when = soup.new_tag("span", attrs={"class": "time-range"})
    when.string = f"{segment.start_time} - {segment.end_time}"
    block.append(when)

    what = soup.new_tag("span", attrs={"class": "description"})
    what.string = segment.text
    block.append(what)
    return block
