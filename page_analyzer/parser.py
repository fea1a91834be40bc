from dataclasses import dataclass

from bs4 import BeautifulSoup


@dataclass(frozen=True)
class PageSummary:
    title: str = ""
    h1: str = ""
    description: str = ""


def parse_page(html_text: str) -> PageSummary:
    soup = BeautifulSoup(html_text or "", "html.parser")
    title_tag = soup.find("title")
    h1_tag = soup.find("h1")
    desc_tag = soup.find(
        "meta", attrs={"name": "description"}
    )
    title = title_tag.get_text().strip() if title_tag else ""
    h1 = h1_tag.get_text().strip() if h1_tag else ""
    description = (
        desc_tag.get("content").strip()
        if desc_tag and desc_tag.get("content")
        else ""
    )
    return PageSummary(title=title, h1=h1, description=description)
