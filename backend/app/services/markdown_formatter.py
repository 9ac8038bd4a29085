import re

# Page marker as written by combine_pages; one at the very start of the text
# counts too.
PAGE_SPLIT_RE = re.compile(r"(?:^|\n\n)----- Page (\d+) -----\n\n")


def format_as_markdown(file_name: str | None, combined_text: str | None) -> str:
    """Render OCR text as Markdown with one ``## Page N`` section per page.

    Text before the first page marker is dropped. Without any marker the raw
    text is emitted as-is under the optional file heading.
    """
    md = f"# {file_name}\n\n" if file_name else ""
    raw = combined_text or ""

    parts = PAGE_SPLIT_RE.split(raw)
    if len(parts) == 1:
        return (md + raw.strip()).strip()

    # parts = [preamble, number, content, number, content, ...]
    sections = []
    for i in range(1, len(parts) - 1, 2):
        number, content = parts[i], parts[i + 1].strip()
        if not content:
            continue
        sections.append(f"## Page {number}\n\n{content}")

    return (md + "\n\n".join(sections)).strip()
