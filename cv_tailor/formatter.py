"""
Heuristic formatter that turns tailored CV text into semantic HTML.

Lines are classified one at a time by a small state machine. The scan is
always in one of three states: before any section, inside the header block
(name and contact lines), or inside a named section. Classification is
first-match-wins; see ResumeFormatter._classify for the order.
"""

import html
import re
from enum import Enum
from typing import Callable, Dict, List


SECTION_TITLES = (
    "CONTACT", "PROFESSIONAL SUMMARY", "SUMMARY", "WORK EXPERIENCE", "EXPERIENCE",
    "SKILLS", "EDUCATION", "PROJECTS", "CERTIFICATIONS", "ACHIEVEMENTS",
)

SECTION_PATTERN = re.compile(r'^(%s)' % "|".join(SECTION_TITLES), re.IGNORECASE)
NAME_PATTERN = re.compile(r'^[A-Z][a-z]+ [A-Z][a-z]+')
EMAIL_PATTERN = re.compile(r'^[\w.-]+@[\w.-]+\.\w+')
PHONE_PATTERN = re.compile(r'^\+?\d')
PROFILE_PATTERN = re.compile(r'linkedin|github', re.IGNORECASE)

JOB_TITLE_PATTERN = re.compile(r'^[A-Z][a-zA-Z\s]+$')
COMPANY_PATTERN = re.compile(r'(Inc\.|LLC|Corp|Company|Ltd|Technologies|Solutions|Systems)', re.IGNORECASE)
YEAR_PATTERN = re.compile(r'\d{4}')
DATE_RANGE_PATTERN = re.compile(r'-|\bto\b|present', re.IGNORECASE)

DEGREE_PATTERN = re.compile(r'^(Bachelor|Master|PhD|Associate|Certificate)', re.IGNORECASE)
INSTITUTION_PATTERN = re.compile(r'(University|College|Institute|School)', re.IGNORECASE)

BULLET_MARKERS = ("•", "-", "*")
MAX_JOB_TITLE_LENGTH = 50
NAME_LINE_LIMIT = 3


class ScanState(Enum):
    NO_SECTION = "no_section"
    IN_HEADER = "in_header"
    IN_SECTION = "in_section"


class LineKind(Enum):
    """Categories a CV line can be classified into."""
    TITLE = "title"
    CONTACT = "contact"
    SECTION = "section"
    JOB_TITLE = "job_title"
    COMPANY = "company"
    DATE = "date"
    SKILL = "skill"
    DEGREE = "degree"
    SCHOOL = "school"
    BULLET = "bullet"
    SUMMARY = "summary"
    PARAGRAPH = "paragraph"


def _escape(text: str) -> str:
    return html.escape(text, quote=False)


def is_contact_line(line: str) -> bool:
    """Email, phone (leading digit) or a LinkedIn/GitHub reference."""
    return bool(
        EMAIL_PATTERN.match(line)
        or PHONE_PATTERN.match(line)
        or PROFILE_PATTERN.search(line)
    )


def is_date_line(line: str) -> bool:
    return bool(YEAR_PATTERN.search(line) and DATE_RANGE_PATTERN.search(line))


class ResumeFormatter:
    """Single-use state machine; call format() once per document."""

    def __init__(self):
        self.state = ScanState.NO_SECTION
        self.section = ""
        self._index = 0
        self._education_item_open = False
        self._structured = False
        self._parts: List[str] = []
        self._handlers: Dict[LineKind, Callable[[str], None]] = {
            LineKind.TITLE: self._on_title,
            LineKind.CONTACT: self._on_contact,
            LineKind.SECTION: self._on_section,
            LineKind.JOB_TITLE: lambda line: self._emit_div("job-title", line),
            LineKind.COMPANY: lambda line: self._emit_div("company", line),
            LineKind.DATE: lambda line: self._emit_div("date", line),
            LineKind.SKILL: self._on_skill,
            LineKind.DEGREE: self._on_degree,
            LineKind.SCHOOL: self._on_school,
            LineKind.BULLET: self._on_bullet,
            LineKind.SUMMARY: lambda line: self._emit_div("summary", line),
            LineKind.PARAGRAPH: self._on_paragraph,
        }

    def format(self, text: str) -> str:
        """Return an HTML fragment for the given plain text."""
        for raw_line in text.splitlines():
            line = raw_line.strip()
            if line:
                self.feed(line)
        self.finish()

        if not self._structured:
            return f'<div class="section"><div class="summary">{_escape(text)}</div></div>'
        return "".join(self._parts)

    def feed(self, line: str) -> None:
        kind = self._classify(line)
        if kind not in (LineKind.TITLE, LineKind.CONTACT):
            self._close_header()
        self._handlers[kind](line)
        self._index += 1

    def finish(self) -> None:
        self._close_education_item()
        if self.state is ScanState.IN_SECTION:
            self._parts.append("</div>")
        self._close_header()

    def in_section(self, name: str) -> bool:
        return self.state is ScanState.IN_SECTION and name in self.section.lower()

    def _classify(self, line: str) -> LineKind:
        if self.state is not ScanState.IN_SECTION:
            if self._is_title(line):
                return LineKind.TITLE
            if is_contact_line(line):
                return LineKind.CONTACT
        elif self.in_section("contact") and is_contact_line(line):
            return LineKind.CONTACT

        if SECTION_PATTERN.match(line):
            return LineKind.SECTION

        if self.in_section("experience"):
            if (JOB_TITLE_PATTERN.match(line)
                    and len(line) < MAX_JOB_TITLE_LENGTH
                    and "." not in line):
                return LineKind.JOB_TITLE
            if COMPANY_PATTERN.search(line):
                return LineKind.COMPANY
            if is_date_line(line):
                return LineKind.DATE

        if self.in_section("skill"):
            return LineKind.SKILL

        if self.in_section("education"):
            if DEGREE_PATTERN.match(line):
                return LineKind.DEGREE
            if INSTITUTION_PATTERN.search(line):
                return LineKind.SCHOOL
            # The line after a degree names the school unless it is a date
            if self._education_item_open and not YEAR_PATTERN.search(line):
                return LineKind.SCHOOL
            return LineKind.DATE

        if line.startswith(BULLET_MARKERS):
            return LineKind.BULLET
        if self.in_section("summary"):
            return LineKind.SUMMARY
        return LineKind.PARAGRAPH

    def _is_title(self, line: str) -> bool:
        if self._index == 0:
            return True
        return (
            self._index < NAME_LINE_LIMIT
            and bool(NAME_PATTERN.match(line))
            and "@" not in line
        )

    def _open_header(self) -> None:
        if self.state is ScanState.NO_SECTION:
            self._parts.append('<div class="header">')
            self.state = ScanState.IN_HEADER

    def _close_header(self) -> None:
        if self.state is ScanState.IN_HEADER:
            self._parts.append("</div>")
            self.state = ScanState.NO_SECTION

    def _close_education_item(self) -> None:
        if self._education_item_open:
            self._parts.append("</div>")
            self._education_item_open = False

    def _emit_div(self, css_class: str, line: str) -> None:
        self._parts.append(f'<div class="{css_class}">{_escape(line)}</div>')

    def _on_title(self, line: str) -> None:
        self._open_header()
        self._parts.append(f'<h1 class="name">{_escape(line)}</h1>')

    def _on_contact(self, line: str) -> None:
        self._structured = True
        self._open_header()
        self._emit_div("contact-info", line)

    def _on_section(self, line: str) -> None:
        self._structured = True
        self._close_education_item()
        if self.state is ScanState.IN_SECTION:
            self._parts.append("</div>")
        self.state = ScanState.IN_SECTION
        self.section = line
        self._parts.append(
            f'<div class="section"><h2 class="section-title">{_escape(line)}</h2>'
        )

    def _on_skill(self, line: str) -> None:
        if ":" in line:
            category, _, skills = line.partition(":")
            self._parts.append(
                f'<div class="skill-category"><h4>{_escape(category.strip())}</h4>'
                f'<p>{_escape(skills.strip())}</p></div>'
            )
        else:
            self._parts.append(f'<div class="skill-category"><p>{_escape(line)}</p></div>')

    def _on_degree(self, line: str) -> None:
        self._close_education_item()
        self._parts.append(f'<div class="education-item"><div class="degree">{_escape(line)}</div>')
        self._education_item_open = True

    def _on_school(self, line: str) -> None:
        if not self._education_item_open:
            self._parts.append('<div class="education-item">')
        self._emit_div("school", line)
        self._parts.append("</div>")
        self._education_item_open = False

    def _on_bullet(self, line: str) -> None:
        item = line[1:].strip()
        self._parts.append(f'<div class="description"><ul><li>{_escape(item)}</li></ul></div>')

    def _on_paragraph(self, line: str) -> None:
        self._parts.append(f'<div class="description"><p>{_escape(line)}</p></div>')


def format_cv_content(text: str) -> str:
    """Convert plain CV text into an HTML fragment. Never raises."""
    return ResumeFormatter().format(text or "")
