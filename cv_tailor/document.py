"""
Styled HTML document for downloading a tailored CV.
"""

from pathlib import Path

from .formatter import format_cv_content


DOWNLOAD_FILENAME = "ats_optimized_resume.html"
DOCUMENT_TITLE = "ATS-Optimized Resume"

STYLESHEET = """
* { margin: 0; padding: 0; box-sizing: border-box; }
body {
    font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif;
    line-height: 1.6;
    color: #333;
    background: #fff;
    padding: 40px 20px;
    max-width: 800px;
    margin: 0 auto;
}
.header { text-align: center; margin-bottom: 30px; padding-bottom: 20px; border-bottom: 3px solid #2563eb; }
.name { font-size: 2.8em; font-weight: 700; color: #1e40af; margin-bottom: 15px; }
.contact-info { font-size: 1.1em; color: #4b5563; margin-bottom: 8px; }
.section { margin-bottom: 30px; }
.section-title {
    font-size: 1.5em;
    font-weight: 700;
    color: #1e40af;
    margin-bottom: 20px;
    padding-bottom: 8px;
    border-bottom: 2px solid #e5e7eb;
    text-transform: uppercase;
    letter-spacing: 1px;
}
.job-title { font-size: 1.3em; font-weight: 700; color: #374151; margin: 20px 0 8px; }
.company { font-size: 1.15em; color: #2563eb; font-weight: 600; margin-bottom: 5px; }
.date { color: #6b7280; font-style: italic; margin-bottom: 12px; }
.description { margin-bottom: 15px; }
.description ul { list-style-type: none; }
.description li { margin-bottom: 8px; padding-left: 25px; position: relative; line-height: 1.7; }
.description li:before { content: "\\25B8"; color: #2563eb; position: absolute; left: 0; font-weight: bold; }
.description p { margin-bottom: 10px; line-height: 1.7; text-align: justify; }
.skill-category {
    background: #f8fafc;
    padding: 20px;
    border-radius: 10px;
    border-left: 5px solid #2563eb;
    margin-bottom: 15px;
}
.skill-category h4 { font-size: 1.15em; color: #1e40af; margin-bottom: 10px; }
.skill-category p { color: #4b5563; }
.education-item { margin-bottom: 20px; padding: 15px; background: #f9fafb; border-left: 4px solid #2563eb; }
.degree { font-size: 1.2em; font-weight: 700; color: #374151; margin-bottom: 5px; }
.school { font-size: 1.1em; color: #2563eb; font-weight: 600; margin-bottom: 5px; }
.summary { font-size: 1.1em; line-height: 1.8; color: #374151; text-align: justify; }
@media print {
    body { padding: 0; font-size: 11px; }
    .name { font-size: 2.2em; }
    .section-title { font-size: 1.3em; }
    .header, .section { margin-bottom: 20px; }
}
"""


def render_document(tailored_cv: str) -> str:
    """Wrap the formatted CV in a standalone HTML page."""
    body = format_cv_content(tailored_cv)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{DOCUMENT_TITLE}</title>
    <style>{STYLESHEET}</style>
</head>
<body>
    <div class="resume-content">
        {body}
    </div>
</body>
</html>
"""


def write_document(path: Path, tailored_cv: str) -> Path:
    """Render and save the document; returns the written path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_document(tailored_cv), encoding="utf-8")
    return path
