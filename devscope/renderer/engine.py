import os
from typing import Optional
from urllib.parse import urlparse
import markdown
from jinja2 import Environment, FileSystemLoader, select_autoescape
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from markupsafe import Markup
from devscope.renderer.manifest import RenderManifest

WEB_SCHEMES = ("http", "https")
MARKDOWN_LINK_SCHEMES = ("http", "https", "mailto", "")


def safe_link(url: Optional[str]) -> Optional[str]:
    """
    Returns an http(s) URL for a user-supplied link, or None. Bare hosts
    such as example.com get an https:// prefix.
    """
    url = (url or "").strip()
    if not url:
        return None
    scheme = urlparse(url).scheme
    if not scheme and not url.startswith(("/", "\\")):
        return f"https://{url}"
    return url if scheme in WEB_SCHEMES else None


class _LinkFilter(Treeprocessor):
    def run(self, root):
        for el in root.iter():
            for key in [k for k in el.attrib if k.lower().startswith("on")]:
                del el.attrib[key]
            for attr in ("href", "src"):
                value = el.get(attr)
                if value is not None and urlparse(value.strip()).scheme not in MARKDOWN_LINK_SCHEMES:
                    del el.attrib[attr]


class SafeMarkdown(Extension):
    """Escapes raw HTML, drops event-handler attributes and non-web link schemes."""

    def extendMarkdown(self, md):
        md.preprocessors.deregister("html_block")
        md.inlinePatterns.deregister("html")
        md.treeprocessors.register(_LinkFilter(md), "link_filter", 0)


def md(text) -> Markup:
    if not text:
        return Markup("")
    return Markup(markdown.markdown(text, extensions=['extra', SafeMarkdown()]))


def render_to_html(manifest: RenderManifest, output_path: str, language: str = "All", sort_by: str = "score") -> str:
    """
    Renders the manifest to a standalone HTML report. Free-text assessment
    fields are treated as Markdown.
    """
    assessment = manifest.assessment

    processed_assessment = {
        "profile_score": round(assessment.profile_score),
        "professional_persona": assessment.professional_persona,
        "profile_summary": md(assessment.profile_summary),
        "technical_skills": assessment.technical_skills,
        "overall_impression": assessment.overall_impression,
        "career_advice": md(assessment.career_advice),
    }

    processed_cards = []
    for card in manifest.cards(language=language, sort_by=sort_by):
        processed_cards.append({
            "name": card.analysis.name,
            "score": round(card.analysis.score),
            "completeness": card.analysis.completeness,
            "summary": md(card.analysis.summary),
            "strengths": card.analysis.strengths,
            "weaknesses": card.analysis.weaknesses,
            "suggestions": card.analysis.suggestions,
            "repo": card.repo,
        })

    total_languages = sum(share.value for share in manifest.language_distribution) or 1

    template_dir = os.path.join(os.path.dirname(__file__), 'templates')
    env = Environment(loader=FileSystemLoader(template_dir), autoescape=select_autoescape(['html']))
    template = env.get_template('report.html')

    html_content = template.render(
        profile=manifest.data.profile,
        blog_url=safe_link(manifest.data.profile.blog),
        stats=manifest.data.stats,
        assessment=processed_assessment,
        cards=processed_cards,
        languages=[
            {"name": s.name, "value": s.value, "percent": round(100 * s.value / total_languages)}
            for s in manifest.language_distribution
        ],
        theme=manifest.theme,
    )

    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(html_content)

    return output_path
