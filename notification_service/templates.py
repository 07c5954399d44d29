"""Accept/reject email bodies. The HTML part escapes everything user supplied."""
from __future__ import annotations
from dataclasses import dataclass
from html import escape

_STYLE = """
    body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background: %(header_bg)s; color: white; padding: 40px 20px; text-align: center; border-radius: 10px 10px 0 0; }
    .content { background: #f9fafb; padding: 30px; border-radius: 0 0 10px 10px; }
    .feedback { background: white; padding: 15px; border-left: 4px solid %(accent)s; margin: 20px 0; }
    .footer { text-align: center; margin-top: 30px; color: #6b7280; font-size: 14px; }
"""

_HTML = """<!DOCTYPE html>
<html>
<head>
  <style>%(style)s</style>
</head>
<body>
  <div class="container">
    <div class="header"><h1>%(heading)s</h1></div>
    <div class="content">
      <p>Hi %(name)s,</p>
%(intro)s
      <p><strong>Evaluator Feedback:</strong></p>
      <p class="feedback">%(feedback)s</p>
%(outro)s
    </div>
    <div class="footer"><p>&copy; %(year)s %(brand)s. All rights reserved.</p></div>
  </div>
</body>
</html>
"""

ACCEPTED = {
    "subject": "🎉 Welcome to {brand}!",
    "heading": "🎉 Congratulations, {name}!",
    "header_bg": "linear-gradient(135deg, #9333ea 0%, #ec4899 100%)",
    "accent": "#9333ea",
    "intro": [
        "We're thrilled to inform you that you've been accepted into the {brand} Internship Program {year}!",
    ],
    "outro": [
        "We were impressed by your submission and believe you'll be a great addition to our team. "
        "We'll be in touch soon with next steps and onboarding information.",
        "Welcome aboard! 🚀",
    ],
}

REJECTED = {
    "subject": "{brand} Internship Application Update",
    "heading": "{brand} Internship Application Update",
    "header_bg": "linear-gradient(135deg, #6b7280 0%, #374151 100%)",
    "accent": "#6b7280",
    "intro": [
        "Thank you for taking the time to apply to the {brand} Internship Program {year}. "
        "We appreciate your interest in joining our team.",
        "After careful review, we've decided not to move forward with your application at this time.",
    ],
    "outro": [
        "We encourage you to continue developing your skills and to apply again in the future. "
        "We wish you the best in your career journey.",
        "Best regards,\nThe {brand} Team",
    ],
}


@dataclass(frozen=True)
class EmailContent:
    subject: str
    text: str
    html: str


def _paragraphs(lines, **fmt) -> list[str]:
    return [line.format(**fmt) for line in lines]


def render_decision_email(name: str, decision: str, feedback: str, brand: str, year: int) -> EmailContent:
    tpl = ACCEPTED if decision == "accepted" else REJECTED
    fmt = {"brand": brand, "year": year, "name": name}
    intro = _paragraphs(tpl["intro"], **fmt)
    outro = _paragraphs(tpl["outro"], **fmt)

    text = "\n\n".join(
        [f"Hi {name},", *intro, f"Evaluator Feedback:\n{feedback}", *outro, f"© {year} {brand}"]
    )

    html_fmt = {"brand": escape(brand), "year": year, "name": escape(name)}
    html = _HTML % {
        "style": _STYLE % {"header_bg": tpl["header_bg"], "accent": tpl["accent"]},
        "heading": tpl["heading"].format(**html_fmt),
        "name": escape(name),
        "intro": "\n".join(f"      <p>{escape(p)}</p>" for p in intro),
        "feedback": escape(feedback).replace("\n", "<br>"),
        "outro": "\n".join(f"      <p>{escape(p).replace(chr(10), '<br>')}</p>" for p in outro),
        "year": year,
        "brand": escape(brand),
    }
    return EmailContent(subject=tpl["subject"].format(**fmt), text=text, html=html)
