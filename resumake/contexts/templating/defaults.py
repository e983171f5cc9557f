"""
Default values for generated resume documents.

Spacing values reproduce the editor preview: CSS pixels converted to points
(1px = 0.75pt) and em values taken against the 11pt body font.
"""

from typing import Dict

DEFAULT_NAME = "YOUR NAME"

DEFAULT_TEMPLATE_ID = "professional"

# Vertical gaps inserted between heading, rule, entries and sections
SPACING: Dict[str, str] = {
    "section_title_gap": "3.75pt",
    "section_rule_gap": "6.00pt",
    "section_spacing": "7.50pt",
    "company_role_gap": "0.75pt",
    "additional_role_gap": "0.38pt",
    "experience_entry_gap": "7.50pt",
    "education_entry_gap": "7.50pt",
    "project_desc_gap": "2.25pt",
    "issuer_gap": "1.50pt",
    "description_gap": "2.25pt",
    "skill_category_gap": "3.75pt",
    "project_entry_gap": "8.80pt",
    "cert_item_gap": "8.80pt",
}

SECTION_BREAK = f"\n\\vspace{{{SPACING['section_spacing']}}}\n\n"

# Last-resort document skeleton, used when no template file can be read
EMBEDDED_TEMPLATE = r"""\documentclass[11pt,a4paper]{article}
\usepackage[utf8]{inputenc}
\usepackage[T1]{fontenc}
\usepackage{lmodern}
\usepackage[margin=0.75in]{geometry}
\usepackage{enumitem}
\usepackage{hyperref}

\pagestyle{empty}
\setlength{\parindent}{0pt}
\setlist[itemize]{leftmargin=*,nosep}

\begin{document}

\begin{center}
{\Large \textbf{{{NAME}}}}\\[0.5em]
{{CONTACT}}
\end{center}

\vspace{1em}

{{SUMMARY}}

\vspace{1em}

{{EXPERIENCES}}

\vspace{1em}

{{SKILLS}}

\vspace{1em}

{{EDUCATION}}

\end{document}
"""
