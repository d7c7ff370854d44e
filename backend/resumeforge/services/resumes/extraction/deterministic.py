"""Rule-based resume extraction used when the AI extractor is unavailable or returns bad data.

Finds contacts with regexes, splits the text on common section headers (both
"EXPERIENCE" on its own line and inline "Experience: ..." forms) and reads each
section with simple line heuristics. Best effort only: it never raises for
non-empty text and leaves unknown fields empty rather than guessing.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple

EMAIL_RE = re.compile(r"\b[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}\b", re.I)
PHONE_RE = re.compile(r"(?<!\d)(\+?\d{1,3}[\s.-]?)?\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}(?!\d)")
URL_RE = re.compile(r"\b(?:https?://|www\.)[^\s)\]>,]+", re.I)
LINKEDIN_RE = re.compile(r"(?:https?://)?(?:www\.)?linkedin\.com/in/[A-Za-z0-9_-]+/?", re.I)
GITHUB_RE = re.compile(r"(?:https?://)?(?:www\.)?github\.com/[A-Za-z0-9_-]+/?", re.I)
LOCATION_RE = re.compile(r"\b([A-Z][a-z]+(?:\s[A-Z][a-z]+)*,\s*(?:[A-Z]{2}|[A-Z][a-z]+(?:\s[A-Z][a-z]+)*))\b")

# header keyword -> canonical section
SECTION_KEYWORDS: Dict[str, str] = {
    "summary": "summary",
    "professional summary": "summary",
    "profile": "summary",
    "about": "summary",
    "about me": "summary",
    "objective": "summary",
    "experience": "experience",
    "work experience": "experience",
    "professional experience": "experience",
    "employment history": "experience",
    "work history": "experience",
    "employment": "experience",
    "education": "education",
    "academic background": "education",
    "certifications": "certifications",
    "certificates": "certifications",
    "licenses": "certifications",
    "awards": "certifications",
    "skills": "skills",
    "technical skills": "skills",
    "technologies": "skills",
    "competencies": "skills",
    "projects": "projects",
    "preferences": "other",
    "languages": "other",
}

SECTION_RE = re.compile(
    r"^\s*(?P<title>"
    + "|".join(sorted((re.escape(k) for k in SECTION_KEYWORDS), key=len, reverse=True))
    + r")\s*(?:[:\-–]\s*(?P<rest>.*))?$",
    re.I,
)

NAME_PATTERNS = [
    re.compile(r"^([A-Z][a-z]+ [A-Z][a-z]+(?:\s[A-Z][a-z]+)?)\s*$"),
    re.compile(r"^name[:\s]+([A-Z][a-z]+ [A-Z][a-z]+(?:\s[A-Z][a-z]+)?)", re.I),
    re.compile(r"^([A-Z]{2,} [A-Z]{2,}(?: [A-Z]{2,})?)\s*$"),
]
TITLE_PATTERNS = [
    re.compile(r"^(?:current role|title|position)\s*:\s*(.+)$", re.I),
    re.compile(r"^((?:senior|junior|lead|principal|staff)?\s*(?:software|frontend|backend|full.?stack|web|mobile|data|devops|qa)?\s*"
               r"(?:engineer|developer|analyst|manager|consultant|director|designer|architect|scientist).*)$", re.I),
]
TITLE_KEYWORDS_RE = re.compile(
    r"engineer|developer|manager|designer|consultant|specialist|analyst|lead|director|architect|"
    r"scientist|intern|administrator|officer|coordinator|ui/ux",
    re.I,
)

MONTH = r"\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*\.?"
DURATION_RE = re.compile(
    rf"(?:{MONTH}\s+)?\d{{4}}\s*(?:-|–|—|to)\s*(?:(?:{MONTH}\s+)?\d{{4}}|present|current|now)"
    rf"|(?:{MONTH}\s+)?\d{{4}}\s*(?:-|–|—|to)\s*$",
    re.I,
)
YEAR_RE = re.compile(r"\b(19|20)\d{2}\b")
BULLET_RE = re.compile(r"^\s*[*•●▪◦\-–]\s+")
DEGREE_RE = re.compile(
    r"\b(?:bachelor|master|ph\.?\s?d|doctor|associate|diploma|b\.?\s?sc?|m\.?\s?sc?|b\.?\s?a|m\.?\s?a|mba|b\.?\s?eng|m\.?\s?eng)\b[^,|;]*",
    re.I,
)
INSTITUTION_RE = re.compile(r"[^,|;]*\b(?:university|college|institute|academy|school|polytechnic)\b[^,|;]*", re.I)
ISSUER_RE = re.compile(r"(?:issuer\s*:|issued by|\bby\b|\bfrom\b)\s*(.+)$", re.I)
SEPARATOR_RE = re.compile(r"\s+(?:-|–|—|\|)\s+|\s*,\s*")

TOTAL_FIELDS = 7  # name, title, contact, summary, experience, education, skills


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def _collect_sections(lines: List[str]) -> Dict[str, List[str]]:
    """Group lines under canonical section names; lines before any header go to "header"."""
    sections: Dict[str, List[str]] = {"header": []}
    current = "header"
    for raw in lines:
        line = raw.strip()
        m = SECTION_RE.match(line)
        if m and (m.group("rest") is not None or len(line) <= 40):
            current = SECTION_KEYWORDS[m.group("title").lower()]
            sections.setdefault(current, [])
            rest = (m.group("rest") or "").strip()
            if rest:
                sections[current].append(rest)
            continue
        if line:
            sections.setdefault(current, []).append(line)
    return sections


# ---------------------------------------------------------------------------
# Contacts / header
# ---------------------------------------------------------------------------

def _first(pattern: re.Pattern, text: str) -> Optional[str]:
    m = pattern.search(text)
    return m.group(0).strip() if m else None


def _normalize_profile(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    url = url.rstrip("/")
    if not url.lower().startswith("http"):
        url = "https://" + (url if url.lower().startswith("www.") else "www." + url)
    return url


def _extract_basic_contacts(text: str, header_lines: List[str]) -> Dict[str, str]:
    contact: Dict[str, str] = {}

    email = _first(EMAIL_RE, text)
    if email:
        contact["email"] = email

    for m in PHONE_RE.finditer(text):
        candidate = m.group(0).strip()
        if DURATION_RE.fullmatch(candidate):
            continue
        contact["phone"] = candidate
        break

    linkedin = _normalize_profile(_first(LINKEDIN_RE, text))
    if linkedin:
        contact["linkedin"] = linkedin
    github = _normalize_profile(_first(GITHUB_RE, text))
    if github:
        contact["github"] = github

    for m in URL_RE.finditer(text):
        url = m.group(0)
        lowered = url.lower()
        if "linkedin.com" in lowered or "github.com" in lowered or "@" in url:
            continue
        contact["website"] = url if lowered.startswith("http") else "https://" + url
        break

    for line in header_lines[:10]:
        if "@" in line or any(ch.isdigit() for ch in line):
            continue
        m = LOCATION_RE.search(line)
        if m:
            contact["location"] = m.group(1)
            break

    return contact


def _extract_name(lines: List[str]) -> Optional[str]:
    for line in lines[:10]:
        if not (5 < len(line) < 50) or SECTION_RE.match(line):
            continue
        for pattern in NAME_PATTERNS:
            m = pattern.match(line)
            if m:
                name = m.group(1).strip()
                return name.title() if name.isupper() else name
    return None


def _extract_title(header_lines: List[str], name: Optional[str]) -> Optional[str]:
    for line in header_lines[:15]:
        if name and name.lower() in line.lower():
            continue
        if "@" in line or len(line) > 80:
            continue
        for pattern in TITLE_PATTERNS:
            m = pattern.match(line)
            if m:
                return m.group(1).strip()
    return None


# ---------------------------------------------------------------------------
# Section readers
# ---------------------------------------------------------------------------

def _split_duration(line: str) -> Tuple[str, Optional[str]]:
    m = DURATION_RE.search(line)
    if not m:
        return line, None
    remainder = (line[: m.start()] + line[m.end():]).strip(" ,|()-–—\t")
    return remainder, m.group(0).strip()


def _parse_role_line(line: str) -> Dict[str, Optional[str]]:
    """"Engineer at Acme 2020-2022" / "Acme - Engineer" / "Engineer, Acme" -> title/company/duration."""
    remainder, duration = _split_duration(line)
    title: Optional[str] = None
    company: Optional[str] = None

    if re.search(r"\s+at\s+", remainder, re.I):
        title, company = re.split(r"\s+at\s+", remainder, maxsplit=1, flags=re.I)
    elif re.search(r"^company\s*:", remainder, re.I):
        company = remainder.split(":", 1)[1]
    else:
        parts = [p for p in SEPARATOR_RE.split(remainder) if p.strip()]
        if len(parts) >= 2:
            if TITLE_KEYWORDS_RE.search(parts[0]) or not TITLE_KEYWORDS_RE.search(parts[1]):
                title, company = parts[0], parts[1]
            else:
                company, title = parts[0], parts[1]
        elif parts:
            title = parts[0]

    return {
        "title": title.strip() if title else None,
        "company": company.strip() if company else None,
        "duration": duration,
    }


def _looks_like_role_line(line: str) -> bool:
    if BULLET_RE.match(line) or len(line) > 120:
        return False
    if re.search(r"\s+at\s+", line, re.I) and TITLE_KEYWORDS_RE.search(line):
        return True
    if re.match(r"^company\s*:", line, re.I):
        return True
    remainder, duration = _split_duration(line)
    return bool(duration and remainder and len(remainder) < 90)


def _extract_experience(lines: List[str]) -> List[Dict[str, Any]]:
    entries: List[Dict[str, Any]] = []
    current: Optional[Dict[str, Any]] = None

    for line in lines:
        if current is None or _looks_like_role_line(line):
            current = {**_parse_role_line(BULLET_RE.sub("", line)), "details": []}
            entries.append(current)
            continue

        role_m = re.match(r"^role\s*:\s*(.+)$", line, re.I)
        date_m = re.match(r"^(?:date|dates|duration)\s*:\s*(.+)$", line, re.I)
        if role_m and not current["title"]:
            current["title"] = role_m.group(1).strip()
        elif date_m:
            current["duration"] = date_m.group(1).strip()
        elif not current["duration"] and DURATION_RE.fullmatch(line.strip()):
            current["duration"] = line.strip()
        elif BULLET_RE.match(line):
            current["details"].append(BULLET_RE.sub("", line).strip())
        elif current["details"] and not line[:1].isupper():
            current["details"][-1] += " " + line
        else:
            current["details"].append(line)

    return [
        {k: v for k, v in e.items() if v not in (None, "")}
        for e in entries
        if e.get("title") or e.get("company") or e.get("details")
    ]


def _extract_education(lines: List[str]) -> List[Dict[str, Any]]:
    entries: List[Dict[str, Any]] = []
    for line in lines:
        clean = BULLET_RE.sub("", line).strip()
        degree_m = DEGREE_RE.search(clean)
        inst_m = INSTITUTION_RE.search(clean)
        _, duration = _split_duration(clean)
        year_m = YEAR_RE.search(clean)

        if degree_m or inst_m:
            entry = {
                "degree": degree_m.group(0).strip(" ,-–") if degree_m else "Unknown Degree",
                "institution": inst_m.group(0).strip(" ,-–") if inst_m else "Unknown Institution",
            }
            if duration or year_m:
                entry["duration"] = duration or year_m.group(0)
            entries.append(entry)
        elif entries and (duration or year_m) and "duration" not in entries[-1]:
            entries[-1]["duration"] = duration or year_m.group(0)
        elif entries:
            note = entries[-1].get("note")
            entries[-1]["note"] = f"{note} {clean}" if note else clean
    return entries


def _extract_certifications(lines: List[str]) -> List[Dict[str, Any]]:
    certs: List[Dict[str, Any]] = []
    for line in lines:
        clean = BULLET_RE.sub("", line).strip()
        if len(clean) < 3:
            continue
        issuer_line = ISSUER_RE.match(clean)
        if issuer_line and certs and certs[-1]["issuer"] == "Unknown Issuer":
            certs[-1]["issuer"] = issuer_line.group(1).strip()
            continue

        remainder, _ = _split_duration(clean)
        year_m = YEAR_RE.search(clean)
        name, issuer = remainder, "Unknown Issuer"
        paren = re.search(r"\(([^)]+)\)\s*$", remainder)
        if paren:
            name, issuer = remainder[: paren.start()].strip(), paren.group(1).strip()
        else:
            parts = [p for p in re.split(r"\s+(?:-|–|—|\|)\s+|,\s*", remainder) if p.strip()]
            if len(parts) >= 2:
                name, issuer = parts[0], parts[1]
            else:
                by = re.split(r"\s+(?:by|from)\s+", remainder, maxsplit=1, flags=re.I)
                if len(by) == 2:
                    name, issuer = by
        name = YEAR_RE.sub("", name).strip(" ,-–")
        if not name:
            continue
        cert = {"name": name, "issuer": issuer.strip()}
        if year_m:
            cert["date"] = year_m.group(0)
        certs.append(cert)
    return certs


def _extract_skills(lines: List[str]) -> List[str]:
    skills: List[str] = []
    for line in lines:
        clean = BULLET_RE.sub("", line).strip()
        # "Languages: Python, Go" -> drop the label
        if ":" in clean and len(clean.split(":", 1)[0]) < 30:
            clean = clean.split(":", 1)[1]
        for part in re.split(r"[,;|•·]", clean):
            part = part.strip(" .\t")
            if part and len(part) <= 50:
                skills.append(part)
    return skills


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def extract_with_regex(text: str) -> Tuple[Dict[str, Any], int]:
    """Deterministic extraction. Returns (resume payload, confidence 15..85)."""
    lines = [ln.strip() for ln in (text or "").splitlines()]
    non_empty = [ln for ln in lines if ln]
    sections = _collect_sections(lines)
    header = sections.get("header", [])

    resume: Dict[str, Any] = {}
    found = 0

    name = _extract_name(non_empty)
    if name:
        resume["name"] = name
        found += 1

    title = _extract_title(header, name)
    if title:
        resume["title"] = title
        found += 1

    contact = _extract_basic_contacts(text or "", header)
    if contact:
        resume["contact"] = contact
        if contact.get("email") or contact.get("phone"):
            found += 1

    summary_lines = sections.get("summary") or []
    if summary_lines:
        resume["summary"] = " ".join(summary_lines)
        found += 1

    experience = _extract_experience(sections.get("experience") or [])
    resume["experience"] = experience
    if experience:
        found += 1

    education = _extract_education(sections.get("education") or [])
    resume["education"] = education
    if education:
        found += 1

    resume["certifications"] = _extract_certifications(sections.get("certifications") or [])

    skills = _extract_skills(sections.get("skills") or [])
    resume["skills"] = skills
    if skills:
        found += 1

    confidence = round(found / TOTAL_FIELDS * 100)
    length = len((text or "").strip())
    if length < 100:
        confidence = max(confidence - 30, 10)
    elif length > 2000:
        confidence = min(confidence + 10, 85)
    confidence = min(max(confidence, 15), 85)

    return resume, confidence
