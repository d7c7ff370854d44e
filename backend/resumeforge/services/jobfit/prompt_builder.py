# resumeforge/services/jobfit/prompt_builder.py
from __future__ import annotations

import json
from typing import Optional

from resumeforge.schemas.job_spec import JobSpec, Tone
from resumeforge.schemas.resume import ParsedResume
from resumeforge.services.common.llm_client import load_prompt

TAILOR_SYSTEM_PROMPT = load_prompt("jobfit/tailor_system.prompt.txt")

TONE_GUIDELINES = {
    Tone.FORMAL: "Use professional, conservative language. Emphasize stability, reliability, and proven track record. Avoid casual expressions.",
    Tone.NEUTRAL: "Maintain a balanced, professional tone. Focus on clear, concise descriptions of achievements and capabilities.",
    Tone.CREATIVE: "Use dynamic, engaging language. Highlight innovation, adaptability, and unique contributions. Show personality while remaining professional.",
}

NOT_SPECIFIED = "Not specified"


def _job_spec_block(job_spec: Optional[JobSpec]) -> str:
    if job_spec is None:
        return "\n".join([
            "TARGET JOB SPECIFICATION:",
            f"Position: {NOT_SPECIFIED}",
            f"Required Skills: {NOT_SPECIFIED}",
            f"Experience Required: {NOT_SPECIFIED}",
            f"Key Responsibilities: {NOT_SPECIFIED}",
            f"Company Values: {NOT_SPECIFIED}",
            "(No job specification could be extracted; improve the resume for its current target role.)",
        ])

    years = f"{job_spec.years_experience}+ years" if job_spec.years_experience else NOT_SPECIFIED
    lines = [
        "TARGET JOB SPECIFICATION:",
        f"Position: {job_spec.position_title}",
        f"Required Skills: {', '.join(job_spec.required_skills)}",
        f"Experience Required: {years}",
        f"Key Responsibilities: {'; '.join(job_spec.responsibilities) or NOT_SPECIFIED}",
        f"Company Values: {', '.join(job_spec.company_values) or NOT_SPECIFIED}",
    ]
    if job_spec.industry_type:
        lines.append(f"Industry: {job_spec.industry_type}")
    if job_spec.team_size:
        lines.append(f"Team Size: {job_spec.team_size}")
    return "\n".join(lines)


def build_tailor_prompt(
    resume: ParsedResume,
    job_spec: Optional[JobSpec],
    tone: Tone,
    extra_prompt: Optional[str] = None,
) -> str:
    """Assemble the single rewrite instruction. Pure: same inputs, same string."""
    system = (
        TAILOR_SYSTEM_PROMPT
        .replace("{tone}", tone.value)
        .replace("{tone_guideline}", TONE_GUIDELINES[tone])
    )
    # Presentation fields are restored after tailoring; the model never sees them.
    original = resume.model_dump(by_alias=True, exclude_none=True, exclude={"profile_image", "custom_colors", "metadata"})

    parts = [
        system.strip(),
        _job_spec_block(job_spec),
        "ORIGINAL RESUME:\n" + json.dumps(original, indent=2, ensure_ascii=False),
    ]
    if extra_prompt:
        parts.append("ADDITIONAL INSTRUCTIONS:\n" + extra_prompt)
    parts.append(
        f"Rewrite this resume to optimize for the target position in a {tone.value} tone, "
        "and return it as JSON matching the original resume schema."
    )
    return "\n\n".join(parts)
