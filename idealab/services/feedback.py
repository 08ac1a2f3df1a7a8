"""AI feedback generation (OpenAI chat completions)."""
import re
from typing import Dict

from flask import current_app
from openai import OpenAI, OpenAIError

from idealab.errors import ValidationFailed

SYSTEM_PROMPT = (
    "You are Val, a warm and thoughtful startup mentor. You give honest, "
    "encouraging, practical feedback on early-stage ideas. Answer in HTML only."
)


def make_prompt(idea: str, target_customer: str, problem_solved: str) -> str:
    """Evaluation prompt for one idea draft."""
    return (
        "Evaluate the following startup idea:\n\n"
        f"Idea: {idea}\n"
        f"Target customer: {target_customer}\n"
        f"Problem solved: {problem_solved}\n\n"
        "Return HTML made of <div class=\"validation-section\"> blocks, each with an <h3> title, "
        "covering: first impressions, who will care most, strengths, risks and open questions, "
        "and three concrete next steps to test demand this week. "
        "Do not wrap the answer in markdown code fences."
    )


def make_landing_prompt_request(idea: str, target_customer: str, problem_solved: str) -> str:
    return (
        "Write a single-paragraph prompt for a no-code site builder that produces a landing page "
        "for this idea. Mention the hero section, key features, and an email signup form for early "
        "users. Return only the prompt text.\n\n"
        f"Idea: {idea}\nTarget customer: {target_customer}\nProblem solved: {problem_solved}"
    )


def fallback_landing_prompt(idea: str, target_customer: str, problem_solved: str) -> str:
    idea, who, problem = idea.lower(), target_customer.lower(), problem_solved.lower()
    return (
        f"Create a landing page for \"{idea}\" which helps {who} solve {problem}. "
        f"The target customer is {who}. The goal of the site is to highlight our new venture "
        "and to collect emails of interested early users. Include a hero section, key features, "
        "and an email signup form for early users. Use modern colors and great stock images, as "
        "this is going to be perfect for validating demand and collecting interested prospects."
    )


_FENCE_RE = re.compile(r"```(?:html)?\s*", re.IGNORECASE)
_LEAD_RE = re.compile(r'^[\s\S]*?(<div class="validation-section">)', re.IGNORECASE)


def clean_feedback_html(text: str) -> str:
    """Strip code fences and any chatter before the first section."""
    text = _FENCE_RE.sub("", text)
    text = _LEAD_RE.sub(r"\1", text, count=1)
    return text.strip()


def _client() -> OpenAI:
    cfg = current_app.config
    return OpenAI(api_key=cfg.get("OPENAI_API_KEY"), timeout=cfg.get("OPENAI_TIMEOUT", 60))


def _complete(messages) -> str:
    resp = _client().chat.completions.create(
        model=current_app.config.get("OPENAI_MODEL", "gpt-4o-mini"),
        messages=messages,
        temperature=0.7,
    )
    return (resp.choices[0].message.content or "").strip()


def generate_feedback(draft: Dict[str, str]) -> str:
    """Return rich-text feedback for ``{idea, targetCustomer, problemSolved}``.

    Raises ValidationFailed when the model call fails or comes back empty.
    """
    prompt = make_prompt(draft["idea"], draft["targetCustomer"], draft["problemSolved"])
    try:
        text = _complete([
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ])
    except OpenAIError as exc:
        current_app.logger.warning("feedback generation failed: %s", exc)
        raise ValidationFailed() from exc

    feedback = clean_feedback_html(text)
    if not feedback:
        raise ValidationFailed("The AI returned an empty answer. Please try again.")
    return feedback


def generate_landing_prompt(draft: Dict[str, str]) -> str:
    args = (draft["idea"], draft["targetCustomer"], draft["problemSolved"])
    try:
        text = _complete([{"role": "user", "content": make_landing_prompt_request(*args)}])
    except OpenAIError as exc:
        current_app.logger.warning("landing prompt generation failed: %s", exc)
        text = ""
    return text or fallback_landing_prompt(*args)
