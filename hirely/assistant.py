"""AI features: site chatbot, mock-interview coach and headhunter, via Groq."""
from __future__ import annotations

import json
import re
from typing import Any

from hirely.config import get_env
from hirely.errors import ValidationError
from hirely.log import get_logger
from hirely.models import Profile
from hirely.retry import retry

log = get_logger(__name__)

DEFAULT_MODEL = "llama-3.3-70b-versatile"
GROQ_BASE_URL = "https://api.groq.com/openai/v1"

SETUP_REPLY = (
    "I am currently in setup mode! Please ask your administrator to add the "
    "`GROQ_API_KEY` to the environment so I can come online."
)
FALLBACK_REPLY = "I didn't quite catch that."

PERSONA = (
    "You are Hirely AI, a highly professional, helpful, and concise recruiter assistant "
    "for an innovative job portal named Hirely. Keep your answers short (1-3 sentences) and friendly."
)

INTERVIEW_MODES: dict[str, str] = {
    "hr": "You conduct HR-style interview questions: motivation, teamwork, salary expectations, "
          "career goals, company culture fit, strengths and weaknesses.",
    "technical": "You ask technical interview questions relevant to software engineering: data "
                 "structures, algorithms, system design, coding patterns, debugging, and "
                 "technology-specific questions.",
    "behavioral": "You ask behavioral/situational interview questions using the STAR method: "
                  "\"Tell me about a time when...\", conflict resolution, leadership, "
                  "problem-solving under pressure.",
    "resume": "You analyze and discuss resume-related topics: gaps in experience, project "
              "explanations, skill relevance, how to improve their resume, and career trajectory.",
}

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def _api_key() -> str:
    return get_env("GROQ_API_KEY")


def configured() -> bool:
    return bool(_api_key())


@retry(max_attempts=2, base_delay=2.0, retryable=(Exception,))
def _call_groq(api_key: str, model: str, prompt: str, max_tokens: int = 400) -> str:
    from openai import OpenAI

    client = OpenAI(api_key=api_key, base_url=GROQ_BASE_URL)
    r = client.chat.completions.create(
        model=model,
        messages=[{"role": "user", "content": prompt}],
        max_tokens=max_tokens,
    )
    return (r.choices[0].message.content or "").strip()


def _generate(prompt: str, max_tokens: int = 400) -> str:
    model = get_env("GROQ_LLM_MODEL", DEFAULT_MODEL) or DEFAULT_MODEL
    return _call_groq(_api_key(), model, prompt, max_tokens) or FALLBACK_REPLY


def _require(message: str) -> str:
    if not (message or "").strip():
        raise ValidationError("Message is required")
    return message.strip()


def chat_reply(message: str) -> str:
    message = _require(message)
    if not configured():
        return SETUP_REPLY
    return _generate(f"{PERSONA}\nUser says: {message}")


def interview_prompt(message: str, mode: str = "technical", history: list[dict] | None = None) -> str:
    instruction = INTERVIEW_MODES.get(mode, INTERVIEW_MODES["technical"])
    context = "\n".join(
        f"{'Interviewer' if m.get('role') == 'ai' else 'Candidate'}: {m.get('text', '')}"
        for m in history or []
    )
    conversation = f"Conversation so far:\n{context}\n" if context else ""
    return f"""You are Hirely AI, a professional and realistic job interview coach.
You are conducting a live voice mock interview. {instruction}
Rules:
- Keep responses conversational, concise (2-4 sentences max), and suitable for text-to-speech.
- Ask ONE clear follow-up question at the end of each response.
- Be encouraging but honest. Give brief feedback on the answer before asking the next question.
- Do NOT use markdown, bullet points, or special formatting. Speak naturally.
- If this is the start of the conversation, introduce yourself briefly and ask the first question.

{conversation}Candidate just said: "{message}"

Respond naturally as the interviewer:"""


def interview_reply(message: str, mode: str = "technical", history: list[dict] | None = None) -> str:
    message = _require(message)
    if not configured():
        return "Voice AI is not configured."
    return _generate(interview_prompt(message, mode, history))


def headhunter_prompt(brief: str, candidates: list[Profile]) -> str:
    listing = "\n".join(
        f"ID: {c.uid}, Name: {c.name}, Email: {c.email}" for c in candidates
    )
    return f"""You are an expert AI Tech Recruiter. The employer is looking for candidates based on this prompt: "{brief}".
Here is the list of available candidates in our database:
{listing}

Your task is to:
1. Identify the top 1-3 candidates that best match the employer's request. (If none perfectly match, pick the closest ones and explain why).
2. For each matched candidate, write a highly personalized, compelling outreach email drafted from the employer to the candidate. Keep it professional but engaging.

Return the result STRICTLY as a JSON array of objects with this format:
[
  {{
    "uid": "candidate_uid",
    "name": "Candidate Name",
    "matchReason": "Why they are a good fit in 1 sentence.",
    "draftEmail": "The full drafted email body."
  }}
]
No markdown formatting or extra text outside the JSON array. Return empty array if zero matches."""


def parse_matches(reply: str) -> list[dict[str, Any]]:
    cleaned = _FENCE_RE.sub("", reply or "").strip()
    try:
        data = json.loads(cleaned)
    except ValueError:
        log.warning("Headhunter reply is not JSON: %.120s", reply)
        return []
    if not isinstance(data, list):
        return []
    return [m for m in data if isinstance(m, dict) and m.get("uid")]


def find_candidates(brief: str, candidates: list[Profile]) -> list[dict[str, Any]]:
    brief = _require(brief)
    if not candidates:
        return []
    if not configured():
        log.debug("No GROQ_API_KEY, headhunter disabled")
        return []
    reply = _generate(headhunter_prompt(brief, candidates), max_tokens=1500)
    matches = parse_matches(reply)
    log.info("Headhunter matched %d of %d candidate(s)", len(matches), len(candidates))
    return matches
