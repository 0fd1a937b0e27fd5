"""
Rule-based text tools behind the dashboard's "AI" widgets.

No model is involved: everything here is keyword and regex matching,
deterministic for a given input.

  - summarize          first three sentences
  - analyze_sentiment  keyword lookup → Positive / Negative / Neutral
  - extract_tasks      imperative or todo-like sentences
  - generate_ideas     four content ideas for a topic
  - chat_reply         canned acknowledgement for the chat panel
"""
import re
from typing import Any, Dict, List

# Terminator run followed by whitespace or end of text
SENTENCE_SPLIT = re.compile(r"[.?!]+(?:\s+|$)")

POSITIVE_WORDS = ["good", "great", "happy", "love", "excellent", "amazing", "wonderful"]
NEGATIVE_WORDS = ["bad", "sad", "angry", "hate", "problem", "terrible", "awful"]

TASK_VERBS = ["please", "call", "email", "schedule", "prepare", "create",
              "build", "setup", "do", "make"]
TASK_START = re.compile(r"^(?:%s)" % "|".join(TASK_VERBS), re.I)
TASK_MARKER = re.compile(r"todo|task|action item", re.I)

SUMMARY_SENTENCES = 3
FALLBACK_TASKS = 4
EMPTY_SUMMARY = "No text provided."

IDEA_TEMPLATES = [
    "Write a short newsletter about {topic} with 3 tips.",
    "Create a 60s video explaining {topic} key concepts.",
    'Draft a "beginner checklist" for {topic}.',
    "Design an infographic about {topic} trends.",
]


def split_sentences(text: str) -> List[str]:
    """Split on . ? ! followed by whitespace. Empty fragments are dropped."""
    text = (text or "").replace("\n", " ")
    return [s.strip() for s in SENTENCE_SPLIT.split(text) if s.strip()]


def summarize(text: str) -> List[str]:
    sentences = split_sentences(text)
    if not sentences:
        return [EMPTY_SUMMARY]
    return sentences[:SUMMARY_SENTENCES]


def analyze_sentiment(text: str) -> Dict[str, Any]:
    """
    Keyword sentiment. Substring match on the lower-cased text;
    a positive hit wins over a negative one.
    """
    lower = (text or "").lower()
    if any(w in lower for w in POSITIVE_WORDS):
        return {"score": 0.82, "label": "Positive"}
    if any(w in lower for w in NEGATIVE_WORDS):
        return {"score": 0.18, "label": "Negative"}
    return {"score": 0.5, "label": "Neutral"}


def is_task_sentence(sentence: str) -> bool:
    return bool(TASK_START.match(sentence) or TASK_MARKER.search(sentence))


def extract_tasks(text: str) -> List[str]:
    """
    Pick sentences that read like action items.

    If none qualify, the first four sentences are returned instead so the
    caller always has something to put on the list (empty for empty text).
    """
    sentences = split_sentences(text)
    tasks = [s for s in sentences if is_task_sentence(s)]
    return tasks or sentences[:FALLBACK_TASKS]


def generate_ideas(topic: str) -> List[str]:
    return [t.format(topic=topic) for t in IDEA_TEMPLATES]


def chat_reply(message: str) -> str:
    return (f'I received: "{message[:100]}" - '
            "I can help you convert this into tasks or summaries!")
