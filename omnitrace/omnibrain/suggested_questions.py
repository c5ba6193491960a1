"""Questions OMNIBRAIN can always answer, offered as follow-ups."""

SUGGESTED_QUESTIONS: list[str] = [
    "Why was I distracted today?",
    "When do I focus best?",
    "Am I improving this week?",
    "What happened today?",
    "Why did my focus drop after 2pm?",
    "How long was my longest focus session?",
    "What were my main distractions?",
    "When was I most productive?",
    "How do I export my data?",
    "What is Private Mode?",
    "How does Smart Merging work?",
]

__all__ = ["SUGGESTED_QUESTIONS"]
