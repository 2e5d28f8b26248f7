"""Lexicon-based sentiment scoring for habit notes.

Each word carries an integer polarity weight from -5 to +5 (AFINN-style).
A note's score is the sum of its word weights; a word immediately preceded
by a negator ("not", "never", "don't", ...) has its weight flipped.
"""

import re

_LEXICON: dict[str, int] = {
    # strongly positive
    "amazing": 4, "awesome": 4, "brilliant": 4, "fantastic": 4, "outstanding": 5,
    "superb": 5, "wonderful": 4, "thrilled": 5, "ecstatic": 4, "incredible": 4,
    "excellent": 3, "love": 3, "loved": 3, "loving": 2, "perfect": 3,
    # positive
    "great": 3, "happy": 3, "joy": 3, "joyful": 3, "glad": 3, "proud": 2,
    "excited": 3, "exciting": 3, "fun": 4, "enjoy": 2, "enjoyed": 2,
    "enjoying": 2, "good": 3, "nice": 3, "calm": 2, "peaceful": 2,
    "relaxed": 2, "relaxing": 2, "refreshed": 2, "energized": 2,
    "energetic": 2, "motivated": 2, "inspired": 2, "confident": 2,
    "grateful": 3, "thankful": 2, "accomplished": 2, "productive": 2,
    "focused": 2, "strong": 2, "better": 2, "best": 3, "easy": 1,
    "easier": 1, "success": 2, "successful": 3, "win": 4, "won": 3,
    "progress": 2, "improved": 2, "improving": 2, "satisfied": 2,
    "satisfying": 2, "rewarding": 2, "clear": 1, "fresh": 1, "healthy": 2,
    "alive": 1, "optimistic": 2, "hopeful": 2, "pleased": 3, "content": 2,
    "like": 2, "liked": 2, "smile": 2, "smiling": 2, "laugh": 1,
    "rested": 2, "cheerful": 2, "delighted": 3, "keen": 1, "well": 1,
    # negative
    "bad": -3, "sad": -2, "tired": -2, "exhausted": -2, "stressed": -2,
    "stress": -1, "anxious": -2, "anxiety": -2, "worried": -3, "worry": -3,
    "angry": -3, "annoyed": -2, "annoying": -2, "frustrated": -2,
    "frustrating": -2, "frustration": -2, "upset": -2, "lazy": -1,
    "bored": -2, "boring": -3, "difficult": -1, "hard": -1, "struggle": -2,
    "struggled": -2, "struggling": -2, "sick": -2, "ill": -2, "pain": -2,
    "painful": -2, "sore": -1, "hurt": -2, "weak": -2, "overwhelmed": -2,
    "unmotivated": -2, "drained": -2, "sleepy": -1, "lonely": -2,
    "fail": -2, "failed": -2, "failure": -2, "missed": -2, "miss": -2,
    "skipped": -1, "worse": -3, "worst": -3, "hate": -3, "hated": -3,
    "guilty": -3, "disappointed": -2, "disappointing": -2, "stuck": -2,
    "lost": -3, "confused": -2, "nervous": -2, "grumpy": -2, "moody": -1,
    "irritated": -3, "distracted": -2, "busy": -1, "rushed": -1,
    "problem": -2, "problems": -2, "sluggish": -2, "meh": -1,
    # strongly negative
    "awful": -3, "terrible": -3, "horrible": -3, "miserable": -3,
    "depressed": -2, "hopeless": -2, "furious": -3, "disaster": -2,
    "dreadful": -3, "worthless": -2,
}

_NEGATORS = {
    "not", "no", "never", "none", "nobody", "nothing", "neither", "nor",
    "don't", "dont", "doesn't", "doesnt", "didn't", "didnt", "isn't", "isnt",
    "wasn't", "wasnt", "aren't", "arent", "weren't", "werent", "can't",
    "cant", "cannot", "couldn't", "couldnt", "won't", "wouldn't", "wouldnt",
    "shouldn't", "shouldnt", "hardly",
}

_TOKEN_RE = re.compile(r"[a-z']+")


def tokenize(text: str) -> list[str]:
    return [t.strip("'") for t in _TOKEN_RE.findall(text.lower()) if t.strip("'")]


def score_text(text: str) -> int:
    """Signed polarity of a piece of text (0 when no lexicon words match)."""
    score = 0
    previous = ""
    for token in tokenize(text):
        weight = _LEXICON.get(token, 0)
        if weight and previous in _NEGATORS:
            weight = -weight
        score += weight
        previous = token
    return score


def classify(score: float) -> str:
    if score > 0:
        return "positive"
    if score < 0:
        return "negative"
    return "neutral"
