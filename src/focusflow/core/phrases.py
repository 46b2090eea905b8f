"""Fixed text pools for greetings, quotes, and tips.

Selection is randomized, so callers pass an explicit `random.Random`
(seed it in tests, or assert membership in the pool).
"""

import random
from enum import Enum


class Pool(Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    LATE_NIGHT = "late_night"
    QUOTE = "quote"
    TIP = "tip"
    FOCUS_TIP = "focus_tip"


PHRASES: dict[Pool, tuple[str, ...]] = {
    Pool.MORNING: (
        "Good morning! Ready to be productive? ☀️",
        "Good morning! Let's make today count. 🌤️",
        "Morning! A fresh start for your top priorities. ☕",
    ),
    Pool.AFTERNOON: (
        "Good afternoon! Keep up the great work! 💪",
        "Good afternoon! Time to push through the afternoon dip. ⚡",
        "Afternoon check-in: you're doing great! 🚀",
    ),
    Pool.EVENING: (
        "Good evening! Time to wrap up strong! 🌅",
        "Good evening! Finish one more thing and call it a day. 🌇",
        "Evening! Review what you got done today. 📝",
    ),
    Pool.LATE_NIGHT: (
        "Working late? Remember to rest well! 🌙",
        "Burning the midnight oil? Don't forget to sleep. 😴",
        "Late night session - keep it short and get some rest. 🌌",
    ),
    Pool.QUOTE: (
        "The secret of getting ahead is getting started. - Mark Twain",
        "Focus on being productive instead of busy. - Tim Ferriss",
        "The way to get started is to quit talking and begin doing. - Walt Disney",
        "Your time is limited, don't waste it living someone else's life. - Steve Jobs",
        "The only way to do great work is to love what you do. - Steve Jobs",
        "Success is not final, failure is not fatal: it is the courage to continue. - Winston Churchill",
        "Believe you can and you're halfway there. - Theodore Roosevelt",
        "It does not matter how slowly you go as long as you do not stop. - Confucius",
    ),
    Pool.TIP: (
        "Try the 2-minute rule: If a task takes less than 2 minutes, do it now!",
        "Break large tasks into smaller, manageable chunks",
        "Use time-blocking to dedicate specific hours to deep work",
        "Take regular breaks - your brain needs rest to stay productive",
        "Start with your most challenging task when your energy is highest",
        "Minimize distractions by turning off notifications during focus time",
        "Review your goals at the start of each day",
        "Celebrate small wins to maintain motivation",
        "Use the Pomodoro Technique: 25 minutes focus, 5 minutes break",
        "Keep your workspace clean and organized",
    ),
    Pool.FOCUS_TIP: (
        "Put your phone on silent or in another room",
        "Close unnecessary browser tabs and apps",
        "Have water nearby to stay hydrated",
        "Set a clear intention for what you'll accomplish",
    ),
}


def greeting_pool(hour: int) -> Pool:
    """Morning before noon, afternoon until 17, evening until 21, then late night."""
    if hour < 12:
        return Pool.MORNING
    if hour < 17:
        return Pool.AFTERNOON
    if hour < 21:
        return Pool.EVENING
    return Pool.LATE_NIGHT


def pick(pool: Pool, rng: random.Random) -> str:
    return rng.choice(PHRASES[pool])


def pick_unique(pool: Pool, rng: random.Random, count: int) -> list[str]:
    """Draw `count` times and drop repeats, keeping first-drawn order."""
    drawn = [pick(pool, rng) for _ in range(count)]
    return list(dict.fromkeys(drawn))
