"""
Demo values for dashboard widgets that have no backing data yet.

Only used when ANALYTICS_DEMO_PLACEHOLDERS is enabled; the analytics routes
return these under a separate ``placeholders`` key so they are never
confused with measured metrics. Every builder takes a ``random.Random`` so
a fixed seed gives stable output.
"""

COMPREHENSION_PATTERNS = [
    {"concept": "Variables", "masteryRate": 89, "commonMistakes": ["Sign errors", "Order of operations"]},
    {"concept": "Linear Equations", "masteryRate": 76, "commonMistakes": ["Distribution errors", "Combining like terms"]},
    {"concept": "Quadratics", "masteryRate": 64, "commonMistakes": ["Factoring errors", "Quadratic formula"]},
    {"concept": "Systems", "masteryRate": 52, "commonMistakes": ["Substitution method", "Elimination errors"]},
]

PAGES = ["dashboard", "modules", "practice", "progress", "badges"]

SATISFACTION_ASPECTS = ["Content Quality", "Ease of Use", "Pace of Learning", "Practice Problems", "Feedback"]

ANNOUNCEMENTS = [
    {"title": "New practice sets available", "audience": "all", "status": "draft"},
    {"title": "Office hours moved to Thursday", "audience": "all", "status": "draft"},
]


def learning_placeholders(rng):
    return {
        "comprehensionPatterns": [
            {**pattern, "masteryRate": max(0, min(100, pattern["masteryRate"] + rng.randint(-5, 5)))}
            for pattern in COMPREHENSION_PATTERNS
        ],
    }


def hourly_distribution(rng, total_sessions):
    hours = []
    for hour in range(24):
        # Peak study hours are late afternoon and evening
        weight = 1.5 if 15 <= hour <= 21 else 0.5 if hour < 7 else 1.0
        hours.append({
            "hour": hour,
            "sessions": round(total_sessions / 24 * weight * rng.uniform(0.7, 1.3)),
            "avgEngagement": round(rng.uniform(50, 90), 1),
        })
    return hours


def session_length_distribution(rng, total_sessions):
    buckets = [("0-5 min", 0.15), ("5-15 min", 0.35), ("15-30 min", 0.3), ("30-60 min", 0.15), ("60+ min", 0.05)]
    return [
        {"range": label, "count": round(total_sessions * share * rng.uniform(0.8, 1.2))}
        for label, share in buckets
    ]


def click_heatmap(rng):
    return [
        {"page": page, "element": element, "clicks": rng.randint(20, 500)}
        for page in PAGES
        for element in ("primary-action", "navigation", "help")
    ]


def navigation_flow(rng):
    return [
        {"from": source, "to": target, "count": rng.randint(10, 200)}
        for source, target in zip(PAGES, PAGES[1:])
    ]


def help_seeking(rng, module_titles):
    return [
        {
            "module": title,
            "hintRequests": rng.randint(5, 120),
            "tutorQuestions": rng.randint(0, 60),
            "avgTimeBeforeHelp": rng.randint(30, 300),
        }
        for title in module_titles
    ]


def engagement_correlation(rng):
    return [
        {"metric": metric, "correlation": round(rng.uniform(0.2, 0.9), 2)}
        for metric in ("Time Spent", "Practice Problems", "Hints Used", "Session Frequency")
    ]


def satisfaction_scores(rng):
    return [
        {"aspect": aspect, "score": round(rng.uniform(3.5, 4.9), 1), "responses": rng.randint(10, 80)}
        for aspect in SATISFACTION_ASPECTS
    ]


def engagement_placeholders(rng, total_sessions, module_titles):
    return {
        "hourlyDistribution": hourly_distribution(rng, total_sessions),
        "sessionLengthDistribution": session_length_distribution(rng, total_sessions),
        "clickHeatmap": click_heatmap(rng),
        "navigationFlow": navigation_flow(rng),
        "helpSeeking": help_seeking(rng, module_titles),
        "engagementCorrelation": engagement_correlation(rng),
        "satisfactionScores": satisfaction_scores(rng),
    }


def predictive_placeholders(rng):
    models = [
        {"name": "Course Completion", "accuracy": round(rng.uniform(0.78, 0.92), 2), "type": "classification"},
        {"name": "Module Difficulty", "accuracy": round(rng.uniform(0.7, 0.88), 2), "type": "regression"},
        {"name": "Dropout Risk", "accuracy": round(rng.uniform(0.75, 0.9), 2), "type": "classification"},
    ]
    trends = [
        {"week": f"Week {week}", "predictedRisk": round(rng.uniform(0.1, 0.5), 2)}
        for week in range(1, 7)
    ]
    return {"models": models, "trends": trends}


def instructor_placeholders(rng):
    return {
        "announcements": [
            {**announcement, "id": index, "views": rng.randint(0, 50)}
            for index, announcement in enumerate(ANNOUNCEMENTS, start=1)
        ],
    }
