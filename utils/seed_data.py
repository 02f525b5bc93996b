"""Course catalog and badge set loaded by ``flask seed``."""
import json

MODULES = [
    {
        "slug": "linear-equations",
        "title": "Linear Equations and Inequalities",
        "description": "Master the fundamentals of linear relationships, solving equations, and business "
                       "applications like break-even analysis.",
        "order": 1,
        "content": {
            "overview": "Interactive module focused on linear equations and their business applications",
            "businessApplications": ["Break-even Analysis", "Cost Functions", "Supply & Demand", "Market Equilibrium"],
            "estimatedHours": 15,
            "difficulty": "Beginner",
        },
        "objectives": [
            "Solve linear equations and inequalities in one variable",
            "Understand the concept of break-even analysis in business",
            "Apply linear functions to model cost, revenue, and profit",
            "Graph linear equations and interpret their business meanings",
            "Use linear models to make business decisions",
        ],
        "topics": ["Linear Functions", "Break-even Analysis", "Cost Functions", "Supply & Demand", "Market Equilibrium"],
    },
    {
        "slug": "functions-graphs",
        "title": "Functions and Graphs",
        "description": "Explore function behavior, graphing techniques, and piecewise functions used in tiered "
                       "pricing models.",
        "order": 2,
        "content": {
            "overview": "Comprehensive study of functions and their graphical representations",
            "businessApplications": ["Tiered Pricing", "Function Modeling", "Domain Analysis", "Transformations"],
            "estimatedHours": 18,
            "difficulty": "Beginner",
        },
        "objectives": [
            "Understand function notation and terminology",
            "Graph various types of functions accurately",
            "Analyze domain and range of business functions",
            "Model tiered pricing with piecewise functions",
            "Interpret function transformations in business contexts",
        ],
        "topics": ["Function Notation", "Graphing Techniques", "Piecewise Functions", "Domain & Range", "Transformations"],
    },
    {
        "slug": "polynomial-rational",
        "title": "Polynomial and Rational Functions",
        "description": "Analyze complex relationships in revenue optimization and efficiency modeling through "
                       "advanced functions.",
        "order": 3,
        "content": {
            "overview": "Advanced function analysis for complex business modeling",
            "businessApplications": ["Revenue Optimization", "Efficiency Analysis", "Cost Modeling", "Asymptotic Behavior"],
            "estimatedHours": 24,
            "difficulty": "Intermediate",
        },
        "objectives": [
            "Analyze polynomial functions and their business applications",
            "Understand rational functions in efficiency modeling",
            "Apply functions to revenue optimization problems",
            "Interpret asymptotic behavior in business contexts",
            "Model complex relationships using advanced functions",
        ],
        "topics": ["Polynomial Models", "Revenue Optimization", "Efficiency Analysis", "Asymptotes", "End Behavior"],
    },
    {
        "slug": "exponential-logarithmic",
        "title": "Exponential and Logarithmic Functions",
        "description": "Study growth models, compound interest, and logarithmic scales essential for business finance.",
        "order": 4,
        "content": {
            "overview": "Financial mathematics using exponential and logarithmic functions",
            "businessApplications": ["Compound Interest", "Growth Models", "Investment Analysis", "Scaling"],
            "estimatedHours": 26,
            "difficulty": "Intermediate",
        },
        "objectives": [
            "Model exponential growth in business scenarios",
            "Calculate compound interest and investment returns",
            "Apply logarithmic functions to solve business problems",
            "Analyze scaling patterns in business growth",
            "Make informed financial decisions using mathematical models",
        ],
        "topics": ["Exponential Growth", "Compound Interest", "Business Scaling", "Logarithmic Models", "Investment Analysis"],
    },
    {
        "slug": "systems-matrices",
        "title": "Systems of Equations and Matrices",
        "description": "Learn resource allocation, optimization problems, and matrix operations for business "
                       "decision making.",
        "order": 5,
        "content": {
            "overview": "Advanced problem solving with systems and matrices",
            "businessApplications": ["Resource Allocation", "Linear Programming", "Decision Making", "Optimization"],
            "estimatedHours": 28,
            "difficulty": "Advanced",
        },
        "objectives": [
            "Solve systems of linear equations efficiently",
            "Apply matrix operations to business problems",
            "Optimize resource allocation using linear programming",
            "Make data-driven business decisions",
            "Model complex business scenarios with multiple variables",
        ],
        "topics": ["Resource Allocation", "Matrix Operations", "Optimization", "Linear Programming", "Decision Making"],
    },
    {
        "slug": "sequences-probability",
        "title": "Sequences, Series, and Probability",
        "description": "Apply sequences and probability concepts to financial planning, risk assessment, and forecasting.",
        "order": 6,
        "content": {
            "overview": "Financial planning and risk analysis using mathematical sequences and probability",
            "businessApplications": ["Financial Planning", "Risk Assessment", "Forecasting", "Annuities"],
            "estimatedHours": 22,
            "difficulty": "Advanced",
        },
        "objectives": [
            "Apply sequences to financial planning problems",
            "Use probability for risk assessment",
            "Create business forecasts using mathematical models",
            "Calculate annuity and investment sequences",
            "Make informed decisions under uncertainty",
        ],
        "topics": ["Financial Planning", "Risk Assessment", "Forecasting", "Annuities", "Monte Carlo Methods"],
    },
]

IMAGE_BASE = "https://cdn.abacus.ai/images/"

BADGES = [
    {
        "title": "Linear Equations Master",
        "description": "Complete the Linear Equations and Inequalities module with 80% or higher score",
        "image_url": IMAGE_BASE + "c73d1454-07ea-49e5-b42c-585b1fff268a.png",
        "badge_type": "MODULE_COMPLETION",
        "requirements": {"minScore": 80, "moduleSlug": "linear-equations"},
        "points": 100,
    },
    {
        "title": "Functions Expert",
        "description": "Master functions and graphs with excellent performance",
        "image_url": IMAGE_BASE + "51024b94-7fbb-4036-987b-b3fe393f6bf8.png",
        "badge_type": "MODULE_COMPLETION",
        "requirements": {"minScore": 80, "moduleSlug": "functions-graphs"},
        "points": 100,
    },
    {
        "title": "Advanced Functions Specialist",
        "description": "Excel in polynomial and rational functions applications",
        "image_url": IMAGE_BASE + "66b5d1c0-2932-4b89-8b7a-bf1602072d0a.png",
        "badge_type": "MODULE_COMPLETION",
        "requirements": {"minScore": 80, "moduleSlug": "polynomial-rational"},
        "points": 120,
    },
    {
        "title": "Exponential Growth Guru",
        "description": "Master exponential and logarithmic functions for financial analysis",
        "image_url": IMAGE_BASE + "34b6cfe8-5c21-4134-ac87-d925614c655e.png",
        "badge_type": "MODULE_COMPLETION",
        "requirements": {"minScore": 80, "moduleSlug": "exponential-logarithmic"},
        "points": 120,
    },
    {
        "title": "Systems & Matrices Pro",
        "description": "Advanced problem solving with systems and linear programming",
        "image_url": IMAGE_BASE + "ee07f028-b7bf-48ed-b7c3-fa607383db57.png",
        "badge_type": "MODULE_COMPLETION",
        "requirements": {"minScore": 80, "moduleSlug": "systems-matrices"},
        "points": 150,
    },
    {
        "title": "Probability & Planning Expert",
        "description": "Master financial planning and risk assessment techniques",
        "image_url": IMAGE_BASE + "932a5a8a-52f3-48ec-928d-7d55a4d52b9b.png",
        "badge_type": "MODULE_COMPLETION",
        "requirements": {"minScore": 80, "moduleSlug": "sequences-probability"},
        "points": 130,
    },
    {
        "title": "First Steps",
        "description": "Completed your first module",
        "image_url": IMAGE_BASE + "32c88839-176e-4f10-b666-42a6ca0057d8.png",
        "badge_type": "QUIZ_PASS",
        "requirements": {"minScore": 0, "problemsCompleted": 1},
        "points": 5,
    },
    {
        "title": "Quiz Master",
        "description": "Scored 90% or higher on 5 modules",
        "image_url": IMAGE_BASE + "8195ff2a-dfeb-4615-8511-56b1766ba0e8.png",
        "badge_type": "QUIZ_PASS",
        "requirements": {"minScore": 90, "problemsCompleted": 5},
        "points": 15,
    },
    {
        "title": "Week Warrior",
        "description": "Studied seven days in a row",
        "image_url": None,
        "badge_type": "STREAK",
        "requirements": {"streakDays": 7},
        "points": 25,
    },
    {
        "title": "Course Completion",
        "description": "Complete all 6 learning modules",
        "image_url": IMAGE_BASE + "a9502816-14fb-4bbf-9fd2-29dbbede7841.png",
        "badge_type": "COURSE_COMPLETION",
        "requirements": {},
        "points": 100,
    },
]


def module_rows():
    return [{**module, "content": json.dumps(module["content"])} for module in MODULES]


def badge_rows():
    return [{**badge, "requirements": json.dumps(badge["requirements"])} for badge in BADGES]
