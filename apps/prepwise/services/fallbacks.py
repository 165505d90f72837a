"""Deterministic substitute content used when generation or validation fails.

Every builder here is a pure function of its arguments, and its output passes the
matching check in `prepwise.services.problem_validation`. The same payloads double
as offline samples when no Gemini key is configured.
"""

from __future__ import annotations

import copy
from typing import Any

from prepwise.schemas.problems import (
    ENVELOPE_KEYS,
    Difficulty,
    MockInterviewEvaluation,
    MockInterviewProblem,
    MockInterviewSubmission,
    ProblemKind,
    ProblemPayload,
    RoundType,
)
from prepwise.services.problem_validation import decode_problem

_ESTIMATED_TIME: dict[ProblemKind, dict[Difficulty, str]] = {
    ProblemKind.dsa: {
        Difficulty.easy: "20-30 minutes",
        Difficulty.medium: "30-45 minutes",
        Difficulty.hard: "45-60 minutes",
    },
    ProblemKind.machine_coding: {
        Difficulty.easy: "30-45 minutes",
        Difficulty.medium: "45-60 minutes",
        Difficulty.hard: "60-90 minutes",
    },
    ProblemKind.system_design: {
        Difficulty.easy: "45-60 minutes",
        Difficulty.medium: "60-90 minutes",
        Difficulty.hard: "75-90 minutes",
    },
    ProblemKind.theory: {
        Difficulty.easy: "10-15 minutes",
        Difficulty.medium: "15-30 minutes",
        Difficulty.hard: "30-45 minutes",
    },
}

_PROBLEMS: dict[ProblemKind, dict[str, Any]] = {
    ProblemKind.dsa: {
        "title": "Two Sum with Sorted Array",
        "description": (
            "Given a sorted array of integers and a target sum, find two numbers that add up "
            "to the target."
        ),
        "problemStatement": (
            "You are given a sorted array of integers nums and an integer target. Return the "
            "indices of two numbers such that they add up to target. You may assume that each "
            "input would have exactly one solution, and you may not use the same element twice."
        ),
        "inputFormat": "nums: sorted array of integers, target: integer",
        "outputFormat": "Array of two integers representing the indices",
        "constraints": [
            "2 <= nums.length <= 10^4",
            "-10^9 <= nums[i] <= 10^9",
            "-10^9 <= target <= 10^9",
            "Only one valid answer exists",
        ],
        "examples": [
            {
                "input": "nums = [2, 7, 11, 15], target = 9",
                "output": "[0, 1]",
                "explanation": "Because nums[0] + nums[1] == 9, we return [0, 1].",
            },
            {
                "input": "nums = [3, 2, 4], target = 6",
                "output": "[1, 2]",
                "explanation": "Because nums[1] + nums[2] == 6, we return [1, 2].",
            },
        ],
        "category": "Arrays",
        "tags": ["arrays", "two-pointers", "sorting"],
        "hints": [
            "Since the array is sorted, you can use two pointers",
            "Start with one pointer at the beginning and one at the end",
        ],
        "followUpQuestions": [
            "How would you solve this if the array wasn't sorted?",
            "What if you needed to find all pairs that sum to the target?",
        ],
    },
    ProblemKind.machine_coding: {
        "title": "Responsive Grid Layout Builder",
        "description": (
            "Build a dynamic grid layout system using CSS Grid and React that allows users to "
            "create, resize, and reorder grid items in real-time."
        ),
        "requirements": [
            "Implement a drag-and-drop interface for grid items",
            "Support dynamic resizing of grid items",
            "Allow reordering of items within the grid",
            "Make the layout responsive across different screen sizes",
            "Implement undo/redo functionality",
        ],
        "constraints": [
            "Must use CSS Grid for layout",
            "No external drag-and-drop libraries",
            "Must be fully responsive",
            "Support minimum 2x2 grid, maximum 6x6 grid",
        ],
        "acceptanceCriteria": [
            "Grid items can be dragged and dropped to new positions",
            "Items can be resized by dragging corners",
            "Layout adapts to different screen sizes",
            "Undo/redo works correctly",
            "Performance remains smooth with 20+ items",
        ],
        "technologies": ["React", "TypeScript", "CSS Grid", "HTML5 Drag API"],
        "hints": [
            "Consider using CSS Grid's grid-template-areas for dynamic layouts",
            "Use ResizeObserver API for detecting size changes",
        ],
    },
    ProblemKind.system_design: {
        "title": "Real-time Chat Application Architecture",
        "description": (
            "Design a scalable, real-time chat application that supports multiple channels, "
            "typing indicators, message read receipts, and file sharing."
        ),
        "functionalRequirements": [
            "Real-time messaging between users",
            "Multiple chat channels/rooms",
            "Typing indicators",
            "Message read receipts",
            "File sharing (images, documents)",
            "User presence indicators",
            "Message search functionality",
        ],
        "nonFunctionalRequirements": [
            "Support 1M concurrent users",
            "Message delivery latency < 100ms",
            "99.9% uptime",
            "Handle 10,000 messages per second",
            "Support file uploads up to 50MB",
        ],
        "constraints": [
            "Must be globally distributed",
            "Messages must be delivered in order",
            "Support message history for 1 year",
            "Comply with GDPR requirements",
        ],
        "scale": {
            "users": "1M daily active users",
            "requestsPerSecond": "10,000 RPS",
            "dataSize": "100TB of message data",
        },
        "expectedDeliverables": [
            "High-level system architecture diagram",
            "Database schema design",
            "API specifications",
            "Scalability strategy",
            "Data consistency approach",
        ],
        "technologies": ["WebSockets", "Redis", "PostgreSQL", "CDN", "Load Balancers"],
        "followUpQuestions": [
            "How would you handle message ordering across multiple servers?",
            "What's your strategy for handling offline users?",
            "How would you implement message encryption?",
        ],
    },
    ProblemKind.theory: {
        "title": "JavaScript Closures and Scope",
        "description": "Explain closures in JavaScript and their practical applications.",
        "question": (
            "What are closures in JavaScript? Provide examples and explain their practical use "
            "cases in frontend development."
        ),
        "expectedAnswer": (
            "A closure is a function that has access to variables in its outer scope even after "
            "the outer function has returned. They are useful for data privacy, partial "
            "application, and maintaining state."
        ),
        "keyPoints": [
            "Closures capture variables from outer scope",
            "They maintain access to variables after outer function returns",
            "Useful for data privacy and encapsulation",
            "Common in event handlers and callbacks",
            "Can lead to memory leaks if not handled properly",
        ],
        "category": "JavaScript",
        "tags": ["javascript", "closures", "scope"],
        "hints": [
            "Think about how closures maintain access to variables",
            "Consider practical applications like event handlers",
        ],
        "followUpQuestions": [
            "How do closures interact with garbage collection?",
            "How would you implement a private counter with closures?",
        ],
    },
}

_MOCK_PROBLEMS: dict[RoundType, dict[str, Any]] = {
    RoundType.dsa: {
        "title": "Array Rotation Problem",
        "description": (
            "Given an array of integers and a number k, rotate the array by k positions to the "
            "right."
        ),
        "estimatedTime": "15-20 minutes",
        "problemStatement": "Implement a function that rotates an array by k positions to the right.",
        "inputFormat": "Array of integers and integer k",
        "outputFormat": "Rotated array",
        "constraints": ["1 <= array.length <= 10^5", "0 <= k <= 10^5"],
        "examples": [
            {
                "input": "[1, 2, 3, 4, 5], k = 2",
                "output": "[4, 5, 1, 2, 3]",
                "explanation": "Rotate right by 2 positions",
            }
        ],
    },
    RoundType.machine_coding: {
        "title": "Todo List Component",
        "description": (
            "Build a React todo list component with add, complete, and delete functionality."
        ),
        "estimatedTime": "45-60 minutes",
        "requirements": ["Add new todos", "Mark todos as complete", "Delete todos", "Persist todos"],
        "acceptanceCriteria": [
            "Component renders correctly",
            "All CRUD operations work",
            "State management is clean",
        ],
        "technologies": ["React", "TypeScript"],
        "hints": [
            "Use useState for state management",
            "Consider using useCallback for performance",
        ],
    },
    RoundType.system_design: {
        "title": "Component Library Design",
        "description": (
            "Design a reusable component library for a large-scale frontend application."
        ),
        "estimatedTime": "45-60 minutes",
        "functionalRequirements": [
            "Theme support",
            "Accessibility compliance",
            "Responsive design",
            "TypeScript support",
        ],
        "nonFunctionalRequirements": [
            "Performance",
            "Maintainability",
            "Documentation",
            "Bundle size optimization",
        ],
        "scale": {
            "users": "100K+ developers",
            "requestsPerSecond": "100+ RPS",
            "dataSize": "100MB+ bundle",
        },
        "expectedDeliverables": [
            "Component architecture",
            "API design",
            "Documentation strategy",
            "Versioning strategy",
        ],
        "followUpQuestions": [
            "How would you handle versioning?",
            "What about bundle size optimization?",
            "How would you ensure accessibility?",
        ],
    },
    RoundType.theory_and_debugging: {
        "title": "JavaScript Closures and Scope",
        "description": "Explain closures in JavaScript and provide practical examples.",
        "estimatedTime": "15-20 minutes",
        "question": (
            "What are closures in JavaScript? Explain with examples and discuss their practical "
            "use cases in modern web development."
        ),
        "expectedAnswer": (
            "A closure is a function that has access to variables in its outer scope even after "
            "the outer function has returned. It maintains access to the variables from its "
            "outer scope."
        ),
        "keyPoints": [
            "Lexical scoping",
            "Memory management",
            "Practical applications",
            "Common pitfalls",
        ],
    },
}

_EVALUATION_FEEDBACK: dict[RoundType, dict[str, Any]] = {
    RoundType.dsa: {
        "feedback": (
            "Automated review is unavailable right now. Your solution was recorded; revisit "
            "correctness on edge cases and state the time and space complexity."
        ),
        "strengths": ["Submitted a working attempt within the time limit"],
        "areasForImprovement": ["Edge case handling", "Complexity analysis"],
        "suggestions": ["Try to improve time complexity", "Add edge case handling"],
    },
    RoundType.machine_coding: {
        "feedback": (
            "Automated review is unavailable right now. Your implementation was recorded; check "
            "that every requirement is covered and components stay small and reusable."
        ),
        "strengths": ["Delivered a runnable implementation"],
        "areasForImprovement": ["Component structure", "State management"],
        "suggestions": [
            "Split large components into smaller ones",
            "Keep state close to where it is used",
        ],
    },
    RoundType.system_design: {
        "feedback": (
            "Automated review is unavailable right now. Your design was recorded; consider load "
            "balancing, caching and how the system behaves at the stated scale."
        ),
        "strengths": ["Produced an end-to-end design"],
        "areasForImprovement": ["Scalability reasoning", "Trade-off discussion"],
        "suggestions": [
            "Add load balancers and caching layers",
            "Call out data consistency trade-offs",
        ],
    },
    RoundType.theory_and_debugging: {
        "feedback": (
            "Automated review is unavailable right now. Your answer was recorded; compare it "
            "against the key points and add concrete examples."
        ),
        "strengths": ["Answered the question directly"],
        "areasForImprovement": ["Depth of explanation", "Coverage of key points"],
        "suggestions": ["Back each concept with a short example", "Mention common pitfalls"],
    },
}

_EMPTY_SUBMISSION_FEEDBACK = "No submission content was provided, so there is nothing to evaluate."

OFFLINE_FEEDBACK = (
    "Your code works correctly but could be more modular. Consider separating concerns into "
    "smaller components. For the design, adding load balancers and caching would improve "
    "scalability."
)


def fallback_problem_data(kind: ProblemKind | str, difficulty: Difficulty | str) -> dict[str, Any]:
    """Wire-form (camelCase) fallback payload for one variant."""
    kind = ProblemKind(kind)
    difficulty = Difficulty(difficulty)
    data = copy.deepcopy(_PROBLEMS[kind])
    data["difficulty"] = difficulty.value
    data["estimatedTime"] = _ESTIMATED_TIME[kind][difficulty]
    return data


def fallback_problem(kind: ProblemKind | str, difficulty: Difficulty | str) -> ProblemPayload:
    return decode_problem(kind, fallback_problem_data(kind, difficulty))


def fallback_envelope(
    kinds: list[ProblemKind] | ProblemKind | str, difficulty: Difficulty | str = Difficulty.medium
) -> dict[str, Any]:
    """Response envelope holding the fallback payload for each requested variant."""
    if isinstance(kinds, (ProblemKind, str)):
        kinds = [ProblemKind(kinds)]
    return {ENVELOPE_KEYS[k]: fallback_problem_data(k, difficulty) for k in kinds}


def fallback_mock_problem(
    round_type: RoundType | str,
    difficulty: Difficulty | str = Difficulty.medium,
    *,
    company_name: str | None = None,
    role_level: str | None = None,
) -> MockInterviewProblem:
    round_type = RoundType(round_type)
    difficulty = Difficulty(difficulty)
    data = copy.deepcopy(_MOCK_PROBLEMS[round_type])
    data.update(
        {
            "id": f"fallback_{round_type.value}_{difficulty.value}",
            "type": round_type.value,
            "difficulty": difficulty.value,
            "companyName": company_name,
            "roleLevel": role_level,
        }
    )
    return MockInterviewProblem.model_validate(data)


def fallback_evaluation(
    problem: MockInterviewProblem, submission: MockInterviewSubmission
) -> MockInterviewEvaluation:
    """Canned evaluation: 75 when anything was submitted, otherwise 0."""
    canned = _EVALUATION_FEEDBACK[problem.type]
    if not submission.has_content:
        return MockInterviewEvaluation(
            problem_id=problem.id,
            score=0,
            feedback=_EMPTY_SUBMISSION_FEEDBACK,
            strengths=[],
            areas_for_improvement=list(canned["areasForImprovement"]),
            suggestions=list(canned["suggestions"]),
        )
    return MockInterviewEvaluation(
        problem_id=problem.id,
        score=75,
        feedback=canned["feedback"],
        strengths=list(canned["strengths"]),
        areas_for_improvement=list(canned["areasForImprovement"]),
        suggestions=list(canned["suggestions"]),
    )


def fallback_feedback(*, has_code: bool, has_image: bool) -> str:
    """Feedback text for a free-form submission when the AI service is not configured."""
    if has_code or has_image:
        return OFFLINE_FEEDBACK
    return _EMPTY_SUBMISSION_FEEDBACK


def _insights_rounds() -> list[dict[str, Any]]:
    return [
        {
            "name": "DSA Round",
            "description": (
                "Focus on array, hashmap, recursion problems implemented in "
                "JavaScript/TypeScript. Tests algorithmic thinking and data structure knowledge."
            ),
            "sampleProblems": [
                "Two Sum",
                "Valid Parentheses",
                "LRU Cache",
                "Binary Tree Traversal",
            ],
            "duration": "45-60 minutes",
            "focusAreas": ["JavaScript", "TypeScript", "Algorithms", "Data Structures"],
            "evaluationCriteria": [
                "Problem solving approach",
                "Code efficiency",
                "Edge case handling",
                "Time complexity",
            ],
            "difficulty": "medium",
            "tips": [
                "Practice common patterns",
                "Know time/space complexity",
                "Think out loud",
                "Consider edge cases",
            ],
        },
        {
            "name": "Machine Coding",
            "description": (
                "Build functional UI components using React/TypeScript. Tests component "
                "architecture, state management, and coding practices."
            ),
            "sampleProblems": [
                "Implement a dropdown component",
                "Create a modal with backdrop",
                "Build a todo list",
                "Design a pagination component",
            ],
            "duration": "60-90 minutes",
            "focusAreas": ["React", "TypeScript", "State Management", "Component Design"],
            "evaluationCriteria": [
                "Code organization",
                "Component reusability",
                "State management",
                "User experience",
            ],
            "difficulty": "medium",
            "tips": [
                "Plan component structure",
                "Use TypeScript properly",
                "Consider accessibility",
                "Test your components",
            ],
        },
        {
            "name": "Frontend System Design",
            "description": (
                "Design scalable frontend architectures and component systems. Tests system "
                "thinking and frontend architecture knowledge."
            ),
            "sampleProblems": [
                "Design a scalable news feed",
                "Design a component library",
                "Design a real-time chat interface",
                "Design a dashboard system",
            ],
            "duration": "45-60 minutes",
            "focusAreas": ["Architecture", "Scalability", "Performance", "Design Systems"],
            "evaluationCriteria": [
                "System thinking",
                "Scalability considerations",
                "Performance optimization",
                "Technical communication",
            ],
            "difficulty": "hard",
            "tips": [
                "Start with requirements",
                "Consider scale",
                "Discuss trade-offs",
                "Draw diagrams",
            ],
        },
        {
            "name": "JavaScript/TypeScript Theory",
            "description": (
                "Deep dive into JavaScript concepts, closures, promises, async/await, and "
                "TypeScript features."
            ),
            "sampleProblems": [
                "Explain event loop and callbacks",
                "Implement debounce function",
                "Explain prototypal inheritance",
                "TypeScript generics and interfaces",
            ],
            "duration": "30-45 minutes",
            "focusAreas": ["JavaScript", "TypeScript", "Async Programming", "Language Features"],
            "evaluationCriteria": [
                "Language knowledge",
                "Concept understanding",
                "Practical application",
                "Communication",
            ],
            "difficulty": "medium",
            "tips": [
                "Know fundamentals well",
                "Practice explaining concepts",
                "Understand async patterns",
                "Stay updated with ES6+",
            ],
        },
        {
            "name": "Behavioral/Cultural Fit",
            "description": (
                "Assess cultural fit, communication skills, and past experiences. Tests soft "
                "skills and alignment with company values."
            ),
            "sampleProblems": [
                "Tell me about a challenging project",
                "How do you handle conflicts?",
                "Why do you want to join us?",
                "Describe a time you failed",
            ],
            "duration": "30-45 minutes",
            "focusAreas": ["Communication", "Leadership", "Problem Solving", "Cultural Fit"],
            "evaluationCriteria": [
                "Communication clarity",
                "Leadership potential",
                "Problem-solving approach",
                "Cultural alignment",
            ],
            "difficulty": "easy",
            "tips": [
                "Use STAR method",
                "Be authentic",
                "Research the company",
                "Prepare specific examples",
            ],
        },
    ]


def fallback_insights(company_name: str, role_level: str) -> dict[str, Any]:
    """Static interview-loop insights for a company and role."""
    rounds = _insights_rounds()
    return {
        "totalRounds": len(rounds),
        "estimatedDuration": "4-5 hours",
        "rounds": rounds,
        "overallTips": [
            "Research the company's tech stack and culture thoroughly",
            "Practice coding problems in JavaScript/TypeScript",
            "Prepare system design questions with frontend focus",
            "Have specific examples ready for behavioral questions",
            "Understand the company's products and challenges",
        ],
        "companySpecificNotes": (
            f"{company_name} typically conducts {role_level} interviews with a strong focus on "
            "practical coding skills and system design. They value clean code, scalability "
            "thinking, and cultural fit."
        ),
    }
